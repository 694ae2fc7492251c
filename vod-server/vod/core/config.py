"""Application configuration using pydantic settings with structured sections."""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False


class DatabaseSettings(BaseModel):
    url: str = Field(default="sqlite+aiosqlite:///./vod.db", alias="url")
    echo: bool = False
    pool_size: Optional[int] = None
    max_overflow: Optional[int] = None


class SecuritySettings(BaseModel):
    secret_key: str = Field(default="change-me", min_length=8)
    refresh_secret_key: str = Field(default="change-me-refresh", min_length=8)
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7
    refresh_token_expire_minutes: int = 60 * 24 * 30


class OtpSettings(BaseModel):
    expiry_minutes: int = 5
    max_attempts: int = 5
    code_length: int = Field(default=6, ge=4, le=10)
    # None: return the code in responses everywhere except production.
    expose_code: Optional[bool] = None


class StorageSettings(BaseModel):
    blob_dir: Path = Field(default=Path("storage/blobs"))
    chunk_size: int = Field(default=256 * 1024, gt=0)
    read_timeout: float = Field(default=30.0, gt=0)


class StreamingSettings(BaseModel):
    # "passthrough" serves the stored content type; anything else is forced.
    content_type: str = "passthrough"
    default_content_type: str = "video/mp4"
    cache_max_age: int = 3600
    require_auth: bool = True


class UploadSettings(BaseModel):
    max_file_size: int = 500 * 1024 * 1024
    allowed_extensions: tuple[str, ...] = (".mp4", ".webm", ".ogg", ".avi", ".mov", ".mkv")
    default_quality: str = "720p"


class LoggingSettings(BaseModel):
    level: str = "INFO"
    format: str = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


class Settings(BaseSettings):
    """Top-level application settings with nested sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "staging", "production", "test"] = "development"
    debug: bool = False
    project_name: str = "VOD Streaming Server"
    api_prefix: str = "/api"

    server: ServerSettings = ServerSettings()
    database: DatabaseSettings = DatabaseSettings()
    security: SecuritySettings = SecuritySettings()
    otp: OtpSettings = OtpSettings()
    storage: StorageSettings = StorageSettings()
    streaming: StreamingSettings = StreamingSettings()
    upload: UploadSettings = UploadSettings()
    logging: LoggingSettings = LoggingSettings()

    @property
    def host(self) -> str:
        return self.server.host

    @property
    def port(self) -> int:
        return self.server.port

    @property
    def algorithm(self) -> str:
        return self.security.algorithm

    @property
    def blob_storage_dir(self) -> str:
        return str(self.storage.blob_dir)

    @property
    def expose_otp_code(self) -> bool:
        if self.otp.expose_code is not None:
            return self.otp.expose_code
        return self.environment != "production"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
