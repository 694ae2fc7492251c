import os
import tempfile
from pathlib import Path

_TEST_ROOT = Path(tempfile.mkdtemp(prefix="vod-tests-"))

os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE__URL"] = f"sqlite+aiosqlite:///{_TEST_ROOT / 'vod-test.db'}"
os.environ["STORAGE__BLOB_DIR"] = str(_TEST_ROOT / "blobs")
os.environ["STORAGE__CHUNK_SIZE"] = "65536"
os.environ["SECURITY__SECRET_KEY"] = "test-access-secret"
os.environ["SECURITY__REFRESH_SECRET_KEY"] = "test-refresh-secret"

from typing import AsyncIterator, Optional, Sequence  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy import update  # noqa: E402

from vod.core.container import get_container  # noqa: E402
from vod.infrastructure.database import Base, get_engine  # noqa: E402
from vod.infrastructure.database import models  # noqa: E402,F401
from vod.infrastructure.database.session import dispose_engine, get_session_factory  # noqa: E402
from vod.infrastructure.storage import FileSystemBlobStore  # noqa: E402
from vod.main import app  # noqa: E402
from vod.modules.catalog import Asset, AssetCreateInput, CatalogService, VariantCreateInput  # noqa: E402
from vod.modules.catalog.models import QUALITY_SPECS  # noqa: E402
from vod.modules.storage import BlobStore  # noqa: E402
from vod.modules.users import UserService  # noqa: E402


@pytest.fixture
async def database() -> AsyncIterator[None]:
    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    await dispose_engine()


@pytest.fixture
def blob_store(tmp_path: Path) -> FileSystemBlobStore:
    store = FileSystemBlobStore(tmp_path / "blobs", chunk_size=4096, read_timeout=5)
    store.ensure_storage()
    return store


@pytest.fixture
def app_store() -> BlobStore:
    return get_container().blob_store


@pytest.fixture
async def client(database: None) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http_client:
        yield http_client


async def put_blob(store: BlobStore, data: bytes, *, filename: str = "clip.mp4",
                   content_type: Optional[str] = "video/mp4") -> str:
    writer = await store.open_writer(filename=filename, content_type=content_type)
    await writer.write(data)
    info = await writer.commit()
    return info.key


async def create_asset(
    variants: Sequence[tuple[str, str]],
    *,
    title: str = "Sample",
    category: str = "general",
    duration: float = 60.0,
    description: str = "",
) -> Asset:
    """Insert an asset whose variants are ``(quality, storage_key)`` pairs."""
    async with get_session_factory()() as session:
        service = CatalogService.with_session(session)
        asset = await service.create_asset(
            AssetCreateInput(title=title, duration=duration, category=category, description=description),
            [
                VariantCreateInput(
                    quality=quality,
                    storage_key=key,
                    bitrate=QUALITY_SPECS[quality][0],
                    resolution=QUALITY_SPECS[quality][1],
                )
                for quality, key in variants
            ],
        )
        await session.commit()
        return asset


async def set_asset_active(asset_id: str, is_active: bool) -> None:
    async with get_session_factory()() as session:
        await CatalogService.with_session(session).set_active(asset_id, is_active)
        await session.commit()


async def grant_admin(phone_number: str) -> None:
    async with get_session_factory()() as session:
        await UserService.with_session(session).grant_admin(phone_number)
        await session.commit()


async def deactivate_user(phone_number: str) -> None:
    async with get_session_factory()() as session:
        await session.execute(
            update(models.User).where(models.User.phone_number == phone_number).values(is_active=False)
        )
        await session.commit()


async def login(client: httpx.AsyncClient, phone_number: str = "+15551234567") -> dict:
    sent = await client.post("/api/auth/send-otp", json={"phoneNumber": phone_number})
    assert sent.status_code == 200, sent.text
    verified = await client.post(
        "/api/auth/verify-otp",
        json={"phoneNumber": phone_number, "otp": sent.json()["devOtp"], "deviceInfo": "pytest"},
    )
    assert verified.status_code == 200, verified.text
    return verified.json()


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
