"""Simple dependency container for wiring core services."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

from vod.core.config import Settings, get_settings
from vod.infrastructure.database.session import get_engine
from vod.infrastructure.storage import FileSystemBlobStore
from vod.modules.storage import BlobStore


def _build_blob_store(settings: Settings) -> FileSystemBlobStore:
    return FileSystemBlobStore(
        Path(settings.blob_storage_dir).resolve(),
        chunk_size=settings.storage.chunk_size,
        read_timeout=settings.storage.read_timeout,
    )


@dataclass(slots=True)
class ApplicationContainer:
    settings: Settings
    blob_store: BlobStore = field(init=False)

    def __post_init__(self) -> None:
        self.blob_store = _build_blob_store(self.settings)

    def init_infrastructure(self) -> None:
        """Ensure infrastructure singletons (database engine, blob root) are initialised."""
        get_engine()
        ensure = getattr(self.blob_store, "ensure_storage", None)
        if ensure is not None:
            ensure()


@lru_cache()
def get_container() -> ApplicationContainer:
    container = ApplicationContainer(settings=get_settings())
    container.init_infrastructure()
    return container


__all__ = ["ApplicationContainer", "get_container"]
