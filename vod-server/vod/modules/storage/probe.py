"""File signature inspection for stored blobs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .store import BlobStore

SIGNATURE_BYTES = 16


@dataclass(slots=True, frozen=True)
class BlobSignature:
    key: str
    length: int
    content_type: Optional[str]
    head_hex: str
    box_type: Optional[str]

    @property
    def is_iso_media(self) -> bool:
        """MP4/MOV files open with a ``ftyp`` box: 4 byte size, then the type."""
        return self.box_type == "ftyp"


async def probe_blob(store: BlobStore, key: str) -> BlobSignature:
    info = await store.stat(key)
    head = b""
    if info.length:
        reader = await store.open_range(key, 0, min(SIGNATURE_BYTES, info.length) - 1)
        try:
            async for chunk in reader:
                head += chunk
        finally:
            await reader.aclose()
    box_type = head[4:8].decode("latin-1") if len(head) >= 8 else None
    return BlobSignature(
        key=key,
        length=info.length,
        content_type=info.content_type,
        head_hex=head.hex(),
        box_type=box_type,
    )
