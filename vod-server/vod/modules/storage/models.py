"""Value objects describing stored blobs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(slots=True, frozen=True)
class BlobInfo:
    key: str
    length: int
    content_type: Optional[str] = None
    filename: Optional[str] = None
    checksum_sha256: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_mapping(cls, key: str, payload: dict[str, Any]) -> "BlobInfo":
        return cls(
            key=key,
            length=int(payload["length"]),
            content_type=payload.get("content_type") or None,
            filename=payload.get("filename") or None,
            checksum_sha256=payload.get("checksum_sha256") or None,
            created_at=payload.get("created_at") or None,
        )

    def to_mapping(self) -> dict[str, Any]:
        return {
            "length": self.length,
            "content_type": self.content_type,
            "filename": self.filename,
            "checksum_sha256": self.checksum_sha256,
            "created_at": self.created_at,
        }
