"""Response classes for blob delivery."""

from __future__ import annotations

from starlette.responses import StreamingResponse
from starlette.types import Receive, Scope, Send

from vod.modules.streaming import BlobBody


class BlobStreamingResponse(StreamingResponse):
    """Streams a :class:`BlobBody` and always releases its reader.

    Starlette stops iterating when the client disconnects without closing the
    iterator, so the reader is closed here once the response finishes for any
    reason.
    """

    def __init__(self, body: BlobBody, status_code: int, headers: dict[str, str]) -> None:
        super().__init__(body, status_code=status_code, headers=headers)
        self.blob_body = body

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        try:
            await super().__call__(scope, receive, send)
        finally:
            await self.blob_body.aclose()
