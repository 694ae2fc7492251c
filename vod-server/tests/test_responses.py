import asyncio

from vod.interfaces.http.responses import BlobStreamingResponse
from vod.modules.streaming import BlobBody

CHUNK = b"x" * 1024
CHUNKS = 10_000


class CountingReader:
    def __init__(self) -> None:
        self.served = 0
        self.closed = False

    def __aiter__(self):
        return self

    async def __anext__(self) -> bytes:
        if self.closed or self.served >= CHUNKS:
            raise StopAsyncIteration
        self.served += 1
        return CHUNK

    async def aclose(self) -> None:
        self.closed = True


def response_for(reader: CountingReader) -> tuple[BlobStreamingResponse, BlobBody]:
    body = BlobBody(reader, "k", CHUNKS * len(CHUNK))
    headers = {"Content-Length": str(CHUNKS * len(CHUNK)), "Content-Type": "video/mp4"}
    return BlobStreamingResponse(body, status_code=200, headers=headers), body


SCOPE = {"type": "http", "method": "GET", "path": "/", "headers": [], "asgi": {"version": "3.0", "spec_version": "2.0"}}


async def test_reader_released_when_client_disconnects():
    reader = CountingReader()
    response, body = response_for(reader)

    async def receive():
        return {"type": "http.disconnect"}

    async def send(message):
        await asyncio.sleep(0)

    await response(SCOPE, receive, send)

    assert reader.closed
    assert body.closed
    assert body.sent < CHUNKS * len(CHUNK)


async def test_reader_released_after_complete_delivery():
    reader = CountingReader()
    response, body = response_for(reader)
    messages = []

    async def receive():
        await asyncio.Event().wait()

    async def send(message):
        messages.append(message)

    await response(SCOPE, receive, send)

    assert reader.closed
    assert body.sent == CHUNKS * len(CHUNK)
    assert messages[0]["status"] == 200
    assert messages[-1] == {"type": "http.response.body", "body": b"", "more_body": False}
