import os

import pytest

from conftest import bearer, grant_admin, login
from vod.core.container import get_container
from vod.infrastructure.database.session import get_session_factory
from vod.modules.catalog import CatalogService
from vod.modules.uploads import UploadPolicy, UploadService, UploadTooLargeError

ADMIN_PHONE = "+15550009999"
MP4_BYTES = b"\x00\x00\x00\x18ftypmp42\x00\x00\x00\x00mp42isom" + os.urandom(4000)


async def admin_token(client) -> str:
    await login(client, ADMIN_PHONE)
    await grant_admin(ADMIN_PHONE)
    return (await login(client, ADMIN_PHONE))["tokens"]["accessToken"]


async def upload(client, token, data=MP4_BYTES, filename="clip.mp4", content_type="video/mp4", **fields):
    form = {"title": "Uploaded clip", "category": "demo", "duration": "12.5", **fields}
    return await client.post(
        "/api/admin/upload-video",
        headers=bearer(token),
        data=form,
        files={"video": (filename, data, content_type)},
    )


async def test_non_admin_is_forbidden(client):
    token = (await login(client, "+15550001234"))["tokens"]["accessToken"]
    response = await upload(client, token)
    assert response.status_code == 403


async def test_upload_creates_playable_video(client):
    token = await admin_token(client)

    response = await upload(client, token)

    assert response.status_code == 201, response.text
    video = response.json()["video"]
    assert video["title"] == "Uploaded clip"
    assert video["category"] == "demo"
    assert video["duration"] == 12.5
    assert [variant["quality"] for variant in video["variants"]] == ["720p"]
    variant = video["variants"][0]
    assert variant["resolution"] == "1280x720"
    assert variant["bitrate"] == 2_500_000

    manifest = (await client.get(f"/api/assets/{video['id']}/manifest", headers=bearer(token))).json()
    stream_url = manifest["qualities"][0]["url"]
    streamed = await client.get(stream_url, headers={**bearer(token), "Range": "bytes=4-7"})
    assert streamed.status_code == 206
    assert streamed.content == b"ftyp"


async def test_upload_rejects_non_video_files(client):
    token = await admin_token(client)
    response = await upload(client, token, data=b"hello", filename="notes.txt", content_type="text/plain")
    assert response.status_code == 400


async def test_upload_rejects_unknown_quality(client):
    token = await admin_token(client)
    response = await upload(client, token, quality="8k")
    assert response.status_code == 400


async def test_add_variant_and_conflict(client):
    token = await admin_token(client)
    video_id = (await upload(client, token)).json()["video"]["id"]

    added = await client.post(
        f"/api/admin/videos/{video_id}/variants",
        headers=bearer(token),
        data={"quality": "240p"},
        files={"video": ("small.mp4", MP4_BYTES[:1000], "video/mp4")},
    )
    assert added.status_code == 201
    assert [variant["quality"] for variant in added.json()["variants"]] == ["240p", "720p"]

    duplicate = await client.post(
        f"/api/admin/videos/{video_id}/variants",
        headers=bearer(token),
        data={"quality": "720p"},
        files={"video": ("again.mp4", MP4_BYTES, "video/mp4")},
    )
    assert duplicate.status_code == 409

    missing = await client.post(
        "/api/admin/videos/nope/variants",
        headers=bearer(token),
        data={"quality": "480p"},
        files={"video": ("x.mp4", MP4_BYTES, "video/mp4")},
    )
    assert missing.status_code == 404


async def test_deactivate_hides_video(client):
    token = await admin_token(client)
    video = (await upload(client, token)).json()["video"]

    response = await client.patch(f"/api/admin/videos/{video['id']}", headers=bearer(token), json={"isActive": False})
    assert response.status_code == 200
    assert response.json()["isActive"] is False

    key = video["variants"][0]["storageKey"]
    assert (await client.get(f"/api/assets/{video['id']}/manifest", headers=bearer(token))).status_code == 404
    assert (await client.get(f"/api/stream/{key}", headers=bearer(token))).status_code == 404

    restored = await client.patch(f"/api/admin/videos/{video['id']}", headers=bearer(token), json={"isActive": True})
    assert restored.json()["isActive"] is True
    assert (await client.get(f"/api/stream/{key}", headers=bearer(token))).status_code == 200


async def test_probe_reports_signature(client):
    token = await admin_token(client)
    key = (await upload(client, token)).json()["video"]["variants"][0]["storageKey"]

    response = await client.get(f"/api/admin/blobs/{key}/probe", headers=bearer(token))

    assert response.status_code == 200
    body = response.json()
    assert body["isIsoMedia"] is True
    assert body["length"] == len(MP4_BYTES)
    assert (await client.get(f"/api/admin/blobs/{'0' * 32}/probe", headers=bearer(token))).status_code == 404


class ChunkedUpload:
    def __init__(self, data: bytes, filename: str = "big.mp4", content_type: str = "video/mp4") -> None:
        self._data = data
        self._offset = 0
        self.filename = filename
        self.content_type = content_type

    async def read(self, size: int = -1) -> bytes:
        chunk = self._data[self._offset:self._offset + size]
        self._offset += len(chunk)
        return chunk


async def test_oversized_upload_is_rejected_and_discarded(database):
    store = get_container().blob_store
    policy = UploadPolicy(max_file_size=1000, allowed_extensions=(".mp4",), default_quality="720p", chunk_size=256)

    async with get_session_factory()() as session:
        service = UploadService(CatalogService.with_session(session), store, policy)
        with pytest.raises(UploadTooLargeError):
            await service.store_file(ChunkedUpload(os.urandom(5000)))

    assert not list(store.root.rglob("*.upload"))
