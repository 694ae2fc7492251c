import os
from typing import Optional

import pytest

from conftest import put_blob
from vod.core.security import create_access_token
from vod.modules.catalog import Asset, AssetNotFoundError, CatalogResolver, Variant
from vod.modules.streaming import ManifestBuilder, PlaybackService, RangeStreamer, StreamStatus
from vod.modules.users import AccessDeniedError, AccessGuard, AuthenticationError, Session, User


class Videos:
    def __init__(self, *assets: Asset) -> None:
        self._assets = {asset.id: asset for asset in assets}

    async def get_by_id(self, video_id):
        return self._assets.get(video_id)

    async def get_by_storage_key(self, storage_key):
        for asset in self._assets.values():
            if asset.variant_for_key(storage_key):
                return asset
        return None


class Users:
    def __init__(self, user: User) -> None:
        self.user = user
        self.session = Session(session_id="s1", user_id=user.id, device_info="d", ip_address="")

    async def get_by_id(self, user_id):
        return self.user if user_id == self.user.id else None

    async def get_session(self, user_id, session_id):
        return self.session if session_id == self.session.session_id else None

    async def touch_session(self, session_id, timestamp):
        pass


def playback(store, key: str, *, user: Optional[User] = None, require_auth: bool = True) -> PlaybackService:
    asset = Asset(
        id="a",
        title="Clip",
        duration=3.0,
        variants=[Variant(quality="240p", storage_key=key, bitrate=400, resolution="426x240")],
    )
    resolver = CatalogResolver(Videos(asset))
    guard = AccessGuard(Users(user or User(id="u1", phone_number="+15550001111", is_verified=True)))
    return PlaybackService(
        resolver=resolver,
        guard=guard if require_auth else None,
        manifests=ManifestBuilder(resolver),
        streamer=RangeStreamer(store),
    )


TOKEN = create_access_token("u1", "+15550001111", "s1")


async def test_active_user_streams_known_key(blob_store):
    data = os.urandom(5000)
    key = await put_blob(blob_store, data)

    outcome = await playback(blob_store, key).stream(TOKEN, key, "bytes=0-9")

    assert outcome.status is StreamStatus.PARTIAL
    assert b"".join([chunk async for chunk in outcome.body]) == data[:10]


async def test_deactivated_user_cannot_tell_known_keys_from_unknown(blob_store):
    key = await put_blob(blob_store, b"payload")
    service = playback(blob_store, key, user=User(id="u1", phone_number="+15550001111", is_verified=True, is_active=False))

    outcomes = {}
    for candidate in (key, "f" * 32):
        with pytest.raises(AccessDeniedError) as caught:
            await service.stream(TOKEN, candidate)
        outcomes[candidate] = type(caught.value)

    assert outcomes[key] is outcomes["f" * 32]


async def test_unverified_user_is_denied_before_manifest_lookup(blob_store):
    key = await put_blob(blob_store, b"payload")
    service = playback(blob_store, key, user=User(id="u1", phone_number="+15550001111", is_verified=False))

    for asset_id in ("a", "missing"):
        with pytest.raises(AccessDeniedError):
            await service.manifest(TOKEN, asset_id)


async def test_anonymous_request_is_rejected_first(blob_store):
    key = await put_blob(blob_store, b"payload")
    with pytest.raises(AuthenticationError):
        await playback(blob_store, key).stream(None, "f" * 32)


async def test_open_playback_skips_the_guard(blob_store):
    data = b"open content"
    key = await put_blob(blob_store, data)
    service = playback(blob_store, key, require_auth=False)

    outcome = await service.stream(None, key)
    assert b"".join([chunk async for chunk in outcome.body]) == data

    manifest = await service.manifest(None, "a")
    assert [entry.quality for entry in manifest.qualities] == ["240p"]

    with pytest.raises(AssetNotFoundError):
        await service.stream(None, "f" * 32)
