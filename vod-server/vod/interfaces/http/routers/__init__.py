from fastapi import APIRouter

from . import admin, auth, playback, search, users, videos


def create_api_router(prefix: str = "") -> APIRouter:
    router = APIRouter(prefix=prefix)
    router.include_router(auth.router, prefix="/auth", tags=["auth"])
    router.include_router(users.router, prefix="/user", tags=["user"])
    router.include_router(videos.router, prefix="/videos", tags=["videos"])
    router.include_router(search.router, prefix="/search", tags=["search"])
    router.include_router(admin.router, prefix="/admin", tags=["admin"])
    router.include_router(playback.router, tags=["playback"])
    return router


__all__ = [
    "create_api_router",
]
