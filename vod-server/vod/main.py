import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from vod import __version__
from vod.core.config import get_settings
from vod.core.container import get_container
from vod.core.logging import configure_logging
from vod.infrastructure.database.session import dispose_engine, init_db
from vod.interfaces.http.routers import create_api_router
from vod.schemas import StatusResponse

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings)
    await init_db()
    container = get_container()
    logger.info(
        "%s %s started (%s), blobs at %s",
        settings.project_name,
        __version__,
        settings.environment,
        container.settings.blob_storage_dir,
    )
    yield
    await dispose_engine()


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.project_name,
        description="Video-on-demand catalog with HTTP range streaming",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Accept-Ranges", "Content-Length", "Content-Range"],
    )

    app.include_router(create_api_router(settings.api_prefix))

    @app.get("/", response_model=StatusResponse)
    async def status_page() -> StatusResponse:
        return StatusResponse(
            message=f"{settings.project_name} API",
            version=__version__,
            environment=settings.environment,
        )

    return app


app = create_app()
