from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from camdn import __version__
from camdn.api import create_api_router
from camdn.api.errors import register_exception_handlers
from camdn.core.config import Settings, get_settings
from camdn.core.container import ApplicationContainer, build_container
from camdn.schemas import HealthResponse


def create_app(settings: Settings | None = None, container: ApplicationContainer | None = None) -> FastAPI:
    if container is None:
        container = build_container(settings or get_settings())
    settings = container.settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await container.init_infrastructure()
        yield
        await container.dispose()

    app = FastAPI(
        title=settings.site_name,
        description="Self-hosted media sharing with link-preview pages",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.container = container
    register_exception_handlers(app)

    # StaticFiles checks the directory when the mount is created.
    upload_root = settings.upload_root
    upload_root.mkdir(parents=True, exist_ok=True)
    app.mount("/f", StaticFiles(directory=str(upload_root)), name="files")

    app.include_router(create_api_router())

    @app.get("/health", response_model=HealthResponse, summary="Health Check")
    async def health() -> HealthResponse:
        return HealthResponse()

    return app
