from fastapi import APIRouter

from camdn.api.routers import links, static, upload, viewer


def create_api_router(prefix: str = "") -> APIRouter:
    router = APIRouter(prefix=prefix)
    router.include_router(upload.router)
    router.include_router(viewer.router)
    router.include_router(links.router)
    router.include_router(static.router)
    return router


__all__ = [
    "create_api_router",
]
