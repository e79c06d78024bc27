from fastapi import APIRouter

from ledger_server.interfaces.http.routers import admin, auth, owner


def create_api_router(prefix: str = "") -> APIRouter:
    router = APIRouter(prefix=prefix)
    router.include_router(auth.router, prefix="/auth", tags=["Auth"])
    router.include_router(owner.router, prefix="/owner", tags=["Owner"])
    router.include_router(admin.router, prefix="/admin", tags=["Admin"])
    return router


__all__ = [
    "create_api_router",
]
