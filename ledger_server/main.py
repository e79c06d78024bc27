import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError

from ledger_server import __version__
from ledger_server.api import create_api_router
from ledger_server.core.config import get_settings
from ledger_server.core.container import get_container
from ledger_server.infrastructure.database import get_engine, init_db
from ledger_server.modules.common.exceptions import (
    AlreadyProcessedError,
    InsufficientBalanceError,
    InvalidAmountError,
    LedgerError,
    MissingOwnerReferenceError,
    NotFoundError,
    PermissionDeniedError,
    TransientIOError,
)

logger = logging.getLogger(__name__)
settings = get_settings()

# Checked in order; the first matching base class decides the status code.
ERROR_STATUS_CODES: tuple[tuple[type[LedgerError], int], ...] = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (InsufficientBalanceError, status.HTTP_409_CONFLICT),
    (AlreadyProcessedError, status.HTTP_409_CONFLICT),
    (MissingOwnerReferenceError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (InvalidAmountError, status.HTTP_400_BAD_REQUEST),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN),
    (TransientIOError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def status_for(exc: LedgerError) -> int:
    for error_type, status_code in ERROR_STATUS_CODES:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST


@asynccontextmanager
async def lifespan(app: FastAPI):
    get_container()
    await init_db()
    yield
    await get_engine().dispose()


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.project_name,
        description="Wallet and sponsor-credit ledger for the rewards admin console",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_timeout(request: Request, call_next):
        timeout = settings.ledger.request_timeout_seconds
        try:
            return await asyncio.wait_for(call_next(request), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning("%s %s timed out after %ss", request.method, request.url.path, timeout)
            return JSONResponse(
                status_code=status.HTTP_504_GATEWAY_TIMEOUT,
                content={
                    "detail": "Request timed out; re-check state before retrying",
                    "code": "timeout",
                    "outcome": "unknown",
                },
            )

    @app.exception_handler(LedgerError)
    async def ledger_error_handler(request: Request, exc: LedgerError):
        status_code = status_for(exc)
        if status_code >= 500:
            logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=status_code, content={"detail": str(exc), "code": exc.code})

    @app.exception_handler(OperationalError)
    async def database_unavailable_handler(request: Request, exc: OperationalError):
        logger.warning("%s %s hit an unavailable database: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Database unavailable, outcome unknown", "code": TransientIOError.code},
        )

    app.include_router(create_api_router(settings.api_prefix))

    @app.get("/health", include_in_schema=False)
    async def health():
        return {"status": "ok", "version": __version__}

    return app


app = create_app()
