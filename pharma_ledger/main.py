from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from pharma_ledger.core.clock import get_clock
from pharma_ledger.core.config import get_settings
from pharma_ledger.core.errors import LedgerError
from pharma_ledger.core.logging import configure_logging
from pharma_ledger.core.middleware import RequestIdMiddleware
from pharma_ledger.db.session import SessionLocal
from pharma_ledger.services.ledger import bootstrap_ledger
from pharma_ledger.api.v1.router import v1_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    db = SessionLocal()
    try:
        bootstrap_ledger(db, get_settings(), get_clock())
    finally:
        db.close()
    yield


async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    rid = getattr(request.state, "request_id", None)
    logger.info(
        "[api] rejected %s %s kind=%s reason=%s",
        request.method,
        request.url.path,
        exc.kind,
        exc.reason,
        extra={"request_id": rid},
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        lifespan=lifespan,
    )

    # Middleware: Request ID
    app.add_middleware(RequestIdMiddleware, header_name=settings.request_id_header)

    app.add_exception_handler(LedgerError, ledger_error_handler)

    # API v1
    app.include_router(v1_router, prefix=settings.api_prefix)

    return app


app = create_app()
