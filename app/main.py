import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from app.api.routes import api_router
from app.api.v1 import v1_router
from app.api.v1.envelope import error
from app.core.config import settings
from app.core.db import engine
from app.core.logging_config import setup_logging
from app.domain.errors import (
    ExternalServiceError,
    NotFoundError,
    SourceFormatError,
    ValidationError,
)
from app.infrastructure.db.base import Base
from app.infrastructure.db.repositories import ChangeFeed

setup_logging()
logger = logging.getLogger("main")

app = FastAPI(title=settings.APP_NAME, debug=settings.DEBUG)
app.state.change_feed = ChangeFeed()


@app.on_event("startup")
async def startup():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("%s started (env=%s)", settings.APP_NAME, settings.ENVIRONMENT)


# ---------------------------------------------------------------------------
# Domain errors -> response envelope
# ---------------------------------------------------------------------------

@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(
        status_code=422,
        content=error(str(exc), errors=[{"field": exc.field, "message": str(exc)}]),
    )


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=error(str(exc)))


@app.exception_handler(SourceFormatError)
async def source_format_handler(request: Request, exc: SourceFormatError):
    logger.warning("rejected upload on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error(str(exc)))


@app.exception_handler(ExternalServiceError)
async def external_service_handler(request: Request, exc: ExternalServiceError):
    logger.error("upstream failure on %s: %s (status=%s)", request.url.path, exc, exc.status_code)
    return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content=error(str(exc)))


app.include_router(api_router)
app.include_router(v1_router)
