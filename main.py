import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.endpoints import auth, health, protected, storage, wallets
from app.core.config import get_settings
from app.core.errors import ApiError, ErrorKind
from app.core.log_config import configure_logging
from app.services.indexer import IndexerClient
from app.services.storage_gateway import StorageGateway

settings = get_settings()
configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.storage_gateway = StorageGateway.from_settings(settings)
    app.state.indexer_client = IndexerClient.from_settings(settings)
    app.state.whitelist_oracle = None
    logger.info("%s %s started, IPFS at %s", settings.PROJECT_NAME, settings.VERSION, settings.IPFS_URL)
    try:
        yield
    finally:
        await app.state.storage_gateway.close()
        await app.state.indexer_client.close()
        if app.state.whitelist_oracle is not None:
            await app.state.whitelist_oracle.close()


# Define the FastAPI application instance
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# Every failure leaves as "<status> <plain text message>"
@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError) -> PlainTextResponse:
    if exc.status_code >= 500:
        logger.error("%s %s -> %s: %s", request.method, request.url.path, exc.kind.name, exc.message)
    return PlainTextResponse(exc.message, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> PlainTextResponse:
    kind = ErrorKind.INVALID_INPUT
    return PlainTextResponse(kind.default_message, status_code=kind.status_code)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> PlainTextResponse:
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=exc.headers)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> PlainTextResponse:
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return PlainTextResponse("Something went wrong", status_code=500)


app.include_router(health.router)
app.include_router(auth.router)
app.include_router(protected.router)
app.include_router(storage.router)
app.include_router(wallets.router)


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
