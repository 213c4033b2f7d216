"""FastAPI application factory and setup."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from loguru import logger
from starlette.concurrency import run_in_threadpool
from starlette.responses import JSONResponse

from src.bookstore.api.http.app_data import ApplicationDependencies
from src.bookstore.api.http.routers.books import router as books_router
from src.bookstore.api.http.routers.health import router as health_router
from src.bookstore.api.utils.app_startup import configure_logging
from src.bookstore.core.exceptions import (
    BackendError,
    BookStoreError,
    InvalidInputError,
    NotFoundError,
)
from src.bookstore.core.services import DbSessionService
from src.bookstore.entities.book import BookRepository
from src.bookstore.runtime.context import get_config

# Initialize logging
configure_logging()

STATUS_BY_ERROR: dict[type[BookStoreError], int] = {
    NotFoundError: 404,
    InvalidInputError: 400,
    BackendError: 500,
}

# expose startup for tests
__all__ = ["app", "create_app", "startup", "shutdown"]


# --- Request logging middleware ---
async def log_requests(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    base_ctx = {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "client_ip": request.client.host if request.client else "unknown",
    }

    start = time.perf_counter()

    # Everything that logs within this block inherits base_ctx
    with logger.contextualize(**base_ctx):
        try:
            logger.info("request.start")
            response = await call_next(request)

            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=response.status_code,
                duration_ms=round(duration_ms, 1),
            ).info("request.end")

            response.headers.setdefault("X-Request-ID", request_id)
            return response

        except Exception as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=500,
                duration_ms=round(duration_ms, 1),
                error_type=type(exc).__name__,
            ).exception("request.error")
            return JSONResponse(
                status_code=500,
                content={"error": "Internal Server Error", "kind": BackendError.kind},
                headers={"X-Request-ID": request_id},
            )


# --- Error mapping ---
async def handle_store_error(request: Request, exc: BookStoreError) -> JSONResponse:
    status_code = STATUS_BY_ERROR.get(type(exc), 500)
    if status_code >= 500:
        logger.bind(error_type=type(exc).__name__).error("store.error: {}", exc.message)
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.message, "kind": exc.kind},
    )


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    # Undecodable bodies are bad input, reported like any other payload error
    message = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )
    return JSONResponse(
        status_code=400,
        content={"error": message, "kind": InvalidInputError.kind},
    )


# --- Lifecycle hooks ---
async def startup(app: FastAPI, database_service: DbSessionService | None = None) -> None:
    config = get_config()
    logger.info("Starting up application in {} environment", config.app.environment)

    database_service = database_service or DbSessionService()
    # StartupError propagates; the server refuses to start without its store
    await run_in_threadpool(database_service.connect)

    app.state.app_dependencies = ApplicationDependencies(
        database_service=database_service,
        book_repository=BookRepository(database_service),
    )


async def shutdown(app: FastAPI) -> None:
    logger.info("Shutting down application")
    app_dependencies: ApplicationDependencies = app.state.app_dependencies
    app_dependencies.database_service.dispose()


def create_app(database_service: DbSessionService | None = None) -> FastAPI:
    """Build the application; ``database_service`` substitutes the configured pool."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await startup(app, database_service)
        try:
            yield
        finally:
            await shutdown(app)

    config = get_config()
    application = FastAPI(
        title="Book Store",
        lifespan=lifespan,
        docs_url=None if config.app.environment == "production" else "/docs",
        redoc_url=None if config.app.environment == "production" else "/redoc",
    )

    application.middleware("http")(log_requests)
    application.add_exception_handler(BookStoreError, handle_store_error)
    application.add_exception_handler(
        RequestValidationError, handle_request_validation_error
    )

    application.include_router(health_router)
    application.include_router(books_router, prefix=config.app.api_prefix)
    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=get_config().app.host,
        port=get_config().app.port,
        access_log=False,  # We handle access logging in middleware
    )
