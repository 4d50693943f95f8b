import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from intellisource import __version__
from intellisource.api.routes import router
from intellisource.core.config import settings
from intellisource.data_access.database import Database, get_database
from intellisource.domain.envelope import ApiResponse, fail, ok

logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    """Flattens pydantic errors into ``field: reason`` pairs."""
    parts = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        msg = str(err.get("msg", "Invalid value")).removeprefix("Value error, ")
        parts.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    return "; ".join(parts) or "Invalid request"


def register_exception_handlers(app: FastAPI) -> None:
    """Every failure leaves the API as ``{"success": false, "message": ...}``."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=fail(str(exc.detail)), headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=fail(_validation_message(exc)))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=fail("Internal server error"))


def create_app(database: Optional[Database] = None) -> FastAPI:
    """Builds the API. ``database`` is injected by tests; otherwise it comes from settings."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Handles system startup and shutdown events.

        Initializes logging, connects the store with retry (fatal when it
        stays unreachable) and disposes of it once the listener is closed.
        """
        logging.basicConfig(
            level=settings.LOG_LEVEL,
            format="%(asctime)s [%(levelname)s] %(message)s",
            handlers=[logging.StreamHandler()]
        )

        db = database or Database(settings.DATABASE_URL)
        db.connect()
        app.state.database = db

        yield

        db.dispose()

    app = FastAPI(
        title="IntelliSource Catalog API",
        description="Categories, market research reports and contact messages for the IntelliSource storefront",
        version=__version__,
        lifespan=lifespan
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    app.include_router(router)

    @app.get("/", tags=["Probes"])
    def read_root() -> dict[str, str]:
        """Landing endpoint for the API."""
        return {"message": "Welcome to the IntelliSource Catalog API"}

    @app.get("/health", tags=["Probes"])
    def health() -> ApiResponse[dict[str, bool]]:
        """Liveness probe; does not touch the store."""
        return ok("ok", {"ok": True})

    @app.get("/db-status", tags=["Probes"])
    def db_status(request: Request) -> ApiResponse[dict[str, Optional[str]]]:
        """Store connectivity plus a round-trip ping."""
        return ok("Store status", get_database(request).status())

    return app


app = create_app()


def run() -> None:
    """Serves the API; termination signals close the listener, then the lifespan disposes the store."""
    uvicorn.run(
        "intellisource.api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        timeout_graceful_shutdown=settings.SHUTDOWN_GRACE_SECONDS,
    )


if __name__ == "__main__":
    run()
