import logging
import time
from collections.abc import Generator
from typing import Any, Optional

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine, text

from intellisource.core.config import settings

# Registers the catalog tables on SQLModel.metadata
from intellisource.data_access import models  # noqa: F401


logger = logging.getLogger(__name__)


class StoreUnavailableError(RuntimeError):
    """Raised when the store cannot be reached after every retry."""


def _unicode_lower(value: Optional[str]) -> Optional[str]:
    return value.lower() if isinstance(value, str) else value


def _register_unicode_lower(dbapi_connection: Any, connection_record: Any) -> None:
    # SQLite's built-in lower() only folds ASCII letters
    dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)


class Database:
    """Process-wide handle on the entity store.

    Built once by the application lifespan (or the seed script) and handed to
    request handlers through ``get_session``. Only the owner calls
    ``connect`` and ``dispose``.
    """

    def __init__(
        self,
        url: str,
        operation_timeout: int = settings.DB_OPERATION_TIMEOUT,
        echo: bool = False,
    ) -> None:
        self.url = url
        self.operation_timeout = operation_timeout
        self.engine: Engine = create_engine(url, echo=echo, **self._engine_options())
        if url.startswith("sqlite"):
            event.listen(self.engine, "connect", _register_unicode_lower)
        self.connected = False

    def _engine_options(self) -> dict[str, Any]:
        """Per-dialect options bounding how long a single operation may stall."""
        if self.url.startswith("sqlite"):
            options: dict[str, Any] = {
                "connect_args": {"check_same_thread": False, "timeout": self.operation_timeout},
            }
            if self.url in ("sqlite://", "sqlite:///:memory:"):
                # One shared connection, otherwise every checkout sees an empty database
                options["poolclass"] = StaticPool
            return options

        connect_args: dict[str, Any] = {"connect_timeout": self.operation_timeout}
        if self.url.startswith("postgresql"):
            connect_args["options"] = f"-c statement_timeout={self.operation_timeout * 1000}"
        # Use pool_pre_ping for stability with PgBouncer-style poolers
        return {
            "pool_pre_ping": True,
            "pool_timeout": self.operation_timeout,
            "connect_args": connect_args,
        }

    def connect(self, max_retries: int = settings.DB_MAX_RETRIES, base_delay: float = settings.DB_RETRY_BASE_DELAY) -> None:
        """Pings the store with exponential backoff, then creates missing tables.

        Args:
            max_retries (int): Total number of attempts before giving up.
            base_delay (float): Seconds to wait after the first failure; doubled each time.

        Raises:
            StoreUnavailableError: When every attempt failed.
        """
        attempts = max(1, max_retries)
        for attempt in range(1, attempts + 1):
            try:
                self.ping()
                break
            except OperationalError as e:
                logger.warning(f"Store connection failed ({attempt}/{attempts}): {e}")
                if attempt == attempts:
                    logger.error("Giving up on the store after exhausting retries.")
                    raise StoreUnavailableError(f"Store unreachable after {attempts} attempts") from e
                time.sleep(base_delay * 2 ** (attempt - 1))

        SQLModel.metadata.create_all(self.engine)
        self.connected = True
        logger.info("Connected to the store and ensured catalog tables exist.")

    def ping(self) -> None:
        """Runs a trivial round trip; raises the driver error when the store is down."""
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    def status(self) -> dict[str, Optional[str]]:
        """Connectivity summary for the ``/db-status`` probe."""
        state = "connected" if self.connected else "disconnected"
        if not self.connected:
            return {"state": state, "ping": None}
        try:
            self.ping()
            return {"state": state, "ping": "ok"}
        except Exception as e:
            logger.warning(f"Store ping failed: {e}")
            return {"state": state, "ping": "error"}

    def session(self) -> Session:
        return Session(self.engine, expire_on_commit=False)

    def dispose(self) -> None:
        self.engine.dispose()
        self.connected = False
        logger.info("Disconnected from the store.")


def get_database(request: Request) -> Database:
    """FastAPI dependency returning the store handle owned by the lifespan."""
    return request.app.state.database


def get_session(request: Request) -> Generator[Session, None, None]:
    """FastAPI dependency to provide a database session."""
    with get_database(request).session() as session:
        yield session
