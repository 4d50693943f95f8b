from typing import Optional

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # Store Connection
    DATABASE_URL: str = "sqlite:///./intellisource.db"
    DB_MAX_RETRIES: int = 5
    DB_RETRY_BASE_DELAY: float = 0.5
    DB_OPERATION_TIMEOUT: int = 10

    # HTTP Listener
    HOST: str = "0.0.0.0"
    PORT: int = 3007
    CORS_ORIGIN: str = "*"
    SHUTDOWN_GRACE_SECONDS: int = 30

    LOG_LEVEL: str = "INFO"

    #AI Service API Details
    GEMINI_API_KEY: Optional[str] = None
    GEMINI_MODEL: str = "gemini-2.5-flash"

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def cors_origins(self) -> list[str]:
        """Splits the comma separated CORS_ORIGIN value."""
        return [o.strip() for o in self.CORS_ORIGIN.split(",") if o.strip()]

settings = Settings()
