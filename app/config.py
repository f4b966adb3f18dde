"""Settings for the billing API and its client, read from the environment and .env"""

from typing import List
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "Book Billing Backend"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    API_V1_PREFIX: str = "/api/v1"
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Database: postgresql:// is switched to asyncpg, sqlite+aiosqlite for local runs
    DATABASE_URL: str = "sqlite+aiosqlite:///./book_billing.db"
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 3600

    # CORS, comma separated
    ALLOWED_ORIGINS: str = "http://localhost:3000,http://localhost:3001"
    ALLOWED_METHODS: str = "GET,POST,PUT,DELETE,OPTIONS"
    ALLOWED_HEADERS: str = "*"

    # Billing
    BILL_NUMBER_PREFIX: str = "BILL-"
    CURRENCY_SYMBOL: str = "Rs."

    # BillingClient
    API_BASE_URL: str = "http://localhost:8000/api/v1"
    CLIENT_TIMEOUT_SECONDS: float = 10.0
    API_TOKEN: str = ""

    # Payment endpoints are rate limited per client address
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_PER_MINUTE: int = 60

    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("ALLOWED_ORIGINS", "ALLOWED_METHODS", "ALLOWED_HEADERS")
    @classmethod
    def split_csv(cls, v: str) -> List[str]:
        return [item.strip() for item in v.split(",") if item.strip()]

    @field_validator("BILL_NUMBER_PREFIX")
    @classmethod
    def prefix_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("BILL_NUMBER_PREFIX cannot be blank")
        return v.strip()

    @field_validator("CLIENT_TIMEOUT_SECONDS")
    @classmethod
    def timeout_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("CLIENT_TIMEOUT_SECONDS must be greater than 0")
        return v

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    @property
    def rate_limit(self) -> str:
        """slowapi limit string, e.g. "60/minute" """
        return f"{self.RATE_LIMIT_PER_MINUTE}/minute"


settings = Settings()
