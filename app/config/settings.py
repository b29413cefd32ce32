
from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables (and `.env`).

    Read once at boot through `get_settings()`; every value has a default so
    the service starts in a bare development environment.
    """

    # API Configuration
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Mega Commerce API"
    PROJECT_DESCRIPTION: str = "Multi-tenant e-commerce backend: catalog, cart, orders, payments and engagement"
    VERSION: str = "1.0.0"

    # Application Settings
    DEBUG: bool = Field(False, description="Debug mode")
    ENVIRONMENT: str = Field("production", description="Runtime environment")
    CORS_ORIGINS: list[str] = Field(default=[], description="Extra allowed CORS origins")

    # PostgreSQL Database Settings
    DB_HOST: str = Field("localhost", description="PostgreSQL host")
    DB_PORT: int = Field(5432, description="PostgreSQL port")
    DB_NAME: str = Field("mega_commerce", description="Database name")
    DB_USER: str = Field("postgres", description="Database user")
    DB_PASSWORD: str | None = Field(None, description="Database password")
    DB_ECHO: bool = Field(False, description="Log SQL queries (debug only)")

    # Database connection pool settings
    DB_POOL_SIZE: int = Field(20, description="Connection pool size")
    DB_MAX_OVERFLOW: int = Field(30, description="Maximum pool overflow")
    DB_POOL_RECYCLE: int = Field(3600, description="Recycle connections every X seconds")
    DB_POOL_TIMEOUT: int = Field(30, description="Timeout to obtain a pooled connection")

    # Redis Settings
    REDIS_HOST: str = Field("localhost", description="Redis host")
    REDIS_PORT: int = Field(6379, description="Redis port")
    REDIS_DB: int = Field(0, description="Redis database")
    REDIS_PASSWORD: str | None = Field(None, description="Redis password")
    CACHE_ENABLED: bool = Field(True, description="Enable the Redis read cache")
    CACHE_DEFAULT_TTL: int = Field(300, description="Default cache TTL in seconds")

    # JWT Settings
    JWT_ACCESS_SECRET: str = Field("change-me-access-secret", description="Secret for access tokens")
    JWT_REFRESH_SECRET: str = Field("change-me-refresh-secret", description="Secret for refresh tokens")
    JWT_ALGORITHM: str = Field("HS256", description="JWT signing algorithm")
    JWT_ACCESS_EXPIRES_MINUTES: int = Field(1440, description="Access token lifetime in minutes")
    JWT_REFRESH_EXPIRES_DAYS: int = Field(7, description="Refresh token lifetime in days")
    BCRYPT_SALT_ROUNDS: int = Field(12, description="bcrypt cost factor")

    # Pagination
    DEFAULT_PAGE: int = Field(1, description="Default page number")
    DEFAULT_LIMIT: int = Field(10, description="Default page size")
    MAX_LIMIT: int = Field(100, description="Largest page size a client may request")

    # Request limits
    MAX_BODY_SIZE: int = Field(10 * 1024 * 1024, description="Maximum request body size in bytes (10MB)")

    # Background jobs
    NOTIFICATION_SWEEP_ENABLED: bool = Field(True, description="Periodically delete old read notifications")
    NOTIFICATION_SWEEP_INTERVAL_HOURS: int = Field(24, description="Hours between notification sweeps")

    # SSLCommerz
    SSLCOMMERZ_STORE_ID: str = Field("testbox", description="SSLCommerz store id")
    SSLCOMMERZ_STORE_PASSWORD: str = Field("qwerty", description="SSLCommerz store password")
    SSLCOMMERZ_IS_LIVE: bool = Field(False, description="Use the SSLCommerz live endpoint")

    # bKash
    BKASH_APP_KEY: str | None = Field(None, description="bKash app key")
    BKASH_APP_SECRET: str | None = Field(None, description="bKash app secret")
    BKASH_USERNAME: str | None = Field(None, description="bKash username")
    BKASH_PASSWORD: str | None = Field(None, description="bKash password")
    BKASH_IS_LIVE: bool = Field(False, description="Use the bKash live endpoint")

    PAYMENT_GATEWAY_TIMEOUT: int = Field(30, description="Timeout for gateway HTTP calls in seconds")

    # Public URLs used for gateway callbacks and redirects
    FRONTEND_URL: str = Field("http://localhost:3000", description="Storefront base URL")
    BACKEND_URL: str = Field("http://localhost:8000", description="Public base URL of this API")

    # Business constants
    CURRENCY: str = Field("BDT", description="Store currency")
    FREE_SHIPPING_THRESHOLD: float = Field(5000, description="Order subtotal that ships free")
    STANDARD_SHIPPING_COST: float = Field(60, description="Flat standard shipping cost")
    EXPRESS_SHIPPING_COST: float = Field(150, description="Flat express shipping cost")

    # Sentry Configuration
    SENTRY_DSN: str | None = Field(default=None, description="Sentry DSN for error tracking")

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, value):
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("DB_POOL_SIZE")
    @classmethod
    def validate_pool_size(cls, v):
        if v < 1:
            raise ValueError("DB_POOL_SIZE must be at least 1")
        if v > 100:
            raise ValueError("DB_POOL_SIZE should not exceed 100")
        return v

    @field_validator("MAX_LIMIT")
    @classmethod
    def validate_max_limit(cls, v):
        if v < 1:
            raise ValueError("MAX_LIMIT must be at least 1")
        return v

    @computed_field
    @property
    def database_url(self) -> str:
        """PostgreSQL connection URL (sync driver, used by alembic)."""
        if self.DB_PASSWORD:
            return f"postgresql+psycopg://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        return f"postgresql+psycopg://{self.DB_USER}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    @computed_field
    @property
    def is_development(self) -> bool:
        return self.DEBUG or self.ENVIRONMENT.lower() in ["development", "dev", "local"]

    @computed_field
    @property
    def sslcommerz_base_url(self) -> str:
        if self.SSLCOMMERZ_IS_LIVE:
            return "https://securepay.sslcommerz.com"
        return "https://sandbox.sslcommerz.com"

    @computed_field
    @property
    def bkash_base_url(self) -> str:
        if self.BKASH_IS_LIVE:
            return "https://tokenized.pay.bka.sh/v1.2.0-beta"
        return "https://tokenized.sandbox.bka.sh/v1.2.0-beta"


# Settings singleton
_settings_instance = None


def get_settings() -> Settings:
    """
    Return the cached settings instance.

    Environment variables are parsed only on the first call.
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
