"""
Application configuration with Pydantic Settings for validation and type safety.
Supports environment-specific configurations and .env file loading.
"""

from enum import Enum
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator


class Environment(str, Enum):
    """Application environment types"""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class InvalidationStrategy(str, Enum):
    """How recipe writes clear cached results"""

    FAMILY = "family"
    GLOBAL = "global"


class Settings(BaseSettings):
    """
    Application settings with validation.
    Settings are loaded from environment variables or .env file.
    """

    # Application settings
    app_name: str = Field(default="PantryChef", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: Environment = Field(
        default=Environment.DEVELOPMENT, description="Application environment"
    )
    debug: bool = Field(default=False, description="Debug mode")

    # Server settings
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, ge=1, le=65535, description="Server port")

    # Database settings
    database_url: str = Field(
        default="postgresql+psycopg2://user@localhost:5432/pantrychef",
        description="Catalog store connection URL",
    )
    db_echo: bool = Field(default=False, description="SQLAlchemy echo SQL statements")
    db_init_attempts: int = Field(
        default=8, ge=1, description="Database initialization retry attempts"
    )
    db_init_delay_sec: float = Field(
        default=2.0, ge=0, description="Delay between DB init attempts"
    )

    # Cache settings (seconds)
    cache_max_entries: int = Field(
        default=10000, ge=1, description="Maximum entries held by the in-memory cache"
    )
    search_cache_ttl: int = Field(default=300, ge=1, description="Ranked search TTL")
    profile_cache_ttl: int = Field(default=3600, ge=1, description="Diet profile TTL")
    similar_cache_ttl: int = Field(default=3600, ge=1, description="Similar meals TTL")
    detail_cache_ttl: int = Field(default=3600, ge=1, description="Dish detail TTL")
    ingredient_cache_ttl: int = Field(default=7200, ge=1, description="Ingredient TTL")
    autocomplete_cache_ttl: int = Field(
        default=1800, ge=1, description="Ingredient autocomplete TTL"
    )
    trending_cache_ttl: int = Field(default=300, ge=1, description="Trending meals TTL")
    recipe_invalidation_strategy: InvalidationStrategy = Field(
        default=InvalidationStrategy.FAMILY,
        description="'family' clears recipe key families, 'global' flushes the whole cache",
    )

    # Pagination
    default_page_size: int = Field(default=20, ge=1, le=100)
    max_page_size: int = Field(default=100, ge=1)

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(
        default="%(asctime)s %(levelname)s %(name)s: %(message)s",
        description="Log format string",
    )

    # CORS settings
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:8000"],
        description="Allowed CORS origins",
    )
    cors_allow_credentials: bool = Field(
        default=True, description="Allow CORS credentials"
    )
    cors_allow_methods: list[str] = Field(
        default=["*"], description="Allowed HTTP methods"
    )
    cors_allow_headers: list[str] = Field(
        default=["*"], description="Allowed HTTP headers"
    )

    # API settings
    api_prefix: str = Field(default="", description="API route prefix")
    api_title: str = Field(
        default="PantryChef API", description="API documentation title"
    )
    api_description: str = Field(
        default="Pantry-driven meal and recipe search with dietary filtering",
        description="API documentation description",
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v):
        """Validate and normalize environment value"""
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    @field_validator("recipe_invalidation_strategy", mode="before")
    @classmethod
    def validate_strategy(cls, v):
        if isinstance(v, str):
            return InvalidationStrategy(v.lower())
        return v

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.environment == Environment.PRODUCTION

    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.environment == Environment.DEVELOPMENT

    def is_testing(self) -> bool:
        """Check if running in testing environment"""
        return self.environment == Environment.TESTING


# Global settings instance
settings = Settings()
