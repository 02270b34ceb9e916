"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from __future__ import annotations

from enum import StrEnum
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseRetentionPolicy(StrEnum):
    """What happens to a tenant's physical database when the tenant is deleted."""

    RETAIN = "retain"
    DROP = "drop"
    ARCHIVE = "archive"


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    The same server hosts the control-plane database (tenant registry) and
    one isolated database per tenant.

    Environment variables:
        CARRENTAL_DB_DRIVER: "postgresql" or "sqlite" (default: postgresql)
        CARRENTAL_DB_HOST: Database host (default: localhost)
        CARRENTAL_DB_PORT: Database port (default: 5432)
        CARRENTAL_DB_DATABASE: Control-plane database name (default: car_rental)
        CARRENTAL_DB_USERNAME: Database user (default: postgres)
        CARRENTAL_DB_PASSWORD: Database password (required in production)
        CARRENTAL_DB_SQLITE_DIRECTORY: Directory holding SQLite database files
        CARRENTAL_DB_POOL_MIN_CONNECTIONS: Control-plane pool minimum (default: 2)
        CARRENTAL_DB_POOL_MAX_CONNECTIONS: Control-plane pool maximum (default: 10)
        CARRENTAL_DB_TENANT_POOL_MIN_CONNECTIONS: Per-tenant pool minimum (default: 1)
        CARRENTAL_DB_TENANT_POOL_MAX_CONNECTIONS: Per-tenant pool maximum (default: 5)
        CARRENTAL_DB_POOL_RECYCLE_SECONDS: Maximum connection lifetime (default: 3600)
        CARRENTAL_DB_POOL_TIMEOUT_SECONDS: Checkout wait when a pool is exhausted (default: 30)
        CARRENTAL_DB_CONNECT_TIMEOUT_SECONDS: Connectivity check timeout (default: 5)
    """

    model_config = SettingsConfigDict(
        env_prefix="CARRENTAL_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    driver: Literal["postgresql", "sqlite"] = Field(
        default="postgresql", description="Database backend"
    )
    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="car_rental", description="Control-plane database")
    username: str = Field(default="postgres", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    sqlite_directory: Path = Field(
        default=Path("./data"),
        description="Directory for SQLite database files",
    )
    pool_min_connections: int = Field(
        default=2,
        description="Minimum connections in the control-plane pool",
        ge=1,
        le=100,
    )
    pool_max_connections: int = Field(
        default=10,
        description="Maximum connections in the control-plane pool",
        ge=1,
        le=100,
    )
    tenant_pool_min_connections: int = Field(
        default=1,
        description="Connections kept idle in each tenant pool",
        ge=1,
        le=50,
    )
    tenant_pool_max_connections: int = Field(
        default=5,
        description="Maximum connections in each tenant pool",
        ge=1,
        le=50,
    )
    pool_recycle_seconds: int = Field(
        default=3600,
        description="Connections older than this are replaced on checkout",
        ge=1,
    )
    pool_timeout_seconds: float = Field(
        default=30.0,
        description="How long a checkout waits on an exhausted pool",
        gt=0,
    )
    connect_timeout_seconds: float = Field(
        default=5.0,
        description="Timeout for the connectivity check of a new tenant pool",
        gt=0,
    )

    @model_validator(mode="after")
    def validate_pool_settings(self) -> "DatabaseSettings":
        """Validate pool max >= min for both pool kinds."""
        if self.pool_max_connections < self.pool_min_connections:
            raise ValueError(
                f"pool_max_connections ({self.pool_max_connections}) must be >= "
                f"pool_min_connections ({self.pool_min_connections})"
            )
        if self.tenant_pool_max_connections < self.tenant_pool_min_connections:
            raise ValueError(
                f"tenant_pool_max_connections ({self.tenant_pool_max_connections}) "
                f"must be >= tenant_pool_min_connections "
                f"({self.tenant_pool_min_connections})"
            )
        return self

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        if self.driver == "sqlite":
            return f"sqlite:///{self.sqlite_directory / self.database}.db"
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class AuthSettings(BaseSettings):
    """Bearer token verification settings.

    Environment variables:
        CARRENTAL_AUTH_JWT_SECRET: HMAC secret shared with the token issuer
        CARRENTAL_AUTH_JWT_ALGORITHM: Signing algorithm (default: HS256)
        CARRENTAL_AUTH_SUPER_ADMIN_ROLE: Role allowed on admin routes
    """

    model_config = SettingsConfigDict(
        env_prefix="CARRENTAL_AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    jwt_secret: SecretStr = Field(
        default=SecretStr("dev-secret-key-change-in-production"),
        description="HMAC secret for bearer tokens",
    )
    jwt_algorithm: Literal["HS256", "HS384", "HS512"] = Field(
        default="HS256", description="Token signing algorithm"
    )
    super_admin_role: str = Field(
        default="super_admin", description="Role required for platform administration"
    )


class TenancySettings(BaseSettings):
    """Tenant routing and lifecycle settings.

    Environment variables:
        CARRENTAL_TENANCY_DEFAULT_SUBDOMAIN: Fallback when the Host has no subdomain
        CARRENTAL_TENANCY_PLATFORM_SUBDOMAIN: Platform tenant hidden from listings
        CARRENTAL_TENANCY_DATABASE_PREFIX: Prefix of tenant database names
        CARRENTAL_TENANCY_RETENTION_POLICY: retain | drop | archive (default: retain)
        CARRENTAL_TENANCY_RESOLUTION_TIMEOUT_SECONDS: Deadline for tenant resolution
        CARRENTAL_TENANCY_CREATE_CONTROL_PLANE_SCHEMA: Create registry table at startup
    """

    model_config = SettingsConfigDict(
        env_prefix="CARRENTAL_TENANCY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_subdomain: str = Field(default="default", min_length=1)
    platform_subdomain: str = Field(default="admin", min_length=1)
    database_prefix: str = Field(
        default="tenant_",
        pattern=r"^[a-z_][a-z0-9_]*$",
        description="Prefix of tenant database names",
    )
    retention_policy: DatabaseRetentionPolicy = Field(
        default=DatabaseRetentionPolicy.RETAIN,
        description="Fate of a deleted tenant's database",
    )
    resolution_timeout_seconds: float = Field(default=10.0, gt=0)
    create_control_plane_schema: bool = Field(
        default=True,
        description="Create the tenant registry table on startup if missing",
    )


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_prefix="CARRENTAL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(default="Car Rental API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    tenancy: TenancySettings = Field(default_factory=TenancySettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
