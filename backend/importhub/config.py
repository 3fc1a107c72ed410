"""
importhub/config.py - Application configuration.

This module defines a Pydantic BaseSettings class to load configuration from environment
variables (or a `.env` file). All other modules can import `settings` from here; the
database engine itself is created by `importhub.database.Database` when the app starts.
"""
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""
    database_url: str = Field(
        "sqlite+aiosqlite:///./database/imports.db",
        description="SQLAlchemy async URL (DATABASE_URL)",
    )
    database_echo: bool = False
    create_tables: bool = Field(True, description="Create missing tables on startup")

    jwt_secret: str = Field(..., description="HS256 secret shared with the users service (JWT_SECRET)")
    jwt_algorithm: str = "HS256"

    allowed_origins: str = Field('*', description="Comma-separated list or '*' for all")

    import_code_max_attempts: int = Field(5, ge=1)
    dashboard_top_suppliers: int = Field(5, ge=1)

    debug: bool = False
    log_level: str = "INFO"
    imports_service_port: int = 3002

    @property
    def origins(self) -> List[str]:
        if not self.allowed_origins or self.allowed_origins.strip() == "*":
            return ["*"]
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


# Load settings from environment (.env file, etc.)
settings = Settings()
