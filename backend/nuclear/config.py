"""
Application configuration from environment variables.
Loads .env from the backend directory so settings are found regardless of cwd.
"""
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# .env next to backend/ (parent of nuclear/); load explicitly so values are set even when run from repo root
_BACKEND_DIR = Path(__file__).resolve().parent.parent
_ENV_FILE = _BACKEND_DIR / ".env"

if _ENV_FILE.exists():
    from dotenv import load_dotenv
    load_dotenv(_ENV_FILE, override=False)
else:
    # Fallback: try backend/.env relative to cwd (e.g. when running from repo root)
    import os
    _cwd_env = Path(os.getcwd()) / "backend" / ".env"
    if _cwd_env.exists():
        from dotenv import load_dotenv
        load_dotenv(_cwd_env, override=False)


class Settings(BaseSettings):
    """Load and validate config from env."""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE if _ENV_FILE.exists() else None,
        env_file_encoding="utf-8",
        extra="ignore",  # the frontend shares the .env; ignore its NEXT_PUBLIC_* vars
    )

    # Database: sqlite for local work without Docker, postgresql for production
    database_url: str = "sqlite:///./nuclear_dev.db"

    # Environment: set ENV=production in production; used to enforce SECRET_KEY.
    env: str = "development"

    # JWT shared with the identity provider (AUTH_SECRET on the frontend side).
    secret_key: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    jwt_expire_hours: int = 24

    # CORS: comma-separated origins. app_url is used when none are given.
    cors_origins: str = ""
    app_url: str = "http://localhost:3000"

    # Listing endpoints
    default_page_size: int = 10
    max_page_size: int = 100

    # Mutating requests per user per window (POST/PUT/PATCH/DELETE)
    rate_limit_requests: int = 60
    rate_limit_window_seconds: int = 60

    debug: bool = False

    @field_validator("default_page_size", "max_page_size", "rate_limit_requests", "rate_limit_window_seconds")
    @classmethod
    def _positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be at least 1")
        return v

    @property
    def is_production(self) -> bool:
        return (self.env or "").strip().lower() == "production"

    @property
    def allowed_origins(self) -> list[str]:
        """CORS origins from cors_origins, else the frontend app_url."""
        origins = [o.strip() for o in self.cors_origins.split(",") if o.strip()]
        return origins or [self.app_url]


settings = Settings()
