"""
Central configuration module for Gig Guide
Reads and validates environment variables with strict checks for production
"""
import os
import sys
from typing import List

# Load environment variables from .env file if it exists (dev only)
from dotenv import load_dotenv

if os.getenv("ENV", "dev").lower() == "dev":
    load_dotenv()


class Config:
    """Central configuration class with environment variable validation"""

    # Environment
    ENV: str = os.getenv("ENV", "dev").lower()

    # Required for all environments
    SECRET_KEY: str = os.getenv("SECRET_KEY", "")
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./gig_guide.db")

    PORT: int = int(os.getenv("PORT", "8000"))

    # Public URLs
    API_BASE_URL: str = os.getenv("API_BASE_URL", "http://localhost:8000")
    # Prefix for stored media paths; falls back to API_BASE_URL
    MEDIA_BASE_URL: str = os.getenv("MEDIA_BASE_URL", "")

    # CORS
    CORS_ORIGINS: List[str] = []

    # Uploads
    UPLOADS_ROOT: str = os.getenv("UPLOADS_ROOT", "./uploads")
    UPLOADS_URL_PREFIX: str = "/uploads"
    MAX_UPLOAD_MB: int = int(os.getenv("MAX_UPLOAD_MB", "10"))
    MAX_REQUEST_MB: int = int(os.getenv("MAX_REQUEST_MB", "2"))
    ALLOWED_IMAGE_EXTENSIONS: List[str] = [".jpg", ".jpeg", ".png", ".webp", ".gif"]

    # Auth
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "120"))
    BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "12"))

    # Paid features
    FEATURE_RECURRING_PERIOD_DAYS: int = int(os.getenv("FEATURE_RECURRING_PERIOD_DAYS", "30"))

    # Database pool (PostgreSQL only)
    DB_POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", "10"))
    DB_MAX_OVERFLOW: int = int(os.getenv("DB_MAX_OVERFLOW", "5"))
    DB_POOL_RECYCLE: int = int(os.getenv("DB_POOL_RECYCLE", "900"))
    DB_POOL_TIMEOUT: int = int(os.getenv("DB_POOL_TIMEOUT", "30"))
    DB_STATEMENT_TIMEOUT: int = int(os.getenv("DB_STATEMENT_TIMEOUT", "10000"))

    # Build version (set during build/deploy)
    BUILD_VERSION: str = os.getenv("BUILD_VERSION", "dev")
    BUILD_COMMIT: str = os.getenv("BUILD_COMMIT", "unknown")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    def __init__(self):
        """Initialize configuration and validate required variables"""
        self._load_cors_origins()
        self.errors = self._validate()
        self._report()

    def _load_cors_origins(self):
        """Load CORS origins from environment variable"""
        # Default origins for the Vite dev server
        default_origins = [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:3000",
        ]

        cors_env = os.getenv("CORS_ORIGINS", "")
        if cors_env:
            env_origins = [origin.strip() for origin in cors_env.split(",") if origin.strip()]
            self.CORS_ORIGINS = default_origins + env_origins
        else:
            self.CORS_ORIGINS = default_origins

    def _validate(self) -> List[str]:
        """Validate required configuration based on environment"""
        errors = []

        if self.ENV not in ["dev", "test", "staging", "prod"]:
            errors.append(f"Invalid ENV value: {self.ENV}. Must be 'dev', 'test', 'staging', or 'prod'")

        # SECRET_KEY is required for all environments
        if not self.SECRET_KEY:
            errors.append("SECRET_KEY is required but not set")
        elif len(self.SECRET_KEY) < 32:
            errors.append(f"SECRET_KEY must be at least 32 characters (current: {len(self.SECRET_KEY)})")

        # SQLite is only acceptable for local development and tests
        if not self.DATABASE_URL:
            errors.append("DATABASE_URL is required but not set")
        elif self.ENV in ["staging", "prod"] and not self.DATABASE_URL.startswith("postgresql"):
            errors.append(f"DATABASE_URL must be a PostgreSQL connection string in {self.ENV} (got: {self.DATABASE_URL[:30]}...)")

        if self.MAX_UPLOAD_MB <= 0:
            errors.append("MAX_UPLOAD_MB must be positive")

        if self.FEATURE_RECURRING_PERIOD_DAYS <= 0:
            errors.append("FEATURE_RECURRING_PERIOD_DAYS must be positive")

        # Public URLs must be HTTPS outside development
        if self.ENV in ["staging", "prod"]:
            if not self.API_BASE_URL.startswith("https://"):
                errors.append("API_BASE_URL must use HTTPS in staging/production")
            if self.MEDIA_BASE_URL and not self.MEDIA_BASE_URL.startswith("https://"):
                errors.append("MEDIA_BASE_URL must use HTTPS in staging/production")

        return errors

    def _report(self):
        """Fail fast in staging/prod, warn in dev"""
        if not self.errors:
            return

        if self.ENV in ["staging", "prod"]:
            print("=" * 60, file=sys.stderr)
            print("CONFIGURATION VALIDATION FAILED", file=sys.stderr)
            print("=" * 60, file=sys.stderr)
            for error in self.errors:
                print(f"  ❌ {error}", file=sys.stderr)
            print("=" * 60, file=sys.stderr)
            sys.exit(1)

        if self.ENV == "dev":
            print("=" * 60, file=sys.stderr)
            print("CONFIGURATION WARNINGS (dev mode - continuing)", file=sys.stderr)
            print("=" * 60, file=sys.stderr)
            for error in self.errors:
                print(f"  ⚠️  {error}", file=sys.stderr)
            print("=" * 60, file=sys.stderr)

    @property
    def is_dev(self) -> bool:
        """Check if running in development mode"""
        return self.ENV == "dev"

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    @property
    def media_base_url(self) -> str:
        """Base URL prepended to stored media paths"""
        return (self.MEDIA_BASE_URL or self.API_BASE_URL).rstrip("/")

    @property
    def max_upload_bytes(self) -> int:
        return self.MAX_UPLOAD_MB * 1024 * 1024

    @property
    def max_request_bytes(self) -> int:
        return self.MAX_REQUEST_MB * 1024 * 1024


# Create global config instance
config = Config()
