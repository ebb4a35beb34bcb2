"""Application configuration"""

from pydantic_settings import BaseSettings
from pydantic import Field
from typing import Optional


class Settings(BaseSettings):
    """Application settings."""

    # API Configuration
    API_V1_PREFIX: str = "/api/v1"
    PROJECT_NAME: str = "UniShare"
    VERSION: str = "1.0.0"
    DESCRIPTION: str = "University resource sharing and messaging platform"

    # Security
    SECRET_KEY: str = Field(..., env="SECRET_KEY")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=60 * 24 * 7, env="ACCESS_TOKEN_EXPIRE_MINUTES")
    REFRESH_TOKEN_EXPIRE_DAYS: int = Field(default=30, env="REFRESH_TOKEN_EXPIRE_DAYS")
    ALGORITHM: str = "HS256"

    # Database
    DATABASE_URL: str = Field(default="sqlite:///./unishare.db", env="DATABASE_URL")

    # Redis (Celery broker for notification dispatch)
    REDIS_URL: str = Field(default="redis://localhost:6379", env="REDIS_URL")

    # Google OAuth
    GOOGLE_CLIENT_ID: Optional[str] = Field(default=None, env="GOOGLE_CLIENT_ID")

    # Email SMTP Configuration
    SMTP_HOST: str = Field(default="localhost", env="SMTP_HOST")
    SMTP_PORT: int = Field(default=587, env="SMTP_PORT")
    SMTP_USERNAME: Optional[str] = Field(default=None, env="SMTP_USERNAME")
    SMTP_PASSWORD: Optional[str] = Field(default=None, env="SMTP_PASSWORD")
    SMTP_USE_TLS: bool = Field(default=True, env="SMTP_USE_TLS")
    SMTP_TIMEOUT_SECONDS: int = Field(default=15, env="SMTP_TIMEOUT_SECONDS")
    FROM_EMAIL: str = Field(default="noreply@unishare.app", env="FROM_EMAIL")
    FROM_NAME: str = Field(default="UniShare", env="FROM_NAME")

    # Notification dispatch: "celery" (Redis queue) or "background" (in-process queue)
    NOTIFICATION_BACKEND: str = Field(default="celery", env="NOTIFICATION_BACKEND")

    # MinIO File Storage
    MINIO_ENDPOINT: str = Field(default="localhost:9000", env="MINIO_ENDPOINT")
    MINIO_ACCESS_KEY: str = Field(default="minioadmin", env="MINIO_ACCESS_KEY")
    MINIO_SECRET_KEY: str = Field(default="minioadmin", env="MINIO_SECRET_KEY")
    MINIO_BUCKET_NAME: str = Field(default="unishare-files", env="MINIO_BUCKET_NAME")
    MINIO_SECURE: bool = Field(default=False, env="MINIO_SECURE")  # Use HTTPS

    # CORS
    ALLOWED_HOSTS: list[str] = Field(default=["http://localhost:3000"], env="ALLOWED_HOSTS")

    # Application URLs
    FRONTEND_URL: str = Field(default="http://localhost:3000", env="FRONTEND_URL")

    # Development
    LOG_LEVEL: str = Field(default="INFO", env="LOG_LEVEL")
    DEBUG: bool = Field(default=False, env="DEBUG")
    TESTING: bool = Field(default=False, env="TESTING")
    ENVIRONMENT: str = Field(default="development", env="ENVIRONMENT")

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
