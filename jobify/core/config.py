# jobify/core/config.py
from typing import Optional
from pydantic import AnyUrl
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # App
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"
    SECRET_KEY: str = "change-me"  # override in .env / secrets
    CORS_ORIGINS: str = "*"

    # Auth
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    ACCESS_COOKIE_EXPIRE_DAYS: int = 1
    COOKIE_SECURE: bool = False

    # MongoDB
    MONGODB_URI: str = "mongodb://localhost:27017/jobify"
    MONGODB_DB: str = "jobify"

    # S3 / R2 / MinIO for resumes
    S3_BUCKET: Optional[str] = None
    S3_ENDPOINT: Optional[AnyUrl] = None
    S3_REGION: Optional[str] = None
    S3_ACCESS_KEY: Optional[str] = None
    S3_SECRET_KEY: Optional[str] = None
    # public bucket / CDN prefix; presigned GET urls are used when unset
    S3_PUBLIC_BASE_URL: Optional[str] = None
    RESUME_PREFIX: str = "jobify_profile_resumes"
    LOCAL_UPLOAD_DIR: str = "uploads"

    RESUME_MAX_BYTES: int = 5 * 1024 * 1024
    RESUME_ALLOWED_EXTENSIONS: str = ".pdf,.doc,.docx"

    # SMTP
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USER: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    SMTP_FROM: Optional[str] = None
    SMTP_USE_TLS: bool = True
    SMTP_TIMEOUT_SEC: int = 10
    MAIL_SENDER_NAME: str = "Jobify"

    # When true, employers may only edit/delete their own postings and job
    # seekers may only withdraw their own applications.
    ENFORCE_OWNERSHIP: bool = False

    # Pagination
    DEFAULT_PAGE_LIMIT: int = 10
    MAX_PAGE_LIMIT: int = 100

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def resume_extensions(self) -> tuple[str, ...]:
        exts = []
        for raw in self.RESUME_ALLOWED_EXTENSIONS.split(","):
            raw = raw.strip().lower()
            if raw:
                exts.append(raw if raw.startswith(".") else f".{raw}")
        return tuple(exts)

# single shared settings instance
settings = Settings()
