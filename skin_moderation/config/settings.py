from typing import Optional, Any
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import PostgresDsn, ValidationInfo, field_validator, Field
from pathlib import Path

# Define the root directory of the skin_moderation package
SERVICE_ROOT_DIR = Path(__file__).parent.parent.resolve()
# Path to the repository root (two levels up from this settings.py)
PROJECT_ROOT_DIR = SERVICE_ROOT_DIR.parent

class Settings(BaseSettings):
    # Application settings
    APP_NAME: str = "SkinModerationService"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False

    # Metadata store (skins + internet_archive_items tables)
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "user"
    DB_PASSWORD: str = "password"
    DB_NAME: str = "skins_db"
    DATABASE_URL: Optional[str] = Field(default=None, validate_default=True)

    @field_validator("DATABASE_URL", mode='before')
    @classmethod
    def assemble_db_connection(cls, v: Optional[str], values: ValidationInfo) -> Any:
        if isinstance(v, str):
            return v
        db_user = values.data.get("DB_USER")
        db_password = values.data.get("DB_PASSWORD")
        db_host = values.data.get("DB_HOST")
        db_port = values.data.get("DB_PORT")
        db_name = values.data.get("DB_NAME")

        return str(PostgresDsn.build(
            scheme="postgresql+asyncpg",
            username=db_user,
            password=db_password,
            host=db_host,
            port=int(db_port),
            path=db_name or "",
        ))

    # Object-storage mirror (moderation marker objects)
    S3_ENDPOINT_URL: Optional[str] = None  # None means AWS
    S3_REGION: str = "us-east-1"
    S3_ACCESS_KEY: Optional[str] = None
    S3_SECRET_KEY: Optional[str] = None
    MIRROR_BUCKET: str = "webamp-uploaded-skins"
    MIRROR_APPROVED_PREFIX: str = "approved/"
    MIRROR_REJECTED_PREFIX: str = "rejected/"
    MIRROR_TWEETED_PREFIX: str = "tweeted/"

    # Public asset links
    SKIN_BUCKET_URL: str = "https://s3.amazonaws.com/webamp-uploaded-skins"
    WEBAMP_ORIGIN: str = "https://webamp.org"
    ARCHIVE_ORIGIN: str = "https://archive.org"

    # Reconciliation
    RECONCILE_MAX_CONCURRENCY: int = 50

    # Logging configuration path (can be overridden by env var)
    LOGGING_CONFIG_PATH: str = str(SERVICE_ROOT_DIR / "config" / "logging_config.yaml")

    # Monitoring
    ENABLE_PROMETHEUS: bool = False
    PROMETHEUS_PORT: int = 8002

    model_config = SettingsConfigDict(
        env_file=str(PROJECT_ROOT_DIR / ".env"),  # Load variables from project root .env
        env_file_encoding='utf-8',
        extra='ignore'
    )

# Instantiate settings
settings = Settings()
