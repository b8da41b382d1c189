# Configuration management

from pydantic_settings import BaseSettings  # type: ignore
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    # Google Cloud Storage
    gcs_key_filename: Optional[str] = None  # None = application default credentials
    gcs_bucket: str = ""
    signed_url_version: str = "v4"  # v2 or v4

    # Drives
    default_disk: str = "gcs"
    local_storage_path: str = "./storage"
    download_dir: str = "tmp"

    # Application
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    debug: bool = False
    log_level: str = "INFO"
    log_json: bool = True

    # Observability
    metrics_enabled: bool = True

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    return Settings()
