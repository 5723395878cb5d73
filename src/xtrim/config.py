"""Configuration management for Xtrim."""

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Local storage
    storage_path: str = "./data"
    media_db_name: str = "xtrim-media-db"
    media_db_version: int = 1
    media_store_name: str = "media-blobs"
    max_file_size: int = 500 * 1024 * 1024  # 500MB
    session_dir: Optional[str] = None  # None means a fresh temp dir per process

    # Metadata probing
    probe_timeout: float = 10.0
    thumbnail_timeout: float = 15.0
    thumbnail_seek_seconds: float = 1.0
    thumbnail_quality: int = 80
    thumbnail_max_size: int = 480

    # Projects
    projects_storage_prefix: str = "xtrim_projects"
    current_user_key: str = "xtrim_current_user_id"
    draft_storage_key: str = "xtrim_media_draft"
    default_project_name: str = "Untitled Project"

    # Development
    debug: bool = False
    log_level: str = "INFO"

    # Model configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra fields in .env file
    )

    @property
    def media_db_path(self) -> str:
        """Directory holding the versioned media blob database."""
        return f"{self.storage_path}/{self.media_db_name}/v{self.media_db_version}"


# Global settings instance
settings = Settings()
