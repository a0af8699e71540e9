"""Configuration module for the CloudCoffee manager backend."""

from pathlib import Path
from typing import List
from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Vertex AI
    google_cloud_project: str = Field(default="", env="GOOGLE_CLOUD_PROJECT")
    google_cloud_location: str = Field(default="global", env="GOOGLE_CLOUD_LOCATION")
    text_model: str = Field(default="gemini-2.5-flash", env="TEXT_MODEL")
    fallback_text_model: str = Field(default="gemini-2.0-flash", env="FALLBACK_TEXT_MODEL")
    image_model: str = Field(default="gemini-2.0-flash-exp", env="IMAGE_MODEL")

    # Server Configuration
    host: str = Field(default="0.0.0.0", env="HOST")
    port: int = Field(default=3001, env="PORT")
    debug: bool = Field(default=False, env="DEBUG")
    log_level: str = Field(default="INFO", env="LOG_LEVEL")

    # CORS Configuration
    allowed_origins: str = Field(
        default="http://localhost:5173,http://127.0.0.1:5173",
        env="ALLOWED_ORIGINS"
    )

    # Persistence
    data_dir: str = Field(default="data", env="DATA_DIR")
    enable_file_lock: bool = Field(default=True, env="ENABLE_FILE_LOCK")
    lock_expire_seconds: int = Field(default=30, env="LOCK_EXPIRE_SECONDS")

    # Base64 images travel inside JSON bodies
    max_body_bytes: int = Field(default=50 * 1024 * 1024, env="MAX_BODY_BYTES")

    # Built frontend bundle, served at / when present
    frontend_dist: str = Field(default="../dist", env="FRONTEND_DIST")

    @property
    def origins_list(self) -> List[str]:
        """Convert allowed_origins string to list."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    @property
    def frontend_dist_path(self) -> Path:
        return Path(self.frontend_dist)

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
        "extra": "ignore",
    }


# Global settings instance
settings = Settings()
