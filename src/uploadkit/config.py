"""
Application settings for the uploadkit server and CLI
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Storage backend selection and credentials live in
    ``uploadkit.storage.config.StorageSettings``; this class only covers the
    process around it (logging, HTTP server, upload limits).
    """

    # API Settings
    api_host: str = "0.0.0.0"
    api_port: int = 8088
    api_reload: bool = False
    cors_origins: list[str] = ["http://localhost:4200"]

    # Environment
    environment: str = "development"  # 'development', 'staging', 'production'
    debug: bool = False
    log_level: str = "INFO"

    # File Upload Settings
    max_upload_size: int = 100 * 1024 * 1024  # 100MB

    class Config:
        env_file = ".env"
        env_prefix = "UPLOADKIT_"
        case_sensitive = False
        extra = "ignore"


# Global settings instance
settings = Settings()
