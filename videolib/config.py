# /videolib/config.py
import sys
from pathlib import Path
from functools import lru_cache
from typing import ClassVar, Literal, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from loguru import logger

class APIConfig(BaseSettings):
    # Generic
    APP_NAME: ClassVar[str] = "Video Library"
    APP_VERSION: ClassVar[str] = "v1.0"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # Local storage
    # Relative to the working directory the server is started from
    DATA_DIR: Path = Path("data")
    UPLOAD_DIR: Optional[Path] = None
    METADATA_FILE: Optional[Path] = None
    UPLOADS_PREFIX: ClassVar[str] = "uploads"

    # Remote storage (pre-signed container URL, optional)
    AZURE_CONTAINER_SAS_URL: Optional[str] = None
    AZURE_BLOB_API_VERSION: str = "2022-11-02"
    REMOTE_TIMEOUT_S: float = 60.0

    # Upload constants
    MAX_UPLOAD_BYTES: ClassVar[int] = 50 * 1024 * 1024
    DEFAULT_FOLDER: ClassVar[str] = "Unsorted"

    # Other
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # pydantic-settings v2 main settings config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def upload_dir(self) -> Path:
        return self.UPLOAD_DIR or self.DATA_DIR / "uploads"

    @property
    def metadata_file(self) -> Path:
        return self.METADATA_FILE or self.DATA_DIR / "videos.json"

@lru_cache()
def get_api_config() -> APIConfig:
    return APIConfig()

def configure_logging(level: str = "INFO") -> None:
    logger.remove()
    logger.add(
        sys.stdout,
        level=level,
        filter=lambda rec: rec["level"].name == "CRITICAL",
        colorize=True,
        format="<green>{time:HH:mm:ss}</green> | <red>{level: <8}</red> | <white>{message}</white>",
    )
    logger.add(
        sys.stdout,
        level=level,
        filter=lambda rec: rec["level"].name != "CRITICAL",
        colorize=True,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{message}</cyan>",
    )

# Logger
configure_logging(get_api_config().LOG_LEVEL)
