# service/config.py

from pydantic_settings import BaseSettings
from typing import Optional
from pathlib import Path


class Settings(BaseSettings):
    """Service configuration"""

    # App settings
    app_name: str = "CV Matrix Service"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Paths
    project_root: str = "."
    data_dir: str = "data"
    log_dir: str = "logs"
    log_level: str = "INFO"

    # Variant generation (unset = unseeded)
    variant_seed: Optional[int] = None

    class Config:
        env_file = ".env"
        env_prefix = "CV_"
        case_sensitive = False

    @property
    def data_path(self) -> Path:
        return Path(self.project_root) / self.data_dir

    @property
    def log_path(self) -> Path:
        return Path(self.project_root) / self.log_dir


settings = Settings()
