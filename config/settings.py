"""
Settings Configuration
Pydantic-validated runtime settings, loaded from the environment or a .env file.
"""
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class LoopSettings(BaseSettings):
    """Refinement loop tuning"""
    max_passes: int = Field(default=20, description="Pass budget per category run")
    adjustment_step: float = Field(default=0.05, description="Base nudge size for the adjustor")
    deadline_seconds: Optional[float] = Field(default=None, description="Optional wall-clock budget per run")

    class Config:
        env_prefix = "CURATION_LOOP_"


class CatalogSettings(BaseSettings):
    """Category defaults source"""
    path: Optional[str] = Field(default=None, description="JSON file with scoring weights, penalties and categories")
    default_category: str = Field(default="technology", description="Fallback profile for unknown categories")

    class Config:
        env_prefix = "CURATION_CATALOG_"


class LoggingSettings(BaseSettings):
    """Logging output"""
    level: str = Field(default="INFO", description="Log level name")
    use_rich: bool = Field(default=True, description="Use Rich console output")
    file: Optional[str] = Field(default=None, description="Optional log file name under logs/")

    class Config:
        env_prefix = "CURATION_LOG_"


class OrchestratorSettings(BaseSettings):
    """Multi-category orchestration"""
    max_workers: int = Field(default=4, description="Concurrent category loops")
    candidate_limit: int = Field(default=50, description="Shortlist size handed to the loop")
    min_new_item_total: float = Field(default=0.5, description="Total score a new item needs to trigger a refresh")

    class Config:
        env_prefix = "CURATION_ORCHESTRATOR_"


class Settings(BaseSettings):
    """Top-level settings aggregating every section"""

    loop: LoopSettings = Field(default_factory=LoopSettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    orchestrator: OrchestratorSettings = Field(default_factory=OrchestratorSettings)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @classmethod
    def load_from_env_file(cls, env_path: Optional[Path] = None) -> "Settings":
        """Load settings after applying the given .env file"""
        if env_path is None:
            # Defaults to config/.env
            env_path = Path(__file__).parent / ".env"

        if env_path.exists():
            from dotenv import load_dotenv
            load_dotenv(env_path)

        return cls(
            loop=LoopSettings(),
            catalog=CatalogSettings(),
            logging=LoggingSettings(),
            orchestrator=OrchestratorSettings(),
        )


@lru_cache()
def get_settings() -> Settings:
    """Cached settings singleton"""
    return Settings.load_from_env_file()


def get_loop_settings() -> LoopSettings:
    return get_settings().loop


def get_catalog_settings() -> CatalogSettings:
    return get_settings().catalog


def get_logging_settings() -> LoggingSettings:
    return get_settings().logging


def get_orchestrator_settings() -> OrchestratorSettings:
    return get_settings().orchestrator
