"""Application configuration using Pydantic settings."""

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Project root directory
BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Application settings loaded from LABYRINTH_* environment variables."""

    model_config = SettingsConfigDict(
        env_file=os.path.join(BASE_DIR, ".env"),
        env_file_encoding="utf-8",
        env_prefix="LABYRINTH_",
        case_sensitive=False,
    )

    # Application
    app_name: str = "Labyrinth"
    app_version: str = "1.0.0"
    debug: bool = False  # render the maze after every move

    # Server (Daedalus)
    host: str = "127.0.0.1"
    port: int = 8001
    rate_limit_sessions: int = 600  # new mazes per minute per client

    # Maze generation
    width: int = Field(15, gt=0)
    height: int = Field(10, gt=0)
    braid: float = 0.0
    seed: Optional[int] = None

    # Solver (Icarus)
    times: int = Field(1, gt=0)
    api_url: Optional[str] = None
    request_timeout: float = 10.0

    @field_validator("braid")
    @classmethod
    def validate_braid(cls, v: float) -> float:
        """Braid is a probability."""
        if not 0.0 <= v <= 1.0:
            raise ValueError("BRAID must be between 0 and 1")
        return v

    @property
    def server_url(self) -> str:
        """Base URL Icarus uses to reach Daedalus."""
        if self.api_url:
            return self.api_url.rstrip("/")
        return f"http://{self.host}:{self.port}"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
