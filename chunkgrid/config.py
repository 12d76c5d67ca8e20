"""Process configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    chunkgrid_log_level: str = "info"

    # Where chunks.png and chunks.litematic are written
    chunkgrid_out_dir: str = "out"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()
