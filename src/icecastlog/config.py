"""Configuration via pydantic-settings — 12-factor app style."""
from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """icecastlog configuration — loaded from env vars / .env file."""

    default_format: str = Field(default="access", description="Log format (access|playlist)")
    encoding: str = Field(default="utf-8", description="Encoding used to decode input bytes")
    chunk_size: int = Field(default=65536, description="Bytes read per chunk from files/stdin")
    max_line_length: int = Field(default=0, description="Max unterminated line length (0 = unbounded)")
    flush_on_finish: bool = Field(default=False, description="Parse a trailing unterminated line at EOF")
    log_level: str = Field(default="WARNING", description="Logging level for the CLI")

    class Config:
        env_prefix = "ICECASTLOG_"
        env_file = ".env"


settings = Settings()
