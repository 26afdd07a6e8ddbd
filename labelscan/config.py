"""Environment configuration."""

from typing import Literal, Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Which multimodal backend analyzes the images
    ai_provider: Literal["anthropic", "gemini"] = "anthropic"
    anthropic_api_key: Optional[str] = None
    gemini_api_key: Optional[str] = None

    # LLM settings
    model: str = "claude-sonnet-4-5-20250929"
    gemini_model: str = "gemini-2.5-flash"
    max_tokens: int = 8192
    request_timeout: float = 120.0

    # Batch limits
    max_batch_size: int = 10
    max_image_bytes: int = 5 * 1024 * 1024
    max_total_bytes: int = 20 * 1024 * 1024

    # Scan history
    history_db_path: str = "labelscan.db"
    history_key: str = "label_scan_history_v1"
    history_limit: int = 50

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }


def get_settings() -> Settings:
    """Get application settings."""
    return Settings()
