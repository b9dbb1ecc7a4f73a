"""Application configuration using Pydantic settings."""

from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore")

    service_name: str = "gcgraph"
    service_host: str = "localhost"
    service_port: int = 8088
    log_level: str = "INFO"

    # Chart geometry in pixels
    canvas_width: int = 600
    canvas_height: int = 400

    # Sampling configuration
    metric_source: str = "gc"
    sample_clock: str = "wall"
    sample_interval_seconds: float = 0.1
    store_capacity: int = 10000

    # Rendering and long-poll pacing
    render_window: int = 100
    poll_delay_seconds: float = 1.0
    initial_scale: float = 1.0
    scale_choices: List[int] = [1, 10, 100]


settings = Settings()
