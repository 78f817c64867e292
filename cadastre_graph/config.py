"""
Configuration for cadastre-graph loaded from environment variables.
"""

from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Settings loaded from environment (prefix CADASTRE_)."""

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    # Graph construction
    use_spatial_index: bool = True
    check_validity: bool = False  # abort on shapes shapely reports invalid
    progress_log_every: int = 10  # percent

    # Exchange suggestions
    skip_equal_area: bool = False
    default_max_suggestions: int = 10

    class Config:
        env_prefix = "CADASTRE_"
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
