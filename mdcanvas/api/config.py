"""
config.py — Environment configuration for the API.

Values come from environment variables, after an optional .env file at the
project root has been loaded into os.environ.
"""

import os
from functools import lru_cache
from pathlib import Path

from mdcanvas.dsl.schema import LayoutConfig


# Load .env file if it exists
def _load_dotenv():
    env_path = Path(__file__).parent.parent.parent / ".env"
    if env_path.exists():
        with open(env_path) as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#") and "=" in line:
                    key, value = line.split("=", 1)
                    key = key.strip()
                    value = value.strip()
                    if key and value and key not in os.environ:
                        os.environ[key] = value

_load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        # Application
        self.app_name: str = os.environ.get("APP_NAME", "mdcanvas")
        self.app_version: str = os.environ.get("APP_VERSION", "1.0.0")
        self.debug: bool = os.environ.get("DEBUG", "false").lower() == "true"
        self.api_prefix: str = os.environ.get("API_PREFIX", "/api/v1")
        self.log_level: str = os.environ.get("LOG_LEVEL", "INFO").upper()

        # CORS settings
        self.cors_origins: list = os.environ.get(
            "CORS_ORIGINS",
            "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"
        ).split(",")

        # Canvas
        self.canvas_width: float = float(os.environ.get("CANVAS_WIDTH", "1080"))
        self.canvas_height: float = float(os.environ.get("CANVAS_HEIGHT", "1440"))
        self.canvas_padding: float = float(os.environ.get("CANVAS_PADDING", "100"))

        # Editor
        self.split_level: int = int(os.environ.get("SPLIT_LEVEL", "2"))
        self.snap_threshold: float = float(os.environ.get("SNAP_THRESHOLD", "8"))
        self.history_capacity: int = int(os.environ.get("HISTORY_CAPACITY", "50"))

    def layout_config(self) -> LayoutConfig:
        """Canvas geometry for new documents."""
        return LayoutConfig(
            canvas_width=self.canvas_width,
            canvas_height=self.canvas_height,
            padding=self.canvas_padding,
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
