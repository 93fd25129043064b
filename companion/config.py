"""
Configuration for the emotion companion.
"""
from pydantic import BaseModel
import logging
import os


def _env_bool(name: str, default: str = "0") -> bool:
    return (os.getenv(name, default) or "").strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    """
    Runtime settings with environment-variable overrides.
    """
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./companion.db")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "DEBUG")

    HISTORY_LIMIT: int = int(os.getenv("HISTORY_LIMIT", "50"))
    INSIGHT_WINDOW: int = int(os.getenv("INSIGHT_WINDOW", "10"))
    UI_HISTORY_WINDOW: int = int(os.getenv("UI_HISTORY_WINDOW", "10"))
    RESPONSE_CLOSURE: bool = _env_bool("RESPONSE_CLOSURE")

    FACE_DETECTOR_BACKEND: str = os.getenv("FACE_DETECTOR_BACKEND", "opencv")
    FACE_MIN_CONFIDENCE: float = float(os.getenv("FACE_MIN_CONFIDENCE", "0.5"))
    FACE_POLL_INTERVAL: float = float(os.getenv("FACE_POLL_INTERVAL", "0.5"))
    CAMERA_INDEX: int = int(os.getenv("CAMERA_INDEX", "0"))

    def __init__(self, **data):
        super().__init__(**data)
        # Normalize LOG_LEVEL: strip, upper-case, fall back to DEBUG on unknown names
        level = ((self.LOG_LEVEL or "").split() or ["DEBUG"])[0].upper()
        if not isinstance(logging.getLevelName(level), int):
            level = "DEBUG"
        object.__setattr__(self, "LOG_LEVEL", level)
        object.__setattr__(self, "HISTORY_LIMIT", max(1, int(self.HISTORY_LIMIT)))
        object.__setattr__(self, "UI_HISTORY_WINDOW", max(1, int(self.UI_HISTORY_WINDOW)))
