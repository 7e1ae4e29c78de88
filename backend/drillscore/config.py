"""Application configuration."""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "Drill Score"
    debug: bool = False
    log_level: str = "INFO"

    # Database (SQLite for local dev, PostgreSQL for production)
    database_url_sync: str = "sqlite:///./drillscore.db"

    # Pose input
    keypoint_confidence_threshold: float = 0.3  # Below this a keypoint counts as absent

    # Smoothing
    smoothing_alpha: float = 0.3  # EMA blend toward the new observation
    smoothing_history_size: int = 10

    # Scoring
    # Pixels/second are used directly as a 0-100 power proxy. Calibrate per
    # camera resolution and frame rate.
    velocity_score_scale: float = 1.0
    squat_power_mode: str = "blend"  # "blend" or "velocity"
    sway_window_size: int = 60  # Frames of head/hip/torso position kept for variance

    # Feedback
    coaching_tip_limit: int = 4

    # Live session
    max_detection_errors: int = 10  # Failed detections before a running session is abandoned

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
