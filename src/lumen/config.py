"""
Lumen Daemon Configuration Management
"""
from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Daemon Configuration
    daemon_port: int = Field(default=8000, description="HTTP API port")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    log_file: Optional[str] = Field(default=None, description="Optional JSON log file path")

    # Light Hardware Configuration
    light_mock: bool = Field(
        default=True, description="Use simulated light platform (no real hardware)"
    )
    light_sysfs_root: str = Field(
        default="/sys/class/leds", description="LED class directory for the sysfs platform"
    )

    # Tracking Engine Configuration
    engine_factory: Optional[str] = Field(
        default=None,
        description="'module:callable' returning a TrackingEngine (simulated engine if unset)",
    )
    engine_frame_hz: int = Field(default=30, description="Simulated engine frame rate in Hz")

    # Telemetry Overlay Configuration
    telemetry_enabled: bool = Field(default=True, description="Show telemetry overlay at startup")
    telemetry_interval_ms: int = Field(
        default=100, ge=1, description="Delay between telemetry polling cycles in ms"
    )
    telemetry_fallback_text: str = Field(
        default="Stats unavailable", description="Rendered when a snapshot fetch fails"
    )

    # Auto Light Configuration
    auto_light_low_threshold: float = Field(
        default=0.2, ge=0.0, le=1.0, description="Ambient intensity below which the light turns on"
    )
    auto_light_high_threshold: float = Field(
        default=0.4, ge=0.0, le=1.0, description="Ambient intensity above which the light turns off"
    )
    auto_light_confirm_frames: int = Field(
        default=15, ge=1, description="Consecutive frames required before an auto change"
    )

    # API Configuration
    api_title: str = Field(default="Lumen Illumination Control API", description="API title")
    api_version: str = Field(default="0.1.0", description="API version")
    api_docs_enabled: bool = Field(default=True, description="Enable API documentation")


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
