"""Pydantic configuration models for overlayqueue.

For loading and merging logic, see loader.py.
"""

from pydantic import BaseModel, Field, field_validator


class QueueConfig(BaseModel):
    """Defaults applied to every lane a registry creates."""

    default_queue_name: str = Field(default="default_queue", description="Name of the shared default lane")
    delay_before_firing_ms: int = Field(
        default=10,
        ge=0,
        description="Settle window between a push and the run-loop start",
    )
    minimum_delay_ms: int = Field(default=0, ge=0, description="Minimum delay before each overlay is presented")

    @field_validator("default_queue_name")
    @classmethod
    def _name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("default_queue_name cannot be empty")
        return v


class LanePresetConfig(BaseModel):
    """Overrides for a single named lane, applied when the lane is created."""

    minimum_delay_ms: int | None = Field(default=None, ge=0, description="Minimum delay for this lane")
    delay_before_firing_ms: int | None = Field(default=None, ge=0, description="Settle window for this lane")
    preserve_when_empty: bool | None = Field(default=None, description="Keep the lane after it drains")
    paused: bool | None = Field(default=None, description="Create the lane paused")

    model_config = {"extra": "forbid"}


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = Field(default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)")
    directory: str | None = Field(default=None, description="Directory for log files (console only when unset)")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB before rotation")
    backup_count: int = Field(default=5, description="Number of backup log files to keep")


class DemoConfig(BaseModel):
    """Settings for the console demo."""

    hold_ms: int = Field(default=500, ge=0, description="How long each overlay stays on screen")
    exit_ms: int = Field(default=100, ge=0, description="Duration of the exit transition")


class Config(BaseModel):
    """Root configuration model."""

    queue: QueueConfig = Field(default_factory=QueueConfig)
    lanes: dict[str, LanePresetConfig] = Field(default_factory=dict, description="Per-lane overrides by name")
    logging: LoggingConfig = Field(default_factory=LoggingConfig, description="Logging configuration")
    demo: DemoConfig = Field(default_factory=DemoConfig)
