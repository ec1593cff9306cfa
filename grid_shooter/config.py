"""
Configuration management for Grid Shooter.
Uses pydantic-settings for environment variable parsing.
"""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings

from grid_shooter.gameplay.constants import (
    DEFAULT_FRAME_RATE_MS,
    DEFAULT_HEIGHT,
    DEFAULT_START_NUM_ENEMIES,
    DEFAULT_WIDTH,
    EXIT_DELAY_MS,
    GAME_OVER_GRACE_MS,
    MIN_GRID_SIZE,
)
from grid_shooter.gameplay.game import GameConfig
from grid_shooter.gameplay.grid import Coord, in_interior


class Settings(BaseSettings):
    """Game settings loaded from environment variables (GRID_SHOOTER_*)."""

    # Grid
    width: int = Field(
        default=DEFAULT_WIDTH,
        ge=MIN_GRID_SIZE,
        description="Grid width in columns, walls included"
    )
    height: int = Field(
        default=DEFAULT_HEIGHT,
        ge=MIN_GRID_SIZE,
        description="Grid height in rows, walls included"
    )

    # Timing
    frame_rate_ms: int = Field(
        default=DEFAULT_FRAME_RATE_MS,
        gt=0,
        description="Simulation tick interval in milliseconds"
    )
    grace_period_ms: int = Field(
        default=GAME_OVER_GRACE_MS,
        ge=0,
        description="How long the final score stays up before exiting"
    )
    exit_delay_ms: int = Field(
        default=EXIT_DELAY_MS,
        ge=0,
        description="Pause after the exit message"
    )

    # Starting world
    cursor_x: int | None = Field(
        default=None,
        description="Initial cursor column. Defaults to the middle column"
    )
    cursor_y: int | None = Field(
        default=None,
        description="Initial cursor row. Defaults to three rows above the bottom"
    )
    start_num_enemies: int = Field(
        default=DEFAULT_START_NUM_ENEMIES,
        ge=0,
        description="Number of enemies in the starting formation"
    )

    # Logging
    log_level: str = Field(default="INFO")
    log_file: str | None = Field(
        default="grid_shooter.log",
        description="Log file path. The terminal belongs to the game, so logs go here"
    )

    class Config:
        env_prefix = "GRID_SHOOTER_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"

    @property
    def cursor_pos(self) -> Coord:
        x = self.cursor_x if self.cursor_x is not None else self.width // 2
        y = self.cursor_y if self.cursor_y is not None else max(1, self.height - 3)
        return Coord(x, y)

    @model_validator(mode="after")
    def _check_cursor_inside_walls(self) -> "Settings":
        if not in_interior(self.cursor_pos, self.width, self.height):
            raise ValueError(
                f"cursor position {tuple(self.cursor_pos)} is not inside "
                f"the {self.width}x{self.height} wall ring"
            )
        return self

    def to_game_config(self) -> GameConfig:
        """Freeze the gameplay-relevant settings."""
        return GameConfig(
            width=self.width,
            height=self.height,
            frame_rate_ms=self.frame_rate_ms,
            cursor_pos=self.cursor_pos,
            start_num_enemies=self.start_num_enemies,
        )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Command-line overrides build their own Settings instead.
    """
    return Settings()
