"""
Runtime Configuration Module

Manages runtime-configurable editor settings.
Loads default values from config.py and allows runtime modifications.
"""
from dataclasses import dataclass, asdict
from typing import Optional

# Import defaults from config.py
from config import (
    SNAP_STEP,
    NUDGE_STEP,
    NUDGE_STEP_LARGE,
    QUICK_ADD_SECONDS,
    EDGE_HANDLE_PX,
    DEFAULT_STORE_PATH,
)


@dataclass
class RuntimeConfig:
    """
    Runtime configuration for the slot editor.

    These settings can be changed per session and are saved with the
    user's preferences.
    """
    # Time grid
    snap_step: float = SNAP_STEP

    # Keyboard nudge (seconds)
    nudge_step: float = NUDGE_STEP
    nudge_step_large: float = NUDGE_STEP_LARGE  # with modifier held

    # Quick add button length (seconds)
    quick_add_seconds: float = QUICK_ADD_SECONDS

    # Width of the resize handles inside a slot (pixels)
    edge_handle_px: int = EDGE_HANDLE_PX

    # Timeline store location
    store_path: str = str(DEFAULT_STORE_PATH)

    def nudge_for(self, large: bool) -> float:
        """Nudge distance for an arrow key press."""
        return self.nudge_step_large if large else self.nudge_step

    def to_dict(self) -> dict:
        """Convert to dictionary for saving."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "RuntimeConfig":
        """Create from dictionary."""
        # Filter only known fields to avoid errors with old/new config versions
        known_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered_data = {k: v for k, v in data.items() if k in known_fields}
        return cls(**filtered_data)

    def reset_to_defaults(self):
        """Reset all settings to default values from config.py."""
        self.snap_step = SNAP_STEP
        self.nudge_step = NUDGE_STEP
        self.nudge_step_large = NUDGE_STEP_LARGE
        self.quick_add_seconds = QUICK_ADD_SECONDS
        self.edge_handle_px = EDGE_HANDLE_PX
        self.store_path = str(DEFAULT_STORE_PATH)


# Global singleton instance
_runtime_config: Optional[RuntimeConfig] = None


def get_config() -> RuntimeConfig:
    """Get the global runtime configuration instance."""
    global _runtime_config
    if _runtime_config is None:
        _runtime_config = RuntimeConfig()
    return _runtime_config


def set_config(config: RuntimeConfig):
    """Set the global runtime configuration instance."""
    global _runtime_config
    _runtime_config = config
