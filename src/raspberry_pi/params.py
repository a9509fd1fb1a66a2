"""
Runtime tunable parameters with JSON persistence.

All layers share one Parameters instance. The web interface
can modify values at runtime; changes take effect on the next
control step. Single-threaded asyncio means no locks needed.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path

from config import (
    CAMERA_HEIGHT,
    CAMERA_WIDTH,
    MIN_CONTOUR_AREA,
    TURN_PULSE_S,
    TURN_TOLERANCE_DEG,
)

logger = logging.getLogger(__name__)

PARAMS_FILE = Path(__file__).parent / "params.json"


@dataclass
class Parameters:
    """Runtime tunable parameters."""

    # Red range 1 (low hue end: 0-10)
    red_h_min1: int = 0
    red_h_max1: int = 10
    red_s_min1: int = 100
    red_s_max1: int = 255
    red_v_min1: int = 100
    red_v_max1: int = 255

    # Red range 2 (high hue end: 160-180)
    red_h_min2: int = 160
    red_h_max2: int = 180
    red_s_min2: int = 100
    red_s_max2: int = 255
    red_v_min2: int = 100
    red_v_max2: int = 255

    # Green
    green_h_min: int = 40
    green_h_max: int = 80
    green_s_min: int = 50
    green_s_max: int = 255
    green_v_min: int = 50
    green_v_max: int = 255

    # Camera resolution (reconnect camera to apply changes)
    camera_width: int = CAMERA_WIDTH
    camera_height: int = CAMERA_HEIGHT

    # Detection
    min_contour_area: int = MIN_CONTOUR_AREA

    # Drive pulses
    drive_speed: int = 40  # 0-100, backward pulses use the negative
    steer_offset: int = 45  # degrees from center for full left/right

    # Turning
    turn_pulse_s: float = TURN_PULSE_S
    turn_tolerance_deg: float = TURN_TOLERANCE_DEG

    # Approaching
    approach_pulse_s: float = 0.5
    hit_radius_px: float = 40.0  # car center this close to target center = hit
    approach_min_progress_px: float = 0.0

    # Idling
    idle_poll_s: float = 1.0
    idle_move_radius_px: float = 30.0

    def update(self, **kwargs):
        """Update parameters from dict (e.g., from web API)."""
        for key, value in kwargs.items():
            if hasattr(self, key):
                expected_type = type(getattr(self, key))
                try:
                    setattr(self, key, expected_type(value))
                except (TypeError, ValueError):
                    logger.warning(f"Invalid value for {key}: {value}")

    def save(self, path: Path = PARAMS_FILE):
        """Persist to JSON file."""
        with open(path, "w") as f:
            json.dump(asdict(self), f, indent=2)
        logger.info(f"Parameters saved to {path}")

    @classmethod
    def load(cls, path: Path = PARAMS_FILE) -> Parameters:
        """Load from JSON file, or return defaults."""
        if path.exists():
            try:
                with open(path) as f:
                    data = json.load(f)
                params = cls()
                params.update(**data)
                logger.info(f"Parameters loaded from {path}")
                return params
            except (OSError, ValueError, TypeError) as e:
                logger.warning(f"Failed to load {path}: {e}, using defaults")
        return cls()

    def to_dict(self) -> dict:
        """Convert to dict for JSON API."""
        return asdict(self)
