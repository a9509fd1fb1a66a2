"""
Map state - where the car and the target are, from one camera frame.

A MapState lives for exactly one control sample. There is no filtering
or smoothing here; noise is the caller's problem.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from config import CAR_COLOR, TARGET_COLOR
from errors import DetectionFailure
from perception.geometry import Position

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TeamColors:
    """Marker color on the car and on the target."""

    car: str = CAR_COLOR
    target: str = TARGET_COLOR


@dataclass(frozen=True)
class MapState:
    """Car and target positions inferred from one frame."""

    car: Position
    target: Position

    @property
    def distance(self) -> float:
        return self.car.distance_to(self.target)

    @classmethod
    async def infer(cls, camera, detector, colors: TeamColors = TeamColors()) -> MapState:
        """
        Snapshot the camera and locate both markers.

        Takes the first (largest) detection of each color.

        Raises:
            DetectionFailure: car or target marker not in the frame.
        """
        frame = await camera.snapshot()
        markers = detector.detect(frame)
        car = next((m for m in markers if m.color == colors.car), None)
        target = next((m for m in markers if m.color == colors.target), None)

        logger.info(f"pos car: {car}, pos target: {target}")

        missing = []
        if car is None:
            missing.append(colors.car)
        if target is None:
            missing.append(colors.target)
        if missing:
            raise DetectionFailure(tuple(missing))

        return cls(
            car=Position.from_bbox(*car.bbox),
            target=Position.from_bbox(*target.bbox),
        )
