"""
Perception Layer - Where things are.

Turns a camera frame into arena positions:
- MarkerDetector: HSV color markers -> bounding boxes
- Position / Vector: arena geometry
- MapState: car + target positions from one frame
"""

from .markers import ColorMarker, MarkerDetector, draw_markers
from .geometry import Position, Vector
from .map_state import MapState, TeamColors

__all__ = [
    "ColorMarker",
    "MarkerDetector",
    "draw_markers",
    "Position",
    "Vector",
    "MapState",
    "TeamColors",
]
