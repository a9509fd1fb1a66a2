"""
Error taxonomy for the navigation controller.

Nothing here is recovered locally: a failing step propagates its error
to the process loop, which treats it as fatal.
"""

from __future__ import annotations


class NavigationError(Exception):
    """Base class for controller failures."""


class DetectionFailure(NavigationError):
    """A required marker was not found in the camera frame."""

    def __init__(self, missing: tuple[str, ...]):
        self.missing = tuple(missing)
        super().__init__(f"Marker(s) not found: {', '.join(self.missing)}")


class CollaboratorFailure(NavigationError):
    """Camera, serial link or maneuver call failed."""

    def __init__(self, component: str, message: str):
        self.component = component
        super().__init__(f"{component}: {message}")
