"""
Sensor Layer - Hardware interfaces.

Provides access to the rover hardware:
- Camera: overhead USB camera, one frame per snapshot
- Motor: timed drive pulses over the ESP32 link
- Steering: front-wheel servo over the same link
"""

from .camera import Camera
from .motor import Motor
from .steering import Steer, Steering

__all__ = ["Camera", "Motor", "Steer", "Steering"]
