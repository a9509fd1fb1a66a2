"""
Communication layer - serial protocol with ESP32.
"""

from .esp32_serial import ESP32Serial

__all__ = ["ESP32Serial"]
