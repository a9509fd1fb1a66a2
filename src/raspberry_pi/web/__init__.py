"""
Web Layer - Debug interface.

Provides:
- Controller status
- Camera view (MJPEG stream) and color masks
- Parameter tuning
"""

from .server import create_app, run_server

__all__ = ["create_app", "run_server"]
