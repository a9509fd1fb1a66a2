"""
Control Layer - Execution.

Process loop that drives the state machine forever.
"""

from .controller import Controller

__all__ = ["Controller"]
