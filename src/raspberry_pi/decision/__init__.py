"""
Decision Layer - What to do.

Contains:
- StateMachine: Turning / Approaching / Idle sequencing
- Maneuvers live in strategies/ and are injected into the StateMachine
"""

from .state_machine import NavigationMode, StateMachine

__all__ = ["NavigationMode", "StateMachine"]
