"""
Swappable maneuver implementations (Strategy pattern).

Each maneuver type has an ABC and one implementation.
Pass the desired implementation to StateMachine.
"""

from .approach import (
    ApproachStrategy,
    Hint,
    IncrementalApproach,
)
from .idle import (
    IdleStrategy,
    WatchTargetIdle,
)
