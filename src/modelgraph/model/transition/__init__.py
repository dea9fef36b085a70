"""Model transition package.

Transitions between states and lazy resolution of their target types.
"""

from .target_type import LoadState, TargetTypeResolver
from .transition import Transition, define_transition

__all__ = [
    "LoadState",
    "TargetTypeResolver",
    "Transition",
    "define_transition",
]
