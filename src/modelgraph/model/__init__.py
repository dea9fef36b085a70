"""Model package - state graph building blocks."""

from .transition import LoadState, TargetTypeResolver, Transition, define_transition

__all__ = [
    "LoadState",
    "TargetTypeResolver",
    "Transition",
    "define_transition",
]
