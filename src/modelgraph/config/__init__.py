"""Configuration package.

Usage:
    from modelgraph.config import get_settings

    settings = get_settings()
    if settings.strict_type_registry:
        ...
"""

from .settings import ModelGraphSettings, TestSettings, get_settings, reset_settings

__all__ = [
    "ModelGraphSettings",
    "TestSettings",
    "get_settings",
    "reset_settings",
]
