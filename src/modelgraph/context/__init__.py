"""Context package - named external objects bridged into carriers."""

from .context import Context, ContextTable, HasContexts

__all__ = [
    "Context",
    "ContextTable",
    "HasContexts",
]
