"""Root of the modelgraph exception hierarchy.

Every error raised by modelgraph derives from ModelGraphException, so
callers can catch one type. Errors raised on behalf of a transition carry
its description under ``context["transition"]`` and name it in ``str()``.
"""

from typing import Any


class ModelGraphException(Exception):
    """Base exception for all modelgraph errors.

    Attributes:
        message: Human-readable error message
        error_code: Stable code for programmatic handling, e.g. ``MISSING_BLOCK``
        context: Details of the failure; ``transition`` names the transition
            the error was raised for
    """

    def __init__(
        self, message: str, error_code: str | None = None, context: dict[str, Any] | None = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}

    @property
    def transition(self) -> str | None:
        return self.context.get("transition")

    def __str__(self) -> str:
        text = f"[{self.error_code}] {self.message}" if self.error_code else self.message
        if self.transition is not None:
            return f"{text} (transition: {self.transition})"
        return text
