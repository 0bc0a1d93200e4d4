"""Custom exception hierarchy for pynojs."""

from __future__ import annotations


class NoJsError(Exception):
    """Base exception for all pynojs errors."""


class NoJsConfigError(NoJsError):
    """Invalid or missing configuration."""


class ExpressionError(NoJsError):
    """An expression could not be evaluated."""


class ExpressionSyntaxError(ExpressionError):
    """An expression could not be tokenized or parsed."""

    def __init__(self, message: str, *, position: int = 0, expression: str = "") -> None:
        self.position = position
        self.expression = expression
        super().__init__(f"{message} (at position {position} in {expression!r})")


class DirectiveError(NoJsError):
    """A directive attribute could not be applied."""


class DirectiveParseError(DirectiveError):
    """A directive attribute value is malformed (e.g. invalid JSON)."""

    def __init__(self, message: str, *, directive: str = "", raw: str = "") -> None:
        self.directive = directive
        self.raw = raw
        super().__init__(message)


class TemplateError(NoJsError):
    """Template registration or rendering failure."""


class TemplateNotFoundError(TemplateError):
    """No template is registered under the requested id.

    Raised by :meth:`TemplateRegistry.require`. Rendering catches it and
    leaves the target untouched.
    """


class NoJsTransportError(NoJsError):
    """Network-level failure (connection error, non-2xx, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str = "",
    ) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(message)
