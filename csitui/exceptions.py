"""Custom exception hierarchy for csitui.

Exception Hierarchy:
    CsiTuiError (base)
    └── TemplateError - layout template catalog
        ├── TemplateNotFoundError
        ├── TemplateReadError
        ├── TemplateWriteError
        ├── TemplateValidationError
        └── InvalidTemplateNameError

Layout tree mutations never raise: stale or out-of-range input is ignored.
Only the persistence boundary reports failures, and it does so with these
types so callers can tell a missing template from a corrupt one.

Usage:
    from csitui.exceptions import TemplateValidationError

    try:
        manager = catalog.load("lab-bench")
    except TemplateValidationError as e:
        logger.warning(f"Ignoring broken template: {e}")
"""

from typing import Any, Optional


class CsiTuiError(Exception):
    """Base exception for all csitui errors.

    Attributes:
        message: Human-readable error description
        context: Additional context about the error (e.g., names, paths)
    """

    def __init__(self, message: str, **context: Any) -> None:
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context."""
        if self.context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


# =============================================================================
# Template Errors
# =============================================================================


class TemplateError(CsiTuiError):
    """Base exception for layout template operations."""

    pass


class TemplateNotFoundError(TemplateError):
    """No template file exists under the requested name."""

    def __init__(
        self,
        message: str = "Template not found",
        *,
        name: Optional[str] = None,
        **context: Any,
    ) -> None:
        if name:
            context["name"] = name
        super().__init__(message, **context)


class TemplateReadError(TemplateError):
    """A template file exists but could not be read or parsed."""

    def __init__(
        self,
        message: str = "Failed to read template",
        *,
        path: Optional[str] = None,
        **context: Any,
    ) -> None:
        if path:
            context["path"] = path
        super().__init__(message, **context)


class TemplateWriteError(TemplateError):
    """A template file could not be written."""

    def __init__(
        self,
        message: str = "Failed to write template",
        *,
        path: Optional[str] = None,
        **context: Any,
    ) -> None:
        if path:
            context["path"] = path
        super().__init__(message, **context)


class TemplateValidationError(TemplateError):
    """Template content does not describe a usable layout tree."""

    pass


class InvalidTemplateNameError(TemplateError):
    """Template name cannot be used as a catalog file name."""

    def __init__(self, name: str) -> None:
        super().__init__("Invalid template name", name=name)
