"""Coded errors passed through the continuation when a chain must abort."""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Stable, machine-readable error codes."""

    CONTEXT_MISSING_PROPERTY = "ContextMissingPropertyError"


class CodedError(Exception):
    """An error carrying an :class:`ErrorCode`."""

    def __init__(self, message: str, code: ErrorCode) -> None:
        super().__init__(message)
        self.code = code

    @property
    def message(self) -> str:
        return str(self)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code.value!r}, message={self.message!r})"


class ContextMissingPropertyError(CodedError):
    """A middleware needed a context value that nothing upstream provided."""

    def __init__(self, missing_property: str, message: str) -> None:
        super().__init__(message, ErrorCode.CONTEXT_MISSING_PROPERTY)
        self.missing_property = missing_property


def context_missing_property_error(
    property_name: str, message: str | None = None
) -> ContextMissingPropertyError:
    """Build the error for a missing context property.

    Args:
        property_name: Context key that was expected.
        message: Human-readable explanation; defaults to a generic one.
    """
    if message is None:
        message = f"Context missing property: {property_name}"
    return ContextMissingPropertyError(property_name, message)
