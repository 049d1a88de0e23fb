"""
Exceptions raised by the AIRAC import pipeline.

Line-level problems are never raised; they are collected on the
ParseResult (see models.validation). The exceptions below terminate an
import call.
"""

from typing import Any, Optional


class AiracImportError(Exception):
    """Base class for import failures that abort the call."""

    def __init__(self, message: str, details: Any = None):
        """
        Initialize the error.

        Args:
            message: Human-readable message, safe to show to staff
            details: Optional additional details
        """
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} ({self.details})"
        return self.message


class InputError(AiracImportError):
    """The submitted file is malformed or yields nothing usable."""


class EncodingError(InputError):
    """The submitted bytes cannot be decoded as text."""


class ScopeNotFoundError(AiracImportError):
    """A FIR identifier was given but does not exist."""

    def __init__(self, fir_id: str):
        super().__init__(f"FIR not found: {fir_id}")
        self.fir_id = fir_id


class ApplyTransactionError(AiracImportError):
    """The store rejected a write; the whole transaction was rolled back."""

    def __init__(self, message: str, group: Optional[str] = None, details: Any = None):
        super().__init__(message, details)
        self.group = group
