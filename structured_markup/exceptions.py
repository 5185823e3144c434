"""
Custom exceptions for the structured-markup extractors.

Error philosophy:
  - InputError     → FAIL HARD: the document itself is unusable (None, not text,
                     invalid UTF-8). Raised before any tree walk begins.
  - ManifestError  → FAIL HARD: a caller-supplied manifest blob is not valid JSON.
  - Everything else is NON-FATAL: malformed markup is tolerated by the parser,
    bad URLs fall back to the original string, and a flat-scan extractor that
    blows up inside extract_all() becomes a warning on the result.

The interpreters never raise for markup problems; the only way to get an
exception out of an extraction call is to hand it something that isn't a
document.
"""

from typing import Optional


class StructuredMarkupError(Exception):
    """Base exception for all structured-markup errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_response(self) -> dict:
        """Convert to a JSON-friendly error record."""
        return {
            "error": type(self).__name__,
            "message": self.message,
            "details": self.details
        }


# --- FAIL HARD: nothing is extracted ---

class InputError(StructuredMarkupError):
    """
    Raised when the caller's document cannot be turned into text.

    This is a FAIL HARD error - continuing would only produce
    meaningless output.
    """

    def __init__(
        self,
        message: str,
        received_type: Optional[str] = None,
        details: Optional[dict] = None
    ):
        super().__init__(message, details)
        # Name of the Python type we were given, for debugging bindings
        self.received_type = received_type


class ManifestError(StructuredMarkupError):
    """Raised when a supplied Web App Manifest blob cannot be parsed."""
    pass
