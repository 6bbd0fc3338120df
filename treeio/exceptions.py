"""
Custom exceptions for Newick/NHX reading and writing.
"""

from __future__ import annotations


class NewickError(Exception):
    """Base exception for all Newick parsing and formatting errors."""

    pass


class TokenizationError(NewickError):
    """Raised when no delimiter can be found ahead of the cursor."""

    def __init__(self, delimiters: str, remaining: str):
        self.delimiters = delimiters
        self.remaining = remaining
        preview = remaining if len(remaining) <= 40 else remaining[:40] + "..."
        super().__init__(
            f"Couldn't find any of the delimiters {delimiters!r} in {preview!r}"
        )


class StructuralError(NewickError):
    """Raised when the token stream violates the Newick grammar."""

    pass


class MalformedTreeError(NewickError):
    """Raised when parse events cannot be assembled into a single tree."""

    pass


class ConfigurationError(NewickError, ValueError):
    """Raised for unknown or invalid reader/writer options."""

    pass
