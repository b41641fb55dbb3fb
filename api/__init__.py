"""HTTP API for the generator."""

from .validation import format_issues, validate_request

__all__ = ["format_issues", "validate_request"]
