"""Boundary validation for request payloads."""

from .validator import ValidationError, validate_paper, parse_paper

__all__ = [
    "ValidationError",
    "validate_paper",
    "parse_paper",
]
