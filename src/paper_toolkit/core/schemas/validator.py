"""
Request Validation

Validates the structure of a paper request before it enters the layout
core. Only the minimal contract is enforced here: the payload is a JSON
object and ``questions`` is an array of objects. Everything else is
optional and degrades gracefully at render time.
"""

from __future__ import annotations

from typing import Any

from ..models.paper import Paper

INVALID_STRUCTURE_MESSAGE = "Invalid JSON structure. Questions array required."


class ValidationError(Exception):
    """Raised when a request payload fails the structural contract."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def validate_paper(data: Any) -> None:
    """
    Validate a paper request payload.

    Args:
        data: Decoded JSON body

    Raises:
        ValidationError: If the payload is not an object, ``questions`` is
            missing or not an array, or an entry is not an object.
    """
    if not isinstance(data, dict):
        raise ValidationError(
            INVALID_STRUCTURE_MESSAGE,
            path="",
            errors=["Payload must be a JSON object"],
        )

    if "questions" not in data:
        raise ValidationError(
            INVALID_STRUCTURE_MESSAGE,
            path="questions",
            errors=["Missing field: questions"],
        )

    questions = data["questions"]
    if not isinstance(questions, list):
        raise ValidationError(
            INVALID_STRUCTURE_MESSAGE,
            path="questions",
            errors=[f"questions must be an array, got {type(questions).__name__}"],
        )

    bad = [i for i, q in enumerate(questions) if not isinstance(q, dict)]
    if bad:
        raise ValidationError(
            INVALID_STRUCTURE_MESSAGE,
            path=f"questions[{bad[0]}]",
            errors=[f"questions[{i}] must be an object" for i in bad],
        )


def parse_paper(data: Any) -> Paper:
    """Validate a payload and build the Paper model from it."""
    validate_paper(data)
    return Paper.from_dict(data)
