"""
Module: builder.diagnostics

Captures non-fatal content problems during generation: missing optional
assets and missing optional per-question fields. Each problem is logged
once and kept for the generation result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DegradedContentWarning:
    """
    A piece of optional content that was omitted or replaced.

    Fields:
    - field: Input field concerned ("logoPath", "options", "images[0]", ...)
    - message: Human readable description
    - question_number: 1-based question number, None for paper-level fields
    """

    field: str
    message: str
    question_number: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"field": self.field, "message": self.message}
        if self.question_number is not None:
            d["question"] = self.question_number
        return d

    def __str__(self) -> str:
        prefix = f"Q{self.question_number} " if self.question_number is not None else ""
        return f"{prefix}{self.field}: {self.message}"


class DiagnosticsCollector:
    """Collects degraded-content warnings for one generation call."""

    def __init__(self) -> None:
        self._warnings: list[DegradedContentWarning] = []

    def degraded(
        self,
        field: str,
        message: str,
        question_number: Optional[int] = None,
    ) -> None:
        warning = DegradedContentWarning(field, message, question_number)
        self._warnings.append(warning)
        logger.warning(f"Degraded content: {warning}")

    @property
    def warnings(self) -> tuple[DegradedContentWarning, ...]:
        return tuple(self._warnings)

    def __len__(self) -> int:
        return len(self._warnings)
