"""
Module: questions

Purpose:
    Provides the Question dataclass - one entry of an exam paper as
    received from the request body. Immutable, with every optional field
    modelled explicitly as ``None`` so that each degraded state (no options,
    no solution, no answer) is enumerable.

Key Classes:
    - QuestionType: mcq / numerical / descriptive
    - Question: Frozen question record

Key Functions:
    - Question.from_dict(): Build from request JSON (camelCase keys)
    - Question.to_dict(): Serialize back to request JSON
    - option_letter(): 0 -> "A", 1 -> "B", ...

Dependencies:
    - dataclasses (std)
    - enum (std)

Used By:
    - core.models.paper.Paper
    - builder.blocks: question, answer key and solution renderers
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

EXCERPT_ELLIPSIS = "..."


class QuestionType(str, Enum):
    """Kind of question. Only MCQ questions carry an option block."""

    MCQ = "mcq"
    NUMERICAL = "numerical"
    DESCRIPTIVE = "descriptive"

    @classmethod
    def parse(cls, value: Any) -> Optional["QuestionType"]:
        """Return the matching type, or None when the value is not recognised."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                return None
        return None


def option_letter(index: int) -> str:
    """Label for an option index (0 -> 'A', 1 -> 'B', ...)."""
    return chr(ord("A") + index)


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = value if isinstance(value, str) else str(value)
    return text if text != "" else None


@dataclass(frozen=True)
class Question:
    """
    Single question of a paper (immutable).

    Attributes:
        type: Question kind
        text: Question text (empty string when missing from input)
        options: MCQ option strings, or None
        correct_option: 0-based index of the correct option (MCQ only), or None
        answer: Literal answer for non-MCQ questions, or None
        solution: Worked solution text, or None
        images: Image references placed below the question text
        raw_type: Type string as received, kept when it was not recognised

    Invariants:
        - An MCQ should have non-empty options and an in-range correct_option.
          Rendering tolerates violation by omitting the option block.

    Example:
        >>> q = Question.from_dict({"type": "mcq", "text": "2+2=?",
        ...                         "options": ["3", "4"], "correctOption": 1})
        >>> q.answer_text
        'B'
    """

    type: QuestionType
    text: str = ""
    options: Optional[tuple[str, ...]] = None
    correct_option: Optional[int] = None
    answer: Optional[str] = None
    solution: Optional[str] = None
    images: tuple[str, ...] = ()
    raw_type: Optional[str] = None

    @property
    def is_mcq(self) -> bool:
        return self.type is QuestionType.MCQ

    @property
    def has_options(self) -> bool:
        """True when an option block should be rendered."""
        return self.is_mcq and self.options is not None and len(self.options) > 0

    @property
    def has_solution(self) -> bool:
        return self.solution is not None and self.solution.strip() != ""

    @property
    def correct_option_in_range(self) -> bool:
        if self.correct_option is None:
            return False
        return self.options is not None and 0 <= self.correct_option < len(self.options)

    @property
    def answer_text(self) -> str:
        """
        Answer as printed in the answer key.

        MCQ questions whose correct_option points at one of the options use
        its letter; otherwise the literal answer is used, or an empty string.
        """
        if self.is_mcq and self.correct_option_in_range:
            return option_letter(self.correct_option)
        if self.answer is not None:
            return self.answer
        return ""

    def excerpt(self, limit: int = 60) -> str:
        """First ``limit`` characters of the text, with an ellipsis if cut."""
        if len(self.text) > limit:
            return self.text[:limit] + EXCERPT_ELLIPSIS
        return self.text

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Question":
        """
        Build a Question from request JSON.

        Lenient: anything missing or of the wrong shape becomes None or
        empty and is reported later as degraded content by the renderers.
        """
        raw_type = data.get("type")
        qtype = QuestionType.parse(raw_type)

        options = data.get("options")
        if isinstance(options, (list, tuple)):
            parsed_options: Optional[tuple[str, ...]] = tuple(
                "" if o is None else str(o) for o in options
            )
        else:
            parsed_options = None

        correct = data.get("correctOption")
        if isinstance(correct, bool) or not isinstance(correct, int):
            correct = None

        images = data.get("images")
        if isinstance(images, (list, tuple)):
            parsed_images = tuple(str(i) for i in images if isinstance(i, str) and i)
        else:
            parsed_images = ()

        text = data.get("text")
        return cls(
            type=qtype or QuestionType.DESCRIPTIVE,
            text=text if isinstance(text, str) else ("" if text is None else str(text)),
            options=parsed_options,
            correct_option=correct,
            answer=_optional_text(data.get("answer")),
            solution=_optional_text(data.get("solution")),
            images=parsed_images,
            raw_type=None if qtype is not None else (None if raw_type is None else str(raw_type)),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.type.value, "text": self.text}
        if self.options is not None:
            data["options"] = list(self.options)
        if self.correct_option is not None:
            data["correctOption"] = self.correct_option
        if self.answer is not None:
            data["answer"] = self.answer
        if self.solution is not None:
            data["solution"] = self.solution
        if self.images:
            data["images"] = list(self.images)
        return data
