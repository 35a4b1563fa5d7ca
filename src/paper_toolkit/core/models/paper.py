"""
Module: paper

Purpose:
    Provides the Paper dataclass - the complete, immutable input of one
    generation call. Built once per request from validated data and
    discarded after rendering.

Key Classes:
    - Paper: Frozen paper record

Dependencies:
    - dataclasses (std)
    - .questions.Question

Used By:
    - builder.controller.generate_pdf
    - api.server
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .questions import Question

# Fallback literals used when the request omits a field
DEFAULT_TITLE = "Question Paper"
DEFAULT_SUBJECT = "General"
DEFAULT_AUTHOR = "PDF Generator"
NOT_AVAILABLE = "N/A"


def _display(value: Any, fallback: str) -> str:
    if value is None or value == "":
        return fallback
    return value if isinstance(value, str) else str(value)


@dataclass(frozen=True)
class Paper:
    """
    Exam paper description (immutable).

    Raw optional values are kept as given (None when absent); the
    ``display_*`` properties apply the documented fallback literals.

    Attributes:
        questions: Ordered questions (possibly empty)
        title: Paper title
        subject: Subject name
        date: Exam date as free text
        duration: Exam duration as free text
        total_marks: Total marks as free text
        instructions: Ordered instruction strings
        logo_path: Optional path to a logo image
        author: Optional author for document metadata
    """

    questions: tuple[Question, ...] = ()
    title: Optional[str] = None
    subject: Optional[str] = None
    date: Optional[str] = None
    duration: Optional[str] = None
    total_marks: Optional[str] = None
    instructions: tuple[str, ...] = ()
    logo_path: Optional[str] = None
    author: Optional[str] = None

    @property
    def display_title(self) -> str:
        return _display(self.title, DEFAULT_TITLE)

    @property
    def display_subject(self) -> str:
        return _display(self.subject, DEFAULT_SUBJECT)

    @property
    def display_date(self) -> str:
        return _display(self.date, NOT_AVAILABLE)

    @property
    def display_duration(self) -> str:
        return _display(self.duration, NOT_AVAILABLE)

    @property
    def display_total_marks(self) -> str:
        return _display(self.total_marks, NOT_AVAILABLE)

    @property
    def display_author(self) -> str:
        return _display(self.author, DEFAULT_AUTHOR)

    @property
    def question_count(self) -> int:
        return len(self.questions)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Paper":
        """
        Build a Paper from request JSON.

        Expects data that already passed ``validate_paper``; non-string
        scalars are converted with ``str()``.
        """
        instructions = data.get("instructions")
        if isinstance(instructions, (list, tuple)):
            parsed_instructions = tuple(str(i) for i in instructions if i is not None)
        else:
            parsed_instructions = ()

        logo = data.get("logoPath")

        def scalar(key: str) -> Optional[str]:
            value = data.get(key)
            if value is None:
                return None
            return value if isinstance(value, str) else str(value)

        return cls(
            questions=tuple(Question.from_dict(q) for q in data.get("questions", [])),
            title=scalar("title"),
            subject=scalar("subject"),
            date=scalar("date"),
            duration=scalar("duration"),
            total_marks=scalar("totalMarks"),
            instructions=parsed_instructions,
            logo_path=logo if isinstance(logo, str) and logo else None,
            author=scalar("author"),
        )
