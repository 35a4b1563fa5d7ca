"""
Core Models Package

Immutable input models for one generation call. All models are frozen
dataclasses so a Paper can be handed to concurrent requests or threads
without copying.
"""

from .questions import Question, QuestionType, option_letter
from .paper import Paper

__all__ = [
    "Paper",
    "Question",
    "QuestionType",
    "option_letter",
]
