"""
Module: builder.blocks

Purpose:
    Content block renderers. Each draws through the output sink at a
    cursor position and reports the space it consumed.

Key Functions:
    - render_header(): Logo, title, subject, info line, instructions
    - plan_question() / draw_question() / render_question(): Question block
    - render_answer_key(): Answer grid
    - render_solutions(): Solution blocks
    - render_section_title(): Section headings
"""

from .common import RenderContext, render_section_title
from .header import render_header
from .questions import QuestionPlan, draw_question, plan_question, render_question
from .answer_key import answer_entry, render_answer_key
from .solutions import render_solution, render_solutions

__all__ = [
    "RenderContext",
    "render_section_title",
    "render_header",
    "QuestionPlan",
    "plan_question",
    "draw_question",
    "render_question",
    "answer_entry",
    "render_answer_key",
    "render_solution",
    "render_solutions",
]
