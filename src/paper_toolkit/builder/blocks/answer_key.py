"""
Module: builder.blocks.answer_key

Purpose:
    Render the answer key as a grid of fixed-width cells across the full
    content width (not the two-column question layout).

Key Functions:
    - answer_entry(): "{n}. {answer}" text of one cell
    - render_answer_key(): Draw the grid, breaking pages as needed

Algorithm:
    1. Cells are placed left to right, ``answers_per_row`` per row
    2. A row is as tall as its tallest measured cell, and never shorter
       than the fixed row height, so long answers cannot overlap
    3. Before a new row starts, if its top plus the row buffer passes the
       bottom margin, a new page is started; the last answer never
       triggers a break, so no trailing empty page is produced
"""

from __future__ import annotations

import logging
from typing import Sequence

from paper_toolkit.builder.layout import LayoutCursor, RenderResult
from paper_toolkit.core.models import Question

from .common import RenderContext

logger = logging.getLogger(__name__)


def answer_entry(question: Question, number: int) -> str:
    return f"{number}. {question.answer_text}"


def render_answer_key(
    ctx: RenderContext,
    cursor: LayoutCursor,
    questions: Sequence[Question],
) -> RenderResult:
    """
    Draw the answer grid starting at the cursor.

    Returns:
        RenderResult whose height is the space used on the final page
    """
    geo = cursor.geometry
    thresholds = ctx.config.thresholds
    per_row = thresholds.answers_per_row
    cell_width = geo.content_width / per_row
    text_width = cell_width - thresholds.answer_cell_padding

    start_y = cursor.y
    row_top = cursor.y
    tallest = 0.0
    rows = 0

    for index, question in enumerate(questions):
        number = index + 1
        column = index % per_row

        if column == 0 and index > 0:
            row_top += max(thresholds.answer_row_height, tallest)
            tallest = 0.0
            rows += 1
            if row_top + thresholds.answer_row_buffer > geo.bottom:
                cursor.new_page()
                row_top = cursor.y
                start_y = cursor.y
                logger.debug(f"Answer key continues on page {cursor.page}")

        if question.answer_text == "":
            ctx.diagnostics.degraded("answer", "No answer provided", number)

        x = geo.margin_left + column * cell_width
        height = ctx.sink.draw_text([ctx.run(answer_entry(question, number))], x, row_top, text_width)
        tallest = max(tallest, height)

    if questions:
        row_top += max(thresholds.answer_row_height, tallest)
        rows += 1

    cursor.move_to(row_top)
    logger.info(f"Answer key: {len(questions)} answers in {rows} rows")
    return RenderResult(height=row_top - start_y, x=cursor.x, y=cursor.y)
