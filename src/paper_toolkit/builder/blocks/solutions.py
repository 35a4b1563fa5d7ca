"""
Module: builder.blocks.solutions

Purpose:
    Render one solution block per question that carries a solution:
    bold "Question {n}: " continued by an italic excerpt of the question
    text, then the full solution. Questions without a solution are
    skipped entirely. A solution longer than the rest of the page
    continues at the top of the next one.

Key Functions:
    - solution_heading(): Runs of the block heading
    - render_solution(): Draw one block
    - render_solutions(): Draw every block, breaking pages as needed
"""

from __future__ import annotations

import logging
from typing import Sequence

from paper_toolkit.builder.layout import LayoutCursor, RenderResult
from paper_toolkit.builder.output.sink import TextRun
from paper_toolkit.core.models import Question

from .common import RenderContext, flow_text

logger = logging.getLogger(__name__)

HEADING_SPACING_LINES = 0.5
TRAILING_SPACING_LINES = 1.0


def solution_heading(ctx: RenderContext, question: Question, number: int) -> tuple[TextRun, ...]:
    excerpt = question.excerpt(ctx.config.thresholds.excerpt_length)
    return (
        ctx.run(f"Question {number}: ", "bold"),
        ctx.run(excerpt, "italic"),
    )


def render_solution(
    ctx: RenderContext,
    cursor: LayoutCursor,
    question: Question,
    number: int,
) -> RenderResult:
    """Draw one solution block at the cursor across the full width."""
    sink = ctx.sink
    width = cursor.geometry.content_width
    body = (ctx.run(question.solution or "", "regular"),)
    heading = solution_heading(ctx, question, number)
    block_height = (
        sink.measure_text(heading, width)
        + HEADING_SPACING_LINES * ctx.line_height()
        + sink.measure_text(body, width)
    )
    if not cursor.fits(block_height):
        logger.warning(
            f"Solution {number} overflows page {cursor.page}: "
            f"{block_height:.0f}pt needed, {cursor.remaining:.0f}pt available, continuing on the next page"
        )

    height = flow_text(ctx, cursor, heading, width, break_page=cursor.new_page)
    height += cursor.move_down(HEADING_SPACING_LINES)
    height += flow_text(ctx, cursor, body, width, break_page=cursor.new_page)
    height += cursor.move_down(TRAILING_SPACING_LINES)

    return RenderResult(height=height, x=cursor.x, y=cursor.y)


def render_solutions(
    ctx: RenderContext,
    cursor: LayoutCursor,
    questions: Sequence[Question],
) -> RenderResult:
    """
    Draw all solution blocks starting at the cursor.

    A new page is started before a block whenever fewer than the
    solution buffer points remain.

    Returns:
        RenderResult whose height is the space used on the final page
    """
    buffer = ctx.config.thresholds.solution_buffer
    start_y = cursor.y
    rendered = 0

    for index, question in enumerate(questions):
        number = index + 1
        if not question.has_solution:
            ctx.diagnostics.degraded("solution", "No solution provided", number)
            continue

        if cursor.y + buffer > cursor.geometry.bottom:
            cursor.new_page()
            start_y = cursor.y

        render_solution(ctx, cursor, question, number)
        rendered += 1

    logger.info(f"Solutions: {rendered} of {len(questions)} questions")
    return RenderResult(height=cursor.y - start_y, x=cursor.x, y=cursor.y)
