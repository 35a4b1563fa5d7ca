"""
Module: builder.blocks.questions

Purpose:
    Render one question inside a column band: "Q{n}. " followed inline by
    the justified question text, the lettered option block for MCQs, any
    question images, and trailing spacing.

Key Classes:
    - QuestionPlan: Measured, ready-to-draw question block

Key Functions:
    - plan_question(): Measure a question without drawing it
    - draw_question(): Draw a planned question at the cursor
    - render_question(): plan + draw

Algorithm:
    The block is planned first so the assembler can keep it together:
    every piece (text paragraph, option line, image, spacer) gets its
    height from the sink before anything is drawn, and drawing places
    the pieces top to bottom from the cursor. A block taller than the
    space left still breaks: text continues in the next column (or page)
    and an image that does not fit moves there whole.

Dependencies:
    - builder.output.sink: Measurement and drawing
    - builder.images: Question images
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from PIL import Image

from paper_toolkit.builder.images import AssetError, load_image
from paper_toolkit.builder.layout import LayoutCursor, RenderResult
from paper_toolkit.builder.output.sink import Align, TextRun, scaled_image_size
from paper_toolkit.core.models import Question, option_letter

from .common import RenderContext, flow_text

logger = logging.getLogger(__name__)

OPTION_SPACING_LINES = 0.5
IMAGE_SPACING_LINES = 0.3
TRAILING_SPACING_LINES = 0.8


def question_label(number: int) -> str:
    return f"Q{number}. "


def option_label(index: int, option: str) -> str:
    """'A) option' for index 0."""
    return f"{option_letter(index)}) {option}"


@dataclass(frozen=True)
class _Piece:
    """One vertically stacked element of a question block."""

    kind: str  # "text", "image" or "space"
    height: float
    indent: float = 0.0
    width: float = 0.0
    runs: tuple[TextRun, ...] = ()
    image: Optional[Image.Image] = None


@dataclass(frozen=True)
class QuestionPlan:
    """
    Measured question block.

    Attributes:
        number: 1-based question number
        width: Band width the block was measured for
        pieces: Elements in drawing order
        option_count: Option lines in the block (0 when omitted)
    """

    number: int
    width: float
    pieces: tuple[_Piece, ...] = field(default_factory=tuple)
    option_count: int = 0

    @property
    def height(self) -> float:
        return sum(p.height for p in self.pieces)


def plan_question(
    ctx: RenderContext,
    question: Question,
    number: int,
    width: float,
) -> QuestionPlan:
    """
    Measure a question block for a band of ``width``.

    Missing text renders as an empty paragraph after the label; an MCQ
    without options has its option block omitted. Both are reported as
    degraded content, as are unreadable images.
    """
    sink = ctx.sink
    thresholds = ctx.config.thresholds
    pieces: list[_Piece] = []

    if question.text == "":
        ctx.diagnostics.degraded("text", "Question text missing", number)
    if question.raw_type is not None:
        ctx.diagnostics.degraded(
            "type", f"Unknown type {question.raw_type!r}, rendered as descriptive", number
        )

    runs = (ctx.run(question_label(number), "bold"), ctx.run(question.text, "regular"))
    pieces.append(_Piece(
        kind="text",
        height=sink.measure_text(runs, width, Align.JUSTIFY),
        width=width,
        runs=runs,
    ))

    option_count = 0
    if question.is_mcq:
        if question.has_options:
            pieces.append(_Piece(kind="space", height=OPTION_SPACING_LINES * ctx.line_height()))
            indent = thresholds.option_indent
            for index, option in enumerate(question.options or ()):
                option_runs = (ctx.run(option_label(index, option)),)
                pieces.append(_Piece(
                    kind="text",
                    height=sink.measure_text(option_runs, width - indent, Align.JUSTIFY),
                    indent=indent,
                    width=width - indent,
                    runs=option_runs,
                ))
            option_count = len(question.options or ())
            if question.correct_option is not None and not question.correct_option_in_range:
                ctx.diagnostics.degraded(
                    "correctOption",
                    f"correctOption {question.correct_option} is outside "
                    f"{option_count} options",
                    number,
                )
        else:
            ctx.diagnostics.degraded("options", "MCQ has no options, option block omitted", number)

    for index, ref in enumerate(question.images):
        try:
            image = load_image(ref, ctx.config.max_image_bytes, ctx.config.asset_root)
        except AssetError as e:
            ctx.diagnostics.degraded(f"images[{index}]", f"Image skipped: {e}", number)
            continue
        _, image_height = scaled_image_size(image, width, thresholds.image_max_height)
        pieces.append(_Piece(kind="space", height=IMAGE_SPACING_LINES * ctx.line_height()))
        pieces.append(_Piece(kind="image", height=image_height, width=width, image=image))

    pieces.append(_Piece(kind="space", height=TRAILING_SPACING_LINES * ctx.line_height()))

    return QuestionPlan(
        number=number,
        width=width,
        pieces=tuple(pieces),
        option_count=option_count,
    )


def draw_question(ctx: RenderContext, plan: QuestionPlan, cursor: LayoutCursor) -> RenderResult:
    """
    Draw a planned question at the cursor and leave the cursor below it.

    Inside columns a break moves to the next column or page; outside
    them it starts a new page.

    Returns:
        RenderResult whose height is the total drawn and spaced, summed
        over every column the block touched
    """
    sink = ctx.sink
    max_height = ctx.config.thresholds.image_max_height
    break_page = cursor.next_column_or_page if cursor.in_columns else cursor.new_page
    height = 0.0

    for piece in plan.pieces:
        if piece.kind == "text":
            height += flow_text(
                ctx,
                cursor,
                piece.runs,
                piece.width,
                break_page=break_page,
                indent=piece.indent,
                align=Align.JUSTIFY,
            )
        elif piece.kind == "image" and piece.image is not None:
            if not cursor.fits(piece.height) and not cursor.at_column_top:
                break_page()
            drawn = sink.draw_image(piece.image, cursor.x, cursor.y, piece.width, max_height)
            cursor.move_to(cursor.y + drawn)
            height += drawn
        else:
            cursor.move_to(cursor.y + piece.height)
            height += piece.height

    return RenderResult(height=height, x=cursor.x, y=cursor.y)


def render_question(
    ctx: RenderContext,
    cursor: LayoutCursor,
    question: Question,
    number: int,
) -> RenderResult:
    """Plan and draw a question at the cursor in one step."""
    plan = plan_question(ctx, question, number, cursor.width)
    return draw_question(ctx, plan, cursor)
