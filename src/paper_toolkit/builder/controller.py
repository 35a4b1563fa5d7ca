"""
Module: builder.controller

Purpose:
    Assemble the complete document for one paper.
    Header → Questions → Answer Key → Solutions → Finalize

Key Functions:
    - generate_pdf(): Main entry point, returns the finished PDF bytes
    - generate_pdf_async(): Same, awaited off the event loop

Key Classes:
    - Section: Document sections in rendering order
    - DocumentAssembler: Section state machine over one sink and cursor
    - GenerationResult: Complete generation result

Dependencies:
    - builder.blocks: Content block renderers
    - builder.layout: LayoutCursor
    - builder.output: OutputSink, ReportLabSink

Used By:
    - api.server: HTTP endpoint
    - cli: Command line rendering
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from paper_toolkit.core.models import Paper

from .blocks import (
    RenderContext,
    draw_question,
    plan_question,
    render_answer_key,
    render_header,
    render_section_title,
    render_solutions,
)
from .config import PaperConfig, get_config
from .diagnostics import DegradedContentWarning, DiagnosticsCollector
from .layout import LayoutCursor
from .output import OutputSink, RenderingError, ReportLabSink

logger = logging.getLogger(__name__)

QUESTIONS_TITLE = "QUESTIONS"
ANSWER_KEY_TITLE = "ANSWER KEY"
SOLUTIONS_TITLE = "SOLUTIONS"
NO_QUESTIONS_TEXT = "No questions available."


class Section(str, Enum):
    """Document sections, in the only order they may be entered."""

    INIT = "init"
    HEADER = "header"
    QUESTIONS = "questions"
    ANSWER_KEY = "answer_key"
    SOLUTIONS = "solutions"
    FINALIZED = "finalized"


_SECTION_ORDER = list(Section)


@dataclass(frozen=True)
class GenerationResult:
    """
    Complete generation result (immutable).

    Attributes:
        pdf: Encoded document
        page_count: Pages in the document
        sections: 1-based page on which each section started
        warnings: Degraded content encountered
        question_count: Questions rendered
        elapsed: Wall time in seconds

    Example:
        >>> result = generate_pdf(paper)
        >>> result.sections["answer_key"]
        3
    """

    pdf: bytes
    page_count: int
    sections: dict[str, int] = field(default_factory=dict)
    warnings: tuple[DegradedContentWarning, ...] = ()
    question_count: int = 0
    elapsed: float = 0.0


class DocumentAssembler:
    """
    Drives the section state machine for one paper.

    Sections are entered strictly in order, each after the header on a
    new page. Nothing is retried or rolled back: an exception leaves the
    assembler in the section where it happened.
    """

    def __init__(self, paper: Paper, config: PaperConfig, sink: OutputSink) -> None:
        self.paper = paper
        self.config = config
        self.sink = sink
        self.diagnostics = DiagnosticsCollector()
        self.ctx = RenderContext(sink=sink, config=config, diagnostics=self.diagnostics)
        self.cursor = LayoutCursor(sink, config)
        self.section = Section.INIT
        self.sections: dict[str, int] = {}

    def _enter(self, section: Section) -> None:
        expected = _SECTION_ORDER[_SECTION_ORDER.index(self.section) + 1]
        if section is not expected:
            raise RuntimeError(
                f"Invalid section transition {self.section.value} -> {section.value} "
                f"(expected {expected.value})"
            )
        if section not in (Section.HEADER, Section.FINALIZED):
            self.cursor.new_page()
        self.section = section
        if section is not Section.FINALIZED:
            self.sections[section.value] = self.cursor.page
        logger.debug(f"Entered section {section.value} on page {self.cursor.page}")

    # ─────────────────────────────────────────────────────────────────────────
    # Sections
    # ─────────────────────────────────────────────────────────────────────────

    def render_header(self) -> None:
        self._enter(Section.HEADER)
        self.sink.set_info(
            title=self.paper.display_title,
            author=self.paper.display_author,
            subject=self.paper.subject or "",
            keywords=self.config.keywords,
        )
        render_header(self.ctx, self.cursor, self.paper)

    def render_questions(self) -> None:
        self._enter(Section.QUESTIONS)
        cursor = self.cursor
        render_section_title(self.ctx, cursor, QUESTIONS_TITLE)

        questions = self.paper.questions
        if not questions:
            height = self.sink.draw_text(
                [self.ctx.run(NO_QUESTIONS_TEXT)],
                cursor.geometry.margin_left,
                cursor.y,
                cursor.geometry.content_width,
            )
            cursor.move_to(cursor.y + height)
            return

        buffer = self.config.thresholds.question_buffer
        cursor.start_columns()
        last = len(questions)

        for number, question in enumerate(questions, 1):
            plan = plan_question(self.ctx, question, number, cursor.width)

            if not cursor.fits(plan.height):
                if cursor.at_column_top:
                    logger.warning(
                        f"Question {number} overflows column on page {cursor.page}: "
                        f"{plan.height:.0f}pt needed, {cursor.remaining:.0f}pt available, "
                        f"continuing in the next column"
                    )
                else:
                    cursor.next_column_or_page()

            draw_question(self.ctx, plan, cursor)

            if cursor.near_bottom(buffer) and number < last:
                cursor.next_column_or_page()

        cursor.end_columns()
        logger.info(f"Questions: {last} rendered, last on page {cursor.page}")

    def render_answer_key(self) -> None:
        self._enter(Section.ANSWER_KEY)
        render_section_title(self.ctx, self.cursor, ANSWER_KEY_TITLE)
        render_answer_key(self.ctx, self.cursor, self.paper.questions)

    def render_solutions(self) -> None:
        self._enter(Section.SOLUTIONS)
        render_section_title(self.ctx, self.cursor, SOLUTIONS_TITLE)
        render_solutions(self.ctx, self.cursor, self.paper.questions)

    def finalize(self) -> bytes:
        self._enter(Section.FINALIZED)
        return self.sink.finalize()

    def run(self) -> bytes:
        """Render every section in order and return the document bytes."""
        self.render_header()
        self.render_questions()
        self.render_answer_key()
        self.render_solutions()
        return self.finalize()


def generate_pdf(
    paper: Paper,
    config: Optional[PaperConfig] = None,
    *,
    sink: Optional[OutputSink] = None,
) -> GenerationResult:
    """
    Generate the complete question paper document.

    Pipeline:
    1. Header (first page)
    2. Questions in two columns (new page)
    3. Answer key grid (new page)
    4. Solutions (new page)
    5. Finalize the sink

    Args:
        paper: Validated paper
        config: Layout configuration (process-wide config by default)
        sink: Output sink (a fresh ReportLabSink by default)

    Returns:
        GenerationResult with the PDF bytes

    Raises:
        RenderingError: If any section fails; no partial document is returned
    """
    config = config or get_config()
    start_time = time.perf_counter()

    logger.info(f"Generating paper {paper.display_title!r} with {paper.question_count} questions")

    try:
        sink = sink or ReportLabSink(config)
        assembler = DocumentAssembler(paper, config, sink)
        pdf = assembler.run()
    except RenderingError:
        raise
    except Exception as e:
        raise RenderingError(f"Failed to generate PDF: {e}") from e

    elapsed = time.perf_counter() - start_time
    logger.info(
        f"Generated {sink.page_count} pages ({len(pdf)} bytes) in {elapsed:.2f}s, "
        f"{len(assembler.diagnostics)} warnings"
    )

    return GenerationResult(
        pdf=pdf,
        page_count=sink.page_count,
        sections=dict(assembler.sections),
        warnings=assembler.diagnostics.warnings,
        question_count=paper.question_count,
        elapsed=elapsed,
    )


async def generate_pdf_async(
    paper: Paper,
    config: Optional[PaperConfig] = None,
) -> GenerationResult:
    """
    Run generate_pdf() in a worker thread.

    The awaitable completes once the document is finalized; each call owns
    its own sink and cursor, so concurrent calls need no coordination.
    """
    return await asyncio.to_thread(generate_pdf, paper, config)
