"""
Module: builder.blocks.common

Purpose:
    Shared pieces for the content block renderers: the per-call render
    context and the section title block.

Key Classes:
    - RenderContext: Sink, configuration and diagnostics of one call

Key Functions:
    - render_section_title(): Centred bold section heading
    - flow_text(): Draw text at the cursor, continuing after breaks
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from paper_toolkit.builder.config import PaperConfig
from paper_toolkit.builder.diagnostics import DiagnosticsCollector
from paper_toolkit.builder.layout import LayoutCursor, RenderResult
from paper_toolkit.builder.output.sink import Align, OutputSink, RenderingError, TextRun

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderContext:
    """
    Everything a renderer needs besides the cursor.

    Attributes:
        sink: Output sink of this document
        config: Styling and layout constants
        diagnostics: Collector for degraded-content warnings
    """

    sink: OutputSink
    config: PaperConfig
    diagnostics: DiagnosticsCollector

    def run(self, text: str, role: str = "regular", size: Optional[float] = None) -> TextRun:
        """TextRun in ``role``; normal size unless given."""
        return TextRun(
            text=text,
            role=role,
            size=size if size is not None else self.config.font_sizes.normal,
        )

    def line_height(self, size: Optional[float] = None) -> float:
        return self.config.line_height(
            size if size is not None else self.config.font_sizes.normal
        )


def render_section_title(ctx: RenderContext, cursor: LayoutCursor, title: str) -> RenderResult:
    """Draw a centred bold section title across the full width, then one blank line."""
    start_y = cursor.y
    size = ctx.config.font_sizes.header
    height = ctx.sink.draw_text(
        [ctx.run(title, "bold", size)],
        cursor.geometry.margin_left,
        cursor.y,
        cursor.geometry.content_width,
        Align.CENTER,
    )
    cursor.move_to(cursor.y + height)
    cursor.move_down(1, size)
    return RenderResult(height=cursor.y - start_y, x=cursor.x, y=cursor.y)


def flow_text(
    ctx: RenderContext,
    cursor: LayoutCursor,
    runs: Sequence[TextRun],
    width: float,
    *,
    break_page: Callable[[], object],
    indent: float = 0.0,
    align: Align = Align.LEFT,
) -> float:
    """
    Draw a paragraph at the cursor, calling ``break_page`` whenever the
    rest does not fit above the bottom margin.

    The cursor ends below the last line drawn.

    Returns:
        Total height drawn across all parts

    Raises:
        RenderingError: If not even one line fits at the top of a column
    """
    flow = ctx.sink.flow_text(runs, width, align)
    total = 0.0
    while True:
        height = flow.draw(cursor.x + indent, cursor.y, cursor.remaining)
        cursor.move_to(cursor.y + height)
        total += height
        if flow.done:
            return total
        if height <= 0 and cursor.at_column_top:
            raise RenderingError(
                f"Text does not fit on page {cursor.page}: "
                f"{cursor.remaining:.0f}pt available at the column top"
            )
        logger.debug(f"Text continues after a break on page {cursor.page} ({total:.0f}pt so far)")
        break_page()
