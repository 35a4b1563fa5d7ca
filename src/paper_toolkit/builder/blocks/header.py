"""
Module: builder.blocks.header

Purpose:
    Render the paper header on the first page: optional logo, title,
    subject line, exam information line and numbered instructions.

Key Functions:
    - render_header(): Draw the header and report its height

Dependencies:
    - builder.images: Logo loading
    - builder.output.sink: Text and image commands
"""

from __future__ import annotations

import logging

from paper_toolkit.builder.images import AssetError, load_image
from paper_toolkit.builder.layout import LayoutCursor, RenderResult
from paper_toolkit.builder.output.sink import Align
from paper_toolkit.core.models import Paper

from .common import RenderContext

logger = logging.getLogger(__name__)

INSTRUCTIONS_LABEL = "Instructions:"


def info_line(paper: Paper) -> str:
    """'Date: D | Time: T | Total Marks: M' with N/A fallbacks."""
    return (
        f"Date: {paper.display_date} | "
        f"Time: {paper.display_duration} | "
        f"Total Marks: {paper.display_total_marks}"
    )


def render_header(ctx: RenderContext, cursor: LayoutCursor, paper: Paper) -> RenderResult:
    """
    Render the header block at the top of the current page.

    A logo that is missing, too large or unreadable is skipped with a
    degraded-content warning. The title is pushed down when a logo path
    is given so the two do not collide.

    Args:
        ctx: Render context
        cursor: Cursor on the first page
        paper: Paper being rendered

    Returns:
        RenderResult with the total header height (including the trailing
        1.5 line spacing)
    """
    geo = cursor.geometry
    sizes = ctx.config.font_sizes
    thresholds = ctx.config.thresholds
    sink = ctx.sink
    x = geo.margin_left
    width = geo.content_width
    start_y = geo.margin_top

    if paper.logo_path:
        try:
            logo = load_image(paper.logo_path, ctx.config.max_image_bytes, ctx.config.asset_root)
        except AssetError as e:
            ctx.diagnostics.degraded("logoPath", f"Logo could not be loaded: {e}")
        else:
            sink.draw_image(logo, x, geo.margin_top, thresholds.logo_width)

    title_offset = thresholds.logo_title_offset if paper.logo_path else 0
    cursor.move_to(geo.margin_top + title_offset)

    height = sink.draw_text(
        [ctx.run(paper.display_title, "bold", sizes.title)], x, cursor.y, width, Align.CENTER
    )
    cursor.move_to(cursor.y + height)
    cursor.move_down(0.5, sizes.title)

    height = sink.draw_text(
        [ctx.run(f"Subject: {paper.display_subject}", "regular", sizes.header)],
        x, cursor.y, width, Align.CENTER,
    )
    cursor.move_to(cursor.y + height)
    cursor.move_down(0.3, sizes.header)

    height = sink.draw_text(
        [ctx.run(info_line(paper), "regular", sizes.sub_header)],
        x, cursor.y, width, Align.CENTER,
    )
    cursor.move_to(cursor.y + height)
    trailing_size = sizes.sub_header

    if paper.instructions:
        cursor.move_down(1, sizes.sub_header)
        height = sink.draw_text(
            [ctx.run(INSTRUCTIONS_LABEL, "italic", sizes.normal)], x, cursor.y, width
        )
        cursor.move_to(cursor.y + height)
        for number, instruction in enumerate(paper.instructions, 1):
            height = sink.draw_text(
                [ctx.run(f"{number}. {instruction}", "regular", sizes.normal)],
                x, cursor.y, width,
            )
            cursor.move_to(cursor.y + height)
        trailing_size = sizes.normal

    cursor.move_down(1.5, trailing_size)
    logger.debug(f"Header rendered, {len(paper.instructions)} instructions")
    return RenderResult(height=cursor.y - start_y, x=cursor.x, y=cursor.y)
