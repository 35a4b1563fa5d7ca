"""
Module: builder.output.renderer

Purpose:
    Default OutputSink backed by a ReportLab canvas. The whole document is
    buffered in memory and returned by ``finalize()``. Text runs are laid
    out with ReportLab Paragraphs so wrapping, justification and
    measurement agree.

Key Classes:
    - ReportLabSink: Buffered PDF sink
    - ParagraphFlow: Paragraph split across breaks with Paragraph.split

Dependencies:
    - reportlab: PDF generation
    - PIL: Image handling

Used By:
    - builder.controller: Default sink for generate_pdf()
"""

from __future__ import annotations

import io
import logging
from typing import Optional, Sequence

from PIL import Image
from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY, TA_LEFT, TA_RIGHT
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas
from reportlab.platypus import Paragraph

from paper_toolkit.builder.config import PaperConfig

from .sink import Align, OutputSink, RenderingError, TextFlow, TextRun, scaled_image_size

logger = logging.getLogger(__name__)

_ALIGNMENTS = {
    Align.LEFT: TA_LEFT,
    Align.CENTER: TA_CENTER,
    Align.RIGHT: TA_RIGHT,
    Align.JUSTIFY: TA_JUSTIFY,
}

LINE_WIDTH = 1.0

# Float slack when comparing a paragraph to the space left
_SLACK = 0.01


def _escape(text: str) -> str:
    """Escape markup characters so Paragraph treats them as literal text."""
    if not text:
        return ""
    text = text.replace("&", "&amp;")
    text = text.replace("<", "&lt;")
    text = text.replace(">", "&gt;")
    text = text.replace("\r\n", "\n")
    return text.replace("\n", "<br/>")


class ParagraphFlow(TextFlow):
    """TextFlow over a ReportLab Paragraph; the remainder comes from ``split()``."""

    def __init__(self, sink: "ReportLabSink", para: Paragraph, width: float) -> None:
        self._sink = sink
        self._para: Optional[Paragraph] = para
        self._width = width

    @property
    def done(self) -> bool:
        return self._para is None

    def draw(self, x: float, y: float, max_height: float) -> float:
        if self._para is None:
            return 0.0
        self._sink._check_open()

        height = self._sink._wrap(self._para, self._width)
        if height <= max_height + _SLACK:
            part, self._para = self._para, None
        else:
            try:
                parts = self._para.split(self._width, max(max_height, 0))
            except Exception as e:
                raise RenderingError(f"Failed to split text at ({x:.1f}, {y:.1f}): {e}") from e
            if not parts:
                return 0.0
            part = parts[0]
            self._para = parts[1] if len(parts) > 1 else None
            height = self._sink._wrap(part, self._width)

        if height > 0:
            self._sink._draw_paragraph(part, x, y, height)
        return height


class ReportLabSink(OutputSink):
    """
    In-memory PDF sink.

    The canvas is created with ``invariant=1`` so identical commands
    produce byte-identical documents (no timestamps or random IDs).

    Example:
        >>> sink = ReportLabSink(PaperConfig())
        >>> sink.draw_text([TextRun("Hello")], 40, 50, 200)
        12.0
        >>> pdf = sink.finalize()
    """

    def __init__(self, config: PaperConfig) -> None:
        self._config = config
        self._width, self._height = config.page_dimensions
        self._buffer = io.BytesIO()
        self._canvas = canvas.Canvas(
            self._buffer,
            pagesize=(self._width, self._height),
            invariant=1,
        )
        self._canvas.setLineWidth(LINE_WIDTH)
        self._pages = 1
        self._finalized = False

    # ─────────────────────────────────────────────────────────────────────────
    # Properties
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def page_width(self) -> float:
        return self._width

    @property
    def page_height(self) -> float:
        return self._height

    @property
    def page_count(self) -> int:
        return self._pages

    # ─────────────────────────────────────────────────────────────────────────
    # Commands
    # ─────────────────────────────────────────────────────────────────────────

    def set_info(
        self,
        *,
        title: Optional[str] = None,
        author: Optional[str] = None,
        subject: Optional[str] = None,
        keywords: Optional[str] = None,
    ) -> None:
        if title is not None:
            self._canvas.setTitle(title)
        if author is not None:
            self._canvas.setAuthor(author)
        if subject is not None:
            self._canvas.setSubject(subject)
        if keywords is not None:
            self._canvas.setKeywords(keywords)

    def measure_text(
        self,
        runs: Sequence[TextRun],
        width: float,
        align: Align = Align.LEFT,
    ) -> float:
        para = self._paragraph(runs, align)
        return self._wrap(para, width)

    def draw_text(
        self,
        runs: Sequence[TextRun],
        x: float,
        y: float,
        width: float,
        align: Align = Align.LEFT,
    ) -> float:
        self._check_open()
        para = self._paragraph(runs, align)
        height = self._wrap(para, width)
        if height <= 0:
            return 0.0
        self._draw_paragraph(para, x, y, height)
        return height

    def flow_text(
        self,
        runs: Sequence[TextRun],
        width: float,
        align: Align = Align.LEFT,
    ) -> TextFlow:
        self._check_open()
        return ParagraphFlow(self, self._paragraph(runs, align), width)

    def draw_image(
        self,
        image: Image.Image,
        x: float,
        y: float,
        width: float,
        max_height: Optional[float] = None,
    ) -> float:
        self._check_open()
        draw_width, draw_height = scaled_image_size(image, width, max_height)
        try:
            self._canvas.drawImage(
                ImageReader(image),
                x,
                self._height - y - draw_height,
                width=draw_width,
                height=draw_height,
                mask="auto",
            )
        except Exception as e:
            raise RenderingError(f"Failed to embed image: {e}") from e
        return draw_height

    def draw_line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        self._check_open()
        self._canvas.line(x1, self._height - y1, x2, self._height - y2)

    def new_page(self) -> None:
        self._check_open()
        self._canvas.showPage()
        self._canvas.setLineWidth(LINE_WIDTH)
        self._pages += 1
        logger.debug(f"Started page {self._pages}")

    def finalize(self) -> bytes:
        self._check_open()
        try:
            self._canvas.save()
        except Exception as e:
            raise RenderingError(f"Failed to write PDF stream: {e}") from e
        self._finalized = True
        data = self._buffer.getvalue()
        logger.debug(f"Finalized PDF: {self._pages} pages, {len(data)} bytes")
        return data

    # ─────────────────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────────────────

    def _check_open(self) -> None:
        if self._finalized:
            raise RenderingError("Document already finalized")

    def _paragraph(self, runs: Sequence[TextRun], align: Align) -> Paragraph:
        fonts = self._config.fonts
        size = max((run.size for run in runs), default=self._config.font_sizes.normal)
        base_font = fonts.resolve(runs[0].role) if runs else fonts.regular
        style = ParagraphStyle(
            name=f"run_{align.value}_{size:g}",
            fontName=base_font,
            fontSize=size,
            leading=self._config.line_height(size),
            alignment=_ALIGNMENTS[align],
        )
        markup = "".join(
            f'<font name="{fonts.resolve(run.role)}" size="{run.size:g}">{_escape(run.text)}</font>'
            for run in runs
        )
        try:
            return Paragraph(markup, style)
        except Exception as e:
            raise RenderingError(f"Failed to lay out text: {e}") from e

    def _draw_paragraph(self, para: Paragraph, x: float, y: float, height: float) -> None:
        try:
            para.drawOn(self._canvas, x, self._height - y - height)
        except Exception as e:
            raise RenderingError(f"Failed to draw text at ({x:.1f}, {y:.1f}): {e}") from e

    def _wrap(self, para: Paragraph, width: float) -> float:
        try:
            _, height = para.wrap(width, self._height)
        except Exception as e:
            raise RenderingError(f"Failed to wrap text to width {width:.1f}: {e}") from e
        return float(height)
