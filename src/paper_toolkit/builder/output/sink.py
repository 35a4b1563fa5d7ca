"""
Module: builder.output.sink

Purpose:
    The narrow contract between the layout core and the document
    rendering engine. Renderers only ever talk to an OutputSink: text
    runs, raster images, lines, page creation and finalization. The
    sink decides the binary format.

Key Classes:
    - Align: Paragraph alignment
    - TextRun: Piece of text in one font role and size
    - TextFlow: Paragraph drawn in parts across column or page breaks
    - OutputSink: Abstract sink
    - RenderingError: Engine failure

Coordinates:
    All coordinates are in points, measured top-down from the top-left
    corner of the page (the sink converts to the engine's own system).
    A sequence of runs passed to one draw call forms a single continued
    paragraph.

Used By:
    - builder.blocks: Content block renderers
    - builder.layout.cursor: Divider drawing and page creation
    - builder.controller: Sink lifecycle
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from PIL import Image


class RenderingError(Exception):
    """The rendering engine failed; the document is aborted."""


class Align(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"
    JUSTIFY = "justify"


@dataclass(frozen=True)
class TextRun:
    """
    A run of text in one style.

    Attributes:
        text: Literal text (no markup)
        role: Font role name ("regular", "bold", "italic")
        size: Font size in points
    """

    text: str
    role: str = "regular"
    size: float = 10


class TextFlow(ABC):
    """
    A paragraph that may be drawn in several parts.

    Each ``draw()`` places as many whole lines as fit in ``max_height``
    and keeps the rest for the next call, so text that does not fit a
    column or page continues after a break instead of being clipped.
    """

    @property
    @abstractmethod
    def done(self) -> bool:
        """True once every line has been drawn."""

    @abstractmethod
    def draw(self, x: float, y: float, max_height: float) -> float:
        """
        Draw the next part with its top-left at (x, y).

        Returns:
            Height drawn; 0 when not even one line fits
        """


class OutputSink(ABC):
    """
    Append-only document sink.

    Implementations own exactly one document. Pages are created
    explicitly with ``new_page()``; the first page exists from the start.
    ``finalize()`` may be called once and returns the encoded document.
    """

    @property
    @abstractmethod
    def page_width(self) -> float:
        """Page width in points."""

    @property
    @abstractmethod
    def page_height(self) -> float:
        """Page height in points."""

    @property
    @abstractmethod
    def page_count(self) -> int:
        """Pages created so far (the first page counts)."""

    def set_info(
        self,
        *,
        title: Optional[str] = None,
        author: Optional[str] = None,
        subject: Optional[str] = None,
        keywords: Optional[str] = None,
    ) -> None:
        """Set document metadata. Sinks without metadata ignore it."""

    @abstractmethod
    def measure_text(
        self,
        runs: Sequence[TextRun],
        width: float,
        align: Align = Align.LEFT,
    ) -> float:
        """
        Height the runs would occupy when wrapped to ``width``.

        Must agree with the height returned by ``draw_text`` for the same
        arguments.
        """

    @abstractmethod
    def draw_text(
        self,
        runs: Sequence[TextRun],
        x: float,
        y: float,
        width: float,
        align: Align = Align.LEFT,
    ) -> float:
        """
        Draw runs as one wrapped paragraph with its top-left at (x, y).

        Returns:
            Height consumed in points
        """

    @abstractmethod
    def flow_text(
        self,
        runs: Sequence[TextRun],
        width: float,
        align: Align = Align.LEFT,
    ) -> TextFlow:
        """Prepare runs as one paragraph to be drawn in parts with ``TextFlow.draw``."""

    @abstractmethod
    def draw_image(
        self,
        image: Image.Image,
        x: float,
        y: float,
        width: float,
        max_height: Optional[float] = None,
    ) -> float:
        """
        Draw an image with its top-left at (x, y), scaled to ``width``.

        When the scaled height exceeds ``max_height`` the image is scaled
        down further to fit. Returns the drawn height.
        """

    @abstractmethod
    def draw_line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        """Stroke a straight line between two points."""

    @abstractmethod
    def new_page(self) -> None:
        """Close the current page and start a new one."""

    @abstractmethod
    def finalize(self) -> bytes:
        """Finish the document and return the complete encoded bytes."""


def scaled_image_size(
    image: Image.Image,
    width: float,
    max_height: Optional[float] = None,
) -> tuple[float, float]:
    """
    Target (width, height) for an image scaled to ``width``.

    Keeps the aspect ratio; shrinks both sides when the height would
    exceed ``max_height``.
    """
    img_width, img_height = image.size
    if img_width <= 0 or img_height <= 0:
        raise RenderingError(f"Image has no area: {image.size}")
    height = width * img_height / img_width
    if max_height is not None and height > max_height:
        scale = max_height / height
        return width * scale, max_height
    return width, height
