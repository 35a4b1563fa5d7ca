"""
Module: builder.layout.models

Purpose:
    Data models for the layout engine.

Key Classes:
    - PageGeometry: Fixed page/column measurements (immutable)
    - LayoutState: Mutable cursor position owned by LayoutCursor
    - RenderResult: What a block renderer reports back

Dependencies:
    - dataclasses (std)
    - builder.config: PaperConfig

Used By:
    - builder.layout.cursor: LayoutCursor
    - builder.blocks: Content block renderers
"""

from __future__ import annotations

from dataclasses import dataclass

from paper_toolkit.builder.config import PaperConfig


@dataclass(frozen=True)
class PageGeometry:
    """
    Page measurements in points (immutable).

    Attributes:
        page_width: Full page width
        page_height: Full page height
        margin_top: Top margin
        margin_bottom: Bottom margin
        margin_left: Left margin
        margin_right: Right margin
        column_gap: Gap between the two columns

    Example:
        >>> geo = PageGeometry.from_config(PaperConfig())
        >>> geo.bottom
        791.89...
    """

    page_width: float
    page_height: float
    margin_top: float
    margin_bottom: float
    margin_left: float
    margin_right: float
    column_gap: float

    @classmethod
    def from_config(cls, config: PaperConfig) -> "PageGeometry":
        width, height = config.page_dimensions
        return cls(
            page_width=width,
            page_height=height,
            margin_top=config.margins.top,
            margin_bottom=config.margins.bottom,
            margin_left=config.margins.left,
            margin_right=config.margins.right,
            column_gap=config.column_gap,
        )

    @property
    def content_width(self) -> float:
        return self.page_width - self.margin_left - self.margin_right

    @property
    def content_height(self) -> float:
        return self.page_height - self.margin_top - self.margin_bottom

    @property
    def column_width(self) -> float:
        """(content width - gap) / 2"""
        return (self.content_width - self.column_gap) / 2

    @property
    def bottom(self) -> float:
        """Lowest y content may reach (top-down coordinates)."""
        return self.page_height - self.margin_bottom

    def column_x(self, column: int) -> float:
        """Left edge of a column band."""
        if column == 0:
            return self.margin_left
        return self.margin_left + self.column_width + self.column_gap

    @property
    def divider_x(self) -> float:
        """x of the vertical rule between the columns."""
        return self.margin_left + self.column_width + self.column_gap / 2


@dataclass
class LayoutState:
    """
    Current writing position.

    Attributes:
        page: 1-based page number in the document
        column: 0 (left) or 1 (right); 0 outside the question section
        x: Left edge of the current band
        y: Current vertical position (top-down)
        column_top: y where columns start on the current page
    """

    page: int
    column: int
    x: float
    y: float
    column_top: float


@dataclass(frozen=True)
class RenderResult:
    """
    Outcome of rendering one block.

    Attributes:
        height: Vertical space consumed, including trailing spacing
        x: Cursor x after the block
        y: Cursor y after the block
    """

    height: float
    x: float
    y: float
