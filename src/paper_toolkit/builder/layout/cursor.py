"""
Module: builder.layout.cursor

Purpose:
    Track the writing position across columns and pages, and decide
    column/page transitions.

Key Classes:
    - LayoutCursor: Owns the LayoutState of one generation call

Algorithm:
    Outside the question section the cursor spans the full content width.
    Inside it (``start_columns``) the page is split into two bands with a
    vertical rule between them:
    1. Content is written at the cursor, then ``advance`` moves y down
    2. ``advance`` reports overflow when y + buffer passes the bottom margin
    3. On overflow, column 0 moves to column 1 (same page, back to the
       column top); column 1 starts a new page in column 0 and redraws
       the rule

Dependencies:
    - builder.output.sink: OutputSink
    - builder.layout.models: PageGeometry, LayoutState

Used By:
    - builder.controller: Section flow
    - builder.blocks: Answer key and solution page breaks
"""

from __future__ import annotations

import logging
from typing import Optional

from paper_toolkit.builder.config import PaperConfig
from paper_toolkit.builder.output.sink import OutputSink

from .models import LayoutState, PageGeometry

logger = logging.getLogger(__name__)

# Float slack when comparing the cursor to the column top
_EPSILON = 0.01


class LayoutCursor:
    """
    Cursor over the pages of one document.

    Attributes:
        geometry: Fixed page measurements
        state: Current LayoutState

    Example:
        >>> cursor = LayoutCursor(sink, config)
        >>> cursor.start_columns()
        >>> if cursor.advance(height, buffer=70):
        ...     cursor.next_column_or_page()
    """

    def __init__(self, sink: OutputSink, config: PaperConfig) -> None:
        self._sink = sink
        self._config = config
        self.geometry = PageGeometry.from_config(config)
        self.state = LayoutState(
            page=sink.page_count,
            column=0,
            x=self.geometry.margin_left,
            y=self.geometry.margin_top,
            column_top=self.geometry.margin_top,
        )
        self._columns = False

    # ─────────────────────────────────────────────────────────────────────────
    # Position
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def x(self) -> float:
        return self.state.x

    @property
    def y(self) -> float:
        return self.state.y

    @property
    def column(self) -> int:
        return self.state.column

    @property
    def page(self) -> int:
        return self.state.page

    @property
    def in_columns(self) -> bool:
        return self._columns

    @property
    def width(self) -> float:
        """Width of the current band (column or full content width)."""
        if self._columns:
            return self.geometry.column_width
        return self.geometry.content_width

    @property
    def remaining(self) -> float:
        """Vertical space left above the bottom margin."""
        return self.geometry.bottom - self.state.y

    @property
    def at_column_top(self) -> bool:
        return self.state.y <= self.state.column_top + _EPSILON

    def move_to(self, y: float) -> None:
        self.state.y = y

    def move_down(self, lines: float, font_size: Optional[float] = None) -> float:
        """
        Move down by a number of line units.

        One line unit is the line height of ``font_size`` (normal size by
        default). Returns the distance moved.
        """
        size = font_size if font_size is not None else self._config.font_sizes.normal
        delta = lines * self._config.line_height(size)
        self.state.y += delta
        return delta

    def advance(self, consumed: float, buffer: float) -> bool:
        """
        Move y down by ``consumed``.

        Returns:
            True when the new position leaves less than ``buffer`` points
            above the bottom margin.
        """
        self.state.y += consumed
        return self.near_bottom(buffer)

    def near_bottom(self, buffer: float) -> bool:
        """Whether less than ``buffer`` points are left above the bottom margin."""
        return self.state.y + buffer > self.geometry.bottom

    def fits(self, height: float) -> bool:
        """Whether a block of ``height`` fits above the bottom margin."""
        return self.state.y + height <= self.geometry.bottom + _EPSILON

    # ─────────────────────────────────────────────────────────────────────────
    # Transitions
    # ─────────────────────────────────────────────────────────────────────────

    def new_page(self) -> None:
        """Start a new page at the top margin, full width."""
        self._sink.new_page()
        self._columns = False
        self._reset_to_page_top()
        logger.debug(f"Cursor: new page {self.state.page}")

    def start_columns(self) -> None:
        """
        Split the rest of the current page into two columns.

        The columns start at the current y, and the divider is drawn from
        there to the bottom margin.
        """
        self._columns = True
        self.state.column = 0
        self.state.x = self.geometry.column_x(0)
        self.state.column_top = self.state.y
        self._draw_divider()

    def end_columns(self) -> None:
        """Return to full-width layout on the current page."""
        self._columns = False
        self.state.column = 0
        self.state.x = self.geometry.margin_left

    def next_column_or_page(self) -> bool:
        """
        Move to the next column band.

        Column 0 moves to column 1 on the same page; column 1 starts a new
        page in column 0 with the divider redrawn.

        Returns:
            True if a new page was started
        """
        if not self._columns:
            raise RuntimeError("next_column_or_page() called outside column layout")

        if self.state.column == 0:
            self.state.column = 1
            self.state.x = self.geometry.column_x(1)
            self.state.y = self.state.column_top
            logger.debug(f"Cursor: column 1 on page {self.state.page}")
            return False

        self._sink.new_page()
        self._reset_to_page_top()
        self._draw_divider()
        logger.debug(f"Cursor: new page {self.state.page}, column 0")
        return True

    def _reset_to_page_top(self) -> None:
        top = self.geometry.margin_top
        self.state.page = self._sink.page_count
        self.state.column = 0
        self.state.x = self.geometry.column_x(0)
        self.state.y = top
        self.state.column_top = top

    def _draw_divider(self) -> None:
        x = self.geometry.divider_x
        self._sink.draw_line(x, self.state.column_top, x, self.geometry.bottom)
