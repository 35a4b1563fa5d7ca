"""
Module: builder.layout

Purpose:
    Cursor and page geometry for the two-column layout engine.

Key Classes:
    - LayoutCursor: Column/page transitions
    - PageGeometry: Page and column measurements
    - LayoutState: Current writing position
    - RenderResult: Block renderer outcome
"""

from .models import LayoutState, PageGeometry, RenderResult
from .cursor import LayoutCursor

__all__ = [
    "LayoutCursor",
    "LayoutState",
    "PageGeometry",
    "RenderResult",
]
