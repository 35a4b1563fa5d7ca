"""
Module: builder.output

Purpose:
    Output sinks: the boundary between the layout core and the PDF engine.

Key Classes:
    - OutputSink: Abstract sink contract
    - ReportLabSink: Buffered ReportLab implementation (default)
    - RecordingSink: Decorator that records every command
    - TextFlow: Paragraph drawn in parts across breaks
    - TextRun, Align: Text styling primitives
    - RenderingError: Engine failure

Dependencies:
    - reportlab: PDF generation
    - PIL: Image handling
"""

from .sink import Align, OutputSink, RenderingError, TextFlow, TextRun, scaled_image_size
from .renderer import ReportLabSink
from .recording import Operation, RecordingSink

__all__ = [
    "Align",
    "OutputSink",
    "RenderingError",
    "TextFlow",
    "TextRun",
    "scaled_image_size",
    "ReportLabSink",
    "Operation",
    "RecordingSink",
]
