"""
Module: builder.output.recording

Purpose:
    Sink decorator that records every drawing command before forwarding
    it to the wrapped sink. Gives a format-independent trace of the
    layout: which text landed on which page, column position and order.

Key Classes:
    - Operation: One recorded command
    - RecordingSink: Recording decorator

Used By:
    - cli: ``render --trace`` layout dump
    - tests: Layout assertions without parsing PDF bytes
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Optional, Sequence

from PIL import Image

from .sink import Align, OutputSink, TextFlow, TextRun


@dataclass(frozen=True)
class Operation:
    """
    A recorded sink command.

    Attributes:
        kind: "text", "flow", "image", "line" or "page"; "flow" is a
            continuation part of flowed text drawn after a break
        page: 1-based page the command was issued on
        x, y: Top-left position (line start for lines)
        width: Wrap width, image width, or 0
        height: Height consumed (0 for lines and pages)
        text: Concatenated run text (first part of text commands only)
        end: (x2, y2) for lines
    """

    kind: str
    page: int
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    text: str = ""
    end: Optional[tuple[float, float]] = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        if self.end is None:
            del data["end"]
        return data


class _RecordingFlow(TextFlow):
    """Records each drawn part of a flow on the owning RecordingSink."""

    def __init__(self, sink: "RecordingSink", inner: TextFlow, width: float, text: str) -> None:
        self._sink = sink
        self._inner = inner
        self._width = width
        self._text = text
        self._parts = 0

    @property
    def done(self) -> bool:
        return self._inner.done

    def draw(self, x: float, y: float, max_height: float) -> float:
        height = self._inner.draw(x, y, max_height)
        if height > 0:
            first = self._parts == 0
            self._parts += 1
            self._sink.operations.append(Operation(
                kind="text" if first else "flow",
                page=self._sink.page_count,
                x=x,
                y=y,
                width=self._width,
                height=height,
                text=self._text if first else "",
            ))
        return height


class RecordingSink(OutputSink):
    """
    Forwarding sink that keeps an ordered log of commands.

    Example:
        >>> sink = RecordingSink(ReportLabSink(config))
        >>> generate_pdf(paper, config, sink=sink)
        >>> sink.texts(page=2)[0]
        'QUESTIONS'
    """

    def __init__(self, inner: OutputSink) -> None:
        self._inner = inner
        self.operations: list[Operation] = []

    @property
    def page_width(self) -> float:
        return self._inner.page_width

    @property
    def page_height(self) -> float:
        return self._inner.page_height

    @property
    def page_count(self) -> int:
        return self._inner.page_count

    def set_info(self, **info: Optional[str]) -> None:
        self._inner.set_info(**info)

    def measure_text(
        self,
        runs: Sequence[TextRun],
        width: float,
        align: Align = Align.LEFT,
    ) -> float:
        return self._inner.measure_text(runs, width, align)

    def draw_text(
        self,
        runs: Sequence[TextRun],
        x: float,
        y: float,
        width: float,
        align: Align = Align.LEFT,
    ) -> float:
        height = self._inner.draw_text(runs, x, y, width, align)
        self.operations.append(Operation(
            kind="text",
            page=self.page_count,
            x=x,
            y=y,
            width=width,
            height=height,
            text="".join(run.text for run in runs),
        ))
        return height

    def flow_text(
        self,
        runs: Sequence[TextRun],
        width: float,
        align: Align = Align.LEFT,
    ) -> TextFlow:
        inner = self._inner.flow_text(runs, width, align)
        return _RecordingFlow(self, inner, width, "".join(run.text for run in runs))

    def draw_image(
        self,
        image: Image.Image,
        x: float,
        y: float,
        width: float,
        max_height: Optional[float] = None,
    ) -> float:
        height = self._inner.draw_image(image, x, y, width, max_height)
        self.operations.append(Operation(
            kind="image", page=self.page_count, x=x, y=y, width=width, height=height,
        ))
        return height

    def draw_line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        self._inner.draw_line(x1, y1, x2, y2)
        self.operations.append(Operation(
            kind="line", page=self.page_count, x=x1, y=y1, end=(x2, y2),
        ))

    def new_page(self) -> None:
        self._inner.new_page()
        self.operations.append(Operation(kind="page", page=self.page_count))

    def finalize(self) -> bytes:
        return self._inner.finalize()

    # ─────────────────────────────────────────────────────────────────────────
    # Queries
    # ─────────────────────────────────────────────────────────────────────────

    def texts(self, page: Optional[int] = None) -> list[str]:
        """Text of every text command, optionally restricted to one page."""
        return [
            op.text for op in self.operations
            if op.kind == "text" and (page is None or op.page == page)
        ]

    def find(self, text: str) -> list[Operation]:
        """Text commands whose text starts with ``text``."""
        return [op for op in self.operations if op.kind == "text" and op.text.startswith(text)]

    def of_kind(self, kind: str) -> list[Operation]:
        return [op for op in self.operations if op.kind == kind]
