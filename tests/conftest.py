import math
import sys
from pathlib import Path

import pytest
from PIL import Image

# Add src to sys.path so we can import paper_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from paper_toolkit.builder.config import PaperConfig  # noqa: E402
from paper_toolkit.builder.output.sink import Align, OutputSink, TextFlow  # noqa: E402


class FakeFlow(TextFlow):
    """Whole-line flow over FakeSink metrics; later parts are recorded as "flow"."""

    def __init__(self, sink, text, lines, line_height):
        self.sink = sink
        self.text = text
        self.lines = lines
        self.line_height = line_height
        self.parts = 0

    @property
    def done(self):
        return self.lines <= 0

    def draw(self, x, y, max_height):
        if self.done:
            return 0.0
        count = min(self.lines, int((max_height + 0.01) // self.line_height))
        if count <= 0:
            return 0.0
        kind = "text" if self.parts == 0 else "flow"
        self.sink.calls.append((kind, self.sink.page_count, x, y, self.text if self.parts == 0 else ""))
        self.parts += 1
        self.lines -= count
        return count * self.line_height


class FakeSink(OutputSink):
    """
    Engine-free sink with predictable text metrics.

    A glyph is half the font size wide and a line is 1.2 x the font size
    tall, so block heights can be computed by hand in tests.
    """

    def __init__(self, width: float = 595.2756, height: float = 841.8898):
        self._width = width
        self._height = height
        self._pages = 1
        self.calls: list[tuple] = []
        self.info: dict = {}
        self.finalized = False

    @property
    def page_width(self):
        return self._width

    @property
    def page_height(self):
        return self._height

    @property
    def page_count(self):
        return self._pages

    def set_info(self, **info):
        self.info.update(info)

    def measure_text(self, runs, width, align=Align.LEFT):
        text = "".join(r.text for r in runs)
        if not text:
            return 0.0
        size = max(r.size for r in runs)
        per_line = max(1, int(width // (size * 0.5)))
        return math.ceil(len(text) / per_line) * size * 1.2

    def draw_text(self, runs, x, y, width, align=Align.LEFT):
        height = self.measure_text(runs, width, align)
        self.calls.append(("text", self._pages, x, y, "".join(r.text for r in runs)))
        return height

    def flow_text(self, runs, width, align=Align.LEFT):
        text = "".join(r.text for r in runs)
        if not text:
            return FakeFlow(self, text, 0, 0.0)
        size = max(r.size for r in runs)
        line_height = size * 1.2
        lines = round(self.measure_text(runs, width, align) / line_height)
        return FakeFlow(self, text, lines, line_height)

    def draw_image(self, image, x, y, width, max_height=None):
        height = width * image.height / image.width
        if max_height is not None:
            height = min(height, max_height)
        self.calls.append(("image", self._pages, x, y, height))
        return height

    def draw_line(self, x1, y1, x2, y2):
        self.calls.append(("line", self._pages, x1, y1, x2, y2))

    def new_page(self):
        self._pages += 1
        self.calls.append(("page", self._pages))

    def finalize(self):
        self.finalized = True
        return b"%PDF-fake"

    def texts(self, page=None):
        return [c[4] for c in self.calls if c[0] == "text" and (page is None or c[1] == page)]


# Common test fixtures
@pytest.fixture
def config():
    """Default configuration (A4, two columns)."""
    return PaperConfig()


@pytest.fixture
def fake_sink():
    return FakeSink()


@pytest.fixture
def sample_image(tmp_path: Path):
    """Create a simple test image."""
    img = Image.new("RGB", (200, 100), color="white")
    img_path = tmp_path / "sample.png"
    img.save(img_path)
    return img_path


@pytest.fixture
def mcq_paper_data():
    """Single MCQ paper used as the reference scenario."""
    return {
        "questions": [
            {
                "type": "mcq",
                "text": "2+2=?",
                "options": ["3", "4", "5", "6"],
                "correctOption": 1,
                "solution": "Basic addition.",
            }
        ]
    }


@pytest.fixture
def full_paper_data():
    """Paper with every header field and mixed question types."""
    return {
        "title": "Mid-Term Examination",
        "subject": "Mathematics",
        "date": "2024-03-15",
        "duration": "2 hours",
        "totalMarks": "100",
        "author": "Exam Board",
        "instructions": ["Answer all questions.", "Show your working."],
        "questions": [
            {
                "type": "mcq",
                "text": "What is the capital of France?",
                "options": ["London", "Paris", "Berlin", "Madrid"],
                "correctOption": 1,
                "solution": "Paris has been the capital since 508 AD.",
            },
            {
                "type": "numerical",
                "text": "Compute 12 x 12.",
                "answer": "144",
                "solution": "12 x 12 = 144.",
            },
            {
                "type": "descriptive",
                "text": "Explain photosynthesis.",
                "answer": "Light to chemical energy",
            },
        ],
    }
