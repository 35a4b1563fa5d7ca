"""
Unit tests for the recording sink decorator.
"""

from unittest.mock import MagicMock

import pytest

from paper_toolkit.builder.output import OutputSink, RecordingSink, TextRun


@pytest.fixture
def inner():
    mock = MagicMock(spec=OutputSink)
    mock.page_count = 1
    mock.draw_text.return_value = 12.0
    mock.finalize.return_value = b"%PDF"
    return mock


def test_draw_text_when_forwarded_then_records_text_and_height(inner):
    sink = RecordingSink(inner)

    height = sink.draw_text([TextRun("Q1. "), TextRun("2+2=?")], 40, 80, 200)

    assert height == 12.0
    inner.draw_text.assert_called_once()
    (op,) = sink.operations
    assert op.kind == "text"
    assert op.text == "Q1. 2+2=?"
    assert (op.x, op.y, op.height, op.page) == (40, 80, 12.0, 1)


def test_new_page_when_forwarded_then_records_new_page_number(inner):
    sink = RecordingSink(inner)

    def _next_page():
        inner.page_count = 2

    inner.new_page.side_effect = _next_page

    sink.new_page()
    sink.draw_text([TextRun("later")], 40, 50, 200)

    assert [op.kind for op in sink.operations] == ["page", "text"]
    assert sink.texts(page=2) == ["later"]
    assert sink.texts(page=1) == []


def test_find_when_prefix_given_then_matching_text_operations(inner):
    sink = RecordingSink(inner)
    sink.draw_text([TextRun("1. B")], 40, 50, 100)
    sink.draw_text([TextRun("2. 144")], 140, 50, 100)
    sink.draw_line(0, 0, 0, 10)

    assert [op.text for op in sink.find("2.")] == ["2. 144"]
    assert len(sink.of_kind("line")) == 1


def test_to_dict_when_line_then_includes_end_point(inner):
    sink = RecordingSink(inner)
    sink.draw_line(1, 2, 3, 4)

    data = sink.operations[0].to_dict()

    assert data["end"] == (3, 4)


def test_to_dict_when_text_then_omits_end(inner):
    sink = RecordingSink(inner)
    sink.draw_text([TextRun("x")], 0, 0, 10)

    assert "end" not in sink.operations[0].to_dict()


def test_finalize_when_called_then_returns_inner_bytes(inner):
    assert RecordingSink(inner).finalize() == b"%PDF"


def test_flow_text_when_drawn_in_parts_then_first_text_then_flow(inner):
    # Arrange
    inner_flow = MagicMock()
    inner_flow.draw.side_effect = [24.0, 0.0, 36.0]
    inner.flow_text.return_value = inner_flow
    sink = RecordingSink(inner)

    # Act
    flow = sink.flow_text([TextRun("long solution")], 300)
    flow.draw(40, 760, 30)
    flow.draw(40, 784, 7)
    flow.draw(40, 50, 700)

    # Assert
    assert [(op.kind, op.y, op.height) for op in sink.operations] == [
        ("text", 760, 24.0),
        ("flow", 50, 36.0),
    ]
    assert sink.texts() == ["long solution"]
    assert flow.done is inner_flow.done
