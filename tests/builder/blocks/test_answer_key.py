"""
Unit tests for the answer key grid.
"""

import pytest

from paper_toolkit.builder.blocks import RenderContext, answer_entry, render_answer_key
from paper_toolkit.builder.diagnostics import DiagnosticsCollector
from paper_toolkit.builder.layout import LayoutCursor
from paper_toolkit.core.models import Question, QuestionType


@pytest.fixture
def ctx(fake_sink, config):
    return RenderContext(sink=fake_sink, config=config, diagnostics=DiagnosticsCollector())


@pytest.fixture
def cursor(fake_sink, config):
    return LayoutCursor(fake_sink, config)


def _numbered(count):
    return [Question(type=QuestionType.NUMERICAL, answer=str(i * 10)) for i in range(1, count + 1)]


def test_answer_entry_when_mcq_then_number_and_letter():
    q = Question(type=QuestionType.MCQ, options=("3", "4", "5", "6"), correct_option=1)

    assert answer_entry(q, 1) == "1. B"


def test_render_answer_key_when_five_answers_then_four_per_row(ctx, cursor, fake_sink, config):
    # Act
    result = render_answer_key(ctx, cursor, _numbered(5))

    # Assert
    calls = [c for c in fake_sink.calls if c[0] == "text"]
    cell = config.content_width / 4
    assert [c[4] for c in calls] == ["1. 10", "2. 20", "3. 30", "4. 40", "5. 50"]
    assert [c[2] for c in calls[:4]] == pytest.approx([40, 40 + cell, 40 + 2 * cell, 40 + 3 * cell])
    assert calls[4][2:4] == (40, 70)
    assert result.height == pytest.approx(40)
    assert cursor.y == pytest.approx(90)


def test_render_answer_key_when_answer_taller_than_row_then_row_grows(ctx, cursor, fake_sink):
    questions = _numbered(5)
    questions[1] = Question(type=QuestionType.DESCRIPTIVE, answer="long " * 40)

    render_answer_key(ctx, cursor, questions)

    fifth = [c for c in fake_sink.calls if c[0] == "text"][4]
    assert fifth[3] > 50 + 20


def test_render_answer_key_when_next_row_passes_bottom_then_new_page(ctx, cursor, fake_sink):
    cursor.move_to(760)

    render_answer_key(ctx, cursor, _numbered(5))

    assert fake_sink.page_count == 2
    assert fake_sink.texts(page=2) == ["5. 50"]
    assert cursor.y == pytest.approx(70)


def test_render_answer_key_when_last_row_at_bottom_then_no_trailing_page(ctx, cursor, fake_sink):
    cursor.move_to(760)

    render_answer_key(ctx, cursor, _numbered(4))

    assert fake_sink.page_count == 1


def test_render_answer_key_when_answer_missing_then_blank_entry_and_warning(ctx, cursor, fake_sink):
    render_answer_key(ctx, cursor, [Question(type=QuestionType.DESCRIPTIVE)])

    assert fake_sink.texts() == ["1. "]
    assert ctx.diagnostics.warnings[0].field == "answer"


def test_render_answer_key_when_no_questions_then_nothing_drawn(ctx, cursor, fake_sink):
    result = render_answer_key(ctx, cursor, [])

    assert fake_sink.texts() == []
    assert result.height == 0


def test_render_answer_key_when_correct_option_far_out_of_range_then_blank_entry_with_warning(
    ctx, cursor, fake_sink
):
    # Arrange
    q = Question(type=QuestionType.MCQ, options=("3", "4"), correct_option=2000000)

    # Act
    render_answer_key(ctx, cursor, [q])

    # Assert
    assert fake_sink.texts() == ["1. "]
    assert [(w.field, w.question_number) for w in ctx.diagnostics.warnings] == [("answer", 1)]
