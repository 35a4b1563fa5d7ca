"""
Unit tests for question block planning and drawing.

Heights use the FakeSink metrics: 10pt text is 12pt per line, and a
column holds 49 characters per line.
"""

import pytest

from paper_toolkit.builder.blocks import RenderContext, draw_question, plan_question, render_question
from paper_toolkit.builder.diagnostics import DiagnosticsCollector
from paper_toolkit.builder.layout import LayoutCursor
from paper_toolkit.core.models import Question, QuestionType


@pytest.fixture
def ctx(fake_sink, config):
    return RenderContext(sink=fake_sink, config=config, diagnostics=DiagnosticsCollector())


@pytest.fixture
def cursor(fake_sink, config):
    """Cursor in column 0 with the columns starting at y=100."""
    cursor = LayoutCursor(fake_sink, config)
    cursor.move_to(100)
    cursor.start_columns()
    return cursor


def _mcq(**overrides):
    data = {"type": "mcq", "text": "2+2=?", "options": ["3", "4", "5", "6"], "correctOption": 1}
    data.update(overrides)
    return Question.from_dict(data)


def _long_question():
    # "Q1. " + 976 characters = 20 lines of 49 characters
    return Question.from_dict({"type": "descriptive", "text": "x" * 976})


def test_plan_question_when_mcq_then_label_options_and_spacing_measured(ctx, config):
    # Act
    plan = plan_question(ctx, _mcq(), 1, config.column_width)

    # Assert
    # text 12 + option gap 6 + 4 options x 12 + trailing 9.6
    assert plan.option_count == 4
    assert plan.height == pytest.approx(12 + 6 + 48 + 9.6)


def test_render_question_when_mcq_then_lettered_options_in_order(ctx, cursor, fake_sink):
    render_question(ctx, cursor, _mcq(), 1)

    assert fake_sink.texts() == ["Q1. 2+2=?", "A) 3", "B) 4", "C) 5", "D) 6"]


def test_render_question_when_options_drawn_then_indented(ctx, cursor, fake_sink, config):
    render_question(ctx, cursor, _mcq(), 1)

    xs = [c[2] for c in fake_sink.calls if c[0] == "text"]
    assert xs[0] == 40
    assert all(x == 40 + config.thresholds.option_indent for x in xs[1:])


def test_draw_question_when_drawn_then_height_matches_plan(ctx, cursor, config):
    plan = plan_question(ctx, _mcq(), 3, config.column_width)

    result = draw_question(ctx, plan, cursor)

    assert result.height == pytest.approx(plan.height)
    assert result.y == pytest.approx(100 + plan.height)
    assert cursor.y == pytest.approx(result.y)


def test_draw_question_when_text_taller_than_space_left_then_continues_in_next_column(
    ctx, cursor, fake_sink, config
):
    # Arrange
    cursor.move_to(700)  # 91.9pt left: 7 lines fit
    plan = plan_question(ctx, _long_question(), 1, config.column_width)

    # Act
    result = draw_question(ctx, plan, cursor)

    # Assert
    first = [c for c in fake_sink.calls if c[0] == "text"]
    rest = [c for c in fake_sink.calls if c[0] == "flow"]
    assert [c[1:4] for c in first] == [(1, 40, 700)]
    assert [c[1:4] for c in rest] == [(1, pytest.approx(307.64, abs=0.01), 100)]
    assert cursor.column == 1
    # 13 remaining lines + trailing 9.6
    assert result.y == pytest.approx(100 + 13 * 12 + 9.6)


def test_draw_question_when_outside_columns_then_text_continues_on_new_page(ctx, fake_sink, config):
    # Arrange
    cursor = LayoutCursor(fake_sink, config)
    cursor.move_to(700)
    plan = plan_question(ctx, _long_question(), 1, config.column_width)

    # Act
    draw_question(ctx, plan, cursor)

    # Assert
    assert ("page", 2) in fake_sink.calls
    (flow_call,) = [c for c in fake_sink.calls if c[0] == "flow"]
    assert flow_call[1:4] == (2, 40, 50)


def test_draw_question_when_image_does_not_fit_then_moves_to_next_column(
    ctx, cursor, fake_sink, config, sample_image
):
    # Arrange
    q = Question.from_dict({"type": "descriptive", "text": "Label.", "images": [str(sample_image)]})
    plan = plan_question(ctx, q, 1, config.column_width)
    cursor.move_to(700)

    # Act
    draw_question(ctx, plan, cursor)

    # Assert
    (image_call,) = [c for c in fake_sink.calls if c[0] == "image"]
    assert image_call[2] == pytest.approx(307.64, abs=0.01)
    assert image_call[3] == 100


def test_plan_question_when_mcq_without_options_then_block_omitted_with_warning(ctx, config):
    plan = plan_question(ctx, _mcq(options=[]), 2, config.column_width)

    assert plan.option_count == 0
    (warning,) = ctx.diagnostics.warnings
    assert warning.field == "options"
    assert warning.question_number == 2


def test_plan_question_when_numerical_with_options_then_options_ignored(ctx, cursor, fake_sink):
    q = Question.from_dict({"type": "numerical", "text": "12 x 12", "options": ["a", "b"]})

    render_question(ctx, cursor, q, 1)

    assert fake_sink.texts() == ["Q1. 12 x 12"]


def test_plan_question_when_text_missing_then_label_only_with_warning(ctx, cursor, fake_sink):
    q = Question(type=QuestionType.DESCRIPTIVE)

    render_question(ctx, cursor, q, 4)

    assert fake_sink.texts() == ["Q4. "]
    assert [w.field for w in ctx.diagnostics.warnings] == ["text"]


def test_plan_question_when_correct_option_out_of_range_then_warns(ctx, config):
    plan_question(ctx, _mcq(correctOption=9), 1, config.column_width)

    assert [w.field for w in ctx.diagnostics.warnings] == ["correctOption"]


def test_plan_question_when_unknown_type_then_warns_and_renders_descriptive(ctx, config):
    q = Question.from_dict({"type": "essay", "text": "Discuss.", "options": ["x"]})

    plan = plan_question(ctx, q, 1, config.column_width)

    assert plan.option_count == 0
    assert [w.field for w in ctx.diagnostics.warnings] == ["type"]


def test_render_question_when_image_given_then_drawn_below_text(ctx, cursor, fake_sink, config, sample_image):
    q = Question.from_dict({"type": "descriptive", "text": "Label the diagram.", "images": [str(sample_image)]})

    render_question(ctx, cursor, q, 1)

    (image_call,) = [c for c in fake_sink.calls if c[0] == "image"]
    # below the 12pt text line and a 0.3 line gap
    assert image_call[3] == pytest.approx(100 + 12 + 3.6)
    assert image_call[4] == pytest.approx(config.column_width / 2)


def test_plan_question_when_image_missing_then_skipped_with_warning(ctx, cursor, fake_sink, tmp_path):
    q = Question.from_dict({"type": "descriptive", "text": "x", "images": [str(tmp_path / "nope.png")]})

    render_question(ctx, cursor, q, 1)

    assert not [c for c in fake_sink.calls if c[0] == "image"]
    assert ctx.diagnostics.warnings[0].field == "images[0]"
