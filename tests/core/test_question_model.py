"""
Unit tests for the Question and Paper models.
"""

import pytest

from paper_toolkit.core.models import Paper, Question, QuestionType, option_letter


class TestQuestionFromDict:
    def test_from_dict_when_mcq_then_parses_options_and_correct_option(self):
        # Arrange
        data = {"type": "mcq", "text": "2+2=?", "options": ["3", "4"], "correctOption": 1}

        # Act
        q = Question.from_dict(data)

        # Assert
        assert q.type is QuestionType.MCQ
        assert q.options == ("3", "4")
        assert q.correct_option == 1
        assert q.has_options
        assert q.raw_type is None

    def test_from_dict_when_type_unknown_then_descriptive_with_raw_type(self):
        q = Question.from_dict({"type": "essay", "text": "Discuss."})

        assert q.type is QuestionType.DESCRIPTIVE
        assert q.raw_type == "essay"

    def test_from_dict_when_type_uppercase_then_recognised(self):
        q = Question.from_dict({"type": "MCQ", "options": ["a"]})

        assert q.is_mcq

    def test_from_dict_when_correct_option_is_bool_then_ignored(self):
        q = Question.from_dict({"type": "mcq", "options": ["a", "b"], "correctOption": True})

        assert q.correct_option is None

    def test_from_dict_when_fields_missing_then_empty_and_none(self):
        q = Question.from_dict({})

        assert q.text == ""
        assert q.options is None
        assert q.answer is None
        assert q.solution is None
        assert q.images == ()

    def test_from_dict_when_options_not_a_list_then_none(self):
        q = Question.from_dict({"type": "mcq", "options": "A, B"})

        assert q.options is None
        assert not q.has_options


class TestAnswerText:
    @pytest.mark.parametrize("index, letter", [(0, "A"), (1, "B"), (3, "D")])
    def test_answer_text_when_mcq_then_letter_of_correct_option(self, index, letter):
        q = Question(type=QuestionType.MCQ, options=("w", "x", "y", "z"), correct_option=index)

        assert q.answer_text == letter

    def test_answer_text_when_mcq_out_of_range_then_no_letter(self):
        q = Question(type=QuestionType.MCQ, options=("w", "x"), correct_option=5)

        assert q.answer_text == ""
        assert not q.correct_option_in_range

    def test_answer_text_when_mcq_index_huge_then_falls_back_to_answer(self):
        q = Question(type=QuestionType.MCQ, options=("w", "x"), correct_option=2000000, answer="x")

        assert q.answer_text == "x"

    def test_answer_text_when_numerical_then_literal_answer(self):
        q = Question(type=QuestionType.NUMERICAL, answer="144")

        assert q.answer_text == "144"

    def test_answer_text_when_mcq_without_correct_option_then_literal_answer(self):
        q = Question(type=QuestionType.MCQ, options=("a",), answer="a")

        assert q.answer_text == "a"

    def test_answer_text_when_nothing_given_then_empty(self):
        assert Question(type=QuestionType.DESCRIPTIVE).answer_text == ""


def test_excerpt_when_text_longer_than_limit_then_truncated_with_ellipsis():
    q = Question(type=QuestionType.DESCRIPTIVE, text="x" * 75)

    assert q.excerpt(60) == "x" * 60 + "..."
    assert Question(type=QuestionType.DESCRIPTIVE, text="short").excerpt(60) == "short"


def test_has_solution_when_whitespace_only_then_false():
    assert not Question(type=QuestionType.DESCRIPTIVE, solution="   ").has_solution


def test_option_letter_when_index_then_uppercase_letter():
    assert [option_letter(i) for i in range(4)] == ["A", "B", "C", "D"]


def test_to_dict_when_round_tripped_then_camel_case_keys():
    data = {"type": "mcq", "text": "Q", "options": ["a", "b"], "correctOption": 0}

    assert Question.from_dict(data).to_dict() == data


class TestPaper:
    def test_from_dict_when_full_then_reads_camel_case_fields(self, full_paper_data):
        paper = Paper.from_dict(full_paper_data)

        assert paper.title == "Mid-Term Examination"
        assert paper.total_marks == "100"
        assert paper.instructions == ("Answer all questions.", "Show your working.")
        assert paper.question_count == 3

    def test_display_fields_when_missing_then_fallback_literals(self):
        paper = Paper.from_dict({"questions": []})

        assert paper.display_title == "Question Paper"
        assert paper.display_subject == "General"
        assert paper.display_date == "N/A"
        assert paper.display_duration == "N/A"
        assert paper.display_total_marks == "N/A"
        assert paper.display_author == "PDF Generator"

    def test_from_dict_when_total_marks_numeric_then_stringified(self):
        paper = Paper.from_dict({"questions": [], "totalMarks": 50})

        assert paper.display_total_marks == "50"

    def test_from_dict_when_instructions_not_a_list_then_ignored(self):
        paper = Paper.from_dict({"questions": [], "instructions": "Be quiet"})

        assert paper.instructions == ()
