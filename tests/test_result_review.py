"""
Test: review rows and countdown helpers.
"""
import pytest

from exam_app.core.services.result_review import build_review, format_remaining, is_time_running_low


class TestBuildReview:
    def test_rows_mark_correct_wrong_and_skipped(self, sample_quiz):
        rows = build_review(sample_quiz, {0: 1, 1: 1})
        assert [row.is_correct for row in rows] == [True, False, False]
        assert rows[0].chosen_option == "1-b"
        assert rows[1].chosen_option == "2-b"
        assert rows[1].correct_option == "2-a"
        assert rows[2].chosen_option is None
        assert rows[2].correct_option == "3-c"

    def test_rows_follow_question_order(self, sample_quiz):
        rows = build_review(sample_quiz, {})
        assert [row.index for row in rows] == [0, 1, 2]
        assert [row.question_text for row in rows] == [q.text for q in sample_quiz.questions]


class TestCountdown:
    @pytest.mark.parametrize(
        "seconds, expected",
        [(0, "0:00"), (5, "0:05"), (60, "1:00"), (754, "12:34"), (-3, "0:00")],
    )
    def test_format_remaining(self, seconds, expected):
        assert format_remaining(seconds) == expected

    def test_running_low_under_one_minute(self):
        assert is_time_running_low(59)
        assert not is_time_running_low(60)
