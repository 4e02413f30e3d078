from datetime import date, timedelta

import pytest

from edulab.studio.prompts import (
    MODE_TEMPERATURE,
    PROMPT_BUILDERS,
    Mode,
    build_flashcards_prompt,
    build_mindmap_prompt,
    build_motivation_prompt,
    build_prompt,
    build_quiz_prompt,
    build_study_plan_prompt,
    build_summary_prompt,
    parse_count,
    parse_exam_date,
    parse_hours,
    study_days,
)

CONTENT = "Photosynthesis converts light into chemical energy."


class TestParseCount:
    def test_default_when_absent(self):
        assert parse_count(None, 10, 1, 50) == 10
        assert parse_count("  ", 10, 1, 50) == 10

    @pytest.mark.parametrize("raw,expected", [(0, 1), (-5, 1), (3, 3), (1000, 50), ("7", 7), (" 12 ", 12), (4.0, 4)])
    def test_clamps(self, raw, expected):
        assert parse_count(raw, 10, 1, 50) == expected

    @pytest.mark.parametrize("raw", ["abc", "3.5", 2.5, True, [3], {"n": 3}])
    def test_rejects_non_numeric(self, raw):
        with pytest.raises(ValueError):
            parse_count(raw, 10, 1, 50)


class TestParseHours:
    def test_default(self):
        assert parse_hours(None) == 2.0

    @pytest.mark.parametrize("raw,expected", [(3, 3.0), ("1.5", 1.5), (0, 0.5), (100, 16.0)])
    def test_clamps(self, raw, expected):
        assert parse_hours(raw) == expected

    @pytest.mark.parametrize("raw", ["lots", False, "nan"])
    def test_rejects(self, raw):
        with pytest.raises(ValueError):
            parse_hours(raw)


class TestStudyDays:
    def test_counts_both_ends(self):
        today = date(2026, 3, 1)
        assert study_days(date(2026, 3, 1), today) == 1
        assert study_days(date(2026, 3, 10), today) == 10

    def test_past_exam(self):
        with pytest.raises(ValueError):
            study_days(date(2026, 2, 28), date(2026, 3, 1))

    def test_too_far_away(self):
        today = date(2026, 3, 1)
        with pytest.raises(ValueError):
            study_days(today + timedelta(days=800), today)

    def test_parse_exam_date(self):
        assert parse_exam_date("2026-06-15") == date(2026, 6, 15)
        with pytest.raises(ValueError):
            parse_exam_date("next friday")


def test_summary_prompt_sections_and_language():
    prompt = build_summary_prompt(CONTENT)
    assert "summary in English" in prompt
    for heading in (
        "Executive Summary",
        "Key Concepts",
        "Step-by-Step Explanation",
        "Examples & Analogies",
        "Important Data/Formulae",
        "Assumptions & Limitations",
        "Implications & Applications",
        "Common Pitfalls",
        "10 High-Impact Takeaways",
    ):
        assert heading in prompt
    assert prompt.rstrip().endswith(CONTENT)
    assert "summary in Spanish" in build_summary_prompt(CONTENT, "Spanish")


@pytest.mark.parametrize("count,expected", [(0, 1), (3, 3), (1000, 50)])
def test_quiz_prompt_count_is_clamped(count, expected):
    prompt = build_quiz_prompt(CONTENT, count)
    assert f"Create exactly {expected} multiple-choice questions" in prompt
    assert "Answer: <Letter> — reason" in prompt
    assert "D) ..." in prompt


def test_quiz_prompt_default():
    assert "exactly 10 multiple-choice" in build_quiz_prompt(CONTENT)


@pytest.mark.parametrize("count,expected", [(0, 1), (20, 20), (1000, 100)])
def test_flashcards_prompt_count_is_clamped(count, expected):
    prompt = build_flashcards_prompt(CONTENT, count)
    assert f"exactly {expected} active-recall flashcards" in prompt
    assert "Q: <question>\nA: <answer>" in prompt


def test_mindmap_prompt():
    prompt = build_mindmap_prompt(CONTENT)
    assert 'starting with "mindmap"' in prompt
    assert "3-4 levels" in prompt
    assert CONTENT in prompt


def test_study_plan_prompt_injects_day_count():
    today = date(2026, 5, 1)
    prompt = build_study_plan_prompt(["Biology", "Chemistry"], date(2026, 5, 14), 3, today=today)
    assert "Subjects: Biology, Chemistry" in prompt
    assert "Today: 2026-05-01" in prompt
    assert "Exam Date: 2026-05-14" in prompt
    assert "inclusive): 14" in prompt
    assert "Hours/Day: 3" in prompt
    assert "exactly 3 exam-week tips" in prompt
    assert "spaced-repetition" in prompt
    assert "weekly review checkpoint" in prompt


def test_study_plan_prompt_fractional_hours():
    today = date(2026, 5, 1)
    assert "Hours/Day: 1.5" in build_study_plan_prompt(["Math"], today, 1.5, today=today)


def test_motivation_prompt_context():
    assert "Context: N/A" in build_motivation_prompt()
    assert "Context: N/A" in build_motivation_prompt("   ")
    prompt = build_motivation_prompt("calculus final on Monday")
    assert "Context: calculus final on Monday" in prompt
    assert "120-180 word" in prompt
    assert "exactly one concrete, actionable tip" in prompt


def test_every_mode_has_a_builder_and_temperature():
    assert set(PROMPT_BUILDERS) == set(Mode)
    assert set(MODE_TEMPERATURE) == set(Mode)
    assert MODE_TEMPERATURE[Mode.MOTIVATION] > MODE_TEMPERATURE[Mode.SUMMARY]


def test_unknown_mode_cannot_be_built():
    with pytest.raises(ValueError):
        Mode("poem")


def test_build_prompt_dispatch():
    assert build_prompt(Mode.QUIZ, CONTENT, {"count": 4}) == build_quiz_prompt(CONTENT, 4)
    assert build_prompt("flashcards", CONTENT) == build_flashcards_prompt(CONTENT)
    assert build_prompt(Mode.MOTIVATION) == build_motivation_prompt(None)
    today = date(2026, 1, 1)
    options = {"subjects": ["History"], "exam_date": date(2026, 1, 3), "today": today}
    assert "inclusive): 3" in build_prompt(Mode.STUDY_PLAN, options=options)
