from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence


class Mode(str, Enum):
    SUMMARY = "summary"
    QUIZ = "quiz"
    FLASHCARDS = "flashcards"
    MINDMAP = "mindmap"
    STUDY_PLAN = "study-plan"
    MOTIVATION = "motivation"


QUIZ_DEFAULT, QUIZ_MIN, QUIZ_MAX = 10, 1, 50
FLASHCARDS_DEFAULT, FLASHCARDS_MIN, FLASHCARDS_MAX = 20, 1, 100
HOURS_DEFAULT, HOURS_MIN, HOURS_MAX = 2.0, 0.5, 16.0
MAX_PLAN_DAYS = 366

MODE_TEMPERATURE: Dict[Mode, float] = {
    Mode.SUMMARY: 0.4,
    Mode.QUIZ: 0.5,
    Mode.FLASHCARDS: 0.5,
    Mode.MINDMAP: 0.4,
    Mode.STUDY_PLAN: 0.5,
    Mode.MOTIVATION: 0.8,
}


def parse_count(raw: Any, default: int, low: int, high: int) -> int:
    """
    None/"" -> default. Ints and integral numeric strings are clamped into
    [low, high]. Anything else raises ValueError.
    """
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return default
    if isinstance(raw, bool):
        raise ValueError("count must be a number")
    if isinstance(raw, float):
        if not raw.is_integer():
            raise ValueError("count must be a whole number")
        value = int(raw)
    elif isinstance(raw, int):
        value = raw
    elif isinstance(raw, str):
        try:
            value = int(raw.strip())
        except ValueError:
            raise ValueError(f"count must be a whole number, got {raw!r}")
    else:
        raise ValueError("count must be a number")
    return max(low, min(high, value))


def parse_hours(raw: Any) -> float:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return HOURS_DEFAULT
    if isinstance(raw, bool):
        raise ValueError("hoursPerDay must be a number")
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ValueError(f"hoursPerDay must be a number, got {raw!r}")
    if value != value:  # NaN
        raise ValueError("hoursPerDay must be a number")
    return max(HOURS_MIN, min(HOURS_MAX, value))


def parse_exam_date(raw: str) -> date:
    try:
        return date.fromisoformat(raw.strip())
    except ValueError:
        raise ValueError(f"examDate must be YYYY-MM-DD, got {raw!r}")


def study_days(exam_date: date, today: date) -> int:
    """Calendar days from today through the exam day, both included."""
    days = (exam_date - today).days + 1
    if days < 1:
        raise ValueError("examDate is in the past")
    if days > MAX_PLAN_DAYS:
        raise ValueError(f"examDate is more than {MAX_PLAN_DAYS} days away")
    return days


def _fmt_hours(hours: float) -> str:
    return str(int(hours)) if float(hours).is_integer() else f"{hours:g}"


def build_summary_prompt(content: str, language: str = "English") -> str:
    return f"""You are an academic summarizer. Create a **deep, structured, and readable** summary in {language}.

Follow this exact layout (use headings):

Title: (infer if missing)

Executive Summary (6-10 sentences)
Key Concepts (bulleted, each with a one-line definition)
Step-by-Step Explanation (8-14 numbered steps)
Examples & Analogies
Important Data/Formulae (write "None in source" if there are none)
Assumptions & Limitations
Implications & Applications
Common Pitfalls / Misconceptions
10 High-Impact Takeaways (exactly 10, numbered)

Rules:
- Use only the source content; do not invent facts, figures or citations.
- Keep the section order and headings exactly as above.

Now summarize this source content:
{content}
"""


def build_quiz_prompt(content: str, count: int = QUIZ_DEFAULT) -> str:
    n = max(QUIZ_MIN, min(QUIZ_MAX, int(count)))
    return f"""Create exactly {n} multiple-choice questions based on the content below.

Rules:
- Each question has exactly four options labelled A, B, C and D, with one correct option.
- Cover different parts of the content; do not repeat a question.
- Follow this output format exactly for every question, with a blank line between questions,
  and nothing before the first question or after the last one:

1) Question text
A) ...
B) ...
C) ...
D) ...
Answer: <Letter> — reason

(Content)
{content}
"""


def build_flashcards_prompt(content: str, count: int = FLASHCARDS_DEFAULT) -> str:
    n = max(FLASHCARDS_MIN, min(FLASHCARDS_MAX, int(count)))
    return f"""Generate exactly {n} active-recall flashcards from the content.

Rules:
- One fact or idea per card; questions must be answerable from the content alone.
- Keep answers short (one or two sentences).
- Render every card as exactly two lines, with a blank line between cards:

Q: <question>
A: <answer>

Content:
{content}
"""


def build_mindmap_prompt(content: str) -> str:
    return f"""Convert the following content into a Mermaid mind map.

Rules:
- Use Mermaid "mindmap" syntax with a single root node for the main topic.
- Go 3-4 levels deep: root, main themes, sub-topics, key details.
- Keep node labels short (at most 6 words) and avoid parentheses or brackets inside labels.
- Return ONLY Mermaid code, starting with "mindmap". No prose, no explanations, no code fences.

Content:
{content}
"""


def build_study_plan_prompt(
    subjects: Sequence[str],
    exam_date: date,
    hours_per_day: float = HOURS_DEFAULT,
    today: Optional[date] = None,
) -> str:
    today = today or date.today()
    days = study_days(exam_date, today)
    subject_list = ", ".join(subjects) or "N/A"
    return f"""Create a day-by-day study plan until the exam date.

Subjects: {subject_list}
Today: {today.isoformat()}
Exam Date: {exam_date.isoformat()}
Number of days (today through exam day, inclusive): {days}
Hours/Day: {_fmt_hours(hours_per_day)}

Rules:
- Write exactly {days} day entries, labelled "Day 1 ({today.isoformat()})" through "Day {days} ({exam_date.isoformat()})".
- Each day lists the subject(s), the topics, and a time split that adds up to {_fmt_hours(hours_per_day)} hours.
- Balance the subjects across the plan.
- Include a weekly review checkpoint every 7th day (or once, if the plan is shorter than a week).
- Add spaced-repetition reminders that revisit earlier topics after 1, 3 and 7 days.
- Finish with exactly 3 exam-week tips.
"""


def build_motivation_prompt(context: Optional[str] = None) -> str:
    ctx = (context or "").strip() or "N/A"
    return f"""Give an energetic, 120-180 word motivational note for a student preparing for exams.

Rules:
- Warm, sincere and encouraging; no clichés, no guilt, no exaggerated promises.
- Speak directly to the student ("you").
- Include exactly one concrete, actionable tip they can do today.

Context: {ctx}
"""


def _summary(content: str, options: Mapping[str, Any]) -> str:
    return build_summary_prompt(content, options.get("language") or "English")


def _quiz(content: str, options: Mapping[str, Any]) -> str:
    return build_quiz_prompt(content, options.get("count", QUIZ_DEFAULT))


def _flashcards(content: str, options: Mapping[str, Any]) -> str:
    return build_flashcards_prompt(content, options.get("count", FLASHCARDS_DEFAULT))


def _mindmap(content: str, options: Mapping[str, Any]) -> str:
    return build_mindmap_prompt(content)


def _study_plan(content: str, options: Mapping[str, Any]) -> str:
    subjects: List[str] = list(options.get("subjects") or [])
    return build_study_plan_prompt(
        subjects,
        options["exam_date"],
        options.get("hours_per_day", HOURS_DEFAULT),
        today=options.get("today"),
    )


def _motivation(content: str, options: Mapping[str, Any]) -> str:
    return build_motivation_prompt(content)


PROMPT_BUILDERS: Dict[Mode, Callable[[str, Mapping[str, Any]], str]] = {
    Mode.SUMMARY: _summary,
    Mode.QUIZ: _quiz,
    Mode.FLASHCARDS: _flashcards,
    Mode.MINDMAP: _mindmap,
    Mode.STUDY_PLAN: _study_plan,
    Mode.MOTIVATION: _motivation,
}


def build_prompt(mode: Mode, content: str = "", options: Optional[Mapping[str, Any]] = None) -> str:
    return PROMPT_BUILDERS[Mode(mode)](content, options or {})
