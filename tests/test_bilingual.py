import pytest

from edulab.studio.bilingual import SEPARATOR, wrap_bilingual

ANSWER = "1) What is ATP?\nA) ...\nAnswer: A — energy currency\n"


@pytest.mark.parametrize("target", [None, "", "   ", "none", "None", "NONE"])
def test_no_target_returns_answer_unchanged(target):
    assert wrap_bilingual(ANSWER, target) is ANSWER


def test_target_appends_directive():
    wrapped = wrap_bilingual(ANSWER, "French")
    assert wrapped.startswith(ANSWER)
    tail = wrapped[len(ANSWER):]
    assert tail.startswith(SEPARATOR)
    assert "French" in tail
    assert "Translate the entire answer above into French" in tail


def test_directive_does_not_translate():
    wrapped = wrap_bilingual("Hello", " Spanish ")
    assert wrapped.startswith("Hello")
    assert "Translate the entire answer above into Spanish." in wrapped


def test_empty_answer_still_wrapped():
    assert wrap_bilingual("", "German").startswith(SEPARATOR)
