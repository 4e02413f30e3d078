from __future__ import annotations

from typing import Optional

SEPARATOR = "\n\n---\n\n"


def wants_translation(target_language: Optional[str]) -> bool:
    return bool(target_language and target_language.strip()) and target_language.strip().lower() != "none"


def wrap_bilingual(answer: str, target_language: Optional[str]) -> str:
    """
    Append a translation directive for ``target_language``.
    Nothing is translated here; the directive is plain text for the reader
    (or a follow-up model call) to act on.
    """
    if not wants_translation(target_language):
        return answer
    lang = target_language.strip()
    directive = (
        f"🔁 {lang} Translation:\n"
        f"Translate the entire answer above into {lang}. "
        "Translate every section in full, keep all headings, numbering and lists "
        "in the same structure, and preserve the original tone."
    )
    return f"{answer}{SEPARATOR}{directive}"
