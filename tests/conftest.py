"""
Shared fixtures: a fake LLM client, per-test settings with a temp upload
directory, and helpers that build real DOCX/PDF files.
"""

from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import docx
import fitz
import pytest
from fastapi.testclient import TestClient

from edulab.core.config import Settings, get_settings
from edulab.main import app, get_llm_client


class FakeLLM:
    """Records every call; returns ``answer`` or raises ``error``."""

    def __init__(self, answer: str = "fake answer", error: Optional[Exception] = None):
        self.answer = answer
        self.error = error
        self.calls: List[Tuple[str, float]] = []

    async def generate(self, prompt: str, temperature: float) -> str:
        self.calls.append((prompt, temperature))
        if self.error is not None:
            raise self.error
        return self.answer

    @property
    def last_prompt(self) -> str:
        return self.calls[-1][0]


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
def upload_dir(tmp_path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture
def test_settings(upload_dir) -> Settings:
    return Settings(gemini_api_key="test-key", upload_dir=upload_dir, max_upload_mb=1)


@pytest.fixture
def client(fake_llm, test_settings):
    app.dependency_overrides[get_llm_client] = lambda: fake_llm
    app.dependency_overrides[get_settings] = lambda: test_settings
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_docx(path: Path, paragraphs: Sequence[str]) -> Path:
    document = docx.Document()
    for p in paragraphs:
        document.add_paragraph(p)
    document.save(str(path))
    return path


def make_pdf(path: Path, pages: Sequence[Sequence[str]]) -> Path:
    """Each page is a list of lines; an empty list gives a blank page."""
    doc = fitz.open()
    for lines in pages:
        page = doc.new_page()
        for i, line in enumerate(lines):
            page.insert_text((72, 72 + 24 * i), line)
    doc.save(str(path))
    doc.close()
    return path
