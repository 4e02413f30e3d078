from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict, List, Union

import docx
import fitz

from edulab.core.errors import ExtractionError, UnsupportedType

logger = logging.getLogger("parser")

PathLike = Union[str, Path]


def extension_tag(filename: str) -> str:
    """
    'Lecture 3.PDF' -> 'pdf', '.txt' -> 'txt', 'README' -> ''.
    Taken from the upload name, never the MIME type.
    """
    name = Path(filename or "").name
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[1].lower().strip()


def read_txt(path: PathLike) -> str:
    return Path(path).read_bytes().decode("utf-8", errors="replace")


def read_docx(path: PathLike) -> str:
    document = docx.Document(str(path))
    lines: List[str] = [p.text for p in document.paragraphs]
    for table in document.tables:
        for row in table.rows:
            for cell in row.cells:
                lines.extend(p.text for p in cell.paragraphs)
    return "\n".join(lines)


def read_pdf(path: PathLike) -> str:
    data = Path(path).read_bytes()
    doc = fitz.open(stream=data, filetype="pdf")
    pages: List[str] = []
    try:
        for i in range(doc.page_count):
            page = doc.load_page(i)
            fragments: List[str] = []
            for block in page.get_text("dict").get("blocks", []):
                for line in block.get("lines", []):
                    for span in line.get("spans", []):
                        if span.get("text"):
                            fragments.append(span["text"])
            pages.append(" ".join(fragments))
    finally:
        doc.close()
    return "\n\n".join(pages)


READERS: Dict[str, Callable[[PathLike], str]] = {
    "txt": read_txt,
    "docx": read_docx,
    "pdf": read_pdf,
}

SUPPORTED_EXTS = tuple(READERS)


def extract_text(path: PathLike, extension: str) -> str:
    """
    Read ``path`` as the format named by ``extension``.
    The file is left in place; the caller owns its deletion.
    """
    reader = READERS.get(extension)
    if reader is None:
        raise UnsupportedType(extension)

    try:
        text = reader(path)
    except Exception as e:
        logger.warning("extraction failed ext=%s err=%s", extension, e)
        raise ExtractionError(extension, str(e)) from e

    logger.info("extracted ext=%s chars=%s", extension, len(text))
    return text
