# resumelens/services/documents.py
from __future__ import annotations

import logging, os
from io import BytesIO

import docx
from PyPDF2 import PdfReader

from ..errors import ParseFailure, UnsupportedFormat

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = ("pdf", "docx")


def file_kind(filename: str) -> str:
    """Return the lower-cased extension if it's one we can read, else raise UnsupportedFormat."""
    ext = os.path.splitext(filename or "")[1].lstrip(".").lower()
    if ext not in SUPPORTED_EXTENSIONS:
        allowed = " or ".join(e.upper() for e in SUPPORTED_EXTENSIONS)
        raise UnsupportedFormat(f"Unsupported file format. Please upload {allowed} files.")
    return ext


def _pdf_text(stream: BytesIO) -> str:
    reader = PdfReader(stream)
    return "\n".join((p.extract_text() or "") for p in reader.pages)


def _docx_text(stream: BytesIO) -> str:
    d = docx.Document(stream)
    lines = [p.text for p in d.paragraphs]
    for table in d.tables:
        for row in table.rows:
            lines.append("\t".join(cell.text for cell in row.cells))
    return "\n".join(lines)


_READERS = {"pdf": _pdf_text, "docx": _docx_text}


def extract(content: bytes, filename: str) -> str:
    """
    Convert an uploaded PDF or DOCX into plain text.

    The kind is decided by the filename extension only. Layout, styling and
    images are dropped. Decode errors surface as ParseFailure; a document with
    no selectable text is treated the same way.
    """
    kind = file_kind(filename)
    logger.info("Extracting text from %s (%s, %d bytes)", filename, kind, len(content or b""))

    with BytesIO(content or b"") as stream:
        try:
            text = _READERS[kind](stream)
        except Exception as e:
            logger.exception("%s decode failed for %s", kind.upper(), filename)
            raise ParseFailure(f"Failed to parse {filename}: {e}") from e

    if not text.strip():
        raise ParseFailure(f"No extractable text found in {filename}")

    logger.info("Extracted %d characters from %s", len(text), filename)
    return text
