"""
resume_text.py — Plain text out of an uploaded resume.

Only PDF (pypdf) and DOCX (python-docx) are accepted. The result has its
whitespace collapsed so the character budget the LinkedIn tool sends to
Gemini is spent on words, not layout.
"""

import logging
import re
from io import BytesIO

from docx import Document
from pypdf import PdfReader
from pypdf.errors import PdfReadError

logger = logging.getLogger(__name__)

PDF_TYPE = "application/pdf"
DOCX_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
SUPPORTED_TYPES = (PDF_TYPE, DOCX_TYPE)

_WHITESPACE = re.compile(r"\s+")


class ResumeExtractionError(ValueError):
    """The upload could not be read as the type it claimed to be."""


def _collapse(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def pdf_text(content: bytes) -> str:
    try:
        reader = PdfReader(BytesIO(content))
        pages = [page.extract_text() or "" for page in reader.pages]
    except (PdfReadError, ValueError, KeyError) as exc:
        logger.warning("PDF parsing failed: %s", exc)
        raise ResumeExtractionError(
            "Failed to extract text from PDF. Please ensure the file is a valid PDF."
        ) from exc
    return _collapse(" ".join(pages))


def docx_text(content: bytes) -> str:
    try:
        document = Document(BytesIO(content))
    except Exception as exc:
        # python-docx surfaces zip, XML and package errors under several types.
        logger.warning("DOCX parsing failed: %s", exc)
        raise ResumeExtractionError(
            "Failed to extract text from DOCX. Please ensure the file is a valid DOCX."
        ) from exc

    chunks = [p.text for p in document.paragraphs if p.text.strip()]
    for table in document.tables:
        for row in table.rows:
            chunks.extend(cell.text for cell in row.cells if cell.text.strip())
    return _collapse(" ".join(chunks))


def extract_resume_text(content: bytes, content_type: str) -> str:
    if content_type == PDF_TYPE:
        return pdf_text(content)
    if content_type == DOCX_TYPE:
        return docx_text(content)
    raise ResumeExtractionError("Only PDF and DOCX files are supported")
