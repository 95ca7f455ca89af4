"""
Document to text extraction for uploaded resumes
"""
import io
from pathlib import PurePath
from typing import Iterable

from docx import Document
from pdfminer.high_level import extract_pages
from pdfminer.layout import LTTextContainer

from resume_analyzer.utils.exceptions import ExtractionError, InsufficientContent
from resume_analyzer.utils.logging_config import get_logger

logger = get_logger(__name__)

MIN_CONTENT_CHARS = 50

PDF_TYPES = {"application/pdf", "application/x-pdf"}
DOCX_TYPES = {"application/vnd.openxmlformats-officedocument.wordprocessingml.document"}
# media types that say nothing about the payload; fall back to the file extension
GENERIC_TYPES = {"", "application/octet-stream", "binary/octet-stream"}


def _base_media_type(media_type: str) -> str:
    return (media_type or "").split(";")[0].strip().lower()


def detect_kind(media_type: str, filename: str = "") -> str:
    """Return 'pdf', 'docx' or 'text' for a declared media type"""
    mt = _base_media_type(media_type)
    if mt in PDF_TYPES:
        return "pdf"
    if mt in DOCX_TYPES:
        return "docx"
    if mt in GENERIC_TYPES:
        ext = PurePath(filename or "").suffix.lower()
        if ext == ".pdf":
            return "pdf"
        if ext == ".docx":
            return "docx"
    return "text"


def _page_text(page: Iterable) -> str:
    parts = []
    for element in page:
        if isinstance(element, LTTextContainer):
            t = element.get_text().strip()
            if t:
                parts.append(t)
    return " ".join(parts)


def read_pdf(data: bytes) -> str:
    try:
        pages = [_page_text(page) for page in extract_pages(io.BytesIO(data))]
    except Exception as e:
        raise ExtractionError(f"Could not read PDF document: {e}", media_type="application/pdf", cause=e) from e
    logger.debug(f"Extracted {len(pages)} PDF pages")
    return "\n".join(pages).strip()


def read_docx(data: bytes) -> str:
    try:
        doc = Document(io.BytesIO(data))
    except Exception as e:
        raise ExtractionError(f"Could not read DOCX document: {e}", media_type="docx", cause=e) from e
    return "\n".join([p.text for p in doc.paragraphs])


def read_txt(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def extract_text(data: bytes, media_type: str, filename: str = "") -> str:
    """Convert raw document bytes into one text blob.

    Paginated documents are read page by page, pages joined with a single
    newline and the result trimmed. Plain-text-bearing payloads are decoded
    and returned unmodified.
    """
    kind = detect_kind(media_type, filename)
    logger.info(f"Extracting text from {filename or 'upload'} ({kind}, {len(data)} bytes)")
    if kind == "pdf":
        return read_pdf(data)
    if kind == "docx":
        return read_docx(data)
    return read_txt(data)


def count_content_chars(text: str) -> int:
    return sum(1 for ch in (text or "") if not ch.isspace())


def ensure_sufficient_content(text: str, minimum: int = MIN_CONTENT_CHARS) -> str:
    """Reject text with fewer than ``minimum`` non-whitespace characters."""
    found = count_content_chars(text)
    if found < minimum:
        logger.warning(f"Rejected resume text with {found} non-whitespace characters (minimum {minimum})")
        raise InsufficientContent(found=found, required=minimum)
    return text
