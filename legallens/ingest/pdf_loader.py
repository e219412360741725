from __future__ import annotations
from typing import List, Optional
import io
import logging
import re
from pypdf import PdfReader
from pypdf.errors import PdfReadError
from legallens.utils.errors import EmptyDocument, ExtractionFailure, FileTooLarge, UnsupportedFileType

logger = logging.getLogger(__name__)

PDF_TYPES = {"application/pdf"}
TEXT_TYPES = {"text/plain"}
SUPPORTED_EXTENSIONS = (".pdf", ".txt")

TRAILING_SPACE_RE = re.compile(r"[ \t]+\n")


def clean_text(text: str) -> str:
    # keep line structure: the splitter relies on blank lines between paragraphs
    text = text.replace("\x00", " ").replace("\r\n", "\n").replace("\r", "\n")
    text = TRAILING_SPACE_RE.sub("\n", text)
    return text.strip()


def detect_kind(name: str, content_type: Optional[str] = None) -> str:
    low = (name or "").lower()
    if low.endswith(".pdf") or content_type in PDF_TYPES:
        return "pdf"
    if low.endswith(".txt") or content_type in TEXT_TYPES:
        return "text"
    raise UnsupportedFileType(f"Unsupported file type for '{name}'. Please upload a PDF or plain-text (.txt) file.")


def _check_size(size: int, max_bytes: int, what: str) -> None:
    if size > max_bytes:
        limit_mb = max_bytes / (1024 * 1024)
        raise FileTooLarge(f"{what} must be less than {limit_mb:g}MB.")


def extract_pdf_text(data: bytes) -> str:
    """Extract text page by page; pages that fail to parse leave a marker instead of aborting."""
    try:
        reader = PdfReader(io.BytesIO(data))
        pages = reader.pages
        page_count = len(pages)
    except (PdfReadError, ValueError, OSError) as e:
        raise ExtractionFailure("The PDF file could not be read. It may be corrupt or password protected.") from e
    logger.info("PDF loaded, %d page(s)", page_count)
    pages_text: List[str] = []
    for idx in range(page_count):
        try:
            txt = pages[idx].extract_text() or ""
        except Exception as e:  # pypdf raises a wide range of errors on malformed content streams
            logger.warning("Error reading page %d: %s", idx + 1, e)
            txt = f"[Error reading page {idx + 1}]"
        txt = clean_text(txt)
        if txt:
            pages_text.append(txt)
    return "\n\n".join(pages_text)


def load_upload(name: str, data: bytes, content_type: Optional[str] = None, max_bytes: int = 10 * 1024 * 1024) -> str:
    """Validate one uploaded file and return its plain text.

    Raises an IntakeError subclass whose message can be shown to the user as-is.
    """
    kind = detect_kind(name, content_type)
    _check_size(len(data), max_bytes, "PDF file size" if kind == "pdf" else "File size")
    if kind == "pdf":
        text = extract_pdf_text(data)
        if not text.strip():
            raise EmptyDocument(
                "No text could be extracted from the PDF. The file might be empty, scanned, or contain only images."
            )
    else:
        text = clean_text(data.decode("utf-8-sig", errors="replace"))
        if not text:
            raise EmptyDocument("The document appears to be empty.")
    return text


def load_pasted_text(text: str, max_bytes: int = 10 * 1024 * 1024) -> str:
    if not text or not text.strip():
        raise EmptyDocument("The document appears to be empty.")
    _check_size(len(text.encode("utf-8")), max_bytes, "Pasted text")
    return clean_text(text)
