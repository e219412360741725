import io
import pytest
from pypdf import PageObject, PdfWriter
from legallens.analysis.clauses import ClauseClassifier
from legallens.analysis.pipeline import analyze_upload
from legallens.ingest.pdf_loader import clean_text, detect_kind, load_pasted_text, load_upload
from legallens.utils.config import AppConfig
from legallens.utils.errors import EmptyDocument, ExtractionFailure, FileTooLarge, UnsupportedFileType


def blank_pdf() -> bytes:
    writer = PdfWriter()
    writer.add_blank_page(width=200, height=200)
    buf = io.BytesIO()
    writer.write(buf)
    return buf.getvalue()


def text_pdf(*pages: str) -> bytes:
    """Minimal PDF with one Helvetica text line per page."""
    font_num = 3 + 2 * len(pages)
    kids = " ".join(f"{3 + 2 * i} 0 R" for i in range(len(pages)))
    objects = ["<< /Type /Catalog /Pages 2 0 R >>", f"<< /Type /Pages /Kids [{kids}] /Count {len(pages)} >>"]
    for i, text in enumerate(pages):
        stream = f"BT /F1 12 Tf 72 720 Td ({text}) Tj ET"
        objects.append(f"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
                       f"/Resources << /Font << /F1 {font_num} 0 R >> >> /Contents {4 + 2 * i} 0 R >>")
        objects.append(f"<< /Length {len(stream)} >>\nstream\n{stream}\nendstream")
    objects.append("<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>")

    out = b"%PDF-1.4\n"
    offsets = []
    for num, body in enumerate(objects, 1):
        offsets.append(len(out))
        out += f"{num} 0 obj\n{body}\nendobj\n".encode("latin-1")
    xref_at = len(out)
    out += f"xref\n0 {len(objects) + 1}\n0000000000 65535 f \n".encode()
    for off in offsets:
        out += f"{off:010d} 00000 n \n".encode()
    out += f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\nstartxref\n{xref_at}\n%%EOF\n".encode()
    return out


CONTRACT_PAGES = ("1. Payment. Fees are due monthly.", "2. Confidentiality. Keep all information secret.")


def test_text_upload_keeps_paragraph_breaks():
    data = "1. Term\r\nOne year.   \r\n\r\n2. Fees\r\nMonthly.".encode("utf-8")
    assert load_upload("contract.txt", data) == "1. Term\nOne year.\n\n2. Fees\nMonthly."


def test_text_upload_strips_bom():
    assert load_upload("c.txt", "\ufeffHello".encode("utf-8")) == "Hello"


def test_kind_from_content_type():
    assert detect_kind("upload", "application/pdf") == "pdf"
    assert detect_kind("upload", "text/plain") == "text"


def test_unsupported_type_rejected():
    with pytest.raises(UnsupportedFileType):
        load_upload("contract.docx", b"PK\x03\x04")


def test_oversize_rejected_before_parsing():
    with pytest.raises(FileTooLarge) as err:
        load_upload("contract.pdf", b"x" * 11, max_bytes=10)
    assert err.value.status_code == 413
    assert "MB" in err.value.message


def test_empty_text_rejected():
    with pytest.raises(EmptyDocument):
        load_upload("empty.txt", b"  \n\n ")


def test_corrupt_pdf_rejected():
    with pytest.raises(ExtractionFailure):
        load_upload("broken.pdf", b"this is not a pdf at all")


def test_pdf_without_text_rejected():
    with pytest.raises(EmptyDocument):
        load_upload("scan.pdf", blank_pdf())


def test_pasted_text_checks():
    assert load_pasted_text("  Some clause.  ") == "Some clause."
    with pytest.raises(EmptyDocument):
        load_pasted_text("   ")
    with pytest.raises(FileTooLarge):
        load_pasted_text("é" * 6, max_bytes=10)


def test_clean_text_removes_nulls():
    assert clean_text("a\x00b \n") == "a b"


def test_pdf_pages_extracted_and_joined():
    text = load_upload("contract.pdf", text_pdf(*CONTRACT_PAGES))
    first, second = text.split("\n\n")
    assert "Fees are due monthly." in first
    assert "Keep all information secret." in second


def test_pdf_upload_is_split_and_classified():
    config = AppConfig(use_gemini=False)
    doc = analyze_upload(config, "contract.pdf", text_pdf(*CONTRACT_PAGES),
                         classifier=ClauseClassifier(config, llm=None))
    assert doc.name == "contract.pdf"
    assert [c.category for c in doc.clauses] == ["Payment", "Confidentiality"]


def test_unreadable_page_leaves_marker(monkeypatch):
    original = PageObject.extract_text
    calls = []

    def flaky(self, *args, **kwargs):
        calls.append(1)
        if len(calls) == 1:
            raise ValueError("bad content stream")
        return original(self, *args, **kwargs)

    monkeypatch.setattr(PageObject, "extract_text", flaky)
    text = load_upload("contract.pdf", text_pdf(*CONTRACT_PAGES))
    first, second = text.split("\n\n")
    assert first == "[Error reading page 1]"
    assert "Keep all information secret." in second
