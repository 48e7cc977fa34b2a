import io

from docx import Document as DocxDocument
from pypdf import PdfReader

from quizflare.core.errors import SourceExtractionError

PDF_TYPE = "application/pdf"
DOCX_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
TEXT_TYPES = {"text/plain", "text/markdown", "text/x-markdown"}


def normalize_mime_type(mime_type: str) -> str:
    return (mime_type or "").split(";", 1)[0].strip().lower()


def is_image(mime_type: str) -> bool:
    return normalize_mime_type(mime_type).startswith("image/")


def extract_text(data: bytes, mime_type: str) -> str:
    normalized = normalize_mime_type(mime_type)
    if normalized == PDF_TYPE:
        return _extract_pdf(data)
    if normalized == DOCX_TYPE:
        return _extract_docx(data)
    if normalized in TEXT_TYPES:
        return _extract_plain(data)

    raise SourceExtractionError(
        "Unsupported document type. Use PDF, DOCX, Markdown, plain text or an image.",
        {"mime_type": normalized},
    )


def _extract_pdf(data: bytes) -> str:
    try:
        reader = PdfReader(io.BytesIO(data))
        pages = []
        for page in reader.pages:
            page_text = page.extract_text() or ""
            pages.append(page_text)
        text = "\n".join(pages).strip()
    except Exception as exc:
        raise SourceExtractionError(f"PDF parse failed: {exc}") from exc

    if not text:
        raise SourceExtractionError("PDF parse failed: empty text")

    return text


def _extract_docx(data: bytes) -> str:
    try:
        doc = DocxDocument(io.BytesIO(data))
        paragraphs = [p.text for p in doc.paragraphs if p.text]
        text = "\n".join(paragraphs).strip()
    except Exception as exc:
        raise SourceExtractionError(f"DOCX parse failed: {exc}") from exc

    if not text:
        raise SourceExtractionError("DOCX parse failed: empty text")

    return text


def _extract_plain(data: bytes) -> str:
    try:
        text = data.decode("utf-8").strip()
    except UnicodeDecodeError as exc:
        raise SourceExtractionError("Text decode failed: invalid UTF-8") from exc

    if not text:
        raise SourceExtractionError("Text parse failed: empty text")

    return text
