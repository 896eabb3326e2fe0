import io
import logging
import re
from datetime import datetime

from pypdf import PdfReader
from pypdf.errors import PdfReadError

logger = logging.getLogger(__name__)

MAX_PDF_PAGES = 10
MAX_DOCUMENT_CHARS = 12000

ISSUER_PATTERNS = [
    re.compile(r"issued by[:\s]+([^\n]+)", re.IGNORECASE),
    re.compile(r"certified by[:\s]+([^\n]+)", re.IGNORECASE),
    re.compile(r"from[:\s]+([^\n]+)", re.IGNORECASE),
]
DATE_PATTERN = re.compile(r"\d{1,2}[-/]\d{1,2}[-/]\d{2,4}|[A-Za-z]+ \d{1,2},? \d{4}")
CREDENTIAL_PATTERNS = [
    re.compile(r"certificate (?:id|number|#)[:\s]+([A-Z0-9-]+)", re.IGNORECASE),
    re.compile(r"credential(?:\s+(?:id|number)\b)?[:\s]+([A-Z0-9-]+)", re.IGNORECASE),
    re.compile(r"ID[:\s]+([A-Z0-9-]+)"),
]
DATE_FORMATS = (
    "%Y-%m-%d",
    "%d/%m/%Y",
    "%d-%m-%Y",
    "%m/%d/%Y",
    "%d/%m/%y",
    "%B %d, %Y",
    "%B %d %Y",
    "%b %d, %Y",
    "%b %d %Y",
)


def extract_pdf_text(blob: bytes, *, max_pages: int = MAX_PDF_PAGES) -> str | None:
    try:
        reader = PdfReader(io.BytesIO(blob))
        parts = [page.extract_text() or "" for page in reader.pages[:max_pages]]
    except (PdfReadError, ValueError, KeyError) as exc:
        logger.warning("could not read PDF text: %s", exc)
        return None
    text = "\n".join(part for part in parts if part.strip())
    if not text.strip():
        return None
    return text[:MAX_DOCUMENT_CHARS]


def _first_group(patterns: list[re.Pattern], text: str) -> str | None:
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return match.group(1).strip()
    return None


def extract_issuer(text: str) -> str | None:
    return _first_group(ISSUER_PATTERNS, text)


def extract_date(text: str) -> str | None:
    match = DATE_PATTERN.search(text)
    return match.group(0) if match else None


def extract_credential_id(text: str) -> str | None:
    return _first_group(CREDENTIAL_PATTERNS, text)


def parse_date(value: str | None) -> datetime | None:
    if not value:
        return None
    cleaned = value.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(cleaned, fmt)
        except ValueError:
            continue
    return None


def extract_certificate_fields(text: str) -> dict:
    """Rule-based certificate fields; used when no LLM is configured."""
    first_line = next((line.strip() for line in text.splitlines() if line.strip()), None)
    raw_date = extract_date(text)
    return {
        "title": first_line[:255] if first_line else None,
        "issuer": extract_issuer(text),
        "issue_date": parse_date(raw_date),
        "credential_id": extract_credential_id(text),
    }
