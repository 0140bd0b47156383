"""
splitter/normalizer.py — zamiana surowych bajtów pliku na DocumentInput.

DOCX → HTML (mammoth; zakładki edytora zostają jako <a id="…"></a>),
PDF  → blob binarny z liczbą stron (PyMuPDF).

Ograniczenia rozmiaru i typu pliku egzekwuje wywołujący (load_document
dla CLI); normalize() zakłada, że już są spełnione.

Publiczne API:
  normalize(data, mime_type)        -> DocumentInput
  load_document(path, config)       -> DocumentInput
"""

from __future__ import annotations

import io
import logging
from pathlib import Path

import mammoth

from data_model.documents import DOCX_MIME, PDF_MIME, DocumentInput, HtmlDocument, PdfDocument
from pdf.pages import count_pages
from splitter.config import SplitterConfig
from splitter.errors import UnsupportedDocument

log = logging.getLogger(__name__)

ACCEPTED_TYPES: dict[str, str] = {
    ".pdf":  PDF_MIME,
    ".docx": DOCX_MIME,
}


def normalize(data: bytes, mime_type: str) -> DocumentInput:
    if mime_type == DOCX_MIME:
        result = mammoth.convert_to_html(io.BytesIO(data))
        for message in result.messages:
            log.debug("mammoth: %s", message)
        return HtmlDocument(markup=result.value)
    return PdfDocument(data=data, mime_type=mime_type, page_count=count_pages(data))


def load_document(path: str | Path, config: SplitterConfig | None = None) -> DocumentInput:
    """Wczytuje plik z dysku, sprawdza typ i rozmiar, normalizuje."""
    cfg = config or SplitterConfig()
    p = Path(path)

    mime_type = ACCEPTED_TYPES.get(p.suffix.lower())
    if mime_type is None:
        raise UnsupportedDocument(
            f"Nieobsługiwany format pliku: {p.suffix or '(brak rozszerzenia)'}. "
            f"Obsługiwane: {', '.join(ACCEPTED_TYPES)}."
        )
    if not p.is_file():
        raise UnsupportedDocument(f"Plik nie istnieje: {p}")

    size = p.stat().st_size
    if size > cfg.max_file_size:
        raise UnsupportedDocument(
            f"Plik ma {size / 1024 / 1024:.1f} MB; limit to "
            f"{cfg.max_file_size / 1024 / 1024:.0f} MB."
        )

    return normalize(p.read_bytes(), mime_type)
