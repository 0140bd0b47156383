"""
pdf/pages.py — lokalne odczyty z PDF potrzebne pipeline'owi.

Pipeline nie parsuje treści PDF (robi to model); lokalnie liczymy tylko
strony, żeby zakres ostatniej zakładki kończył się na faktycznym końcu
dokumentu, a nie na deklaracji modelu.

Kluczowe funkcje publiczne:
  count_pages(data) -> int | None
"""

from __future__ import annotations

import logging

import fitz  # PyMuPDF

log = logging.getLogger(__name__)


def count_pages(data: bytes) -> int | None:
    """Liczba stron PDF albo None, gdy PyMuPDF nie potrafi otworzyć danych."""
    try:
        doc = fitz.open(stream=data, filetype="pdf")
    except Exception as exc:  # fitz rzuca różne typy (FileDataError, RuntimeError)
        log.warning("Nie udało się otworzyć PDF do policzenia stron: %s", exc)
        return None
    try:
        return doc.page_count
    finally:
        doc.close()
