"""
llm_query/detection.py — zdalna detekcja zakładek (jedno wywołanie Gemini).

Wynik bramkuje cały pipeline, więc błędy są fatalne i natychmiastowe:
brak ponowień w tej warstwie, pusta lub niezgodna ze schematem odpowiedź
→ DetectionFailed.

Publiczne API:
  detect_remote(document, client, config)  -> DetectionResult   (async)
  parse_detection(data, page_count)        -> DetectionResult
"""

from __future__ import annotations

import logging

from data_model.documents import (
    DetectionResult,
    DocumentInput,
    PdfDocument,
    SectionBoundary,
    assign_file_names,
    recompute_page_ranges,
)
from llm_query.gemini import BinaryPart, LLMClient, PromptPart
from llm_query.prompt import DETECTION_SCHEMA, detection_prompt, with_html
from llm_query.response import as_int, parse_json_object
from splitter.config import SplitterConfig
from splitter.errors import DetectionFailed, SplitterError

log = logging.getLogger(__name__)


def build_detection_parts(document: DocumentInput) -> list[PromptPart]:
    prompt = detection_prompt()
    if isinstance(document, PdfDocument):
        return [BinaryPart(document.data, document.mime_type), prompt]
    return [with_html(prompt, document.markup)]


async def detect_remote(
    document: DocumentInput,
    client: LLMClient,
    config: SplitterConfig | None = None,
) -> DetectionResult:
    """Wykrywa zakładki przez LLM; granice bez html_range."""
    cfg = config or SplitterConfig()
    parts = build_detection_parts(document)

    try:
        raw = await client.generate(
            parts, DETECTION_SCHEMA, max_output_tokens=cfg.max_output_tokens_detection
        )
    except SplitterError:
        raise
    except Exception as exc:
        raise DetectionFailed(f"Wywołanie Gemini podczas detekcji zakładek nie powiodło się: {exc}") from exc

    if not raw or not raw.strip():
        raise DetectionFailed(
            "Brak odpowiedzi Gemini podczas detekcji zakładek. "
            "Dokument może być zbyt złożony lub zawierać nieobsługiwaną treść."
        )

    try:
        data = parse_json_object(raw)
        page_count = document.page_count if isinstance(document, PdfDocument) else None
        result = parse_detection(data, page_count)
    except ValueError as exc:
        log.debug("Surowa odpowiedź detekcji: %s", raw[:500])
        raise DetectionFailed(
            f"Nie udało się odczytać struktury dokumentu ({exc}). "
            "Format dokumentu może być nieobsługiwany lub zbyt złożony."
        ) from exc

    log.info("Zdalna detekcja: %d zakładek, %d stron", len(result.boundaries), result.total_pages)
    return result


def parse_detection(data: dict, page_count: int | None = None) -> DetectionResult:
    """
    Waliduje odpowiedź względem schematu i buduje uporządkowane granice.

    Nazwy plików i page_end są przeliczane lokalnie, nie ufamy LLM w tych polach.

    Raises:
        ValueError: odpowiedź niezgodna ze schematem.
    """
    if "totalPages" not in data or "tabs" not in data:
        raise ValueError("brak wymaganych pól totalPages/tabs")
    total_pages = as_int(data["totalPages"], "totalPages")
    tabs = data["tabs"]
    if not isinstance(tabs, list):
        raise ValueError("pole tabs nie jest listą")

    parsed: list[tuple[int, SectionBoundary]] = []
    for i, tab in enumerate(tabs):
        if not isinstance(tab, dict):
            raise ValueError(f"tabs[{i}] nie jest obiektem")
        for key in ("tabNumber", "fileName", "startPage", "endPage"):
            if key not in tab:
                raise ValueError(f"tabs[{i}]: brak pola {key}")
        number = as_int(tab["tabNumber"], f"tabs[{i}].tabNumber")
        start  = max(1, as_int(tab["startPage"], f"tabs[{i}].startPage"))
        end    = as_int(tab["endPage"], f"tabs[{i}].endPage")

        title = str(tab.get("originalTitle") or "").strip()
        if not title:
            title = str(tab["fileName"] or "").strip().removesuffix(".md")

        parsed.append((number, SectionBoundary(
            ordinal=number,
            title=title,
            suggested_file_name="",
            page_start=start,
            page_end=max(start, end),
        )))

    parsed.sort(key=lambda p: (p[0], p[1].page_start))
    boundaries = [b for _, b in parsed]

    # Koniec dokumentu: liczba stron policzona lokalnie (PyMuPDF), w przeciwnym
    # razie deklaracja modelu lub koniec ostatniej zakładki.
    last_page = page_count or max([total_pages] + [b.page_end for b in boundaries[-1:]])
    last_page = max([last_page] + [b.page_start for b in boundaries])
    boundaries = recompute_page_ranges(boundaries, last_page)
    return DetectionResult(total_pages=last_page, boundaries=assign_file_names(boundaries))
