"""
llm_query/sections.py — renderowanie jednej zakładki przez Gemini (tryb ENHANCED).

Treść wysyłana do modelu:
  PDF                       → cały PDF + instrukcja "tylko strony X–Y"
  HTML z html_range         → wycinek HTML tej zakładki (ogranicza rozmiar żądania)
  HTML bez html_range       → cały HTML + instrukcja "tylko sekcja o tytule …"

Każda porażka (wyjątek, pusta odpowiedź, niepoprawny JSON) jest ponawiana
z wykładniczym backoffem: retry_base_delay * 2**attempt. Po wyczerpaniu
max_retries + 1 prób → SectionRenderFailed.

Publiczne API:
  build_section_parts(document, boundary)              -> list[PromptPart]
  render_remote(document, boundary, client, config)    -> RenderedSection   (async)
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from data_model.documents import (
    DocumentInput,
    PdfDocument,
    RenderedSection,
    SectionBoundary,
)
from html_parser.markdown import strip_title_line
from llm_query.gemini import BinaryPart, LLMClient, PromptPart, suggested_retry_delay
from llm_query.prompt import (
    SECTION_SCHEMA,
    section_prompt_html,
    section_prompt_html_focus,
    section_prompt_pdf,
    with_html,
)
from llm_query.response import parse_json_object
from splitter.config import SplitterConfig
from splitter.errors import SectionRenderFailed

log = logging.getLogger(__name__)

type Sleep = Callable[[float], Awaitable[None]]


def build_section_parts(document: DocumentInput, boundary: SectionBoundary) -> list[PromptPart]:
    title = boundary.title or boundary.suggested_file_name.removesuffix(".md")
    if isinstance(document, PdfDocument):
        return [
            BinaryPart(document.data, document.mime_type),
            section_prompt_pdf(title, boundary.page_start, boundary.page_end),
        ]
    if boundary.html_range is not None:
        return [with_html(section_prompt_html(title), boundary.html_range.slice(document.markup))]
    return [with_html(section_prompt_html_focus(title), document.markup)]


def _extract_content(raw: str) -> str:
    if not raw or not raw.strip():
        raise ValueError("pusta odpowiedź")
    data = parse_json_object(raw)
    content = data.get("markdownContent")
    if not isinstance(content, str):
        raise ValueError("brak pola markdownContent (string)")
    return content


async def render_remote(
    document: DocumentInput,
    boundary: SectionBoundary,
    client: LLMClient,
    config: SplitterConfig | None = None,
    sleep: Sleep = asyncio.sleep,
) -> RenderedSection:
    """Renderuje zakładkę przez LLM z ponowieniami; rzuca SectionRenderFailed."""
    cfg = config or SplitterConfig()
    parts = build_section_parts(document, boundary)
    attempts = cfg.max_retries + 1
    last_error: Exception | None = None

    for attempt in range(attempts):
        try:
            raw = await client.generate(
                parts, SECTION_SCHEMA, max_output_tokens=cfg.max_output_tokens_processing
            )
            content = _extract_content(raw)
        except Exception as exc:
            last_error = exc
            log.warning(
                "Próba %d/%d nieudana dla zakładki %s: %s",
                attempt + 1, attempts, boundary.suggested_file_name, exc,
            )
            if attempt + 1 < attempts:
                delay = cfg.retry_base_delay * 2 ** attempt
                hint = suggested_retry_delay(exc)
                if hint is not None:
                    delay = max(delay, hint)
                await sleep(delay)
            continue

        return RenderedSection(
            file_name=boundary.suggested_file_name,
            original_title=boundary.title or None,
            content=strip_title_line(content, boundary.title),
        )

    log.error("Wyczerpano próby dla zakładki %s", boundary.suggested_file_name)
    raise SectionRenderFailed(boundary.title, boundary.suggested_file_name, attempts) from last_error
