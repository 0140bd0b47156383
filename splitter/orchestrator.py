"""
splitter/orchestrator.py — renderowanie wszystkich zakładek dokumentu.

ENHANCED: partie po batch_size zakładek; w partii wywołania LLM idą
równolegle, między partiami jest twarda bariera (wszystkie zadania muszą
się zakończyć, sukcesem lub błędem). Pierwszy błąd (w kolejności zakładek)
przerywa całość: brak częściowego wyniku.

QUICK (tylko HTML): jedno synchroniczne przejście split_local(); zakładki,
których nie da się wyciąć lokalnie (None w wyniku split_local), idą
ścieżką zdalną w partiach. Zdarzenia postępu są emitowane w kolejności
pozycji: "rozpoczęte" przed ścieżką zdalną, "zakończone" po scaleniu.

Publiczne API:
  render_sections(document, boundaries, mode, *, client, config, progress, cancel)
      -> list[RenderedSection]   (async)
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Protocol

from data_model.documents import (
    DocumentInput,
    HtmlDocument,
    ProgressEvent,
    RenderedSection,
    RenderMode,
    SectionBoundary,
)
from html_parser.markdown import split_local
from llm_query.gemini import LLMClient
from llm_query.sections import Sleep, render_remote
from splitter.config import SplitterConfig
from splitter.errors import ConfigurationError, ProcessingCancelled

log = logging.getLogger(__name__)

type ProgressSink = Callable[[ProgressEvent], None]


class CancelFlag(Protocol):
    """Flaga anulowania dostarczana przez wywołującego (asyncio.Event, threading.Event)."""

    def is_set(self) -> bool:
        ...


def check_cancelled(cancel: CancelFlag | None) -> None:
    if cancel is not None and cancel.is_set():
        raise ProcessingCancelled()


def _label(b: SectionBoundary) -> str:
    return b.title or b.suggested_file_name


def _noop(event: ProgressEvent) -> None:
    pass


async def render_sections(
    document: DocumentInput,
    boundaries: list[SectionBoundary],
    mode: RenderMode,
    *,
    client: LLMClient | None,
    config: SplitterConfig | None = None,
    progress: ProgressSink | None = None,
    cancel: CancelFlag | None = None,
    sleep: Sleep = asyncio.sleep,
) -> list[RenderedSection]:
    """Renderuje zakładki w kolejności granic."""
    cfg = config or SplitterConfig()
    notify = progress or _noop

    if mode == RenderMode.QUICK and isinstance(document, HtmlDocument):
        return await _render_quick(document, boundaries, client, cfg, notify, cancel, sleep)

    if mode == RenderMode.QUICK:
        log.info("Tryb QUICK niedostępny dla PDF, używam ENHANCED")

    positioned = list(enumerate(boundaries, start=1))
    done = await _render_batches(document, positioned, len(boundaries), client, cfg, notify, cancel, sleep)
    return [done[pos] for pos, _ in positioned]


async def _render_batches(
    document: DocumentInput,
    positioned: list[tuple[int, SectionBoundary]],
    total: int,
    client: LLMClient | None,
    cfg: SplitterConfig,
    notify: ProgressSink,
    cancel: CancelFlag | None,
    sleep: Sleep,
) -> dict[int, RenderedSection]:
    if positioned and client is None:
        raise ConfigurationError("Renderowanie przez AI wymaga klienta Gemini (brak klucza API?).")

    results: dict[int, RenderedSection] = {}
    for i in range(0, len(positioned), cfg.batch_size):
        check_cancelled(cancel)
        batch = positioned[i:i + cfg.batch_size]

        for pos, b in batch:
            notify(ProgressEvent("processing", pos, total, _label(b)))

        outcomes = await asyncio.gather(
            *(render_remote(document, b, client, cfg, sleep) for _, b in batch),
            return_exceptions=True,
        )

        for (pos, b), outcome in zip(batch, outcomes):
            if isinstance(outcome, BaseException):
                raise outcome
            results[pos] = outcome
            notify(ProgressEvent("processing", pos, total, _label(b), finished=True))

    return results


async def _render_quick(
    document: HtmlDocument,
    boundaries: list[SectionBoundary],
    client: LLMClient | None,
    cfg: SplitterConfig,
    notify: ProgressSink,
    cancel: CancelFlag | None,
    sleep: Sleep,
) -> list[RenderedSection]:
    total = len(boundaries)

    if not any(b.html_range is not None for b in boundaries):
        log.info("Żadna zakładka nie ma zakresu HTML, wszystkie idą ścieżką zdalną")
        positioned = list(enumerate(boundaries, start=1))
        done = await _render_batches(document, positioned, total, client, cfg, notify, cancel, sleep)
        return [done[pos] for pos, _ in positioned]

    local = split_local(document.markup, boundaries)

    # Degradacja: brak punktów cięcia → jeden plik z całym dokumentem.
    if len(local) != total:
        section = local[0]
        notify(ProgressEvent("processing", 1, 1, section.original_title))
        notify(ProgressEvent("processing", 1, 1, section.original_title, finished=True))
        return [section]

    results: dict[int, RenderedSection] = {
        pos: section for pos, section in enumerate(local, start=1) if section is not None
    }
    remote = [(pos, b) for pos, b in enumerate(boundaries, start=1) if pos not in results]

    # Zdarzenia w kolejności pozycji: "rozpoczęte" przed ścieżką zdalną,
    # "zakończone" po scaleniu wyników.
    for pos, b in enumerate(boundaries, start=1):
        notify(ProgressEvent("processing", pos, total, _label(b)))

    if remote:
        log.info("%d zakładek bez lokalnego dopasowania idzie ścieżką zdalną", len(remote))
        results.update(
            await _render_batches(document, remote, total, client, cfg, _noop, cancel, sleep)
        )

    for pos, b in enumerate(boundaries, start=1):
        notify(ProgressEvent("processing", pos, total, _label(b), finished=True))

    return [results[pos] for pos in range(1, total + 1)]
