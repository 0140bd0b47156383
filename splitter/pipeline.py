"""
splitter/pipeline.py — główny pipeline: dokument → lista plików Markdown.

Maszyna stanów (liniowa, bez powrotów):
  START → DETECT → (RECONCILE) → RENDER → DONE
  FAILED osiągalny z DETECT i RENDER.

DETECT:
  HTML → detect_local(); mniej niż local_detection_min_tabs zakładek
         → wynik odrzucony, detect_remote() + reconcile()
  PDF  → detect_remote()
  0 zakładek → NoSectionsDetected

RENDER:
  render_sections() w trybie QUICK / ENHANCED (QUICK dla PDF → ENHANCED).

Publiczne API:
  TabSplitter(client, config).detect(document)                     -> list[SectionBoundary]
  TabSplitter(client, config).run(document, mode, progress, cancel) -> list[RenderedSection]
  run(document, mode, progress, *, client, config, cancel)          -> list[RenderedSection]
"""

from __future__ import annotations

import asyncio
import logging

from data_model.documents import (
    DocumentInput,
    HtmlDocument,
    PipelineState,
    ProcessingSession,
    ProgressEvent,
    RenderedSection,
    RenderMode,
    SectionBoundary,
)
from html_parser.detector import detect_local
from html_parser.reconciler import reconcile
from llm_query.detection import detect_remote
from llm_query.gemini import LLMClient
from llm_query.sections import Sleep
from splitter.config import SplitterConfig
from splitter.errors import ConfigurationError, NoSectionsDetected
from splitter.orchestrator import CancelFlag, ProgressSink, check_cancelled, render_sections

log = logging.getLogger(__name__)


class TabSplitter:
    """
    Pipeline dla jednego dokumentu na wywołanie; brak stanu współdzielonego
    między wywołaniami (sesja żyje tylko w trakcie run()).

    client może być None, jeśli dokument to HTML z lokalnie wykrywalnymi
    zakładkami w trybie QUICK; każda potrzeba wywołania LLM rzuca wtedy
    ConfigurationError.
    """

    def __init__(
        self,
        client: LLMClient | None,
        config: SplitterConfig | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.client = client
        self.config = config or SplitterConfig()
        self._sleep = sleep

    # ------------------------------------------------------------------
    # Fazy
    # ------------------------------------------------------------------

    def _require_client(self) -> LLMClient:
        if self.client is None:
            raise ConfigurationError(
                "Ten dokument wymaga detekcji przez AI, a klient Gemini nie jest skonfigurowany. "
                "Ustaw GEMINI_API_KEY."
            )
        return self.client

    async def _detect(self, session: ProcessingSession) -> None:
        session.state = PipelineState.DETECT
        document = session.document

        boundaries: list[SectionBoundary] = []
        if isinstance(document, HtmlDocument):
            boundaries = detect_local(document.markup, self.config)
            if len(boundaries) < self.config.local_detection_min_tabs:
                log.info(
                    "Lokalna detekcja niewystarczająca (%d < %d), używam AI",
                    len(boundaries), self.config.local_detection_min_tabs,
                )
                detection = await detect_remote(document, self._require_client(), self.config)
                session.state = PipelineState.RECONCILE
                boundaries = reconcile(document.markup, detection.boundaries)
        else:
            detection = await detect_remote(document, self._require_client(), self.config)
            boundaries = detection.boundaries

        if not boundaries:
            raise NoSectionsDetected()
        session.boundaries = boundaries

    async def _render(
        self,
        session: ProcessingSession,
        mode: RenderMode,
        progress: ProgressSink | None,
        cancel: CancelFlag | None,
    ) -> None:
        session.state = PipelineState.RENDER
        session.sections = await render_sections(
            session.document,
            session.boundaries,
            mode,
            client=self.client,
            config=self.config,
            progress=progress,
            cancel=cancel,
            sleep=self._sleep,
        )

    # ------------------------------------------------------------------
    # Publiczne API
    # ------------------------------------------------------------------

    async def detect(self, document: DocumentInput) -> list[SectionBoundary]:
        """Tylko DETECT (+ RECONCILE); używane przez `tabsplit detect`."""
        session = ProcessingSession(document)
        try:
            await self._detect(session)
        except BaseException:
            session.state = PipelineState.FAILED
            raise
        return session.boundaries

    async def run(
        self,
        document: DocumentInput,
        mode: RenderMode = RenderMode.ENHANCED,
        progress: ProgressSink | None = None,
        cancel: CancelFlag | None = None,
    ) -> list[RenderedSection]:
        session = ProcessingSession(document)
        try:
            check_cancelled(cancel)
            if progress is not None:
                progress(ProgressEvent("detecting", 0, 0))
            await self._detect(session)

            check_cancelled(cancel)
            await self._render(session, mode, progress, cancel)
        except BaseException:
            log.debug("Sesja przerwana w stanie %s", session.state)
            session.state = PipelineState.FAILED
            raise

        session.state = PipelineState.DONE
        log.info("Gotowe: %d plików", len(session.sections))
        return session.sections


async def run(
    document: DocumentInput,
    mode: RenderMode = RenderMode.ENHANCED,
    progress: ProgressSink | None = None,
    *,
    client: LLMClient | None,
    config: SplitterConfig | None = None,
    cancel: CancelFlag | None = None,
) -> list[RenderedSection]:
    """Skrót: TabSplitter(client, config).run(document, mode, progress, cancel)."""
    return await TabSplitter(client, config).run(document, mode, progress, cancel)
