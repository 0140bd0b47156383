"""Wspólne fixture'y: skryptowany klient LLM i szybka konfiguracja."""

from __future__ import annotations

import asyncio
import json
import re
from typing import Any, Callable

import pytest

from data_model.documents import HtmlDocument, SectionBoundary, assign_file_names
from llm_query.gemini import BinaryPart, PromptPart
from llm_query.prompt import DETECTION_SCHEMA
from splitter.config import SplitterConfig

_TITLE_RE = re.compile(r'titled "([^"]+)"')

SCENARIO_A = (
    '<p><a id="h1"></a>Intro</p><p>Hello</p>'
    '<p><a id="h2"></a>Details</p><p>World</p>'
)


def title_of(parts: list[PromptPart]) -> str | None:
    for p in parts:
        if isinstance(p, str):
            m = _TITLE_RE.search(p)
            if m:
                return m.group(1)
    return None


def text_of(parts: list[PromptPart]) -> str:
    return "\n".join(p for p in parts if isinstance(p, str))


def _reply(value: Any) -> str:
    if isinstance(value, BaseException):
        raise value
    if isinstance(value, dict):
        return json.dumps(value)
    return value


class FakeClient:
    """
    Klient LLM do testów: detekcja zwraca `detection`, zakładki odpowiedź
    z `responder(title)` (domyślnie "Body of <title>"). Zapisuje wywołania
    i liczbę równoległych żądań.
    """

    def __init__(
        self,
        responder: Callable[[str | None], Any] | None = None,
        *,
        detection: Any = None,
        ticks: int = 2,
    ) -> None:
        self.responder = responder
        self.detection = detection
        self.ticks = ticks
        self.calls: list[tuple[str, str | None, list[PromptPart]]] = []
        self.events: list[tuple[str, str | None]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    @property
    def section_calls(self) -> list[tuple[str, str | None, list[PromptPart]]]:
        return [c for c in self.calls if c[0] == "section"]

    async def generate(self, parts, schema, *, max_output_tokens):
        if schema is DETECTION_SCHEMA:
            self.calls.append(("detect", None, parts))
            return _reply(self.detection)

        title = title_of(parts)
        self.calls.append(("section", title, parts))
        self.events.append(("start", title))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            for _ in range(self.ticks):
                await asyncio.sleep(0)
            if self.responder is None:
                result: Any = {"markdownContent": f"Body of {title}"}
            else:
                result = self.responder(title)
        finally:
            self.in_flight -= 1
            self.events.append(("end", title))
        return _reply(result)


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def boundaries(*titles: str) -> list[SectionBoundary]:
    """Granice bez html_range; strony = pozycja."""
    return assign_file_names([
        SectionBoundary(ordinal=i, title=t, suggested_file_name="", page_start=i, page_end=i)
        for i, t in enumerate(titles, start=1)
    ])


def is_binary(part: PromptPart) -> bool:
    return isinstance(part, BinaryPart)


@pytest.fixture
def config() -> SplitterConfig:
    return SplitterConfig(retry_base_delay=0)


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def scenario_a() -> HtmlDocument:
    return HtmlDocument(SCENARIO_A)
