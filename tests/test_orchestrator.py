import asyncio
import threading
from dataclasses import replace

import pytest

from conftest import FakeClient, boundaries
from data_model.documents import (
    HtmlDocument,
    HtmlRange,
    PdfDocument,
    RenderMode,
    recompute_page_ranges,
)
from html_parser.detector import detect_local
from splitter.config import SplitterConfig
from splitter.errors import ConfigurationError, ProcessingCancelled, SectionRenderFailed
from splitter.orchestrator import render_sections

PDF = PdfDocument(b"%PDF-1.4 fake", page_count=7)
TITLES = [f"Part {i}" for i in range(1, 8)]


def _pdf_boundaries(titles=TITLES):
    return recompute_page_ranges(boundaries(*titles), len(titles))


def _render(document, bounds, mode=RenderMode.ENHANCED, **kwargs):
    kwargs.setdefault("config", SplitterConfig(retry_base_delay=0))
    return asyncio.run(render_sections(document, bounds, mode, **kwargs))


class TestEnhanced:
    def test_results_in_boundary_order(self):
        client = FakeClient()
        result = _render(PDF, _pdf_boundaries(), client=client)

        assert [s.file_name for s in result] == [f"part-{i}.md" for i in range(1, 8)]
        assert [s.content for s in result] == [f"Body of {t}" for t in TITLES]

    def test_at_most_batch_size_in_flight(self):
        client = FakeClient()
        _render(PDF, _pdf_boundaries(), client=client)
        assert client.max_in_flight == 3

    def test_next_batch_waits_for_previous(self):
        client = FakeClient()
        _render(PDF, _pdf_boundaries(), client=client)

        start_5 = client.events.index(("start", "Part 5"))
        for title in ("Part 1", "Part 2", "Part 3"):
            assert client.events.index(("end", title)) < start_5

    def test_batch_size_one_is_sequential(self):
        client = FakeClient()
        _render(PDF, _pdf_boundaries(), client=client, config=SplitterConfig(batch_size=1, retry_base_delay=0))
        assert client.max_in_flight == 1

    def test_progress_events(self):
        events = []
        _render(PDF, _pdf_boundaries(), client=FakeClient(), progress=events.append)

        started = [e.current for e in events if not e.finished]
        finished = [e.current for e in events if e.finished]
        assert started == list(range(1, 8))
        assert finished == list(range(1, 8))
        assert all(e.phase == "processing" and e.total == 7 for e in events)
        assert events[0].label == "Part 1"

    def test_failure_aborts_remaining_batches(self):
        def responder(title):
            if title == "Part 2":
                raise RuntimeError("boom")
            return {"markdownContent": "ok"}

        client = FakeClient(responder)
        with pytest.raises(SectionRenderFailed) as exc_info:
            _render(PDF, _pdf_boundaries(), client=client,
                    config=SplitterConfig(max_retries=0, retry_base_delay=0))

        assert exc_info.value.title == "Part 2"
        called = {t for _, t, _ in client.section_calls}
        assert called == {"Part 1", "Part 2", "Part 3"}

    def test_first_failure_in_order_wins(self):
        def responder(title):
            raise RuntimeError(title)

        with pytest.raises(SectionRenderFailed) as exc_info:
            _render(PDF, _pdf_boundaries(), client=FakeClient(responder),
                    config=SplitterConfig(max_retries=0, retry_base_delay=0))
        assert exc_info.value.title == "Part 1"

    def test_cancel_before_next_batch(self):
        flag = threading.Event()

        def progress(event):
            if event.finished and event.current == 3:
                flag.set()

        client = FakeClient()
        with pytest.raises(ProcessingCancelled):
            _render(PDF, _pdf_boundaries(), client=client, progress=progress, cancel=flag)
        assert len(client.section_calls) == 3

    def test_requires_client(self):
        with pytest.raises(ConfigurationError):
            _render(PDF, _pdf_boundaries(), client=None)

    def test_pdf_quick_falls_back_to_enhanced(self):
        client = FakeClient()
        result = _render(PDF, _pdf_boundaries(TITLES[:2]), RenderMode.QUICK, client=client)
        assert len(client.section_calls) == 2
        assert [s.content for s in result] == ["Body of Part 1", "Body of Part 2"]

    def test_empty_boundaries(self):
        assert _render(PDF, [], client=None) == []


class TestQuick:
    def test_local_only_needs_no_client(self, scenario_a):
        result = _render(scenario_a, detect_local(scenario_a.markup), RenderMode.QUICK, client=None)
        assert [(s.file_name, s.content) for s in result] == [("intro.md", "Hello"), ("details.md", "World")]

    def test_unmatched_section_goes_remote(self):
        markup = "<p>Intro</p><p>Hello</p>"
        intro, ghost = boundaries("Intro", "Ghost")
        intro = replace(intro, html_range=HtmlRange(0, len(markup)))
        client = FakeClient()

        result = _render(HtmlDocument(markup), [intro, ghost], RenderMode.QUICK, client=client)

        assert [(s.file_name, s.content) for s in result] == [
            ("intro.md", "Hello"),
            ("ghost.md", "Body of Ghost"),
        ]
        assert [t for _, t, _ in client.section_calls] == ["Ghost"]

    def test_no_ranges_renders_everything_remotely(self):
        client = FakeClient()
        document = HtmlDocument("<p>Alpha</p><p>one</p><p>Beta</p><p>two</p>")
        result = _render(document, boundaries("Alpha", "Beta"), RenderMode.QUICK, client=client)

        assert len(client.section_calls) == 2
        assert [s.content for s in result] == ["Body of Alpha", "Body of Beta"]

    def test_degraded_split_returns_single_section(self):
        markup = "<p>Hello</p><p>World</p>"
        ranged = [replace(b, html_range=HtmlRange(0, len(markup))) for b in boundaries("Zeta", "Eta")]
        events = []
        result = _render(HtmlDocument(markup), ranged, RenderMode.QUICK, client=None, progress=events.append)

        assert len(result) == 1
        assert result[0].file_name == "zeta.md"
        assert [(e.current, e.total, e.finished) for e in events] == [(1, 1, False), (1, 1, True)]

    def test_cancelled_before_remote_fallback(self):
        markup = "<p>Intro</p><p>Hello</p>"
        intro, ghost = boundaries("Intro", "Ghost")
        intro = replace(intro, html_range=HtmlRange(0, len(markup)))
        flag = threading.Event()
        flag.set()
        client = FakeClient()

        with pytest.raises(ProcessingCancelled):
            _render(HtmlDocument(markup), [intro, ghost], RenderMode.QUICK, client=client, cancel=flag)
        assert client.section_calls == []


def test_quick_mixed_local_and_remote_progress_in_order():
    markup = "<p>Alpha</p><p>a body</p><p>Gamma</p><p>g body</p>"
    alpha, ghost, gamma = boundaries("Alpha", "Ghost", "Gamma")
    alpha = replace(alpha, html_range=HtmlRange(0, markup.index("<p>Gamma")))
    events = []
    client = FakeClient()

    result = _render(HtmlDocument(markup), [alpha, ghost, gamma], RenderMode.QUICK,
                     client=client, progress=events.append)

    assert [s.content for s in result] == ["a body", "Body of Ghost", "g body"]
    assert [t for _, t, _ in client.section_calls] == ["Ghost"]
    assert [e.current for e in events if not e.finished] == [1, 2, 3]
    assert [e.current for e in events if e.finished] == [1, 2, 3]
