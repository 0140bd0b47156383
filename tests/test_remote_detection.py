import asyncio

import pytest

from conftest import FakeClient, is_binary
from data_model.documents import HtmlDocument, PdfDocument
from llm_query.detection import build_detection_parts, detect_remote, parse_detection
from splitter.errors import DetectionFailed

PDF = PdfDocument(b"%PDF-1.4 fake", page_count=None)


def _tab(n, title, start, end, file_name=None):
    return {
        "tabNumber": n,
        "fileName": file_name or f"{title.lower()}.md",
        "originalTitle": title,
        "startPage": start,
        "endPage": end,
    }


def _detect(document, detection):
    return asyncio.run(detect_remote(document, FakeClient(detection=detection)))


class TestDetectRemote:
    def test_orders_by_tab_number_and_recomputes_pages(self):
        result = _detect(PDF, {
            "totalPages": 9,
            "tabs": [_tab(2, "Details", 5, 5), _tab(1, "Intro", 1, 2)],
        })

        assert result.total_pages == 9
        assert [(b.ordinal, b.title, b.page_start, b.page_end) for b in result.boundaries] == [
            (1, "Intro", 1, 4),
            (2, "Details", 5, 9),
        ]
        assert [b.suggested_file_name for b in result.boundaries] == ["intro.md", "details.md"]
        assert all(b.html_range is None for b in result.boundaries)

    def test_local_page_count_wins(self):
        doc = PdfDocument(b"%PDF-1.4 fake", page_count=12)
        result = _detect(doc, {"totalPages": 9, "tabs": [_tab(1, "Intro", 1, 9)]})

        assert result.total_pages == 12
        assert result.boundaries[0].page_end == 12

    def test_file_names_not_trusted(self):
        result = _detect(PDF, {
            "totalPages": 2,
            "tabs": [
                _tab(1, "Notes", 1, 1, file_name="whatever.md"),
                _tab(2, "Notes", 2, 2, file_name="whatever.md"),
            ],
        })
        assert [b.suggested_file_name for b in result.boundaries] == ["notes.md", "notes-2.md"]

    def test_title_falls_back_to_file_name(self):
        tab = _tab(1, "x", 1, 1, file_name="getting-started.md")
        del tab["originalTitle"]
        result = _detect(PDF, {"totalPages": 1, "tabs": [tab]})
        assert result.boundaries[0].title == "getting-started"

    def test_fenced_json_and_float_numbers(self):
        raw = '```json\n{"totalPages": 3.0, "tabs": [{"tabNumber": 1.0, "fileName": "a.md", ' \
              '"originalTitle": "A1", "startPage": 1, "endPage": 3}]}\n```'
        result = _detect(PDF, raw)
        assert result.boundaries[0].page_end == 3

    def test_empty_tabs_is_not_an_error_here(self):
        result = _detect(PDF, {"totalPages": 4, "tabs": []})
        assert result.boundaries == []

    @pytest.mark.parametrize("raw", ["", "   ", "not json at all", "[1, 2]"])
    def test_unusable_response(self, raw):
        with pytest.raises(DetectionFailed):
            _detect(PDF, raw)

    def test_schema_violation(self):
        with pytest.raises(DetectionFailed):
            _detect(PDF, {"totalPages": 1})
        with pytest.raises(DetectionFailed):
            _detect(PDF, {"totalPages": 1, "tabs": [{"tabNumber": 1, "fileName": "a.md"}]})
        with pytest.raises(DetectionFailed):
            _detect(PDF, {"totalPages": "many", "tabs": []})

    def test_client_error_becomes_detection_failed(self):
        with pytest.raises(DetectionFailed) as exc_info:
            _detect(PDF, RuntimeError("503 unavailable"))
        assert "503" in exc_info.value.message

    def test_single_call_without_retries(self):
        client = FakeClient(detection="")
        with pytest.raises(DetectionFailed):
            asyncio.run(detect_remote(PDF, client))
        assert len(client.calls) == 1


class TestDetectionParts:
    def test_pdf_sends_binary_then_prompt(self):
        parts = build_detection_parts(PDF)
        assert is_binary(parts[0])
        assert parts[0].data == PDF.data
        assert parts[0].mime_type == "application/pdf"
        assert isinstance(parts[1], str)

    def test_html_sends_markup_inline(self):
        parts = build_detection_parts(HtmlDocument("<p>Alpha</p>"))
        assert len(parts) == 1
        assert parts[0].endswith("HTML CONTENT:\n<p>Alpha</p>")


def test_parse_detection_start_page_beyond_total():
    result = parse_detection({"totalPages": 2, "tabs": [_tab(1, "A1", 1, 1), _tab(2, "B1", 5, 5)]})
    assert result.total_pages == 5
    assert [(b.page_start, b.page_end) for b in result.boundaries] == [(1, 4), (5, 5)]
