"""
html_parser/detector.py — lokalna detekcja zakładek w HTML (bez sieci).

Architektura:
  markup → SEPARATOR_PATTERNS (kolejno) → kandydaci (tytuł, offset)
  → is_likely_separator() → sortowanie po offsecie
  → SectionBoundary z html_range = [offset, offset następnego | EOF)

Kluczowe funkcje publiczne:
  detect_local(markup, config)          -> list[SectionBoundary]
  find_candidates(markup, pattern, ...) -> list[tuple[str, int]]
  is_likely_separator(text, ...)        -> bool
"""

from __future__ import annotations

import logging
import re

from bs4 import BeautifulSoup

from data_model.documents import HtmlRange, SectionBoundary, assign_file_names
from html_parser.separator_patterns import SEPARATOR_PATTERNS, SeparatorPattern
from splitter.config import SplitterConfig

log = logging.getLogger(__name__)

_LIST_MARKER_RE = re.compile(r"^[-*•]\s")
_NUMBER_RE      = re.compile(r"^\d+$")


def _text_of(fragment: str) -> str:
    """Tekst fragmentu HTML (encje zdekodowane, ewentualne znaczniki pominięte)."""
    return BeautifulSoup(fragment, "html.parser").get_text().strip()


def is_likely_separator(text: str, min_length: int = 2, max_length: int = 50) -> bool:
    """
    Czy tekst wygląda na separator zakładki, a nie na zwykłą treść.

    Separator jest krótki, nie jest zdaniem (brak kropki na końcu i ". "
    w środku), nie zaczyna się od markera listy i nie jest samą liczbą.
    """
    trimmed = text.strip()
    if not (min_length <= len(trimmed) <= max_length):
        return False
    if trimmed.endswith("."):
        return False
    if ". " in trimmed:
        return False
    if _LIST_MARKER_RE.match(trimmed):
        return False
    if _NUMBER_RE.match(trimmed):
        return False
    return True


def find_candidates(
    markup: str,
    pattern: SeparatorPattern,
    min_length: int = 2,
    max_length: int = 50,
) -> list[tuple[str, int]]:
    """Zwraca zaakceptowanych kandydatów jednej warstwy: (tytuł, offset)."""
    found: list[tuple[str, int]] = []
    for m in pattern.regex.finditer(markup):
        title = _text_of(m.group(1))
        if is_likely_separator(title, min_length, max_length):
            found.append((title, m.start()))
    return found


def detect_local(markup: str, config: SplitterConfig | None = None) -> list[SectionBoundary]:
    """
    Wykrywa zakładki w HTML; pusta lista gdy nic nie znaleziono.

    Deterministyczna, bez I/O, nie rzuca wyjątków dla nieprawidłowego HTML.
    """
    cfg = config or SplitterConfig()

    candidates: list[tuple[str, int]] = []
    for pattern in SEPARATOR_PATTERNS:
        candidates = find_candidates(
            markup, pattern, cfg.separator_min_length, cfg.separator_max_length
        )
        if candidates:
            log.debug("Warstwa %s: %d kandydatów", pattern.name, len(candidates))
            break

    candidates.sort(key=lambda c: c[1])

    boundaries: list[SectionBoundary] = []
    for i, (title, start) in enumerate(candidates):
        end = candidates[i + 1][1] if i + 1 < len(candidates) else len(markup)
        boundaries.append(SectionBoundary(
            ordinal=i + 1,
            title=title,
            suggested_file_name="",
            page_start=i + 1,
            page_end=i + 1,
            html_range=HtmlRange(start, end),
        ))

    log.info("Lokalna detekcja: %d zakładek %s", len(boundaries), [b.title for b in boundaries])
    return assign_file_names(boundaries)
