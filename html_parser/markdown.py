"""
html_parser/markdown.py — lokalne renderowanie zakładek (tryb QUICK).

Architektura:
  cały HTML → markdownify (ATX, ``` , "-") → clean_markdown()
  → punkty cięcia: linia z tytułem zakładki (nagłówek | **pogrubienie** | goła linia)
  → wycinki [cięcie_i, cięcie_i+1) → usunięcie linii tytułu → clean_markdown()

Kluczowe funkcje publiczne:
  html_to_markdown(markup)                -> str
  clean_markdown(text)                    -> str
  title_forms(title, target)              -> list[str]
  title_regex(form, gap)                  -> str
  find_title_offset(markdown, title, ...) -> int | None
  strip_title_line(content, title)        -> str
  split_local(markup, boundaries)         -> list[RenderedSection | None]
"""

from __future__ import annotations

import html
import logging
import re
from typing import Literal

from markdownify import markdownify as _md

from data_model.documents import RenderedSection, SectionBoundary

log = logging.getLogger(__name__)

# Konwerter niepotrzebnie escapuje te znaki; kolejność ma znaczenie
# (podwójny backslash na końcu, po pozostałych).
_UNESCAPE_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"\\#"),  "#"),
    (re.compile(r"\\\*"), "*"),
    (re.compile(r"\\_"),  "_"),
    (re.compile(r"\\-"),  "-"),
    (re.compile(r"\\\."), "."),
    (re.compile(r"\\\("), "("),
    (re.compile(r"\\\)"), ")"),
    (re.compile(r"\\\["), "["),
    (re.compile(r"\\\]"), "]"),
    (re.compile(r"\\>"),  ">"),
    (re.compile(r"\\`"),  "`"),
    (re.compile(r"\\~"),  "~"),
    (re.compile(r"\\\|"), "|"),
    (re.compile(r"\\!"),  "!"),
    (re.compile(r"\n{3,}"), "\n\n"),
    (re.compile(r"\\\\"), r"\\"),
]


# ---------------------------------------------------------------------------
# Konwersja i czyszczenie
# ---------------------------------------------------------------------------

def html_to_markdown(markup: str) -> str:
    return _md(
        markup,
        heading_style="ATX",
        bullets="-",
        code_language="",
        newline_style="SPACES",   # <br> → dwie spacje + \n
    )


def clean_markdown(text: str) -> str:
    """Cofa nadmiarowe escapowanie konwertera; 3+ znaki nowej linii z rzędu zwija do jednej pustej linii."""
    for pattern, replacement in _UNESCAPE_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


# ---------------------------------------------------------------------------
# Formy tytułu
# ---------------------------------------------------------------------------

def title_forms(title: str, target: Literal["markdown", "html"]) -> list[str]:
    """
    Wszystkie postaci tekstowe, w jakich tytuł może wystąpić w danym formacie.

    markdown: markdownify escapuje "_" i "*" backslashem ("user_guide" → "user\\_guide")
              i zwija ciągi białych znaków do jednej spacji.
    html:     tytuł z LLM jest tekstem; w źródle "&", "<", ">" są encjami.

    Białe znaki wewnątrz tytułu są sprowadzane do pojedynczej spacji; wzorce
    dopasowania traktują każdą spację jako dowolny ciąg białych znaków.

    Jedyne miejsce, które zna te osobliwości. Reconciler i cięcie Markdown
    korzystają tylko z tej funkcji.
    """
    title = " ".join(title.split())
    if target == "markdown":
        escaped = title.replace("_", r"\_").replace("*", r"\*")
        forms = [title, title.replace("_", r"\_"), escaped]
    else:
        forms = [title, html.escape(title, quote=False)]
    return list(dict.fromkeys(f for f in forms if f))


def title_regex(form: str, gap: str) -> str:
    """Wzorzec formy tytułu, w którym każda spacja pasuje do ciągu `gap`."""
    return gap.join(re.escape(word) for word in form.split(" "))


def _line_patterns(form: str, anchored_start: bool) -> list[re.Pattern[str]]:
    t = title_regex(form, r"[ \t]+")
    flags = re.IGNORECASE if anchored_start else re.IGNORECASE | re.MULTILINE
    start = r"\A" if anchored_start else "^"
    end = r"[ \t]*(?:(?:\r?\n)+|\Z)" if anchored_start else r"[ \t]*$"
    return [
        re.compile(rf"{start}#{{1,3}}[ \t]*{t}{end}", flags),   # nagłówek
        re.compile(rf"{start}\*\*{t}\*\*{end}", flags),         # pogrubienie
        re.compile(rf"{start}{t}{end}", flags),                 # goła linia
    ]


def find_title_offset(markdown: str, title: str, claimed: set[int] | None = None) -> int | None:
    """
    Offset pierwszej linii z tytułem (nagłówek > pogrubienie > goła linia).

    Offsety z `claimed` są pomijane, więc dwie zakładki o tym samym tytule
    trafiają na kolejne wystąpienia.
    """
    claimed = claimed or set()
    forms = title_forms(title, "markdown")
    for kind in range(3):
        for form in forms:
            pattern = _line_patterns(form, anchored_start=False)[kind]
            for m in pattern.finditer(markdown):
                if m.start() not in claimed:
                    return m.start()
    return None


def strip_title_line(content: str, title: str) -> str:
    """Usuwa linię tytułu z początku treści (tytuł trafia do nazwy pliku)."""
    content = content.strip()
    if not title.strip():
        return content
    for kind in range(3):
        for form in title_forms(title, "markdown"):
            pattern = _line_patterns(form, anchored_start=True)[kind]
            if pattern.match(content):
                return pattern.sub("", content, count=1).strip()
    return content


# ---------------------------------------------------------------------------
# Renderowanie lokalne
# ---------------------------------------------------------------------------

def split_local(markup: str, boundaries: list[SectionBoundary]) -> list[RenderedSection | None]:
    """
    Dzieli cały dokument HTML na sekcje Markdown bez udziału LLM.

    Wynik ma po jednej pozycji na granicę; None oznacza zakładkę, której
    nie da się wyciąć lokalnie (idzie ścieżką zdalną). Gdy nie znaleziono
    żadnego punktu cięcia, wynikiem jest jedna sekcja z całym dokumentem
    pod nazwą pierwszej zakładki (degradacja, nie błąd).

    Gdy tytuł zakładki z html_range nie występuje w Markdown, cięcie po
    Markdown przestaje być wiarygodne (poprzednia sekcja sięgałaby do
    następnego znalezionego tytułu i zawierała cudzą treść). Wtedy każda
    zakładka z zakresem renderowana jest z własnego wycinka HTML, a
    zakładki bez zakresu idą ścieżką zdalną.
    """
    if not boundaries:
        return []

    full = clean_markdown(html_to_markdown(markup))
    first = boundaries[0]

    if len(boundaries) == 1:
        return [RenderedSection(first.suggested_file_name, first.title, full.strip())]

    claimed: set[int] = set()
    cuts: dict[int, int] = {}   # ordinal → offset
    for b in boundaries:
        offset = find_title_offset(full, b.title, claimed)
        if offset is None:
            log.warning("Nie znaleziono punktu cięcia dla zakładki %r", b.title)
            continue
        claimed.add(offset)
        cuts[b.ordinal] = offset

    if not cuts:
        log.warning("Brak punktów cięcia, cały dokument jako jedna sekcja %s", first.suggested_file_name)
        return [RenderedSection(first.suggested_file_name, first.title, full.strip())]

    if any(b.html_range is not None and b.ordinal not in cuts for b in boundaries):
        log.warning("Niepełne cięcie Markdown, zakładki renderowane z własnych zakresów HTML")
        return [
            _from_range(markup, b) if b.html_range is not None else None
            for b in boundaries
        ]

    ordered = sorted(cuts.values())
    sections: list[RenderedSection | None] = []
    for b in boundaries:
        if b.ordinal not in cuts:
            sections.append(None)
            continue
        start = cuts[b.ordinal]
        idx = ordered.index(start)
        end = ordered[idx + 1] if idx + 1 < len(ordered) else len(full)
        content = clean_markdown(strip_title_line(full[start:end], b.title)).strip()
        sections.append(RenderedSection(b.suggested_file_name, b.title, content))

    return sections


def _from_range(markup: str, b: SectionBoundary) -> RenderedSection:
    content = clean_markdown(html_to_markdown(b.html_range.slice(markup)))
    content = clean_markdown(strip_title_line(content, b.title)).strip()
    return RenderedSection(b.suggested_file_name, b.title, content)
