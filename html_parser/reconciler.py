"""
html_parser/reconciler.py — mapowanie tytułów z detekcji AI na offsety w HTML.

Detektor zdalny nie zna pozycji w źródle; tu szukamy każdego tytułu
w HTML (akapit z kotwicą > goły akapit > nagłówek h1–h6) i uzupełniamy
html_range. Krok best-effort: zakładka bez dopasowania zostaje bez zakresu
i w dalszym przetwarzaniu idzie ścieżką zdalną.
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace

from data_model.documents import HtmlRange, SectionBoundary
from html_parser.markdown import title_forms, title_regex

log = logging.getLogger(__name__)


def _html_patterns(form: str) -> list[re.Pattern[str]]:
    t = title_regex(form, r"\s+")
    return [
        re.compile(rf'<p[^>]*><a\s+id="[^"]+"></a>\s*{t}\s*</p>', re.IGNORECASE),
        re.compile(rf"<p[^>]*>\s*{t}\s*</p>", re.IGNORECASE),
        re.compile(rf"<h[1-6][^>]*>\s*{t}\s*</h[1-6]>", re.IGNORECASE),
    ]


def locate_title(markup: str, title: str, claimed: set[int] | None = None) -> int | None:
    """Offset pierwszego niezajętego wystąpienia tytułu lub None."""
    claimed = claimed or set()
    forms = title_forms(title, "html")
    for kind in range(3):
        for form in forms:
            for m in _html_patterns(form)[kind].finditer(markup):
                if m.start() not in claimed:
                    return m.start()
    return None


def reconcile(markup: str, boundaries: list[SectionBoundary]) -> list[SectionBoundary]:
    """
    Uzupełnia html_range granic wykrytych zdalnie; nigdy nie rzuca.

    Dopasowane granice są przestawiane według offsetu w źródle (model może
    numerować zakładki nie po kolei), niedopasowane zostają na swoich
    pozycjach. Na końcu ordinal jest numerowany od 1, a pseudo-strony
    (HTML) są równe ordinal, jak w detekcji lokalnej.
    """
    if all(b.html_range is not None for b in boundaries):
        return boundaries

    claimed: set[int] = set()
    located: dict[int, int] = {}   # indeks granicy → offset
    for i, b in enumerate(boundaries):
        if not b.title.strip():
            continue
        offset = locate_title(markup, b.title, claimed)
        if offset is None:
            log.warning("Reconciler: brak dopasowania w HTML dla %r", b.title)
            continue
        claimed.add(offset)
        located[i] = offset

    # dopasowane granice w kolejności wystąpienia w źródle
    by_offset = sorted(located, key=located.__getitem__)
    ranged: list[SectionBoundary] = []
    for n, i in enumerate(by_offset):
        start = located[i]
        end = located[by_offset[n + 1]] if n + 1 < len(by_offset) else len(markup)
        ranged.append(replace(boundaries[i], html_range=HtmlRange(start, end)))

    slots = iter(ranged)
    result = [next(slots) if i in located else b for i, b in enumerate(boundaries)]

    log.info("Reconciler: dopasowano %d/%d zakładek", len(located), len(boundaries))
    return [
        replace(b, ordinal=n, page_start=n, page_end=n)
        for n, b in enumerate(result, start=1)
    ]
