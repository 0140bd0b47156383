"""
data_model/documents.py — model dokumentu wejściowego, granic zakładek i wyników.

DocumentInput to unia dwóch wariantów (PDF jako blob binarny, HTML jako tekst).
SectionBoundary opisuje jedną wykrytą zakładkę; RenderedSection to gotowy plik
Markdown. ProcessingSession trzyma stan jednego przebiegu pipeline'u (w pamięci).
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Literal

PDF_MIME  = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


# ---------------------------------------------------------------------------
# Dokument wejściowy
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class PdfDocument:
    data: bytes
    mime_type: str = PDF_MIME
    page_count: int | None = None   # None gdy nie udało się policzyć stron lokalnie

    @property
    def kind(self) -> Literal["pdf"]:
        return "pdf"


@dataclass(frozen=True, slots=True)
class HtmlDocument:
    markup: str

    @property
    def kind(self) -> Literal["html"]:
        return "html"


type DocumentInput = PdfDocument | HtmlDocument


# ---------------------------------------------------------------------------
# Granice zakładek
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class HtmlRange:
    """Półotwarty zakres znaków [start, end) w źródle HTML."""
    start: int
    end: int

    def slice(self, markup: str) -> str:
        return markup[self.start:self.end]


@dataclass(frozen=True, slots=True)
class SectionBoundary:
    ordinal: int                 # 1-based, kolejność wystąpienia w dokumencie
    title: str                   # tekst separatora (bez treści)
    suggested_file_name: str     # kebab-case + ".md"
    page_start: int              # 1-based; dla HTML pseudo-strona = ordinal
    page_end: int
    html_range: HtmlRange | None = None


@dataclass(frozen=True, slots=True)
class DetectionResult:
    total_pages: int
    boundaries: list[SectionBoundary]


@dataclass(frozen=True, slots=True)
class RenderedSection:
    file_name: str
    original_title: str | None
    content: str                 # markdown


# ---------------------------------------------------------------------------
# Tryb, postęp, sesja
# ---------------------------------------------------------------------------

class RenderMode(StrEnum):
    """Tryb renderowania treści zakładek."""
    QUICK    = "quick"      # lokalna konwersja HTML → Markdown, bez LLM dla treści
    ENHANCED = "enhanced"   # jedno wywołanie LLM na zakładkę


@dataclass(frozen=True, slots=True)
class ProgressEvent:
    phase: Literal["detecting", "processing"]
    current: int
    total: int
    label: str | None = None
    finished: bool = False


class PipelineState(StrEnum):
    START     = "start"
    DETECT    = "detect"
    RECONCILE = "reconcile"
    RENDER    = "render"
    DONE      = "done"
    FAILED    = "failed"


@dataclass(slots=True)
class ProcessingSession:
    """Stan jednego przebiegu; porzucany po zwróceniu wyniku lub błędzie."""
    document: DocumentInput
    state: PipelineState = PipelineState.START
    boundaries: list[SectionBoundary] = field(default_factory=list)
    sections: list[RenderedSection] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Nazwy plików
# ---------------------------------------------------------------------------

def slugify(title: str) -> str:
    """"Setup Guide" → "setup-guide"; ciągi znaków spoza [a-z0-9] → jeden myślnik."""
    return _NON_ALNUM_RE.sub("-", title.lower()).strip("-")


def file_name_for(title: str, ordinal: int) -> str:
    slug = slugify(title)
    return f"{slug or f'section-{ordinal}'}.md"


def assign_file_names(boundaries: list[SectionBoundary]) -> list[SectionBoundary]:
    """
    Wylicza suggested_file_name z tytułu i usuwa kolizje nazw.

    Pierwsze wystąpienie zachowuje "nazwa.md", kolejne dostają "nazwa-2.md",
    "nazwa-3.md" (w kolejności granic).
    """
    seen: dict[str, int] = {}
    taken: set[str] = set()
    result: list[SectionBoundary] = []

    for b in boundaries:
        base = file_name_for(b.title, b.ordinal)[:-3]
        n = seen.get(base, 0) + 1
        name = base if n == 1 else f"{base}-{n}"
        while f"{name}.md" in taken:
            n += 1
            name = f"{base}-{n}"
        seen[base] = n
        taken.add(f"{name}.md")
        result.append(replace(b, suggested_file_name=f"{name}.md"))

    return result


def recompute_page_ranges(
    boundaries: list[SectionBoundary],
    total_pages: int,
) -> list[SectionBoundary]:
    """
    Numeruje granice od 1 i przelicza page_end z page_start następnej granicy.

    Zakresy od detektora nie są wiarygodne: page_end(i) = page_start(i+1) - 1
    (nie mniej niż page_start(i)), ostatnia granica kończy się na total_pages.
    """
    result: list[SectionBoundary] = []
    for i, b in enumerate(boundaries):
        nxt = boundaries[i + 1] if i + 1 < len(boundaries) else None
        end = nxt.page_start - 1 if nxt is not None else total_pages
        result.append(replace(
            b,
            ordinal=i + 1,
            page_end=max(b.page_start, end),
        ))
    return result
