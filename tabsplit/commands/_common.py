"""Wspólne elementy komend: wczytanie dokumentu, klient Gemini, tabela zakładek."""

from __future__ import annotations

from rich import box
from rich.console import Console
from rich.table import Table

from data_model.documents import DocumentInput, HtmlDocument, SectionBoundary
from llm_query.gemini import GeminiClient
from splitter.config import SplitterConfig
from splitter.errors import SplitterError
from splitter.normalizer import load_document

console = Console()


def load_or_exit(path: str, config: SplitterConfig) -> DocumentInput:
    try:
        document = load_document(path, config)
    except SplitterError as e:
        console.print(f"[red]{e.message}[/red]")
        raise SystemExit(1)
    except Exception as e:
        console.print(f"[red]Błąd wczytywania pliku:[/red] {e}")
        raise SystemExit(1)

    if isinstance(document, HtmlDocument):
        console.print(f"DOCX → HTML: [bold]{len(document.markup)}[/bold] znaków")
    else:
        pages = document.page_count if document.page_count is not None else "?"
        console.print(f"PDF: [bold]{pages}[/bold] stron")
    return document


def client_or_none(config: SplitterConfig) -> GeminiClient | None:
    """Klient Gemini, albo None gdy brak klucza (wystarczy dla lokalnej ścieżki)."""
    if not config.api_key:
        console.print("[yellow]Brak GEMINI_API_KEY — dostępna tylko lokalna ścieżka dla DOCX.[/yellow]")
        return None
    return GeminiClient.from_config(config)


def show_boundaries(boundaries: list[SectionBoundary]) -> None:
    table = Table(
        box=box.SIMPLE_HEAD,
        show_header=True,
        header_style="bold white",
        row_styles=["", "dim"],
        expand=False,
    )
    table.add_column("#",      justify="right", no_wrap=True, style="dim")
    table.add_column("PLIK",   no_wrap=True, style="bold cyan")
    table.add_column("STRONY", justify="center", no_wrap=True)
    table.add_column("HTML",   justify="right", no_wrap=True, style="dim")
    table.add_column("TYTUŁ",  no_wrap=False, max_width=50)

    for b in boundaries:
        pages = (
            str(b.page_start)
            if b.page_start == b.page_end
            else f"{b.page_start}–{b.page_end}"
        )
        rng = f"{b.html_range.start}:{b.html_range.end}" if b.html_range else "-"
        table.add_row(str(b.ordinal), b.suggested_file_name, pages, rng, b.title[:80])

    console.print()
    console.print(table)
    console.print(f"  [dim]{len(boundaries)} zakładek[/dim]\n")
