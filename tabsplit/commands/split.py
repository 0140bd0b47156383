"""Komenda: tabsplit split — podział dokumentu na pliki Markdown (jeden na zakładkę)."""

from __future__ import annotations

import argparse
import asyncio
from pathlib import Path

from rich import box
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from data_model.documents import ProgressEvent, RenderedSection, RenderMode
from splitter.config import SplitterConfig
from splitter.errors import SectionRenderFailed, SplitterError
from splitter.pipeline import TabSplitter
from tabsplit.commands._common import client_or_none, console, load_or_exit


# ---------------------------------------------------------------------------
# Zapis plików
# ---------------------------------------------------------------------------

def _output_name(section: RenderedSection, fmt: str) -> str:
    if fmt == "txt":
        return section.file_name.removesuffix(".md") + ".txt"
    return section.file_name


def _write_sections(sections: list[RenderedSection], out_dir: Path, fmt: str) -> list[Path]:
    out_dir.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    for s in sections:
        path = out_dir / _output_name(s, fmt)
        path.write_text(s.content + "\n", encoding="utf-8")
        written.append(path)
    return written


def _show_sections(sections: list[RenderedSection], paths: list[Path]) -> None:
    table = Table(
        box=box.SIMPLE_HEAD,
        show_header=True,
        header_style="bold white",
        row_styles=["", "dim"],
        expand=False,
    )
    table.add_column("#",      justify="right", no_wrap=True, style="dim")
    table.add_column("PLIK",   no_wrap=True, style="bold cyan")
    table.add_column("TYTUŁ",  no_wrap=False, max_width=40)
    table.add_column("ZNAKI",  justify="right", no_wrap=True)

    for i, (s, p) in enumerate(zip(sections, paths), start=1):
        table.add_row(str(i), p.name, (s.original_title or "")[:60], str(len(s.content)))

    console.print()
    console.print(table)


# ---------------------------------------------------------------------------
# Główna funkcja komendy
# ---------------------------------------------------------------------------

def run(args: argparse.Namespace) -> None:
    src = Path(args.file)
    out_dir = Path(args.out) if args.out else src.with_name(f"{src.stem}_tabs")
    mode = RenderMode(args.mode)

    try:
        config = SplitterConfig.from_env()
    except SplitterError as e:
        console.print(f"[red]{e.message}[/red]")
        raise SystemExit(1)

    document = load_or_exit(str(src), config)
    splitter = TabSplitter(client_or_none(config), config)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("Wykrywanie zakładek…", total=None)

        def on_progress(event: ProgressEvent) -> None:
            if event.phase == "detecting":
                progress.update(task, description="Wykrywanie zakładek…")
                return
            if event.finished:
                progress.update(task, total=event.total, advance=1)
            else:
                progress.update(task, total=event.total, description=f"[cyan]{event.label or ''}[/cyan]")

        try:
            sections = asyncio.run(splitter.run(document, mode, on_progress))
        except SectionRenderFailed as e:
            console.print(
                f"[red]Nie udało się przetworzyć zakładki[/red] [bold]{e.title or e.file_name}[/bold] "
                f"[red]po {e.attempts} próbach.[/red]"
            )
            raise SystemExit(1)
        except SplitterError as e:
            console.print(f"[red]{e.message}[/red]")
            raise SystemExit(1)

    paths = _write_sections(sections, out_dir, args.format)
    console.print(f"[green]Zapisano {len(paths)} plików do:[/green] {out_dir}")

    if args.show:
        _show_sections(sections, paths)


# ---------------------------------------------------------------------------
# Rejestracja subkomendy
# ---------------------------------------------------------------------------

def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "split",
        help="Dzieli PDF/DOCX na pliki Markdown (jeden na zakładkę).",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Dzieli eksport dokumentu wielozakładkowego (np. Google Docs) na osobne
pliki Markdown. DOCX jest konwertowany do HTML i dzielony lokalnie
(--mode quick) lub przez Gemini (--mode enhanced). PDF zawsze przez Gemini.

Przykłady:
  tabsplit split eksport.docx --mode quick
  tabsplit split eksport.pdf --out docs/ --show
  tabsplit split eksport.docx --format txt
        """,
    )
    p.add_argument(
        "file",
        metavar="PLIK",
        help="Ścieżka do pliku .pdf lub .docx.",
    )
    p.add_argument(
        "--out",
        metavar="KATALOG",
        default=None,
        help="Katalog wyjściowy (domyślnie: <nazwa>_tabs obok pliku).",
    )
    p.add_argument(
        "--mode",
        choices=[m.value for m in RenderMode],
        default=RenderMode.ENHANCED.value,
        help="quick: lokalna konwersja (tylko DOCX); enhanced: Gemini (domyślnie).",
    )
    p.add_argument(
        "--format",
        choices=["md", "txt"],
        default="md",
        help="Rozszerzenie plików wyjściowych (domyślnie: md).",
    )
    p.add_argument(
        "--show",
        action="store_true",
        help="Wyświetl tabelę zapisanych plików.",
    )
    p.set_defaults(func=run)
