"""Komenda: tabsplit detect — wykrywanie granic zakładek bez renderowania treści."""

from __future__ import annotations

import argparse
import asyncio

from splitter.config import SplitterConfig
from splitter.errors import SplitterError
from splitter.pipeline import TabSplitter
from tabsplit.commands._common import client_or_none, console, load_or_exit, show_boundaries


def run(args: argparse.Namespace) -> None:
    try:
        config = SplitterConfig.from_env()
    except SplitterError as e:
        console.print(f"[red]{e.message}[/red]")
        raise SystemExit(1)

    document = load_or_exit(args.file, config)

    try:
        splitter = TabSplitter(client_or_none(config), config)
        boundaries = asyncio.run(splitter.detect(document))
    except SplitterError as e:
        console.print(f"[red]Detekcja nie powiodła się ({e.code}):[/red] {e.message}")
        raise SystemExit(1)

    show_boundaries(boundaries)


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "detect",
        help="Wykrywa zakładki i wyświetla ich granice.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Wykrywa zakładki w dokumencie (lokalnie dla DOCX, przez Gemini dla PDF
lub gdy lokalna detekcja nie wystarcza) i wyświetla tabelę granic.

Przykłady:
  tabsplit detect eksport.docx
  tabsplit -v detect eksport.pdf
        """,
    )
    p.add_argument(
        "file",
        metavar="PLIK",
        help="Ścieżka do pliku .pdf lub .docx.",
    )
    p.set_defaults(func=run)
