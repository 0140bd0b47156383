"""
tabsplit — narzędzie CLI dzielące eksport dokumentu wielozakładkowego na pliki Markdown.

Użycie:
  tabsplit <komenda> [opcje]

Komendy:
  split    Dzieli PDF/DOCX na pliki .md (jeden na zakładkę) i zapisuje je do katalogu.
  detect   Wykrywa zakładki i wyświetla ich granice (bez renderowania treści).
"""

from __future__ import annotations

import argparse
import logging
import sys

# Windows: terminal może używać cp1252; wymuszamy UTF-8 dla polskich znaków
# w tekstach pomocy argparse.
if hasattr(sys.stdout, "reconfigure"):
    sys.stdout.reconfigure(encoding="utf-8", errors="replace")
if hasattr(sys.stderr, "reconfigure"):
    sys.stderr.reconfigure(encoding="utf-8", errors="replace")

from rich.logging import RichHandler

from tabsplit.commands import detect as cmd_detect
from tabsplit.commands import split as cmd_split


def _setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )
    # google-genai/httpx logują każde żądanie na INFO
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tabsplit",
        description="tabsplit — dzielenie dokumentu na pliki Markdown per zakładka.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", action="version", version="tabsplit 0.1.0"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Więcej logów (-v: INFO, -vv: DEBUG).",
    )

    subparsers = parser.add_subparsers(
        title="komendy",
        metavar="<komenda>",
        dest="command",
    )
    subparsers.required = True

    cmd_split.add_parser(subparsers)
    cmd_detect.add_parser(subparsers)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)
    args.func(args)


if __name__ == "__main__":
    main()
