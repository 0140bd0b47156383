"""
llm_query/prompt.py — prompty i schematy odpowiedzi dla Gemini.

Treść instrukcji można zmieniać tutaj bez dotykania logiki usług.

Funkcje publiczne:
  detection_prompt()                                  -> str
  section_prompt_pdf(title, page_start, page_end)     -> str
  section_prompt_html(title)                          -> str
  section_prompt_html_focus(title)                    -> str
  with_html(prompt, markup)                           -> str

Schematy:
  DETECTION_SCHEMA  — {totalPages, tabs[{tabNumber, fileName, originalTitle, startPage, endPage}]}
  SECTION_SCHEMA    — {markdownContent}
"""

from __future__ import annotations

from textwrap import dedent

from google.genai import types

_NOISE = (
    '**CLEAN**: Remove "==Start of OCR==", "==Screenshot==", page numbers, '
    "headers/footers, and noise."
)
_OUTPUT = "**OUTPUT**: Return clean Markdown with proper H1/H2/H3 hierarchy and valid tables."


def _no_title(title: str) -> str:
    return (
        f'**DO NOT include the tab/section title "{title}" at the beginning** '
        "- it's already used as the filename."
    )


def detection_prompt() -> str:
    return dedent("""
        Analyze this document and identify ALL the separate tabs/sections that should be split into individual files.

        **How to identify tab separators:**
        - Look for SHORT standalone lines/paragraphs that act as SECTION DIVIDERS
        - These are typically 1-5 words, sitting alone, followed by the section's content
        - They can be ANY format: "Overview", "Chapter 1", "system-prompt", "_navigation-guide", "00-intro", "Getting Started"
        - In HTML: often <p>Title Here</p> or <p><a id="..."></a>Title Here</p>
        - They are NOT part of the content - they DIVIDE the document into logical sections
        - Each divider marks where a new file should begin

        **CRITICAL: Scan the ENTIRE document. Every standalone short title = 1 tab.**

        Return ONLY the tab structure - do NOT extract content.
        For each tab:
        - tabNumber: Sequential (1, 2, 3...)
        - fileName: Convert to kebab-case.md (e.g., "Getting Started" -> "getting-started.md")
        - originalTitle: Exact title text found
        - startPage: Position in document order (1, 2, 3...)
        - endPage: Position before next tab (or end)
    """).strip()


def section_prompt_pdf(title: str, page_start: int, page_end: int) -> str:
    return "\n\n".join([
        f"Extract content ONLY from pages {page_start} to {page_end} of this document.",
        f'This section is titled "{title}".',
        _NOISE,
        _OUTPUT,
        f"**IMPORTANT**: Only process pages {page_start}-{page_end}, ignore all other pages.",
        _no_title(title),
    ])


def section_prompt_html(title: str) -> str:
    return "\n\n".join([
        "Convert this HTML content to clean Markdown.",
        f'This section is titled "{title}".',
        _NOISE,
        _OUTPUT,
        _no_title(title),
    ])


def section_prompt_html_focus(title: str) -> str:
    """Wariant dla zakładki bez zakresu HTML; wysyłany jest cały dokument."""
    return "\n\n".join([
        f'Extract ONLY the section titled "{title}" from this HTML document and convert it to clean Markdown.',
        "The section starts at its standalone title line and ends right before the next standalone section title.",
        "Ignore all content outside of this section.",
        _NOISE,
        _OUTPUT,
        _no_title(title),
    ])


def with_html(prompt: str, markup: str) -> str:
    return f"{prompt}\n\nHTML CONTENT:\n{markup}"


# ---------------------------------------------------------------------------
# Schematy odpowiedzi
# ---------------------------------------------------------------------------

DETECTION_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "totalPages": types.Schema(
            type=types.Type.NUMBER,
            description="Total number of pages in the document",
        ),
        "tabs": types.Schema(
            type=types.Type.ARRAY,
            items=types.Schema(
                type=types.Type.OBJECT,
                properties={
                    "tabNumber":     types.Schema(type=types.Type.NUMBER),
                    "fileName":      types.Schema(type=types.Type.STRING),
                    "originalTitle": types.Schema(type=types.Type.STRING),
                    "startPage":     types.Schema(type=types.Type.NUMBER),
                    "endPage":       types.Schema(type=types.Type.NUMBER),
                },
                required=["tabNumber", "fileName", "startPage", "endPage"],
            ),
        ),
    },
    required=["totalPages", "tabs"],
)

SECTION_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "markdownContent": types.Schema(
            type=types.Type.STRING,
            description="The extracted content in clean Markdown format",
        ),
    },
    required=["markdownContent"],
)
