"""
data_model — struktury danych pipeline'u dzielenia dokumentu na zakładki.

Użycie:
  from data_model import HtmlDocument, SectionBoundary, RenderedSection, ...

Moduły:
  documents — DocumentInput (PdfDocument | HtmlDocument), HtmlRange,
              SectionBoundary, DetectionResult, RenderedSection,
              RenderMode, ProgressEvent, PipelineState, ProcessingSession,
              slugify, assign_file_names, recompute_page_ranges
"""

from .documents import (
    PDF_MIME,
    DOCX_MIME,
    PdfDocument,
    HtmlDocument,
    DocumentInput,
    HtmlRange,
    SectionBoundary,
    DetectionResult,
    RenderedSection,
    RenderMode,
    ProgressEvent,
    PipelineState,
    ProcessingSession,
    slugify,
    file_name_for,
    assign_file_names,
    recompute_page_ranges,
)

__all__ = [
    "PDF_MIME",
    "DOCX_MIME",
    "PdfDocument",
    "HtmlDocument",
    "DocumentInput",
    "HtmlRange",
    "SectionBoundary",
    "DetectionResult",
    "RenderedSection",
    "RenderMode",
    "ProgressEvent",
    "PipelineState",
    "ProcessingSession",
    "slugify",
    "file_name_for",
    "assign_file_names",
    "recompute_page_ranges",
]
