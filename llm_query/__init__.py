"""
llm_query — integracja z Gemini: detekcja zakładek i renderowanie treści.

Publiczne API:
  GeminiClient(api_key, model)                           — klient (jawna zależność)
  LLMClient, BinaryPart                                  — protokół i części promptu
  detect_remote(document, client, config)                -> DetectionResult   (async)
  render_remote(document, boundary, client, config)      -> RenderedSection   (async)
  DETECTION_SCHEMA, SECTION_SCHEMA                       — schematy odpowiedzi
"""

from .gemini import BinaryPart, GeminiClient, LLMClient, suggested_retry_delay
from .prompt import DETECTION_SCHEMA, SECTION_SCHEMA
from .detection import detect_remote, parse_detection
from .sections import render_remote, build_section_parts

__all__ = [
    "BinaryPart",
    "GeminiClient",
    "LLMClient",
    "suggested_retry_delay",
    "DETECTION_SCHEMA",
    "SECTION_SCHEMA",
    "detect_remote",
    "parse_detection",
    "render_remote",
    "build_section_parts",
]
