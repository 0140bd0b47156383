"""
splitter — pipeline dzielenia dokumentu (PDF/DOCX) na pliki Markdown per zakładka.

Użycie:
  from splitter.config import SplitterConfig
  from splitter.pipeline import TabSplitter
  from llm_query import GeminiClient

  config = SplitterConfig.from_env()
  splitter = TabSplitter(GeminiClient.from_config(config), config)
  sections = await splitter.run(document, RenderMode.ENHANCED, progress)

Moduły:
  config       — SplitterConfig (zmienne środowiskowe / .env)
  errors       — ConfigurationError, DetectionFailed, NoSectionsDetected,
                 SectionRenderFailed, ProcessingCancelled, UnsupportedDocument
  normalizer   — normalize(), load_document()
  orchestrator — render_sections() (partie, współbieżność, postęp)
  pipeline     — TabSplitter, run()

Pakiet eksportuje tylko konfigurację i błędy; pipeline importuje się
z splitter.pipeline (html_parser i llm_query zależą od splitter.config).
"""

from .config import SplitterConfig, DEFAULT_MODEL
from .errors import (
    ErrorCode,
    SplitterError,
    ConfigurationError,
    DetectionFailed,
    NoSectionsDetected,
    SectionRenderFailed,
    ProcessingCancelled,
    UnsupportedDocument,
)

__all__ = [
    "SplitterConfig",
    "DEFAULT_MODEL",
    "ErrorCode",
    "SplitterError",
    "ConfigurationError",
    "DetectionFailed",
    "NoSectionsDetected",
    "SectionRenderFailed",
    "ProcessingCancelled",
    "UnsupportedDocument",
]
