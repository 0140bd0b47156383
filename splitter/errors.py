"""
splitter/errors.py — typowane błędy pipeline'u.

Każdy błąd niesie stały kod (ErrorCode) i czytelny komunikat dla użytkownika.
Wszystkie są fatalne dla sesji; jedyny ponawiany krok to renderowanie
pojedynczej zakładki (llm_query/sections.py), a i on kończy się
SectionRenderFailed po wyczerpaniu prób.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    CONFIGURATION        = "E_CONFIGURATION"
    DETECTION_FAILED     = "E_DETECTION_FAILED"
    NO_SECTIONS          = "E_NO_SECTIONS_DETECTED"
    SECTION_RENDER       = "E_SECTION_RENDER_FAILED"
    CANCELLED            = "E_CANCELLED"
    UNSUPPORTED_DOCUMENT = "E_UNSUPPORTED_DOCUMENT"


class SplitterError(Exception):
    """Bazowy błąd pipeline'u."""

    code: ErrorCode = ErrorCode.CONFIGURATION

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(SplitterError):
    """Brak klucza API lub niepoprawna konfiguracja; nie ma czego ponawiać."""
    code = ErrorCode.CONFIGURATION


class DetectionFailed(SplitterError):
    """Zdalna detekcja zwróciła pustą lub niepoprawną odpowiedź."""
    code = ErrorCode.DETECTION_FAILED


class NoSectionsDetected(SplitterError):
    code = ErrorCode.NO_SECTIONS

    def __init__(self, message: str | None = None) -> None:
        super().__init__(
            message
            or "Nie wykryto żadnych zakładek w dokumencie. "
               "Upewnij się, że dokument zawiera strony-separatory."
        )


class SectionRenderFailed(SplitterError):
    """Zakładka wyczerpała limit prób renderowania."""
    code = ErrorCode.SECTION_RENDER

    def __init__(self, title: str, file_name: str, attempts: int) -> None:
        super().__init__(
            f'Nie udało się przetworzyć zakładki "{title or file_name}" po {attempts} próbach. '
            "Treść może być zbyt duża lub zbyt złożona."
        )
        self.title = title
        self.file_name = file_name
        self.attempts = attempts


class ProcessingCancelled(SplitterError):
    code = ErrorCode.CANCELLED

    def __init__(self, message: str = "Przetwarzanie anulowane.") -> None:
        super().__init__(message)


class UnsupportedDocument(SplitterError):
    """Plik za duży lub w nieobsługiwanym formacie (sprawdzane przez wywołującego)."""
    code = ErrorCode.UNSUPPORTED_DOCUMENT
