"""
splitter/config.py — konfiguracja pipeline'u.

Zmienne środowiskowe (opcjonalnie z pliku .env w katalogu roboczym):
  GEMINI_API_KEY         klucz API (fallback: API_KEY)
  TABSPLIT_MODEL         model Gemini (domyślnie gemini-2.5-flash)
  TABSPLIT_BATCH_SIZE    liczba zakładek renderowanych równolegle (3)
  TABSPLIT_MAX_RETRIES   ponowienia na zakładkę poza pierwszą próbą (2)
  TABSPLIT_RETRY_DELAY   bazowe opóźnienie backoffu w sekundach (1.0)
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from splitter.errors import ConfigurationError

DEFAULT_MODEL   = "gemini-2.5-flash"
_ENV_KEYS       = ("GEMINI_API_KEY", "API_KEY")


@dataclass(frozen=True, slots=True)
class SplitterConfig:
    api_key: str | None = None
    model: str = DEFAULT_MODEL
    max_output_tokens_detection: int = 65536
    max_output_tokens_processing: int = 32768
    batch_size: int = 3
    max_retries: int = 2
    retry_base_delay: float = 1.0      # sekundy; opóźnienie = base * 2**attempt
    separator_min_length: int = 2
    separator_max_length: int = 50
    local_detection_min_tabs: int = 2  # mniej lokalnych zakładek → detekcja przez AI
    max_file_size: int = 20 * 1024 * 1024

    def __post_init__(self) -> None:
        if self.batch_size < 1:
            raise ConfigurationError(f"batch_size musi być >= 1 (jest {self.batch_size}).")
        if self.max_retries < 0:
            raise ConfigurationError(f"max_retries nie może być ujemne (jest {self.max_retries}).")
        if self.separator_min_length > self.separator_max_length:
            raise ConfigurationError("separator_min_length > separator_max_length.")

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "SplitterConfig":
        """Buduje konfigurację ze zmiennych środowiskowych (i .env)."""
        if dotenv:
            load_dotenv(override=False)

        api_key = next((v for k in _ENV_KEYS if (v := os.getenv(k))), None)
        return cls(
            api_key     = api_key,
            model       = os.getenv("TABSPLIT_MODEL") or DEFAULT_MODEL,
            batch_size  = _env_number("TABSPLIT_BATCH_SIZE", int, 3),
            max_retries = _env_number("TABSPLIT_MAX_RETRIES", int, 2),
            retry_base_delay = _env_number("TABSPLIT_RETRY_DELAY", float, 1.0),
        )


def _env_number(name: str, kind: type, default: int | float) -> int | float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return kind(raw)
    except ValueError as exc:
        raise ConfigurationError(
            f"Niepoprawna wartość zmiennej {name}={raw!r} (oczekiwano {kind.__name__})."
        ) from exc
