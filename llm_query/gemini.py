"""
llm_query/gemini.py — wywołanie Gemini API.

Klient jest jawną zależnością: tworzony raz (GeminiClient.from_config)
i przekazywany do detektora, renderera i orkiestratora. Brak globalnego
singletonu.

Publiczne API:
  BinaryPart(data, mime_type)                           — część binarna promptu
  LLMClient                                             — protokół usługi LLM
  GeminiClient(api_key, model).generate(parts, schema)  -> str
  suggested_retry_delay(error)                          -> float | None
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Protocol

from google import genai as _genai
from google.genai import types

from splitter.config import DEFAULT_MODEL, SplitterConfig
from splitter.errors import ConfigurationError

# Wzorzec do wyciągnięcia liczby sekund z komunikatu API (np. "retry in 18.8s")
_RETRY_DELAY_RE = re.compile(r"retry[^\d]*(\d+(?:\.\d+)?)\s*s", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class BinaryPart:
    data: bytes
    mime_type: str


type PromptPart = str | BinaryPart


class LLMClient(Protocol):
    """
    Usługa LLM: wysyła części promptu, odpowiedź ograniczona schematem JSON.

    Pusty string albo wyjątek oznaczają brak użytecznej odpowiedzi.
    """

    async def generate(
        self,
        parts: list[PromptPart],
        schema: types.Schema,
        *,
        max_output_tokens: int,
    ) -> str:
        ...


class GeminiClient:
    """Implementacja LLMClient nad google-genai (asynchroniczne API `client.aio`)."""

    def __init__(self, api_key: str | None, model: str = DEFAULT_MODEL) -> None:
        if not api_key:
            raise ConfigurationError(
                "Brak klucza Gemini API. "
                "Ustaw zmienną środowiskową GEMINI_API_KEY lub przekaż api_key."
            )
        self.model = model
        self._client = _genai.Client(api_key=api_key)

    @classmethod
    def from_config(cls, config: SplitterConfig) -> "GeminiClient":
        return cls(config.api_key, config.model)

    async def generate(
        self,
        parts: list[PromptPart],
        schema: types.Schema,
        *,
        max_output_tokens: int,
    ) -> str:
        contents = [_to_part(p) for p in parts]
        response = await self._client.aio.models.generate_content(
            model=self.model,
            contents=contents,
            config=types.GenerateContentConfig(
                max_output_tokens=max_output_tokens,
                response_mime_type="application/json",
                response_schema=schema,
            ),
        )
        return response.text or ""


def _to_part(part: PromptPart) -> types.Part:
    if isinstance(part, BinaryPart):
        return types.Part.from_bytes(data=part.data, mime_type=part.mime_type)
    return types.Part.from_text(text=part)


def suggested_retry_delay(error: BaseException) -> float | None:
    """Wyciąga sugerowany czas oczekiwania z błędu 429, jeśli jest dostępny."""
    m = _RETRY_DELAY_RE.search(str(error))
    if m:
        return float(m.group(1))
    # google-genai może udostępniać retry_delay bezpośrednio na obiekcie błędu
    delay = getattr(error, "retry_delay", None)
    if isinstance(delay, (int, float)):
        return float(delay)
    return None
