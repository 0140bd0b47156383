"""
llm_query/response.py — parsowanie odpowiedzi JSON modelu.

Publiczne API:
  parse_json_object(raw)     -> dict
  as_int(value, field_name)  -> int
"""

from __future__ import annotations

import json


def parse_json_object(raw: str) -> dict:
    """
    Parsuje odpowiedź modelu jako obiekt JSON.

    Model czasem owija JSON w blok ```json … ``` mimo response_mime_type;
    ogrodzenie jest zdejmowane przed parsowaniem.

    Raises:
        ValueError: pusty tekst, niepoprawny JSON albo JSON nie będący obiektem.
    """
    text = (raw or "").strip()
    if not text:
        raise ValueError("pusta odpowiedź")
    if text.startswith("```"):
        text = text.split("\n", 1)[-1]
    if text.endswith("```"):
        text = text.rsplit("```", 1)[0]
    try:
        result = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"niepoprawny JSON: {exc}") from exc
    if not isinstance(result, dict):
        raise ValueError(f"oczekiwano obiektu JSON, otrzymano {type(result).__name__}")
    return result


def as_int(value: object, field_name: str) -> int:
    """Liczba całkowita z pola NUMBER (Gemini zwraca np. 3 lub 3.0)."""
    if isinstance(value, bool):
        raise ValueError(f"pole {field_name}: oczekiwano liczby, otrzymano bool")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    raise ValueError(f"pole {field_name}: oczekiwano liczby całkowitej, otrzymano {value!r}")
