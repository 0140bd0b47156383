"""
html_parser/separator_patterns.py — wzorce regex rozpoznające akapity-separatory.

Każdy SeparatorPattern zawiera:
  - name  : nazwa warstwy (do logów)
  - regex : skompilowany wzorzec; grupa 1 = tekst tytułu

Wzorce są testowane w kolejności; pierwsza warstwa, która da co najmniej
jednego zaakceptowanego kandydata, wygrywa (kolejne nie są uruchamiane).
"""

from __future__ import annotations

import re
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SeparatorPattern:
    name: str
    regex: re.Pattern[str]


def _p(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern, re.IGNORECASE | re.UNICODE)


SEPARATOR_PATTERNS: list[SeparatorPattern] = [
    # -------------------------------------------------------------------------
    # Warstwa 1: zakładki edytora: <p><a id="x"></a>Tytuł</p>
    # -------------------------------------------------------------------------
    SeparatorPattern(
        name="anchor-paragraph",
        regex=_p(r'<p[^>]*><a\s+id="[^"]+"></a>([^<]+)</p>'),
    ),

    # -------------------------------------------------------------------------
    # Warstwa 2: akapit z samym tokenem kebab/snake-case:
    #   system-prompt, user_guide, 00-intro, _nav-guide
    # -------------------------------------------------------------------------
    SeparatorPattern(
        name="token-paragraph",
        regex=_p(r"<p[^>]*>(?:<a[^>]*></a>)?([\d_-]*[a-z]\w*(?:[-_]\w+)+)\s*</p>"),
    ),
]
