"""
Inline directive parsing for catalogue queries.

Readers can steer a search from the query box itself, for example
``subject:fantasy language:fr orderBy=newest``. ``parse()`` pulls the
language and ordering hints out of the text and returns what is left
alongside a ``SearchDirectives`` instance. Unrecognised tokens are left
in the text untouched; parsing never fails.
"""

from __future__ import annotations

import re
from typing import Optional, Tuple

from .schemas import SearchDirectives

_LANGUAGE_RE = re.compile(r"(?<!\S)(?:language|lang)[:=]([a-z]{2})(?!\S)", re.IGNORECASE | re.ASCII)
_ORDER_RE = re.compile(r"(?<!\S)orderBy[:=](newest|relevance)(?!\S)", re.IGNORECASE | re.ASCII)


def _extract(pattern: re.Pattern, text: str) -> Tuple[str, Optional[str]]:
    match = pattern.search(text)
    if not match:
        return text, None
    # Later markers of the same kind are dropped; the first one wins.
    rest = pattern.sub("", text[match.end():])
    return text[: match.start()] + rest, match.group(1).lower()


def parse(raw: str) -> Tuple[str, SearchDirectives]:
    """Split ``raw`` into its free text and its search directives.

    The first marker of each kind sets the directive; any repeat of that
    marker is removed from the text without changing the value. Markers
    are matched on ASCII letters only. Whitespace left behind by the
    removal is collapsed, so parsing the returned text a second time
    finds no further directive.
    """
    # Normalise whitespace first so the ASCII-only boundaries see plain spaces
    text, language = _extract(_LANGUAGE_RE, " ".join((raw or "").split()))
    text, order_by = _extract(_ORDER_RE, text)
    text = " ".join(text.split())
    return text, SearchDirectives(text=text, language_restrict=language, order_by=order_by)
