"""Whitespace normalization for description text."""

from __future__ import annotations

import re
from typing import Optional

_SYNTAX_HEADING_PATTERN = re.compile(r"\sSyntax\s")


def normalize_text(text: str) -> str:
    """`text` with normalized whitespace.

    - leading and trailing whitespace are removed
    - all whitespace segments within text (spacing between words) are reduced to a single space
      each.

    Produces the empty string when `text` contains only whitespace.
    """
    return " ".join(text.strip().split())


def leading_description(text: str) -> Optional[str]:
    """Normalized prose of a page's main content that precedes its "Syntax" heading.

    None when `text` has no such heading.
    """
    match = _SYNTAX_HEADING_PATTERN.search(text)
    return normalize_text(text[: match.start()]) if match else None
