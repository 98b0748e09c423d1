"""
Header matcher — normalizes column headers and tests them against synonyms.

Normalization: trim, lowercase, collapse every run of non-alphanumeric
characters to a single space, trim again.  "Client  Email!" and
"client_email" both become "client email".

Matching is exact equality after normalization; there is no substring or
fuzzy comparison here (see utils/fuzzy_match.py for hints only).

Public API:
    normalize_header(header) → str
    matches_field(header, synonyms) → bool
    is_blank_header(header) → bool
"""

import logging
import re

logger = logging.getLogger(__name__)

_NON_ALPHANUMERIC_RUN = re.compile(r"[^a-z0-9]+")


def normalize_header(header: str | None) -> str:
    """
    Normalize a header (or synonym) for comparison.

    Args:
        header: Raw header text.  None is treated as empty.

    Returns:
        The normalized string, "" when nothing alphanumeric remains.
    """
    if not header:
        return ""
    lowered = str(header).strip().lower()
    return _NON_ALPHANUMERIC_RUN.sub(" ", lowered).strip()


def is_blank_header(header: str | None) -> bool:
    """True for None, "" and whitespace-only headers."""
    return header is None or not str(header).strip()


def matches_field(header: str | None, synonyms: list[str]) -> bool:
    """
    Return True if *header* equals any synonym after normalization.

    An empty normalized header never matches.
    """
    normalized = normalize_header(header)
    if not normalized:
        return False
    return any(normalized == normalize_header(synonym) for synonym in synonyms)
