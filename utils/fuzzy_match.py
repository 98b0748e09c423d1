"""
Fuzzy string matching utilities.

Wraps rapidfuzz to suggest a likely header for a field the exact matcher
left unmapped ("Did you mean 'E-Mail'?").  Suggestions are shown to the
user only; auto-mapping never applies them.
"""

import logging

from rapidfuzz import fuzz

from config.field_config import FIELD_SYNONYMS
from processing.header_matcher import normalize_header

logger = logging.getLogger(__name__)


def best_match(
    value: str,
    candidates: dict[str, str],
    threshold: int = 80,
) -> tuple[str | None, int]:
    """
    Find the best fuzzy match for *value* among *candidates* keys.

    Uses token_sort_ratio which handles word reordering well (e.g.
    "Date Service" vs "Service Date").

    Args:
        value: The string to match (normalized internally).
        candidates: Dict of candidate_key (normalized) → canonical_value.
        threshold: Minimum score (0-100) to accept a match.

    Returns:
        (canonical_value, score) if a match is found at or above threshold,
        or (None, 0) if no match qualifies.
    """
    if not value or not candidates:
        return None, 0

    value_normalized = normalize_header(value)

    best_canonical: str | None = None
    best_score: int = 0

    for candidate_key, canonical_value in candidates.items():
        score = int(round(fuzz.token_sort_ratio(value_normalized, candidate_key)))
        if score > best_score:
            best_score = score
            best_canonical = canonical_value

    if best_score >= threshold:
        logger.debug(
            f"Fuzzy matched '{value}' → '{best_canonical}' (score={best_score})"
        )
        return best_canonical, best_score

    return None, 0


def suggest_header(
    field_name: str,
    headers: list[str],
    threshold: int = 80,
) -> tuple[str | None, int]:
    """
    Suggest the header closest to any synonym of *field_name*.

    Args:
        field_name: Logical field, e.g. "clientEmail".
        headers: Headers available for mapping (usually the extra fields).
        threshold: Minimum score to return a suggestion.

    Returns:
        (header, score) or (None, 0).
    """
    candidates = {normalize_header(header): header for header in headers if normalize_header(header)}

    best_header: str | None = None
    best_score = 0
    for synonym in FIELD_SYNONYMS.get(field_name, []):
        header, score = best_match(synonym, candidates, threshold=threshold)
        if header is not None and score > best_score:
            best_header, best_score = header, score

    if best_header is not None:
        logger.debug(
            f"Suggested '{best_header}' for {field_name} (score={best_score})"
        )
    return best_header, best_score
