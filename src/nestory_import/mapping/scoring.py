from __future__ import annotations

from ..models.target_field import TargetField

"""Header-to-field confidence scoring.

Priority order for one (header, field) pair:
- exact match against a known variation -> 1.0
- substring containment either direction -> 0.6 + 0.3 * (shorter / longer)
- edit-distance similarity >= 0.7 against any variation -> similarity * 0.8

Fuzzy scores are capped at 0.8 so they stay below strong substring matches.
"""

__all__ = [
    "EXACT_CONFIDENCE",
    "normalize_header",
    "levenshtein_distance",
    "similarity",
    "calculate_confidence",
]

EXACT_CONFIDENCE = 1.0
SUBSTRING_BASE = 0.6
SUBSTRING_SPAN = 0.3
FUZZY_THRESHOLD = 0.7
FUZZY_CAP = 0.8

_SEPARATORS = str.maketrans({"_": " ", "-": " ", ".": " "})


def normalize_header(header: str) -> str:
    """Lowercase, turn ``_``/``-``/``.`` into spaces and collapse whitespace."""
    return " ".join(header.lower().translate(_SEPARATORS).split())


def levenshtein_distance(a: str, b: str) -> int:
    """Classic edit distance (insert / delete / substitute, each cost 1)."""
    if not a:
        return len(b)
    if not b:
        return len(a)
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current.append(min(
                previous[j] + 1,         # deletion
                current[j - 1] + 1,      # insertion
                previous[j - 1] + cost,  # substitution
            ))
        previous = current
    return previous[-1]


def similarity(a: str, b: str) -> float:
    """1 - distance / max_length; 0.0 when both strings are empty."""
    longest = max(len(a), len(b))
    if longest == 0:
        return 0.0
    return 1.0 - levenshtein_distance(a, b) / longest


def calculate_confidence(normalized_header: str, field: TargetField) -> float:
    """Score a normalized header against one field. 0.0 means no match."""
    if not normalized_header:
        return 0.0
    variations = field.header_variations
    if normalized_header in variations:
        return EXACT_CONFIDENCE

    best_substring = 0.0
    for variation in variations:
        if variation in normalized_header or normalized_header in variation:
            ratio = min(len(variation), len(normalized_header)) / max(
                len(variation), len(normalized_header)
            )
            best_substring = max(best_substring, SUBSTRING_BASE + ratio * SUBSTRING_SPAN)
    if best_substring > 0:
        return best_substring

    best_fuzzy = 0.0
    for variation in variations:
        sim = similarity(normalized_header, variation)
        if sim >= FUZZY_THRESHOLD:
            best_fuzzy = max(best_fuzzy, sim * FUZZY_CAP)
    return best_fuzzy
