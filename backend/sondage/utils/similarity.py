"""
Similarity calculation utilities for the sondage application.

This module provides the edit distance used to compare survey answers and
the two matching rules built on top of it: a permissive one for export
clustering and a stricter one for live deduplication.
"""
import math
import logging
from typing import Any, Dict, List, Optional

from .text_processing import normalize_deep

# Setup logging
logger = logging.getLogger(__name__)

# Live dedup accepts at most this edit distance per character of the longer key
DEDUP_MAX_DISTANCE_RATIO = 0.2

# Export clustering tolerance, see are_similar
CLUSTER_SHORT_LENGTH = 5
CLUSTER_SHORT_MAX_DISTANCE = 1
CLUSTER_MAX_DISTANCE_RATIO = 0.3


def levenshtein(a: str, b: str) -> int:
    """
    Calculate the Levenshtein edit distance between two strings.

    Insertions, deletions and substitutions all cost one. A single row of the
    dynamic-programming table is kept, sized on the shorter string.

    Args:
        a: First string
        b: Second string

    Returns:
        int: Minimum number of edits turning ``a`` into ``b``
    """
    if not a:
        return len(b)
    if not b:
        return len(a)

    if len(a) < len(b):
        a, b = b, a

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            cost = 0 if char_a == char_b else 1
            current.append(min(
                previous[j] + 1,
                current[j - 1] + 1,
                previous[j - 1] + cost,
            ))
        previous = current

    return previous[-1]


def _is_prefix_pair(key_a: str, key_b: str) -> bool:
    if not key_a or not key_b:
        return False
    return key_a.startswith(key_b) or key_b.startswith(key_a)


def are_similar(a: str, b: str) -> bool:
    """
    Decide whether two answers belong in the same export cluster.

    Both answers are deep-normalized. Equal keys, or one non-empty key being
    a prefix of the other, are similar. Otherwise the edit distance may be at
    most 1 for keys of up to 5 characters, and at most 30% of the longer key
    beyond.

    Args:
        a: First answer
        b: Second answer

    Returns:
        bool: True if the answers should be clustered together
    """
    key_a = normalize_deep(a)
    key_b = normalize_deep(b)

    if key_a == key_b:
        return True
    if _is_prefix_pair(key_a, key_b):
        return True

    max_len = max(len(key_a), len(key_b))
    distance = levenshtein(key_a, key_b)
    if max_len <= CLUSTER_SHORT_LENGTH:
        return distance <= CLUSTER_SHORT_MAX_DISTANCE
    return distance <= math.floor(CLUSTER_MAX_DISTANCE_RATIO * max_len)


def find_matching_answer(new_text: str, existing: List[Dict[str, Any]]) -> Optional[str]:
    """
    Find the stored answer a new answer should be merged into.

    Candidates are tried from the most to the least frequent; the input is
    re-sorted by count (stable) so the order does not depend on the caller.
    The first candidate whose deep key equals, prefixes or is prefixed by the
    new key, or lies within 20% normalized edit distance, wins. An empty deep
    key (punctuation-only text) is never treated as a prefix of another key.

    Args:
        new_text: Normalized answer being submitted
        existing: Stored answers for the question, as ``{"text", "count"}`` dicts

    Returns:
        Optional[str]: Text of the matching stored answer, or None if the
        answer is new
    """
    new_key = normalize_deep(new_text)
    candidates = sorted(existing, key=lambda item: item["count"], reverse=True)

    for candidate in candidates:
        key = normalize_deep(candidate["text"])
        if key == new_key or _is_prefix_pair(key, new_key):
            logger.debug(f"'{new_text}' matches '{candidate['text']}' by key")
            return candidate["text"]

        max_len = max(len(key), len(new_key))
        if max_len > 0 and levenshtein(key, new_key) / max_len <= DEDUP_MAX_DISTANCE_RATIO:
            logger.debug(f"'{new_text}' matches '{candidate['text']}' by edit distance")
            return candidate["text"]

    return None
