"""
Banned-word and correction filters for survey answers.

Both filters work on light-normalized text and take their word lists from the
caller, so an empty list simply disables the rule.
"""
import re
import logging
from typing import Iterable, NamedTuple

logger = logging.getLogger(__name__)


class Correction(NamedTuple):
    """A rewrite rule: occurrences of ``wrong`` become ``correct``."""
    wrong: str
    correct: str


def contains_banned_word(normalized: str, banned: Iterable[str]) -> bool:
    """
    Check a normalized answer against the banned-word list.

    Matches on equality or plain substring containment, so a short banned word
    also matches inside longer unrelated words.

    Args:
        normalized: Light-normalized answer text
        banned: Banned words, stored lowercase

    Returns:
        bool: True if any banned word is found
    """
    text = normalized.lower()
    for word in banned:
        word = word.lower().strip()
        if not word:
            continue
        if text == word or word in text:
            logger.debug(f"Banned word '{word}' found in '{normalized}'")
            return True
    return False


def apply_corrections(normalized: str, corrections: Iterable[Correction]) -> str:
    """
    Apply the correction rules in order.

    A rule whose ``wrong`` equals the whole text replaces it outright;
    otherwise every case-insensitive occurrence is substituted. Each rule
    sees the output of the previous one.

    Args:
        normalized: Light-normalized answer text
        corrections: Ordered correction rules

    Returns:
        str: Corrected, trimmed text
    """
    text = normalized
    for wrong, correct in corrections:
        wrong = wrong.strip()
        if not wrong:
            continue
        if text.lower() == wrong.lower():
            text = correct
        else:
            text = re.sub(re.escape(wrong), lambda _: correct, text, flags=re.IGNORECASE)
    return text.strip()
