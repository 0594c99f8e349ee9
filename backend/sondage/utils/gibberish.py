"""
Gibberish detection for survey answers.

Rule-based filter flagging keyboard mashes, character spam and strings with
no plausible word shape. It is a heuristic: some false positives and false
negatives are accepted.
"""
import re
import logging
from collections import Counter

logger = logging.getLogger(__name__)

VOWELS = "aeiouyàáâãäåæèéêëìíîïòóôõöøœùúûüýÿ"
CONSONANTS = "bcdfghjklmnpqrstvwxz"

_SEPARATORS_RE = re.compile(r"[\s'’-]+")
_SINGLE_CHAR_RE = re.compile(r"^(.)\1+$")
_VOWEL_RE = re.compile(f"[{VOWELS}]")
_CONSONANT_RUN_RE = re.compile(f"[{CONSONANTS}]{{5,}}")
_REPEATED_CONSONANT_RE = re.compile(f"([{CONSONANTS}])\\1\\1")
_REPEATED_VOWEL_RE = re.compile(f"([{VOWELS}])\\1\\1")
_LEADING_PATTERN_RE = re.compile(r"^(.{1,3})\1{2,}")


def _tighten(text: str) -> str:
    return _SEPARATORS_RE.sub("", text.lower())


def is_gibberish(normalized: str) -> bool:
    """
    Decide whether a light-normalized answer looks like noise.

    Whitespace, apostrophes and hyphens are removed first; the remaining
    "tight" string is rejected when any of the following holds: fewer than
    three characters, a single repeated character, no vowel, five consonants
    in a row, the same consonant or vowel three times in a row, one character
    making up more than half of a 5+ character string, a leading 1-3
    character pattern repeated three times, or fewer distinct characters than
    a third of a 9+ character string.

    Args:
        normalized: Light-normalized answer text

    Returns:
        bool: True if the answer should be rejected as gibberish
    """
    tight = _tighten(normalized)
    length = len(tight)

    if length < 3:
        return True
    if _SINGLE_CHAR_RE.match(tight):
        return True
    if not _VOWEL_RE.search(tight):
        return True
    if _CONSONANT_RUN_RE.search(tight):
        return True
    if _REPEATED_CONSONANT_RE.search(tight):
        return True
    if _REPEATED_VOWEL_RE.search(tight):
        return True
    if _LEADING_PATTERN_RE.match(tight):
        return True

    if length >= 5:
        most_common = Counter(tight).most_common(1)[0][1]
        if most_common > length * 0.5:
            return True

    # Low lexical diversity
    if length > 8 and len(set(tight)) <= length / 3:
        return True

    return False
