"""
Text processing utilities for the sondage application.

This module provides the two normalization strengths used on survey answers:
a light normalization producing the text that gets stored, and a deep
normalization producing a comparison key that is never stored.
"""
import re
import logging
import unicodedata

# Setup logging
logger = logging.getLogger(__name__)

# Pictographs, dingbats, flags, keycaps and the joiner/variation marks that glue them
_EMOJI_RE = re.compile(
    "["
    "\U0001F000-\U0001FAFF"
    "\U00002600-\U000027BF"
    "\U00002B00-\U00002BFF"
    "\U0001F1E6-\U0001F1FF"
    "\U000020E3"
    "\U0000200D"
    "\U0000FE00-\U0000FE0F"
    "\U000E0020-\U000E007F"
    "]+"
)

# Letters (ASCII + Latin-1 accented), digits, whitespace, apostrophes, hyphen
_DISALLOWED_RE = re.compile(r"[^a-z0-9ß-öø-ÿœæ\s'’-]")

_WHITESPACE_RE = re.compile(r"\s+")

# Longest first so "de la " wins over "de l'"
LEADING_ARTICLES = (
    "de la ",
    "de l'",
    "de l’",
    "des ",
    "du ",
    "les ",
    "le ",
    "la ",
    "l'",
    "l’",
    "une ",
    "un ",
)

TRAILING_LAUGHS = (
    "ptdr",
    "haha",
    "lol",
    "mdr",
    "xd",
)

_TRAILING_LAUGH_RE = re.compile(
    r"(?:^|\s+)(?:" + "|".join(re.escape(t) for t in TRAILING_LAUGHS) + r")$",
    re.IGNORECASE,
)

_RUN_RE = re.compile(r"(.)\1+")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")


def strip_leading_article(text: str) -> str:
    """
    Remove one leading French article from already lowercased text.

    Args:
        text: Lowercased, trimmed text

    Returns:
        str: Text without its first article token
    """
    lowered = text.lower()
    for article in LEADING_ARTICLES:
        if lowered.startswith(article):
            return text[len(article):].strip()
    return text


def strip_trailing_laugh(text: str) -> str:
    """
    Remove one trailing laughter/filler token ("lol", "mdr", ...).

    Args:
        text: Lowercased, trimmed text

    Returns:
        str: Text without its last laughter token
    """
    return _TRAILING_LAUGH_RE.sub("", text, count=1).strip()


def normalize_light(raw: str) -> str:
    """
    Normalize raw survey input into the canonical form that gets stored.

    Lowercases, removes emoji and every character outside the allowed set,
    collapses whitespace, then strips a single leading article and a single
    trailing laughter token.

    Args:
        raw: Text as typed by the participant

    Returns:
        str: Normalized text, possibly empty
    """
    if not raw:
        return ""

    text = raw.lower()
    text = _EMOJI_RE.sub("", text)
    text = _DISALLOWED_RE.sub("", text)
    text = _WHITESPACE_RE.sub(" ", text).strip()

    text = strip_leading_article(text)
    text = strip_trailing_laugh(text)

    return text


def normalize_deep(text: str) -> str:
    """
    Build the comparison key for a piece of text.

    Accents are decomposed and their combining marks dropped, then anything
    that is not an ASCII letter or digit is removed, then runs of the same
    character are flattened ("coooca" -> "coca"). The order matters: the
    flattening must come last.

    Args:
        text: Text to reduce, usually already light-normalized

    Returns:
        str: Comparison key
    """
    if not text:
        return ""

    key = unicodedata.normalize("NFD", text.lower())
    key = "".join(ch for ch in key if not unicodedata.combining(ch))
    key = _NON_ALNUM_RE.sub("", key)
    key = _RUN_RE.sub(r"\1", key)

    return key
