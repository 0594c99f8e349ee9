"""
Answer pipeline for survey submissions.

This module chains the cleaning steps applied to a submitted answer:
normalization, length check, banned words, gibberish detection, corrections
and live deduplication against the answers already stored for the question.
Rejections are returned as values, never raised.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple

from sondage.utils.filters import Correction, apply_corrections, contains_banned_word
from sondage.utils.gibberish import is_gibberish
from sondage.utils.similarity import find_matching_answer
from sondage.utils.text_processing import normalize_light

logger = logging.getLogger(__name__)

MIN_ANSWER_LENGTH = 2
MAX_ANSWER_LENGTH = 50
RAW_MAX_ANSWER_LENGTH = 200


class RejectionReason(str, Enum):
    """
    Reasons an answer can be turned down.
    """
    EMPTY_OR_OVERSIZE = "empty_or_oversize"
    GIBBERISH = "gibberish"
    BANNED = "banned"
    QUESTION_FULL = "question_full"


@dataclass(frozen=True)
class PipelineConfig:
    """
    Snapshot of the editable configuration consulted by the pipeline.

    Attributes:
        banned_words: Lowercase banned words or fragments
        corrections: Ordered correction rules
        auto_merge: Whether new answers are merged into similar stored ones
        min_length: Shortest accepted normalized answer
        max_length: Longest accepted normalized answer
        raw_max_length: Longest accepted raw input, before normalization
    """
    banned_words: FrozenSet[str] = frozenset()
    corrections: Tuple[Correction, ...] = ()
    auto_merge: bool = True
    min_length: int = MIN_ANSWER_LENGTH
    max_length: int = MAX_ANSWER_LENGTH
    raw_max_length: int = RAW_MAX_ANSWER_LENGTH

    @classmethod
    def build(
        cls,
        banned_words: Iterable[str] = (),
        corrections: Iterable[Tuple[str, str]] = (),
        auto_merge: bool = True,
        **kwargs: Any,
    ) -> "PipelineConfig":
        """
        Build a snapshot from plain lists, dropping blank entries.

        Banned words and both sides of every correction are lowercased, so
        corrected answers stay lowercase like the rest of the stored text.

        Args:
            banned_words: Banned words in any case
            corrections: ``(wrong, correct)`` pairs in application order
            auto_merge: Live deduplication toggle
            **kwargs: Length bounds

        Returns:
            PipelineConfig: Immutable configuration snapshot
        """
        words = frozenset(w.strip().lower() for w in banned_words if w and w.strip())
        rules = tuple(
            Correction(wrong.strip().lower(), correct.strip().lower())
            for wrong, correct in corrections
            if wrong and wrong.strip()
        )
        return cls(banned_words=words, corrections=rules, auto_merge=auto_merge, **kwargs)


@dataclass(frozen=True)
class AnswerOutcome:
    """
    Result of running an answer through the pipeline.

    Attributes:
        text: Text to persist when accepted
        reason: Why the answer was rejected, None when accepted
        merged_from: The corrected text when it was folded into an existing answer
    """
    text: Optional[str] = None
    reason: Optional[RejectionReason] = None
    merged_from: Optional[str] = None

    @property
    def accepted(self) -> bool:
        return self.reason is None

    @property
    def merged(self) -> bool:
        return self.merged_from is not None

    @classmethod
    def accept(cls, text: str, merged_from: Optional[str] = None) -> "AnswerOutcome":
        return cls(text=text, merged_from=merged_from)

    @classmethod
    def reject(cls, reason: RejectionReason) -> "AnswerOutcome":
        return cls(reason=reason)


def _length_ok(text: str, config: PipelineConfig) -> bool:
    return config.min_length <= len(text) <= config.max_length


def deduplicate_answer(text: str, existing: List[Dict[str, Any]]) -> Tuple[str, bool]:
    """
    Map a cleaned answer onto a stored one when they are near-duplicates.

    Args:
        text: Cleaned answer
        existing: Stored answers for the question as ``{"text", "count"}`` dicts

    Returns:
        Tuple[str, bool]: Text to persist and whether it was merged
    """
    match = find_matching_answer(text, existing)
    if match is None or match == text:
        return text, False
    logger.info(f"Merging answer '{text}' into existing '{match}'")
    return match, True


def process_answer(
    raw_text: str,
    config: PipelineConfig,
    existing: Optional[List[Dict[str, Any]]] = None,
    question_full: bool = False,
) -> AnswerOutcome:
    """
    Run a submitted answer through the cleaning pipeline.

    Steps, in order: raw length check, light normalization and length
    check, banned words, gibberish, corrections (followed by a second length
    check), then live deduplication when ``config.auto_merge`` is on.

    Args:
        raw_text: Answer as typed by the participant
        config: Configuration snapshot owned by the caller
        existing: Snapshot of the stored answers for the question
        question_full: Set by the caller when the answer cap is reached; the
            answer is then rejected without being processed

    Returns:
        AnswerOutcome: Accepted text or rejection reason
    """
    if question_full:
        return AnswerOutcome.reject(RejectionReason.QUESTION_FULL)

    if raw_text and len(raw_text) > config.raw_max_length:
        logger.info(f"Rejected raw answer of length {len(raw_text)}: {RejectionReason.EMPTY_OR_OVERSIZE.value}")
        return AnswerOutcome.reject(RejectionReason.EMPTY_OR_OVERSIZE)

    text = normalize_light(raw_text)
    if not _length_ok(text, config):
        logger.info(f"Rejected answer of length {len(text)}: {RejectionReason.EMPTY_OR_OVERSIZE.value}")
        return AnswerOutcome.reject(RejectionReason.EMPTY_OR_OVERSIZE)

    if contains_banned_word(text, config.banned_words):
        logger.info(f"Rejected answer '{text}': {RejectionReason.BANNED.value}")
        return AnswerOutcome.reject(RejectionReason.BANNED)

    if is_gibberish(text):
        logger.info(f"Rejected answer '{text}': {RejectionReason.GIBBERISH.value}")
        return AnswerOutcome.reject(RejectionReason.GIBBERISH)

    text = apply_corrections(text, config.corrections)
    if not _length_ok(text, config):
        logger.info(f"Rejected corrected answer of length {len(text)}: {RejectionReason.EMPTY_OR_OVERSIZE.value}")
        return AnswerOutcome.reject(RejectionReason.EMPTY_OR_OVERSIZE)

    if config.auto_merge and existing:
        stored, merged = deduplicate_answer(text, existing)
        if merged:
            return AnswerOutcome.accept(stored, merged_from=text)

    return AnswerOutcome.accept(text)
