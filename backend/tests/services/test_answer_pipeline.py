"""
Tests for the answer pipeline module.

This module covers the order of the cleaning steps, each rejection reason,
corrections and live deduplication.
"""
from typing import Any, Dict, List

import pytest

from sondage.services.answer_pipeline import (
    AnswerOutcome,
    PipelineConfig,
    RejectionReason,
    deduplicate_answer,
    process_answer,
)

LONG_BASE = "pizza quatre fromages avec olives et champignons"


@pytest.fixture
def config() -> PipelineConfig:
    """
    Configuration close to the seeded one.
    
    Returns:
        PipelineConfig: Snapshot with a few banned words and corrections
    """
    return PipelineConfig.build(
        banned_words=["jsp", "Caca", "  "],
        corrections=[("fesbook", "facebook"), ("face book", "facebook"), ("", "x")],
    )


@pytest.fixture
def existing() -> List[Dict[str, Any]]:
    """
    Stored answers for a question.
    
    Returns:
        List[Dict[str, Any]]: Answers with their counts
    """
    return [
        {"text": "mcdo", "count": 12},
        {"text": "pizza", "count": 4},
    ]


def test_build_drops_blank_entries(config: PipelineConfig) -> None:
    """Test that the snapshot builder lowercases and drops blanks."""
    assert config.banned_words == frozenset({"jsp", "caca"})
    assert [c.wrong for c in config.corrections] == ["fesbook", "face book"]
    assert config.auto_merge is True


def test_accepts_and_normalizes(config: PipelineConfig) -> None:
    """Test the happy path."""
    outcome = process_answer("  Le Kebab!! ", config)
    assert outcome == AnswerOutcome.accept("kebab")
    assert outcome.accepted
    assert not outcome.merged


def test_banned_takes_precedence_over_gibberish(config: PipelineConfig) -> None:
    """Test that a banned answer is reported as banned even if it looks like noise."""
    outcome = process_answer("  JSP lol!! 😂", config)
    assert outcome.reason == RejectionReason.BANNED
    assert not outcome.accepted


def test_banned_substring(config: PipelineConfig) -> None:
    """Test that banned words match inside the answer."""
    assert process_answer("Caca boudin", config).reason == RejectionReason.BANNED


@pytest.mark.parametrize("raw", ["", "   ", "😂", "!!", "a", "mdr", "le lol"])
def test_rejects_empty_answers(config: PipelineConfig, raw: str) -> None:
    """Test that answers normalizing to fewer than two characters are rejected."""
    assert process_answer(raw, config).reason == RejectionReason.EMPTY_OR_OVERSIZE


def test_length_boundaries(config: PipelineConfig) -> None:
    """Test the maximum length on the normalized text."""
    assert len(LONG_BASE) == 48
    assert process_answer(LONG_BASE + " a", config).text == LONG_BASE + " a"
    assert process_answer(LONG_BASE + " ab", config).reason == RejectionReason.EMPTY_OR_OVERSIZE
    # Emoji and punctuation do not count
    assert process_answer(LONG_BASE + " a 😂😂😂!!!", config).accepted


def test_rejects_gibberish(config: PipelineConfig) -> None:
    """Test that keyboard noise is rejected."""
    assert process_answer("qsdfgh", config).reason == RejectionReason.GIBBERISH
    assert process_answer("aaaaaa", config).reason == RejectionReason.GIBBERISH


def test_applies_corrections(config: PipelineConfig) -> None:
    """Test exact and substring corrections."""
    assert process_answer("Fesbook", config).text == "facebook"
    assert process_answer("mon fesbook", config).text == "mon facebook"
    assert process_answer("Face Book", config).text == "facebook"


def test_corrections_can_shrink_answer_below_minimum() -> None:
    """Test that the length is checked again after corrections."""
    config = PipelineConfig.build(corrections=[("pizza", "")])
    assert process_answer("pizza", config).reason == RejectionReason.EMPTY_OR_OVERSIZE


def test_question_full_short_circuits(config: PipelineConfig) -> None:
    """Test that a full question rejects even a valid answer."""
    outcome = process_answer("pizza", config, question_full=True)
    assert outcome.reason == RejectionReason.QUESTION_FULL
    assert outcome.text is None


def test_merges_into_existing(config: PipelineConfig, existing: List[Dict[str, Any]]) -> None:
    """Test live deduplication against stored answers."""
    outcome = process_answer("Macdo", config, existing)
    assert outcome.text == "mcdo"
    assert outcome.merged
    assert outcome.merged_from == "macdo"


def test_exact_match_is_not_a_merge(config: PipelineConfig, existing: List[Dict[str, Any]]) -> None:
    """Test that an identical answer is stored without the merged flag."""
    outcome = process_answer("Pizza", config, existing)
    assert outcome.text == "pizza"
    assert not outcome.merged


def test_no_merge_when_disabled(existing: List[Dict[str, Any]]) -> None:
    """Test that auto-merge off keeps the answer as corrected."""
    config = PipelineConfig.build(auto_merge=False)
    outcome = process_answer("macdo", config, existing)
    assert outcome.text == "macdo"
    assert not outcome.merged


def test_no_merge_without_close_answer(config: PipelineConfig, existing: List[Dict[str, Any]]) -> None:
    """Test that distinct answers stay distinct."""
    outcome = process_answer("sushi", config, existing)
    assert outcome.text == "sushi"
    assert not outcome.merged


def test_deduplicate_answer() -> None:
    """Test the deduplication helper directly."""
    existing = [{"text": "chocolat", "count": 2}]
    assert deduplicate_answer("chocolaf", existing) == ("chocolat", True)
    assert deduplicate_answer("chocolat", existing) == ("chocolat", False)
    assert deduplicate_answer("vanille", existing) == ("vanille", False)
    assert deduplicate_answer("vanille", []) == ("vanille", False)


def test_custom_length_bounds() -> None:
    """Test that the length bounds come from the snapshot."""
    config = PipelineConfig.build(min_length=4, max_length=6)
    assert process_answer("kfc", config).reason == RejectionReason.EMPTY_OR_OVERSIZE
    assert process_answer("kebab", config).accepted
    assert process_answer("raclette", config).reason == RejectionReason.EMPTY_OR_OVERSIZE


def test_rejects_oversize_raw_input(config: PipelineConfig) -> None:
    """Test that raw input over the raw limit is rejected before normalization."""
    assert process_answer("😂" * 198 + "pizza", config).reason == RejectionReason.EMPTY_OR_OVERSIZE
    assert process_answer("😂" * 195 + "pizza", config).text == "pizza"


def test_corrections_keep_answers_lowercase() -> None:
    """Test that a mixed-case correction target is stored lowercase."""
    config = PipelineConfig.build(corrections=[("insta", "Instagram")])
    assert config.corrections[0].correct == "instagram"
    assert process_answer("insta", config).text == "instagram"
    assert process_answer("mon insta", config).text == "mon instagram"
