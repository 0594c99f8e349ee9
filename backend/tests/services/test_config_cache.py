"""
Tests for the pipeline configuration cache.
"""
from typing import List

import pytest

from sondage.services.answer_pipeline import PipelineConfig
from sondage.services.config_cache import ConfigCache


class FakeClock:
    """Manually advanced time source."""

    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def loads() -> List[PipelineConfig]:
    return []


@pytest.fixture
def loader(loads: List[PipelineConfig]):
    """
    Loader that records every call.
    
    Returns:
        Callable: Builds a new snapshot per call
    """
    def _load() -> PipelineConfig:
        config = PipelineConfig.build(banned_words=[f"word{len(loads)}"])
        loads.append(config)
        return config
    return _load


def test_get_caches_within_ttl(clock: FakeClock, loader, loads: List[PipelineConfig]) -> None:
    """Test that the loader runs once while the snapshot is fresh."""
    cache = ConfigCache(ttl=30, clock=clock)
    first = cache.get(loader)
    clock.now += 29
    assert cache.get(loader) is first
    assert len(loads) == 1


def test_get_reloads_after_ttl(clock: FakeClock, loader, loads: List[PipelineConfig]) -> None:
    """Test that an expired snapshot is rebuilt."""
    cache = ConfigCache(ttl=30, clock=clock)
    first = cache.get(loader)
    clock.now += 30
    second = cache.get(loader)
    assert second is not first
    assert second.banned_words == frozenset({"word1"})
    assert len(loads) == 2


def test_invalidate_forces_reload(clock: FakeClock, loader, loads: List[PipelineConfig]) -> None:
    """Test that invalidation drops the snapshot immediately."""
    cache = ConfigCache(ttl=30, clock=clock)
    cache.get(loader)
    cache.invalidate()
    cache.get(loader)
    assert len(loads) == 2


def test_health_check(clock: FakeClock, loader) -> None:
    """Test the reported cache status."""
    cache = ConfigCache(ttl=30, clock=clock)
    assert cache.health_check() == {"status": "ok", "loaded": False, "age": None, "ttl": 30}

    cache.get(loader)
    clock.now += 5
    status = cache.health_check()
    assert status["loaded"] is True
    assert status["age"] == 5
