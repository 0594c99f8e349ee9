"""
Cache for the pipeline configuration snapshot.

Banned words, corrections and the auto-merge toggle live in the database and
change rarely; the request handler keeps the last snapshot for a short time
and drops it whenever an administrator edits one of them.
"""
import logging
import time
from typing import Any, Callable, Dict, Optional

from sondage.services.answer_pipeline import PipelineConfig

logger = logging.getLogger(__name__)


class ConfigCache:
    """
    Time-bounded holder for a single PipelineConfig.
    
    Attributes:
        ttl: Time-to-live of the snapshot in seconds
    """
    
    def __init__(self, ttl: float = 30, clock: Callable[[], float] = time.monotonic) -> None:
        """
        Initialize the config cache.
        
        Args:
            ttl: Time-to-live of the snapshot in seconds
            clock: Time source, monotonic seconds
        """
        self.ttl = ttl
        self._clock = clock
        self._snapshot: Optional[PipelineConfig] = None
        self._loaded_at = 0.0
        logger.info(f"Initialized ConfigCache with ttl={ttl}")
    
    def get(self, loader: Callable[[], PipelineConfig]) -> PipelineConfig:
        """
        Return the cached snapshot, reloading it when missing or expired.
        
        Args:
            loader: Builds a fresh snapshot, typically from the database
            
        Returns:
            PipelineConfig: Current configuration snapshot
        """
        now = self._clock()
        if self._snapshot is not None and now - self._loaded_at < self.ttl:
            return self._snapshot
        
        self._snapshot = loader()
        self._loaded_at = now
        logger.info(
            f"Reloaded pipeline config: {len(self._snapshot.banned_words)} banned words, "
            f"{len(self._snapshot.corrections)} corrections, auto_merge={self._snapshot.auto_merge}"
        )
        return self._snapshot
    
    def invalidate(self) -> None:
        """
        Drop the cached snapshot so the next get() reloads it.
        """
        self._snapshot = None
        logger.info("Pipeline config cache invalidated")
    
    def health_check(self) -> Dict[str, Any]:
        """
        Check the status of the cache.
        
        Returns:
            Dict[str, Any]: Status information
        """
        age = self._clock() - self._loaded_at if self._snapshot is not None else None
        return {
            'status': 'ok',
            'loaded': self._snapshot is not None,
            'age': age,
            'ttl': self.ttl
        }
