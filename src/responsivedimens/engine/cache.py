"""
Dimension Cache
===============
Two-tier memo for the engine.

Tiers:
    base:  (device type, UI mode, width, height, smallest width, base value,
           override fingerprint) -> resolved base value
    final: (strategy, screen type, base orientation, width, height, resolved
           base, params fingerprint, density, multi-window, container) -> value

Entries have no TTL. Both tiers are dropped as soon as the engine sees a
different raw width/height. Disabling a tier clears it.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
import threading
from typing import Dict, Hashable, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass
class CacheStats:
    base_hits: int = 0
    base_misses: int = 0
    final_hits: int = 0
    final_misses: int = 0
    invalidations: int = 0

    @property
    def hits(self) -> int:
        return self.base_hits + self.final_hits

    @property
    def misses(self) -> int:
        return self.base_misses + self.final_misses

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total else 0.0


class DimensionCache:
    """Unsynchronized cache for single-threaded (UI thread) use."""

    def __init__(self, base_enabled: bool = True, final_enabled: bool = True) -> None:
        self._base: Dict[Hashable, float] = {}
        self._final: Dict[Hashable, float] = {}
        self._base_enabled = base_enabled
        self._final_enabled = final_enabled
        self._screen: Optional[Tuple[float, float]] = None
        self.stats = CacheStats()

    @property
    def base_enabled(self) -> bool:
        return self._base_enabled

    @property
    def final_enabled(self) -> bool:
        return self._final_enabled

    def set_base_enabled(self, enabled: bool) -> None:
        self._base_enabled = enabled
        if not enabled:
            self._base.clear()

    def set_final_enabled(self, enabled: bool) -> None:
        self._final_enabled = enabled
        if not enabled:
            self._final.clear()

    def observe_screen(self, width: float, height: float) -> bool:
        """Record the current raw screen size. Returns True if the cache was invalidated."""
        screen = (width, height)
        if self._screen is not None and self._screen != screen:
            logger.debug(f"Screen changed {self._screen} -> {screen}; invalidating cache")
            self._base.clear()
            self._final.clear()
            self.stats.invalidations += 1
            self._screen = screen
            return True
        self._screen = screen
        return False

    def get_base(self, key: Hashable) -> Optional[float]:
        if not self._base_enabled:
            return None
        value = self._base.get(key)
        if value is None:
            self.stats.base_misses += 1
        else:
            self.stats.base_hits += 1
        return value

    def put_base(self, key: Hashable, value: float) -> None:
        if self._base_enabled:
            self._base[key] = value

    def get_final(self, key: Hashable) -> Optional[float]:
        if not self._final_enabled:
            return None
        value = self._final.get(key)
        if value is None:
            self.stats.final_misses += 1
        else:
            self.stats.final_hits += 1
        return value

    def put_final(self, key: Hashable, value: float) -> None:
        if self._final_enabled:
            self._final[key] = value

    def clear(self) -> None:
        self._base.clear()
        self._final.clear()
        self._screen = None

    def sizes(self) -> Tuple[int, int]:
        return len(self._base), len(self._final)


class ThreadSafeDimensionCache(DimensionCache):
    """`DimensionCache` guarded by a re-entrant lock, for hosts that pre-warm from worker threads."""

    def __init__(self, base_enabled: bool = True, final_enabled: bool = True) -> None:
        super().__init__(base_enabled, final_enabled)
        self._lock = threading.RLock()

    def set_base_enabled(self, enabled: bool) -> None:
        with self._lock:
            super().set_base_enabled(enabled)

    def set_final_enabled(self, enabled: bool) -> None:
        with self._lock:
            super().set_final_enabled(enabled)

    def observe_screen(self, width: float, height: float) -> bool:
        with self._lock:
            return super().observe_screen(width, height)

    def get_base(self, key: Hashable) -> Optional[float]:
        with self._lock:
            return super().get_base(key)

    def put_base(self, key: Hashable, value: float) -> None:
        with self._lock:
            super().put_base(key, value)

    def get_final(self, key: Hashable) -> Optional[float]:
        with self._lock:
            return super().get_final(key)

    def put_final(self, key: Hashable, value: float) -> None:
        with self._lock:
            super().put_final(key, value)

    def clear(self) -> None:
        with self._lock:
            super().clear()

    def sizes(self) -> Tuple[int, int]:
        with self._lock:
            return super().sizes()
