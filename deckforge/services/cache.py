"""
Recommendation cache.

In-memory, TTL checked on read, no background timer. Each query type has
its own strategy and lifetime: suggestion lists go stale with every deck
edit, format-wide coverage only with collection or catalog changes.

Concurrent misses on one key share a single computation. The first
caller computes; later callers await the same future.

INVARIANTS:
- A failed computation is never cached. Every waiter sees the failure
  and the next call recomputes.
- A cancelled computation is never cached and only its caller sees the
  cancellation. Waiters on it compute again.
- A computation whose key was invalidated while it ran is returned to
  its waiters but not stored.
- Keys are deterministic: the same subject, format and query shape
  always hash to the same digest.
"""

import asyncio
import hashlib
import json
import logging
import time
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, TypeVar

from deckforge.config import settings
from deckforge.models.failure import CacheComputationError, EvaluationCancelledError, KnownError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CacheStrategy(str, Enum):
    SUGGESTIONS = "suggestions"
    BUILDABLE_DECKS = "buildable_decks"
    FORMAT_COVERAGE = "format_coverage"


def default_ttls() -> dict[CacheStrategy, float]:
    return {
        CacheStrategy.SUGGESTIONS: settings.suggestions_ttl_seconds,
        CacheStrategy.BUILDABLE_DECKS: settings.buildable_decks_ttl_seconds,
        CacheStrategy.FORMAT_COVERAGE: settings.format_coverage_ttl_seconds,
    }


@dataclass(frozen=True, slots=True)
class CacheKey:
    """
    A cache key.

    subjects are the collection and deck ids the value depends on;
    invalidating any of them drops the entry.
    """

    strategy: CacheStrategy
    subjects: tuple[str, ...]
    format: str | None
    digest: str


def make_key(
    strategy: CacheStrategy,
    subjects: tuple[str, ...],
    format_name: str | None,
    **shape: Any,
) -> CacheKey:
    """Build a key from the subjects, the format and the query parameters."""
    payload = {
        "strategy": strategy.value,
        "subjects": list(subjects),
        "format": format_name,
        "shape": shape,
    }
    encoded = json.dumps(payload, sort_keys=True, default=str, separators=(",", ":"))
    digest = hashlib.sha256(encoded.encode()).hexdigest()
    return CacheKey(strategy=strategy, subjects=subjects, format=format_name, digest=digest)


@dataclass(frozen=True, slots=True)
class CacheEntry:
    key: CacheKey
    value: Any
    computed_at: float
    strategy: CacheStrategy


@dataclass(slots=True)
class CacheStats:
    hits: int = 0
    misses: int = 0
    shared: int = 0
    expired: int = 0
    invalidated: int = 0
    failures: int = 0
    retried: int = 0
    size: int = 0
    in_flight: int = 0


class RecommendationCache:
    """
    Per-process recommendation cache.

    Args:
        ttls: Lifetime in seconds per strategy; defaults come from settings
        clock: Monotonic time source, injectable for tests
    """

    def __init__(
        self,
        ttls: Mapping[CacheStrategy, float] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttls = dict(default_ttls())
        if ttls:
            self._ttls.update(ttls)
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._in_flight: dict[str, tuple[CacheKey, asyncio.Future[Any]]] = {}
        self._counters = CacheStats()

    def ttl_for(self, strategy: CacheStrategy) -> float:
        return self._ttls[strategy]

    def _is_fresh(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.computed_at < self._ttls[entry.strategy]

    def get(self, key: CacheKey) -> CacheEntry | None:
        """Fresh entry for the key, or None. A stale entry is dropped on read."""
        entry = self._entries.get(key.digest)
        if entry is None:
            return None
        if not self._is_fresh(entry, self._clock()):
            del self._entries[key.digest]
            self._counters.expired += 1
            return None
        return entry

    def set(self, key: CacheKey, value: Any) -> CacheEntry:
        entry = CacheEntry(
            key=key, value=value, computed_at=self._clock(), strategy=key.strategy
        )
        self._entries[key.digest] = entry
        return entry

    async def get_or_compute(self, key: CacheKey, compute: Callable[[], Awaitable[T]]) -> T:
        """
        Cached value for the key, computing it at most once concurrently.

        A waiter whose shared computation was cancelled by the caller that
        started it runs its own compute instead of seeing that cancellation.

        Raises:
            CacheComputationError: If the computation raised an unexpected error
            KnownError: Known failures from the computation propagate unchanged
        """
        while True:
            entry = self.get(key)
            if entry is not None:
                self._counters.hits += 1
                return entry.value  # type: ignore[no-any-return]

            pending = self._in_flight.get(key.digest)
            if pending is None:
                return await self._lead(key, compute)

            self._counters.shared += 1
            try:
                # Shielded so a cancelled waiter cannot cancel the shared computation
                return await asyncio.shield(pending[1])  # type: ignore[no-any-return]
            except EvaluationCancelledError:
                self._counters.retried += 1
                logger.debug(
                    "CACHE_SHARED_COMPUTATION_CANCELLED",
                    extra={"strategy": key.strategy.value, "digest": key.digest[:12]},
                )

    async def _lead(self, key: CacheKey, compute: Callable[[], Awaitable[T]]) -> T:
        self._counters.misses += 1
        logger.debug(
            "CACHE_MISS",
            extra={"strategy": key.strategy.value, "digest": key.digest[:12]},
        )

        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self._in_flight[key.digest] = (key, future)
        try:
            value = await compute()
        except EvaluationCancelledError as exc:
            # Not a failure: the cancelling caller gets it, waiters recompute
            future.set_exception(exc)
            future.exception()
            raise
        except KnownError as exc:
            self._fail(key, future, exc)
            raise
        except Exception as exc:
            error = CacheComputationError(key.digest, exc)
            self._fail(key, future, error)
            raise error from exc
        except BaseException:
            future.cancel()
            raise
        else:
            if self._owns(key, future):
                self.set(key, value)
            future.set_result(value)
            return value
        finally:
            if self._owns(key, future):
                del self._in_flight[key.digest]

    def _owns(self, key: CacheKey, future: asyncio.Future[Any]) -> bool:
        current = self._in_flight.get(key.digest)
        return current is not None and current[1] is future

    def _fail(self, key: CacheKey, future: asyncio.Future[Any], error: Exception) -> None:
        self._counters.failures += 1
        logger.warning(
            "CACHE_COMPUTATION_FAILED",
            extra={
                "strategy": key.strategy.value,
                "digest": key.digest[:12],
                "error": type(error).__name__,
            },
        )
        future.set_exception(error)
        # Marks the exception retrieved when no other caller was waiting
        future.exception()

    def _drop(self, matches: Callable[[CacheKey], bool]) -> int:
        stale = [digest for digest, entry in self._entries.items() if matches(entry.key)]
        for digest in stale:
            del self._entries[digest]
        # Detached computations still answer their waiters but are not stored
        for digest in [d for d, (key, _) in self._in_flight.items() if matches(key)]:
            del self._in_flight[digest]
        self._counters.invalidated += len(stale)
        return len(stale)

    def invalidate(self, subject_id: str) -> int:
        """Drop every entry that depends on the collection or deck id."""
        removed = self._drop(lambda key: subject_id in key.subjects)
        logger.info(
            "CACHE_INVALIDATED",
            extra={"subject_id": subject_id, "removed": removed},
        )
        return removed

    def invalidate_format(self, format_name: str) -> int:
        removed = self._drop(lambda key: key.format == format_name)
        logger.info(
            "CACHE_FORMAT_INVALIDATED",
            extra={"format": format_name, "removed": removed},
        )
        return removed

    def sweep(self) -> int:
        """Remove every expired entry. Returns how many were removed."""
        now = self._clock()
        expired = [d for d, entry in self._entries.items() if not self._is_fresh(entry, now)]
        for digest in expired:
            del self._entries[digest]
        self._counters.expired += len(expired)
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()

    def stats(self) -> CacheStats:
        return replace(self._counters, size=len(self._entries), in_flight=len(self._in_flight))

    def __len__(self) -> int:
        return len(self._entries)

