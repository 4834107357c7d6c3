"""
Tag-scoped cache for content reads.

Entries are keyed by an opaque string and labelled with tags. Writers bust
every tag their change touches; there is no dependency tracking, so a write
that forgets a tag leaves stale reads behind.
"""
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Optional, Set, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

LOCALES_CACHE_TAG = "locales"
GALLERIES_CACHE_TAG = "galleries"


def page_cache_tag(slug: str, locale: str) -> str:
    return f"page:{slug}:{locale}"


def all_pages_cache_tag() -> str:
    return "pages:all"


def settings_cache_tag(locale: str) -> str:
    return f"settings:{locale}"


def all_settings_cache_tag() -> str:
    return "settings:all"


def partners_cache_tag(locale: str) -> str:
    return f"partners:{locale}"


def all_partners_cache_tag() -> str:
    return "partners:all"


@dataclass(frozen=True)
class CacheEntry:
    value: Any
    tags: Tuple[str, ...]
    expires_at: Optional[float]


class TaggedCache:
    """
    In-process get-or-compute cache with tag invalidation.

    ``enabled=False`` turns every call into a straight ``compute()`` so edits
    are visible at once during development. ``revalidate=None`` keeps an
    entry until one of its tags is invalidated; a number of seconds lets it
    expire on its own as well.
    """

    def __init__(self, enabled: bool = True, clock: Callable[[], float] = time.monotonic):
        self.enabled = enabled
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._tag_versions: Dict[str, int] = {}
        self._lock = threading.Lock()

    def cached(
        self,
        key: str,
        tags: Iterable[str],
        compute: Callable[[], T],
        revalidate: Optional[float] = None,
    ) -> T:
        if not self.enabled:
            return compute()

        tags = tuple(tags)
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and (
                entry.expires_at is None or entry.expires_at > self._clock()
            ):
                return entry.value
            versions = self._versions(tags)

        logger.debug("Cache miss for %s", key)
        value = compute()

        with self._lock:
            # an invalidation that raced the compute wins; hand the value out
            # but do not keep it
            if self._versions(tags) == versions:
                expires_at = None if revalidate is None else self._clock() + revalidate
                self._entries[key] = CacheEntry(value, tags, expires_at)
        return value

    def invalidate_tags(self, *tags: str) -> int:
        """Drop every entry labelled with any of ``tags``; returns how many went."""
        wanted: Set[str] = set(tags)
        with self._lock:
            for tag in wanted:
                self._tag_versions[tag] = self._tag_versions.get(tag, 0) + 1
            stale = [key for key, entry in self._entries.items() if wanted.intersection(entry.tags)]
            for key in stale:
                del self._entries[key]
        logger.info("Invalidated cache tags %s (%d entries)", sorted(wanted), len(stale))
        return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _versions(self, tags: Tuple[str, ...]) -> Tuple[int, ...]:
        return tuple(self._tag_versions.get(tag, 0) for tag in tags)
