from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from typing import Callable, Optional, Pattern

from questmap.domain.usecase.ports import MediaStore

DEFAULT_IMAGE_PATTERN = re.compile(
    r"(?:^|/)default_(?P<index>\d+)\.(?:jpe?g|png|webp)$", re.IGNORECASE
)


@dataclass(frozen=True, slots=True)
class _CacheEntry:
    keys: tuple[str, ...]
    fetched_at: float


def _sort_key(pattern: Pattern[str], key: str) -> tuple[int, str]:
    match = pattern.search(key)
    index = match.groupdict().get("index") if match else None
    return int(index or 0), key


class DefaultImageDirectory:
    """Lists the fallback images under one prefix, caching the listing for a TTL.

    No lock is taken: concurrent refreshes list the same prefix and store the
    same result.
    """

    def __init__(
        self,
        *,
        media_store: MediaStore,
        prefix: str = "defaults/",
        ttl_seconds: float = 300,
        pattern: Pattern[str] = DEFAULT_IMAGE_PATTERN,
        clock: Callable[[], float] = time.monotonic,
        logger: logging.Logger | None = None,
    ) -> None:
        self._store = media_store
        self._prefix = prefix
        self._ttl = ttl_seconds
        self._pattern = pattern
        self._clock = clock
        self._entry: Optional[_CacheEntry] = None
        self._log = logger or logging.getLogger(__name__)

    def _fresh(self, now: float) -> Optional[_CacheEntry]:
        entry = self._entry
        if entry is not None and now - entry.fetched_at < self._ttl:
            return entry
        return None

    async def list_default_images(self) -> list[str]:
        entry = self._fresh(self._clock())
        if entry is not None:
            return list(entry.keys)

        try:
            raw_keys = await self._store.list_keys(self._prefix)
        except Exception as exc:
            self._log.warning(
                "Default image listing failed",
                extra={"prefix": self._prefix},
                exc_info=exc,
            )
            return []

        keys = sorted(
            (key for key in raw_keys if self._pattern.search(key)),
            key=lambda key: _sort_key(self._pattern, key),
        )
        self._entry = _CacheEntry(keys=tuple(keys), fetched_at=self._clock())
        self._log.debug(
            "Default image listing refreshed",
            extra={"prefix": self._prefix, "count": len(keys)},
        )
        return keys
