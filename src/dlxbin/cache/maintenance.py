from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Iterator, List

from ..errors import CacheRemovalError
from ..models import CacheEntrySummary
from ..util.time import MS_PER_DAY, Clock, now_millis
from .keys import cache_key, looks_like_key
from .layout import entry_dir
from .metadata import MetadataStore

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_AGE_MS = 7 * MS_PER_DAY


class CacheMaintenance:
    """Expiry scanning, inventory and removal over a cache root."""

    def __init__(self, root: Path, store: MetadataStore, clock: Clock = now_millis) -> None:
        self.root = root
        self.store = store
        self.clock = clock

    def exists(self) -> bool:
        return self.root.is_dir()

    def ensure_root(self) -> Path:
        self.root.mkdir(parents=True, exist_ok=True)
        return self.root

    def _entries(self) -> Iterator[Path]:
        if not self.root.is_dir():
            return
        for child in self.root.iterdir():
            if child.is_dir():
                yield child

    def clean(self, max_age_ms: int = DEFAULT_MAX_AGE_MS) -> int:
        """Evict entries older than ``max_age_ms`` and return how many went.

        Directories without readable metadata are removed only when empty; a
        populated one may be an install in progress.
        """
        removed = 0
        now = self.clock()
        for entry in self._entries():
            try:
                metadata = self.store.read(entry)
                if metadata is not None:
                    if metadata.age(now) > max_age_ms:
                        shutil.rmtree(entry)
                        LOGGER.info("Evicted %s (%s)", entry.name, metadata.url)
                        removed += 1
                elif not any(entry.iterdir()):
                    entry.rmdir()
                    LOGGER.info("Removed empty cache entry %s", entry.name)
                    removed += 1
            except OSError as exc:
                LOGGER.warning("Skipping cache entry %s during cleanup: %s", entry, exc)
        return removed

    def list_entries(self) -> List[CacheEntrySummary]:
        results: List[CacheEntrySummary] = []
        now = self.clock()
        for entry in self._entries():
            try:
                metadata = self.store.read(entry)
                if metadata is None:
                    continue
                binary = next(
                    (p for p in sorted(entry.iterdir()) if not p.name.startswith(".") and p.is_file()),
                    None,
                )
                if binary is None:
                    continue
                results.append(
                    CacheEntrySummary(
                        name=binary.name,
                        url=metadata.url,
                        checksum=metadata.checksum,
                        platform=metadata.platform,
                        arch=metadata.arch,
                        age=metadata.age(now),
                        size=binary.stat().st_size,
                        path=binary,
                    )
                )
            except OSError as exc:
                LOGGER.debug("Unable to inspect cache entry %s: %s", entry, exc)
        return results

    def resolve(self, url_or_key: str) -> Path:
        identity = url_or_key if looks_like_key(url_or_key) else cache_key(url_or_key)
        return entry_dir(self.root, identity)

    def remove(self, url_or_key: str) -> bool:
        """Delete one entry. Returns False when there was nothing to delete."""
        target = self.resolve(url_or_key)
        if not target.exists():
            return False
        try:
            shutil.rmtree(target)
        except OSError as exc:
            raise CacheRemovalError(str(target)) from exc
        LOGGER.info("Removed cache entry %s", target.name)
        return True

    def clear(self) -> int:
        removed = 0
        for entry in sorted(self._entries()):
            try:
                shutil.rmtree(entry)
            except OSError as exc:
                raise CacheRemovalError(str(entry)) from exc
            removed += 1
        LOGGER.info("Cleared %d cache entries from %s", removed, self.root)
        return removed
