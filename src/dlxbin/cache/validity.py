from __future__ import annotations

from pathlib import Path

from ..util.time import Clock, now_millis
from .metadata import MetadataStore


class ValidityChecker:
    def __init__(self, store: MetadataStore, clock: Clock = now_millis) -> None:
        self.store = store
        self.clock = clock

    def is_valid(
        self,
        entry: Path,
        ttl_ms: int,
        now_ms: int | None = None,
        binary: Path | None = None,
    ) -> bool:
        """True when the entry may be reused without downloading.

        The age comparison is strict: an entry exactly ``ttl_ms`` old is stale.
        A timestamp in the future yields a negative age and counts as fresh.
        """
        metadata = self.store.read(entry)
        if metadata is None:
            return False
        if binary is not None and not binary.is_file():
            return False
        now = self.clock() if now_ms is None else now_ms
        return metadata.age(now) < ttl_ms
