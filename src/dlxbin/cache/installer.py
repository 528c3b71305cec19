from __future__ import annotations

import logging
import os
from pathlib import Path

from ..models import METADATA_SCHEMA_VERSION, DownloadedArtifact, EntryMetadata
from ..util.time import Clock, now_millis
from .layout import temp_path
from .metadata import MetadataStore

LOGGER = logging.getLogger(__name__)

EXECUTABLE_MODE = 0o755


class AtomicInstaller:
    """Places a verified payload at its final path, then records metadata.

    Readers either see no payload or the complete one: bytes go to a sibling
    ``.download`` file that is renamed over the final name in one step. The
    sidecar is written only after that rename, so metadata never describes a
    payload that is not in place.
    """

    def __init__(self, store: MetadataStore, clock: Clock = now_millis, windows: bool | None = None) -> None:
        self.store = store
        self.clock = clock
        self.windows = os.name == "nt" if windows is None else windows

    def install(
        self,
        entry: Path,
        binary_name: str,
        artifact: DownloadedArtifact,
        url: str,
        platform: str,
        arch: str,
    ) -> Path:
        entry.mkdir(parents=True, exist_ok=True)
        final = entry / binary_name
        self._promote(artifact.body, final)
        metadata = EntryMetadata(
            url=url,
            checksum=artifact.checksum,
            platform=platform,
            arch=arch,
            timestamp=self.clock(),
            version=METADATA_SCHEMA_VERSION,
        )
        self.store.write(entry, metadata)
        LOGGER.info("Installed %s (%d bytes)", final, len(artifact.body))
        return final

    def _promote(self, body: bytes, final: Path) -> None:
        tmp = temp_path(final)
        try:
            tmp.write_bytes(body)
            if not self.windows:
                tmp.chmod(EXECUTABLE_MODE)
            # Last writer wins when two installs of the same entry race.
            os.replace(tmp, final)
        except BaseException:
            try:
                tmp.unlink(missing_ok=True)
            except OSError as cleanup_exc:
                LOGGER.debug("Could not remove temp file %s: %s", tmp, cleanup_exc)
            raise
