from __future__ import annotations

import logging
from pathlib import Path

from pydantic import ValidationError

from ..models import EntryMetadata
from .layout import metadata_path

LOGGER = logging.getLogger(__name__)


class MetadataStore:
    """Reads and writes the JSON sidecar of a cache entry."""

    def read(self, entry: Path) -> EntryMetadata | None:
        path = metadata_path(entry)
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            LOGGER.debug("Unreadable metadata %s: %s", path, exc)
            return None
        try:
            return EntryMetadata.model_validate_json(raw)
        except ValidationError as exc:
            LOGGER.debug("Ignoring malformed metadata %s: %s", path, exc)
            return None

    def write(self, entry: Path, metadata: EntryMetadata) -> Path:
        path = metadata_path(entry)
        path.write_text(metadata.model_dump_json(indent=2), encoding="utf-8")
        return path
