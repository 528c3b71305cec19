from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, Field

METADATA_SCHEMA_VERSION = "1.0.0"


class EntryMetadata(BaseModel):
    """Provenance sidecar stored beside each cached binary."""

    url: str
    checksum: str = Field(pattern=r"^[0-9a-f]{64}$")
    platform: str
    arch: str
    timestamp: int
    version: str

    model_config = {
        "extra": "ignore",
        "strict": True,
    }

    def age(self, now_ms: int) -> int:
        return now_ms - self.timestamp


@dataclass(slots=True)
class DownloadedArtifact:
    body: bytes
    checksum: str


@dataclass(slots=True)
class CacheEntrySummary:
    name: str
    url: str
    checksum: str
    platform: str
    arch: str
    age: int
    size: int
    path: Path


@dataclass(slots=True)
class DlxResult:
    binary_path: Path
    downloaded: bool
    process: subprocess.Popen
