from __future__ import annotations

import hashlib
import logging

import requests

from ..errors import ChecksumMismatchError
from ..models import DownloadedArtifact

LOGGER = logging.getLogger(__name__)


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


class Downloader:
    """Fetches an artifact in one GET and verifies its SHA-256 digest."""

    def __init__(self, session: requests.Session, timeout: float | None = None) -> None:
        self.session = session
        self.timeout = timeout

    def fetch(self, url: str, expected_checksum: str | None = None) -> DownloadedArtifact:
        LOGGER.info("Downloading %s", url)
        resp = self.session.get(url, timeout=self.timeout)
        resp.raise_for_status()
        body = resp.content
        actual = sha256_hex(body)
        if expected_checksum and actual != expected_checksum.lower():
            raise ChecksumMismatchError(expected_checksum, actual, url)
        LOGGER.debug("Fetched %d bytes from %s (sha256 %s)", len(body), url, actual)
        return DownloadedArtifact(body=body, checksum=actual)
