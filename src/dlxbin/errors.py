from __future__ import annotations


class DlxError(Exception):
    """Base class for errors raised by dlxbin itself."""


class ConfigError(DlxError):
    pass


class ChecksumMismatchError(DlxError):
    def __init__(self, expected: str, actual: str, url: str | None = None) -> None:
        self.expected = expected
        self.actual = actual
        self.url = url
        message = f"Checksum mismatch: expected {expected}, got {actual}"
        if url:
            message = f"{message} ({url})"
        super().__init__(message)


class CacheRemovalError(DlxError):
    def __init__(self, target: str) -> None:
        self.target = target
        super().__init__(f'Failed to remove cache entry "{target}"')
