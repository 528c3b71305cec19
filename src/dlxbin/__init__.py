"""Download-and-execute binary cache."""

from .errors import CacheRemovalError, ChecksumMismatchError, ConfigError, DlxError
from .models import CacheEntrySummary, DlxResult, EntryMetadata
from .runner import DlxRunner, clean_dlx_cache, dlx_binary, list_dlx_cache

__all__ = [
    "CacheEntrySummary",
    "CacheRemovalError",
    "ChecksumMismatchError",
    "ConfigError",
    "DlxError",
    "DlxResult",
    "DlxRunner",
    "EntryMetadata",
    "clean_dlx_cache",
    "dlx_binary",
    "list_dlx_cache",
]
