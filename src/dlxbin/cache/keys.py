from __future__ import annotations

import hashlib


def cache_key(url: str) -> str:
    """Content-addressed directory name for ``url``.

    The URL is hashed exactly as given; callers wanting two spellings of the
    same resource to share an entry must canonicalise first.
    """
    if not url:
        raise ValueError("url must be a non-empty string")
    return hashlib.sha256(url.encode("utf-8")).hexdigest()


def looks_like_key(value: str) -> bool:
    return len(value) == 64 and all(ch in "0123456789abcdef" for ch in value)
