from pathlib import Path

import pytest

from dlxbin.cache import layout
from dlxbin.cache.keys import cache_key, looks_like_key


def test_cache_key_is_sha256_of_url():
    key = cache_key("https://example.test/tool")
    assert key == "d5978f17f09c1c002abbf1e21a3c205e223f62c0c7e81ca9fe075084e758c726"
    assert key == cache_key("https://example.test/tool")
    assert looks_like_key(key)


def test_cache_key_does_not_normalise():
    assert cache_key("https://example.test/tool") != cache_key("https://EXAMPLE.test/tool")
    assert cache_key("https://example.test/tool") != cache_key("https://example.test/tool/")


def test_cache_key_rejects_empty_url():
    with pytest.raises(ValueError):
        cache_key("")


def test_layout_paths():
    root = Path("/cache")
    entry = layout.entry_dir(root, "abc")
    assert entry == Path("/cache/abc")
    assert layout.metadata_path(entry) == Path("/cache/abc/.dlx-metadata.json")
    assert layout.temp_path(entry / "tool") == Path("/cache/abc/tool.download")
    assert layout.default_cache_root(Path("/home/u")) == Path("/home/u/.dlxbin/cache/dlx")


def test_default_binary_name_adds_cmd_on_windows():
    assert layout.default_binary_name("linux", "x64") == "binary-linux-x64"
    assert layout.default_binary_name("win32", "x64") == "binary-win32-x64.cmd"
