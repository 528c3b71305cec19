"""Path arithmetic for the binary cache. Nothing here touches the disk."""

from __future__ import annotations

from pathlib import Path

METADATA_FILENAME = ".dlx-metadata.json"
TEMP_SUFFIX = ".download"
WINDOWS_PLATFORM = "win32"
WINDOWS_BINARY_EXT = ".cmd"


def default_cache_root(home: Path) -> Path:
    return home / ".dlxbin" / "cache" / "dlx"


def entry_dir(root: Path, identity: str) -> Path:
    return root / identity


def metadata_path(entry: Path) -> Path:
    return entry / METADATA_FILENAME


def temp_path(final_path: Path) -> Path:
    # Same directory as the final file so the promoting rename never crosses filesystems.
    return final_path.with_name(final_path.name + TEMP_SUFFIX)


def default_binary_name(platform: str, arch: str) -> str:
    ext = WINDOWS_BINARY_EXT if platform == WINDOWS_PLATFORM else ""
    return f"binary-{platform}-{arch}{ext}"


def binary_path(root: Path, identity: str, name: str) -> Path:
    return entry_dir(root, identity) / name
