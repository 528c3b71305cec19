from __future__ import annotations

import logging
import platform as platform_mod
import sys
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence

import requests

from .cache.download import Downloader
from .cache.installer import AtomicInstaller
from .cache.keys import cache_key
from .cache.layout import default_binary_name, entry_dir
from .cache.maintenance import DEFAULT_MAX_AGE_MS, CacheMaintenance
from .cache.metadata import MetadataStore
from .cache.validity import ValidityChecker
from .config import DlxSettings, load_settings
from .execution import Launcher, execution_mode, launch
from .models import CacheEntrySummary, DlxResult
from .util.http import create_session
from .util.time import Clock, now_millis

LOGGER = logging.getLogger(__name__)

_ARCH_ALIASES = {
    "x86_64": "x64",
    "amd64": "x64",
    "aarch64": "arm64",
    "armv7l": "arm",
    "i386": "ia32",
    "i686": "ia32",
}


def host_arch() -> str:
    machine = platform_mod.machine().lower()
    return _ARCH_ALIASES.get(machine, machine or "unknown")


class DlxRunner:
    """Get-or-download a binary by URL, then launch it.

    Every collaborator is built once here, so two runners never share hidden
    state and tests can swap the clock, session or launcher.
    """

    def __init__(
        self,
        settings: DlxSettings,
        session: Optional[requests.Session] = None,
        clock: Clock = now_millis,
        launcher: Launcher = launch,
        host_platform: str = sys.platform,
    ) -> None:
        self.settings = settings
        self.session = session or create_session(
            settings.user_agent,
            timeout=settings.http_timeout,
            retries=settings.http_retries,
        )
        self.clock = clock
        self.launcher = launcher
        self.host_platform = host_platform
        self.store = MetadataStore()
        self.validity = ValidityChecker(self.store, clock)
        self.downloader = Downloader(self.session)
        self.installer = AtomicInstaller(self.store, clock, windows=host_platform == "win32")
        self.maintenance = CacheMaintenance(settings.cache_dir, self.store, clock)

    @property
    def cache_dir(self) -> Path:
        return self.settings.cache_dir

    def binary_path_for(
        self,
        url: str,
        name: Optional[str] = None,
        platform: Optional[str] = None,
        arch: Optional[str] = None,
    ) -> Path:
        platform = platform or self.host_platform
        arch = arch or host_arch()
        entry = entry_dir(self.cache_dir, cache_key(url))
        return entry / (name or default_binary_name(platform, arch))

    def ensure(
        self,
        url: str,
        *,
        name: Optional[str] = None,
        checksum: Optional[str] = None,
        cache_ttl: Optional[int] = None,
        force: bool = False,
        platform: Optional[str] = None,
        arch: Optional[str] = None,
    ) -> tuple[Path, bool]:
        """Make sure a valid payload is cached; return ``(path, downloaded)``."""
        platform = platform or self.host_platform
        arch = arch or host_arch()
        ttl = self.settings.cache_ttl_ms if cache_ttl is None else cache_ttl
        binary = self.binary_path_for(url, name, platform, arch)
        entry = binary.parent

        if not force and self.validity.is_valid(entry, ttl, binary=binary):
            metadata = self.store.read(entry)
            if metadata is not None:
                LOGGER.debug("Cache hit for %s (sha256 %s)", url, metadata.checksum)
                return binary, False
            LOGGER.debug("Metadata for %s vanished after validation; downloading", url)

        artifact = self.downloader.fetch(url, checksum)
        self.installer.install(entry, binary.name, artifact, url, platform, arch)
        return binary, True

    def run(
        self,
        url: str,
        args: Sequence[str] = (),
        *,
        name: Optional[str] = None,
        checksum: Optional[str] = None,
        cache_ttl: Optional[int] = None,
        force: bool = False,
        platform: Optional[str] = None,
        arch: Optional[str] = None,
        spawn_options: Optional[Mapping[str, Any]] = None,
    ) -> DlxResult:
        binary, downloaded = self.ensure(
            url,
            name=name,
            checksum=checksum,
            cache_ttl=cache_ttl,
            force=force,
            platform=platform,
            arch=arch,
        )
        mode = execution_mode(binary, self.host_platform)
        process = self.launcher(binary, list(args), spawn_options or {}, mode)
        return DlxResult(binary_path=binary, downloaded=downloaded, process=process)


def dlx_binary(url: str, args: Sequence[str] = (), **options: Any) -> DlxResult:
    """One-shot convenience wrapper using settings from the environment."""
    runner = DlxRunner(load_settings())
    return runner.run(url, args, **options)


def clean_dlx_cache(max_age_ms: int = DEFAULT_MAX_AGE_MS) -> int:
    return DlxRunner(load_settings()).maintenance.clean(max_age_ms)


def list_dlx_cache() -> list[CacheEntrySummary]:
    return DlxRunner(load_settings()).maintenance.list_entries()
