from __future__ import annotations

import enum
import logging
import subprocess
import sys
from pathlib import Path
from typing import Any, Callable, Mapping, Sequence

LOGGER = logging.getLogger(__name__)


class ExecMode(enum.Enum):
    DIRECT = "direct"
    SHELL = "shell"


# Script types Windows can only run through cmd.exe.
EXECUTION_MODES: dict[str, dict[str, ExecMode]] = {
    "win32": {
        ".bat": ExecMode.SHELL,
        ".cmd": ExecMode.SHELL,
        ".ps1": ExecMode.SHELL,
    },
}

Launcher = Callable[[Path, Sequence[str], Mapping[str, Any], ExecMode], subprocess.Popen]


def execution_mode(binary: Path, host_platform: str = sys.platform) -> ExecMode:
    table = EXECUTION_MODES.get(host_platform, {})
    return table.get(binary.suffix.lower(), ExecMode.DIRECT)


def launch(
    binary: Path,
    args: Sequence[str],
    spawn_options: Mapping[str, Any] | None = None,
    mode: ExecMode = ExecMode.DIRECT,
) -> subprocess.Popen:
    """Start ``binary`` and return immediately; the caller owns the process."""
    options = dict(spawn_options or {})
    if mode is ExecMode.SHELL:
        options["shell"] = True
    command = [str(binary), *args]
    LOGGER.debug("Launching %s (%s)", command, mode.value)
    return subprocess.Popen(command, **options)
