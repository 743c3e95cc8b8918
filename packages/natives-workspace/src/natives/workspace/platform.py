"""Target platform resolution.

Native addons are laid out by the Node.js notion of platform and arch
(`process.platform`, `process.arch`), not Python's. Host values are mapped
onto those names; every field can be overridden explicitly to package for
another target.
"""

import json
import logging
import os
import platform as _platform
import shutil
import subprocess
import sys
from functools import lru_cache
from typing import Dict, Optional

from natives.spec import PlatformInfo

log = logging.getLogger(__name__)

UNKNOWN = "unknown"

_ARCH_MAP: Dict[str, str] = {
    "x86_64": "x64",
    "amd64": "x64",
    "i386": "ia32",
    "i686": "ia32",
    "x86": "ia32",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv6l": "arm",
    "armv7l": "arm",
    "ppc64le": "ppc64",
    "ppc64": "ppc64",
    "s390x": "s390x",
    "riscv64": "riscv64",
    "loongarch64": "loong64",
    "mips64": "mips64el",
}


def host_platform() -> str:
    name = sys.platform
    if name.startswith("linux"):
        return "linux"
    if name.startswith("win") or name == "cygwin":
        return "win32"
    if name.startswith("freebsd"):
        return "freebsd"
    if name.startswith("openbsd"):
        return "openbsd"
    if name.startswith("sunos"):
        return "sunos"
    return name


def host_arch() -> str:
    machine = _platform.machine().lower()
    return _ARCH_MAP.get(machine, machine or UNKNOWN)


def host_libc() -> str:
    env_libc = os.getenv("LIBC")
    if env_libc:
        return env_libc
    if host_platform() != "linux":
        return "glibc"
    lib, _ = _platform.libc_ver()
    return "glibc" if lib == "glibc" else "musl"


@lru_cache(maxsize=1)
def probe_node_runtime() -> Dict[str, str]:
    """
    Asks the `node` executable on PATH for its version info.

    Returns an empty dict when node is unavailable; callers then fall back
    to placeholders.
    """
    node = shutil.which("node")
    if node is None:
        log.debug("No node executable on PATH; runtime version is unknown")
        return {}

    script = (
        "process.stdout.write(JSON.stringify({"
        "version: process.versions.node,"
        "modules: process.versions.modules,"
        "napi: process.versions.napi || ''}))"
    )
    try:
        completed = subprocess.run(
            [node, "-e", script],
            capture_output=True,
            text=True,
            timeout=15,
            check=True,
        )
        data = json.loads(completed.stdout)
    except (OSError, subprocess.SubprocessError, json.JSONDecodeError) as e:
        log.debug(f"Could not probe node runtime at {node}: {e}")
        return {}

    return {k: str(v) for k, v in data.items() if v}


def resolve_platform_info(
    *,
    platform: Optional[str] = None,
    arch: Optional[str] = None,
    version: Optional[str] = None,
    modules_abi: Optional[str] = None,
    napi_version: Optional[int] = None,
    libc: Optional[str] = None,
) -> PlatformInfo:
    """Combine explicit overrides with host defaults."""

    runtime: Dict[str, str] = {}
    if version is None or modules_abi is None or napi_version is None:
        runtime = probe_node_runtime()

    if napi_version is None and runtime.get("napi", "").isdigit():
        napi_version = int(runtime["napi"])

    return PlatformInfo(
        platform=platform or host_platform(),
        arch=arch or host_arch(),
        version=version or runtime.get("version", UNKNOWN),
        modules_abi=modules_abi or runtime.get("modules", UNKNOWN),
        napi_version=napi_version,
        libc=libc or host_libc(),
    )
