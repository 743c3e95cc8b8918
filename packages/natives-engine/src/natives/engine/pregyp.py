"""Support for the node-pre-gyp binary locator.

Packages built with node-pre-gyp compute their binary path at runtime from
the `binary` section of their package.json. The same computation is done
here so the idiom can be resolved at build time.
"""

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

from natives.spec import PlatformInfo

log = logging.getLogger(__name__)

LOCATOR_PACKAGES = ("@mapbox/node-pre-gyp", "node-pre-gyp")

_SEMVER_RE = re.compile(
    r"^v?(?P<major>\d+)\.(?P<minor>\d+)\.(?P<patch>\d+)"
    r"(?:-(?P<prerelease>[0-9A-Za-z.-]+))?"
    r"(?:\+(?P<build>[0-9A-Za-z.-]+))?$"
)


def is_locator_available(
    package_name: str,
    start_dir: Union[str, Path],
    exists: Callable[[str], bool] = os.path.exists,
) -> bool:
    """Checks whether `package_name` is resolvable from `start_dir` the way require() would."""
    current = os.path.abspath(str(start_dir))
    while True:
        descriptor = os.path.join(current, "node_modules", *package_name.split("/"), "package.json")
        if exists(descriptor):
            return True
        parent = os.path.dirname(current)
        if parent == current:
            return False
        current = parent


def _best_napi_build_version(binary: Dict[str, Any], platform_info: PlatformInfo) -> Optional[int]:
    versions = binary.get("napi_versions")
    if not isinstance(versions, list):
        return None
    candidates = [v for v in versions if isinstance(v, int)]
    if platform_info.napi_version is not None:
        candidates = [v for v in candidates if v <= platform_info.napi_version]
    return max(candidates) if candidates else None


def template_values(
    package_json: Dict[str, Any], platform_info: PlatformInfo, debug: bool = False
) -> Optional[Dict[str, str]]:
    """Values node-pre-gyp substitutes into `binary.module_path`."""
    m = _SEMVER_RE.match(str(package_json.get("version", "")))
    if m is None:
        return None

    binary = package_json.get("binary") or {}
    node_abi = f"node-v{platform_info.modules_abi}"
    napi_build_version = _best_napi_build_version(binary, platform_info)
    napi_version = platform_info.napi_version

    return {
        "name": str(package_json.get("name", "")),
        "configuration": "Debug" if debug else "Release",
        "module_name": str(binary.get("module_name", "")),
        "version": f"{m.group('major')}.{m.group('minor')}.{m.group('patch')}"
        + (f"-{m.group('prerelease')}" if m.group("prerelease") else ""),
        "prerelease": m.group("prerelease") or "",
        "build": m.group("build") or "",
        "major": m.group("major"),
        "minor": m.group("minor"),
        "patch": m.group("patch"),
        "runtime": "node",
        "node_abi": node_abi,
        "node_abi_napi": "napi" if napi_version else node_abi,
        "napi_version": str(napi_version or ""),
        "napi_build_version": str(napi_build_version or ""),
        "node_napi_label": f"napi-v{napi_build_version}" if napi_build_version else node_abi,
        "platform": platform_info.platform,
        "target_platform": platform_info.platform,
        "arch": platform_info.arch,
        "target_arch": platform_info.arch,
        "libc": platform_info.libc,
        "toolset": "",
    }


def eval_template(template: str, values: Dict[str, str]) -> str:
    for key, value in values.items():
        template = template.replace("{" + key + "}", value)
    return template


def find_binary(
    package_json_path: Union[str, Path],
    platform_info: PlatformInfo,
    read_text: Callable[[str], str] = lambda p: Path(p).read_text(encoding="utf-8"),
) -> Optional[str]:
    """
    The build-time equivalent of `binary.find(package_json_path)`.

    Returns None when the descriptor is missing, unreadable, or lacks the
    `binary.module_name` / `binary.module_path` settings.
    """
    path = os.path.abspath(str(package_json_path))
    try:
        package_json = json.loads(read_text(path))
    except (OSError, ValueError) as e:
        log.debug(f"Cannot read pre-gyp descriptor {path}: {e}")
        return None

    binary = package_json.get("binary") if isinstance(package_json, dict) else None
    if not isinstance(binary, dict) or not binary.get("module_name") or not binary.get("module_path"):
        log.debug(f"{path} has no usable 'binary' section")
        return None

    values = template_values(package_json, platform_info)
    if values is None:
        log.debug(f"{path} has an invalid version: {package_json.get('version')!r}")
        return None

    module_path = eval_template(str(binary["module_path"]), values)
    module_dir = os.path.join(os.path.dirname(path), module_path)
    return os.path.normpath(os.path.join(module_dir, values["module_name"] + ".node"))
