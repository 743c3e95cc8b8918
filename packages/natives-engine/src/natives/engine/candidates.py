import logging
import os
from pathlib import Path
from typing import Callable, Dict, List, Tuple, Union

from natives.spec import PlatformInfo

log = logging.getLogger(__name__)

COMPILED_DIR_ENV = "NODE_BINDINGS_COMPILED_DIR"
DEFAULT_ALIAS = "bindings.node"
BINARY_EXTENSION = ".node"

# The layouts probed by the `bindings` package, in priority order. Every
# part naming a placeholder is substituted; other parts are kept verbatim.
CANDIDATE_LAYOUTS: Tuple[Tuple[str, ...], ...] = (
    ("module_root", "build", "bindings"),
    ("module_root", "build", "Debug", "bindings"),
    ("module_root", "build", "Release", "bindings"),
    ("module_root", "compiled", "version", "platform", "arch", "bindings"),
)


def normalize_alias(alias: Union[str, None]) -> str:
    if not alias:
        return DEFAULT_ALIAS
    if not alias.endswith(BINARY_EXTENSION):
        return alias + BINARY_EXTENSION
    return alias


def build_placeholders(
    alias: str, module_root: Union[str, Path], platform_info: PlatformInfo
) -> Dict[str, str]:
    return {
        "module_root": str(module_root),
        "compiled": os.environ.get(COMPILED_DIR_ENV) or "compiled",
        "platform": platform_info.platform,
        "arch": platform_info.arch,
        "version": platform_info.version,
        "bindings": alias,
    }


def candidate_paths(
    alias: str, module_root: Union[str, Path], platform_info: PlatformInfo
) -> List[str]:
    placeholders = build_placeholders(alias, module_root, platform_info)
    return [
        os.path.join(*(placeholders.get(part, part) for part in layout))
        for layout in CANDIDATE_LAYOUTS
    ]


def resolve_binding(
    alias: str,
    module_root: Union[str, Path],
    platform_info: PlatformInfo,
    exists: Callable[[str], bool] = os.path.exists,
) -> str:
    """
    Picks the first candidate that exists on disk.

    Falls back to the first candidate when none does; the materializer
    reports that case when it fails to find the file.
    """
    candidates = candidate_paths(alias, module_root, platform_info)
    for candidate in candidates:
        if exists(candidate):
            return os.path.abspath(candidate)

    log.debug(f"No candidate for {alias} under {module_root}; defaulting to {candidates[0]}")
    return os.path.abspath(candidates[0])
