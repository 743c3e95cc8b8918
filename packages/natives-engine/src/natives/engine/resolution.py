import logging
from pathlib import Path
from typing import Callable, Optional

from natives.spec import IdiomKind, IdiomMatch, PlatformInfo

from .candidates import resolve_binding
from .idioms import DetectionContext
from .pregyp import find_binary

log = logging.getLogger(__name__)


def resolve_match(
    match: IdiomMatch,
    ctx: DetectionContext,
    platform_info: PlatformInfo,
    read_text: Optional[Callable[[str], str]] = None,
) -> Optional[str]:
    """
    Computes the absolute binary path an idiom occurrence refers to.

    Returns None for an occurrence that cannot be resolved; it must then be
    left untouched.
    """
    if match.kind is IdiomKind.GENERIC_LOOKUP:
        return resolve_binding(match.params["alias"], ctx.module_root, platform_info, ctx.exists)

    if match.kind is IdiomKind.DIRECT_LITERAL:
        return match.params["path"]

    if match.kind is IdiomKind.PRE_GYP_LOOKUP:
        reader = read_text or (lambda p: Path(p).read_text(encoding="utf-8"))
        path = find_binary(match.params["package_json"], platform_info, read_text=reader)
        if path is None:
            log.debug(f"{ctx.file_path}: pre-gyp descriptor {match.params['package_json']} unusable")
        return path

    raise ValueError(f"Unknown idiom kind: {match.kind!r}")
