"""Recognition of the source idioms packages use to load their native binary.

There is one matcher per idiom. Each matcher yields IdiomMatch objects in
ascending position order and never mutates the text. `IdiomDetector.detect`
merges the matchers and drops any match overlapping an earlier one, so the
spans it reports never overlap.
"""

import heapq
import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional, Pattern, Union

from natives.spec import IdiomKind, IdiomMatch, NATIVE_EXTENSIONS
from natives.workspace import find_module_root

from .candidates import normalize_alias
from .literals import LITERAL_EXPRESSION, STRING_LITERAL, evaluate_literal
from .pregyp import LOCATOR_PACKAGES, is_locator_available

log = logging.getLogger(__name__)

_IDENT = r"[A-Za-z_$][\w$]*"
# A call to the global `require`, not a method named require.
_REQUIRE = r"(?<![\w$.])require\s*\(\s*"

GENERIC_LOOKUP_RE = re.compile(
    _REQUIRE
    + r"""(?P<q>['"])bindings(?P=q)\s*\)\s*\(\s*(?P<arg>"""
    + LITERAL_EXPRESSION
    + r")?\s*\)"
)

DIRECT_LITERAL_RE = re.compile(_REQUIRE + r"(?P<lit>" + STRING_LITERAL + r")\s*\)")

PRE_GYP_IMPORT_RE = re.compile(
    r"(?<![\w$.])(?P<decl>var|let|const)\s+(?P<name>"
    + _IDENT
    + r")\s*=\s*"
    + _REQUIRE
    + r"""(?P<q>['"])(?P<package>"""
    + "|".join(re.escape(p) for p in LOCATOR_PACKAGES)
    + r""")(?P=q)\s*\)[ \t]*;?[ \t]*(?:\r?\n)?"""
)


def pre_gyp_find_pattern(locator_name: str) -> Pattern[str]:
    """
    The find-then-require pair, specialized to one locator variable name.

        var binding_path = binary.find(path.resolve(path.join(__dirname, '../package.json')));
        var binding = require(binding_path);
    """
    return re.compile(
        r"(?<![\w$.])(?P<decl1>var|let|const)\s+(?P<var1>"
        + _IDENT
        + r")\s*=\s*"
        + re.escape(locator_name)
        + r"\.find\s*\(\s*(?:"
        + r"path\.resolve\s*\(\s*path\.join\s*\(\s*__dirname\s*,\s*(?P<ref>"
        + LITERAL_EXPRESSION
        + r")\s*\)\s*\)"
        + r"|path\.join\s*\(\s*__dirname\s*,\s*(?P<ref2>"
        + LITERAL_EXPRESSION
        + r")\s*\)"
        + r")\s*\)\s*;?\s*"
        + r"(?P<decl2>var|let|const)\s+(?P<var2>"
        + _IDENT
        + r")\s*=\s*"
        + _REQUIRE
        + r"(?P=var1)\s*\)"
    )


def _is_path_specifier(specifier: str) -> bool:
    return (
        specifier in (".", "..")
        or specifier.startswith(("./", "../", ".\\", "..\\"))
        or os.path.isabs(specifier)
    )


@dataclass
class DetectionContext:
    """Everything a matcher may consult about the unit being scanned."""

    file_path: str
    exists: Callable[[str], bool] = os.path.exists
    locate_root: Callable[[str], Union[str, Path]] = find_module_root
    _module_root: Optional[str] = field(default=None, init=False, repr=False)

    @property
    def file_dir(self) -> str:
        return os.path.dirname(os.path.abspath(self.file_path))

    @property
    def module_root(self) -> str:
        if self._module_root is None:
            self._module_root = str(self.locate_root(self.file_path))
        return self._module_root


def match_generic_lookup(text: str, ctx: DetectionContext) -> Iterator[IdiomMatch]:
    for m in GENERIC_LOOKUP_RE.finditer(text):
        raw_arg = m.group("arg")
        alias: Optional[str] = None
        if raw_arg is not None:
            alias = evaluate_literal(raw_arg)
            if alias is None:
                log.debug(f"{ctx.file_path}: non-literal bindings alias {raw_arg!r} skipped")
                continue
        yield IdiomMatch(
            kind=IdiomKind.GENERIC_LOOKUP,
            start=m.start(),
            end=m.end(),
            params={"alias": normalize_alias(alias)},
        )


def _resolve_direct_literal(specifier: str, ctx: DetectionContext) -> Optional[str]:
    bases = [ctx.file_dir]
    if ctx.module_root != ctx.file_dir:
        bases.append(ctx.module_root)

    for base in bases:
        full = os.path.normpath(os.path.join(base, specifier))
        if full.lower().endswith(NATIVE_EXTENSIONS):
            if ctx.exists(full):
                return full
            continue
        for ext in NATIVE_EXTENSIONS:
            if ctx.exists(full + ext):
                return full + ext
    return None


def match_direct_literal(text: str, ctx: DetectionContext) -> Iterator[IdiomMatch]:
    for m in DIRECT_LITERAL_RE.finditer(text):
        specifier = evaluate_literal(m.group("lit"))
        if not specifier or not _is_path_specifier(specifier):
            continue
        path = _resolve_direct_literal(specifier, ctx)
        if path is None:
            continue
        yield IdiomMatch(
            kind=IdiomKind.DIRECT_LITERAL,
            start=m.start(),
            end=m.end(),
            params={"specifier": specifier, "path": path},
        )


def match_pre_gyp_lookup(text: str, ctx: DetectionContext) -> Iterator[IdiomMatch]:
    # Cheap precheck; most units never mention the locator.
    if "node-pre-gyp" not in text:
        return

    found: Dict[int, IdiomMatch] = {}
    for imp in PRE_GYP_IMPORT_RE.finditer(text):
        package = imp.group("package")
        locator_name = imp.group("name")
        if not is_locator_available(package, ctx.file_dir, ctx.exists):
            log.debug(f"{ctx.file_path}: '{package}' is not resolvable; pre-gyp idiom left as is")
            continue

        pattern = pre_gyp_find_pattern(locator_name)
        for m in pattern.finditer(text, imp.end()):
            raw_ref = m.group("ref") or m.group("ref2")
            ref = evaluate_literal(raw_ref)
            if ref is None:
                continue
            found.setdefault(
                m.start(),
                IdiomMatch(
                    kind=IdiomKind.PRE_GYP_LOOKUP,
                    start=m.start(),
                    end=m.end(),
                    params={
                        "decl1": m.group("decl1"),
                        "var1": m.group("var1"),
                        "decl2": m.group("decl2"),
                        "var2": m.group("var2"),
                        "locator": locator_name,
                        "package": package,
                        "package_json": os.path.normpath(os.path.join(ctx.file_dir, ref)),
                        "import_start": imp.start(),
                        "import_end": imp.end(),
                    },
                ),
            )

    for start in sorted(found):
        yield found[start]


MATCHERS: List[Callable[[str, DetectionContext], Iterator[IdiomMatch]]] = [
    match_generic_lookup,
    match_direct_literal,
    match_pre_gyp_lookup,
]


class IdiomDetector:
    def __init__(self, matchers=None):
        self.matchers = list(matchers or MATCHERS)

    def detect(self, text: str, ctx: DetectionContext) -> Iterator[IdiomMatch]:
        """Lazily yields non-overlapping matches in text order."""
        streams = [matcher(text, ctx) for matcher in self.matchers]
        last_end = -1
        for match in heapq.merge(*streams, key=lambda m: (m.start, m.end)):
            if match.start < last_end:
                log.debug(f"{ctx.file_path}: dropping overlapping {match.kind.value} at {match.start}")
                continue
            last_end = match.end
            yield match
