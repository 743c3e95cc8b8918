import json
import logging
import re
from collections import OrderedDict
from typing import List, Sequence, Tuple

from natives.spec import IdiomKind, ResolvedMatch

from .patch import TextPatch

log = logging.getLogger(__name__)


def js_string(value: str) -> str:
    return json.dumps(value)


def replacement_for(resolved: ResolvedMatch) -> str:
    match, identity = resolved.match, resolved.identity
    load = f"require({js_string(identity.virtual_id)})"

    if match.kind is IdiomKind.PRE_GYP_LOOKUP:
        p = match.params
        return (
            f"{p['decl1']} {p['var1']} = {js_string(identity.output_name)};"
            f"{p['decl2']} {p['var2']} = {load}"
        )
    return load


def _mask(text: str, spans: Sequence[Tuple[int, int]]) -> str:
    chars = list(text)
    for start, end in spans:
        chars[start:end] = " " * (end - start)
    return "".join(chars)


def _prune_locator_imports(patch: TextPatch, resolved: Sequence[ResolvedMatch]) -> List[str]:
    """
    Removes pre-gyp locator imports that nothing references any more.

    The locator pulls in heavy optional dependencies, so once every use has
    been replaced with a fixed path the import itself must go.
    """
    imports: "OrderedDict[Tuple[int, int], ResolvedMatch]" = OrderedDict()
    for r in resolved:
        if r.match.kind is IdiomKind.PRE_GYP_LOOKUP:
            span = (r.match.params["import_start"], r.match.params["import_end"])
            imports.setdefault(span, r)

    removed: List[str] = []
    if not imports:
        return removed

    rewritten_spans = [(e.start, e.end) for e in patch.edits]
    for (start, end), r in imports.items():
        locator = r.match.params["locator"]
        remaining = _mask(patch.original, rewritten_spans + [(start, end)])
        pattern = re.compile(r"(?<![\w$.])" + re.escape(locator) + r"(?![\w$])")
        if pattern.search(remaining):
            log.debug(f"'{locator}' is still referenced; keeping its import")
            continue
        patch.remove(start, end)
        removed.append(r.match.params["package"])
    return removed


def rewrite(text: str, resolved: Sequence[ResolvedMatch]) -> Tuple[TextPatch, bool]:
    """
    Replaces every resolved idiom span with a load of its virtual identity.

    Returns the patch and whether anything was changed. An unchanged unit
    should be passed through as is.
    """
    patch = TextPatch(text)
    for r in resolved:
        patch.overwrite(r.match.start, r.match.end, replacement_for(r))

    for package in _prune_locator_imports(patch, resolved):
        log.debug(f"Removed unused '{package}' import")

    return patch, patch.has_changes()
