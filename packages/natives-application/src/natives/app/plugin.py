import logging
import os
import re
from dataclasses import dataclass
from typing import List, Optional

from natives.common import RealFileSystem, bus
from natives.engine import DetectionContext, IdiomDetector, resolve_match, rewrite
from natives.spec import (
    VIRTUAL_PREFIX,
    FileSystemAdapter,
    IdiomMatch,
    ResolvedMatch,
    TransformResult,
)
from natives.workspace import NativesConfig

from .exporter import export_stub
from .state import BuildState

log = logging.getLogger(__name__)

_NATIVE_SUFFIX_RE = re.compile(r"\.(node|dll)$", re.IGNORECASE)


@dataclass(frozen=True)
class Occurrence:
    """A detected idiom and the binary it resolves to (None if unresolvable)."""

    match: IdiomMatch
    binary: Optional[str]


def _strip_plugin_prefix(value: Optional[str]) -> Optional[str]:
    # Other plugins mark their ids as "\0name:<path>".
    if value and value[0] == "\0" and ":" in value:
        return value[value.index(":") + 1 :]
    return value


class NativesPlugin:
    """
    The bundler-facing surface: build_start, resolve_id, load, transform
    and build_end.

    Hooks invoked outside of a build start one implicitly.
    """

    name = "natives"

    def __init__(
        self,
        config: Optional[NativesConfig] = None,
        fs: Optional[FileSystemAdapter] = None,
        detector: Optional[IdiomDetector] = None,
    ):
        self.config = config or NativesConfig()
        self.fs = fs or RealFileSystem()
        self.detector = detector or IdiomDetector()
        self._state: Optional[BuildState] = None

    @property
    def state(self) -> BuildState:
        if self._state is None:
            self.build_start()
        return self._state

    # --- Lifecycle ---

    def build_start(self) -> BuildState:
        self.fs.mkdir(self.config.copy_to)
        self._state = BuildState(self.config, self.fs)
        bus.info("build.run.start", path=self.config.copy_to)
        return self._state

    def build_end(self) -> Optional[BuildState]:
        state, self._state = self._state, None
        if state is not None:
            bus.info("build.run.end", count=len(state.registry))
        return state

    # --- Hooks ---

    def resolve_id(self, importee: str, importer: Optional[str] = None) -> Optional[str]:
        if importee.startswith(VIRTUAL_PREFIX):
            return importee

        importer = _strip_plugin_prefix(importer)
        importee = _strip_plugin_prefix(importee)

        base = os.path.dirname(importer) if importer else ""
        resolved_full = os.path.abspath(os.path.join(base, importee))

        native_path: Optional[str] = None
        if _NATIVE_SUFFIX_RE.search(importee):
            native_path = resolved_full
        elif self.fs.exists(resolved_full + ".node"):
            native_path = resolved_full + ".node"
        elif self.fs.exists(resolved_full + ".dll"):
            native_path = resolved_full + ".dll"

        if native_path is None:
            return None
        return self.state.registry.identity_for(native_path).virtual_id

    def load(self, id: str) -> Optional[str]:
        if id.startswith(VIRTUAL_PREFIX):
            return export_stub(id[len(VIRTUAL_PREFIX) :], self.config.mode)

        identity = self.state.registry.get(id) if os.path.isabs(id) else None
        if identity is not None:
            return export_stub(identity.output_name, self.config.mode)
        return None

    def inspect(self, code: str, id: str) -> List[Occurrence]:
        """Detects and resolves idioms without creating identities."""
        state = self.state
        ctx = DetectionContext(file_path=id, exists=self.fs.exists, locate_root=state.roots.locate)
        return [
            Occurrence(match, resolve_match(match, ctx, state.platform_info, self.fs.read_text))
            for match in self.detector.detect(code, ctx)
        ]

    def transform(self, code: str, id: str) -> Optional[TransformResult]:
        """
        Rewrites native-binary idioms in one source unit.

        Returns None when nothing was rewritten; the host then keeps the
        original text.
        """
        if id.startswith("\0"):
            return None

        registry = self.state.registry
        resolved = [
            ResolvedMatch(occ.match, registry.identity_for(occ.binary))
            for occ in self.inspect(code, id)
            if occ.binary is not None
        ]
        if not resolved:
            return None

        patch, applied = rewrite(code, resolved)
        if not applied:
            return None

        bus.debug("build.transform.rewritten", count=len(resolved), path=id)
        source_map = None
        if self.config.sourcemap:
            source_map = patch.generate_map(source=id, file=os.path.basename(id))
        return TransformResult(code=patch.to_string(), map=source_map)
