import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from natives.common import RealFileSystem, bus
from natives.spec import BinaryIdentity, FileSystemAdapter, IdiomKind
from natives.workspace import NativesConfig

from .materializer import BuildWarning
from .plugin import NativesPlugin

SOURCE_SUFFIXES = {".js", ".cjs", ".mjs"}


class DryRunFileSystem:
    """Reads from the wrapped filesystem; every write is skipped."""

    def __init__(self, inner: FileSystemAdapter):
        self._inner = inner

    def exists(self, path: Union[str, Path]) -> bool:
        return self._inner.exists(path)

    def is_dir(self, path: Union[str, Path]) -> bool:
        return self._inner.is_dir(path)

    def read_text(self, path: Union[str, Path]) -> str:
        return self._inner.read_text(path)

    def mkdir(self, path: Union[str, Path]) -> None:
        pass

    def copy_file(self, src: Union[str, Path], dest: Union[str, Path]) -> None:
        pass

    def write_text(self, path: Union[str, Path], content: str) -> None:
        pass


@dataclass
class ScanEntry:
    file_path: Path
    line: int
    kind: IdiomKind
    binary: Optional[str]
    exists: bool


@dataclass
class RelocationReport:
    rewritten: List[Path] = field(default_factory=list)
    written: List[Path] = field(default_factory=list)
    identities: List[BinaryIdentity] = field(default_factory=list)
    warnings: List[BuildWarning] = field(default_factory=list)


class NativesApp:
    """Drives a NativesPlugin over a directory of JavaScript sources."""

    def __init__(self, root_path: Path, config: NativesConfig, fs: Optional[FileSystemAdapter] = None):
        self.root_path = root_path
        self.config = config
        self.fs = fs or RealFileSystem()

    def discover_sources(self, path: Path) -> List[Path]:
        if path.is_file():
            return [path]
        return sorted(
            p for p in path.rglob("*") if p.is_file() and p.suffix in SOURCE_SUFFIXES
        )

    def run_scan(self, path: Path) -> List[ScanEntry]:
        bus.info("scan.run.start", path=path)
        plugin = NativesPlugin(self.config, fs=DryRunFileSystem(self.fs))
        plugin.build_start()

        entries: List[ScanEntry] = []
        files_with_hits = 0
        for source_file in self.discover_sources(path):
            code = self._read_source(self.fs, source_file, "scan.file.unreadable")
            if code is None:
                continue
            occurrences = plugin.inspect(code, str(source_file.resolve()))
            if occurrences:
                files_with_hits += 1
            for occ in occurrences:
                entry = ScanEntry(
                    file_path=source_file,
                    line=code.count("\n", 0, occ.match.start) + 1,
                    kind=occ.match.kind,
                    binary=occ.binary,
                    exists=occ.binary is not None and self.fs.exists(occ.binary),
                )
                entries.append(entry)
                msg_id = "scan.file.occurrence" if entry.exists else "scan.file.missing"
                bus.info(
                    msg_id,
                    path=self._display(source_file),
                    line=entry.line,
                    kind=entry.kind.value,
                    binary=entry.binary or "<unresolved>",
                )

        plugin.build_end()
        if entries:
            bus.success("scan.run.summary", count=len(entries), files=files_with_hits)
        else:
            bus.info("scan.run.empty")
        return entries

    def run_relocate(self, path: Path, out_dir: Path, dry_run: bool = False) -> RelocationReport:
        bus.info("relocate.run.start", path=path)
        fs = DryRunFileSystem(self.fs) if dry_run else self.fs
        plugin = NativesPlugin(self.config, fs=fs)
        state = plugin.build_start()

        base = path if path.is_dir() else path.parent
        report = RelocationReport()

        for source_file in self.discover_sources(path):
            code = self._read_source(fs, source_file, "relocate.file.unreadable")
            if code is None:
                state.warnings.append(
                    BuildWarning(
                        kind="unreadable_source",
                        path=str(source_file),
                        message=bus.render_to_string(
                            "relocate.file.unreadable", path=self._display(source_file)
                        ),
                    )
                )
                continue
            result = plugin.transform(code, str(source_file.resolve()))
            if result is None:
                continue

            report.rewritten.append(source_file)
            target = out_dir / source_file.relative_to(base)
            content = result.code
            if result.map is not None:
                map_path = target.with_name(target.name + ".map")
                result.map["file"] = target.name
                result.map["sources"] = [
                    Path(os.path.relpath(source_file.resolve(), target.parent.resolve())).as_posix()
                ]
                content = content + f"\n//# sourceMappingURL={map_path.name}\n"
                fs.write_text(map_path, json.dumps(result.map))
                if not dry_run:
                    report.written.append(map_path)
            fs.write_text(target, content)
            if not dry_run:
                report.written.append(target)
                bus.debug("relocate.file.written", path=self._display(target))

        report.identities = state.registry.identities()
        report.warnings = list(state.warnings)
        plugin.build_end()

        if dry_run:
            bus.info("relocate.run.dry_run", files=len(report.rewritten))
        else:
            bus.success(
                "relocate.run.success",
                count=len(report.identities),
                path=self.config.copy_to,
                files=len(report.rewritten),
            )
        if report.warnings:
            bus.warning("relocate.run.warnings", count=len(report.warnings))
        return report

    def _read_source(self, fs: FileSystemAdapter, source_file: Path, msg_id: str) -> Optional[str]:
        try:
            return fs.read_text(source_file)
        except UnicodeDecodeError:
            bus.warning(msg_id, path=self._display(source_file))
            return None

    def _display(self, path: Path) -> str:
        try:
            return str(path.resolve().relative_to(self.root_path.resolve()))
        except ValueError:
            return str(path)
