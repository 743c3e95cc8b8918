import json
from pathlib import Path
from textwrap import dedent
from typing import Any, Dict, List, Optional, Tuple, Union


def _toml_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(_toml_value(v) for v in value) + "]"
    return json.dumps(str(value))


class WorkspaceFactory:
    """
    Builds throwaway package trees for tests.

    Files are queued by the with_* methods and written by build().
    """

    def __init__(self, root_path: Path):
        self.root_path = root_path
        self._files: List[Tuple[str, Union[str, bytes]]] = []

    def with_source(self, path: str, content: str) -> "WorkspaceFactory":
        self._files.append((path, dedent(content)))
        return self

    def with_package_json(
        self, directory: str = ".", data: Optional[Dict[str, Any]] = None
    ) -> "WorkspaceFactory":
        payload = {"name": Path(directory).name or "pkg", "version": "1.0.0"}
        payload.update(data or {})
        self._files.append((str(Path(directory) / "package.json"), json.dumps(payload, indent=2)))
        return self

    def with_binary(self, path: str, content: bytes = b"\x7fELF-fake-addon") -> "WorkspaceFactory":
        self._files.append((path, content))
        return self

    def with_locator(self, directory: str = ".", package: str = "@mapbox/node-pre-gyp") -> "WorkspaceFactory":
        """Installs a stub locator package under <directory>/node_modules."""
        return self.with_package_json(
            str(Path(directory) / "node_modules" / package), {"name": package}
        )

    def with_config(self, config: Dict[str, Any]) -> "WorkspaceFactory":
        lines = ["[project]", 'name = "test-project"', "", "[tool.natives]"]
        lines.extend(f"{key} = {_toml_value(value)}" for key, value in config.items())
        self._files.append(("pyproject.toml", "\n".join(lines) + "\n"))
        return self

    def build(self) -> Path:
        for rel_path, content in self._files:
            target = self.root_path / rel_path
            target.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                target.write_bytes(content)
            else:
                target.write_text(content, encoding="utf-8")
        self._files.clear()
        return self.root_path
