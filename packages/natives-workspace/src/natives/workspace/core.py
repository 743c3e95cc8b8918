import os
from pathlib import Path
from typing import Dict, Union

# Markers of a package boundary, checked in every ancestor directory.
PACKAGE_DESCRIPTOR = "package.json"
DEPENDENCY_DIR = "node_modules"


def find_module_root(file_path: Union[str, Path]) -> Path:
    """
    Finds the directory owning `file_path` as a package.

    Walks upwards from the file's directory and stops at the first directory
    containing a package.json or a node_modules directory. When the
    filesystem root is reached without a match, the last directory visited is
    returned, so this never fails.
    """
    dirname = os.path.dirname(str(file_path))
    if dirname in ("", "."):
        dirname = os.getcwd()

    current = Path(os.path.abspath(dirname))
    while True:
        if (current / PACKAGE_DESCRIPTOR).exists() or (current / DEPENDENCY_DIR).exists():
            return current
        parent = current.parent
        if parent == current:
            return current
        current = parent


class ModuleRootLocator:
    """Caches `find_module_root` per source file for the lifetime of a build."""

    def __init__(self):
        self._cache: Dict[str, Path] = {}

    def locate(self, file_path: Union[str, Path]) -> Path:
        key = str(file_path)
        if key not in self._cache:
            self._cache[key] = find_module_root(key)
        return self._cache[key]

    def clear(self) -> None:
        self._cache.clear()
