import os
import threading
from typing import Callable, Dict, List, Mapping, Optional, Set, Tuple

from natives.common import bus
from natives.spec import VIRTUAL_PREFIX, BinaryIdentity, MapFunction
from natives.workspace import ConfigError


class IdentityRegistry:
    """
    Maps each distinct absolute binary path to its BinaryIdentity.

    Identities are created once and never recomputed. Output names are
    unique across the registry, and so are output paths; a name or path
    already taken gets `_1`, `_2`, ... inserted before its extension. An
    identity is recorded only once it has been materialized.
    """

    def __init__(
        self,
        copy_to: str,
        dest_dir: str,
        materialize: Callable[[BinaryIdentity], object],
        map_fn: Optional[MapFunction] = None,
    ):
        self.copy_to = copy_to
        self.dest_dir = dest_dir
        self._materialize = materialize
        self._map_fn = map_fn
        self._by_path: Dict[str, BinaryIdentity] = {}
        self._by_virtual_id: Dict[str, BinaryIdentity] = {}
        self._names: Set[str] = set()
        self._output_paths: Set[str] = set()
        # Held across read-check-create-materialize for one path.
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._by_path)

    def __contains__(self, path: str) -> bool:
        return os.path.abspath(path) in self._by_path

    def get(self, path: str) -> Optional[BinaryIdentity]:
        return self._by_path.get(os.path.abspath(path))

    def get_by_virtual_id(self, virtual_id: str) -> Optional[BinaryIdentity]:
        return self._by_virtual_id.get(virtual_id)

    def rebase(self, basename: str) -> str:
        """The name of `basename` as written in the bundle."""
        sep = "" if self.dest_dir.endswith(("/", "\\")) else "/"
        return (self.dest_dir + sep + basename).replace("\\", "/")

    def _path_key(self, output_path: str) -> str:
        return os.path.normcase(os.path.abspath(output_path))

    def _is_taken(self, name: str, output_path: str) -> bool:
        return name in self._names or self._path_key(output_path) in self._output_paths

    def _available_basename(self, path: str) -> str:
        basename = os.path.basename(path)
        stem, ext = os.path.splitext(basename)
        i = 1
        while self._is_taken(self.rebase(basename), os.path.join(self.copy_to, basename)):
            basename = f"{stem}_{i}{ext}"
            i += 1
        return basename

    def _default_mapping(self, path: str) -> Tuple[str, str]:
        basename = self._available_basename(path)
        return self.rebase(basename), os.path.join(self.copy_to, basename)

    def _explicit_mapping(self, mapping: Mapping[str, str]) -> Tuple[str, str]:
        name = mapping.get("name")
        copy_to = mapping.get("copy_to", mapping.get("copyTo"))
        if not name or not copy_to:
            raise ConfigError("map() must return a path or a mapping with 'name' and 'copy_to'")

        name = str(name).replace("\\", "/")
        copy_to = str(copy_to)
        if not self._is_taken(name, copy_to):
            return name, copy_to

        head, _, base = name.rpartition("/")
        stem, ext = os.path.splitext(base)
        copy_stem, copy_ext = os.path.splitext(copy_to)
        i = 1
        while True:
            candidate = f"{head}/{stem}_{i}{ext}" if head else f"{stem}_{i}{ext}"
            candidate_path = f"{copy_stem}_{i}{copy_ext}"
            if not self._is_taken(candidate, candidate_path):
                return candidate, candidate_path
            i += 1

    def _name_for(self, path: str) -> Tuple[str, str]:
        mapping = self._map_fn(path) if self._map_fn is not None else None
        if mapping is None:
            return self._default_mapping(path)
        if isinstance(mapping, (str, os.PathLike)):
            return self._default_mapping(os.fspath(mapping))
        if isinstance(mapping, Mapping):
            return self._explicit_mapping(mapping)
        raise ConfigError(f"map() returned an unsupported value: {mapping!r}")

    def identity_for(self, path: str) -> BinaryIdentity:
        source_path = os.path.abspath(path)
        with self._lock:
            existing = self._by_path.get(source_path)
            if existing is not None:
                return existing

            output_name, output_path = self._name_for(source_path)
            identity = BinaryIdentity(
                source_path=source_path,
                virtual_id=VIRTUAL_PREFIX + output_name,
                output_name=output_name,
                output_path=output_path,
            )
            bus.debug("build.resolve.identity", name=output_name, source=source_path)
            self._materialize(identity)

            self._by_path[source_path] = identity
            self._by_virtual_id[identity.virtual_id] = identity
            self._names.add(output_name)
            self._output_paths.add(self._path_key(output_path))
            return identity

    def identities(self) -> List[BinaryIdentity]:
        return list(self._by_path.values())
