import shutil
from pathlib import Path
from typing import Union


class RealFileSystem:
    """FileSystemAdapter backed by the local disk."""

    def exists(self, path: Union[str, Path]) -> bool:
        return Path(path).exists()

    def is_dir(self, path: Union[str, Path]) -> bool:
        return Path(path).is_dir()

    def mkdir(self, path: Union[str, Path]) -> None:
        Path(path).mkdir(parents=True, exist_ok=True)

    def copy_file(self, src: Union[str, Path], dest: Union[str, Path]) -> None:
        dest_path = Path(dest)
        dest_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(src, dest_path)

    def read_text(self, path: Union[str, Path]) -> str:
        return Path(path).read_text(encoding="utf-8")

    def write_text(self, path: Union[str, Path], content: str) -> None:
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
