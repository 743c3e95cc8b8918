__path__ = __import__("pkgutil").extend_path(__path__, __name__)

from .core import NativesApp, RelocationReport, ScanEntry, DryRunFileSystem
from .exporter import export_stub
from .materializer import Materializer, BuildWarning
from .plugin import NativesPlugin, Occurrence
from .registry import IdentityRegistry
from .state import BuildState

__all__ = [
    "NativesApp",
    "RelocationReport",
    "ScanEntry",
    "DryRunFileSystem",
    "export_stub",
    "Materializer",
    "BuildWarning",
    "NativesPlugin",
    "Occurrence",
    "IdentityRegistry",
    "BuildState",
]
