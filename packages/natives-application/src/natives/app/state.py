from typing import List, Optional

from natives.spec import FileSystemAdapter, PlatformInfo
from natives.workspace import ModuleRootLocator, NativesConfig

from .materializer import BuildWarning, Materializer
from .registry import IdentityRegistry


class BuildState:
    """
    Everything one build run accumulates.

    Created at build start and dropped at build end, so nothing leaks from
    one build into the next.
    """

    def __init__(self, config: NativesConfig, fs: FileSystemAdapter):
        self.config = config
        self.fs = fs
        self.warnings: List[BuildWarning] = []
        self.roots = ModuleRootLocator()
        self.materializer = Materializer(
            fs,
            origin_redirect=config.origin_redirect,
            on_warning=self.warnings.append,
        )
        self.registry = IdentityRegistry(
            copy_to=config.copy_to,
            dest_dir=config.dest_dir,
            materialize=self.materializer.materialize,
            map_fn=config.map,
        )
        self._platform_info: Optional[PlatformInfo] = None

    @property
    def platform_info(self) -> PlatformInfo:
        # Deferred until the first idiom needs resolving.
        if self._platform_info is None:
            self._platform_info = self.config.platform_info()
        return self._platform_info
