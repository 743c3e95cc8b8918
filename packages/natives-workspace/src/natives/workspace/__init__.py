__path__ = __import__("pkgutil").extend_path(__path__, __name__)

from .core import find_module_root, ModuleRootLocator
from .config import NativesConfig, load_config_from_path
from .platform import resolve_platform_info, host_platform, host_arch
from .exceptions import WorkspaceError, ConfigError

__all__ = [
    "find_module_root",
    "ModuleRootLocator",
    "NativesConfig",
    "load_config_from_path",
    "resolve_platform_info",
    "host_platform",
    "host_arch",
    "WorkspaceError",
    "ConfigError",
]
