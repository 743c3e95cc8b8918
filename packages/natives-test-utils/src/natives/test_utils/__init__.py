__path__ = __import__("pkgutil").extend_path(__path__, __name__)

from .bus import SpyBus
from .helpers import TEST_TARGET, create_test_app, create_test_config, create_test_plugin
from .workspace import WorkspaceFactory

__all__ = [
    "SpyBus",
    "WorkspaceFactory",
    "TEST_TARGET",
    "create_test_app",
    "create_test_config",
    "create_test_plugin",
]
