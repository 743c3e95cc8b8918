__path__ = __import__("pkgutil").extend_path(__path__, __name__)

from .models import (
    VIRTUAL_PREFIX,
    NATIVE_EXTENSIONS,
    IdiomKind,
    DeliveryMode,
    BinaryIdentity,
    IdiomMatch,
    ResolvedMatch,
    PlatformInfo,
    TransformResult,
)
from .protocols import (
    FileSystemAdapter,
    MappingOverride,
    MapFunction,
    OriginRedirect,
)

__all__ = [
    "VIRTUAL_PREFIX",
    "NATIVE_EXTENSIONS",
    "IdiomKind",
    "DeliveryMode",
    "BinaryIdentity",
    "IdiomMatch",
    "ResolvedMatch",
    "PlatformInfo",
    "TransformResult",
    "FileSystemAdapter",
    "MappingOverride",
    "MapFunction",
    "OriginRedirect",
]
