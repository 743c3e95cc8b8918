from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


VIRTUAL_PREFIX = "\0natives:"
NATIVE_EXTENSIONS = (".node", ".dll")


class IdiomKind(str, Enum):
    GENERIC_LOOKUP = "generic_lookup"
    DIRECT_LITERAL = "direct_literal"
    PRE_GYP_LOOKUP = "pre_gyp_lookup"


class DeliveryMode(str, Enum):
    """How the generated stub loads a relocated binary at runtime."""

    PLAIN = "plain"
    DLOPEN = "dlopen"
    ESM = "esm"


@dataclass(frozen=True)
class BinaryIdentity:
    """
    The build-wide identity of one native binary.

    `output_name` is the reference path as written inside the bundle,
    `output_path` is where the bytes are copied to on disk.
    """

    source_path: str
    virtual_id: str
    output_name: str
    output_path: str

    @property
    def output_basename(self) -> str:
        return self.output_name.rsplit("/", 1)[-1]


@dataclass(frozen=True)
class IdiomMatch:
    kind: IdiomKind
    start: int
    end: int
    params: Dict[str, Any] = field(default_factory=dict)

    @property
    def span(self):
        return (self.start, self.end)

    def overlaps(self, other: "IdiomMatch") -> bool:
        return self.start < other.end and other.start < self.end


@dataclass(frozen=True)
class ResolvedMatch:
    """An idiom occurrence paired with the identity it now points to."""

    match: IdiomMatch
    identity: BinaryIdentity


@dataclass(frozen=True)
class PlatformInfo:
    platform: str
    arch: str
    version: str
    modules_abi: str
    napi_version: Optional[int] = None
    libc: str = "glibc"


@dataclass
class TransformResult:
    code: str
    map: Optional[Dict[str, Any]] = None
