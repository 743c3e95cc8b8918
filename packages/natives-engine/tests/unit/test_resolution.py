import json
import os

from natives.engine import DetectionContext, resolve_match
from natives.spec import IdiomKind, IdiomMatch, PlatformInfo

TARGET = PlatformInfo(platform="darwin", arch="arm64", version="20.5.0", modules_abi="115", napi_version=9)


def make_ctx(root, *existing):
    return DetectionContext(
        file_path=os.path.join(root, "lib", "index.js"),
        exists=set(existing).__contains__,
        locate_root=lambda p: root,
    )


def test_generic_lookup_resolves_through_candidates(tmp_path):
    root = str(tmp_path)
    compiled = os.path.join(root, "compiled", "20.5.0", "darwin", "arm64", "addon.node")
    match = IdiomMatch(IdiomKind.GENERIC_LOOKUP, 0, 10, {"alias": "addon.node"})

    assert resolve_match(match, make_ctx(root, compiled), TARGET) == compiled


def test_direct_literal_uses_detected_path(tmp_path):
    binary = os.path.join(str(tmp_path), "lib", "addon.node")
    match = IdiomMatch(IdiomKind.DIRECT_LITERAL, 0, 10, {"specifier": "./addon", "path": binary})

    assert resolve_match(match, make_ctx(str(tmp_path)), TARGET) == binary


def test_pre_gyp_lookup_reads_descriptor_through_reader(tmp_path):
    root = str(tmp_path)
    descriptor = os.path.join(root, "package.json")
    contents = {
        descriptor: json.dumps(
            {
                "name": "addon",
                "version": "3.0.0",
                "binary": {"module_name": "addon", "module_path": "lib/{platform}-{arch}"},
            }
        )
    }
    match = IdiomMatch(IdiomKind.PRE_GYP_LOOKUP, 0, 10, {"package_json": descriptor})

    resolved = resolve_match(match, make_ctx(root), TARGET, read_text=contents.__getitem__)

    assert resolved == os.path.join(root, "lib", "darwin-arm64", "addon.node")


def test_unusable_pre_gyp_descriptor_resolves_to_none(tmp_path):
    match = IdiomMatch(
        IdiomKind.PRE_GYP_LOOKUP, 0, 10, {"package_json": os.path.join(str(tmp_path), "package.json")}
    )

    assert resolve_match(match, make_ctx(str(tmp_path)), TARGET) is None
