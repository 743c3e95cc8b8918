from natives.common import RealFileSystem


def test_copy_file_creates_missing_parent_directories(tmp_path):
    fs = RealFileSystem()
    src = tmp_path / "build" / "addon.node"
    src.parent.mkdir()
    src.write_bytes(b"\x00\x01binary")
    dest = tmp_path / "out" / "nested" / "addon.node"

    fs.copy_file(src, dest)

    assert dest.read_bytes() == b"\x00\x01binary"
    assert fs.exists(dest)
    assert fs.is_dir(dest.parent)


def test_mkdir_is_idempotent(tmp_path):
    fs = RealFileSystem()
    target = tmp_path / "a" / "b"

    fs.mkdir(target)
    fs.mkdir(target)

    assert target.is_dir()


def test_text_round_trip_is_utf8(tmp_path):
    fs = RealFileSystem()
    target = tmp_path / "out" / "index.js"

    fs.write_text(target, "const s = 'é';\n")

    assert fs.read_text(target) == "const s = 'é';\n"
