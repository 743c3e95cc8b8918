from natives.app import Materializer
from natives.common import RealFileSystem
from natives.spec import VIRTUAL_PREFIX, BinaryIdentity


def make_identity(source, dest):
    return BinaryIdentity(
        source_path=str(source),
        virtual_id=VIRTUAL_PREFIX + "./addon.node",
        output_name="./addon.node",
        output_path=str(dest),
    )


def test_existing_binary_is_copied(tmp_path):
    src = tmp_path / "build" / "addon.node"
    src.parent.mkdir()
    src.write_bytes(b"ELF")
    dest = tmp_path / "out" / "addon.node"

    copied = Materializer(RealFileSystem()).materialize(make_identity(src, dest))

    assert copied is True
    assert dest.read_bytes() == b"ELF"


def test_missing_binary_records_a_warning(tmp_path, spy_bus):
    # 1. Arrange
    warnings = []
    materializer = Materializer(RealFileSystem(), on_warning=warnings.append)
    dest = tmp_path / "out" / "addon.node"

    # 2. Act
    copied = materializer.materialize(make_identity(tmp_path / "ghost.node", dest))

    # 3. Assert
    assert copied is False
    assert not dest.exists()
    assert len(warnings) == 1
    assert warnings[0].kind == "missing_binary"
    assert warnings[0].path == str(tmp_path / "ghost.node")
    assert "./addon.node" in warnings[0].message
    spy_bus.assert_id_called("build.materialize.missing", level="warning")


def test_origin_redirect_substitutes_the_source(tmp_path):
    prebuilt = tmp_path / "prebuilt" / "addon-linux-x64.node"
    prebuilt.parent.mkdir()
    prebuilt.write_bytes(b"PREBUILT")
    dest = tmp_path / "out" / "addon.node"
    calls = []

    def redirect(source, exists):
        calls.append((source, exists))
        return str(prebuilt)

    copied = Materializer(RealFileSystem(), origin_redirect=redirect).materialize(
        make_identity(tmp_path / "build" / "addon.node", dest)
    )

    assert copied is True
    assert calls == [(str(tmp_path / "build" / "addon.node"), False)]
    assert dest.read_bytes() == b"PREBUILT"


def test_origin_redirect_returning_none_keeps_the_source(tmp_path):
    src = tmp_path / "addon.node"
    src.write_bytes(b"ORIGINAL")
    dest = tmp_path / "out" / "addon.node"

    Materializer(RealFileSystem(), origin_redirect=lambda s, e: None).materialize(
        make_identity(src, dest)
    )

    assert dest.read_bytes() == b"ORIGINAL"


def test_copy_onto_itself_is_a_warning_not_a_crash(tmp_path, spy_bus):
    # 1. Arrange
    src = tmp_path / "build" / "Release" / "addon.node"
    src.parent.mkdir(parents=True)
    src.write_bytes(b"ELF")
    warnings = []
    materializer = Materializer(RealFileSystem(), on_warning=warnings.append)

    # 2. Act
    copied = materializer.materialize(make_identity(src, src))

    # 3. Assert
    assert copied is False
    assert src.read_bytes() == b"ELF"
    assert [w.kind for w in warnings] == ["copy_failed"]
    assert warnings[0].path == str(src)
    spy_bus.assert_id_called("build.materialize.failed", level="warning")


def test_directory_in_place_of_destination_is_a_warning(tmp_path):
    src = tmp_path / "addon.node"
    src.write_bytes(b"ELF")
    dest = tmp_path / "out" / "addon.node"
    dest.mkdir(parents=True)
    warnings = []

    copied = Materializer(RealFileSystem(), on_warning=warnings.append).materialize(
        make_identity(src, dest)
    )

    assert copied is False
    assert [w.kind for w in warnings] == ["copy_failed"]
    assert dest.is_dir()
