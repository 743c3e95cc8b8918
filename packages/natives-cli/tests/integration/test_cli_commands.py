import pytest
from typer.testing import CliRunner

from natives.cli.main import app
from natives.test_utils import TEST_TARGET

runner = CliRunner()

ADDON_SOURCE = "module.exports = require('bindings')('addon');\n"


@pytest.fixture
def project(workspace_factory, monkeypatch):
    monkeypatch.chdir(workspace_factory.root_path)
    return workspace_factory.with_config(TEST_TARGET).with_package_json("pkg")


def test_relocate_rewrites_and_copies(project):
    root = (
        project.with_binary("pkg/build/Release/addon.node", b"ADDON")
        .with_source("pkg/index.js", ADDON_SOURCE)
        .build()
    )

    result = runner.invoke(app, ["relocate", "pkg", "--out", "dist"], catch_exceptions=False)

    assert result.exit_code == 0
    assert "Relocated 1 native binary file(s) into" in result.stdout
    assert "rewrote 1 file(s)" in result.stdout
    assert "natives:./addon.node" in (root / "dist" / "index.js").read_text(encoding="utf-8")
    assert (root / "dist" / "index.js.map").exists()
    assert (root / "addon.node").read_bytes() == b"ADDON"


def test_relocate_copy_to_and_no_sourcemap(project):
    root = (
        project.with_binary("pkg/build/Release/addon.node")
        .with_source("pkg/index.js", ADDON_SOURCE)
        .build()
    )

    result = runner.invoke(
        app,
        ["relocate", "pkg", "-o", "dist", "--copy-to", "dist/native", "--dest-dir", "native", "--no-sourcemap"],
        catch_exceptions=False,
    )

    assert result.exit_code == 0
    assert (root / "dist" / "native" / "addon.node").exists()
    assert not (root / "dist" / "index.js.map").exists()
    assert "natives:native/addon.node" in (root / "dist" / "index.js").read_text(encoding="utf-8")


def test_dry_run_leaves_disk_untouched(project):
    root = (
        project.with_binary("pkg/build/Release/addon.node")
        .with_source("pkg/index.js", ADDON_SOURCE)
        .build()
    )

    result = runner.invoke(
        app, ["relocate", "pkg", "--out", "dist", "--copy-to", "dist", "--dry-run"], catch_exceptions=False
    )

    assert result.exit_code == 0
    assert "Dry run: 1 file(s) would be rewritten" in result.stdout
    assert not (root / "dist").exists()


def test_loglevel_warning_hides_info_and_success(project):
    project.with_source("pkg/index.js", ADDON_SOURCE).build()

    result = runner.invoke(
        app, ["--loglevel", "warning", "relocate", "pkg", "--out", "dist"], catch_exceptions=False
    )

    assert result.exit_code == 0
    assert "Relocating native addons" not in result.stdout
    assert "Relocated 1 native binary file(s)" not in result.stdout
    assert "Native binary not found" in result.stdout
    assert "1 warning(s) were recorded" in result.stdout


def test_loglevel_debug_shows_copy_details(project):
    project.with_binary("pkg/build/Release/addon.node").with_source("pkg/index.js", ADDON_SOURCE).build()

    result = runner.invoke(
        app, ["--loglevel", "debug", "relocate", "pkg", "--out", "dist"], catch_exceptions=False
    )

    assert result.exit_code == 0
    assert "Copied " in result.stdout
    assert "Assigned ./addon.node to " in result.stdout


def test_strict_fails_on_warnings(project):
    project.with_source("pkg/index.js", ADDON_SOURCE).build()

    result = runner.invoke(app, ["relocate", "pkg", "--out", "dist", "--strict"], catch_exceptions=False)

    assert result.exit_code == 1


def test_missing_path_is_an_error(project):
    project.build()

    result = runner.invoke(app, ["relocate", "nowhere", "--out", "dist"], catch_exceptions=False)

    assert result.exit_code == 1
    assert "Path does not exist: nowhere" in result.stdout


def test_invalid_mode_is_a_config_error(project):
    project.with_source("pkg/index.js", ADDON_SOURCE).build()

    result = runner.invoke(
        app, ["relocate", "pkg", "--out", "dist", "--mode", "wasm"], catch_exceptions=False
    )

    assert result.exit_code == 1
    assert "Invalid configuration: Invalid mode 'wasm'" in result.stdout


def test_invalid_project_config_is_reported(workspace_factory, monkeypatch):
    monkeypatch.chdir(workspace_factory.root_path)
    workspace_factory.with_config({"copy_to": "dist", "unknown_key": 1}).build()

    result = runner.invoke(app, ["scan", "."], catch_exceptions=False)

    assert result.exit_code == 1
    assert "Unknown option 'unknown_key'" in result.stdout


def test_scan_reports_occurrences(project):
    project.with_binary("pkg/build/Release/addon.node").with_source("pkg/index.js", ADDON_SOURCE).build()

    result = runner.invoke(app, ["scan", "pkg"], catch_exceptions=False)

    assert result.exit_code == 0
    assert "index.js:1: generic_lookup -> " in result.stdout
    assert "Found 1 native reference(s) in 1 file(s)." in result.stdout


def test_scan_without_occurrences(project):
    project.with_source("pkg/index.js", "module.exports = 1;\n").build()

    result = runner.invoke(app, ["scan", "pkg"], catch_exceptions=False)

    assert result.exit_code == 0
    assert "No native addon references found." in result.stdout
