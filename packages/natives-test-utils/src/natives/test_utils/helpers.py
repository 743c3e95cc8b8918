from pathlib import Path
from typing import Any, Union

from natives.app import NativesApp, NativesPlugin
from natives.workspace import NativesConfig

# A fixed target, so tests never depend on a node executable being installed.
TEST_TARGET = {
    "target_platform": "linux",
    "target_arch": "x64",
    "target_version": "18.17.0",
    "target_modules_abi": "108",
    "target_napi_version": 8,
    "target_libc": "glibc",
}


def create_test_config(copy_to: Union[str, Path], **overrides: Any) -> NativesConfig:
    values = dict(TEST_TARGET)
    values.update(overrides)
    return NativesConfig(copy_to=str(copy_to), **values)


def create_test_plugin(copy_to: Union[str, Path], **overrides: Any) -> NativesPlugin:
    return NativesPlugin(create_test_config(copy_to, **overrides))


def create_test_app(root_path: Path, copy_to: Union[str, Path], **overrides: Any) -> NativesApp:
    return NativesApp(root_path=root_path, config=create_test_config(copy_to, **overrides))
