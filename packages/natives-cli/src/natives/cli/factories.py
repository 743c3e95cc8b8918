from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Optional

from natives.app import NativesApp
from natives.workspace import NativesConfig, load_config_from_path


def make_config(root_path: Path, overrides: Optional[Dict[str, Any]] = None) -> NativesConfig:
    """[tool.natives] from the project, with command line values layered on top."""
    config = load_config_from_path(root_path)
    values = {k: v for k, v in (overrides or {}).items() if v is not None}
    if "copy_to" in values and not Path(values["copy_to"]).is_absolute():
        values["copy_to"] = str(root_path / values["copy_to"])
    return replace(config, **values)


def make_app(overrides: Optional[Dict[str, Any]] = None) -> NativesApp:
    root_path = Path.cwd()
    return NativesApp(root_path=root_path, config=make_config(root_path, overrides))
