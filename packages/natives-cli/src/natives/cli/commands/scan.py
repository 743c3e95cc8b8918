from pathlib import Path
from typing import Optional

import typer

from natives.common import bus, natives_operator as nexus
from natives.cli.factories import make_app
from natives.workspace import ConfigError


def scan_command(
    path: Path = typer.Argument(
        Path("."),
        help=nexus("cli.option.path.help"),
    ),
    platform: Optional[str] = typer.Option(None, "--platform", help=nexus("cli.option.platform.help")),
    arch: Optional[str] = typer.Option(None, "--arch", help=nexus("cli.option.arch.help")),
):
    if not path.exists():
        bus.error("error.path.not_found", path=path)
        raise typer.Exit(code=1)

    try:
        app_instance = make_app({"target_platform": platform, "target_arch": arch})
    except ConfigError as e:
        bus.error("error.config.invalid", error=str(e))
        raise typer.Exit(code=1)

    app_instance.run_scan(path)
