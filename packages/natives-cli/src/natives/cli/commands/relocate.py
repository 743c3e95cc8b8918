from pathlib import Path
from typing import Optional

import typer

from natives.common import bus, natives_operator as nexus
from natives.cli.factories import make_app
from natives.workspace import ConfigError


def relocate_command(
    path: Path = typer.Argument(..., help=nexus("cli.option.path.help")),
    out: Path = typer.Option(..., "--out", "-o", help=nexus("cli.option.out.help")),
    copy_to: Optional[str] = typer.Option(None, "--copy-to", help=nexus("cli.option.copy_to.help")),
    dest_dir: Optional[str] = typer.Option(None, "--dest-dir", help=nexus("cli.option.dest_dir.help")),
    mode: Optional[str] = typer.Option(None, "--mode", help=nexus("cli.option.mode.help")),
    platform: Optional[str] = typer.Option(None, "--platform", help=nexus("cli.option.platform.help")),
    arch: Optional[str] = typer.Option(None, "--arch", help=nexus("cli.option.arch.help")),
    sourcemap: Optional[bool] = typer.Option(
        None, "--sourcemap/--no-sourcemap", help=nexus("cli.option.sourcemap.help")
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help=nexus("cli.option.dry_run.help")),
    strict: bool = typer.Option(False, "--strict", help=nexus("cli.option.strict.help")),
):
    if not path.exists():
        bus.error("error.path.not_found", path=path)
        raise typer.Exit(code=1)

    try:
        app_instance = make_app(
            {
                "copy_to": copy_to,
                "dest_dir": dest_dir,
                "mode": mode,
                "target_platform": platform,
                "target_arch": arch,
                "sourcemap": sourcemap,
            }
        )
    except ConfigError as e:
        bus.error("error.config.invalid", error=str(e))
        raise typer.Exit(code=1)

    report = app_instance.run_relocate(path, out, dry_run=dry_run)

    if strict and report.warnings:
        raise typer.Exit(code=1)
