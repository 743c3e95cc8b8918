import typer

from natives.common import bus, natives_operator as nexus
from .commands.relocate import relocate_command
from .commands.scan import scan_command
from .rendering import CliRenderer, LogLevel

app = typer.Typer(
    name="natives",
    help=nexus("cli.app.help"),
    no_args_is_help=True,
)


@app.callback()
def main(
    loglevel: LogLevel = typer.Option(
        LogLevel.INFO,
        "--loglevel",
        help=nexus("cli.option.loglevel.help"),
        case_sensitive=False,
    ),
):
    bus.set_renderer(CliRenderer(loglevel=loglevel))


app.command(name="scan", help=nexus("cli.command.scan.help"))(scan_command)
app.command(name="relocate", help=nexus("cli.command.relocate.help"))(relocate_command)
