"""
CLI module - Command line interface for streamnode

Entry point for the `streamnode` command using Typer.
"""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import __version__
from .bootstrap import bootstrap
from .config import ConfigError, read_config
from .identity import IdentityError
from .probe import FfprobeSourceProbe, ProbeError, SourceProbe, StaticSourceProbe
from .profiles import SourceCapabilities, resolve
from .settings import AppSettings, load_settings

console = Console()
app = typer.Typer(
    name="streamnode",
    help="streamnode - Runtime configuration bootstrap for a self-hosted streaming node.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def version_callback(value: bool):
    if value:
        console.print(f"streamnode version {__version__}")
        raise typer.Exit()


# Type aliases for common options
SettingsOption = Annotated[
    Path | None,
    typer.Option("--settings", "-s", help="Path to settings file", exists=True, dir_okay=False),
]


def setup_logging(level: str):
    """Route log records through Rich on stderr."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def get_settings(settings_path: Path | None = None) -> AppSettings:
    """Load settings and configure logging from them."""
    settings = load_settings(settings_path)
    setup_logging(settings.logging.level)
    return settings


def _short_seed(seed: str) -> str:
    return f"{seed[:8]}…{seed[-4:]}"


@app.callback()
def main(
    version: Annotated[
        bool, typer.Option("--version", "-v", callback=version_callback, is_eager=True, help="Show version")
    ] = False,
):
    """streamnode - Runtime configuration bootstrap for a self-hosted streaming node."""
    pass


@app.command()
def init(settings: SettingsOption = None):
    """
    Create config.json and mediamtx.yml if missing, then load the config.

    Existing files are never modified.

    [bold]Examples:[/bold]

        streamnode init

        STREAMNODE_CONFIG=/etc/streamnode/config.json streamnode init
    """
    app_settings = get_settings(settings)

    try:
        config = bootstrap(app_settings)
    except (ConfigError, IdentityError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None

    console.print(f"[bold]Config:[/bold] {app_settings.paths.config_file}")
    console.print(f"[bold]MediaMTX:[/bold] {app_settings.paths.mediamtx_config}")
    console.print(f"[bold]Title:[/bold] {config.title}")
    console.print(f"[bold]Seed:[/bold] {_short_seed(config.seed)}")
    console.print("[green]Ready.[/green]")


@app.command()
def show(settings: SettingsOption = None):
    """Show the stream configuration."""
    app_settings = get_settings(settings)
    config_file = app_settings.paths.config_file

    if not config_file.exists():
        console.print(f"[red]Error:[/red] {config_file} not found (run [cyan]streamnode init[/cyan] first)")
        raise typer.Exit(1)

    try:
        config = read_config(config_file)
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None

    table = Table(title="Stream Configuration")
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    table.add_row("Title", config.title)
    table.add_row("Owner", config.owner or "[dim]-[/dim]")
    table.add_row("Seed", _short_seed(config.seed))
    table.add_row("Transcoders", ", ".join(config.transcoders) or "[dim]none[/dim]")

    console.print(table)


@app.command()
def profiles(
    resolution: Annotated[int | None, typer.Option("--resolution", "-r", min=1, help="Source resolution")] = None,
    framerate: Annotated[int | None, typer.Option("--framerate", "-f", min=1, help="Source framerate")] = None,
    probe_url: Annotated[str | None, typer.Option("--probe", "-p", help="Probe source stream URL with ffprobe")] = None,
    tokens: Annotated[
        list[str] | None, typer.Option("--token", "-t", help="Transcode token (default: from config)")
    ] = None,
    settings: SettingsOption = None,
):
    """
    Resolve transcode tokens against the source stream.

    Tokens look like [cyan]1080p30[/cyan] or [cyan]720p[/cyan] (30 fps).
    Upscales and no-op targets are skipped, framerates are capped at the source.

    [bold]Examples:[/bold]

        streamnode profiles -r 1080 -f 60

        streamnode profiles -r 1080 -f 30 -t 720p60 -t 480p

        streamnode profiles --probe rtmp://localhost/live/stream
    """
    app_settings = get_settings(settings)

    probe: SourceProbe
    if probe_url:
        probe = FfprobeSourceProbe(probe_url, app_settings.probe.ffprobe, app_settings.probe.timeout)
    elif resolution is not None and framerate is not None:
        probe = StaticSourceProbe(resolution, framerate)
    else:
        console.print("[red]Error:[/red] Give --resolution and --framerate, or --probe URL")
        raise typer.Exit(2)

    if not tokens:
        config_file = app_settings.paths.config_file
        if not config_file.exists():
            console.print(f"[red]Error:[/red] {config_file} not found (run [cyan]streamnode init[/cyan] first)")
            raise typer.Exit(1)
        try:
            tokens = read_config(config_file).transcoders
        except ConfigError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1) from None

    try:
        source = SourceCapabilities.from_probe(probe)
    except ProbeError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None

    result = resolve(tokens, source)

    console.print(f"[bold]Source:[/bold] {source.resolution}p{source.framerate}")
    console.print()

    table = Table(title="Transcode Profiles")
    table.add_column("Profile", style="cyan")
    table.add_column("Resolution", justify="right")
    table.add_column("Framerate", justify="right")
    for prof in result.profiles:
        table.add_row(prof.label, str(prof.resolution), str(prof.framerate))
    console.print(table)

    if result.clamped:
        console.print(f"[yellow]Framerate lowered to {source.framerate}:[/yellow] {', '.join(result.clamped)}")

    if result.rejections:
        skipped = Table(title="Skipped")
        skipped.add_column("Token", style="cyan")
        skipped.add_column("Reason")
        skipped.add_column("Details", style="dim")
        for rejection in result.rejections:
            skipped.add_row(rejection.token, rejection.reason.value, rejection.detail)
        console.print(skipped)


def main_cli():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main_cli()
