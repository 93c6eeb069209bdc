"""Click CLI interface for wphmr."""

import asyncio
from pathlib import Path
from typing import Any

import click
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from wphmr.config import DEFAULT_CONFIG_FILE, WpHmrConfig, find_config_file
from wphmr.exceptions import WpHmrError
from wphmr.session import HmrSession

console = Console()


def _load_config(config: Path | None, **overrides: Any) -> tuple[WpHmrConfig, dict]:
    """Load the config file (explicit, or wphmr.yml in the cwd) plus CLI overrides."""
    config_file = config or find_config_file()
    overrides = {key: value for key, value in overrides.items() if value is not None}
    try:
        site_config = WpHmrConfig(config_file=config_file, **overrides)
        site_config.resolve_origin()
    except (WpHmrError, ValidationError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise click.Abort() from e
    return site_config, overrides


def _log_config(config: WpHmrConfig) -> None:
    """Log the configuration a command runs with."""
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Setting", style="dim", width=22)
    table.add_column("Value", style="white")

    options = config.options
    config_file = config.config_file_path
    table.add_row(
        "Config file:",
        escape(str(config_file)) if config_file else "[dim]Not set[/dim]",
    )
    table.add_row("Dev server:", escape(str(config.resolve_origin())))
    table.add_row("Plugin file:", escape(str(config.plugin_path)))
    table.add_row("Dev patterns:", escape(", ".join(options.all_dev_patterns)))
    table.add_row(
        "CSS reload events:",
        escape(", ".join(options.css_reload_events)) or "[dim]None[/dim]",
    )
    table.add_row("CSP:", options.csp.kind.value)
    table.add_row("Probe cache TTL:", f"{options.cache_ttl}s")
    table.add_row("Cleanup:", "✓" if config.cleanup else "✗")

    console.print(table)
    console.print()


config_option = click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help=f"Path to configuration file (defaults to ./{DEFAULT_CONFIG_FILE})",
)
origin_option = click.option(
    "--origin",
    help="Dev server origin, e.g. https://localhost:5173 (overrides the config)",
)


@click.group()
@click.version_option(package_name="wphmr")
def main() -> None:
    """wphmr - wire WordPress pages to a Vite dev server."""
    pass


@main.command()
@config_option
@origin_option
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory to write the plugin to",
)
def generate(config: Path | None, origin: str | None, output_dir: Path | None) -> None:
    """Write the plugin once and leave it in place."""
    site_config, overrides = _load_config(config, origin=origin, output_dir=output_dir)
    _log_config(site_config)

    session = HmrSession(site_config, overrides)
    try:
        path = session.write()
    except OSError as e:
        console.print(
            f"[red]Error:[/red] Could not write plugin: {escape(str(e))}"
        )
        raise click.Abort() from e
    console.print(f"[green]✓ Wrote[/green] [cyan]{escape(str(path))}[/cyan]")


@main.command(name="print")
@config_option
@origin_option
def print_plugin(config: Path | None, origin: str | None) -> None:
    """Print the plugin source to stdout."""
    config_file = config or find_config_file()
    # Nothing is written, so an output directory is optional here
    output_dir = None if config_file is not None else Path.cwd()
    site_config, overrides = _load_config(
        config_file, origin=origin, output_dir=output_dir
    )
    click.echo(HmrSession(site_config, overrides).render(), nl=False)


@main.command()
@config_option
@origin_option
@click.option(
    "--watch/--no-watch",
    default=None,
    help="Regenerate the plugin when the config file changes",
)
@click.option(
    "--follow/--no-follow",
    default=None,
    help="End the session when the dev server stops",
)
def dev(
    config: Path | None,
    origin: str | None,
    watch: bool | None,
    follow: bool | None,
) -> None:
    """Keep the plugin in place for a dev session, removing it afterwards."""
    site_config, overrides = _load_config(
        config, origin=origin, watch_config=watch, follow_server=follow
    )
    _log_config(site_config)

    session = HmrSession(site_config, overrides)
    console.print("[dim]Press Ctrl+C to stop[/dim]")

    try:
        asyncio.run(session.run())
    except KeyboardInterrupt:
        console.print("\n[yellow]Development session stopped.[/yellow]")
    except OSError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise click.Abort() from e


@main.command()
@config_option
def clean(config: Path | None) -> None:
    """Remove a previously generated plugin."""
    site_config, overrides = _load_config(config)

    session = HmrSession(site_config, overrides)
    plugin_path = escape(str(session.plugin_path))
    if session.remove():
        console.print(f"[yellow]Removed[/yellow] [cyan]{plugin_path}[/cyan]")
    else:
        console.print(f"[dim]Nothing to remove at {plugin_path}[/dim]")


@main.command()
@click.argument("project_path", type=click.Path(path_type=Path), default=".")
@click.option(
    "--output-dir",
    "-o",
    default="wp-content/mu-plugins",
    help="Plugin directory, relative to the project",
)
@click.option(
    "--force", is_flag=True, help="Overwrite an existing configuration file"
)
def init(project_path: Path, output_dir: str, force: bool) -> None:
    """Create a starter wphmr.yml in PROJECT_PATH."""
    project_path = project_path.resolve()
    project_path.mkdir(parents=True, exist_ok=True)
    config_file = project_path / DEFAULT_CONFIG_FILE

    if config_file.exists() and not force:
        console.print(
            f"[yellow]Configuration already exists at[/yellow] "
            f"{escape(str(config_file))}"
        )
        console.print("Use [cyan]--force[/cyan] to overwrite")
        return

    defaults = WpHmrConfig(output_dir=Path(output_dir))
    config_dict = defaults.model_dump(mode="json", exclude={"origin"})
    config_dict["output_dir"] = output_dir

    with open(config_file, "w", encoding="utf-8") as f:
        yaml.dump(config_dict, f, default_flow_style=False, indent=2, sort_keys=False)

    panel = Panel.fit(
        f"[green]✓ Created {escape(str(config_file))}[/green]\n\n"
        f"[dim]Next steps:[/dim]\n"
        f"1. Start the Vite dev server\n"
        f"2. wphmr dev -c {escape(str(config_file))}",
        title="Project Initialized",
        border_style="green",
    )
    console.print(panel)


if __name__ == "__main__":
    main()
