"""Writing, refreshing and removing the generated plugin during development."""

import asyncio
from contextlib import suppress
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from watchfiles import Change, awatch

from wphmr.assembler import assemble
from wphmr.config import WpHmrConfig
from wphmr.exceptions import WpHmrError
from wphmr.logger import get_logger

console = Console()
logger = get_logger(__name__)

# Seconds a single reachability check may take
CONNECT_TIMEOUT = 1.0


async def is_reachable(host: str, port: int, timeout: float = CONNECT_TIMEOUT) -> bool:
    """Check whether something accepts TCP connections on ``host:port``."""
    try:
        _reader, writer = await asyncio.wait_for(
            asyncio.open_connection(host, port), timeout
        )
    except (OSError, asyncio.TimeoutError):
        return False

    writer.close()
    with suppress(OSError):
        await writer.wait_closed()
    return True


class HmrSession:
    """Owns the plugin file for the lifetime of one dev server session.

    Used as a context manager the plugin is written on enter and, when
    ``cleanup`` is set, removed on exit. ``run`` does the same around a
    long-running loop that keeps the file in sync with the config file.
    """

    def __init__(
        self, config: WpHmrConfig, overrides: dict[str, Any] | None = None
    ) -> None:
        self.config = config
        # Re-applied on top of the config file when it is reloaded
        self.overrides = overrides or {}

    @property
    def plugin_path(self) -> Path:
        return self.config.plugin_path

    def render(self) -> str:
        """Generate the plugin source for the current configuration."""
        return assemble(self.config.resolve_origin(), self.config.options)

    def write(self) -> Path:
        """Write the plugin, creating the output directory if needed."""
        # Render first so an invalid origin never leaves a partial file behind
        php = self.render()
        path = self.plugin_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(php, encoding="utf-8")
        logger.info(f"Wrote {path} for {self.config.resolve_origin()}")
        return path

    def remove(self) -> bool:
        """Remove the plugin file. Returns whether a file was removed."""
        path = self.plugin_path
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.warning(f"Could not remove {path}: {e}")
            return False

        logger.info(f"Removed {path}")
        return True

    def __enter__(self) -> "HmrSession":
        self.write()
        return self

    def __exit__(self, *exc_info: object) -> None:
        if self.config.cleanup:
            self.remove()

    def reload(self) -> bool:
        """Reload the config file and rewrite the plugin.

        An invalid config keeps the previous plugin in place. Returns whether
        the plugin was rewritten.
        """
        config_file = self.config.config_file_path
        if config_file is None:
            return False

        try:
            new_config = WpHmrConfig(config_file=config_file, **self.overrides)
            new_config.resolve_origin()
        except (WpHmrError, ValidationError) as e:
            console.print(
                f"[red]Error reloading {escape(str(config_file))}:[/red] "
                f"{escape(str(e))}"
            )
            return False

        old_path = self.plugin_path
        self.config = new_config
        if old_path != self.plugin_path and new_config.cleanup:
            with suppress(FileNotFoundError):
                old_path.unlink()

        self.write()
        return True

    async def watch_config(self) -> None:
        """Rewrite the plugin whenever the config file changes."""
        config_file = self.config.config_file_path
        if config_file is None:
            return

        def _is_config_file(change: Change, path: str) -> bool:
            return Path(path).name == config_file.name

        console.print(
            f"[dim]Watching for changes in:[/dim] {escape(str(config_file))}"
        )
        async for _changes in awatch(
            config_file.parent, watch_filter=_is_config_file, recursive=False
        ):
            if not config_file.exists():
                continue
            if self.reload():
                console.print(
                    f"[yellow]Configuration changed, regenerated[/yellow] "
                    f"{escape(str(self.plugin_path))}"
                )

    async def follow_server(self) -> None:
        """Return once the dev server, having been reachable, goes away."""
        seen_running = False
        while True:
            origin = self.config.resolve_origin()
            running = await is_reachable(origin.hostname, origin.port)
            if running and not seen_running:
                console.print(
                    f"[green]Dev server is up at[/green] "
                    f"[cyan]{escape(str(origin))}[/cyan]"
                )
                seen_running = True
            elif not running and seen_running:
                console.print("[yellow]Dev server stopped, ending session[/yellow]")
                return

            await asyncio.sleep(self.config.poll_interval)

    async def run(self) -> None:
        """Write the plugin and keep it until cancelled or the server stops."""
        path = self.write()
        console.print(f"[green]✓ Wrote[/green] [cyan]{escape(str(path))}[/cyan]")

        tasks: list[asyncio.Task] = []
        if self.config.watch_config and self.config.config_file_path is not None:
            tasks.append(asyncio.create_task(self.watch_config()))
        if self.config.follow_server:
            tasks.append(asyncio.create_task(self.follow_server()))

        try:
            if tasks:
                done, _pending = await asyncio.wait(
                    tasks, return_when=asyncio.FIRST_COMPLETED
                )
                for task in done:
                    # Surface errors raised inside the watcher or monitor
                    task.result()
            else:
                await asyncio.Event().wait()
        finally:
            for task in tasks:
                task.cancel()
                with suppress(asyncio.CancelledError):
                    await task

            if self.config.cleanup and self.remove():
                console.print(
                    f"[yellow]Removed[/yellow] [cyan]{escape(str(path))}[/cyan]"
                )
