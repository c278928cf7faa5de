"""Output formatting for the pycync CLI."""

import json
from typing import Any, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .sync.models import FileState, LocalOnly, RemoteOnly, describe_state
from .utils import format_size, short_digest

STATE_STYLES = {
    "local only": "yellow",
    "remote only": "yellow",
    "modified": "yellow",
    "identical": "green",
}


class OutputFormatter:
    """Formats messages and tables for the terminal or as JSON."""

    def __init__(
        self,
        json_output: bool = False,
        quiet: bool = False,
        console: Optional[Console] = None,
        err_console: Optional[Console] = None,
    ):
        """Initialize output formatter.

        Args:
            json_output: Emit machine-readable JSON instead of tables
            quiet: Suppress non-essential output
            console: Console for regular output
            err_console: Console for warnings and errors
        """
        self.json_output = json_output
        self.quiet = quiet
        self.console = console or Console()
        self.err_console = err_console or Console(stderr=True)

    def print(self, message: Any = "") -> None:
        self.console.print(message)

    def info(self, message: str) -> None:
        if not self.quiet and not self.json_output:
            self.console.print(message, highlight=False)

    def success(self, message: str) -> None:
        if not self.quiet and not self.json_output:
            self.console.print(f"[green]✓[/green] {message}", highlight=False)

    def warning(self, message: str) -> None:
        self.err_console.print(f"[yellow]Warning:[/yellow] {message}", highlight=False)

    def error(self, message: str) -> None:
        self.err_console.print(f"[red]Error:[/red] {message}", highlight=False)

    def output_json(self, data: Any) -> None:
        """Print data as indented JSON without markup processing."""
        self.console.print_json(json.dumps(data))

    def print_summary(self, title: str, stats: dict[str, int]) -> None:
        """Print a titled list of counters."""
        if self.quiet:
            return
        self.console.print(f"[bold]{title}[/bold]")
        for key, value in stats.items():
            self.console.print(f"  {key.replace('_', ' ')}: {value}", highlight=False)


def state_to_dict(path: str, state: FileState) -> dict[str, Any]:
    """Convert a file state to a JSON-serializable dictionary."""
    data: dict[str, Any] = {"path": path, "status": describe_state(state)}
    if isinstance(state, LocalOnly):
        data["local_digest"] = state.digest
        data["local_size"] = state.snapshot.size
    elif isinstance(state, RemoteOnly):
        data["remote_digest"] = state.digest
        data["remote_size"] = state.snapshot.size
    else:
        data["local_digest"] = state.local_digest
        data["local_size"] = state.local.size
        data["remote_digest"] = state.remote_digest
        data["remote_size"] = state.remote.size
    return data


def build_files_table(
    files: dict[str, FileState],
    cursor: Optional[int] = None,
    errors: Optional[dict[str, str]] = None,
    title: Optional[str] = None,
) -> Table:
    """Build a rich table of paths and their local/remote digests.

    Args:
        files: Unified map to render
        cursor: Row to highlight, if any
        errors: Per-path error messages shown inline
        title: Optional table title

    Returns:
        Rich Table
    """
    errors = errors or {}
    table = Table(title=title, expand=True)
    table.add_column("Path", no_wrap=True)
    table.add_column("Local Hash")
    table.add_column("Remote Hash")
    table.add_column("Size", justify="right")
    table.add_column("Status")

    for index, (path, state) in enumerate(files.items()):
        local_digest = remote_digest = ""
        if isinstance(state, LocalOnly):
            local_digest = short_digest(state.digest)
            size = state.snapshot.size
        elif isinstance(state, RemoteOnly):
            remote_digest = short_digest(state.digest)
            size = state.snapshot.size
        else:
            local_digest = short_digest(state.local_digest)
            remote_digest = short_digest(state.remote_digest)
            size = state.local.size

        status = describe_state(state)
        style = STATE_STYLES[status]
        if path in errors:
            status = f"{status} [red](error: {escape(errors[path])})[/red]"
        if index == cursor:
            style = f"{style} reverse"

        table.add_row(
            escape(path),
            local_digest,
            remote_digest,
            format_size(size),
            status,
            style=style,
        )

    return table
