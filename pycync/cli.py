"""CLI interface for pycync."""

import logging
from pathlib import Path
from typing import Any, Optional

import click

from .config import (
    DEFAULT_LOCAL_DIRECTORY_NAME,
    DEFAULT_REMOTE_DIRECTORY,
    Settings,
    config,
)
from .exceptions import CyncError, InvalidAction
from .output import OutputFormatter, build_files_table, state_to_dict
from .review import ReviewSession
from .store import S3ContentStore
from .sync import LocalTreeScanner, SyncAction, SyncController, summarize

logger = logging.getLogger(__name__)


def build_controller(ctx: Any, settings: Settings) -> SyncController:
    """Create a controller wired to the configured bucket and directory.

    Args:
        ctx: Click context holding global options
        settings: Resolved settings

    Returns:
        SyncController with no files loaded yet
    """
    store = S3ContentStore(
        bucket=settings.remote_directory,
        prefix=settings.prefix,
        endpoint_url=ctx.obj["endpoint_url"],
        region_name=ctx.obj["region"],
    )
    scanner = LocalTreeScanner(
        settings.local_directory,
        exclude_dot_files=ctx.obj["exclude_dot_files"],
        max_workers=ctx.obj["workers"],
    )
    return SyncController(store, scanner, max_workers=ctx.obj["workers"])


@click.group()
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.option("--json", is_flag=True, help="Output in JSON format")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose/debug logging output",
)
@click.option(
    "--endpoint-url",
    envvar="AWS_ENDPOINT_URL",
    default=None,
    help="Endpoint URL for S3-compatible storage",
)
@click.option("--region", envvar="AWS_REGION", default=None, help="AWS region")
@click.option(
    "--exclude-dot-files",
    is_flag=True,
    help="Skip local files and folders starting with a dot",
)
@click.option(
    "--workers",
    type=click.IntRange(1, 64),
    default=8,
    help="Number of parallel workers for reads and fetches (default: 8)",
)
@click.version_option(package_name="pycync")
@click.pass_context
def main(
    ctx: Any,
    quiet: bool,
    json: bool,
    verbose: bool,
    endpoint_url: Optional[str],
    region: Optional[str],
    exclude_dot_files: bool,
    workers: int,
) -> None:
    """PyCync - Review and resolve differences between a folder and an S3 bucket."""
    ctx.ensure_object(dict)
    ctx.obj["out"] = OutputFormatter(json_output=json, quiet=quiet)
    ctx.obj["endpoint_url"] = endpoint_url
    ctx.obj["region"] = region
    ctx.obj["exclude_dot_files"] = exclude_dot_files
    ctx.obj["workers"] = workers

    # Configure logging based on verbose flag
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
        logging.getLogger("pycync").setLevel(logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING)


@main.command()
@click.option(
    "--local-directory",
    "-l",
    prompt="Local directory to create",
    default=str(Path.home() / DEFAULT_LOCAL_DIRECTORY_NAME),
    show_default=True,
    help="Local directory to sync",
)
@click.option(
    "--remote-directory",
    "-r",
    prompt="Remote bucket to create",
    default=DEFAULT_REMOTE_DIRECTORY,
    show_default=True,
    help="S3 bucket to sync with",
)
@click.option("--prefix", default="", help="Key prefix inside the bucket")
@click.pass_context
def init(ctx: Any, local_directory: str, remote_directory: str, prefix: str) -> None:
    """Set up pycync.

    Creates the local directory and the S3 bucket if they do not exist,
    then stores the settings in ~/.config/pycync/config.json.
    """
    out: OutputFormatter = ctx.obj["out"]
    if config.is_configured():
        out.warning(
            f"pycync is already configured; {config.get_config_path()} "
            "will be overwritten"
        )

    settings = Settings(
        local_directory=Path(local_directory).expanduser(),
        remote_directory=remote_directory,
        prefix=prefix,
    )
    scanner = LocalTreeScanner(settings.local_directory)
    store = S3ContentStore(
        bucket=settings.remote_directory,
        prefix=settings.prefix,
        endpoint_url=ctx.obj["endpoint_url"],
        region_name=ctx.obj["region"],
    )

    try:
        scanner.ensure_root()
        out.success(f"Local directory ready: {settings.local_directory}")

        if store.bucket_exists():
            out.info(f"Bucket already exists: {settings.remote_directory}")
        else:
            store.create_bucket()
            out.success(f"Created bucket: {settings.remote_directory}")

        config_path = config.save(settings)
    except CyncError as e:
        out.error(str(e))
        ctx.exit(1)
        return

    out.success(f"Configuration saved to {config_path}")


@main.command()
@click.pass_context
def status(ctx: Any) -> None:
    """Show how every file compares between local and remote."""
    out: OutputFormatter = ctx.obj["out"]

    try:
        settings = config.load()
        controller = build_controller(ctx, settings)
        files = controller.refresh()
    except CyncError as e:
        out.error(str(e))
        ctx.exit(1)
        return

    stats = summarize(files)
    if out.json_output:
        out.output_json(
            {
                "local": str(settings.local_directory),
                "remote": settings.remote_directory,
                "summary": stats,
                "files": [state_to_dict(path, state) for path, state in files.items()],
            }
        )
        return

    if not files:
        out.info("No files found.")
        return

    out.print(build_files_table(files))
    out.print_summary("Summary", stats)


@main.command()
@click.pass_context
def review(ctx: Any) -> None:
    """Browse files interactively and push or pull them one at a time.

    \b
    Keys:
      j/k      Move down/up
      Enter    Select the file under the cursor
      t        Push the selected file to remote
      f        Pull the selected file from remote
      r        Refresh
      q        Back / quit
    """
    out: OutputFormatter = ctx.obj["out"]

    try:
        settings = config.load()
        controller = build_controller(ctx, settings)
        controller.refresh()
    except CyncError as e:
        out.error(str(e))
        ctx.exit(1)
        return

    try:
        ReviewSession(controller, out).run()
    except KeyboardInterrupt:
        out.warning("Review cancelled by user")
        ctx.exit(130)


def _resolve_path(ctx: Any, path: str, action: SyncAction) -> None:
    """Apply a single action to a path, honouring the same gating as review."""
    out: OutputFormatter = ctx.obj["out"]

    try:
        settings = config.load()
        controller = build_controller(ctx, settings)
        files = controller.refresh()
    except CyncError as e:
        out.error(str(e))
        ctx.exit(1)
        return

    if path not in files:
        out.error(f"No such file locally or remotely: {path}")
        ctx.exit(1)
        return

    controller.selection.select(list(files).index(path))
    try:
        succeeded = controller.resolve(action)
    except InvalidAction as e:
        out.error(str(e))
        ctx.exit(1)
        return
    except CyncError as e:
        out.error(f"{action.value.capitalize()} succeeded but refresh failed: {e}")
        ctx.exit(1)
        return

    if not succeeded:
        out.error(controller.errors[path])
        ctx.exit(1)
        return

    if out.json_output:
        out.output_json({"path": path, "action": action.value, "status": "ok"})
    else:
        direction = "to remote" if action == SyncAction.PUSH else "from remote"
        out.success(f"{action.value.capitalize()}ed {path} {direction}")


@main.command()
@click.argument("path")
@click.pass_context
def push(ctx: Any, path: str) -> None:
    """Push a local file to the bucket, overwriting the remote copy."""
    _resolve_path(ctx, path, SyncAction.PUSH)


@main.command()
@click.argument("path")
@click.pass_context
def pull(ctx: Any, path: str) -> None:
    """Pull a file from the bucket, overwriting the local copy."""
    _resolve_path(ctx, path, SyncAction.PULL)


if __name__ == "__main__":
    main()
