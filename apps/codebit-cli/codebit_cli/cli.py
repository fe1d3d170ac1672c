"""CodeBit CLI commands."""

import logging
from pathlib import Path

import dotenv
import typer
from codebit_core import (
    CodeBitError,
    ConfigError,
    compare_versions,
    extract_descriptor,
    load_config,
    read_metadata,
)
from codebit_sync import (
    CodeBitRetriever,
    CodeBitUpdater,
    Fetcher,
    RetrieveState,
    UpdateReport,
    UpdateState,
    always_yes,
)
from rich.console import Console
from rich.markup import escape
from rich.table import Table

HELP = """\
CodeBit - share self-contained source files ("CodeBits") and keep them current.

A CodeBit is a single source file with a metadata block near the top. The
block starts with a line of exactly three dashes and ends with a line of
exactly three dots; in between are 'key: value' lines. At a minimum it must
have 'url', 'version' and 'keywords', and 'CodeBit' must be one of the
keywords:

\b
    /*
    ---
    name: MySharedCode.cs
    description: Shared code demonstration module
    url: https://github.com/FileMeta/AcmeIndustries/raw/master/MySharedCode.cs
    version: 1.4
    keywords: CodeBit
    ...
    */

Versions are compared segment by segment: digit runs numerically, other
characters case-insensitively, so '1.30.5' is newer than '1.8.5'.
"""

# Initialize
app = typer.Typer(help=HELP, no_args_is_help=True)
console = Console()

# Configure logging (default to WARNING, can be lowered to INFO in debug mode)
logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M",
)
logger = logging.getLogger(__name__)


@app.callback()
def main(
    debug: bool = typer.Option(False, "--debug", help="Log fetches and state transitions"),
):
    """CodeBit - get and update single-file source CodeBits."""
    if debug:
        logging.getLogger().setLevel(logging.INFO)
        logging.getLogger("codebit_sync").setLevel(logging.DEBUG)
    else:
        logging.getLogger().setLevel(logging.WARNING)
        logging.getLogger("codebit_sync").setLevel(logging.WARNING)


def _open_fetcher() -> Fetcher:
    """Build a fetcher from ~/.codebit/config.yaml, .env and CODEBIT_* variables."""
    dotenv.load_dotenv()
    try:
        config = load_config()
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(2) from e
    logger.info(f"Fetch config: timeout={config.timeout} user-agent={config.user_agent}")
    return Fetcher(config)


def _render_update_summary(reports: list[UpdateReport]) -> None:
    if not reports:
        return
    console.rule("[bold]Update Summary[/bold]")
    counts: dict[UpdateState, int] = {}
    for r in reports:
        counts[r.state] = counts.get(r.state, 0) + 1
    console.print(
        f"Totals: updated: [bold]{counts.get(UpdateState.APPLIED, 0)}[/bold]   "
        f"up to date: [bold]{counts.get(UpdateState.UP_TO_DATE, 0)}[/bold]   "
        f"skipped: [bold]{counts.get(UpdateState.DECLINED, 0)}[/bold]   "
        f"local newer: [bold]{counts.get(UpdateState.ANOMALY_LOCAL_NEWER, 0)}[/bold]   "
        f"failed: [bold]{counts.get(UpdateState.FAILED, 0)}[/bold]"
    )

    table = Table(show_header=True, header_style="bold")
    table.add_column("Result")
    table.add_column("File")
    table.add_column("Local")
    table.add_column("Master")
    for r in reports:
        result = r.failure.value if r.failure else r.state.value
        table.add_row(
            result,
            escape(str(r.path)),
            escape(r.local.version) if r.local else "-",
            escape(r.remote.version) if r.remote else "-",
        )
    console.print(table)


@app.command()
def get(
    urls: list[str] = typer.Argument(..., help="URL of a CodeBit master copy"),
):
    """
    Get CodeBit(s) from an online repository into the current directory.

    The file name comes from the CodeBit's 'name' property. Existing files are
    never overwritten; use 'codebit update' for those.
    """
    with _open_fetcher() as fetcher:
        retriever = CodeBitRetriever(fetcher, console=console)
        reports = [retriever.retrieve(url) for url in urls]

    retrieved = sum(1 for r in reports if r.state is RetrieveState.RETRIEVED)
    failed = sum(1 for r in reports if r.failed)
    console.print()
    console.print(f"Retrieved [bold]{retrieved}[/bold] of [bold]{len(reports)}[/bold] CodeBit(s).")
    if failed:
        raise typer.Exit(1)


@app.command()
def update(
    patterns: list[str] = typer.Argument(..., help="Path(s) to CodeBits; may include wildcards"),
    recursive: bool = typer.Option(
        False, "--recursive", "-s", help="Search subdirectories for matching files"
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Update without asking"),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Report which CodeBits are outdated without changing them"
    ),
):
    """
    Update existing CodeBit(s) from their master copies.

    Each matching file's metadata is compared with the master copy at its
    'url'. When the master is newer you are asked before the local copy is
    replaced.
    """
    reports: list[UpdateReport] = []
    try:
        with _open_fetcher() as fetcher:
            updater = CodeBitUpdater(
                fetcher,
                console=console,
                confirm=always_yes if yes else None,
                dry_run=dry_run,
            )
            for pattern in patterns:
                reports.extend(updater.update_pattern(pattern, recursive=recursive))
    except (ValueError, FileNotFoundError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        _render_update_summary(reports)
        raise typer.Exit(2) from e

    _render_update_summary(reports)
    if any(r.failed for r in reports):
        raise typer.Exit(1)


@app.command()
def show(
    paths: list[Path] = typer.Argument(..., help="Local CodeBit file(s)"),
):
    """Show the metadata of local CodeBit(s) without contacting the master copy."""
    failed = False
    for path in paths:
        try:
            descriptor = extract_descriptor(read_metadata(path))
        except (CodeBitError, OSError) as e:
            console.print(f"[red]{escape(str(path))}: {escape(str(e))}[/red]")
            failed = True
            continue

        table = Table(title=escape(str(path)), show_header=False)
        table.add_column("Property", style="bold")
        table.add_column("Value")
        table.add_row("name", escape(descriptor.name or "-"))
        table.add_row("description", escape(descriptor.description or "-"))
        table.add_row("version", escape(descriptor.version))
        table.add_row("url", escape(descriptor.url))
        table.add_row("keywords", escape(", ".join(descriptor.keywords)))
        console.print(table)

    if failed:
        raise typer.Exit(1)


@app.command()
def compare(
    a: str = typer.Argument(..., help="First version"),
    b: str = typer.Argument(..., help="Second version"),
):
    """Compare two version strings the way 'update' does."""
    n = compare_versions(a, b)
    op = "<" if n < 0 else (">" if n > 0 else "=")
    # Plain print so the result is easy to consume from scripts
    print(f"'{a}' {op} '{b}'")


if __name__ == "__main__":
    app()
