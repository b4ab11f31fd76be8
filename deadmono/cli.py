"""CLI interface for monorepo dead code detection."""

import asyncio
import logging
import shutil
import signal
import sys
from collections.abc import Sequence
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TextColumn,
)

from deadmono.core.errors import DeadmonoError
from deadmono.core.go_tools import (
    DEADCODE_BINARY,
    GO_BINARY,
    INSTALL_HINTS,
    DeadcodeTool,
    GoModuleTool,
    verify_binaries,
)
from deadmono.core.models import DEFAULT_FILTER, AnalysisOptions, ScanResult
from deadmono.core.protocols import ProgressCallback
from deadmono.core.runner import DeadmonoRunner
from deadmono.output.formatters.enums import OutputFormat
from deadmono.output.formatters.formatter_factory import get_formatter
from deadmono.output.progress.callbacks import LoggingProgressCallback, RichProgressCallback

app = typer.Typer(
    name="deadmono",
    help="🔍 Report functions unreachable from every entrypoint of a Go monorepo",
    no_args_is_help=True,
    add_completion=False,
)

err_console = Console(stderr=True)


def build_runner(options: AnalysisOptions, jobs: int, verbose: bool) -> DeadmonoRunner:
    """Create a runner backed by the Go toolchain and deadcode."""
    verify_binaries()
    return DeadmonoRunner(
        module_tool=GoModuleTool(),
        analyzer=DeadcodeTool(),
        options=options,
        jobs=jobs,
        verbose=verbose,
    )


async def run_scan(
    runner: DeadmonoRunner,
    paths: Sequence[Path],
    progress_callback: ProgressCallback,
) -> ScanResult:
    """Run the scan, cancelling it on SIGTERM so running tools are killed."""
    loop = asyncio.get_running_loop()
    task = asyncio.current_task()
    handles_sigterm = sys.platform != "win32" and task is not None
    if handles_sigterm:
        loop.add_signal_handler(signal.SIGTERM, task.cancel)
    try:
        return await runner.scan(paths, progress_callback=progress_callback)
    finally:
        if handles_sigterm:
            loop.remove_signal_handler(signal.SIGTERM)


@app.command()
def check(
    paths: Annotated[
        list[Path],
        typer.Argument(
            help="Paths to main.go files of all entrypoints",
        ),
    ],
    include_tests: Annotated[
        bool,
        typer.Option(
            "--test",
            help="Include implicit test packages and executables (deadcode flag)",
        ),
    ] = False,
    include_generated: Annotated[
        bool,
        typer.Option(
            "--generated",
            help="Include dead functions in generated Go files (deadcode flag)",
        ),
    ] = False,
    tags: Annotated[
        str,
        typer.Option(
            "--tags",
            help="Comma-separated list of extra build tags (deadcode flag)",
        ),
    ] = "",
    filter_pattern: Annotated[
        str,
        typer.Option(
            "--filter",
            help="Report only packages matching this regular expression "
            "(default: module of first package)",
        ),
    ] = DEFAULT_FILTER,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output JSON records, same as --output json",
        ),
    ] = False,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--output",
            "-o",
            help="Output format: text, json, tree",
        ),
    ] = OutputFormat.TEXT,
    output_file: Annotated[
        Path | None,
        typer.Option(
            "--output-file",
            "-f",
            help="Save results to file",
        ),
    ] = None,
    jobs: Annotated[
        int,
        typer.Option(
            "--jobs",
            "-j",
            min=1,
            help="Number of deadcode analyses running at once",
        ),
    ] = 1,
    debug: Annotated[
        bool,
        typer.Option(
            "--debug",
            "-v",
            help="Enable debug output",
        ),
    ] = False,
) -> None:
    """
    Report functions unreachable from ALL given entrypoints.

    Each entrypoint is analyzed separately with deadcode, then the results are
    intersected per package, counting only entrypoints importing the package.

    Examples:
        deadmono check services/authn/main.go services/config/main.go
        deadmono check --json --generated services/*/main.go
        deadmono check --filter "github.com/myorg/.*" mod1/main.go mod2/main.go
    """
    if debug:
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING)

    if json_output:
        output_format = OutputFormat.JSON

    options = AnalysisOptions(
        include_tests=include_tests,
        include_generated=include_generated,
        build_tags=tags,
        filter_pattern=filter_pattern,
    )

    with Progress(
        MofNCompleteColumn(),
        BarColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=err_console,
        transient=True,
        disable=debug,
    ) as progress:
        task_id = progress.add_task("Scanning entrypoints...", total=len(paths) * 2)
        progress_callback: ProgressCallback = (
            LoggingProgressCallback(len(paths) * 2)
            if debug
            else RichProgressCallback(progress, task_id)
        )

        try:
            formatter = get_formatter(output_format)
            runner = build_runner(options, jobs=jobs, verbose=debug)
            result = asyncio.run(run_scan(runner, paths, progress_callback))
        except DeadmonoError as e:
            err_console.print(f"[red]Error: {escape(str(e))}[/red]", soft_wrap=True)
            if debug:
                err_console.print_exception()
            raise typer.Exit(1)
        except (KeyboardInterrupt, asyncio.CancelledError):
            err_console.print("[red]Error: interrupted[/red]")
            raise typer.Exit(1)

    if output_file:
        formatter.save(result, output_file)
        err_console.print(f"[green]Results saved to {output_file}[/green]")
    else:
        typer.echo(formatter.format(result), nl=False)


@app.command("version")
def cli_version() -> None:
    """Show version information."""
    try:
        typer.echo(version("deadmono"))
    except PackageNotFoundError:
        typer.echo("unknown")


@app.command()
def doctor() -> None:
    """Check system requirements and setup."""
    console = Console()
    console.print("🔧 Checking system requirements...")

    python_version = sys.version_info
    if python_version >= (3, 10):
        console.print(f"[green]✓ Python {python_version.major}.{python_version.minor}[/green]")
    else:
        console.print(
            f"[red]✗ Python {python_version.major}.{python_version.minor} (requires 3.10+)[/red]"
        )
        raise typer.Exit(1)

    missing = False
    for binary in (GO_BINARY, DEADCODE_BINARY):
        location = shutil.which(binary)
        if location:
            console.print(f"[green]✓ {binary} found at {location}[/green]")
        else:
            missing = True
            console.print(f"[yellow]⚠ {binary} not found[/yellow]")
            console.print(INSTALL_HINTS[binary], soft_wrap=True)

    if missing:
        raise typer.Exit(1)
    console.print("\n[green]✓ System check complete[/green]")


if __name__ == "__main__":
    app()
