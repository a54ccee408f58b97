"""
Main CLI application for semicolon-cli.

Provides a Typer-based command-line interface that plans and applies
statement terminator fixes to JavaScript modules.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from ..config import SemicolonConfig, get_config_manager, load_config
from ..converters.patch_applier import PatchApplier
from ..converters.tree_sitter_parser import SourceSyntaxError, TreeSitterParser
from ..core.document_model import InconsistentOffsetsError, PatchConflictError, ProcessingContext
from ..core.processor import SemicolonProcessor

# Initialize Typer app
app = typer.Typer(
    name="semicolon-cli",
    help="Insert missing and remove redundant semicolons in JavaScript modules",
    add_completion=False,
    rich_markup_mode="rich"
)

# Global console for rich output
console = Console()

logger = logging.getLogger("semicolon_cli")

SKIPPED_DIRECTORIES = {"node_modules", ".git"}


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """
    Normalize statement terminators in JavaScript source files.
    """
    config = load_config()
    level = logging.DEBUG if verbose else getattr(logging, config.log_level, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def iter_source_files(paths: List[Path], config: SemicolonConfig) -> Iterator[Path]:
    """Expand directories into the source files they contain."""
    for path in paths:
        if path.is_dir():
            for candidate in sorted(path.rglob("*")):
                if SKIPPED_DIRECTORIES.intersection(candidate.parts):
                    continue
                if candidate.is_file() and candidate.suffix in config.extensions:
                    yield candidate
        else:
            yield path


def plan_file(path: Path, parser: TreeSitterParser, processor: SemicolonProcessor) -> ProcessingContext:
    """Parse a file and compute its patch plan."""
    return processor.process(parser.parse_file(path))


def plan_files(paths: List[Path]) -> Iterator[Tuple[Path, Optional[ProcessingContext], Optional[str]]]:
    """Plan every file, yielding either a context or an error message."""
    config = load_config()
    parser = TreeSitterParser()
    processor = SemicolonProcessor.from_config(config)

    for path in iter_source_files(paths, config):
        if not path.exists():
            yield path, None, f"File not found: {path}"
            continue
        try:
            yield path, plan_file(path, parser, processor), None
        except (SourceSyntaxError, InconsistentOffsetsError, PatchConflictError, UnicodeDecodeError) as e:
            logger.debug(f"Planning failed for {path}", exc_info=True)
            yield path, None, str(e)


@app.command()
def check(
    paths: List[Path] = typer.Argument(..., help="Files or directories to check"),
) -> None:
    """
    Report the semicolons that would be inserted or removed.

    Exits with status 1 when any file needs changes or cannot be parsed.
    """
    failures = 0

    results_table = Table(title="Planned Changes")
    results_table.add_column("File", style="cyan", overflow="fold")
    results_table.add_column("Insertions", justify="right", style="green")
    results_table.add_column("Removals", justify="right", style="red")
    results_table.add_column("Offsets", style="dim", overflow="fold")

    for path, context, error in plan_files(paths):
        if error:
            failures += 1
            console.print(f"[red]Error: {error}[/red]", soft_wrap=True)
            continue

        if not context.has_changes:
            continue

        offsets = [f"+{i.index}" for i in context.insertions]
        offsets.extend(f"-{r.start}:{r.end}" for r in context.removals)
        results_table.add_row(
            str(path),
            str(len(context.insertions)),
            str(len(context.removals)),
            " ".join(offsets),
        )

    needs_changes = results_table.row_count
    if needs_changes:
        console.print(results_table)
        console.print(f"[yellow]{needs_changes} file(s) need changes[/yellow]")
    elif not failures:
        console.print("[green]All files are already normalized[/green]")

    if needs_changes or failures:
        raise typer.Exit(1)


@app.command()
def fix(
    paths: List[Path] = typer.Argument(..., help="Files or directories to fix"),
    write: bool = typer.Option(False, "--write", "-w", help="Write changes back to the files"),
    diff: bool = typer.Option(False, "--diff", "-d", help="Show the changes as a diff"),
) -> None:
    """
    Apply the planned semicolon changes.

    Without --write, the changes are only shown as a diff.
    """
    applier = PatchApplier()
    failures = 0
    changed = 0

    for path, context, error in plan_files(paths):
        if error:
            failures += 1
            console.print(f"[red]Error: {error}[/red]", soft_wrap=True)
            continue

        if not context.has_changes:
            continue

        changed += 1
        if diff or not write:
            diff_text = applier.unified_diff(context, str(path))
            console.print(Panel(
                Syntax(diff_text, "diff", theme="monokai"),
                title=str(path),
                border_style="blue"
            ))

        if write:
            path.write_text(applier.apply(context), encoding="utf-8")
            stats = context.get_stats()
            console.print(
                f"[green]Fixed {path}[/green] "
                f"({stats['insertions']} inserted, {stats['removals']} removed)",
                soft_wrap=True,
            )

    if not changed and not failures:
        console.print("[green]Nothing to fix[/green]")

    if failures:
        raise typer.Exit(1)


@app.command()
def plan(
    file_path: Path = typer.Argument(..., help="File to plan"),
) -> None:
    """
    Print the patch plan of a file as JSON.
    """
    if not file_path.is_file():
        console.print(f"[red]Error: File not found: {file_path}[/red]")
        raise typer.Exit(1)

    processor = SemicolonProcessor.from_config(load_config())
    try:
        context = plan_file(file_path, TreeSitterParser(), processor)
    except (SourceSyntaxError, InconsistentOffsetsError, PatchConflictError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    typer.echo(json.dumps(context.to_dict(), indent=2))


@app.command()
def info() -> None:
    """
    Show information about semicolon-cli.
    """
    config_info = get_config_manager().get_config_info()

    info_text = f"""[bold cyan]semicolon-cli - Statement Terminator Normalization[/bold cyan]

Makes semicolons explicit where JavaScript would insert them automatically,
and removes empty statements and stray class-body separators.

[bold]Current Configuration:[/bold]
• Ambiguous exports: {config_info['ambiguous_export_policy']}
• Insert missing: {'✓' if config_info['insert_missing'] else '✗'}
• Remove redundant: {'✓' if config_info['remove_redundant'] else '✗'}
• Config File: {'✓ Exists' if config_info['config_exists'] else '✗ Not Found'}

[bold]Commands:[/bold]
• [cyan]semicolon-cli check <paths>[/cyan] - Report needed changes
• [cyan]semicolon-cli fix <paths> --write[/cyan] - Apply changes
• [cyan]semicolon-cli fix <paths> --diff[/cyan] - Preview changes as a diff
• [cyan]semicolon-cli plan <file>[/cyan] - Print the patch plan as JSON
    """

    console.print(Panel(info_text, border_style="blue"))


@app.command()
def config(
    show: bool = typer.Option(False, "--show", help="Show current configuration"),
    create_default: bool = typer.Option(False, "--create-default", help="Create default config file"),
) -> None:
    """
    Manage semicolon-cli configuration.
    """
    config_manager = get_config_manager()

    if create_default:
        config_manager.create_default_config()
        console.print(f"[green]Created default configuration at {config_manager.config_file}[/green]")
        return

    if show:
        config_info = config_manager.get_config_info()

        config_table = Table(title="semicolon-cli Configuration", show_header=False)
        config_table.add_column("Setting", style="cyan")
        config_table.add_column("Value", style="green")

        for key, value in config_info.items():
            if isinstance(value, list):
                value = ", ".join(value)
            config_table.add_row(key.replace('_', ' ').title(), str(value))

        console.print(config_table)
        return

    # Default: show basic info
    console.print("Use [cyan]semicolon-cli config --show[/cyan] to see full configuration")
    console.print("Use [cyan]semicolon-cli config --create-default[/cyan] to create a default config file")


if __name__ == "__main__":
    app()
