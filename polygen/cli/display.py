"""Display components for CLI using Rich."""

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from polygen.generation.orchestrator import DEFAULT_COMPILER_LEVEL, RunOutcome, RunResult
from polygen.generation.project import ProjectModel
from polygen.models.build import BuildConfig

console = Console()


def show_banner() -> None:
    """Display the polygen banner."""
    console.print()
    console.print(
        Panel(
            "[bold cyan]polygen[/bold cyan]\n[dim]Multi-language source generation[/dim]",
            border_style="cyan",
            padding=(0, 2),
        )
    )


def show_success(title: str, message: str) -> None:
    """Display a success message."""
    console.print()
    console.print(
        Panel(
            f"[bold green]{escape(message)}[/]",
            title=f"[bold]{escape(title)}[/]",
            border_style="green",
        )
    )


def show_warning(title: str, message: str) -> None:
    """Display a warning message."""
    console.print()
    console.print(
        Panel(
            f"[bold yellow]{escape(message)}[/]",
            title=f"[bold]{escape(title)}[/]",
            border_style="yellow",
        )
    )


def show_error(title: str, message: str) -> None:
    """Display an error message."""
    console.print()
    console.print(
        Panel(
            f"[bold red]{escape(message)}[/]",
            title=f"[bold]{escape(title)}[/]",
            border_style="red",
        )
    )


def show_summary(project: ProjectModel, config: BuildConfig) -> None:
    """Display the run configuration before generation.

    Args:
        project: Project being built.
        config: Build configuration.
    """
    console.print()
    table = Table(title="[bold]Generation Summary[/]", show_header=False, box=None)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Project", escape(str(project.basedir)))
    if project.parent is not None:
        table.add_row("Parent", escape(str(project.parent.basedir)))
    table.add_row("Languages", escape(", ".join(lang.identifier for lang in config.languages)) or "-")
    table.add_row("Encoding", escape(config.encoding or project.source_encoding or "engine default"))
    source_level = config.compiler_source_level or project.compiler_source_level or DEFAULT_COMPILER_LEVEL
    target_level = config.compiler_target_level or project.compiler_target_level or DEFAULT_COMPILER_LEVEL
    table.add_row("Compiler Levels", escape(f"{source_level} / {target_level}"))
    table.add_row("Auto-fill Resource Map", str(config.auto_fill_resource_map))
    table.add_row("Explicit Mappings", str(len(config.project_mappings)))
    table.add_row("Fail on Validation Error", str(config.fail_on_validation_error))

    console.print(Panel(table, border_style="yellow"))


def show_run_result(result: RunResult) -> None:
    """Display the result of a generation run.

    Args:
        result: Run result.
    """
    console.print()
    table = Table(title="[bold]Generation Result[/]", show_header=False, box=None)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="white")

    status = {
        RunOutcome.SKIPPED: "[bold blue]SKIPPED[/]",
        RunOutcome.SUCCEEDED: "[bold green]SUCCESS[/]",
        RunOutcome.SOFT_FAILED: "[bold yellow]FAILED (tolerated)[/]",
    }[result.outcome]
    table.add_row("Status", status)

    if result.outcome != RunOutcome.SKIPPED:
        table.add_row("Languages", escape(", ".join(result.languages)) or "-")
        table.add_row("Classpath Entries", str(len(result.classpath)))
        table.add_row("Temp Directory", escape(result.temp_dir or "-"))
        table.add_row("Duration", f"{result.duration_seconds:.1f}s")

        if result.registrations:
            table.add_section()
            for name, uri in result.registrations:
                table.add_row(escape(name), escape(uri))

    border = "yellow" if result.outcome == RunOutcome.SOFT_FAILED else "green"
    console.print(Panel(table, border_style=border))
