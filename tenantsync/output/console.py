# tenantsync Console Output
# Rich-based console output for user-friendly display

from collections.abc import Iterable, Mapping
from typing import Optional

from rich.console import Console as RichConsole
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from tenantsync.core.bundle import ConfigBundle
from tenantsync.core.classifier import PathMatch

_PREVIEW_LENGTH = 40


class Console:
    """
    Console output manager using Rich.

    Provides formatted output for change checks and materialized bundles.
    """

    def __init__(self, *, verbose: bool = False, colored: bool = True, console: Optional[RichConsole] = None):
        """
        Initialize console.

        Args:
            verbose: Enable verbose output.
            colored: Enable colored output.
            console: Optional Rich console to write to.
        """
        self.verbose = verbose
        self._console = console or RichConsole(no_color=not colored, highlight=False)

    @property
    def rich(self) -> RichConsole:
        """Underlying Rich console."""
        return self._console

    def print(self, *args, **kwargs) -> None:
        """Print to console."""
        self._console.print(*args, **kwargs)

    def print_error(self, message: str) -> None:
        """Print error message."""
        self._console.print(f"[red]Error:[/red] {message}")

    def print_warning(self, message: str) -> None:
        """Print warning message."""
        self._console.print(f"[yellow]Warning:[/yellow] {message}")

    def print_success(self, message: str) -> None:
        """Print success message."""
        self._console.print(f"[green]{message}[/green]")

    def print_info(self, message: str) -> None:
        """Print info message."""
        self._console.print(f"[blue]{message}[/blue]")

    def print_change_check(self, commit_ref: str, changed: bool) -> None:
        """Print the verdict of a change check."""
        if changed:
            self._console.print(f"[green]✓[/green] Commit [bold]{commit_ref}[/bold] changes tenant configuration")
        else:
            self._console.print(f"[dim]○[/dim] Commit [bold]{commit_ref}[/bold] has no relevant changes")

    def print_classifications(self, results: Iterable[tuple[str, Optional[PathMatch]]]) -> None:
        """
        Print a classification table.

        Args:
            results: Pairs of (path, match or None).
        """
        table = Table(show_header=True, header_style="bold")
        table.add_column("Path", style="cyan")
        table.add_column("Category")
        table.add_column("Kind", style="dim")
        table.add_column("Identifier")
        table.add_column("Slot", style="dim")

        for path, match in results:
            if match is None:
                table.add_row(path, "[dim]irrelevant[/dim]", "", "", "")
                continue
            slot = f"{match.slot}/{match.key}" if match.key else (match.slot or "")
            table.add_row(path, f"[green]{match.category}[/green]", match.kind.value, match.identifier or "", slot)

        self._console.print(table)

    def print_bundle(self, bundle: ConfigBundle, *, title: str = "Tenant configuration") -> None:
        """
        Print a bundle as a tree.

        Entry names are always shown; slot previews only in verbose mode.
        """
        if not bundle:
            self._console.print("[dim]No tenant configuration found[/dim]")
            return

        tree = Tree(f"[bold]{title}[/bold]")
        counts = bundle.count_entries()
        plain = bundle.to_dict()
        for category in bundle.categories:
            content = bundle[category]
            branch = tree.add(f"[magenta]{category}[/magenta] [dim]({counts[category]})[/dim]")
            if bundle.is_document(category) or not isinstance(content, Mapping):
                if self.verbose:
                    branch.add(f"[dim]{_preview(plain[category])}[/dim]")
                continue
            for identifier in sorted(content):
                node = branch.add(f"[cyan]{identifier}[/cyan]")
                entry = content[identifier]
                if isinstance(entry, Mapping):
                    for slot, value in entry.items():
                        label = f"{slot}: {_describe(value)}"
                        if self.verbose and not isinstance(value, Mapping):
                            label += f" [dim]{_preview(value)}[/dim]"
                        node.add(label)

        self._console.print(tree)

    def print_bundle_summary(self, bundle: ConfigBundle) -> None:
        """Print a one-panel summary of a bundle."""
        counts = bundle.count_entries()
        lines = [f"{category}: {count}" for category, count in counts.items()] or ["empty"]
        self._console.print(Panel("\n".join(lines), title="Summary", border_style="green"))

    def print_config_summary(self, config_path: str, provider: str, project_path: str) -> None:
        """Print configuration summary."""
        self._console.print(
            Panel(
                f"Config: {config_path}\nProvider: {provider}\nProject path: {project_path}",
                title="tenantsync Configuration",
                border_style="blue",
            )
        )


def _describe(value: object) -> str:
    """Short type description of a slot value."""
    if isinstance(value, Mapping):
        names = ", ".join(sorted(value)) if value else "none"
        return f"{len(value)} ({names})"
    if isinstance(value, str):
        return f"{len(value)} chars"
    return type(value).__name__


def _preview(value: object) -> str:
    """Single-line preview of a value."""
    text = " ".join(str(value).split())
    if len(text) > _PREVIEW_LENGTH:
        text = text[: _PREVIEW_LENGTH - 1] + "…"
    # Escape Rich markup
    return text.replace("[", "\\[")


def create_console(*, verbose: bool = False, colored: bool = True) -> Console:
    """
    Create a console instance.

    Args:
        verbose: Enable verbose output.
        colored: Enable colored output.

    Returns:
        Console instance.
    """
    return Console(verbose=verbose, colored=colored)
