# OCSYNC Console Output
# Rich-based console output for user-friendly display

from typing import Optional

from rich.console import Console as RichConsole
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ocsync.config.schema import AppConfig, InstallMode
from ocsync.registry.model import Item
from ocsync.scan.scanner import ScanResult
from ocsync.scan.tree import NodeKind, TreeNode
from ocsync.selection.engine import SelectionEngine, TriState
from ocsync.sync.diff import Changes
from ocsync.sync.executor import SyncOperation, SyncResult

CHECKBOXES = {
    TriState.SELECTED: "[x]",
    TriState.PARTIAL: "[-]",
    TriState.EMPTY: "[ ]",
}

DESCRIPTION_WIDTH = 30


def truncate(text: str, width: int) -> str:
    """Cut text to width, marking the cut with an ellipsis."""
    if width <= 0:
        return ""
    if len(text) <= width:
        return text
    return text[: max(width - 1, 0)] + "…"


class Console:
    """
    Console output manager using Rich.

    Provides formatted output for scan and sync operations.
    """

    def __init__(self, *, verbose: bool = False, colored: bool = True):
        """
        Initialize console.

        Args:
            verbose: Enable verbose output.
            colored: Enable colored output.
        """
        self.verbose = verbose
        self._console = RichConsole(force_terminal=colored, no_color=not colored)

    def print(self, *args, **kwargs) -> None:
        """Print to console."""
        self._console.print(*args, **kwargs)

    def print_error(self, message: str) -> None:
        """Print error message."""
        self._console.print(f"[red]Error:[/red] {escape(message)}")

    def print_warning(self, message: str) -> None:
        """Print warning message."""
        self._console.print(f"[yellow]Warning:[/yellow] {escape(message)}")

    def print_success(self, message: str) -> None:
        """Print success message."""
        self._console.print(f"[green]{escape(message)}[/green]")

    def print_info(self, message: str) -> None:
        """Print info message."""
        self._console.print(f"[blue]{escape(message)}[/blue]")

    def print_progress(self, message: str) -> None:
        """Print one sync progress line."""
        self._console.print(f"  [dim]›[/dim] {escape(message)}")

    def print_tree(
        self,
        engine: SelectionEngine,
        *,
        width: int = DESCRIPTION_WIDTH,
        show_ids: bool = False,
    ) -> None:
        """
        Print the visible nodes of a selection tree with tri-state checkboxes.

        Args:
            engine: Selection engine to render.
            width: Maximum description width.
            show_ids: Append item keys (what --add/--drop expect).
        """
        visible = engine.visible()
        if not visible:
            self._console.print("[dim]Nothing to display[/dim]")
            return

        states = engine.states()
        for node in visible:
            self._console.print(self._format_node(node, states[node.id], width=width, show_ids=show_ids))

    def _format_node(self, node: TreeNode, state: TriState, *, width: int, show_ids: bool) -> str:
        indent = "  " * node.depth
        checkbox = escape(CHECKBOXES[state])
        label = escape(node.label)
        if node.kind == NodeKind.PACK:
            label = f"[bold magenta]{label}[/bold magenta]"
        elif node.kind == NodeKind.FOLDER:
            label = f"[bold]{label}[/bold]"

        line = f"{indent}{checkbox} {label}"
        if node.item is not None:
            line += f" [dim]({node.item.type.value})[/dim]"
        if node.description:
            line += f" [dim]- {escape(truncate(node.description, width))}[/dim]"
        if show_ids and node.item is not None:
            line += f" [cyan]{escape(node.item.key)}[/cyan]"
        return line

    def print_scan_result(self, result: ScanResult) -> None:
        """Print scan summary and collected scan errors."""
        packs = result.packs
        self._console.print(
            f"\nScanned [bold]{len(result.directories)}[/bold] directories: "
            f"{len(result.items)} items, {len(packs)} packs, {len(result.standalone)} standalone"
        )
        for error in result.errors:
            self.print_warning(str(error))

    def print_changes(self, changes: Changes, *, mode: InstallMode) -> None:
        """
        Print the pending changes as a table.

        Args:
            changes: Changes to display.
            mode: Install mode shown in the title.
        """
        if changes.is_empty:
            self._console.print("[dim]No changes[/dim]")
            return

        table = Table(show_header=True, header_style="bold", title=f"Changes ({mode.value})")
        table.add_column("Action")
        table.add_column("Item")
        table.add_column("Type", style="dim")
        table.add_column("Target", style="dim")

        rows: list[tuple[str, Item]] = [
            *(("[green]+ install[/green]", item) for item in changes.install),
            *(("[cyan]↻ refresh[/cyan]", item) for item in changes.refresh),
            *(("[red]× remove[/red]", item) for item in changes.remove),
        ]
        for action, item in rows:
            table.add_row(action, escape(item.name), item.type.value, escape(item.target_path))

        self._console.print(table)
        if changes.refresh:
            self.print_warning("Refreshing overwrites local edits to installed files.")

    def print_sync_result(self, result: SyncResult) -> None:
        """
        Print sync result summary.

        Args:
            result: Sync result to display.
        """
        self._console.print()

        for item_result in result.failed:
            self._console.print(
                f"[red]✗[/red] {escape(item_result.item.name)} "
                f"({item_result.operation.value}): {escape(item_result.error or 'failed')}"
            )
        if self.verbose:
            for item in result.skipped:
                self._console.print(f"[dim]○ {escape(item.name)} (skipped)[/dim]")

        summary = (
            f"Installed: {result.count(SyncOperation.INSTALL)}, "
            f"refreshed: {result.count(SyncOperation.REFRESH)}, "
            f"removed: {result.count(SyncOperation.REMOVE)}, "
            f"failed: {len(result.failed)}, skipped: {len(result.skipped)}"
        )

        if result.cancelled:
            status, border = "[yellow]Sync cancelled[/yellow]", "yellow"
        elif result.success:
            status, border = "[green]Sync completed[/green]", "green"
        else:
            status, border = "[red]Sync completed with errors[/red]", "red"

        self._console.print(Panel(f"{status}\n{summary}", title="Summary", border_style=border))

    def print_install_config(self, config: AppConfig, *, origin: Optional[str] = None) -> None:
        """Print the effective install configuration."""
        table = Table(show_header=False, box=None)
        table.add_column("Key", style="bold")
        table.add_column("Value")
        if origin:
            table.add_row("Registry", escape(origin))
        table.add_row("Brand", escape(f"{config.ui.brand} {config.ui.product}"))
        table.add_row("Global dir", escape(config.install.global_dir))
        table.add_row("Local dir", escape(config.install.local_dir))
        table.add_row("Prefixed types", ", ".join(config.install.prefix_types))
        self._console.print(Panel(table, title="OCSYNC Configuration", border_style="blue"))


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
