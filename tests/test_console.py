# Tests for ocsync.output.console
# Rich-based console output

from io import StringIO
from pathlib import Path

from rich.console import Console as RichConsole

from helpers import make_item
from ocsync.config.schema import AppConfig, InstallConfig, InstallMode
from ocsync.exceptions import ScanError
from ocsync.output.console import Console, create_console, truncate
from ocsync.registry.model import Registry
from ocsync.scan.scanner import ScanResult, scan_tree
from ocsync.selection.catalog import build_catalog_tree
from ocsync.selection.engine import SelectionEngine
from ocsync.sync.diff import Changes
from ocsync.sync.executor import ItemResult, SyncOperation, SyncResult


def _make_console(verbose: bool = False) -> Console:
    """Create a console with captured output."""
    console = Console(verbose=verbose, colored=False)
    console._console = RichConsole(file=StringIO(), no_color=True, width=120)
    return console


def _get_output(console: Console) -> str:
    """Get captured output from console."""
    console._console.file.seek(0)
    return console._console.file.read()


class TestConsoleBasic:
    """Tests for basic console methods."""

    def test_print(self):
        c = _make_console()
        c.print("hello world")
        assert "hello world" in _get_output(c)

    def test_print_error(self):
        c = _make_console()
        c.print_error("something failed")
        output = _get_output(c)
        assert "Error:" in output
        assert "something failed" in output

    def test_print_warning(self):
        c = _make_console()
        c.print_warning("be careful")
        output = _get_output(c)
        assert "Warning:" in output
        assert "be careful" in output

    def test_markup_escaped(self):
        c = _make_console()
        c.print_info("[bold]literal[/bold]")
        assert "[bold]literal[/bold]" in _get_output(c)

    def test_print_progress(self):
        c = _make_console()
        c.print_progress("Synced 1/2: finder")
        assert "Synced 1/2: finder" in _get_output(c)


class TestTruncate:
    """Tests for truncate."""

    def test_short_text(self):
        assert truncate("short", 10) == "short"

    def test_long_text(self):
        assert truncate("abcdefghij", 5) == "abcd…"

    def test_zero_width(self):
        assert truncate("abc", 0) == ""


class TestConsoleTree:
    """Tests for tree rendering."""

    def test_empty(self):
        c = _make_console()
        c.print_tree(SelectionEngine([]))
        assert "Nothing to display" in _get_output(c)

    def test_catalog_checkboxes(self, sample_registry: Registry):
        engine = SelectionEngine(build_catalog_tree(sample_registry, InstallMode.LOCAL))
        engine.expanded.update(node.id for node in engine.nodes)
        engine.expand("pack:research")
        engine.toggle("item:agents/research/agent/finder.md")

        c = _make_console()
        c.print_tree(engine)
        lines = _get_output(c).splitlines()

        assert lines[0] == "[-] Packs - Collections of agents, skills…"
        assert "  [-] research - Research toolkit" in lines
        assert "    [x] finder (agent)" in lines
        assert "    [ ] research (command)" in lines

    def test_show_ids(self, sample_registry: Registry):
        engine = SelectionEngine(build_catalog_tree(sample_registry, InstallMode.LOCAL))
        engine.expanded.update(node.id for node in engine.nodes)

        c = _make_console()
        c.print_tree(engine, show_ids=True)
        assert "[ ] notes (doc) docs/notes.md" in _get_output(c)

    def test_description_width(self, sample_registry: Registry):
        engine = SelectionEngine(build_catalog_tree(sample_registry, InstallMode.LOCAL))
        c = _make_console()
        c.print_tree(engine, width=8)
        assert "[ ] Packs - Collect…" in _get_output(c)


class TestConsoleScanResult:
    """Tests for scan summaries."""

    def test_summary(self, content_tree: Path):
        c = _make_console()
        c.print_scan_result(scan_tree(content_tree, ["agents"]))
        output = _get_output(c)
        assert "5 items, 1 packs, 3 standalone" in output

    def test_errors_as_warnings(self):
        result = ScanResult(root=Path("/repo"), errors=[ScanError("/repo/private", "Permission denied")])
        c = _make_console()
        c.print_scan_result(result)
        output = _get_output(c)
        assert "Warning:" in output
        assert "/repo/private" in output


class TestConsoleChanges:
    """Tests for change tables."""

    def test_no_changes(self):
        c = _make_console()
        c.print_changes(Changes(), mode=InstallMode.LOCAL)
        assert "No changes" in _get_output(c)

    def test_table(self):
        c = _make_console()
        changes = Changes(install=[make_item("new")], refresh=[make_item("kept")], remove=[make_item("old")])
        c.print_changes(changes, mode=InstallMode.GLOBAL)
        output = _get_output(c)

        assert "Changes (global)" in output
        assert "+ install" in output
        assert "↻ refresh" in output
        assert "× remove" in output
        assert "agent/old.md" in output
        assert "overwrites local edits" in output

    def test_no_refresh_warning_without_refresh(self):
        c = _make_console()
        c.print_changes(Changes(install=[make_item("new")]), mode=InstallMode.LOCAL)
        assert "Warning:" not in _get_output(c)


class TestConsoleSyncResult:
    """Tests for sync result summaries."""

    def test_successful_result(self):
        c = _make_console()
        result = SyncResult(
            results=[
                ItemResult(item=make_item("a"), operation=SyncOperation.INSTALL, success=True),
                ItemResult(item=make_item("b"), operation=SyncOperation.REMOVE, success=True),
            ]
        )
        c.print_sync_result(result)
        output = _get_output(c)
        assert "Sync completed" in output
        assert "Installed: 1, refreshed: 0, removed: 1, failed: 0, skipped: 0" in output

    def test_failed_result(self):
        c = _make_console()
        result = SyncResult(
            results=[
                ItemResult(
                    item=make_item("broken"),
                    operation=SyncOperation.REFRESH,
                    success=False,
                    error="Not found",
                )
            ]
        )
        c.print_sync_result(result)
        output = _get_output(c)
        assert "broken (refresh): Not found" in output
        assert "Sync completed with errors" in output

    def test_cancelled(self):
        c = _make_console()
        c.print_sync_result(SyncResult(cancelled=True))
        assert "Sync cancelled" in _get_output(c)

    def test_skipped_only_when_verbose(self):
        result = SyncResult(skipped=[make_item("lock")])
        quiet = _make_console()
        quiet.print_sync_result(result)
        assert "(skipped)" not in _get_output(quiet)

        verbose = _make_console(verbose=True)
        verbose.print_sync_result(result)
        assert "lock (skipped)" in _get_output(verbose)


class TestConsoleInstallConfig:
    """Tests for configuration display."""

    def test_panel(self):
        config = AppConfig(install=InstallConfig(global_dir="/home/u/.config/opencode", local_dir="/p/.opencode"))
        c = _make_console()
        c.print_install_config(config, origin="https://github.com/o/r")
        output = _get_output(c)
        assert "OCSYNC Configuration" in output
        assert "https://github.com/o/r" in output
        assert "/p/.opencode" in output
        assert "agent, skill, command" in output


class TestCreateConsole:
    """Tests for create_console factory."""

    def test_default(self):
        c = create_console()
        assert isinstance(c, Console)
        assert c.verbose is False

    def test_verbose(self):
        c = create_console(verbose=True)
        assert c.verbose is True
