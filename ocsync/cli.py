"""Click-based CLI for OCSYNC - Opencode registry scanner and sync tool."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import NoReturn, Optional

import click
from rich.markup import escape
from rich.prompt import Confirm

from ocsync import __version__
from ocsync.config import InstallMode, get_config_path, load_config, validate_config_file
from ocsync.exceptions import OcsyncError, RegistryError
from ocsync.output import create_console
from ocsync.registry.builder import build_registry, parse_override
from ocsync.registry.model import Item
from ocsync.registry.sources import load_registry
from ocsync.registry.writer import RegistryInputs, write_registry_files
from ocsync.scan import scan_root_tree, scan_tree
from ocsync.scan.tree import iter_tree
from ocsync.selection import SelectionEngine, item_node_id
from ocsync.session import SyncSession
from ocsync.sync import DOWNLOAD_DELAY_SECONDS, SyncExecutor

console = create_console()


def _fail(message: str) -> NoReturn:
    console.print_error(message)
    sys.exit(1)


def _mode(global_mode: bool) -> InstallMode:
    return InstallMode.GLOBAL if global_mode else InstallMode.LOCAL


def _expand_all(engine: SelectionEngine) -> None:
    for node in iter_tree(engine.nodes):
        if node.is_container:
            engine.expand(node.id)


def _resolve_roots(root: Path, roots: tuple[str, ...]) -> list[str]:
    """Explicit roots, or every first-level directory of root."""
    if roots:
        return list(roots)
    return [node.label for node in scan_root_tree(root)]


def _find_item(session: SyncSession, reference: str) -> Item:
    """Find an offered item by key, key suffix or name."""
    wanted = reference.strip().strip("/")
    items = session.items
    for item in items:
        if item.key == wanted:
            return item
    matches = [item for item in items if item.key.endswith(f"/{wanted}") or item.name == wanted]
    if len(matches) == 1:
        return matches[0]
    if not matches:
        raise RegistryError(f"No item matches '{reference}' in {session.mode.value} mode")
    raise RegistryError(f"'{reference}' is ambiguous: {', '.join(item.key for item in matches)}")


mode_option = click.option(
    "--global/--local",
    "global_mode",
    default=False,
    help="Install into the global config dir instead of the project (default: --local)",
)


@click.group()
@click.version_option(version=__version__, prog_name="ocsync")
def cli() -> None:
    """OCSYNC - Opencode registry scanner and sync tool.

    Build a registry from a content tree and keep an install directory in
    sync with the items you select from a registry.

    \b
    Item types:
      agent, command  ->  <install dir>/<type>/<file>.md
      skill           ->  <install dir>/skill/<name>/
      doc             ->  <working dir>/<file>.md  (local mode only)
    """
    pass


@cli.command()
@click.argument("roots", nargs=-1)
@click.option(
    "--root",
    "root_dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    help="Repository root to scan (default: current directory)",
)
@click.option("--pack", "packs", multiple=True, help="Mark a directory as a pack (repeatable)")
@click.option("--ids", is_flag=True, help="Show item keys")
def scan(roots: tuple[str, ...], root_dir: Path, packs: tuple[str, ...], ids: bool) -> None:
    """Scan a content tree and show the items it contains.

    ROOTS are directories below the root to include; all first-level
    directories are scanned when none are given.

    \b
    Examples:
        ocsync scan
        ocsync scan agents docs --pack agents/research
    """
    try:
        result = scan_tree(root_dir, _resolve_roots(root_dir, roots), pack_roots=packs)
    except OcsyncError as e:
        _fail(str(e))

    engine = SelectionEngine(result.nodes)
    _expand_all(engine)
    engine.select_all()
    console.print_tree(engine, show_ids=ids)
    console.print_scan_result(result)


@cli.command()
@click.argument("roots", nargs=-1)
@click.option(
    "--root",
    "root_dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    help="Repository root to scan (default: current directory)",
)
@click.option("--name", required=True, help="Registry name")
@click.option("--description", default="", help="About text for the registry")
@click.option("--repo-url", default="", help="Repository link shown in the about text")
@click.option("--pack", "packs", multiple=True, help="Mark a directory as a pack (repeatable)")
@click.option("--type", "types", multiple=True, metavar="PATH=TYPE", help="Override an item type (repeatable)")
@click.option("--force", "-f", is_flag=True, help="Overwrite an existing registry.json")
def init(
    roots: tuple[str, ...],
    root_dir: Path,
    name: str,
    description: str,
    repo_url: str,
    packs: tuple[str, ...],
    types: tuple[str, ...],
    force: bool,
) -> None:
    """Create registry.json and registry.yaml from a content tree.

    \b
    Examples:
        ocsync init --name "My Workflows"
        ocsync init agents docs --name Team --pack agents/research --type docs/setup.md=command
    """
    registry_file = root_dir / "registry.json"
    if registry_file.exists() and not force:
        _fail(f"{registry_file} already exists (use --force to overwrite)")

    try:
        overrides = dict(parse_override(value) for value in types)
        overrides.update({path: "pack" for path in packs})
        include_roots = _resolve_roots(root_dir, roots)
        result = scan_tree(root_dir, include_roots, pack_roots=packs)
        registry = build_registry(
            name,
            [scanned.item for scanned in result.items],
            overrides=overrides,
            include_roots=include_roots,
        )
        registry_path, config_path = write_registry_files(
            root_dir,
            RegistryInputs(name=name, description=description, repo_url=repo_url),
            registry,
        )
    except OcsyncError as e:
        _fail(str(e))

    for error in result.errors:
        console.print_warning(str(error))
    console.print_success(f"Created {registry_path}")
    console.print_success(f"Created {config_path}")
    console.print_info(
        f"{len(registry.get_all_items())} items: {len(registry.packs)} packs, {len(registry.standalone)} standalone"
    )


@cli.command()
@click.argument("registry")
@mode_option
def status(registry: str, global_mode: bool) -> None:
    """Show the registry catalog with installed items checked.

    REGISTRY is a registry directory or a GitHub repository URL.

    \b
    Examples:
        ocsync status ./my-registry
        ocsync status https://github.com/owner/repo --global
    """
    try:
        loaded = load_registry(registry)
        session = SyncSession(loaded.registry, loaded.config, _mode(global_mode))
    except OcsyncError as e:
        _fail(str(e))

    _expand_all(session.engine)
    console.print_info(f"{loaded.registry.name} ({session.mode.value}, {len(session.installed)} installed)")
    console.print_tree(session.engine, show_ids=True)


@cli.command()
@click.argument("registry")
@mode_option
@click.option("--add", "adds", multiple=True, help="Item to install (key, key suffix or name)")
@click.option("--drop", "drops", multiple=True, help="Item to remove (key, key suffix or name)")
@click.option("--all", "select_all", is_flag=True, help="Select every item")
@click.option("--none", "select_none", is_flag=True, help="Deselect every item")
@click.option("--dry-run", "-n", is_flag=True, help="Preview changes without applying")
@click.option("--yes", "-y", is_flag=True, help="Apply without asking")
@click.option(
    "--delay",
    type=click.FloatRange(min=0),
    default=DOWNLOAD_DELAY_SECONDS,
    show_default=True,
    help="Pause in seconds between downloads",
)
@click.option("--verbose", "-v", is_flag=True, help="Show detailed output")
def sync(
    registry: str,
    global_mode: bool,
    adds: tuple[str, ...],
    drops: tuple[str, ...],
    select_all: bool,
    select_none: bool,
    dry_run: bool,
    yes: bool,
    delay: float,
    verbose: bool,
) -> None:
    """Install, refresh and remove items to match a selection.

    The selection starts from what is installed; --all/--none replace it,
    then --add and --drop adjust it. Installed items that stay selected are
    refreshed, overwriting local edits.

    \b
    Examples:
        ocsync sync ./my-registry --add agent/reviewer.md
        ocsync sync https://github.com/owner/repo --global --all --yes
    """
    if select_all and select_none:
        _fail("--all and --none are mutually exclusive")

    console.verbose = verbose
    try:
        loaded = load_registry(registry)
        session = SyncSession(loaded.registry, loaded.config, _mode(global_mode))

        if select_all:
            session.engine.select_all()
        elif select_none:
            session.engine.clear()
        for reference in adds:
            session.engine.selected.add(item_node_id(_find_item(session, reference)))
        for reference in drops:
            session.engine.selected.discard(item_node_id(_find_item(session, reference)))
    except OcsyncError as e:
        _fail(str(e))

    changes = session.changes()
    console.print_changes(changes, mode=session.mode)
    if changes.is_empty:
        console.print_success("Everything is in sync!")
        return

    if dry_run:
        console.print_info("Dry-run mode - no changes applied")
        return

    if not yes and not Confirm.ask("Proceed with sync?", default=True):
        console.print_warning("Sync cancelled")
        return

    executor = SyncExecutor(loaded.source, loaded.config.install, delay=delay)
    result = session.execute(executor, console.print_progress)
    console.print_sync_result(result)
    if not result.success:
        sys.exit(1)


@cli.group()
def config() -> None:
    """Registry configuration commands.

    \b
    registry.yaml keys:
      ui.brand, ui.product, ui.about
      install.global_dir, install.local_dir, install.prefix_types
    """
    pass


@config.command("show")
@click.argument("registry", required=False)
def config_show(registry: Optional[str]) -> None:
    """Show the effective install configuration.

    Without REGISTRY the built-in defaults are shown.
    """
    try:
        if registry:
            loaded = load_registry(registry)
            console.print_install_config(loaded.config, origin=loaded.origin)
        else:
            console.print_install_config(load_config(None))
    except OcsyncError as e:
        _fail(str(e))


@config.command("validate")
@click.argument("path", type=click.Path(path_type=Path), default=".")
def config_validate(path: Path) -> None:
    """Validate a registry.yaml (or the one in a registry directory)."""
    config_path = get_config_path(path) if path.is_dir() else path
    if not config_path.exists():
        _fail(f"Config file not found: {config_path}")

    valid, errors = validate_config_file(config_path)
    if valid:
        console.print_success(f"{config_path} is valid")
        return

    console.print_error(f"{config_path} has {len(errors)} errors:")
    for error in errors:
        console.print(f"  [red]•[/red] {escape(error)}")
    sys.exit(1)


if __name__ == "__main__":
    cli()
