# OCSYNC Selection Tests
# Tests for the tri-state selection engine and the registry catalog

from pathlib import Path

from helpers import make_item
from ocsync.config.schema import InstallMode
from ocsync.registry.model import ItemType, Pack, Registry
from ocsync.scan.scanner import load_children, scan_root_tree, scan_tree
from ocsync.scan.tree import NodeKind, TreeNode
from ocsync.selection.catalog import build_catalog_tree, item_node_id
from ocsync.selection.engine import SelectionEngine, TriState


def _pack_tree() -> list[TreeNode]:
    """Folder > pack [A, B, C] plus a standalone item D."""
    pack = TreeNode(id="pack", label="pack", kind=NodeKind.PACK, depth=1, parent_id="root")
    for name in ("a", "b", "c"):
        pack.children.append(
            TreeNode(id=name, label=name, kind=NodeKind.ITEM, depth=2, item=make_item(name), parent_id="pack")
        )
    d = TreeNode(id="d", label="d", kind=NodeKind.ITEM, depth=1, item=make_item("d"), parent_id="root")
    root = TreeNode(id="root", label="root", kind=NodeKind.FOLDER, depth=0, children=[pack, d])
    return [root]


class TestTriState:
    """Tests for tri-state derivation and toggling."""

    def test_partial_selected_empty(self):
        engine = SelectionEngine(_pack_tree())
        assert engine.state("pack") == TriState.EMPTY

        engine.toggle("a")
        engine.toggle("b")
        assert engine.state("pack") == TriState.PARTIAL

        engine.toggle("c")
        assert engine.state("pack") == TriState.SELECTED
        assert engine.state("root") == TriState.PARTIAL

    def test_toggle_partial_selects_all(self):
        engine = SelectionEngine(_pack_tree(), selected=["a"])
        assert engine.toggle("pack") == TriState.SELECTED
        assert {"a", "b", "c"} <= engine.selected

    def test_toggle_empty_selects_all(self):
        engine = SelectionEngine(_pack_tree())
        assert engine.toggle("pack") == TriState.SELECTED
        assert {"a", "b", "c"} <= engine.selected

    def test_toggle_selected_deselects_all(self):
        engine = SelectionEngine(_pack_tree(), selected=["a", "b", "c"])
        assert engine.toggle("pack") == TriState.EMPTY
        assert engine.selected == set()

    def test_states_single_pass(self):
        engine = SelectionEngine(_pack_tree(), selected=["a", "b", "c", "d"])
        states = engine.states()
        assert states["root"] == TriState.SELECTED
        assert states["pack"] == TriState.SELECTED

    def test_childless_container_counts_as_selected(self):
        lazy = TreeNode(id="lazy", label="lazy", kind=NodeKind.FOLDER, depth=0, children_loaded=False)
        engine = SelectionEngine([lazy])
        assert engine.toggle("lazy") == TriState.SELECTED
        assert engine.toggle("lazy") == TriState.EMPTY

    def test_select_all_and_clear(self):
        engine = SelectionEngine(_pack_tree())
        engine.select_all()
        assert engine.state("root") == TriState.SELECTED
        engine.clear()
        assert engine.state("root") == TriState.EMPTY

    def test_toggle_all(self):
        engine = SelectionEngine(_pack_tree(), selected=["a"])
        engine.toggle_all()
        assert engine.state("root") == TriState.SELECTED
        engine.toggle_all()
        assert engine.state("root") == TriState.EMPTY

    def test_selected_items_in_tree_order(self):
        engine = SelectionEngine(_pack_tree(), selected=["d", "b"])
        assert [item.name for item in engine.selected_items()] == ["b", "d"]

    def test_select_items_by_key(self):
        engine = SelectionEngine(_pack_tree())
        engine.select_items([make_item("c").key])
        assert engine.selected == {"c"}

    def test_selected_nodes(self):
        engine = SelectionEngine(_pack_tree(), selected=["a", "b", "c"])
        assert [node.id for node in engine.selected_nodes()] == ["pack"]


class TestExpansionAndCursor:
    """Tests for visibility and cursor stability."""

    def test_visible_respects_expansion(self):
        engine = SelectionEngine(_pack_tree())
        assert [node.id for node in engine.visible()] == ["root"]
        engine.expand("root")
        assert [node.id for node in engine.visible()] == ["root", "pack", "d"]
        engine.toggle_expanded("pack")
        assert [node.id for node in engine.visible()] == ["root", "pack", "a", "b", "c", "d"]

    def test_cursor_moves(self):
        engine = SelectionEngine(_pack_tree(), expanded=["root", "pack"])
        engine.move_down()
        engine.move_down()
        assert engine.cursor.id == "a"
        engine.move_up()
        assert engine.cursor.id == "pack"
        engine.move_up()
        engine.move_up()
        assert engine.cursor_index == 0

    def test_cursor_keeps_node_across_expansion(self):
        engine = SelectionEngine(_pack_tree(), expanded=["root"])
        engine.focus("d")
        assert engine.cursor_index == 2
        engine.expand("pack")
        assert engine.cursor.id == "d"
        assert engine.cursor_index == 5

    def test_collapse_falls_back_to_parent(self):
        engine = SelectionEngine(_pack_tree(), expanded=["root", "pack"])
        engine.focus("b")
        engine.collapse("pack")
        assert engine.cursor.id == "pack"

    def test_move_to_parent(self):
        engine = SelectionEngine(_pack_tree(), expanded=["root", "pack"])
        engine.focus("c")
        engine.move_to_parent()
        assert engine.cursor.id == "pack"

    def test_toggle_defaults_to_cursor(self):
        engine = SelectionEngine(_pack_tree(), expanded=["root", "pack"])
        engine.focus("pack")
        engine.toggle()
        assert engine.state("pack") == TriState.SELECTED

    def test_empty_forest(self):
        engine = SelectionEngine([])
        assert engine.cursor is None
        engine.move_down()
        engine.toggle()
        assert engine.visible() == []


class TestLazyChildren:
    """Tests for lazily loaded root picker children."""

    def test_children_of_selected_start_selected(self, content_tree: Path):
        engine = SelectionEngine(scan_root_tree(content_tree))
        engine.toggle("root:agents")
        agents = engine.node("root:agents")

        engine.set_children("root:agents", load_children(content_tree, agents))

        assert engine.state("root:agents/research") == TriState.SELECTED
        assert engine.state("root:agents") == TriState.SELECTED
        assert agents.children_loaded

    def test_children_of_unselected_start_empty(self, content_tree: Path):
        engine = SelectionEngine(scan_root_tree(content_tree))
        agents = engine.node("root:agents")
        engine.set_children("root:agents", load_children(content_tree, agents))
        assert engine.state("root:agents") == TriState.EMPTY

    def test_cursor_survives_late_children(self, content_tree: Path):
        engine = SelectionEngine(scan_root_tree(content_tree), expanded=["root:agents"])
        engine.focus("root:skills")
        before = engine.cursor_index

        agents = engine.node("root:agents")
        engine.set_children("root:agents", load_children(content_tree, agents))

        assert engine.cursor.id == "root:skills"
        assert engine.cursor_index == before + 2

    def test_reload_replaces_children(self, content_tree: Path):
        engine = SelectionEngine(scan_root_tree(content_tree), expanded=["root:agents"])
        agents = engine.node("root:agents")
        engine.set_children("root:agents", load_children(content_tree, agents))
        engine.focus("root:agents/utils")

        engine.set_children("root:agents", [])

        assert engine.cursor.id == "root:agents"
        assert agents.children == []

    def test_scanned_tree_selection(self, content_tree: Path):
        result = scan_tree(content_tree, ["agents"])
        engine = SelectionEngine(result.nodes)
        engine.toggle("path:agents/research")
        names = [item.name for item in engine.selected_items()]
        assert names == ["finder", "research"]


class TestCatalogTree:
    """Tests for build_catalog_tree."""

    def test_categories(self, sample_registry: Registry):
        nodes = build_catalog_tree(sample_registry, InstallMode.LOCAL)
        assert [node.label for node in nodes] == ["Packs", "Agents", "Skills", "Docs"]

        packs = nodes[0]
        assert [pack.id for pack in packs.children] == ["pack:research"]
        assert [leaf.label for leaf in packs.children[0].children] == ["finder", "research"]
        assert packs.children[0].children[0].depth == 2

    def test_global_mode_hides_docs(self, sample_registry: Registry):
        nodes = build_catalog_tree(sample_registry, InstallMode.GLOBAL)
        assert "Docs" not in [node.label for node in nodes]

    def test_pack_of_only_docs_hidden_in_global_mode(self):
        registry = Registry(
            name="r",
            packs=[Pack(name="guides", items=[make_item("intro", ItemType.DOC)])],
        )
        assert build_catalog_tree(registry, InstallMode.GLOBAL) == []
        assert len(build_catalog_tree(registry, InstallMode.LOCAL)) == 1

    def test_item_ids_use_keys(self, sample_registry: Registry):
        nodes = build_catalog_tree(sample_registry, InstallMode.LOCAL)
        engine = SelectionEngine(nodes)
        notes = sample_registry.find_item("docs/notes.md")
        assert engine.node(item_node_id(notes)).item == notes

    def test_toggle_pack(self, sample_registry: Registry):
        engine = SelectionEngine(build_catalog_tree(sample_registry, InstallMode.LOCAL))
        engine.toggle("pack:research")
        assert [item.name for item in engine.selected_items()] == ["finder", "research"]
        assert engine.state("category:packs") == TriState.SELECTED
