# OCSYNC Scan Module
# Tree scanning, path classification and front matter parsing

from ocsync.scan.classify import classify_path, is_excluded_file, should_skip_dir
from ocsync.scan.frontmatter import Frontmatter, normalize_description, parse_frontmatter, read_frontmatter
from ocsync.scan.scanner import (
    ScannedItem,
    ScanResult,
    assign_packs,
    load_children,
    reduce_roots,
    scan_root_tree,
    scan_tree,
)
from ocsync.scan.tree import NodeKind, TreeNode, flatten_tree, index_tree, iter_tree

__all__ = [
    # Scanner
    "scan_tree",
    "scan_root_tree",
    "load_children",
    "reduce_roots",
    "assign_packs",
    "ScanResult",
    "ScannedItem",
    # Classification
    "classify_path",
    "is_excluded_file",
    "should_skip_dir",
    # Front matter
    "Frontmatter",
    "parse_frontmatter",
    "read_frontmatter",
    "normalize_description",
    # Tree
    "NodeKind",
    "TreeNode",
    "flatten_tree",
    "index_tree",
    "iter_tree",
]
