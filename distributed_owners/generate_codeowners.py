"""Resolution of the owners tree into CODEOWNERS patterns."""

from __future__ import annotations

from pathlib import Path

from distributed_owners.owners_tree import TreeNode


def generate_codeowners(
    owners_tree: TreeNode, implicit_inherit: bool
) -> dict[str, set[str]]:
    """Map every directory and pattern override in the tree to its owners.

    Keys are paths relative to the tree root, starting with ``/``; directory
    keys end with ``/`` and override keys append the override pattern to their
    directory key. ``implicit_inherit`` applies wherever an OWNERS file leaves
    ``inherit`` unset.
    """
    codeowners: dict[str, set[str]] = {}
    _add_codeowners(owners_tree, owners_tree.path, set(), implicit_inherit, codeowners)
    return codeowners


def _add_codeowners(
    tree_node: TreeNode,
    root_path: Path,
    parent_owners: set[str],
    implicit_inherit: bool,
    codeowners: dict[str, set[str]],
) -> None:
    owners_config = tree_node.owners_config
    owners_set = owners_config.all_files
    directory = _directory_pattern(tree_node.path, root_path)

    owners = set(owners_set.owners)
    if owners_set.inherits(implicit_inherit):
        owners |= parent_owners
    codeowners[directory] = owners

    for pattern, override_set in owners_config.pattern_overrides.items():
        override_owners = set(override_set.owners)
        if override_set.inherits(implicit_inherit):
            override_owners |= owners
        codeowners[directory + pattern] = override_owners

    for child in tree_node.children:
        _add_codeowners(child, root_path, owners, implicit_inherit, codeowners)


def _directory_pattern(path: Path, root_path: Path) -> str:
    relative = path.relative_to(root_path).as_posix()
    if relative == ".":
        return "/"
    return f"/{relative}/"
