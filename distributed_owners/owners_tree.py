"""Tree of OWNERS files mirroring the directory structure."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from distributed_owners.owners_file import OWNERS_FILENAME, OwnersFileConfig

if TYPE_CHECKING:
    from distributed_owners.allow_filter import AllowFilter

logger = logging.getLogger(__name__)


@dataclass
class TreeNode:
    """A directory with its own OWNERS file (or the root directory).

    Children are the nearest descendant directories having an OWNERS file;
    directories without one are not represented. The repository base used to
    resolve includes is the path of the root node; it is passed down while
    loading rather than stored on each node.
    """

    path: Path
    owners_config: OwnersFileConfig = field(default_factory=OwnersFileConfig)
    children: list[TreeNode] = field(default_factory=list)

    @classmethod
    def load_from_files(cls, root: Path, allow_filter: AllowFilter) -> TreeNode:
        """Walk ``root`` and build the tree of allowed OWNERS files."""
        root_node = cls(root)
        root_node._maybe_load_owners_file(allow_filter, root)
        for path in _subdirectories(root):
            if allow_filter.allowed(path):
                root_node._load_children_from_files(path, allow_filter, root)
        return root_node

    def _maybe_load_owners_file(
        self, allow_filter: AllowFilter, repo_base: Path
    ) -> bool:
        owners_file = self.path / OWNERS_FILENAME
        if not owners_file.is_file():
            return False
        if not allow_filter.allowed(owners_file):
            logger.debug("Skipping %s due to filter", owners_file)
            return False

        logger.debug("Parsing %s", owners_file)
        self.owners_config = OwnersFileConfig.from_file(owners_file, repo_base)
        return True

    def _load_children_from_files(
        self, directory: Path, allow_filter: AllowFilter, repo_base: Path
    ) -> None:
        node = TreeNode(directory)
        has_owners_file = node._maybe_load_owners_file(allow_filter, repo_base)
        parent = node if has_owners_file else self

        for path in _subdirectories(directory):
            if allow_filter.allowed(path):
                parent._load_children_from_files(path, allow_filter, repo_base)

        if has_owners_file:
            self.children.append(node)


def _subdirectories(directory: Path) -> list[Path]:
    # Symlinked directories are not followed.
    return sorted(
        p for p in directory.iterdir() if p.is_dir() and not p.is_symlink()
    )
