"""Predicates deciding which paths take part in building the owners tree."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from distributed_owners.errors import GitFilesError
from distributed_owners.owners_file import OWNERS_FILENAME

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)


class AllowFilter(Protocol):
    def allowed(self, path: Path) -> bool: ...


class FilterGitMetadata:
    """Allows every path except git's own metadata."""

    def allowed(self, path: Path) -> bool:
        return ".git" not in path.parts


class AllowList:
    """Allows only OWNERS files from a known list, plus their directories."""

    def __init__(self, allowed_files: set[Path]) -> None:
        self.allowed_files = allowed_files

    def allowed(self, path: Path) -> bool:
        return path in self.allowed_files

    @classmethod
    def from_paths(cls, paths: Iterable[Path], base: Path | None = None) -> AllowList:
        """Build an allow list from file paths.

        Paths which are not OWNERS files are dropped. Every directory between
        an OWNERS file and ``base`` is allowed so the tree walk can reach it.
        When ``base`` is given, relative paths are joined to it and
        canonicalized to match the paths seen while walking the tree.
        """
        expanded: set[Path] = set()
        for path in paths:
            if path.name != OWNERS_FILENAME:
                logger.debug("Ignoring allowed file %s, not an OWNERS file", path)
                continue
            for entry in (path, *path.parents):
                if entry == Path() or entry == Path(entry.anchor):
                    break
                expanded.add((base / entry).resolve() if base is not None else entry)
        return cls(expanded)

    @classmethod
    def allow_git_files(cls, repo_root: Path) -> AllowList:
        """Allow the OWNERS files tracked by git in ``repo_root``."""
        result = subprocess.run(
            ["git", "ls-files"],
            cwd=repo_root,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            msg = f"Error gathering git files:\n{result.stderr}"
            raise GitFilesError(msg)

        git_files = [Path(line) for line in result.stdout.splitlines() if line]
        logger.debug("Found %d files tracked by git", len(git_files))
        return cls.from_paths(git_files, base=repo_root)
