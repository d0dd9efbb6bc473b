"""End-to-end generation of a CODEOWNERS file from OWNERS files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from distributed_owners.auto_generated_notice import get_auto_generated_notice
from distributed_owners.generate_codeowners import generate_codeowners
from distributed_owners.owners_tree import TreeNode
from distributed_owners.to_codeowners_string import to_codeowners_string

if TYPE_CHECKING:
    from distributed_owners.allow_filter import AllowFilter

logger = logging.getLogger(__name__)


def build_codeowners_text(
    repo_root: Path,
    implicit_inherit: bool,
    allow_filter: AllowFilter,
    message: str | None = None,
) -> str:
    """Generate the full CODEOWNERS text, banner included."""
    tree = TreeNode.load_from_files(repo_root, allow_filter)
    codeowners = generate_codeowners(tree, implicit_inherit)
    logger.info("Resolved %d CODEOWNERS patterns", len(codeowners))

    notice = get_auto_generated_notice(message)
    return f"{notice}\n\n{to_codeowners_string(codeowners)}\n\n{notice}"


def write_codeowners(text: str, output_file: Path | None) -> None:
    """Print ``text``, or write it to ``output_file`` creating its directory."""
    if output_file is None:
        print(text)
        return

    output_file.parent.mkdir(parents=True, exist_ok=True)
    # Files should end with a newline
    output_file.write_text(text + "\n", encoding="utf-8")
    logger.info("Wrote %s", output_file)


def generate_codeowners_from_files(
    repo_root: Path | None,
    output_file: Path | None,
    implicit_inherit: bool,
    allow_filter: AllowFilter,
    message: str | None = None,
) -> None:
    """Generate a CODEOWNERS file for ``repo_root`` (default: the cwd)."""
    root = (repo_root or Path.cwd()).resolve()
    text = build_codeowners_text(root, implicit_inherit, allow_filter, message)
    write_codeowners(text, output_file)
