"""Command line interface for generating CODEOWNERS from OWNERS files."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from distributed_owners.allow_filter import AllowList, FilterGitMetadata
from distributed_owners.errors import OwnersError
from distributed_owners.load_config import load_config
from distributed_owners.pipeline import generate_codeowners_from_files

if TYPE_CHECKING:
    from collections.abc import Sequence

    from distributed_owners.allow_filter import AllowFilter

logger = logging.getLogger(__name__)


def parse_bool(value: str) -> bool:
    """Parse a ``true``/``false`` command line value."""
    v = value.strip().lower()
    if v in {"true", "yes", "1"}:
        return True
    if v in {"false", "no", "0"}:
        return False
    msg = f"expected 'true' or 'false', got '{value}'"
    raise argparse.ArgumentTypeError(msg)


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    ap = argparse.ArgumentParser(
        prog="distributed-owners",
        description=(
            "Generate a GitHub compatible CODEOWNERS file from OWNERS files "
            "distributed through the file tree."
        ),
    )
    ap.add_argument(
        "-r",
        "--repo-root",
        type=Path,
        help="Root of the repository to generate CODEOWNERS for (default: cwd)",
    )
    ap.add_argument(
        "-o",
        "--output-file",
        type=Path,
        help="File to write the CODEOWNERS contents into (default: stdout)",
    )
    ap.add_argument(
        "-i",
        "--implicit-inherit",
        type=parse_bool,
        metavar="{true,false}",
        help="Whether to inherit owners when inheritance is not specified "
        "(default: true)",
    )
    ap.add_argument(
        "-m",
        "--message",
        help="Additional message to include in the generated file banner",
    )
    ap.add_argument(
        "--allow-non-git-files",
        action="store_true",
        default=None,
        help="Consider OWNERS files not tracked by git",
    )
    ap.add_argument("-c", "--config", help="Path to a YAML configuration file")
    ap.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="More logging output (repeat for debug)",
    )
    ap.add_argument(
        "-q", "--quiet", action="store_true", help="Only log errors"
    )
    return ap


def configure_logging(verbose: int, quiet: bool) -> None:
    """Send log records to stderr at the requested verbosity."""
    if quiet:
        level = logging.ERROR
    elif verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def resolve_settings(args: argparse.Namespace) -> dict[str, Any]:
    """Merge command line flags over the configuration file."""
    config = load_config(args.config)
    overrides = {
        "implicit_inherit": args.implicit_inherit,
        "output_file": args.output_file,
        "message": args.message,
        "allow_non_git_files": args.allow_non_git_files,
    }
    config.update({k: v for k, v in overrides.items() if v is not None})
    return config


def make_allow_filter(repo_root: Path, allow_non_git_files: bool) -> AllowFilter:
    """Pick the filter deciding which OWNERS files are considered."""
    if allow_non_git_files:
        return FilterGitMetadata()
    return AllowList.allow_git_files(repo_root)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CODEOWNERS generation."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose, args.quiet)

    try:
        settings = resolve_settings(args)
        repo_root = (args.repo_root or Path.cwd()).resolve()
        output_file = settings["output_file"]
        allow_filter = make_allow_filter(
            repo_root, bool(settings["allow_non_git_files"])
        )
        generate_codeowners_from_files(
            repo_root,
            Path(output_file) if output_file else None,
            bool(settings["implicit_inherit"]),
            allow_filter,
            settings["message"],
        )
    except (OwnersError, OSError) as exc:
        logger.debug("Generation failed", exc_info=True)
        msg = f"error: {exc}"
        raise SystemExit(msg) from exc
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
