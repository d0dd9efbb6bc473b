"""Parsing of a single OWNERS file.

An OWNERS file lists the owners of its directory, one per line. Lines of the
form ``[<pattern>]`` start a section whose owners apply only to files matching
the pattern, ``set inherit = <bool>`` controls whether the current section
includes the owners of its enclosing scope, and ``include <path>`` merges the
contents of another file. Everything after ``#`` is a comment.
"""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from distributed_owners.clean_line import clean_line
from distributed_owners.errors import IncludeCycleError, OwnersFileError
from distributed_owners.owners_set import OwnersSet

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)

OWNERS_FILENAME = "OWNERS"

PATTERN_RE = re.compile(r"^\[\s*(?P<pattern>\S+)\s*\]$")
INCLUDE_RE = re.compile(r"^include(?:\s+(?P<target>.*))?$")


def maybe_get_file_pattern(line: str) -> str | None:
    """Return the pattern of a ``[<pattern>]`` header line, if it is one."""
    match = PATTERN_RE.match(line.strip())
    if match:
        return match.group("pattern")
    return None


class IncludeChain:
    """Files currently being expanded, in the order they were entered.

    Maps each canonical path to the file that included it (``None`` for the
    top-level file).
    """

    def __init__(self, top_level: Path) -> None:
        self.active: dict[Path, Path | None] = {top_level: None}

    def __contains__(self, path: Path) -> bool:
        return path in self.active

    @property
    def depth(self) -> int:
        return len(self.active)

    def trace(self, path: Path) -> list[Path]:
        """The chain root-to-leaf, ending with ``path``."""
        return [*self.active, path]

    @contextmanager
    def entered(self, path: Path, includer: Path) -> Iterator[None]:
        """Mark ``path`` as active for the duration of the block."""
        self.active[path] = includer
        try:
            yield
        finally:
            del self.active[path]


@dataclass
class OwnersFileConfig:
    """Parsed contents of an OWNERS file, with includes expanded."""

    all_files: OwnersSet = field(default_factory=OwnersSet)
    pattern_overrides: dict[str, OwnersSet] = field(default_factory=dict)

    @classmethod
    def from_text(
        cls,
        text: str,
        source: Path | str,
        repo_base: Path | None = None,
    ) -> OwnersFileConfig:
        """Parse OWNERS file text.

        ``source`` names the file for error messages and anchors relative
        includes. ``repo_base`` bounds include targets and anchors includes
        starting with ``/``; it defaults to the directory holding ``source``.
        """
        source = Path(source)
        base = (repo_base if repo_base is not None else source.parent).resolve()
        config = cls()
        parser = _OwnersFileParser(config, base, IncludeChain(source.resolve()))
        parser.parse(text, source)
        return config

    @classmethod
    def from_file(cls, path: Path, repo_base: Path | None = None) -> OwnersFileConfig:
        """Read and parse the OWNERS file at ``path``."""
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise OwnersFileError(path, 0, f"File is not valid UTF-8: {exc}") from exc
        return cls.from_text(text, path, repo_base)


class _OwnersFileParser:
    """Parses one file and any files it includes into a shared config."""

    def __init__(self, config: OwnersFileConfig, repo_base: Path, chain: IncludeChain):
        self.config = config
        self.repo_base = repo_base
        self.chain = chain

    def parse(self, text: str, source: Path) -> None:
        config = self.config
        current_set = config.all_files
        in_include = self.chain.depth > 1

        for lineno, raw_line in enumerate(text.splitlines(), start=1):
            line = clean_line(raw_line)
            if not line:
                continue

            pattern = maybe_get_file_pattern(line)
            if pattern is not None:
                current_set = config.pattern_overrides.setdefault(pattern, OwnersSet())
                continue

            include = INCLUDE_RE.match(line)
            if include:
                if current_set is not config.all_files:
                    raise OwnersFileError(
                        source,
                        lineno,
                        "include is not allowed inside a pattern section",
                    )
                self._include(include.group("target"), source, lineno)
                continue

            if line.startswith("set ") and in_include:
                raise OwnersFileError(
                    source, lineno, f"set is not allowed in an included file: '{line}'"
                )
            try:
                if current_set.maybe_process_set(line):
                    continue
            except ValueError as exc:
                raise OwnersFileError(source, lineno, str(exc)) from exc

            if any(c.isspace() for c in line):
                raise OwnersFileError(
                    source,
                    lineno,
                    f"Invalid user/group '{line}' cannot contain whitespace.",
                )
            current_set.owners.add(line)

    def _include(self, target: str | None, source: Path, lineno: int) -> None:
        if not target or len(target.split()) != 1:
            raise OwnersFileError(
                source, lineno, "Invalid include format. Expected 'include <path>'."
            )

        if target.startswith("/"):
            path = (self.repo_base / target.lstrip("/")).resolve()
        else:
            path = (source.parent / target).resolve()

        if not path.is_relative_to(self.repo_base):
            raise OwnersFileError(
                source,
                lineno,
                f"Included file '{target}' is outside of the repository "
                f"{self.repo_base}",
            )
        if path in self.chain:
            raise IncludeCycleError(source, lineno, self.chain.trace(path))
        if self.chain.depth > 1:
            raise OwnersFileError(
                source, lineno, "include is not allowed in an included file"
            )

        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise OwnersFileError(
                source, lineno, f"Unable to read included file {path}: {exc}"
            ) from exc

        logger.debug("Including %s from %s", path, source)
        with self.chain.entered(path, source.resolve()):
            self.parse(text, path)
