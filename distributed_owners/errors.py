"""Exceptions raised while generating a CODEOWNERS file."""

from pathlib import Path


class OwnersError(Exception):
    """Base class for all errors raised by distributed_owners."""


class OwnersFileError(OwnersError):
    """An OWNERS file could not be parsed."""

    def __init__(self, path: Path | str, lineno: int, msg: str) -> None:
        """Record the failing file, its 1-based line number and the reason."""
        super().__init__(path, lineno, msg)
        self.path = path
        self.lineno = lineno
        self.msg = msg

    def __str__(self) -> str:
        return f"{self.path}:{self.lineno}: {self.msg}"


class IncludeCycleError(OwnersFileError):
    """An include directive pointed back at a file already being expanded."""

    def __init__(self, path: Path | str, lineno: int, chain: list[Path]) -> None:
        self.chain = chain
        cycle = " -> ".join(str(p) for p in chain)
        super().__init__(path, lineno, f"Include cycle detected: {cycle}")


class GitFilesError(OwnersError):
    """Listing the files tracked by git failed."""
