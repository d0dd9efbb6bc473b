"""Tests for OWNERS file parsing."""

from pathlib import Path

import pytest

from distributed_owners.errors import IncludeCycleError, OwnersFileError
from distributed_owners.owners_file import (
    IncludeChain,
    OwnersFileConfig,
    maybe_get_file_pattern,
)
from distributed_owners.owners_set import OwnersSet


def write(root: Path, relative: str, text: str) -> Path:
    """Create a file below root, including its directories."""
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_parse_blanket_owners_only() -> None:
    """Verify a file listing only directory owners."""
    text = "ada.lovelace\ngrace.hopper\nmargaret.hamilton\n"
    parsed = OwnersFileConfig.from_text(text, "test data")
    assert parsed == OwnersFileConfig(
        all_files=OwnersSet(
            owners={"ada.lovelace", "grace.hopper", "margaret.hamilton"}
        )
    )


def test_parse_blanket_owners_with_inherit() -> None:
    """Verify the inherit directive applies to the directory owners."""
    text = "set inherit = false\nada.lovelace\ngrace.hopper\n"
    parsed = OwnersFileConfig.from_text(text, "test data")
    assert parsed.all_files == OwnersSet(
        inherit=False, owners={"ada.lovelace", "grace.hopper"}
    )
    assert parsed.pattern_overrides == {}


def test_parse_blanket_with_pattern_overrides() -> None:
    """Verify that pattern sections collect their own owners and settings."""
    text = (
        "ada.lovelace  # lead\n"
        "\n"
        "[*.rs]\n"
        "set inherit = false\n"
        "katherine.johnson\n"
        "[ docs/* ]\n"
        "grace.hopper\n"
    )
    parsed = OwnersFileConfig.from_text(text, "test data")
    assert parsed.all_files == OwnersSet(owners={"ada.lovelace"})
    assert parsed.pattern_overrides == {
        "*.rs": OwnersSet(inherit=False, owners={"katherine.johnson"}),
        "docs/*": OwnersSet(owners={"grace.hopper"}),
    }


def test_repeated_pattern_section_extends_owners() -> None:
    """Verify that reopening a pattern section keeps earlier owners."""
    text = "[*.rs]\nada.lovelace\n[*.md]\ngrace.hopper\n[*.rs]\nmargaret.hamilton\n"
    parsed = OwnersFileConfig.from_text(text, "test data")
    assert parsed.pattern_overrides["*.rs"].owners == {
        "ada.lovelace",
        "margaret.hamilton",
    }


def test_maybe_get_file_pattern() -> None:
    """Verify detection of pattern header lines."""
    assert maybe_get_file_pattern("[*.rs]") == "*.rs"
    assert maybe_get_file_pattern("[foo.*]") == "foo.*"
    assert maybe_get_file_pattern("  [  bar.*  ]  ") == "bar.*"
    assert maybe_get_file_pattern("ada.lovelace") is None
    assert maybe_get_file_pattern("") is None
    assert maybe_get_file_pattern("set inherit = false") is None
    assert maybe_get_file_pattern("[foo bar]") is None


def test_owner_with_whitespace_reports_line() -> None:
    """Verify that owners containing whitespace fail with file and line."""
    text = "ada.lovelace\n# comment\nada lovelace\n"
    with pytest.raises(OwnersFileError) as excinfo:
        OwnersFileConfig.from_text(text, "some/OWNERS")
    assert excinfo.value.lineno == 3
    assert "cannot contain whitespace" in str(excinfo.value)
    assert str(excinfo.value).startswith("some/OWNERS:3:")


def test_malformed_pattern_header_is_owner_error() -> None:
    """Verify that a header with inner whitespace is reported as an owner."""
    with pytest.raises(OwnersFileError, match="Invalid user/group '\\[foo bar\\]'"):
        OwnersFileConfig.from_text("[foo bar]\n", "test data")


def test_invalid_directive_reports_line() -> None:
    """Verify that directive errors carry file and line context."""
    with pytest.raises(OwnersFileError, match="Invalid set variable") as excinfo:
        OwnersFileConfig.from_text("ada.lovelace\nset foo = bar\n", "test data")
    assert excinfo.value.lineno == 2


def test_include_relative(tmp_path: Path) -> None:
    """Verify that relative includes resolve against the including file."""
    write(tmp_path, "teams/rust", "katherine.johnson\n[*.rs]\ngrace.hopper\n")
    owners = write(tmp_path, "teams/OWNERS", "ada.lovelace\ninclude rust\n")
    parsed = OwnersFileConfig.from_file(owners, tmp_path)
    assert parsed.all_files.owners == {"ada.lovelace", "katherine.johnson"}
    assert parsed.pattern_overrides == {"*.rs": OwnersSet(owners={"grace.hopper"})}


def test_include_absolute_is_repo_relative(tmp_path: Path) -> None:
    """Verify that includes starting with '/' resolve against the repo base."""
    write(tmp_path, "shared/OWNERS.core", "margaret.hamilton\n")
    owners = write(tmp_path, "a/b/OWNERS", "include /shared/OWNERS.core\n")
    parsed = OwnersFileConfig.from_file(owners, tmp_path)
    assert parsed.all_files.owners == {"margaret.hamilton"}


def test_include_sections_do_not_leak(tmp_path: Path) -> None:
    """Verify that owners after an include go back to the directory owners."""
    write(tmp_path, "rust", "[*.rs]\ngrace.hopper\n")
    owners = write(tmp_path, "OWNERS", "include rust\nada.lovelace\n")
    parsed = OwnersFileConfig.from_file(owners, tmp_path)
    assert parsed.all_files.owners == {"ada.lovelace"}
    assert parsed.pattern_overrides["*.rs"].owners == {"grace.hopper"}


def test_include_same_file_twice(tmp_path: Path) -> None:
    """Verify that a file may be included again once its expansion is done."""
    write(tmp_path, "team", "ada.lovelace\n")
    owners = write(tmp_path, "OWNERS", "include team\ninclude ./team\n")
    parsed = OwnersFileConfig.from_file(owners, tmp_path)
    assert parsed.all_files.owners == {"ada.lovelace"}


@pytest.mark.parametrize("line", ["include", "include a b"])
def test_include_malformed(tmp_path: Path, line: str) -> None:
    """Verify that include needs exactly one path."""
    owners = write(tmp_path, "OWNERS", f"{line}\n")
    with pytest.raises(OwnersFileError, match="Invalid include format"):
        OwnersFileConfig.from_file(owners, tmp_path)


def test_include_inside_pattern_section(tmp_path: Path) -> None:
    """Verify that includes are rejected inside pattern sections."""
    write(tmp_path, "team", "ada.lovelace\n")
    owners = write(tmp_path, "OWNERS", "[*.rs]\ninclude team\n")
    with pytest.raises(OwnersFileError, match="inside a pattern section"):
        OwnersFileConfig.from_file(owners, tmp_path)


def test_include_from_included_file(tmp_path: Path) -> None:
    """Verify that included files cannot include further files."""
    write(tmp_path, "inner", "ada.lovelace\n")
    write(tmp_path, "outer", "include inner\n")
    owners = write(tmp_path, "OWNERS", "include outer\n")
    with pytest.raises(OwnersFileError, match="not allowed in an included file"):
        OwnersFileConfig.from_file(owners, tmp_path)


def test_set_in_included_file(tmp_path: Path) -> None:
    """Verify that directives are rejected inside included files."""
    write(tmp_path, "team", "set inherit = false\nada.lovelace\n")
    owners = write(tmp_path, "OWNERS", "include team\n")
    with pytest.raises(OwnersFileError) as excinfo:
        OwnersFileConfig.from_file(owners, tmp_path)
    assert excinfo.value.lineno == 1
    assert Path(excinfo.value.path).name == "team"


def test_include_self_cycle(tmp_path: Path) -> None:
    """Verify that a file including itself is a cycle."""
    owners = write(tmp_path, "OWNERS", "ada.lovelace\ninclude OWNERS\n")
    with pytest.raises(IncludeCycleError) as excinfo:
        OwnersFileConfig.from_file(owners, tmp_path)
    resolved = owners.resolve()
    assert excinfo.value.chain == [resolved, resolved]
    assert excinfo.value.lineno == 2


def test_include_two_file_cycle(tmp_path: Path) -> None:
    """Verify that X -> Y -> X reports the full chain root to leaf."""
    other = write(tmp_path, "other", "include OWNERS\n")
    owners = write(tmp_path, "OWNERS", "include other\n")
    with pytest.raises(IncludeCycleError, match="Include cycle detected") as excinfo:
        OwnersFileConfig.from_file(owners, tmp_path)
    assert excinfo.value.chain == [owners.resolve(), other.resolve(), owners.resolve()]
    assert " -> " in str(excinfo.value)


def test_include_outside_repository(tmp_path: Path) -> None:
    """Verify that includes cannot escape the repository base."""
    write(tmp_path, "outside", "ada.lovelace\n")
    owners = write(tmp_path, "repo/OWNERS", "include ../outside\n")
    with pytest.raises(OwnersFileError, match="outside of the repository"):
        OwnersFileConfig.from_file(owners, tmp_path / "repo")


def test_include_missing_file(tmp_path: Path) -> None:
    """Verify that unreadable includes fail with file and line context."""
    owners = write(tmp_path, "OWNERS", "ada.lovelace\ninclude missing\n")
    with pytest.raises(OwnersFileError, match="Unable to read included file") as exc:
        OwnersFileConfig.from_file(owners, tmp_path)
    assert exc.value.lineno == 2
    assert isinstance(exc.value.__cause__, OSError)


def test_include_chain_pops_on_error(tmp_path: Path) -> None:
    """Verify that an active file is removed even when its parse fails."""
    top = tmp_path / "OWNERS"
    nested = tmp_path / "nested"
    chain = IncludeChain(top)
    with pytest.raises(RuntimeError), chain.entered(nested, top):
        assert nested in chain
        assert chain.depth == 2
        raise RuntimeError
    assert nested not in chain
    assert chain.depth == 1


def test_top_level_file_not_utf8(tmp_path: Path) -> None:
    """Verify that undecodable OWNERS files fail with the file path."""
    owners = tmp_path / "OWNERS"
    owners.write_bytes(b"ada\n\xff\xfe\n")
    with pytest.raises(OwnersFileError, match="not valid UTF-8") as excinfo:
        OwnersFileConfig.from_file(owners, tmp_path)
    assert excinfo.value.path == owners
    assert isinstance(excinfo.value.__cause__, UnicodeDecodeError)


def test_included_file_not_utf8(tmp_path: Path) -> None:
    """Verify that undecodable included files fail at the include line."""
    (tmp_path / "team").write_bytes(b"\xff\xfe\n")
    owners = write(tmp_path, "OWNERS", "ada.lovelace\ninclude team\n")
    with pytest.raises(OwnersFileError, match="Unable to read included file") as exc:
        OwnersFileConfig.from_file(owners, tmp_path)
    assert exc.value.lineno == 2
    assert isinstance(exc.value.__cause__, UnicodeDecodeError)
