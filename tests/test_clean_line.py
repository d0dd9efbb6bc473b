"""Tests for OWNERS line normalization."""

from distributed_owners.clean_line import clean_line


def test_clean_line() -> None:
    """Verify that comments and surrounding whitespace are removed."""
    assert clean_line("  ada.lovelace  ") == "ada.lovelace"
    assert clean_line("ada.lovelace # team lead") == "ada.lovelace"
    assert clean_line("# only a comment") == ""
    assert clean_line("   ") == ""
    assert clean_line("[*.rs]#rust") == "[*.rs]"
