"""Normalization of a single OWNERS file line."""


def clean_line(line: str) -> str:
    """Remove comments and surrounding whitespace from a line."""
    return line.split("#", 1)[0].strip()
