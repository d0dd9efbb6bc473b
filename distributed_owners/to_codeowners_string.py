"""Rendering of resolved owners as CODEOWNERS text."""

ROOT_PATTERN = "/"
ROOT_WILDCARD = "*"


def format_owner(owner: str) -> str:
    """Reference an owner the way CODEOWNERS expects.

    Names containing ``@`` (emails, ``@org/team``) are used as is, anything
    else is taken to be a user name and prefixed with ``@``.
    """
    if "@" in owner:
        return owner
    return f"@{owner}"


def to_codeowners_string(codeowners: dict[str, set[str]]) -> str:
    """Render one line per pattern, sorted by pattern then owner.

    The repository root is written as ``*``. A pattern without owners is
    written bare so it clears ownership inherited from earlier lines, except
    for an unowned root, which is left out.
    """
    lines = []
    for pattern in sorted(codeowners):
        rendered = ROOT_WILDCARD if pattern == ROOT_PATTERN else pattern
        owners = [format_owner(o) for o in sorted(codeowners[pattern])]
        if not owners:
            if rendered == ROOT_WILDCARD:
                continue
            lines.append(rendered)
            continue
        lines.append(" ".join([rendered, *owners]))
    return "\n".join(lines)
