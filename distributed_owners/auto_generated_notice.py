"""Banner marking a CODEOWNERS file as generated."""

import textwrap

RULE = "#" * 80
WIDTH = 78


def _centered(text: str) -> str:
    return f"# {text:^{WIDTH}}".rstrip()


def get_auto_generated_notice(message: str | None = None) -> str:
    """Build the banner, with ``message`` wrapped and centred inside it."""
    lines = [
        RULE,
        _centered("AUTO GENERATED FILE"),
        _centered("Do Not Manually Update"),
    ]
    if message:
        lines.extend(_centered(line) for line in textwrap.wrap(message, WIDTH))
    lines += [
        _centered("Generated from OWNERS files by"),
        _centered("distributed-owners"),
        RULE,
    ]
    return "\n".join(lines)
