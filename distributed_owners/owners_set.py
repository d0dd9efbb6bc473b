"""A set of owners together with its inheritance setting."""

import re
from dataclasses import dataclass, field

SET_LINE_RE = re.compile(r"^set\s+(?P<variable>\w+)\s*=\s*(?P<value>\w+)$")

_BOOL_VALUES = {"true": True, "false": False}


@dataclass
class OwnersSet:
    """Owners for a scope (a directory or a file pattern).

    ``inherit`` is ``None`` when the OWNERS file does not say, in which case the
    caller supplied default applies.
    """

    inherit: bool | None = None
    owners: set[str] = field(default_factory=set)

    def inherits(self, implicit_inherit: bool) -> bool:
        """Whether this scope includes the owners of its enclosing scope."""
        if self.inherit is None:
            return implicit_inherit
        return self.inherit

    def maybe_process_set(self, line: str) -> bool:
        """Apply ``line`` if it is a ``set <variable> = <value>`` directive.

        Returns whether the line was a directive. Raises ValueError for a
        malformed directive, an unknown variable or an invalid value.
        """
        if not line.startswith("set "):
            return False

        match = SET_LINE_RE.match(line)
        if not match:
            msg = f"Invalid set format '{line}'. Expected 'set <variable> = <value>'."
            raise ValueError(msg)

        variable = match.group("variable")
        value = match.group("value")
        if variable != "inherit":
            msg = f"Invalid set variable '{variable}'."
            raise ValueError(msg)
        if value not in _BOOL_VALUES:
            msg = f"Invalid value for inherit '{value}': Must be 'true' or 'false'."
            raise ValueError(msg)

        self.inherit = _BOOL_VALUES[value]
        return True
