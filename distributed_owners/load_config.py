"""Loading of the distributed-owners configuration file."""

from pathlib import Path
from typing import Any

import yaml

from distributed_owners.deep_merge import deep_merge
from distributed_owners.errors import OwnersError

DEFAULT_CONFIG: dict[str, Any] = {
    # Whether a scope without "set inherit = ..." includes its parent's owners
    "implicit_inherit": True,
    # None writes to stdout
    "output_file": None,
    # Extra text for the generated file banner
    "message": None,
    # False restricts the walk to OWNERS files tracked by git
    "allow_non_git_files": False,
}


def load_config(path: str | Path | None = None) -> dict[str, Any]:
    """Load configuration from a YAML file and merge it with defaults."""
    config = DEFAULT_CONFIG.copy()
    if path:
        p = Path(path)
        if p.exists():
            user_config = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
            if not isinstance(user_config, dict):
                msg = f"Configuration file {p} must contain a mapping"
                raise OwnersError(msg)
            config = deep_merge(config, user_config)
    return config
