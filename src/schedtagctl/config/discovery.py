"""Config file discovery.

Walk-up finder locates schedtagctl.toml, similar to how git finds .git/.
Supports SCHEDTAGCTL_CONFIG env var and --config CLI flag overrides.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "schedtagctl.toml"
CONFIG_ENV_VAR = "SCHEDTAGCTL_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for schedtagctl.toml.

    Returns the path to the config file, or None if not found.
    Checks SCHEDTAGCTL_CONFIG env var first.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        if p.is_file():
            return p
        return None

    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        if current.parent == current:
            return None
        current = current.parent
