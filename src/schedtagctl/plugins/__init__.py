"""Extension layer: plugin system via pluggy.

Discovery: entry_points (pip-installed) in the ``schedtagctl.plugins`` group.
INVARIANT: Plugin failures are warnings, never errors.
"""

from schedtagctl.plugins.manager import PluginManager

__all__ = ["PluginManager"]
