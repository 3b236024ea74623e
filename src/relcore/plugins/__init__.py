"""Extension layer — side-effect dispatch via pluggy.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints.
INVARIANT: Plugin failures are warnings, never errors.
"""

from relcore.plugins.emitter import SideEffectEmitter
from relcore.plugins.event_bus import EventBus
from relcore.plugins.manager import PluginManager

__all__ = ["EventBus", "PluginManager", "SideEffectEmitter"]
