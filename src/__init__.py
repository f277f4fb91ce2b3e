"""
vuegister - Single-file component loader

Loads *.vue components as script modules, with pluggable transpilers and
source maps that point back at the component file.
"""

__version__ = "0.3.0"

from .lib import (
    extract,
    load,
    transpile,
    map_generate,
    register,
    unregister,
    require,
    LineIndex,
    LoaderRegistry,
    PluginRegistry,
    PluginError,
    LOG,
    state_connectToLogger,
)

__all__ = [
    "extract",
    "load",
    "transpile",
    "map_generate",
    "register",
    "unregister",
    "require",
    "LineIndex",
    "LoaderRegistry",
    "PluginRegistry",
    "PluginError",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
