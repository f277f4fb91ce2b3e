"""
vuegister - Single-file component loader

Extracts script and template sections from *.vue files, transpiles them
through pluggable transpilers and keeps source maps pointing back at the
component file.
"""

__version__ = "0.3.0"

from .location import LineIndex
from .extractor import extract
from .sourcemap import map_generate, mappings_decode
from .transpiler import transpile, PluginRegistry, PluginError, PluginNotFoundError
from .loader import load, component_load
from .registry import LoaderRegistry, ModuleHost, register, unregister, require
from .log import LOG, state_connectToLogger

__all__ = [
    "LineIndex",
    "extract",
    "map_generate",
    "mappings_decode",
    "transpile",
    "PluginRegistry",
    "PluginError",
    "PluginNotFoundError",
    "load",
    "component_load",
    "LoaderRegistry",
    "ModuleHost",
    "register",
    "unregister",
    "require",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
