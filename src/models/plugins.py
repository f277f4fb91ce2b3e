"""
Transpiler plugin specification models

Describes a resolved transpiler plugin and where it was found, for the
PluginRegistry and its log output.
"""

from enum import Enum
from dataclasses import dataclass
from typing import Any, Callable, Mapping


class PluginOrigin(Enum):
    """
    Where a plugin was resolved from

    Resolution tries the origins in this order, BUILTIN last.
    """
    REGISTERED = "registered"    # PluginRegistry.register()
    ENTRYPOINT = "entrypoint"    # installed distribution, vuegister.plugins group
    MODULE = "module"            # importable vuegister_plugin_<lang> module
    BUILTIN = "builtin"          # passthrough for the default languages


# plugin(text, options) -> {"text": ..., "map": ...} or TranspileResult
PluginCallable = Callable[[str, Mapping[str, Any]], Any]


@dataclass
class PluginSpec:
    """
    A transpiler resolved for one language tag

    Attributes:
        lang: Language tag the plugin handles (e.g., "coffee", "ts")
        handler: Callable invoked as handler(text, options)
        origin: Where the handler was found
        name: Conventional plugin name, or the entry point / module path
    """
    lang: str
    handler: PluginCallable
    origin: PluginOrigin
    name: str = ""

    def builtin_is(self) -> bool:
        """Check if this is a built-in passthrough"""
        return self.origin is PluginOrigin.BUILTIN
