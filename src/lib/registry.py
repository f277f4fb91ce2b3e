"""
Loader integration

Installs the component loader into a host module system and removes it
again. The host is modelled explicitly by ModuleHost: a table of file
suffix handlers, a cache of loaded modules, and a compiler callable that
turns script text into module exports (the runtime that actually runs
the script is supplied by the embedding application).

LoaderRegistry owns the only mutable state of the loader: the installed
handler and the cache of generated source maps, keyed by file.

Usage:
    from vuegister.lib.registry import register, unregister, require

    register({"maps": True})
    exports = require("components/Hello.vue")
    unloaded = unregister()
"""

import os
from typing import Any, Callable, Dict, List, Optional

from ..config import appsettings
from ..models.host import ModuleRecord
from ..models.options import LoadOptions
from .loader import component_load
from .log import LOG
from .sourcemap import position_find
from .transpiler import PluginRegistry

# handler(record, file) loads file into record
ExtensionHandler = Callable[[ModuleRecord, str], None]

# compiler(code, file) -> exports
ScriptCompiler = Callable[[str, str], Any]


def source_keep(code: str, file: str) -> Dict[str, str]:
    """Default host compiler: the exports are the compiled code itself"""
    return {"file": file, "code": code}


class ModuleHost:
    """
    Minimal host module system

    Attributes:
        extensions: File suffix -> handler loading that kind of file
        cache: Module id -> ModuleRecord for every loaded module
        compiler: Callable turning script text into module exports
    """

    def __init__(self, compiler: Optional[ScriptCompiler] = None) -> None:
        self.extensions: Dict[str, ExtensionHandler] = {}
        self.cache: Dict[str, ModuleRecord] = {}
        self.compiler = compiler or source_keep

    def handler_get(self, file: str) -> ExtensionHandler:
        """
        Find the handler for a file by its suffix

        Raises:
            ImportError: If no handler is installed for the suffix
        """
        suffix = os.path.splitext(file)[1]
        handler = self.extensions.get(suffix)
        if handler is None:
            raise ImportError(f"No loader registered for '{suffix}' files: {file}", path=file)
        return handler

    def require(self, file: str, parent: Optional[ModuleRecord] = None) -> Any:
        """
        Load a module, or return it from the cache

        Args:
            file: Path of the module file
            parent: Module requiring this one, recorded as its parent

        Returns:
            The module's exports
        """
        module_id = os.path.abspath(file)
        record = self.cache.get(module_id)

        if record is None:
            handler = self.handler_get(module_id)
            record = ModuleRecord(id=module_id)
            self.cache[module_id] = record
            try:
                handler(record, module_id)
            except Exception:
                del self.cache[module_id]
                raise
            record.loaded = True

        if parent is not None and record not in parent.children:
            parent.children.append(record)

        return record.exports

    def compile(self, record: ModuleRecord, code: str, file: str) -> None:
        """Compile script text into the exports of record"""
        record.exports = self.compiler(code, file)


class LoaderRegistry:
    """
    Reversible installation of the component loader into a ModuleHost

    Only one component handler can be installed on a host at a time; a
    second install() is a no-op returning False.

    Attributes:
        host: Module system the handler is installed into
        plugins: PluginRegistry used to resolve transpilers
        options: Options of the current installation
        sourcemaps: Generated source maps keyed by file
    """

    def __init__(
        self,
        host: Optional[ModuleHost] = None,
        plugins: Optional[PluginRegistry] = None,
    ) -> None:
        self.host = host or ModuleHost()
        self.plugins = plugins
        self.extension = appsettings.extension
        self.options = LoadOptions.options_create()
        self.sourcemaps: Dict[str, Dict[str, Any]] = {}

    def installed_is(self) -> bool:
        """Check if a handler for component files is installed on the host"""
        return self.extension in self.host.extensions

    def install(self, options: Optional[Any] = None) -> bool:
        """
        Install the component handler

        Args:
            options: Mapping (maps, lang, plugins) merged over defaults

        Returns:
            True on success, False if a handler was already installed
        """
        if self.installed_is():
            LOG(f"Handler for '{self.extension}' already installed", level=2)
            return False

        self.options = LoadOptions.options_create(options)

        def component_handle(record: ModuleRecord, file: str) -> None:
            script = component_load(file, self.options, self.sourcemaps, self.plugins)
            self.host.compile(record, script, file)

        self.host.extensions[self.extension] = component_handle
        LOG(f"Installed handler for '{self.extension}' (maps={self.options.maps})", level=2)
        return True

    def uninstall(self) -> List[str]:
        """
        Remove the component handler and evict loaded components

        Every cached component module is removed together with the modules
        it required, recursively.

        Returns:
            Ids of the evicted modules
        """
        unloaded: List[str] = []

        def unload(module_id: str) -> None:
            record = self.host.cache.pop(module_id, None)
            if record is None:
                return
            for child in record.children:
                unload(child.id)
            unloaded.append(module_id)

        for module_id in list(self.host.cache):
            if os.path.splitext(module_id)[1] == self.extension:
                unload(module_id)

        self.host.extensions.pop(self.extension, None)
        self.sourcemaps.clear()

        LOG(f"Uninstalled handler for '{self.extension}', evicted {len(unloaded)} modules", level=2)
        return unloaded

    def sourceMap_retrieve(self, file: str) -> Optional[Dict[str, Any]]:
        """
        Look up the source map generated for a file

        Returns:
            {"map": sourcemap, "url": file}, or None if no map was generated
        """
        sourcemap = self.sourcemaps.get(file)
        if sourcemap is None:
            return None
        return {"map": sourcemap, "url": file}

    def position_resolve(self, file: str, line: int, column: int) -> Optional[Dict[str, Any]]:
        """
        Map a stack trace position back to the component file

        Args:
            file: File named in the stack trace
            line: 1-based line in the generated script
            column: 0-based column in the generated script

        Returns:
            Dict with source, 1-based line, column and name of the original
            position, or None if the file has no map or the line no mappings
        """
        retrieved = self.sourceMap_retrieve(file)
        if retrieved is None:
            return None

        entry = position_find(retrieved["map"], line - 1, column)
        if entry is None:
            return None

        return {
            "source": entry.source,
            "line": entry.original.line + 1,
            "column": entry.original.column,
            "name": entry.name,
        }


# Process-wide registry behind register()/unregister()/require()
registry = LoaderRegistry()


def register(options: Optional[Any] = None) -> bool:
    """Install the component handler on the default host"""
    return registry.install(options)


def unregister() -> List[str]:
    """Remove the component handler from the default host"""
    return registry.uninstall()


def require(file: str) -> Any:
    """Load a module through the default host"""
    return registry.host.require(file)
