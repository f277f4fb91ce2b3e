"""
Transpile dispatcher

Routes the text of a section to the transpiler plugin for its language.

Resolution order for a language tag, e.g. "coffee":
1. A plugin registered on the PluginRegistry at runtime
2. An installed entry point named "coffee" in the vuegister.plugins group
3. An importable module vuegister_plugin_coffee exposing transpile()

When none resolves, the built-in languages fall back to passthrough:
- js: text unchanged, a source map when maps are wanted and offset > 0
- html: text unchanged, no map
Any other language is a hard error naming the plugin to install.

Plugins are trusted: whatever they return is handed back unchanged and
exceptions raised inside them propagate to the caller.

Plugin contract:
    def transpile(text: str, options: Mapping) -> {"text": str, "map": dict | None}

    options keys:
        file: target file identifier
        maps: whether a source map is wanted
        offset: line shift for source map correction
        extra: user configuration for the plugin, passed through verbatim
"""

import importlib
from importlib.metadata import entry_points
from typing import Any, Dict, Mapping, Optional

from ..models.plugins import PluginCallable, PluginOrigin, PluginSpec
from ..models.section import TranspileResult
from .log import LOG
from .sourcemap import map_generate


class PluginNotFoundError(LookupError):
    """Raised when no plugin resolves for a language tag"""

    def __init__(self, lang: str, message: str) -> None:
        super().__init__(message)
        self.lang = lang


class PluginError(Exception):
    """Raised when a section needs a plugin that is not installed"""
    pass


TRANSPILE_DEFAULTS: Dict[str, Any] = {
    "file": "unknown",
    "maps": False,
    "offset": 0,
    "extra": {},
}


def js_transpile(text: str, options: Mapping[str, Any]) -> TranspileResult:
    """Built-in script passthrough, optionally with a source map"""
    sourcemap = None
    if options['maps'] and options['offset'] > 0:
        sourcemap = map_generate(text, options['file'], options['offset'])
    return TranspileResult(text=text, map=sourcemap)


def html_transpile(text: str, options: Mapping[str, Any]) -> TranspileResult:
    """Built-in markup passthrough"""
    return TranspileResult(text=text, map=None)


class PluginRegistry:
    """
    Registry of transpiler plugins keyed by language tag

    Explicit registrations take precedence over installed plugins;
    installed plugins are looked up on every resolution so a plugin
    installed while the process runs is picked up.
    """

    def __init__(self) -> None:
        """Initialize the registry with the built-in passthroughs"""
        from ..config import appsettings

        self.settings = appsettings
        self.specs: Dict[str, PluginSpec] = {}
        self.builtins: Dict[str, PluginSpec] = {}
        self.builtinPlugins_register()

    def builtinPlugins_register(self) -> None:
        """Register the passthroughs for the default script/markup languages"""
        for lang, handler in (
            (self.settings.script_lang, js_transpile),
            (self.settings.template_lang, html_transpile),
        ):
            self.builtins[lang] = PluginSpec(
                lang=lang,
                handler=handler,
                origin=PluginOrigin.BUILTIN,
                name=f"builtin:{lang}",
            )

    def register(self, lang: str, handler: PluginCallable) -> None:
        """Register a plugin for a language, overriding installed ones"""
        if not callable(handler):
            raise TypeError('Plugin must be callable.')

        self.specs[lang] = PluginSpec(
            lang=lang,
            handler=handler,
            origin=PluginOrigin.REGISTERED,
            name=self.settings.pluginPackage_make(lang),
        )

    def unregister(self, lang: str) -> Optional[PluginSpec]:
        """Remove a registered plugin, returning its spec if there was one"""
        return self.specs.pop(lang, None)

    def entrypoint_find(self, lang: str) -> Optional[PluginSpec]:
        """Look up an installed plugin entry point named after the language"""
        group = self.settings.plugin_entrypoint_group
        for entrypoint in entry_points(group=group):
            if entrypoint.name == lang:
                return PluginSpec(
                    lang=lang,
                    handler=entrypoint.load(),
                    origin=PluginOrigin.ENTRYPOINT,
                    name=entrypoint.value,
                )
        return None

    def module_find(self, lang: str) -> PluginSpec:
        """
        Import the conventionally named plugin module for a language

        Raises:
            PluginNotFoundError: If the module does not exist or has no
                                 transpile() callable
        """
        module_name = self.settings.pluginModule_make(lang)

        try:
            module = importlib.import_module(module_name)
        except ModuleNotFoundError as err:
            # A missing dependency of an existing plugin is not "not found";
            # a dotted lang fails on a parent package of the plugin module
            if err.name is None or not (
                module_name == err.name or module_name.startswith(err.name + '.')
            ):
                raise
            raise PluginNotFoundError(lang, f"Cannot find module '{module_name}'") from err

        handler = getattr(module, 'transpile', None)
        if not callable(handler):
            raise PluginNotFoundError(
                lang, f"Module '{module_name}' does not provide transpile()"
            )

        return PluginSpec(
            lang=lang,
            handler=handler,
            origin=PluginOrigin.MODULE,
            name=module_name,
        )

    def spec_get(self, lang: str) -> PluginSpec:
        """
        Resolve the plugin for a language, without built-in fallback

        Raises:
            PluginNotFoundError: If no plugin resolves
        """
        if lang in self.specs:
            return self.specs[lang]

        spec = self.entrypoint_find(lang)
        if spec is not None:
            return spec

        return self.module_find(lang)

    def resolve(self, lang: str) -> PluginSpec:
        """
        Resolve the plugin for a language, falling back to built-ins

        Raises:
            PluginError: If nothing resolves and lang is not built in
        """
        try:
            return self.spec_get(lang)
        except PluginNotFoundError as err:
            if lang in self.builtins:
                return self.builtins[lang]

            package = self.settings.pluginPackage_make(lang)
            raise PluginError(
                f"Plugin {package} not found.\n"
                f"{err}\n"
                f"Install it with: pip install {package}"
            ) from err


# Process-wide registry used when no registry is passed explicitly
plugins = PluginRegistry()


def options_normalize(options: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Fill in the default transpile options"""
    if options is None:
        options = {}
    if not isinstance(options, Mapping):
        raise TypeError('Options must be a mapping.')
    return {**TRANSPILE_DEFAULTS, **options}


def transpile(
    lang: str,
    text: str,
    options: Optional[Mapping[str, Any]] = None,
    registry: Optional[PluginRegistry] = None,
) -> Any:
    """
    Pass section text to the plugin for its language

    Args:
        lang: Language tag (lang attribute or the tag's default)
        text: Section text
        options: Mapping with file, maps, offset and extra
        registry: PluginRegistry to resolve from (default: module registry)

    Returns:
        TranspileResult for built-ins, the plugin's return value otherwise

    Raises:
        TypeError: If lang or text is not a string, or options not a mapping
        PluginError: If no plugin is installed for a non built-in language
    """
    if not isinstance(lang, str):
        raise TypeError('Language must be a string.')
    if not isinstance(text, str):
        raise TypeError('Text must be a string.')

    options = options_normalize(options)
    registry = registry or plugins

    spec = registry.resolve(lang)
    if spec.builtin_is():
        LOG(f"No plugin for '{lang}', passing {options['file']} through", level=2)
    else:
        LOG(f"Transpiling {options['file']} as '{lang}' via {spec.name}", level=2)

    return spec.handler(text, options)
