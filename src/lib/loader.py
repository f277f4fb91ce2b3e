"""
Component loader

Turns the text of a single-file component into ready-to-compile script:

1. extract the <script> and <template> sections
2. read src-referenced files relative to the component
3. transpile every section for its language
4. keep the source maps that were produced
5. append the template to the component's options object

Example:
    >>> maps = {}
    >>> script = load(source, "/app/Hello.vue", {"maps": True}, maps)
    >>> sorted(maps)
    ['/app/Hello.vue']
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Mapping, MutableMapping, Optional

from ..config import appsettings
from ..models.options import LoadOptions
from ..models.section import Section, TranspileResult
from .extractor import extract
from .log import LOG
from .transpiler import PluginRegistry, TRANSPILE_DEFAULTS, transpile

SECTION_TAGS = ['script', 'template']


def result_coerce(result: Any) -> TranspileResult:
    """
    Read the text and map out of a plugin result

    Plugins may return a TranspileResult or any mapping with "text" and
    optionally "map".
    """
    if isinstance(result, TranspileResult):
        return result
    if isinstance(result, Mapping) and 'text' in result:
        return TranspileResult(text=result['text'], map=result.get('map'))
    raise TypeError(
        f"Plugin result must provide 'text' and 'map', got {type(result).__name__}."
    )


def sectionSource_read(section: Section, file: Optional[str]) -> str:
    """
    Read the external file of a section with a src attribute

    The src path is resolved against the directory of the component file,
    or the working directory when the component has no file.

    Returns:
        Absolute path of the external file; its text replaces section.text
    """
    directory = Path(file).parent if file else Path.cwd()
    source_file = os.path.abspath(directory / section.src)

    LOG(f"Reading <{section.tag}> from {source_file}", level=2)
    section.text = Path(source_file).read_text(encoding=appsettings.encoding)
    return source_file


def template_inject(template: Optional[str]) -> str:
    """
    Append the template to the component options

    Vue warns about a missing template or render function when a
    component is loaded outside of a bundler; the footer sets
    options.template from the extracted template section.

    Args:
        template: Template text, None when the component has none

    Returns:
        Script lines to append to the component script
    """
    lines = [
        '',
        'var __vue__options__ = (module.exports.__esModule) ?',
        'module.exports.default : module.exports;',
        '__vue__options__.template = ' + json.dumps(template, ensure_ascii=False) + ';',
        '',
    ]
    return os.linesep.join(lines)


def load(
    buf: str,
    file: Optional[str] = None,
    cfg: Optional[Mapping[str, Any]] = None,
    sourcemaps: Optional[MutableMapping[str, Dict[str, Any]]] = None,
    registry: Optional[PluginRegistry] = None,
) -> str:
    """
    Load a single-file component as script

    Args:
        buf: Content of the component file
        file: Full path of the component, used to resolve src attributes
              and as the source of generated maps
        cfg: Options mapping (maps, lang, plugins), merged over defaults
        sourcemaps: Mapping that receives produced source maps keyed by
                    the file they describe
        registry: PluginRegistry to resolve plugins from

    Returns:
        Script with the template injected

    Raises:
        TypeError: If buf is not a string
        PluginError: If a section needs a plugin that is not installed
    """
    if not isinstance(buf, str):
        raise TypeError('First argument must be a string.')

    options = LoadOptions.options_create(cfg)
    component: Dict[str, str] = {}

    for section in extract(buf, SECTION_TAGS):
        lang = options.lang_get(section)
        section_file = file

        if section.src is not None:
            section_file = sectionSource_read(section, file)

        if section_file is None:
            section_file = TRANSPILE_DEFAULTS['file']

        result = result_coerce(transpile(lang, section.text, {
            'file': section_file,
            'maps': options.maps,
            'offset': section.shift,
            'extra': dict(options.plugins.get(lang) or {}),
        }, registry=registry))

        component[section.tag] = result.text

        if options.maps and result.map and sourcemaps is not None:
            sourcemaps[section_file] = result.map
            LOG(f"Stored source map for {section_file}", level=3)

    script = component.get('script', '')
    return script + template_inject(component.get('template'))


def component_load(
    file: str,
    cfg: Optional[Mapping[str, Any]] = None,
    sourcemaps: Optional[MutableMapping[str, Dict[str, Any]]] = None,
    registry: Optional[PluginRegistry] = None,
) -> str:
    """
    Read a component file from disk and load it

    Args:
        file: Path of the component file
        cfg: Options mapping, see load()
        sourcemaps: Receives produced source maps, see load()
        registry: PluginRegistry to resolve plugins from

    Returns:
        Script with the template injected
    """
    path = os.path.abspath(file)
    LOG(f"Loading component {path}", level=1)
    buf = Path(path).read_text(encoding=appsettings.encoding)
    return load(buf, path, cfg, sourcemaps, registry)
