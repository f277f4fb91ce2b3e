"""
Load options model

Per-call configuration for load() and LoaderRegistry.install(), merged
over defaults taken from the application settings.
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from .section import Section


def config_merge(base: Dict[str, Any], overrides: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Recursively merge overrides into a copy of base.

    Nested dicts are merged key by key; every other value in overrides
    replaces the value in base. Keys whose override is None are left alone.

    Example:
        >>> config_merge({'lang': {'script': 'js', 'template': 'html'}},
        ...              {'lang': {'script': 'coffee'}})
        {'lang': {'script': 'coffee', 'template': 'html'}}
    """
    merged = copy.deepcopy(base)
    for key, value in overrides.items():
        if value is None:
            continue
        if isinstance(value, Mapping) and isinstance(merged.get(key), dict):
            merged[key] = config_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


@dataclass
class LoadOptions:
    """
    Options for loading a single-file component

    Attributes:
        maps: Produce source maps for script sections
        lang: Default language per tag for sections without a lang attribute
              (e.g., {"script": "js", "template": "html"})
        plugins: User configuration per plugin language, passed to the
                 plugin verbatim as options["extra"]
                 (e.g., {"coffee": {"bare": True}})
    """
    maps: bool = False
    lang: Dict[str, str] = field(default_factory=dict)
    plugins: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def options_create(
        cls, overrides: Optional[Mapping[str, Any]] = None
    ) -> "LoadOptions":
        """
        Create LoadOptions from application defaults deep-merged with overrides.

        Args:
            overrides: Mapping with any of maps/lang/plugins, or a LoadOptions

        Returns:
            Fully populated LoadOptions
        """
        from ..config import appsettings

        defaults: Dict[str, Any] = {
            "maps": appsettings.maps,
            "lang": appsettings.langDefaults_get(),
            "plugins": {},
        }

        if overrides is None:
            return cls(**defaults)

        if isinstance(overrides, LoadOptions):
            overrides = overrides.to_dict()

        if not isinstance(overrides, Mapping):
            raise TypeError('Options must be a mapping.')

        valid_fields = set(defaults)
        filtered = {k: v for k, v in overrides.items() if k in valid_fields}
        return cls(**config_merge(defaults, filtered))

    def lang_get(self, section: Section) -> Optional[str]:
        """Language of a section: its lang attribute, else the tag default"""
        if section.lang is not None:
            return section.lang
        return self.lang.get(section.tag)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "maps": self.maps,
            "lang": dict(self.lang),
            "plugins": copy.deepcopy(self.plugins),
        }
