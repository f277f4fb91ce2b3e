"""
Host module system models

Records kept by the ModuleHost for every loaded module.
"""

from dataclasses import dataclass, field
from typing import Any, List


@dataclass
class ModuleRecord:
    """
    A module loaded through the ModuleHost

    Attributes:
        id: Absolute path of the module file (cache key)
        exports: Whatever the host compiler produced for the module
        children: Modules required while this one was loading
        loaded: Whether loading finished

    Example:
        ModuleRecord(id="/app/Hello.vue", exports={...}, children=[], loaded=True)
    """
    id: str
    exports: Any = None
    children: List["ModuleRecord"] = field(default_factory=list)
    loaded: bool = False
