"""
Models package for vuegister

Contains data structures and type definitions for the loader pipeline.
"""

from .state import ProgramState, pipeline
from .section import Section, TranspileResult, Position, MappingEntry, ScriptToken
from .options import LoadOptions, config_merge
from .plugins import PluginSpec, PluginOrigin
from .host import ModuleRecord

__all__ = [
    "ProgramState",
    "pipeline",
    "Section",
    "TranspileResult",
    "Position",
    "MappingEntry",
    "ScriptToken",
    "LoadOptions",
    "config_merge",
    "PluginSpec",
    "PluginOrigin",
    "ModuleRecord",
]
