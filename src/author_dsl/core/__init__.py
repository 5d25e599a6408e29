"""Core author DSL runtime.

This module defines the core infrastructure for parsing author files
and running plugins over them.

It provides:
- a plugin registry classifying plugins by their declared roles and
  discovering third-party plugins from entry points;
- a plugin pipeline invoking registered plugins at every parsing,
  validation and formatting stage;
- a line-oriented parser assembling nested documents.

The primary public entry point is `DocumentParser`, which owns a registry
and a pipeline and turns author files into documents.
"""

from .parser import DocumentParser, ParseState
from .pipeline import PluginPipeline
from .registry import ENTRYPOINT_GROUP, PluginRegistry

__all__ = (
    'ENTRYPOINT_GROUP',
    'DocumentParser',
    'ParseState',
    'PluginPipeline',
    'PluginRegistry',
)
