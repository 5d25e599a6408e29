"""Parser and plugin runtime for the author.txt DSL.

The `author_dsl` package reads author files, a small line-oriented
format describing an author profile:

```text
# comments start with a hash
Author: Jane Doe
Website@url: https://example.com
Skills: Python, Rust, C
Begin Project
  Name: author-dsl
End Project
Bio: \"\"\"
Writes parsers.
\"\"\"
```

Key features:
- nested, repeatable `Begin`/`End` blocks and key collisions folded
  into lists;
- typed keys (`Key@Type`) interpreted by type handler plugins;
- document validators and output formatters provided by plugins;
- parse hooks rewriting input, statements and the final document;
- third-party plugins discovered from the `author_dsl_plugins`
  entry-point group.
"""

from author_dsl.context import PluginContext
from author_dsl.core import DocumentParser, PluginPipeline, PluginRegistry
from author_dsl.errors import (
    DSLError,
    FormatUnavailableError,
    PluginError,
    PluginErrorCode,
    PluginWarning,
    StructuralError,
)
from author_dsl.extensions import Capability, Formatter, ParseHook, Plugin, TypeHandler, Validator
from author_dsl.settings import ParserSettings
from author_dsl.values import get_value, process_value

__all__ = (
    'Capability',
    'DSLError',
    'DocumentParser',
    'FormatUnavailableError',
    'Formatter',
    'ParseHook',
    'ParserSettings',
    'Plugin',
    'PluginContext',
    'PluginError',
    'PluginErrorCode',
    'PluginPipeline',
    'PluginRegistry',
    'PluginWarning',
    'StructuralError',
    'TypeHandler',
    'Validator',
    'get_value',
    'process_value',
)
