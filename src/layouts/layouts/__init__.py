"""layouts - nested layout resolution for template pipelines.

Flattens a chain of layouts (each one wrapping the next through its
"{{ body }}" tag) into a single template plus the merged data context.
Rendering the result is left to the caller.
"""

from layouts.chain import is_absent_reference, resolve_chain
from layouts.config import (
    LayoutOptions,
    load_layouts_file,
    load_layouts_yaml,
    resolve_options,
)
from layouts.context import RESERVED_KEYS, flatten, merge_into
from layouts.engine import InjectResult, Layouts, StackResult
from layouts.exceptions import LayoutConfigError, LayoutCycleError, LayoutsError
from layouts.store import LayoutRecord, TemplateStore
from layouts.tags import BodyPattern, make_pattern, make_tag

__all__ = [
    # Engine
    "Layouts",
    "StackResult",
    "InjectResult",
    # Store
    "LayoutRecord",
    "TemplateStore",
    # Building blocks
    "make_tag",
    "make_pattern",
    "BodyPattern",
    "resolve_chain",
    "is_absent_reference",
    "merge_into",
    "flatten",
    "RESERVED_KEYS",
    # Config
    "LayoutOptions",
    "resolve_options",
    "load_layouts_file",
    "load_layouts_yaml",
    # Errors
    "LayoutsError",
    "LayoutConfigError",
    "LayoutCycleError",
]
