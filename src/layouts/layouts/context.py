"""Context merging across a layout chain.

Each resolution step shallow-merges data sources into the context
(last write wins), inlines nested collections listed in `flatten`, and
drops the keys that describe resolution machinery rather than data.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Mapping

RESERVED_KEYS = ("content", "delims", "layout", "data", "locals")

MergeFn = Callable[..., Any]


def merge_into(
    context: dict[str, Any],
    *sources: Mapping[str, Any] | None,
    extend: MergeFn | None = None,
) -> dict[str, Any]:
    """Merge sources into context in order, later keys winning."""
    sources = tuple(s for s in sources if s)
    if extend is not None:
        result = extend(context, *sources)
        return context if result is None else result

    for source in sources:
        context.update(source)
    return context


def flatten(
    context: dict[str, Any], keys: Iterable[str] = ("data",)
) -> dict[str, Any]:
    """Inline nested mappings one level up.

    For each key holding a mapping, its entries move to the top level and
    the key is removed. Nested entries win over top-level keys of the same
    name. Non-mapping values are left alone.
    """
    for key in keys:
        value = context.get(key)
        if isinstance(value, Mapping):
            del context[key]
            context.update(value)
    return context


def strip_reserved(context: dict[str, Any]) -> dict[str, Any]:
    """Remove resolution machinery keys from context."""
    for key in RESERVED_KEYS:
        context.pop(key, None)
    return context


def merge_step(
    context: dict[str, Any],
    call_data: Mapping[str, Any] | None,
    local_data: Mapping[str, Any] | None,
    layout_data: Mapping[str, Any] | None,
    flatten_keys: Iterable[str] = ("data",),
    extend: MergeFn | None = None,
) -> dict[str, Any]:
    """Run one resolution step for a single layout in the chain.

    Merge order is per-call data, then locals, then the layout's own data,
    so the layout closest to the page has the last word.
    """
    context = merge_into(context, call_data, local_data, layout_data, extend=extend)
    flatten(context, flatten_keys)
    return strip_reserved(context)
