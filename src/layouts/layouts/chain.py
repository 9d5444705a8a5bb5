"""Chain resolver - walks parent layout references up to the root."""

from __future__ import annotations

import logging
from typing import Any

from layouts.exceptions import LayoutCycleError
from layouts.store import TemplateStore

log = logging.getLogger(__name__)

# String references that mean "no parent layout"
ABSENT_REFERENCES = frozenset({"", "false", "none", "null", "nil", "undefined"})


def is_absent_reference(value: Any) -> bool:
    """Check whether a layout reference means "no further layout"."""
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value.strip().lower() in ABSENT_REFERENCES
    return False


def resolve_chain(store: TemplateStore, start: Any) -> list[str]:
    """Resolve the layout chain starting at `start`, root first.

    The walk stops at an absent reference or at a name with no stored
    record, so a missing start yields an empty chain.

    Args:
        store: Store to look records up in
        start: Name of the first (innermost) layout

    Returns:
        Layout names ordered from root to `start`

    Raises:
        LayoutCycleError: If a parent reference revisits a layout in the chain
    """
    chain: list[str] = []
    seen: set[str] = set()
    name = start

    while not is_absent_reference(name):
        record = store.get(name)
        if record is None:
            log.debug("Layout %r not found, chain ends", name)
            break
        if name in seen:
            walked = list(reversed(chain))
            cycle = walked[walked.index(name):] + [name]
            raise LayoutCycleError(cycle)

        seen.add(name)
        chain.insert(0, name)
        name = record.layout

    log.debug("Resolved chain for %r: %s", start, chain)
    return chain
