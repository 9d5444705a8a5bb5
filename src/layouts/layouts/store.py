"""Template store - layout records keyed by name.

A plain associative store: last write wins per name, no persistence.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterator, Mapping, Optional

RECORD_KEYS = ("layout", "content", "data")


def _check_layout(name: str, layout: Any) -> None:
    # YAML "layout: false" parses to a bool
    if layout is not None and not isinstance(layout, (str, bool)):
        raise TypeError(f"Layout '{name}' 'layout' must be a string")


@dataclass
class LayoutRecord:
    """A named template that may delegate to a parent layout."""

    layout: Optional[str] = None  # parent layout name, None for a root
    content: str = ""  # raw template body with at most one body placeholder
    data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, name: str, d: Any) -> "LayoutRecord":
        if isinstance(d, LayoutRecord):
            _check_layout(name, d.layout)
            return replace(d, data=dict(d.data))

        if isinstance(d, str):
            return cls(content=d)

        if not isinstance(d, Mapping):
            raise TypeError(f"Layout '{name}' must be a mapping or string")

        layout = d.get("layout")
        content = d.get("content")
        data = d.get("data") or {}

        _check_layout(name, layout)
        if not isinstance(data, Mapping):
            raise TypeError(f"Layout '{name}' 'data' must be a mapping")
        if content is not None and not isinstance(content, str):
            raise TypeError(f"Layout '{name}' 'content' must be a string")

        # Extra top-level keys are layout data too
        merged = {k: v for k, v in d.items() if k not in RECORD_KEYS}
        merged.update(data)

        return cls(
            layout=layout,
            content=content or "",
            data=merged,
        )


class TemplateStore:
    """Layout records keyed by name."""

    def __init__(self, records: Mapping[str, Any] | None = None):
        self._records: Dict[str, LayoutRecord] = {}
        if records:
            self.set(records)

    def get(self, name: str) -> LayoutRecord | None:
        """Get a record by name, or None if it is not stored."""
        return self._records.get(name)

    def set(self, name: str | Mapping[str, Any], record: Any = None) -> None:
        """Store one record by name, or a mapping of name -> record."""
        if isinstance(name, Mapping):
            for key, value in name.items():
                self._records[key] = LayoutRecord.from_dict(key, value)
            return

        self._records[name] = LayoutRecord.from_dict(name, record)

    def all(self) -> Dict[str, LayoutRecord]:
        """All records, as a copy of the underlying mapping."""
        return dict(self._records)

    def __contains__(self, name: object) -> bool:
        return name in self._records

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)
