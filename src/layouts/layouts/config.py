"""Configuration for layout resolution.

Options are layered in three tiers, later tiers winning key by key:
- library defaults (the field defaults of LayoutOptions)
- instance options (passed to Layouts())
- call options (passed to stack/inject/replace_tag)

Layouts can also be loaded from a YAML file:

    options:
      delims: ["{{", "}}"]
    layouts:
      base:
        content: "<html>{{ body }}</html>"
      page:
        layout: base
        content: "<h1>{{ body }}</h1>"
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Mapping

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from layouts.exceptions import LayoutConfigError
from layouts.store import LayoutRecord

DEFAULT_DELIMS = ("{{", "}}")
DEFAULT_TAG = "body"
DEFAULT_FLAGS = "g"

# Regex flag letters understood in `flags`; "g" only controls the count
FLAG_LETTERS = "gims"


class LayoutOptions(BaseModel):
    """Options recognized by the layout engine.

    Keys that are not fields here are kept as extras and merged into the
    resolution context as per-call data.
    """

    model_config = {"extra": "allow"}

    delims: tuple[str, str] = Field(
        default=DEFAULT_DELIMS, description="Opening and closing delimiters"
    )
    tag: str | None = Field(default=DEFAULT_TAG, description="Placeholder tag name")
    sep: str | None = Field(
        default=None,
        description="Separator between delimiters and tag (unset: ' ' / '\\s*')",
    )
    flags: str = Field(
        default=DEFAULT_FLAGS, description="Placeholder matching flags (g, i, m, s)"
    )
    locals: dict[str, Any] = Field(
        default_factory=dict, description="Base data for the resolution context"
    )
    flatten: list[str] = Field(
        default_factory=lambda: ["data"],
        description="Nested context keys inlined into the top level",
    )
    extend: Callable[..., Any] | None = Field(
        default=None, description="Custom merge function (context, *sources)"
    )

    @field_validator("delims")
    @classmethod
    def check_delims(cls, value: tuple[str, str]) -> tuple[str, str]:
        if not all(value):
            raise ValueError("delimiters must be two non-empty strings")
        return value

    @field_validator("flags")
    @classmethod
    def check_flags(cls, value: str) -> str:
        unknown = set(value) - set(FLAG_LETTERS)
        if unknown:
            raise ValueError(f"unknown flags: {''.join(sorted(unknown))}")
        return value

    @property
    def call_data(self) -> dict[str, Any]:
        """Per-call data: every option that is not a known field."""
        return dict(self.model_extra or {})


OptionsLike = LayoutOptions | Mapping[str, Any] | None


def _as_dict(layer: OptionsLike) -> dict[str, Any]:
    if layer is None:
        return {}
    if isinstance(layer, LayoutOptions):
        return layer.model_dump(exclude_unset=True)
    if not isinstance(layer, Mapping):
        raise LayoutConfigError(
            f"Options must be a mapping, got {type(layer).__name__}"
        )
    return dict(layer)


def resolve_options(*layers: OptionsLike) -> LayoutOptions:
    """Resolve option layers into a single LayoutOptions.

    Layers are ordered from lowest to highest precedence. Only keys a layer
    sets explicitly take part, so an instance option is not clobbered by a
    call that leaves it out. `locals` are merged instead of replaced.

    Raises:
        LayoutConfigError: If the resolved options are malformed.
    """
    merged: dict[str, Any] = {}
    local_data: dict[str, Any] = {}

    for layer in layers:
        values = _as_dict(layer)
        layer_locals = values.pop("locals", None)
        if layer_locals:
            local_data.update(layer_locals)
        merged.update(values)

    merged["locals"] = local_data

    try:
        return LayoutOptions(**merged)
    except ValidationError as e:
        raise LayoutConfigError(f"Invalid layout options: {e}") from e


class LayoutsFile(BaseModel):
    """A YAML layouts file: instance options plus named layouts."""

    options: dict[str, Any] = Field(
        default_factory=dict, description="Instance options"
    )
    layouts: dict[str, Any] = Field(
        default_factory=dict, description="Layout records by name"
    )

    def records(self) -> dict[str, LayoutRecord]:
        """Normalize raw layout entries into LayoutRecords.

        Raises:
            LayoutConfigError: If an entry is not a valid layout
        """
        try:
            return {
                name: LayoutRecord.from_dict(name, value)
                for name, value in self.layouts.items()
            }
        except TypeError as e:
            raise LayoutConfigError(str(e)) from e


def load_layouts_file(path: Path) -> LayoutsFile:
    """Load a layouts YAML file."""
    if not path.exists():
        raise FileNotFoundError(f"Layouts file not found: {path}")

    with open(path) as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise LayoutConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise LayoutConfigError(f"Layouts file must be a mapping: {path}")

    try:
        return LayoutsFile(**data)
    except ValidationError as e:
        raise LayoutConfigError(f"Invalid layouts file {path}: {e}") from e


def load_layouts_yaml(path: Path) -> dict[str, LayoutRecord]:
    """Load only the layout records of a layouts YAML file."""
    return load_layouts_file(path).records()
