"""Layouts - flatten nested layouts and inject page content.

Usage:
    layouts = Layouts()
    layouts.set_layout("base", None, "<html>{{ body }}</html>")
    layouts.set_layout("page", "base", "<h1>{{ body }}</h1>")

    result = layouts.inject("Hello", "page")
    result.content  # "<html><h1>Hello</h1></html>"
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Mapping

from layouts.chain import resolve_chain
from layouts.config import LayoutOptions, OptionsLike, resolve_options
from layouts.context import flatten, merge_step, strip_reserved
from layouts.store import LayoutRecord, TemplateStore
from layouts.tags import BodyPattern, make_pattern, make_tag

log = logging.getLogger(__name__)

# Instance option keys that seed the store instead of configuring matching
_STORE_KEYS = ("layouts", "cache")


@dataclass
class StackResult:
    """A flattened layout stack."""

    content: str
    data: dict[str, Any] = field(default_factory=dict)
    pattern: BodyPattern | None = None
    tag: str = ""


@dataclass
class InjectResult:
    """Page content injected into a flattened layout stack."""

    content: str
    data: dict[str, Any] = field(default_factory=dict)


class Layouts:
    """Layout stack resolution engine.

    Args:
        options: Instance options (delims, tag, sep, flags, locals, ...).
            `layouts` and `cache` mappings seed the store.
        store: Template store to read layouts from (a new one by default)
    """

    def __init__(
        self,
        options: Mapping[str, Any] | None = None,
        store: TemplateStore | None = None,
        **kwargs: Any,
    ):
        raw = dict(options or {})
        raw.update(kwargs)

        self.store = store if store is not None else TemplateStore()
        for key in _STORE_KEYS:
            seed = raw.pop(key, None)
            if seed:
                self.store.set(seed)

        self.options = resolve_options(raw)
        self.default_tag = make_tag(self.options)

    def _resolve(self, options: OptionsLike = None) -> LayoutOptions:
        return resolve_options(self.options, options)

    def make_tag(self, options: OptionsLike = None) -> str:
        """Build the body tag for these options, e.g. "{{ body }}"."""
        return make_tag(self._resolve(options))

    def make_pattern(self, options: OptionsLike = None) -> BodyPattern:
        """Build the pattern that matches the body tag for these options."""
        return make_pattern(self._resolve(options))

    def set_layout(
        self,
        name: str | Mapping[str, Any],
        layout: Any = None,
        content: str | None = None,
    ) -> "Layouts":
        """Store a layout by name.

        Args:
            name: Layout name, or a mapping of name -> layout for bulk set
            layout: Parent layout name, or a mapping with layout/content/data
                (other keys become layout data)
            content: Template content, used when `layout` carries none

        Example:
            layouts.set_layout("a", "b", "<h1>Foo</h1>\\n{{ body }}\\n")
        """
        if isinstance(name, Mapping):
            self.store.set(name)
            return self

        if isinstance(layout, (Mapping, LayoutRecord)):
            record = LayoutRecord.from_dict(name, layout)
            if not record.content and content:
                record.content = content
        else:
            record = LayoutRecord.from_dict(
                name, {"layout": layout, "content": content or ""}
            )

        self.store.set(name, record)
        return self

    def get_layout(
        self, name: str | None = None
    ) -> LayoutRecord | dict[str, LayoutRecord] | None:
        """Get a layout by name, or every stored layout when name is omitted."""
        if not name:
            return self.store.all()
        return self.store.get(name)

    def create_stack(self, name: Any) -> list[str]:
        """Layout names from the root down to `name`."""
        return resolve_chain(self.store, name)

    def stack(self, name: Any, options: OptionsLike = None) -> StackResult:
        """Flatten the nested layouts of `name` into a single layout.

        Starting from the bare tag, each layout from the root down replaces
        the tag in the running content with its own content, so the result
        still holds the innermost layout's tag for the page.

        Returns:
            StackResult with the flattened content and merged data (both
            empty for an empty chain), and the tag and pattern used
        """
        chain = self.create_stack(name)
        opts = self._resolve(options)

        tag = make_tag(opts) or self.default_tag
        pattern = make_pattern(opts)

        if not chain:
            log.debug("No layouts found for %r", name)
            return StackResult(content="", data={}, pattern=pattern, tag=tag)

        data = strip_reserved(flatten(dict(opts.locals), opts.flatten))
        content = ""

        for layout_name in chain:
            record = self.store.get(layout_name)
            data = merge_step(
                data,
                opts.call_data,
                opts.locals,
                record.data,
                flatten_keys=opts.flatten,
                extend=opts.extend,
            )

            current = content or tag
            if not pattern.search(current):
                log.debug("No body tag to replace for layout %r", layout_name)
            content = pattern.sub(record.content, current)

        return StackResult(content=content, data=data, pattern=pattern, tag=tag)

    def replace_tag(
        self, text: str, content: str, options: OptionsLike = None
    ) -> str:
        """Replace the body tag in `content` with `text`.

        Example:
            layouts.replace_tag("ABC", "Before {{body}} After")
            # "Before ABC After"
        """
        return self.make_pattern(options).sub(text, content)

    def inject(
        self, text: str, name: Any, options: OptionsLike = None
    ) -> InjectResult:
        """Inject page content into the layout stack of `name`.

        If the stack is empty the content comes back unchanged.
        """
        result = self.stack(name, options)
        if result.content and result.pattern is not None:
            text = result.pattern.sub(text, result.content)
        return InjectResult(content=text, data=result.data)

    def extract(
        self, page: str, name: Any, options: OptionsLike = None
    ) -> str | None:
        """Recover the content injected into the layout stack of `name`.

        The inverse of inject(): the flattened layout around the body tag is
        matched literally against `page`. Returns None when the page does not
        fit the layout, and `page` itself for an empty stack.
        """
        result = self.stack(name, options)
        if not result.content or result.pattern is None:
            return page

        match = result.pattern.search(result.content)
        if match is None:
            return None

        before = result.content[: match.start()]
        after = result.content[match.end() :]
        if result.pattern.count == 1:
            tail = re.escape(after)
        else:
            # Other occurrences of the tag were filled with the same text
            parts = [re.escape(p) for p in result.pattern.regex.split(after)]
            tail = r"(?P=body)".join(parts)
        found = re.fullmatch(
            re.escape(before) + r"(?P<body>.*?)" + tail, page, flags=re.DOTALL
        )
        if found is None:
            return None
        return found.group("body")
