"""Body tag formatting - the placeholder string and its matching pattern."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping

from layouts.config import DEFAULT_TAG, LayoutOptions, resolve_options

# Whitespace-tolerant separator used when matching instead of embedding
PATTERN_SEP = r"\s*"

_FLAG_MAP = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
}


@dataclass(frozen=True)
class BodyPattern:
    """Compiled placeholder matcher.

    `count` is 0 (replace every occurrence) when the "g" flag is set,
    otherwise 1.
    """

    regex: re.Pattern[str]
    count: int = 0

    def sub(self, replacement: str, content: str) -> str:
        """Replace the placeholder in content with replacement, literally."""
        return self.regex.sub(lambda _m: replacement, content, count=self.count)

    def search(self, content: str) -> re.Match[str] | None:
        return self.regex.search(content)

    @property
    def pattern(self) -> str:
        return self.regex.pattern


def _options(options: LayoutOptions | Mapping[str, Any] | None) -> LayoutOptions:
    if isinstance(options, LayoutOptions):
        return options
    return resolve_options(options)


def make_tag(options: LayoutOptions | Mapping[str, Any] | None = None) -> str:
    """Build the literal body tag, e.g. "{{ body }}".

    Args:
        options: delims, tag and sep options (unset keys use the defaults)

    Returns:
        open + sep + tag + sep + close
    """
    opts = _options(options)
    sep = " " if opts.sep is None else opts.sep
    open_, close = opts.delims
    return sep.join([open_, opts.tag or DEFAULT_TAG, close])


def make_pattern(
    options: LayoutOptions | Mapping[str, Any] | None = None,
) -> BodyPattern:
    """Build the pattern that locates the body tag in content.

    Delimiters and tag are matched literally. The separator is
    whitespace-tolerant unless `sep` is set, in which case it must match
    exactly, so "{{body}}", "{{ body }}" and "{{   body   }}" all match the
    default pattern.
    """
    opts = _options(options)
    sep = PATTERN_SEP if opts.sep is None else re.escape(opts.sep)
    open_, close = opts.delims
    source = sep.join(
        [re.escape(open_), re.escape(opts.tag or DEFAULT_TAG), re.escape(close)]
    )

    flags = 0
    for letter in opts.flags:
        flags |= _FLAG_MAP.get(letter, 0)

    count = 0 if "g" in opts.flags else 1
    return BodyPattern(regex=re.compile(source, flags), count=count)
