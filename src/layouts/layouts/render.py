"""Render an injected page with Jinja2.

The layout engine only flattens templates; this is the thin consumer that
turns the flattened content and merged data into final output.
"""

from __future__ import annotations

from typing import Any

from jinja2 import Environment, StrictUndefined

from layouts.engine import InjectResult, StackResult


def default_env() -> Environment:
    """Jinja2 environment used when the caller provides none."""
    return Environment(
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )


def render(
    result: InjectResult | StackResult,
    env: Environment | None = None,
    **extra: Any,
) -> str:
    """Render the content of a result against its merged data.

    Args:
        result: Output of Layouts.inject() (or stack())
        env: Jinja2 environment (defaults to default_env())
        **extra: Additional variables, taking precedence over the data

    Returns:
        Rendered text
    """
    env = env or default_env()
    tmpl = env.from_string(result.content)
    variables = {**result.data, **extra}
    return tmpl.render(**variables)
