"""Tests for context merging."""

from layouts import RESERVED_KEYS, flatten, merge_into
from layouts.context import merge_step, strip_reserved


def test_merge_later_sources_win():
    context = merge_into({"a": 1}, {"a": 2, "b": 2}, {"b": 3})
    assert context == {"a": 2, "b": 3}


def test_merge_skips_missing_sources():
    assert merge_into({"a": 1}, None, {}) == {"a": 1}


def test_merge_is_shallow():
    context = merge_into({"nav": {"home": "/"}}, {"nav": {"blog": "/blog"}})
    assert context == {"nav": {"blog": "/blog"}}


def test_custom_merge_function():
    def keep_first(context, *sources):
        for source in sources:
            for key, value in source.items():
                context.setdefault(key, value)
        return context

    context = merge_into({"a": 1}, {"a": 2, "b": 2}, extend=keep_first)
    assert context == {"a": 1, "b": 2}


class TestFlatten:
    def test_nested_values_are_inlined(self):
        context = flatten({"a": 1, "data": {"a": 2, "b": 3}})
        assert context == {"a": 2, "b": 3}

    def test_only_one_level(self):
        context = flatten({"data": {"data": {"deep": True}}})
        assert context == {"data": {"deep": True}}

    def test_custom_keys(self):
        context = flatten({"page": {"title": "Home"}, "data": {"x": 1}}, ["page"])
        assert context == {"title": "Home", "data": {"x": 1}}

    def test_non_mapping_left_alone(self):
        assert flatten({"data": "text"}) == {"data": "text"}


def test_strip_reserved():
    context = {key: 1 for key in RESERVED_KEYS}
    context["title"] = "Home"
    assert strip_reserved(context) == {"title": "Home"}


def test_merge_step_order():
    """Layout data beats locals, which beat per-call data."""
    context = merge_step(
        {},
        {"a": "call", "b": "call", "c": "call"},
        {"b": "locals", "c": "locals"},
        {"c": "layout"},
    )
    assert context == {"a": "call", "b": "locals", "c": "layout"}


def test_merge_step_drops_reserved_keys():
    context = merge_step(
        {},
        {"delims": ["<", ">"]},
        None,
        {"layout": "base", "content": "x", "title": "Home", "data": {"y": 1}},
    )
    assert context == {"title": "Home", "y": 1}
