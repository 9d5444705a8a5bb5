"""Tests for chain resolution and the template store."""

import pytest

from layouts import (
    LayoutCycleError,
    LayoutRecord,
    TemplateStore,
    is_absent_reference,
    resolve_chain,
)


@pytest.fixture
def store():
    return TemplateStore(
        {
            "a": {"layout": "b", "content": "A {{ body }}"},
            "b": {"layout": "c", "content": "B {{ body }}"},
            "c": {"content": "C {{ body }}"},
        }
    )


def test_chain_is_root_first(store):
    assert resolve_chain(store, "a") == ["c", "b", "a"]


def test_chain_from_root(store):
    assert resolve_chain(store, "c") == ["c"]


def test_missing_start_is_empty(store):
    assert resolve_chain(store, "missing") == []
    assert resolve_chain(store, None) == []
    assert resolve_chain(store, "") == []


def test_missing_parent_ends_chain():
    store = TemplateStore({"a": {"layout": "gone", "content": "A"}})
    assert resolve_chain(store, "a") == ["a"]


def test_false_like_parent_ends_chain():
    store = TemplateStore(
        {
            "a": {"layout": "false", "content": "A"},
            "false": {"content": "should not be reached"},
        }
    )
    assert resolve_chain(store, "a") == ["a"]


@pytest.mark.parametrize(
    "value", [None, False, "", "   ", "false", "NULL", "None", "nil", "undefined"]
)
def test_absent_references(value):
    assert is_absent_reference(value)


@pytest.mark.parametrize("value", ["base", "default", "0x"])
def test_present_references(value):
    assert not is_absent_reference(value)


class TestCycles:
    def test_two_layout_cycle(self):
        store = TemplateStore({"a": {"layout": "b"}, "b": {"layout": "a"}})
        with pytest.raises(LayoutCycleError) as exc_info:
            resolve_chain(store, "a")
        assert exc_info.value.cycle == ["a", "b", "a"]
        assert "a -> b -> a" in str(exc_info.value)

    def test_self_reference(self):
        store = TemplateStore({"a": {"layout": "a"}})
        with pytest.raises(LayoutCycleError) as exc_info:
            resolve_chain(store, "a")
        assert exc_info.value.cycle == ["a", "a"]

    def test_cycle_above_start(self):
        """Only the looping part of the chain is reported."""
        store = TemplateStore(
            {"x": {"layout": "a"}, "a": {"layout": "b"}, "b": {"layout": "a"}}
        )
        with pytest.raises(LayoutCycleError) as exc_info:
            resolve_chain(store, "x")
        assert exc_info.value.cycle == ["a", "b", "a"]


class TestTemplateStore:
    def test_set_and_get(self):
        store = TemplateStore()
        store.set("a", {"layout": "b", "content": "A"})
        record = store.get("a")
        assert record == LayoutRecord(layout="b", content="A", data={})
        assert store.get("missing") is None

    def test_bulk_set(self):
        store = TemplateStore()
        store.set({"a": {"content": "A"}, "b": "B"})
        assert len(store) == 2
        assert "a" in store
        assert store.get("b").content == "B"
        assert sorted(store) == ["a", "b"]

    def test_last_write_wins(self):
        store = TemplateStore()
        store.set("a", "first")
        store.set("a", "second")
        assert store.get("a").content == "second"

    def test_all_returns_copy(self):
        store = TemplateStore({"a": "A"})
        records = store.all()
        records.pop("a")
        assert "a" in store

    def test_extra_keys_become_data(self):
        record = LayoutRecord.from_dict(
            "a", {"content": "A", "title": "Home", "data": {"x": 1}}
        )
        assert record.data == {"title": "Home", "x": 1}

    def test_invalid_record(self):
        with pytest.raises(TypeError):
            LayoutRecord.from_dict("bad", 123)

    def test_invalid_data(self):
        with pytest.raises(TypeError):
            LayoutRecord.from_dict("bad", {"data": "not-a-dict"})

    def test_invalid_layout_reference(self):
        with pytest.raises(TypeError):
            LayoutRecord.from_dict("bad", {"layout": ["b"], "content": "A"})
        with pytest.raises(TypeError):
            TemplateStore({"a": {"layout": {"x": 1}}})

    def test_false_layout_reference_is_a_root(self):
        store = TemplateStore({"a": {"layout": False, "content": "A"}})
        assert resolve_chain(store, "a") == ["a"]

    def test_record_is_copied(self):
        record = LayoutRecord(content="A", data={"x": 1})
        store = TemplateStore()
        store.set("a", record)
        store.set("b", record)

        assert store.get("a") is not record
        assert store.get("a") is not store.get("b")
        store.get("a").data["x"] = 2
        assert record.data == {"x": 1}
        assert store.get("b").data == {"x": 1}
