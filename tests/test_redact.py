from __future__ import annotations

from pydeferred._redact import MAX_ITEMS, summarize_entry, summarize_for_log
from pydeferred.deferred_map import DeferredValueMap
from pydeferred.entries import ComputedValue, StaticValue


def _explode() -> int:
    raise AssertionError("must not be evaluated")


def test_summarize_redacts_nested_keys() -> None:
    payload = {"user": "alice", "auth": {"Token": "abc", "scope": "read"}}
    summary = summarize_for_log(payload, redacted_keys=frozenset({"token"}))
    assert summary["user"] == "alice"
    assert summary["auth"]["Token"] == "<redacted>"
    assert summary["auth"]["scope"] == "read"


def test_summarize_truncates_long_strings() -> None:
    summary = summarize_for_log({"value": "x" * 600}, max_string=10)
    assert summary["value"].startswith("x" * 10)
    assert "<truncated>" in summary["value"]


def test_summarize_hides_object_internals() -> None:
    class Secret:
        password = "pw"

    assert summarize_for_log(Secret()) == "<Secret>"
    assert summarize_for_log(b"\x00\x01") == "<bytes:2b>"


def test_summarize_entry_never_evaluates_computations() -> None:
    assert summarize_entry("k", ComputedValue(computation=_explode)) == "<computed>"


def test_summarize_entry_redacts_by_key() -> None:
    entry = StaticValue(value="hunter2")
    assert summarize_entry("PASSWORD", entry, redacted_keys=frozenset({"password"})) == "<redacted>"
    assert summarize_entry("name", entry) == "hunter2"


def test_summarize_nested_map_never_evaluates_computations() -> None:
    inner = DeferredValueMap({"name": "inner", "api_token": "abc"})
    inner.set_computed_value("bad", _explode)
    summary = summarize_for_log({"inner": inner}, redacted_keys=frozenset({"api_token"}))
    assert summary == {"inner": {"name": "inner", "api_token": "<redacted>", "bad": "<computed>"}}


def test_summarize_caps_long_sequences() -> None:
    summary = summarize_for_log(list(range(MAX_ITEMS + 30)))
    assert summary[:MAX_ITEMS] == list(range(MAX_ITEMS))
    assert summary[MAX_ITEMS] == "…<+30 items>"
    assert len(summary) == MAX_ITEMS + 1


def test_summarize_caps_large_mappings() -> None:
    summary = summarize_for_log({f"k{i}": i for i in range(MAX_ITEMS + 5)})
    assert len(summary) == MAX_ITEMS + 1
    assert summary["…"] == "…<+5 items>"


def test_summarize_short_sequence_is_not_capped() -> None:
    assert summarize_for_log((1, "two", 3.0)) == [1, "two", 3.0]
