"""Helpers for log-safe rendering of map contents.

Stored values are arbitrary objects and may be large or sensitive.
Nothing in here ever invokes a computed entry, including those of a
map stored as a value inside another map.
"""

from __future__ import annotations

import itertools
from collections.abc import Callable, Hashable, Iterable, Mapping, Sequence
from typing import Any

from pydeferred.entries import ComputedValue, Entry

COMPUTED_MARKER = "<computed>"
REDACTED_MARKER = "<redacted>"

# Collections longer than this are cut short in summaries.
MAX_ITEMS = 20


def _more_marker(total: int) -> str:
    return f"…<+{total - MAX_ITEMS} items>"


def summarize_for_log(
    value: Any,
    *,
    max_string: int = 128,
    redacted_keys: frozenset[str] = frozenset(),
    _depth: int = 0,
) -> Any:
    """Return a copy of *value* suitable for debug logs and ``repr``."""
    if _depth > 5:
        return "<max-depth>"

    if value is None or isinstance(value, (bool, int, float)):
        return value

    if isinstance(value, str):
        if len(value) > max_string:
            return f"{value[:max_string]}…<truncated>"
        return value

    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"

    # Imported here: deferred_map imports this module.
    from pydeferred.deferred_map import DeferredValueMap

    if isinstance(value, DeferredValueMap):
        # Go through raw entries; value.items() would evaluate computations.
        return _summarize_pairs(
            ((k, value.entry(k)) for k in value.keys()),
            len(value),
            lambda k, entry: summarize_entry(
                k, entry, max_string=max_string, redacted_keys=redacted_keys, _depth=_depth + 1
            ),
            redacted_keys,
        )

    if isinstance(value, Mapping):
        return _summarize_pairs(
            iter(value.items()),
            len(value),
            lambda k, v: summarize_for_log(v, max_string=max_string, redacted_keys=redacted_keys, _depth=_depth + 1),
            redacted_keys,
        )

    if isinstance(value, Sequence):
        summary: list[Any] = [
            summarize_for_log(v, max_string=max_string, redacted_keys=redacted_keys, _depth=_depth + 1)
            for v in itertools.islice(value, MAX_ITEMS)
        ]
        if len(value) > MAX_ITEMS:
            summary.append(_more_marker(len(value)))
        return summary

    # Unknown objects: name the type only.
    return f"<{type(value).__name__}>"


def _summarize_pairs(
    pairs: Iterable[tuple[Any, Any]],
    total: int,
    render: Callable[[Any, Any], Any],
    redacted_keys: frozenset[str],
) -> dict[Any, Any]:
    summary: dict[Any, Any] = {}
    for index, (k, v) in enumerate(pairs):
        if index >= MAX_ITEMS:
            summary["…"] = _more_marker(total)
            break
        summary[k] = REDACTED_MARKER if str(k).lower() in redacted_keys else render(k, v)
    return summary


def summarize_entry(
    key: Hashable,
    entry: Entry,
    *,
    max_string: int = 128,
    redacted_keys: frozenset[str] = frozenset(),
    _depth: int = 0,
) -> Any:
    """Summarize a single entry without evaluating it."""
    if isinstance(entry, ComputedValue):
        return COMPUTED_MARKER
    if str(key).lower() in redacted_keys:
        return REDACTED_MARKER
    return summarize_for_log(entry.value, max_string=max_string, redacted_keys=redacted_keys, _depth=_depth)
