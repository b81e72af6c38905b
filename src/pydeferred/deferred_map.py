"""Mutable mapping whose keys can be bound to deferred computations.

A :class:`DeferredValueMap` behaves like an ordinary ``dict`` for static
values.  A key may instead be bound to a zero-argument callable with
:meth:`DeferredValueMap.set_computed_value`; reading that key calls it and
returns the result.  Results are never cached, so every read reflects
whatever state the callable observes at that moment.

The map performs no locking.  Sharing an instance between threads requires
external synchronization by the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable, ItemsView, Iterable, Iterator, Mapping, MutableMapping
from typing import Any

from pydantic import ValidationError

from pydeferred._redact import summarize_entry
from pydeferred.config import DeferredMapConfig
from pydeferred.entries import ComputedValue, Entry, StaticValue
from pydeferred.exceptions import InvalidValueError

_logger = logging.getLogger(__name__)

_MISSING: Any = object()


class DeferredValueMap(MutableMapping[Hashable, Any]):
    """Insertion-ordered map of keys to static or computed entries.

    Parameters
    ----------
    initial : Mapping or iterable of pairs, optional
        Static values to populate the map with.  When *initial* is itself a
        :class:`DeferredValueMap` its entries are copied as-is, so computed
        keys stay computed.
    config : DeferredMapConfig, optional
        Diagnostics configuration.  Defaults to ``DeferredMapConfig()``.
    """

    def __init__(
        self,
        initial: Mapping[Hashable, Any] | Iterable[tuple[Hashable, Any]] | None = None,
        *,
        config: DeferredMapConfig | None = None,
    ) -> None:
        self._config = config or DeferredMapConfig()
        self._entries: dict[Hashable, Entry] = {}
        if isinstance(initial, DeferredValueMap):
            self._entries.update(initial._entries)  # noqa: SLF001
        elif initial is not None:
            self.update(initial)

    @classmethod
    def from_computations(
        cls,
        computations: Mapping[Hashable, Callable[[], Any]],
        *,
        config: DeferredMapConfig | None = None,
    ) -> DeferredValueMap:
        """Create a map where every key is bound to a computation."""
        result = cls(config=config)
        for key, computation in computations.items():
            result.set_computed_value(key, computation)
        return result

    @property
    def config(self) -> DeferredMapConfig:
        return self._config

    # ------------------------------------------------------------------
    # Core operations
    # ------------------------------------------------------------------

    def set_value(self, key: Hashable, value: Any) -> None:
        """Bind *key* to a static value, replacing any prior entry.

        Raises
        ------
        InvalidValueError
            If *value* is ``None``.  Any prior entry for *key* is kept.
        """
        try:
            entry = StaticValue(value=value)
        except ValidationError as exc:
            raise InvalidValueError(f"Cannot store None for key {key!r}", key=key) from exc
        self._entries[key] = entry
        if _logger.isEnabledFor(logging.DEBUG):
            _logger.debug("Bound static entry key=%r value=%s", key, self._summarize(key, entry))

    def set_computed_value(self, key: Hashable, computation: Callable[[], Any]) -> None:
        """Bind *key* to *computation*, replacing any prior entry.

        *computation* is called with no arguments on every read of *key*.

        Raises
        ------
        InvalidValueError
            If *computation* is not callable.  Any prior entry for *key*
            is kept.
        """
        try:
            entry = ComputedValue(computation=computation)
        except ValidationError as exc:
            raise InvalidValueError(
                f"Computation for key {key!r} must be callable, got {type(computation).__name__}",
                key=key,
            ) from exc
        self._entries[key] = entry
        _logger.debug("Bound computed entry key=%r", key)

    def get_value(self, key: Hashable) -> Any:
        """Return the value for *key*, or ``None`` if the key is absent.

        Computed entries are evaluated on every call.  Exceptions raised by
        the computation propagate unchanged.
        """
        entry = self._entries.get(key)
        if entry is None:
            return None
        return self._resolve(key, entry)

    def remove_value(self, key: Hashable) -> None:
        """Remove the entry for *key*; does nothing if it is absent."""
        self._entries.pop(key, None)

    def remove_all(self) -> None:
        removed = len(self._entries)
        self._entries.clear()
        _logger.debug("Removed all entries count=%d", removed)

    def count(self) -> int:
        """Number of keys, static and computed alike.  Never evaluates."""
        return len(self._entries)

    def entries(self) -> ItemsView[Hashable, Any]:
        """Restartable view of ``(key, value)`` pairs.

        Computed values are evaluated as each pair is produced.
        """
        return self.items()

    # ------------------------------------------------------------------
    # Entry inspection
    # ------------------------------------------------------------------

    def entry(self, key: Hashable) -> Entry | None:
        """Return the raw entry bound to *key* without evaluating it."""
        return self._entries.get(key)

    def is_computed(self, key: Hashable) -> bool:
        return isinstance(self._entries.get(key), ComputedValue)

    def copy(self) -> DeferredValueMap:
        """Shallow copy sharing entries; computed keys stay computed."""
        return type(self)(self, config=self._config)

    def resolve(self) -> dict[Hashable, Any]:
        """Evaluate every entry once and return a plain ``dict`` snapshot."""
        # Snapshot first: a computation is free to mutate this map.
        return {key: self._resolve(key, entry) for key, entry in list(self._entries.items())}

    def _resolve(self, key: Hashable, entry: Entry) -> Any:
        if isinstance(entry, ComputedValue):
            if self._config.trace_evaluations:
                _logger.debug("Evaluating computed entry key=%r", key)
            return entry.computation()
        return entry.value

    def _summarize(self, key: Hashable, entry: Entry) -> Any:
        return summarize_entry(
            key,
            entry,
            max_string=self._config.log_max_string,
            redacted_keys=self._config.redacted_keys,
        )

    # ------------------------------------------------------------------
    # MutableMapping protocol
    # ------------------------------------------------------------------

    def __getitem__(self, key: Hashable) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            raise KeyError(key)
        return self._resolve(key, entry)

    def __setitem__(self, key: Hashable, value: Any) -> None:
        self.set_value(key, value)

    def __delitem__(self, key: Hashable) -> None:
        del self._entries[key]

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    # The mixin versions below go through ``self[key]`` and treat any
    # KeyError as absence, which would hide a KeyError raised by a
    # computation.  These only consult the entry store for membership.

    def get(self, key: Hashable, default: Any = None) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            return default
        return self._resolve(key, entry)

    def pop(self, key: Hashable, default: Any = _MISSING) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            if default is _MISSING:
                raise KeyError(key)
            return default
        value = self._resolve(key, entry)
        del self._entries[key]
        return value

    def popitem(self) -> tuple[Hashable, Any]:
        if not self._entries:
            raise KeyError("popitem(): map is empty")
        key = next(reversed(self._entries))
        return key, self.pop(key)

    def setdefault(self, key: Hashable, default: Any = None) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            self.set_value(key, default)
            return default
        return self._resolve(key, entry)

    def clear(self) -> None:
        self.remove_all()

    def __repr__(self) -> str:
        summary = {key: self._summarize(key, entry) for key, entry in self._entries.items()}
        return f"{type(self).__name__}({summary!r})"
