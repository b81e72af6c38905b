"""Tagged entries stored by :class:`~pydeferred.deferred_map.DeferredValueMap`.

Every key in a map is bound to exactly one entry, either a
:class:`StaticValue` holding an object in place or a :class:`ComputedValue`
holding a zero-argument callable.  Entries are immutable; rebinding a key
replaces its entry wholesale.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class EntryKind(StrEnum):
    STATIC = "static"
    COMPUTED = "computed"


class StaticValue(BaseModel):
    """A value stored in place and returned unchanged on lookup."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    value: Any

    @property
    def kind(self) -> EntryKind:
        return EntryKind.STATIC

    @field_validator("value")
    @classmethod
    def _reject_none(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("None cannot be stored; remove the key instead")
        return value


class ComputedValue(BaseModel):
    """A computation invoked anew on every lookup.

    Any state captured by the callable lives as long as the entry does.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    computation: Callable[[], Any]

    @property
    def kind(self) -> EntryKind:
        return EntryKind.COMPUTED


Entry = StaticValue | ComputedValue
