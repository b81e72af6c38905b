"""pydeferred - Mutable mapping with lazily computed values."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pydeferred")
except PackageNotFoundError:
    __version__ = "0+local"
from pydeferred.config import DeferredMapConfig
from pydeferred.deferred_map import DeferredValueMap
from pydeferred.entries import ComputedValue, Entry, EntryKind, StaticValue
from pydeferred.exceptions import DeferredMapConfigError, DeferredMapError, InvalidValueError

__all__ = [
    "__version__",
    "ComputedValue",
    "DeferredMapConfig",
    "DeferredMapConfigError",
    "DeferredMapError",
    "DeferredValueMap",
    "Entry",
    "EntryKind",
    "InvalidValueError",
    "StaticValue",
]
