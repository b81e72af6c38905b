"""Map configuration for pydeferred."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pydeferred.exceptions import DeferredMapConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_keys(value: str) -> frozenset[str]:
    return frozenset(part.strip().lower() for part in value.split(",") if part.strip())


@dataclasses.dataclass(frozen=True)
class DeferredMapConfig:
    """Diagnostics configuration shared by map instances.

    Parameters
    ----------
    trace_evaluations : bool
        Emit a DEBUG record every time a computed entry is evaluated.
        Off by default since reads of computed keys may be hot.
    log_max_string : int
        Strings longer than this are truncated in log output.
    redacted_keys : frozenset[str]
        Keys (compared case-insensitively) whose static values are
        replaced with ``<redacted>`` in log output and ``repr``.
    """

    trace_evaluations: bool = False
    log_max_string: int = 128
    redacted_keys: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        if self.log_max_string <= 0:
            raise DeferredMapConfigError(f"log_max_string must be positive, got {self.log_max_string}")
        keys: Any = self.redacted_keys
        if isinstance(keys, str):
            keys = (keys,)
        # Normalise so lookups can stay case-insensitive.
        object.__setattr__(self, "redacted_keys", frozenset(str(k).lower() for k in keys))

    @classmethod
    def from_env(cls, **overrides: Any) -> DeferredMapConfig:
        """Create configuration from ``PYDEFERRED_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        if "trace_evaluations" not in overrides:
            config_kwargs["trace_evaluations"] = _env_bool(env.get("PYDEFERRED_TRACE_EVALUATIONS"), False)

        max_string_env = env.get("PYDEFERRED_LOG_MAX_STRING")
        if max_string_env is not None and "log_max_string" not in overrides:
            try:
                config_kwargs["log_max_string"] = int(max_string_env)
            except ValueError as exc:
                raise DeferredMapConfigError(
                    f"PYDEFERRED_LOG_MAX_STRING must be an integer, got {max_string_env!r}"
                ) from exc

        keys_env = env.get("PYDEFERRED_REDACTED_KEYS")
        if keys_env is not None and "redacted_keys" not in overrides:
            config_kwargs["redacted_keys"] = _env_keys(keys_env)

        config_kwargs.update(overrides)
        return cls(**config_kwargs)
