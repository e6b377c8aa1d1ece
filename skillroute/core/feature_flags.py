"""
Feature Flags - Explicit, expiring configuration.

Flags are loaded through a loader callable and cached by a ``FlagCache``
that the caller owns and passes in. The clock is injectable so tests can
drive expiry without sleeping.
"""
from __future__ import annotations

import os
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, fields, replace

from loguru import logger

ENV_PREFIX = "SKILLROUTE_"
_TRUTHY = ("1", "true", "yes", "on")


@dataclass(frozen=True)
class FeatureFlags:
    # Enrol incorrectly answered quiz questions into the review queue
    ENQUEUE_MISSED_ANSWERS: bool = True
    # Include per-topic due counts in skill summaries
    SKILL_REVIEWS_DUE: bool = True

    def is_enabled(self, flag_name: str) -> bool:
        return bool(getattr(self, flag_name, False))

    def with_overrides(self, overrides: Mapping[str, str]) -> FeatureFlags:
        """Return a copy with ``<PREFIX><FLAG>`` overrides applied."""
        changes = {}
        for flag in fields(self):
            value = overrides.get(f"{ENV_PREFIX}{flag.name}")
            if value is not None:
                changes[flag.name] = value.lower() in _TRUTHY
        return replace(self, **changes) if changes else self


def load_flags_from_env(environ: Mapping[str, str] | None = None) -> FeatureFlags:
    """Build flags from defaults plus environment overrides."""
    return FeatureFlags().with_overrides(os.environ if environ is None else environ)


class FlagCache:
    """
    TTL cache around a flag loader.

    Replaces a module-level singleton: whoever needs flags receives a cache
    instance, and expiry is measured with the supplied clock.
    """

    def __init__(
        self,
        loader: Callable[[], FeatureFlags] = load_flags_from_env,
        ttl_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._loader = loader
        self.ttl_seconds = max(0.0, ttl_seconds)
        self._clock = clock
        self._flags: FeatureFlags | None = None
        self._loaded_at: float | None = None

    def get(self) -> FeatureFlags:
        """Return cached flags, reloading once the TTL has elapsed."""
        now = self._clock()
        if self._flags is None or self._loaded_at is None or now - self._loaded_at >= self.ttl_seconds:
            self._flags = self._loader()
            self._loaded_at = now
            logger.debug(f"Feature flags reloaded: {self._flags}")
        return self._flags

    def is_enabled(self, flag_name: str) -> bool:
        return self.get().is_enabled(flag_name)

    def invalidate(self) -> None:
        """Force the next ``get()`` to reload."""
        self._flags = None
        self._loaded_at = None
