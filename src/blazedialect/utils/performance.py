"""
Slow-call thresholds for metadata probes.
"""

from __future__ import annotations

import os

from ..dialects.errors import DialectConfigurationError

SLOW_PROBE_ENV = "BLAZE_SLOW_PROBE_MS"


def resolve_slow_probe_ms(default: int = 100, override: int | None = None) -> int:
    """
    Pick the slow-probe threshold: explicit override, then ``BLAZE_SLOW_PROBE_MS``,
    then ``default``.
    """

    if override is not None:
        value = override
    else:
        raw = os.getenv(SLOW_PROBE_ENV)
        if raw is None or not raw.strip():
            return default
        try:
            value = int(raw)
        except ValueError as exc:
            raise DialectConfigurationError(
                f"Invalid integer value for '{SLOW_PROBE_ENV}': {raw!r}"
            ) from exc
    if value < 0:
        raise DialectConfigurationError(f"Slow probe threshold must be >= 0, got {value}")
    return value
