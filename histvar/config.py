from __future__ import annotations

import os
from dataclasses import dataclass
from collections.abc import Mapping

from .errors import ConfigurationError


ENV_PREFIX = "HISTVAR_"
DEFAULT_MIN_DATA_POINTS = 5


@dataclass(frozen=True, slots=True)
class VarSettings:
    """Deployment-time settings for the VaR engine and its service wrapper.

    Attributes
    ----------
    min_data_points: int
            Minimum number of observations a series needs before VaR is estimated.
    cache_max_entries: int
            Upper bound on cached results before least recently used ones are evicted.
    cache_ttl_seconds: float
            Lifetime of a cached result.
    """

    min_data_points: int = DEFAULT_MIN_DATA_POINTS
    cache_max_entries: int = 1000
    cache_ttl_seconds: float = 3600.0

    def __post_init__(self) -> None:
        if isinstance(self.min_data_points, bool) or not isinstance(
            self.min_data_points, int
        ):
            raise ConfigurationError(
                f"min_data_points must be an integer, got {self.min_data_points!r}"
            )
        if self.min_data_points < 1:
            raise ConfigurationError(
                f"min_data_points must be at least 1, got {self.min_data_points}"
            )
        if self.cache_max_entries < 1:
            raise ConfigurationError(
                f"cache_max_entries must be at least 1, got {self.cache_max_entries}"
            )
        if self.cache_ttl_seconds <= 0:
            raise ConfigurationError(
                f"cache_ttl_seconds must be positive, got {self.cache_ttl_seconds}"
            )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "VarSettings":
        """Build settings from ``HISTVAR_*`` environment variables.

        Unset variables keep their defaults.
        """
        env = os.environ if environ is None else environ
        kwargs: dict[str, object] = {}
        for field_name, cast in (
            ("min_data_points", int),
            ("cache_max_entries", int),
            ("cache_ttl_seconds", float),
        ):
            key = ENV_PREFIX + field_name.upper()
            raw = env.get(key)
            if raw is None or not raw.strip():
                continue
            try:
                kwargs[field_name] = cast(raw.strip())
            except ValueError as exc:
                raise ConfigurationError(f"Invalid value for {key}: {raw!r}") from exc
        return cls(**kwargs)
