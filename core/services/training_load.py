"""Rolling-window training load: acute/chronic sums and the ACWR.

Acute and chronic loads are plain rolling sums over ``[as_of - window, as_of]``.
The acute:chronic workload ratio (ACWR) compares the two; it is undefined
(``None``) when there is no chronic history, which callers must read as
"insufficient history" rather than as a risk signal.

Reference: Gabbett (2016), the training-injury prevention paradox.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable

from core.errors import MalformedInputError, WindowConfigError
from core.logging_config import get_logger
from core.services.muscle_keys import normalize_muscle_id

logger = get_logger(__name__)

DEFAULT_ACUTE_DAYS = 7
DEFAULT_CHRONIC_DAYS = 28
DEFAULT_CHRONIC_MULTIPLIER = 4


@dataclass(frozen=True)
class LoadSample:
    """A single recorded load value for an athlete (whole body) or one of their muscles."""
    athlete_id: int
    timestamp: datetime
    load_value: float
    muscle_key: str | None = None  # None = whole-body sample

    @property
    def is_whole_body(self) -> bool:
        return self.muscle_key is None


@dataclass(frozen=True)
class WindowConfig:
    """Acute and chronic window lengths in days."""
    acute_days: int = DEFAULT_ACUTE_DAYS
    chronic_days: int = DEFAULT_CHRONIC_DAYS

    def __post_init__(self) -> None:
        if self.acute_days <= 0 or self.chronic_days <= 0:
            raise WindowConfigError(
                f"window lengths must be positive (acute={self.acute_days}, chronic={self.chronic_days})"
            )
        if self.acute_days >= self.chronic_days:
            raise WindowConfigError(
                f"acute_days ({self.acute_days}) must be shorter than chronic_days ({self.chronic_days})"
            )

    @classmethod
    def from_acute(cls, acute_days: int, multiplier: int = DEFAULT_CHRONIC_MULTIPLIER) -> "WindowConfig":
        """Derive the chronic window as a multiple of the acute window (7 -> 28 by default)."""
        return cls(acute_days=acute_days, chronic_days=acute_days * multiplier)

    @property
    def acute(self) -> timedelta:
        return timedelta(days=self.acute_days)

    @property
    def chronic(self) -> timedelta:
        return timedelta(days=self.chronic_days)


def partition_samples(samples: Iterable[LoadSample]) -> tuple[list[LoadSample], list[LoadSample]]:
    """Split samples into (valid, rejected); negative load values are rejected."""
    valid: list[LoadSample] = []
    rejected: list[LoadSample] = []
    for sample in samples:
        if sample.load_value < 0:
            rejected.append(sample)
        else:
            valid.append(sample)
    if rejected:
        logger.warning(
            "negative_load_samples_rejected",
            extra={"rejected_count": len(rejected), "athlete_ids": sorted({r.athlete_id for r in rejected})},
        )
    return valid, rejected


def _window_sum(samples: list[LoadSample], as_of: datetime, window: timedelta) -> float:
    lower = as_of - window
    return float(sum(s.load_value for s in samples if lower <= s.timestamp <= as_of))


def window_sums(samples: Iterable[LoadSample], as_of: datetime, config: WindowConfig) -> tuple[float, float]:
    """Return (acute_sum, chronic_sum) for one entity's samples as of an instant.

    A sample counts when ``as_of - window <= timestamp <= as_of``. Order does not
    matter and samples sharing a timestamp are all summed. Samples newer than
    ``as_of`` are ignored so results stay reproducible for a historical instant.
    """
    rows = list(samples)
    for s in rows:
        if s.load_value < 0:
            raise MalformedInputError(f"negative load_value {s.load_value} for athlete {s.athlete_id}")
    if not rows:
        return 0.0, 0.0
    return _window_sum(rows, as_of, config.acute), _window_sum(rows, as_of, config.chronic)


def compute_acwr(acute_sum: float, chronic_sum: float) -> float | None:
    """Acute:chronic workload ratio, or None when there is no chronic load."""
    if chronic_sum == 0:
        return None
    return acute_sum / chronic_sum


def group_by_muscle(samples: Iterable[LoadSample]) -> dict[str, list[LoadSample]]:
    """Group per-muscle samples by canonical muscle key; whole-body samples are skipped."""
    groups: dict[str, list[LoadSample]] = {}
    for s in samples:
        if s.muscle_key is None:
            continue
        groups.setdefault(normalize_muscle_id(s.muscle_key), []).append(s)
    return groups


def whole_body_samples(samples: Iterable[LoadSample]) -> list[LoadSample]:
    return [s for s in samples if s.muscle_key is None]
