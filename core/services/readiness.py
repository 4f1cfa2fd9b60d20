"""Readiness scoring from daily wellness and physiology inputs.

Each component is on a 0-100 scale where higher is better, except resting HR
and prior load, which are inverted. The score weighs whatever is known and
reports nothing when every input is missing.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from core.config import get_settings
from core.errors import MalformedInputError

# Component weights; must sum to 1.0.
DEFAULT_WEIGHTS: dict[str, float] = {
    "hrv": 0.30,
    "sleep_score": 0.20,
    "prior_load": 0.20,
    "resting_hr": 0.15,
    "wellness_score": 0.15,
}

# Higher raw value means lower readiness for these.
INVERTED_COMPONENTS = frozenset({"prior_load", "resting_hr"})

@dataclass(frozen=True)
class ReadinessInputs:
    """One athlete-day of readiness inputs on a 0-100 scale; None means unknown."""
    hrv: float | None = None
    sleep_score: float | None = None
    prior_load: float | None = None
    resting_hr: float | None = None
    wellness_score: float | None = None

    def known(self) -> dict[str, float]:
        return {name: getattr(self, name) for name in DEFAULT_WEIGHTS if getattr(self, name) is not None}


@dataclass(frozen=True)
class ReadinessScore:
    value: float
    components: dict[str, float] = field(default_factory=dict)


def validate_weights(weights: dict[str, float]) -> None:
    if set(weights) != set(DEFAULT_WEIGHTS):
        raise MalformedInputError(f"weights must cover exactly {sorted(DEFAULT_WEIGHTS)}")
    if any(w < 0 for w in weights.values()):
        raise MalformedInputError("weights must be non-negative")
    total = sum(weights.values())
    if not math.isclose(total, 1.0, abs_tol=1e-9):
        raise MalformedInputError(f"weights must sum to 1.0, got {total}")


def readiness_score(inputs: ReadinessInputs, weights: dict[str, float] | None = None) -> ReadinessScore | None:
    """Weighted 0-100 readiness score.

    Unknown components are left out and their weight is spread proportionally
    over the known ones; nothing is imputed. Returns None when every component
    is unknown.
    """
    weights = DEFAULT_WEIGHTS if weights is None else weights
    validate_weights(weights)

    known = inputs.known()
    known_weight = sum(weights[name] for name in known)
    if not known or known_weight <= 0:
        return None

    contributions: dict[str, float] = {}
    for name, raw in known.items():
        favourable = 100.0 - raw if name in INVERTED_COMPONENTS else raw
        contributions[name] = favourable * weights[name] / known_weight

    total = sum(contributions.values())
    return ReadinessScore(
        value=round(min(100.0, max(0.0, total)), 2),
        components={name: round(c, 4) for name, c in contributions.items()},
    )


def readiness_thresholds() -> tuple[float, float]:
    """(green_min, amber_min) readiness cut-offs shared by the badge and the board flag."""
    settings = get_settings()
    return settings.readiness_green_min, settings.readiness_amber_min


def readiness_value(score: ReadinessScore | None) -> float | None:
    return score.value if score is not None else None


def readiness_badge(score: float | None) -> str | None:
    """Band for a standalone readiness indicator (separate from the risk flag)."""
    if score is None:
        return None
    green_min, amber_min = readiness_thresholds()
    if score >= green_min:
        return "green"
    if score >= amber_min:
        return "amber"
    return "red"
