"""Muscle identifier reconciliation between diagram regions and stored load data.

Anatomical diagrams name regions with hyphens and mixed case ("Rectus-Femoris")
while stored loads use canonical keys ("rectus_femoris"). Both sides are
normalised the same way so either spelling finds the same result.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from core.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class Reconciliation:
    lookup: dict[str, Any]
    unmatched: list[str] = field(default_factory=list)
    unused: list[str] = field(default_factory=list)

    def get(self, identifier: str) -> Any:
        return self.lookup.get(normalize_muscle_id(identifier))


def normalize_muscle_id(identifier: str) -> str:
    """Canonical muscle key: lower-case with hyphens replaced by underscores."""
    return identifier.lower().replace("-", "_")


def pretty_name(identifier: str) -> str:
    """Human label for a muscle identifier, e.g. 'rectus_femoris' -> 'Rectus Femoris'."""
    words = normalize_muscle_id(identifier).replace("_", " ").split()
    return " ".join(w.capitalize() for w in words)


def reconcile(results: Iterable[Any] | Mapping[str, Any], diagram_ids: Iterable[str]) -> Reconciliation:
    """Match diagram identifiers against computed results.

    ``results`` is either a mapping of key -> result or an iterable of objects
    with a ``muscle_key`` attribute. Diagram identifiers without a result are
    listed in ``unmatched`` (original spelling, once each, in input order);
    result keys no diagram region referenced are listed in ``unused``.
    """
    if isinstance(results, Mapping):
        items = list(results.items())
    else:
        items = [(r.muscle_key, r) for r in results]
    lookup = {normalize_muscle_id(key): result for key, result in items}

    unmatched: list[str] = []
    seen: set[str] = set()
    referenced: set[str] = set()
    for ident in diagram_ids:
        key = normalize_muscle_id(ident)
        if key in lookup:
            referenced.add(key)
            continue
        if ident not in seen:
            seen.add(ident)
            unmatched.append(ident)

    unused = sorted(k for k in lookup if k not in referenced)
    if unmatched:
        logger.info("unmatched_muscle_identifiers", extra={"unmatched": unmatched})
    return Reconciliation(lookup=lookup, unmatched=unmatched, unused=unused)
