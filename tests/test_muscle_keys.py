"""Tests for muscle identifier normalisation and reconciliation."""

from __future__ import annotations

from dataclasses import dataclass

from core.services.muscle_keys import normalize_muscle_id, pretty_name, reconcile


@dataclass
class _Result:
    muscle_key: str
    acwr: float


def test_normalize_lowercases_and_replaces_hyphens():
    assert normalize_muscle_id("Rectus-Femoris") == "rectus_femoris"
    assert normalize_muscle_id("rectus_femoris") == "rectus_femoris"


def test_normalize_changes_nothing_else():
    assert normalize_muscle_id("Glute Max") == "glute max"
    assert normalize_muscle_id("  calves") == "  calves"


def test_equivalence_is_bidirectional():
    diagram, storage = "Rectus-Femoris", "rectus_femoris"
    forward = reconcile([_Result(storage, 0.9)], [diagram])
    backward = reconcile([_Result(diagram, 0.9)], [storage])
    assert forward.unmatched == [] and backward.unmatched == []
    assert forward.get(diagram) is forward.get(storage)
    assert backward.get(storage).acwr == 0.9


def test_reconcile_reports_unmatched_in_input_order_once():
    results = [_Result("quadriceps", 1.0)]
    recon = reconcile(results, ["Biceps", "QUADRICEPS", "triceps-brachii", "Biceps"])
    assert recon.unmatched == ["Biceps", "triceps-brachii"]
    assert recon.get("Quadriceps").muscle_key == "quadriceps"


def test_reconcile_reports_unused_results():
    results = [_Result("calves", 0.5), _Result("hamstrings", 0.7)]
    recon = reconcile(results, ["calves"])
    assert recon.unused == ["hamstrings"]
    assert set(recon.lookup) == {"calves", "hamstrings"}


def test_reconcile_accepts_mapping():
    recon = reconcile({"Hip-Flexors": "row"}, ["hip_flexors"])
    assert recon.lookup == {"hip_flexors": "row"}
    assert recon.unmatched == []


def test_reconcile_empty_inputs():
    recon = reconcile([], ["calves"])
    assert recon.lookup == {}
    assert recon.unmatched == ["calves"]


def test_pretty_name():
    assert pretty_name("rectus_femoris") == "Rectus Femoris"
    assert pretty_name("Gluteus-Maximus") == "Gluteus Maximus"
