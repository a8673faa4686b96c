import pytest

from msqc.pipeline.conflict import best_identification, resolve_conflicts
from tests.helpers.fake_maps import make_consensus_map, make_pep_id

pytestmark = [pytest.mark.unit, pytest.mark.pipeline]


def test_lower_score_wins_for_e_values():
    ids = [make_pep_id("a", score=0.05), make_pep_id("b", score=0.001), make_pep_id("c", score=0.01)]
    assert best_identification(ids).unique_id == "b"


def test_higher_score_wins_when_higher_is_better():
    ids = [make_pep_id("a", score=10, higher_score_better=True),
           make_pep_id("b", score=30, higher_score_better=True)]
    assert best_identification(ids).unique_id == "b"


def test_hitless_id_loses():
    ids = [make_pep_id("a", hits=[]), make_pep_id("b", score=1.0)]
    assert best_identification(ids).unique_id == "b"


def test_ties_keep_first():
    ids = [make_pep_id("a", score=0.01), make_pep_id("b", score=0.01)]
    assert best_identification(ids).unique_id == "a"


def test_resolve_keeps_one_id_per_feature():
    cmap = make_consensus_map(
        [[make_pep_id("a", score=0.05), make_pep_id("b", score=0.001)], [make_pep_id("c")], []],
        unassigned=[make_pep_id("d"), make_pep_id("e")],
    )

    assert resolve_conflicts(cmap) == 1
    assert [[p.unique_id for p in f.peptide_identifications] for f in cmap.features] == [["b"], ["c"], []]
    assert len(cmap.unassigned_peptide_identifications) == 2
