import pytest

from tests.helpers.fake_maps import make_consensus_map, make_feature_map, make_pep_id


def id_for(uid, sequence, run):
    return make_pep_id(uid, sequence, identifier=run, spectrum_reference="s2",
                       hit_meta={"target_decoy": "target"})


@pytest.fixture
def two_group_cmap():
    """Consensus map with groups run_A (A.raw, id1) and run_B (B.raw, id2)."""
    return make_consensus_map([
        [id_for("id1", "PEPKTIDER", "run_A")],
        [id_for("id2", "PEPTIDEK", "run_B")],
    ])


@pytest.fixture
def two_feature_maps():
    return [
        make_feature_map([id_for("id1", "PEPKTIDER", "run_A")], run_paths=["A.raw"], identifier="run_A"),
        make_feature_map([id_for("id2", "PEPTIDEK", "run_B")], run_paths=["B.raw"], identifier="run_B"),
    ]


@pytest.fixture
def two_run_files(temp_dir, loader, two_group_cmap, two_feature_maps):
    """Consensus and feature maps of the two-group scenario written to disk."""
    return {
        "in_cm": str(loader.store_consensus(temp_dir / "linked.consensus.json", two_group_cmap)),
        "in_postfdr": [
            str(loader.store_features(temp_dir / f"{name}.features.json", fmap))
            for name, fmap in zip(("A", "B"), two_feature_maps)
        ],
        "out": str(temp_dir / "qc.mzTab"),
        "out_cm": str(temp_dir / "annotated.consensus.json"),
    }
