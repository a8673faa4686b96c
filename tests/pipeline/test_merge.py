import pytest

from msqc.contracts import ConfigurationError
from msqc.pipeline.join_index import IdentityJoinIndex
from msqc.pipeline.merge import merge_annotations, merge_feature_map
from tests.helpers.fake_maps import make_consensus_map, make_feature_map, make_hit, make_pep_id

pytestmark = [pytest.mark.unit, pytest.mark.pipeline]


@pytest.fixture
def cmap():
    return make_consensus_map(
        [[make_pep_id("id1", hits=[make_hit("PEPKTIDER"), make_hit("PEPTIDER")])]],
        unassigned=[make_pep_id("id2")],
    )


@pytest.fixture
def index(cmap):
    return IdentityJoinIndex.build(cmap)


def annotated(uid, **hit_meta):
    pep_id = make_pep_id(uid, hits=[make_hit("PEPKTIDER", **hit_meta), make_hit("PEPTIDER", lower="x")])
    pep_id.set_meta_value("rt_align", 42.0)
    return pep_id


def test_copies_id_and_top_hit_meta(cmap, index):
    assert merge_annotations([annotated("id1", missed_cleavages=1)], index) == 1

    canonical = cmap.features[0].peptide_identifications[0]
    assert canonical.get_meta_value("rt_align") == 42.0
    assert canonical.hits[0].get_meta_value("missed_cleavages") == 1
    assert not canonical.hits[1].meta_value_exists("lower")


def test_hitless_ids_are_skipped_even_without_uid(index):
    assert merge_annotations([make_pep_id(hits=[])], index) == 0


def test_missing_uid(index):
    with pytest.raises(ConfigurationError, match="-addUID") as exc_info:
        merge_annotations([make_pep_id()], index)
    assert exc_info.value.parameter == "in_postfdr"


@pytest.mark.parametrize("uid", [None, ""])
def test_null_uid_is_rejected(cmap, index, uid):
    pep_id = annotated("id1", missed_cleavages=7)
    pep_id.set_meta_value("UID", uid)

    with pytest.raises(ConfigurationError, match="-addUID") as exc_info:
        merge_annotations([pep_id], index)
    assert exc_info.value.parameter == "in_postfdr"
    assert not cmap.features[0].peptide_identifications[0].hits[0].meta_value_exists("missed_cleavages")


def test_unknown_uid(index):
    with pytest.raises(ConfigurationError) as exc_info:
        merge_annotations([annotated("nope")], index)
    assert exc_info.value.parameter == "in_cm"


def test_last_writer_wins(cmap, index):
    merge_annotations([annotated("id2", missed_cleavages=0), annotated("id2", missed_cleavages=2)], index)
    assert cmap.unassigned_peptide_identifications[0].hits[0].get_meta_value("missed_cleavages") == 2


def test_merge_is_idempotent(cmap, index):
    fmap = make_feature_map([annotated("id1", missed_cleavages=1)], unassigned=[annotated("id2", is_contaminant=0)])

    merge_feature_map(fmap, index)
    once = cmap.model_dump()
    merge_feature_map(fmap, index)

    assert cmap.model_dump() == once


def test_unassigned_are_merged_before_features(cmap, index):
    fmap = make_feature_map([annotated("id1", missed_cleavages=3)], unassigned=[annotated("id1", missed_cleavages=9)])

    assert merge_feature_map(fmap, index) == 2
    assert cmap.features[0].peptide_identifications[0].hits[0].get_meta_value("missed_cleavages") == 3
