import pytest

from msqc.metrics.rt_alignment import RTAlignment
from msqc.ms.transformation import TransformationDescription
from tests.helpers.fake_maps import make_feature_map, make_pep_id

pytestmark = pytest.mark.unit


def test_annotates_raw_and_aligned_rt():
    fmap = make_feature_map([make_pep_id("id1", rt=100.0)], unassigned=[make_pep_id("id2", rt=None)])
    trafo = TransformationDescription(kind="linear", slope=2.0, intercept=1.0)

    assert RTAlignment().compute(fmap, trafo) == 1

    pep_id = fmap.features[0].peptide_identifications[0]
    assert pep_id.get_meta_value("rt_raw") == 100.0
    assert pep_id.get_meta_value("rt_align") == 201.0
    assert not fmap.unassigned_peptide_identifications[0].meta_value_exists("rt_align")


def test_interpolated_transformation():
    trafo = TransformationDescription(kind="interpolated", data_points=[(0.0, 10.0), (100.0, 110.0)])
    assert trafo.apply(50.0) == 60.0
    # constant outside the covered range
    assert trafo.apply(200.0) == 110.0


def test_interpolated_needs_two_points():
    with pytest.raises(ValueError):
        TransformationDescription(kind="interpolated", data_points=[(0.0, 1.0)])


def test_identity_by_default():
    assert TransformationDescription().apply(42.0) == 42.0
