import pytest

from msqc.contracts import ConfigurationError
from msqc.metrics.ms2_identification_rate import Ms2IdentificationRate
from msqc.ms.spectra import MSExperiment
from tests.helpers.fake_maps import make_experiment, make_feature_map, make_pep_id, make_spectrum

pytestmark = pytest.mark.unit


def target(uid, label="target"):
    return make_pep_id(uid, spectrum_reference="s2", hit_meta={"target_decoy": label})


def test_rate_counts_targets_only():
    fmap = make_feature_map([target("id1"), target("id2", "decoy")])
    data = Ms2IdentificationRate().compute(fmap, make_experiment())

    assert data.num_ms2_spectra == 2
    assert data.num_peptide_identification == 1
    assert data.identification_rate == 0.5


def test_target_plus_decoy_counts_as_target():
    fmap = make_feature_map([target("id1", "target+decoy")])
    assert Ms2IdentificationRate().compute(fmap, make_experiment()).num_peptide_identification == 1


def test_missing_fdr_annotation_requires_force_flag():
    fmap = make_feature_map([make_pep_id("id1")])
    with pytest.raises(ConfigurationError) as exc_info:
        Ms2IdentificationRate().compute(fmap, make_experiment())
    assert exc_info.value.parameter == "ms2_id_rate.force_no_fdr"


def test_force_no_fdr_counts_all_hits():
    fmap = make_feature_map([make_pep_id("id1"), make_pep_id("id2")], unassigned=[make_pep_id(hits=[])])
    data = Ms2IdentificationRate().compute(fmap, make_experiment(), force_no_fdr=True)
    assert data.identification_rate == 1.0


def test_no_ms2_spectra():
    experiment = MSExperiment(spectra=[make_spectrum("s1", 1)])
    with pytest.raises(ConfigurationError, match="no MS2 spectra"):
        Ms2IdentificationRate().compute(make_feature_map(), experiment)


def test_more_ids_than_spectra():
    fmap = make_feature_map([target("id1"), target("id2"), target("id3")])
    with pytest.raises(ConfigurationError, match="more identifications"):
        Ms2IdentificationRate().compute(fmap, make_experiment())
