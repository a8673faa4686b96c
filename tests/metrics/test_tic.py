import pytest

from msqc.metrics.base import RunData
from msqc.metrics.tic import TIC
from msqc.ms.spectra import MSExperiment
from tests.helpers.fake_maps import make_experiment

pytestmark = pytest.mark.unit


def test_tic_sums_ms1_spectra_only():
    curve = TIC().compute(make_experiment())
    assert curve == [(10.0, 300.0), (20.0, 50.0)]


def test_tic_of_empty_experiment():
    assert TIC().compute(MSExperiment()) == []


def test_run_appends_one_result_per_run():
    metric = TIC()
    assert metric.run(RunData(0, experiment=make_experiment())) is None
    assert metric.run(RunData(1, experiment=MSExperiment())) is None
    assert len(metric.get_results()) == 2
