import logging

import pytest

from msqc.contracts import ConfigurationError, ExitCode
from msqc.ms.loader import MSDataLoader
from msqc.pipeline.orchestrator import LOG_FILENAME, QualityControlPipeline
from tests.helpers.fake_maps import InMemoryLoader, make_experiment, write_fasta

pytestmark = [pytest.mark.unit, pytest.mark.pipeline, pytest.mark.integration]


def top_hit(cmap, group):
    return cmap.features[group].peptide_identifications[0].hits[0]


def test_features_only(make_config, two_run_files, caplog):
    config = make_config(**two_run_files)

    with caplog.at_level(logging.WARNING):
        assert QualityControlPipeline(config).run() == ExitCode.EXECUTION_OK

    cmap = MSDataLoader().load_consensus(two_run_files["out_cm"])
    assert top_hit(cmap, 0).get_meta_value("missed_cleavages") == 1
    assert top_hit(cmap, 1).get_meta_value("missed_cleavages") == 0
    assert cmap.unassigned_peptide_identifications == []

    assert "Metric 'TIC' cannot run because input data 'raw spectra' (in_raw) is missing!" in caplog.text

    report = open(two_run_files["out"]).read()
    assert report.startswith("MTD\tmzTab-version")
    assert "TIC_" not in report
    assert "opt_global_missed_cleavages" in report


def test_contaminants_are_flagged(make_config, two_run_files, temp_dir):
    fasta = write_fasta(temp_dir / "contaminants.fasta", [
        ("CON_1", "PEPTIDEKGGGGGGR"),
        ("CON_2", "MAAAAAAAK"),
        ("CON_3", "WWWWWWWR"),
        ("CON_4", "YYYYYYYK"),
        ("CON_5", "HHHHHHHR"),
    ])
    config = make_config(in_contaminants=str(fasta), **two_run_files)

    QualityControlPipeline(config).run()

    cmap = MSDataLoader().load_consensus(two_run_files["out_cm"])
    assert top_hit(cmap, 0).get_meta_value("is_contaminant") == 0
    assert top_hit(cmap, 1).get_meta_value("is_contaminant") == 1


def test_raw_run_adds_summaries_and_unidentified_spectra(make_config, two_run_files):
    files = dict(two_run_files, in_postfdr=two_run_files["in_postfdr"][:1])
    config = make_config(in_raw=["A.mzML"], fragment_mass_error_unit="ppm", **files)
    pipeline = QualityControlPipeline(config, InMemoryLoader({"A.mzML": make_experiment()}))

    assert pipeline.run() == ExitCode.EXECUTION_OK

    report = open(files["out"]).read()
    assert "MTD\tcustom[0]\t[total ion current, MS:1000285, TIC_1, [10.0, 300.0, 20.0, 50.0]]" in report
    assert "MTD\tcustom[1]\t[MS2 identification rate, null, MS2_ID_Rate_1, 50.0]" in report

    cmap = MSDataLoader().load_consensus(files["out_cm"])
    [unidentified] = cmap.unassigned_peptide_identifications
    assert unidentified.spectrum_reference == "s3"
    assert unidentified.identifier == "run_A"
    assert unidentified.hits == []
    assert cmap.features[0].peptide_identifications[0].get_meta_value("ScanEventNumber") == 1
    assert "fragment_mass_error_ppm" in top_hit(cmap, 0).meta


def test_feature_maps_are_written(make_config, two_run_files, temp_dir):
    out_feat = [str(temp_dir / "A.out.json"), str(temp_dir / "B.out.json")]
    QualityControlPipeline(make_config(out_feat=out_feat, **two_run_files)).run()

    fmap = MSDataLoader().load_features(out_feat[1])
    assert fmap.features[0].peptide_identifications[0].hits[0].get_meta_value("missed_cleavages") == 0


def test_unequal_file_lists(make_config, two_run_files):
    config = make_config(in_raw=["A.mzML"], **two_run_files)

    with pytest.raises(ConfigurationError, match="Expected were 1, got 2") as exc_info:
        QualityControlPipeline(config, InMemoryLoader()).run()
    assert exc_info.value.parameter == "in_postfdr"


def test_log_file(make_config, two_run_files, temp_dir):
    log_dir = temp_dir / "logs"
    root = logging.getLogger()
    handlers_before = list(root.handlers)

    QualityControlPipeline(make_config(log_dir=str(log_dir), **two_run_files)).run()

    text = (log_dir / LOG_FILENAME).read_text()
    assert "Starting Quality Control Pipeline" in text
    assert root.handlers == handlers_before


def test_root_level_is_restored(make_config, two_run_files):
    root = logging.getLogger()
    previous = root.level
    root.setLevel(logging.WARNING)
    try:
        QualityControlPipeline(make_config(log_level="DEBUG", **two_run_files)).run()
        assert root.level == logging.WARNING
    finally:
        root.setLevel(previous)
