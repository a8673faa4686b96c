import pytest

from msqc.contracts import ConfigurationError
from msqc.metrics.base import Requirement, Status
from msqc.pipeline.file_status import RunInputRegistry

pytestmark = [pytest.mark.unit, pytest.mark.pipeline]


def test_empty_list_has_no_effect():
    registry = RunInputRegistry()
    assert registry.update_file_status("in_raw", [], Requirement.RAW_MZML) == []
    assert registry.number_exps == 0
    assert registry.status == Status()


def test_first_non_empty_list_fixes_number_of_runs():
    registry = RunInputRegistry()
    registry.update_file_status("in_raw", [], Requirement.RAW_MZML)
    registry.update_file_status("in_postfdr", ["a", "b"], Requirement.POSTFDR_FEATURES)

    assert registry.number_exps == 2
    assert registry.status == Status(Requirement.POSTFDR_FEATURES)


def test_equal_lengths_mark_all_requirements():
    registry = RunInputRegistry()
    for parameter, req in (("in_raw", Requirement.RAW_MZML),
                           ("in_postfdr", Requirement.POSTFDR_FEATURES),
                           ("in_trafo", Requirement.TRAFO_ALIGN)):
        registry.update_file_status(parameter, ["1", "2", "3"], req)

    assert registry.number_exps == 3
    assert registry.status == Status(Requirement.RAW_MZML, Requirement.POSTFDR_FEATURES,
                                     Requirement.TRAFO_ALIGN)


def test_unequal_lengths_name_parameter_and_expected_count():
    registry = RunInputRegistry()
    registry.update_file_status("in_raw", ["1", "2", "3"], Requirement.RAW_MZML)
    registry.update_file_status("in_postfdr", ["1", "2", "3"], Requirement.POSTFDR_FEATURES)

    with pytest.raises(ConfigurationError, match="Expected were 3") as exc_info:
        registry.update_file_status("in_trafo", ["1", "2"], Requirement.TRAFO_ALIGN)

    assert exc_info.value.parameter == "in_trafo"
    assert Requirement.TRAFO_ALIGN not in registry.status


def test_output_list_must_match():
    registry = RunInputRegistry()
    registry.update_file_status("in_postfdr", ["a", "b"], Requirement.POSTFDR_FEATURES)

    assert registry.check_output_files("out_feat", []) == []
    with pytest.raises(ConfigurationError) as exc_info:
        registry.check_output_files("out_feat", ["x"])
    assert exc_info.value.parameter == "out_feat"


def test_note_availability():
    registry = RunInputRegistry()
    registry.note_availability(Requirement.CONTAMINANTS, False)
    assert Requirement.CONTAMINANTS not in registry.status
    registry.note_availability(Requirement.CONTAMINANTS, True)
    assert Requirement.CONTAMINANTS in registry.status
