import pytest

from msqc.cli.run_qc import build_parser, load_user_config_dict, main, run_quality_control
from msqc.contracts import ConfigurationError, ExitCode
from msqc.ms.loader import MSDataLoader
from tests.helpers.fake_maps import make_consensus_map, make_pep_id

pytestmark = pytest.mark.unit


@pytest.fixture
def consensus_file(temp_dir):
    cmap = make_consensus_map([[make_pep_id("id1", "PEPKTIDER")]])
    return str(MSDataLoader().store_consensus(temp_dir / "linked.consensus.json", cmap))


def write_user_config(path, **config):
    path.write_text(f"CONFIG = {config!r}\n")
    return str(path)


class TestLoadUserConfig:

    def test_reads_config_dict(self, temp_dir):
        path = write_user_config(temp_dir / "user_config.py", IN_CM="x.json", LOG_LEVEL="debug")
        assert load_user_config_dict(path) == {"IN_CM": "x.json", "LOG_LEVEL": "debug"}

    def test_missing_file(self, temp_dir):
        with pytest.raises(FileNotFoundError):
            load_user_config_dict(str(temp_dir / "nope.py"))

    def test_file_without_config(self, temp_dir):
        path = temp_dir / "empty_config.py"
        path.write_text("SETTINGS = 1\n")
        with pytest.raises(ConfigurationError) as exc_info:
            load_user_config_dict(str(path))
        assert exc_info.value.parameter == "config"


class TestExitCodes:

    def test_missing_user_config(self, temp_dir):
        assert run_quality_control(str(temp_dir / "nope.py")) == ExitCode.INPUT_FILE_NOT_FOUND

    def test_missing_consensus_parameter(self, temp_dir):
        code = run_quality_control(cli_args={"out": str(temp_dir / "qc.mzTab")})
        assert code == ExitCode.ILLEGAL_PARAMETERS

    def test_missing_consensus_file(self, temp_dir):
        code = run_quality_control(cli_args={"in_cm": str(temp_dir / "nope.json"),
                                             "out": str(temp_dir / "qc.mzTab")})
        assert code == ExitCode.INPUT_FILE_NOT_FOUND

    def test_corrupt_consensus_file(self, temp_dir):
        path = temp_dir / "broken.consensus.json"
        path.write_text("{not json")
        code = run_quality_control(cli_args={"in_cm": str(path), "out": str(temp_dir / "qc.mzTab")})
        assert code == ExitCode.INPUT_FILE_CORRUPT

    def test_invalid_user_value(self, temp_dir, consensus_file):
        path = write_user_config(temp_dir / "user_config.py", IN_CM=consensus_file,
                                 OUT=str(temp_dir / "qc.mzTab"), FRAGMENT_MASS_ERROR_UNIT="furlong")
        assert run_quality_control(path) == ExitCode.ILLEGAL_PARAMETERS

    def test_success_from_user_config(self, temp_dir, consensus_file):
        out = temp_dir / "qc.mzTab"
        path = write_user_config(temp_dir / "user_config.py", IN_CM=consensus_file, OUT=str(out))

        assert run_quality_control(path) == ExitCode.EXECUTION_OK
        assert out.read_text().startswith("MTD\tmzTab-version\t1.0.0")


class TestMain:

    def test_parser_collects_lists(self):
        args = build_parser().parse_args(["cfg.py", "--in-cm", "cm.json", "--in-postfdr", "a.json", "b.json"])
        assert args.config == "cfg.py"
        assert args.in_postfdr == ["a.json", "b.json"]
        assert args.force_no_fdr is None

    def test_cli_overrides_user_config(self, temp_dir, consensus_file):
        out = temp_dir / "cli.mzTab"
        path = write_user_config(temp_dir / "user_config.py", IN_CM=consensus_file,
                                 OUT=str(temp_dir / "user.mzTab"))

        assert main([path, "--out", str(out)]) == 0
        assert out.exists()
        assert not (temp_dir / "user.mzTab").exists()

    def test_returns_exit_code(self, temp_dir):
        assert main(["--out", str(temp_dir / "qc.mzTab")]) == int(ExitCode.ILLEGAL_PARAMETERS)
