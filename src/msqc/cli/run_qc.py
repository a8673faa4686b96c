"""Core quality control execution logic.

This module contains the actual pipeline runner, separated from argument
parsing. Every failure is logged and mapped to an ``ExitCode``.
"""

import argparse
import importlib.util
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from msqc.contracts import ConfigurationError, ContractViolation, ExitCode, InputFileCorrupt
from msqc.pipeline.orchestrator import QualityControlPipeline
from msqc.schemas import CLIConfig, ParamConfig, UserConfig, resolve_config

__all__ = ['load_user_config_dict', 'run_quality_control', 'build_parser', 'main']

logger = logging.getLogger(__name__)


def load_user_config_dict(config_path: str) -> dict:
    """Load user config dict from Python file.

    Returns the raw dict before Pydantic validation.

    Parameters
    ----------
    config_path : str
        Path to user config Python file containing CONFIG dict.

    Returns
    -------
    dict
        Raw user configuration dictionary.

    Raises
    ------
    FileNotFoundError
        If config file does not exist.
    ConfigurationError
        If no CONFIG dict found in file.
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")

    spec = importlib.util.spec_from_file_location("msqc_user_config", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    for name in dir(module):
        if name.startswith('CONFIG'):
            obj = getattr(module, name)
            if isinstance(obj, dict):
                return obj

    raise ConfigurationError(f"No CONFIG dict found in {path}", parameter="config")


def run_quality_control(
    user_config_path: Optional[str] = None,
    cli_args: Optional[Dict[str, Any]] = None,
    verbose: bool = False
) -> ExitCode:
    """Execute the quality control pipeline.

    1. Loads and resolves configuration (Param < User < CLI)
    2. Runs the pipeline once
    3. Maps failures to exit codes

    Parameters
    ----------
    user_config_path : str, optional
        Path to user config file (Python file with CONFIG dict). If None,
        everything must come from ``cli_args``.
    cli_args : dict, optional
        CLI argument overrides. Keys: in_cm, in_raw, in_postfdr, in_trafo,
        in_contaminants, out, out_cm, out_feat, force_no_fdr, log_level.
    verbose : bool, optional
        If True, enable DEBUG logging and print the resolved config.

    Returns
    -------
    ExitCode
        ``EXECUTION_OK``, ``INPUT_FILE_NOT_FOUND``, ``INPUT_FILE_CORRUPT``,
        ``ILLEGAL_PARAMETERS`` or ``INTERNAL_ERROR``.

    Examples
    --------
    Run with CLI overrides::

        code = run_quality_control(
            "config/qc_config.py",
            cli_args={"in_cm": "linked.consensus.json", "out": "qc.mzTab"},
        )
    """
    try:
        param_cfg = ParamConfig()

        user_cfg_dict = load_user_config_dict(user_config_path) if user_config_path else {}
        user_cfg = UserConfig.model_validate(user_cfg_dict)

        cli_args = dict(cli_args or {})
        if verbose and cli_args.get("log_level") is None:
            cli_args["log_level"] = "DEBUG"
        cli_dict = {k: v for k, v in cli_args.items() if v is not None}
        cli_cfg = CLIConfig.model_validate(cli_dict) if cli_dict else CLIConfig()

        config = resolve_config(param_cfg, user_cfg, cli_cfg)
    except FileNotFoundError as e:
        logger.error("%s", e)
        return ExitCode.INPUT_FILE_NOT_FOUND
    except ConfigurationError as e:
        logger.error("Illegal parameters: %s", e)
        return ExitCode.ILLEGAL_PARAMETERS
    except ValidationError as e:
        logger.error("Invalid configuration: %s", e)
        return ExitCode.ILLEGAL_PARAMETERS

    if verbose:
        print("\nFull Internal Configuration:")
        print(json.dumps(config.model_dump(), indent=2))
        print('=' * 60)

    try:
        return QualityControlPipeline(config).run()
    except FileNotFoundError as e:
        logger.error("%s", e)
        return ExitCode.INPUT_FILE_NOT_FOUND
    except InputFileCorrupt as e:
        logger.error("Corrupt input: %s", e)
        return ExitCode.INPUT_FILE_CORRUPT
    except ConfigurationError as e:
        logger.error("Illegal parameters: %s", e)
        return ExitCode.ILLEGAL_PARAMETERS
    except ContractViolation as e:
        logger.critical("Pipeline contract violated: %s", e)
        logger.critical("This indicates a bug in pipeline logic.")
        return ExitCode.INTERNAL_ERROR


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compute QC metrics of an LC-MS/MS experiment and report them as mzTab")
    parser.add_argument("config", nargs="?", help="Path to user config file")
    parser.add_argument("--in-cm", help="Consensus map (JSON)")
    parser.add_argument("--in-raw", nargs="+", help="Raw spectra per run (mzML)")
    parser.add_argument("--in-postfdr", nargs="+", help="Post-FDR feature map per run (JSON)")
    parser.add_argument("--in-trafo", nargs="+", help="Alignment transformation per run (JSON)")
    parser.add_argument("--in-contaminants", help="Contaminant database (FASTA)")
    parser.add_argument("--out", help="mzTab report")
    parser.add_argument("--out-cm", help="Annotated consensus map (JSON)")
    parser.add_argument("--out-feat", nargs="+", help="Annotated feature map per run (JSON)")
    parser.add_argument("--force-no-fdr", action="store_true", default=None,
                        help="Count all identifications for the MS2 identification rate")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    cli_args = {
        "in_cm": args.in_cm,
        "in_raw": args.in_raw,
        "in_postfdr": args.in_postfdr,
        "in_trafo": args.in_trafo,
        "in_contaminants": args.in_contaminants,
        "out": args.out,
        "out_cm": args.out_cm,
        "out_feat": args.out_feat,
        "force_no_fdr": args.force_no_fdr,
    }
    code = run_quality_control(args.config, cli_args, verbose=args.verbose)
    return int(code)


if __name__ == "__main__":
    sys.exit(main())
