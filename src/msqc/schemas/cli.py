"""CLIConfig: Command-line operational overrides.

Minimal configuration for parameters that commonly change between runs:
input and output files and verbosity.

This schema handles command-line arguments parsed by argparse.
"""

from typing import Literal, Optional
from pydantic import field_validator
from msqc.schemas.base import MsqcBaseModel, as_file_list


class CLIConfig(MsqcBaseModel):
    """Command-line configuration overrides.

    Operational-only settings that override user and param configs.
    Highest priority in config resolution.

    Usage
    -----
        cli_cfg = CLIConfig(
            in_cm="linked.consensus.json",
            in_postfdr=["a.features.json", "b.features.json"],
            out="qc.mzTab",
        )

        internal = resolve_config(param_cfg, user_cfg, cli_cfg)
    """

    in_cm: Optional[str] = None
    in_raw: Optional[list[str]] = None
    in_postfdr: Optional[list[str]] = None
    in_trafo: Optional[list[str]] = None
    in_contaminants: Optional[str] = None
    out: Optional[str] = None
    out_cm: Optional[str] = None
    out_feat: Optional[list[str]] = None
    force_no_fdr: Optional[bool] = None
    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]] = None

    @field_validator("in_raw", "in_postfdr", "in_trafo", "out_feat", mode="before")
    @classmethod
    def coerce_file_lists(cls, v):
        return as_file_list(v)

    def to_internal_overrides(self) -> dict:
        """Convert CLI config to internal config structure.

        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        overrides = {}

        inputs = {
            key: getattr(self, key)
            for key in ("in_cm", "in_raw", "in_postfdr", "in_trafo", "in_contaminants")
            if getattr(self, key) is not None
        }
        if inputs:
            overrides["inputs"] = inputs

        outputs = {
            key: getattr(self, key)
            for key in ("out", "out_cm", "out_feat")
            if getattr(self, key) is not None
        }
        if outputs:
            overrides["outputs"] = outputs

        if self.force_no_fdr is not None:
            overrides["ms2_id_rate"] = {"force_no_fdr": self.force_no_fdr}

        if self.log_level is not None:
            overrides["logging"] = {"level": self.log_level}

        return overrides
