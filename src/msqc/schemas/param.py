"""ParamConfig: Expert defaults for the msqc pipeline.

This module defines the complete default configuration. ALL pipeline
parameters must have defaults here. No runtime code should define fallback
values - this is the single source of truth for defaults.

Runtime code NEVER reads from ParamConfig directly - it only receives InternalConfig.
"""

from typing import Literal, Optional
from pydantic import Field, field_validator
from msqc.schemas.base import MsqcBaseModel, as_file_list, normalize_tolerance_unit


# =============================================================================
# Nested Configuration Models
# =============================================================================

class InputsConfig(MsqcBaseModel):
    """Input files. Per-run lists are indexed by run and must have equal length."""
    in_cm: Optional[str] = Field(None, description="Consensus map (JSON)")
    in_raw: list[str] = Field(default_factory=list, description="Raw spectra (mzML), one per run")
    in_postfdr: list[str] = Field(default_factory=list, description="Post-FDR feature maps (JSON), one per run")
    in_trafo: list[str] = Field(default_factory=list, description="RT transformations (JSON), one per run")
    in_contaminants: Optional[str] = Field(None, description="Contaminant database (FASTA)")

    @field_validator("in_raw", "in_postfdr", "in_trafo", mode="before")
    @classmethod
    def coerce_file_lists(cls, v):
        return as_file_list(v)


class OutputsConfig(MsqcBaseModel):
    """Output files."""
    out: Optional[str] = Field(None, description="mzTab report with QC information")
    out_cm: Optional[str] = Field(None, description="Consensus map with QC information")
    out_feat: list[str] = Field(default_factory=list, description="Feature maps with QC information")

    @field_validator("out_feat", mode="before")
    @classmethod
    def coerce_file_lists(cls, v):
        return as_file_list(v)


class FragmentMassErrorConfig(MsqcBaseModel):
    """Fragment matching window. 'auto' reads it from the search parameters."""
    unit: Literal["auto", "ppm", "Da"] = "auto"
    tolerance: float = Field(20.0, gt=0, description="Search window for matching peaks")

    @field_validator("unit", mode="before")
    @classmethod
    def normalize_unit(cls, v):
        return normalize_tolerance_unit(v)


class Ms2IdRateConfig(MsqcBaseModel):
    """MS2 identification rate settings."""
    force_no_fdr: bool = Field(
        False, description="Accept all identifications as targets if no FDR was made"
    )


class ContaminantsConfig(MsqcBaseModel):
    """Contaminant digestion settings."""
    min_peptide_length: int = Field(6, ge=1)


class ReportConfig(MsqcBaseModel):
    """mzTab report settings."""
    description: str = "Quality control report"
    export_empty_identifications: bool = True


class LoggingConfig(MsqcBaseModel):
    """Logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_dir: Optional[str] = None


# =============================================================================
# Main ParamConfig
# =============================================================================

class ParamConfig(MsqcBaseModel):
    """Complete expert configuration with all defaults.

    This is the single source of truth for all pipeline parameters.
    Every tunable parameter MUST have a default here.

    Usage
    -----
    This config is NOT used directly by runtime code. It serves as the
    base layer in config resolution:

        internal_cfg = resolve_config(param_cfg, user_cfg, cli_cfg)

    Runtime code only sees InternalConfig.
    """

    inputs: InputsConfig = Field(default_factory=InputsConfig)
    outputs: OutputsConfig = Field(default_factory=OutputsConfig)
    fragment_mass_error: FragmentMassErrorConfig = Field(default_factory=FragmentMassErrorConfig)
    ms2_id_rate: Ms2IdRateConfig = Field(default_factory=Ms2IdRateConfig)
    contaminants: ContaminantsConfig = Field(default_factory=ContaminantsConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
