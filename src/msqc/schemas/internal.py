"""InternalConfig: Authoritative runtime configuration.

This is the ONLY config schema that runtime code sees. It is fully validated
and normalized; required inputs are checked in resolve_config().

All .get() calls, fallback defaults, and validation logic are FORBIDDEN in
runtime code - everything is explicit here.
"""

from typing import Literal, Optional
from pydantic import ConfigDict, Field
from msqc.schemas.base import MsqcBaseModel


# =============================================================================
# Nested Configuration Models (Runtime)
# =============================================================================

class InternalInputsConfig(MsqcBaseModel):
    """Runtime input files.

    Note: in_cm is validated as non-None in resolve_config().
    """
    in_cm: Optional[str]
    in_raw: list[str]
    in_postfdr: list[str]
    in_trafo: list[str]
    in_contaminants: Optional[str]


class InternalOutputsConfig(MsqcBaseModel):
    """Runtime output files.

    Note: out is validated as non-None in resolve_config().
    """
    out: Optional[str]
    out_cm: Optional[str]
    out_feat: list[str]


class InternalFragmentMassErrorConfig(MsqcBaseModel):
    unit: Literal["auto", "ppm", "Da"]
    tolerance: float = Field(gt=0)


class InternalMs2IdRateConfig(MsqcBaseModel):
    force_no_fdr: bool


class InternalContaminantsConfig(MsqcBaseModel):
    min_peptide_length: int = Field(ge=1)


class InternalReportConfig(MsqcBaseModel):
    description: str
    export_empty_identifications: bool


class InternalLoggingConfig(MsqcBaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    log_dir: Optional[str]


# =============================================================================
# Main InternalConfig
# =============================================================================

class InternalConfig(MsqcBaseModel):
    """Authoritative runtime configuration.

    This is the ONLY configuration schema that processing code sees.
    It is fully validated and immutable.

    Usage
    -----
    Runtime modules receive InternalConfig and access fields directly:

        def __init__(self, config: InternalConfig):
            self.tolerance = config.fragment_mass_error.tolerance  # NOT .get()
    """

    inputs: InternalInputsConfig
    outputs: InternalOutputsConfig
    fragment_mass_error: InternalFragmentMassErrorConfig
    ms2_id_rate: InternalMs2IdRateConfig
    contaminants: InternalContaminantsConfig
    report: InternalReportConfig
    logging: InternalLoggingConfig

    model_config = ConfigDict(
        extra='forbid',
        validate_assignment=True,
        use_enum_values=True,
        str_strip_whitespace=True,
        frozen=True,  # Immutable after construction
    )
