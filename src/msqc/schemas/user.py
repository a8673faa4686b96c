"""UserConfig: Forgiving, minimal user-facing configuration.

This schema accepts user inputs in a variety of formats, with aliases
for common naming patterns (e.g., IN_CM → in_cm, FORCE_NO_FDR → force_no_fdr).

UserConfig is intentionally minimal - users only specify what they want
to override from the expert defaults. Validation is lenient: uppercase and
lowercase keys, a single path where a list is expected, 'da'/'PPM' for
tolerance units, unknown legacy keys are ignored.
"""

from typing import Literal, Optional
from pydantic import Field, field_validator
from msqc.schemas.base import MsqcBaseModel, as_file_list, normalize_tolerance_unit


class UserInputsConfig(MsqcBaseModel):
    """User-facing input files."""
    in_cm: Optional[str] = None
    in_raw: Optional[list[str]] = None
    in_postfdr: Optional[list[str]] = None
    in_trafo: Optional[list[str]] = None
    in_contaminants: Optional[str] = None

    @field_validator("in_raw", "in_postfdr", "in_trafo", mode="before")
    @classmethod
    def coerce_file_lists(cls, v):
        return as_file_list(v)


class UserOutputsConfig(MsqcBaseModel):
    """User-facing output files."""
    out: Optional[str] = None
    out_cm: Optional[str] = None
    out_feat: Optional[list[str]] = None

    @field_validator("out_feat", mode="before")
    @classmethod
    def coerce_file_lists(cls, v):
        return as_file_list(v)


class UserFragmentMassErrorConfig(MsqcBaseModel):
    unit: Optional[str] = None
    tolerance: Optional[float] = None

    @field_validator("unit", mode="before")
    @classmethod
    def normalize_unit(cls, v):
        return normalize_tolerance_unit(v)


class UserMs2IdRateConfig(MsqcBaseModel):
    force_no_fdr: Optional[bool] = None


class UserReportConfig(MsqcBaseModel):
    description: Optional[str] = None
    export_empty_identifications: Optional[bool] = None


class UserConfig(MsqcBaseModel):
    """User-facing configuration schema.

    Minimal, forgiving, and uses common aliases. Users only specify
    what they want to override from ParamConfig defaults.

    This config is converted to internal overrides during resolution.

    Usage
    -----
        user_cfg = UserConfig(
            in_cm="linked.consensus.json",
            in_postfdr=["run1.features.json", "run2.features.json"],
            out="qc.mzTab",
            fragment_mass_error_unit="ppm",
        )

        internal = resolve_config(param_cfg, user_cfg, cli_cfg)
    """

    # Inputs (flat aliases)
    in_cm: Optional[str] = Field(None, alias="IN_CM")
    in_raw: Optional[list[str]] = Field(None, alias="IN_RAW")
    in_postfdr: Optional[list[str]] = Field(None, alias="IN_POSTFDR")
    in_trafo: Optional[list[str]] = Field(None, alias="IN_TRAFO")
    in_contaminants: Optional[str] = Field(None, alias="IN_CONTAMINANTS")

    # Outputs (flat aliases)
    out: Optional[str] = Field(None, alias="OUT")
    out_cm: Optional[str] = Field(None, alias="OUT_CM")
    out_feat: Optional[list[str]] = Field(None, alias="OUT_FEAT")

    # Metric settings (flat aliases)
    fragment_mass_error_unit: Optional[str] = Field(None, alias="FRAGMENT_MASS_ERROR_UNIT")
    fragment_mass_error_tolerance: Optional[float] = Field(None, alias="FRAGMENT_MASS_ERROR_TOLERANCE")
    force_no_fdr: Optional[bool] = Field(None, alias="FORCE_NO_FDR")
    contaminant_min_length: Optional[int] = Field(None, alias="CONTAMINANT_MIN_LENGTH")

    # Report / logging (flat aliases)
    report_description: Optional[str] = Field(None, alias="REPORT_DESCRIPTION")
    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]] = Field(None, alias="LOG_LEVEL")
    log_dir: Optional[str] = Field(None, alias="LOG_DIR")

    # Nested overrides (advanced users)
    inputs: Optional[UserInputsConfig] = None
    outputs: Optional[UserOutputsConfig] = None
    fragment_mass_error: Optional[UserFragmentMassErrorConfig] = None
    ms2_id_rate: Optional[UserMs2IdRateConfig] = None
    report: Optional[UserReportConfig] = None

    model_config = MsqcBaseModel.model_config.copy()
    # Allow forgiving input dictionaries (ignore unknown legacy keys)
    model_config.update({"populate_by_name": True, "extra": "ignore"})

    @field_validator("in_raw", "in_postfdr", "in_trafo", "out_feat", mode="before")
    @classmethod
    def coerce_file_lists(cls, v):
        """Accept a single path for per-run file lists."""
        return as_file_list(v)

    @field_validator("fragment_mass_error_unit", mode="before")
    @classmethod
    def normalize_unit(cls, v):
        """Normalize tolerance unit spelling."""
        return normalize_tolerance_unit(v)

    @field_validator("fragment_mass_error_tolerance", mode="before")
    @classmethod
    def coerce_tolerance(cls, v):
        """Accept int or float for tolerance."""
        if v is not None:
            return float(v)
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        if isinstance(v, str):
            return v.upper().strip()
        return v

    def to_internal_overrides(self) -> dict:
        """Convert flat UserConfig to nested InternalConfig structure.

        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        overrides = {}

        # Inputs section
        inputs = {}
        for key in ("in_cm", "in_raw", "in_postfdr", "in_trafo", "in_contaminants"):
            value = getattr(self, key)
            if value is not None:
                inputs[key] = value
        if self.inputs is not None:
            inputs.update(self.inputs.model_dump(exclude_none=True))
        if inputs:
            overrides["inputs"] = inputs

        # Outputs section
        outputs = {}
        for key in ("out", "out_cm", "out_feat"):
            value = getattr(self, key)
            if value is not None:
                outputs[key] = value
        if self.outputs is not None:
            outputs.update(self.outputs.model_dump(exclude_none=True))
        if outputs:
            overrides["outputs"] = outputs

        # Fragment mass error section
        fme = {}
        if self.fragment_mass_error_unit is not None:
            fme["unit"] = self.fragment_mass_error_unit
        if self.fragment_mass_error_tolerance is not None:
            fme["tolerance"] = self.fragment_mass_error_tolerance
        if self.fragment_mass_error is not None:
            fme.update(self.fragment_mass_error.model_dump(exclude_none=True))
        if fme:
            overrides["fragment_mass_error"] = fme

        # MS2 identification rate section
        ms2 = {}
        if self.force_no_fdr is not None:
            ms2["force_no_fdr"] = self.force_no_fdr
        if self.ms2_id_rate is not None:
            ms2.update(self.ms2_id_rate.model_dump(exclude_none=True))
        if ms2:
            overrides["ms2_id_rate"] = ms2

        if self.contaminant_min_length is not None:
            overrides["contaminants"] = {"min_peptide_length": self.contaminant_min_length}

        # Report section
        report = {}
        if self.report_description is not None:
            report["description"] = self.report_description
        if self.report is not None:
            report.update(self.report.model_dump(exclude_none=True))
        if report:
            overrides["report"] = report

        logging_cfg = {}
        if self.log_level is not None:
            logging_cfg["level"] = self.log_level
        if self.log_dir is not None:
            logging_cfg["log_dir"] = self.log_dir
        if logging_cfg:
            overrides["logging"] = logging_cfg

        return overrides
