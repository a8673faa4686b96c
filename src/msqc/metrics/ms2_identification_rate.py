"""Fraction of MS2 spectra that led to a target identification."""

import logging

from pydantic import BaseModel

from msqc.contracts.base import require_input
from msqc.metrics.base import QCMetric, Requirement, RunData
from msqc.ms.spectra import MSExperiment
from msqc.ms.structures import FeatureMap

__all__ = ['Ms2IdentificationRate', 'IdentificationRateData']

logger = logging.getLogger(__name__)

TARGET_DECOY_KEY = "target_decoy"
_TARGET_LABELS = ("target", "target+decoy")


class IdentificationRateData(BaseModel):
    num_peptide_identification: int = 0
    num_ms2_spectra: int = 0
    identification_rate: float = 0.0


class Ms2IdentificationRate(QCMetric):
    """MS2 identification rate.

    Counts identifications whose best hit is a target (``target_decoy``
    meta value) and divides by the number of MS2 spectra. With
    ``force_no_fdr`` every identification with a hit counts, for data that
    never went through target/decoy FDR estimation.
    """

    name = "Ms2IdentificationRate"
    required = (Requirement.RAW_MZML, Requirement.POSTFDR_FEATURES)

    def __init__(self, force_no_fdr: bool = False):
        super().__init__()
        self.force_no_fdr = force_no_fdr

    def compute(self, feature_map: FeatureMap, experiment: MSExperiment,
                force_no_fdr: bool = False) -> IdentificationRateData:
        num_ms2 = sum(1 for spec in experiment if spec.ms_level == 2)
        require_input(num_ms2 > 0, "no MS2 spectra found in raw file", parameter="in_raw")

        num_ids = 0
        for pep_id in feature_map.iter_peptide_identifications():
            hit = pep_id.top_hit()
            if hit is None:
                continue
            if force_no_fdr:
                num_ids += 1
                continue
            require_input(
                hit.meta_value_exists(TARGET_DECOY_KEY),
                "no target/decoy annotation found; FDR was not made. "
                "Enable force_no_fdr to accept all identifications as targets",
                parameter="ms2_id_rate.force_no_fdr",
            )
            if hit.get_meta_value(TARGET_DECOY_KEY) in _TARGET_LABELS:
                num_ids += 1

        require_input(
            num_ids <= num_ms2,
            f"more identifications ({num_ids}) than MS2 spectra ({num_ms2})",
            parameter="in_raw",
        )

        data = IdentificationRateData(
            num_peptide_identification=num_ids,
            num_ms2_spectra=num_ms2,
            identification_rate=num_ids / num_ms2,
        )
        self.results.append(data)
        logger.debug("MS2 ID rate: %d/%d", num_ids, num_ms2)
        return data

    def run(self, run_data: RunData):
        self.compute(run_data.feature_map, run_data.experiment, self.force_no_fdr)
        return None
