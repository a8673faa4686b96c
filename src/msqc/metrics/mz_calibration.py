"""Precursor m/z error before and after calibration."""

import logging
from typing import Optional

import numpy as np
from pyteomics import mass
from pyteomics.auxiliary import PyteomicsError

from msqc.metrics.base import QCMetric, Requirement, RunData
from msqc.ms.spectra import MSExperiment, SpectraMap
from msqc.ms.structures import FeatureMap, unmodified_sequence

__all__ = ['MzCalibration']

logger = logging.getLogger(__name__)


def _ppm(observed: float, reference: float) -> float:
    return (observed - reference) / reference * 1e6


class MzCalibration(QCMetric):
    """Precursor mass accuracy of the best hit.

    ``mz_ref`` is the theoretical m/z of the hit at its charge, ``mz_raw``
    the precursor m/z recorded in the raw file and the identification's own
    m/z is taken as the calibrated value. Annotates the top hit with these
    and with ``uncalibrated_mz_error_ppm``/``calibrated_mz_error_ppm``.
    The per-run result is the median calibrated error in ppm (None if no
    hit could be evaluated).
    """

    name = "MzCalibration"
    required = (Requirement.RAW_MZML, Requirement.POSTFDR_FEATURES)

    def compute(self, feature_map: FeatureMap, experiment: MSExperiment,
                spectra_map: SpectraMap) -> Optional[float]:
        calibrated = []
        for pep_id in feature_map.iter_peptide_identifications():
            hit = pep_id.top_hit()
            if hit is None or hit.charge <= 0:
                continue
            try:
                mz_ref = mass.fast_mass(unmodified_sequence(hit.sequence), charge=hit.charge)
            except PyteomicsError as exc:
                logger.debug("Skipping hit '%s': %s", hit.sequence, exc)
                continue
            hit.set_meta_value("mz_ref", mz_ref)

            ref = pep_id.spectrum_reference
            if ref is not None and ref in spectra_map:
                mz_raw = experiment[spectra_map.at(ref)].precursor_mz
                if mz_raw is not None:
                    hit.set_meta_value("mz_raw", mz_raw)
                    hit.set_meta_value("uncalibrated_mz_error_ppm", _ppm(mz_raw, mz_ref))

            if pep_id.mz is not None:
                error = _ppm(pep_id.mz, mz_ref)
                hit.set_meta_value("calibrated_mz_error_ppm", error)
                calibrated.append(error)

        median = float(np.median(calibrated)) if calibrated else None
        self.results.append(median)
        return median

    def run(self, run_data: RunData):
        self.compute(run_data.feature_map, run_data.experiment, run_data.spectra_map)
        return None
