"""Mass error between theoretical and observed fragment ions."""

import logging
from enum import Enum

import numpy as np
from pydantic import BaseModel
from pyteomics import mass
from pyteomics.auxiliary import PyteomicsError

from msqc.contracts.failure import ConfigurationError
from msqc.metrics.base import QCMetric, Requirement, RunData
from msqc.ms.spectra import MSExperiment, SpectraMap
from msqc.ms.structures import FeatureMap, unmodified_sequence

__all__ = ['FragmentMassError', 'FMEStatistics', 'ToleranceUnit', 'theoretical_fragments']

logger = logging.getLogger(__name__)


class ToleranceUnit(str, Enum):
    """Unit of the fragment matching window.

    AUTO takes unit and value from the feature map's search parameters.
    """
    AUTO = "auto"
    PPM = "ppm"
    DA = "Da"


class FMEStatistics(BaseModel):
    average_ppm: float = 0.0
    variance_ppm: float = 0.0
    matched_ions: int = 0


def theoretical_fragments(sequence: str, types=("b", "y")) -> np.ndarray:
    """Sorted m/z of singly charged b and y ions of an unmodified peptide."""
    fragments = []
    for i in range(1, len(sequence)):
        for ion_type in types:
            if ion_type[0] in "abc":
                fragments.append(mass.fast_mass(sequence[:i], ion_type=ion_type, charge=1))
            else:
                fragments.append(mass.fast_mass(sequence[i:], ion_type=ion_type, charge=1))
    return np.sort(np.asarray(fragments, dtype=float))


def _match(theoretical: np.ndarray, observed: np.ndarray, tolerance: float, ppm: bool):
    """Nearest observed peak per theoretical ion within the window."""
    if observed.size == 0 or theoretical.size == 0:
        return np.empty(0), np.empty(0)
    observed = np.sort(observed)
    idx = np.searchsorted(observed, theoretical)
    left = observed[np.clip(idx - 1, 0, observed.size - 1)]
    right = observed[np.clip(idx, 0, observed.size - 1)]
    nearest = np.where(np.abs(left - theoretical) <= np.abs(right - theoretical), left, right)

    diff_da = nearest - theoretical
    window = tolerance * theoretical * 1e-6 if ppm else np.full(theoretical.size, tolerance)
    hit = np.abs(diff_da) <= window
    diff_da = diff_da[hit]
    diff_ppm = diff_da / theoretical[hit] * 1e6
    return diff_ppm, diff_da


class FragmentMassError(QCMetric):
    """Fragment mass error of the best hit of every identification.

    Annotates the top hit with ``fragment_mass_error_ppm`` and
    ``fragment_mass_error_da`` (one value per matched b/y ion) and records
    mean and variance of the ppm errors per run.
    """

    name = "FragmentMassError"
    required = (Requirement.RAW_MZML, Requirement.POSTFDR_FEATURES)

    def __init__(self, unit: ToleranceUnit = ToleranceUnit.AUTO, tolerance: float = 20.0):
        super().__init__()
        self.unit = ToleranceUnit(unit)
        self.tolerance = tolerance

    @staticmethod
    def _resolve_tolerance(feature_map: FeatureMap, unit: ToleranceUnit, tolerance: float):
        if unit != ToleranceUnit.AUTO:
            return tolerance, unit == ToleranceUnit.PPM
        params = feature_map.search_parameters()
        if params.fragment_mass_tolerance <= 0:
            raise ConfigurationError(
                "tolerance unit 'auto' needs a fragment mass tolerance in the search "
                "parameters; set it to 'ppm' or 'Da'",
                parameter="fragment_mass_error.unit",
            )
        return params.fragment_mass_tolerance, params.fragment_mass_tolerance_ppm

    def compute(self, feature_map: FeatureMap, experiment: MSExperiment, spectra_map: SpectraMap,
                unit: ToleranceUnit = ToleranceUnit.AUTO, tolerance: float = 20.0) -> FMEStatistics:
        tolerance, ppm = self._resolve_tolerance(feature_map, ToleranceUnit(unit), tolerance)

        all_ppm = []
        for pep_id in feature_map.iter_peptide_identifications():
            hit = pep_id.top_hit()
            if hit is None:
                continue
            if pep_id.spectrum_reference is None:
                raise ConfigurationError(
                    "identification without spectrum reference; cannot locate its MS2 spectrum",
                    parameter="in_postfdr",
                )
            spectrum = experiment[spectra_map.at(pep_id.spectrum_reference)]
            if spectrum.ms_level != 2:
                raise ConfigurationError(
                    f"spectrum '{spectrum.native_id}' is MS{spectrum.ms_level}, expected MS2",
                    parameter="in_raw",
                )

            try:
                theoretical = theoretical_fragments(unmodified_sequence(hit.sequence))
            except PyteomicsError as exc:
                logger.debug("Skipping hit '%s': %s", hit.sequence, exc)
                continue

            diff_ppm, diff_da = _match(theoretical, spectrum.mz, tolerance, ppm)
            hit.set_meta_value("fragment_mass_error_ppm", diff_ppm.tolist())
            hit.set_meta_value("fragment_mass_error_da", diff_da.tolist())
            all_ppm.append(diff_ppm)

        errors = np.concatenate(all_ppm) if all_ppm else np.empty(0)
        stats = FMEStatistics(
            average_ppm=float(errors.mean()) if errors.size else 0.0,
            variance_ppm=float(errors.var()) if errors.size else 0.0,
            matched_ions=int(errors.size),
        )
        self.results.append(stats)
        return stats

    def run(self, run_data: RunData):
        self.compute(run_data.feature_map, run_data.experiment, run_data.spectra_map,
                     self.unit, self.tolerance)
        return None
