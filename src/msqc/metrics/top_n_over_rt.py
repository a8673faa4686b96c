"""Position of each MS2 spectrum within its duty cycle, identified or not."""

import logging

from msqc.metrics.base import QCMetric, Requirement, RunData
from msqc.ms.spectra import MSExperiment, SpectraMap
from msqc.ms.structures import FeatureMap, PeptideIdentification

__all__ = ['TopNoverRT']

logger = logging.getLogger(__name__)

SCAN_EVENT_KEY = "ScanEventNumber"
IDENTIFIED_KEY = "identified"


class TopNoverRT(QCMetric):
    """Scan event number of every MS2 spectrum.

    The scan event number counts MS2 spectra since the preceding MS1
    spectrum (1 = first precursor picked). Identifications get
    ``ScanEventNumber`` and ``identified = 1``. For every MS2 spectrum
    without an identification a new, hit-less identification is
    synthesized (``identified = 0``) and returned, so that unidentified
    spectra also show up in the report.
    """

    name = "TopNoverRT"
    required = (Requirement.RAW_MZML, Requirement.POSTFDR_FEATURES)

    def compute(self, experiment: MSExperiment, feature_map: FeatureMap,
                spectra_map: SpectraMap = None) -> list[PeptideIdentification]:
        if spectra_map is None:
            spectra_map = SpectraMap(experiment)

        scan_events = {}
        event = 0
        for spec in experiment:
            if spec.ms_level == 1:
                event = 0
            elif spec.ms_level == 2:
                event += 1
                scan_events[spec.native_id] = event

        identified = set()
        for pep_id in feature_map.iter_peptide_identifications():
            ref = pep_id.spectrum_reference
            if ref is None:
                continue
            spectra_map.at(ref)  # raises if the raw file lacks the spectrum
            if ref not in scan_events:
                continue
            pep_id.set_meta_value(SCAN_EVENT_KEY, scan_events[ref])
            pep_id.set_meta_value(IDENTIFIED_KEY, 1)
            identified.add(ref)

        new_ids = []
        for spec in experiment:
            if spec.ms_level != 2 or spec.native_id in identified:
                continue
            new_ids.append(PeptideIdentification(
                rt=spec.rt,
                mz=spec.precursor_mz,
                spectrum_reference=spec.native_id,
                meta={SCAN_EVENT_KEY: scan_events[spec.native_id], IDENTIFIED_KEY: 0},
            ))

        self.results.append(len(new_ids))
        logger.debug("TopNoverRT: %d identified, %d unidentified MS2 spectra",
                     len(identified), len(new_ids))
        return new_ids

    def run(self, run_data: RunData):
        return self.compute(run_data.experiment, run_data.feature_map, run_data.spectra_map)
