"""Contaminant rate of the identified peptides."""

import logging
from typing import Optional, Sequence

from pydantic import BaseModel
from pyteomics import parser

from msqc.metrics.base import QCMetric, Requirement, RunData
from msqc.ms.loader import FastaEntry
from msqc.ms.structures import FeatureMap, unmodified_sequence

__all__ = ['Contaminants', 'ContaminantsSummary']

logger = logging.getLogger(__name__)

CONTAMINANT_KEY = "is_contaminant"


class ContaminantsSummary(BaseModel):
    """Per-run contaminant ratios.

    ``assigned``/``unassigned``/``all`` are fractions of identifications
    whose best hit is a contaminant peptide; ``intensity`` is the fraction
    of feature intensity carried by contaminant features.
    """
    assigned: float = 0.0
    unassigned: float = 0.0
    all: float = 0.0
    intensity: float = 0.0
    empty_features: int = 0


class Contaminants(QCMetric):
    """Flags identifications whose best hit is a contaminant peptide.

    The contaminant database is digested once (trypsin, no missed
    cleavages); hits are compared on their unmodified sequence.
    """

    name = "Contaminants"
    required = (Requirement.POSTFDR_FEATURES, Requirement.CONTAMINANTS)

    def __init__(self, contaminants: Sequence[FastaEntry] = (), min_length: int = 6):
        super().__init__()
        self.contaminants = list(contaminants)
        self.min_length = min_length
        self._digest: Optional[set[str]] = None

    def _digested(self) -> set[str]:
        if self._digest is None:
            peptides = set()
            rule = parser.expasy_rules["trypsin"]
            for entry in self.contaminants:
                peptides |= parser.cleave(entry.sequence.upper(), rule, missed_cleavages=0,
                                          min_length=self.min_length)
            self._digest = peptides
            logger.debug("Contaminant digest: %d peptides from %d proteins",
                         len(peptides), len(self.contaminants))
        return self._digest

    def _flag(self, pep_ids, digest: set[str]) -> tuple[int, int]:
        total = contaminant = 0
        for pep_id in pep_ids:
            hit = pep_id.top_hit()
            if hit is None:
                continue
            is_contaminant = unmodified_sequence(hit.sequence) in digest
            hit.set_meta_value(CONTAMINANT_KEY, int(is_contaminant))
            total += 1
            contaminant += is_contaminant
        return total, contaminant

    def compute(self, feature_map: FeatureMap, contaminants: Sequence[FastaEntry] = None) -> ContaminantsSummary:
        if contaminants is not None:
            self.contaminants = list(contaminants)
            self._digest = None
        digest = self._digested()

        assigned_total = assigned_cont = 0
        total_intensity = contaminant_intensity = 0.0
        empty_features = 0
        for feature in feature_map.features:
            total_intensity += feature.intensity
            if not feature.peptide_identifications:
                empty_features += 1
                continue
            n, c = self._flag(feature.peptide_identifications, digest)
            assigned_total += n
            assigned_cont += c
            if c:
                contaminant_intensity += feature.intensity

        unassigned_total, unassigned_cont = self._flag(
            feature_map.unassigned_peptide_identifications, digest)

        def ratio(a, b):
            return a / b if b else 0.0

        summary = ContaminantsSummary(
            assigned=ratio(assigned_cont, assigned_total),
            unassigned=ratio(unassigned_cont, unassigned_total),
            all=ratio(assigned_cont + unassigned_cont, assigned_total + unassigned_total),
            intensity=ratio(contaminant_intensity, total_intensity),
            empty_features=empty_features,
        )
        self.results.append(summary)
        return summary

    def run(self, run_data: RunData):
        self.compute(run_data.feature_map)
        return None
