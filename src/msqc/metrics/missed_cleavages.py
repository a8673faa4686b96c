"""Missed cleavages of the best hit of every identification."""

import logging
import re
from collections import Counter

from pyteomics import parser

from msqc.contracts.failure import ConfigurationError
from msqc.metrics.base import QCMetric, Requirement, RunData
from msqc.ms.structures import FeatureMap, unmodified_sequence

__all__ = ['MissedCleavages', 'cleavage_rule', 'count_missed_cleavages']

logger = logging.getLogger(__name__)

MISSED_CLEAVAGES_KEY = "missed_cleavages"


def cleavage_rule(enzyme: str) -> str:
    """Cleavage regex for an enzyme name (PSI-MS or ExPASy naming).

    Raises
    ------
    ConfigurationError
        If pyteomics does not know the enzyme.
    """
    if enzyme in parser.psims_rules:
        return parser.psims_rules[enzyme]
    key = enzyme.lower()
    if key in parser.expasy_rules:
        return parser.expasy_rules[key]
    raise ConfigurationError(
        f"unknown digestion enzyme '{enzyme}' in search parameters",
        parameter="in_postfdr",
    )


def count_missed_cleavages(sequence: str, rule: str) -> int:
    """Number of internal cleavage sites in ``sequence``.

    >>> count_missed_cleavages("PEPKTIDER", parser.expasy_rules["trypsin"])
    1
    """
    sequence = unmodified_sequence(sequence)
    return sum(1 for m in re.finditer(rule, sequence) if 0 < m.end() < len(sequence))


class MissedCleavages(QCMetric):
    """Counts missed cleavages per identification.

    Annotates the top hit of every identification with ``missed_cleavages``.
    The per-run result is a histogram ``{missed cleavages: number of IDs}``.
    """

    name = "MissedCleavages"
    required = (Requirement.POSTFDR_FEATURES,)

    def compute(self, feature_map: FeatureMap) -> dict[int, int]:
        enzyme = feature_map.search_parameters().digestion_enzyme
        rule = cleavage_rule(enzyme)

        counts = Counter()
        for pep_id in feature_map.iter_peptide_identifications():
            hit = pep_id.top_hit()
            if hit is None:
                continue
            missed = count_missed_cleavages(hit.sequence, rule)
            hit.set_meta_value(MISSED_CLEAVAGES_KEY, missed)
            counts[missed] += 1

        histogram = dict(sorted(counts.items()))
        self.results.append(histogram)
        logger.debug("MissedCleavages (%s): %s", enzyme, histogram)
        return histogram

    def run(self, run_data: RunData):
        self.compute(run_data.feature_map)
        return None
