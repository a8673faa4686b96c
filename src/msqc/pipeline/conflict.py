"""Resolution of competing identifications per consensus feature."""

import logging
from typing import Optional

from msqc.ms.structures import ConsensusMap, PeptideIdentification

__all__ = ['resolve_conflicts', 'best_identification']

logger = logging.getLogger(__name__)


def best_identification(pep_ids: list[PeptideIdentification]) -> Optional[PeptideIdentification]:
    """Identification whose top hit scores best.

    Direction follows each identification's ``higher_score_better``.
    Identifications without hits only win if no other has hits. Ties keep
    the earlier one.
    """
    best = None
    best_key = None
    for pep_id in pep_ids:
        hit = pep_id.top_hit()
        if hit is None:
            key = (0, 0.0)
        else:
            key = (1, hit.score if pep_id.higher_score_better else -hit.score)
        if best_key is None or key > best_key:
            best, best_key = pep_id, key
    return best


def resolve_conflicts(cmap: ConsensusMap) -> int:
    """Keep one identification per consensus feature.

    Returns
    -------
    int
        Number of identifications removed.
    """
    removed = 0
    for feature in cmap.features:
        if len(feature.peptide_identifications) < 2:
            continue
        best = best_identification(feature.peptide_identifications)
        removed += len(feature.peptide_identifications) - 1
        feature.peptide_identifications = [best]
    if removed:
        logger.info("Conflict resolution removed %d identifications", removed)
    return removed
