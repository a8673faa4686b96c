"""Copy per-run annotations back into the consensus map.

Annotations are matched by unique ID. Only the identification's own meta
values and those of its best hit are merged; lower-ranked hits never are.
Copying is last-writer-wins, so merging the same input twice leaves the
consensus map unchanged after the first time.
"""

import logging
from typing import Iterable

from msqc.contracts.base import require_input
from msqc.contracts.identification import assert_has_unique_id
from msqc.ms.structures import FeatureMap, MetaInfoModel, PeptideIdentification
from msqc.pipeline.join_index import IdentityJoinIndex

__all__ = ['copy_meta_values', 'merge_annotations', 'merge_feature_map']

logger = logging.getLogger(__name__)


def copy_meta_values(source: MetaInfoModel, target: MetaInfoModel) -> None:
    for key in source.meta_keys():
        target.set_meta_value(key, source.get_meta_value(key))


def merge_annotations(transient_ids: Iterable[PeptideIdentification],
                      join_index: IdentityJoinIndex) -> int:
    """Merge meta values of ``transient_ids`` into their consensus counterparts.

    Identifications without hits are placeholders and are skipped.

    Returns
    -------
    int
        Number of identifications merged.

    Raises
    ------
    ConfigurationError
        If an identification has no unique ID or the ID is not part of the
        consensus map.
    """
    merged = 0
    for pep_id in transient_ids:
        if not pep_id.hits:
            continue
        uid = assert_has_unique_id(pep_id, parameter="in_postfdr")
        canonical = join_index.resolve(uid)
        require_input(
            bool(canonical.hits),
            f"consensus identification '{uid}' has no hits to merge into",
            parameter="in_cm",
        )

        copy_meta_values(pep_id, canonical)
        copy_meta_values(pep_id.hits[0], canonical.hits[0])
        merged += 1
    return merged


def merge_feature_map(feature_map: FeatureMap, join_index: IdentityJoinIndex) -> int:
    """Merge unassigned identifications first, then those of each feature."""
    merged = merge_annotations(feature_map.unassigned_peptide_identifications, join_index)
    for feature in feature_map.features:
        merged += merge_annotations(feature.peptide_identifications, join_index)
    logger.debug("Merged %d identifications into consensus map", merged)
    return merged
