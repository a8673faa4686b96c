"""Correlation of per-run records with the consensus map.

Two lookups connect the per-run world with the consensus map:

- ``IdentityJoinIndex``: persisted unique ID (``UID``) → identification
  inside the consensus map. Used to merge annotations computed on a
  feature map back into the consensus map.
- ``RunIdentifierMap``: run path signature (``primary_ms_run_path``) →
  protein identification identifier. Used to attribute identifications
  synthesized during a run to the right provenance group.

Both are built once, before any run is processed, and are read-only
afterwards.
"""

import logging
from typing import NamedTuple, Sequence

from msqc.contracts.base import require_input
from msqc.contracts.identification import assert_has_unique_id
from msqc.ms.structures import (
    SOURCE_GROUP_KEY,
    UNASSIGNED_GROUP,
    ConsensusMap,
    PeptideIdentification,
)

__all__ = ['IdHandle', 'IdentityJoinIndex', 'RunIdentifierMap']

logger = logging.getLogger(__name__)


class IdHandle(NamedTuple):
    """Position of an identification inside a consensus map.

    ``group`` is the consensus feature index or ``-1`` for the unassigned
    identifications; ``slot`` is the index within that group's list.
    """
    group: int
    slot: int


class IdentityJoinIndex:
    """Unique ID → identification of the consensus map.

    Stores handles rather than object references. Handles stay valid as
    long as identifications are only appended to the map, never removed
    or reordered; the pipeline resolves them before conflict resolution.

    Example usage::

        index = IdentityJoinIndex.build(cmap)
        pep_id = index.resolve("f3c9...")
    """

    def __init__(self, cmap: ConsensusMap):
        self.cmap = cmap
        self._handles: dict[str, IdHandle] = {}

    @classmethod
    def build(cls, cmap: ConsensusMap) -> "IdentityJoinIndex":
        """Index every identification of ``cmap``, including unassigned ones.

        Each identification is stamped with ``cf_id`` = its consensus
        feature index (``-1`` for unassigned).

        Raises
        ------
        ConfigurationError
            If an identification has no unique ID.
        """
        index = cls(cmap)
        for group, feature in enumerate(cmap.features):
            index._add_group(group, feature.peptide_identifications)
        index._add_group(UNASSIGNED_GROUP, cmap.unassigned_peptide_identifications)
        logger.info("Identity join index: %d identifications", len(index))
        return index

    def _add_group(self, group: int, pep_ids: Sequence[PeptideIdentification]) -> None:
        for slot, pep_id in enumerate(pep_ids):
            uid = assert_has_unique_id(pep_id, parameter="in_cm")
            pep_id.set_meta_value(SOURCE_GROUP_KEY, group)
            if uid in self._handles:
                logger.warning("Duplicate unique ID '%s' in consensus map; last occurrence wins", uid)
            self._handles[uid] = IdHandle(group, slot)

    def __len__(self) -> int:
        return len(self._handles)

    def __contains__(self, uid: str) -> bool:
        return uid in self._handles

    def handle(self, uid: str) -> IdHandle:
        """Handle of ``uid``.

        Raises
        ------
        ConfigurationError
            If the consensus map has no identification with this ID.
        """
        require_input(
            uid in self._handles,
            f"identification with unique ID '{uid}' not found in consensus map",
            parameter="in_cm",
        )
        return self._handles[uid]

    def resolve(self, uid: str) -> PeptideIdentification:
        group, slot = self.handle(uid)
        if group == UNASSIGNED_GROUP:
            return self.cmap.unassigned_peptide_identifications[slot]
        return self.cmap.features[group].peptide_identifications[slot]


class RunIdentifierMap:
    """Run path signature → protein identification identifier.

    Example usage::

        run_ids = RunIdentifierMap.build(cmap)
        identifier = run_ids.identifier_for(fmap.primary_ms_run_path)
    """

    def __init__(self):
        self._identifiers: dict[tuple[str, ...], str] = {}

    @classmethod
    def build(cls, cmap: ConsensusMap) -> "RunIdentifierMap":
        """Map every protein identification's run paths to its identifier.

        Raises
        ------
        ConfigurationError
            If two protein identifications share the same run paths.
        """
        mapping = cls()
        for prot_id in cmap.protein_identifications:
            key = tuple(prot_id.primary_ms_run_path)
            require_input(
                key not in mapping._identifiers,
                f"multiple protein identifications share the same MS run path {list(key)}. Check input!",
                parameter="in_cm",
            )
            mapping._identifiers[key] = prot_id.identifier
        return mapping

    def __len__(self) -> int:
        return len(self._identifiers)

    def identifier_for(self, run_paths: Sequence[str]) -> str:
        """Identifier of the protein identification built from ``run_paths``.

        Raises
        ------
        ConfigurationError
            If no protein identification has these run paths.
        """
        key = tuple(run_paths)
        require_input(
            key in self._identifiers,
            f"feature map (MS run {list(key)}) does not correspond to any consensus group; check input",
            parameter="in_postfdr",
        )
        return self._identifiers[key]

    def stamp(self, run_paths: Sequence[str], pep_ids: Sequence[PeptideIdentification]) -> None:
        """Set the identifier of every ID in ``pep_ids``.

        The lookup happens before any ID is touched, so a failed lookup
        leaves ``pep_ids`` unchanged.
        """
        identifier = self.identifier_for(run_paths)
        for pep_id in pep_ids:
            pep_id.identifier = identifier
