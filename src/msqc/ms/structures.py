"""Identification and map structures shared by all pipeline stages.

These pydantic models are the in-memory form of the consensus map and the
per-run feature maps. Both are stored on disk as JSON documents, so the
same models double as the file schema.

Meta values are an open ``dict`` on every record. QC metrics write their
annotations there and the merge-back step copies them into the consensus map.
"""

import re
from typing import Any, Iterator, Optional

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    'UNIQUE_ID_KEY',
    'SOURCE_GROUP_KEY',
    'UNASSIGNED_GROUP',
    'MetaInfoModel',
    'PeptideHit',
    'PeptideIdentification',
    'SearchParameters',
    'ProteinIdentification',
    'FeatureHandle',
    'ConsensusFeature',
    'ColumnHeader',
    'ConsensusMap',
    'Feature',
    'FeatureMap',
    'unmodified_sequence',
]

# Persisted per-identification key used to correlate feature maps with the
# consensus map (written upstream by PeptideIndexer -addUID).
UNIQUE_ID_KEY = "UID"
# Index of the consensus feature an identification belongs to.
SOURCE_GROUP_KEY = "cf_id"
UNASSIGNED_GROUP = -1

_MODIFICATION = re.compile(r"\([^)]*\)|\[[^\]]*\]")


def unmodified_sequence(sequence: str) -> str:
    """Strip modification annotations and terminal dots from a sequence.

    >>> unmodified_sequence(".PEPM(Oxidation)TIDEK.")
    'PEPMTIDEK'
    """
    return _MODIFICATION.sub("", sequence).replace(".", "").upper()


class MetaInfoModel(BaseModel):
    """Base for records carrying an open set of meta values."""

    model_config = ConfigDict(extra='forbid')

    meta: dict[str, Any] = Field(default_factory=dict)

    def meta_value_exists(self, key: str) -> bool:
        return key in self.meta

    def get_meta_value(self, key: str, default: Any = None) -> Any:
        return self.meta.get(key, default)

    def set_meta_value(self, key: str, value: Any) -> None:
        self.meta[key] = value

    def meta_keys(self) -> list[str]:
        return list(self.meta)


class PeptideHit(MetaInfoModel):
    """One ranked peptide hypothesis for a spectrum."""
    sequence: str
    score: float = 0.0
    rank: int = 1
    charge: int = 0
    protein_accessions: list[str] = Field(default_factory=list)


class PeptideIdentification(MetaInfoModel):
    """Search result for one spectrum: zero or more ranked hits."""
    identifier: str = ""
    rt: Optional[float] = None
    mz: Optional[float] = None
    spectrum_reference: Optional[str] = None
    score_type: str = ""
    higher_score_better: bool = True
    hits: list[PeptideHit] = Field(default_factory=list)

    def top_hit(self) -> Optional[PeptideHit]:
        return self.hits[0] if self.hits else None

    @property
    def unique_id(self) -> Optional[str]:
        value = self.meta.get(UNIQUE_ID_KEY)
        return None if value is None else str(value)


class SearchParameters(BaseModel):
    """Subset of database search settings used by QC metrics."""

    model_config = ConfigDict(extra='forbid')

    digestion_enzyme: str = "trypsin"
    missed_cleavages: int = 0
    fragment_mass_tolerance: float = 0.0
    fragment_mass_tolerance_ppm: bool = False


class ProteinIdentification(MetaInfoModel):
    """Provenance of one identification run.

    ``primary_ms_run_path`` lists the raw files this run was searched from;
    the ordered list is the run's signature inside a consensus map.
    """
    identifier: str
    search_engine: str = ""
    primary_ms_run_path: list[str] = Field(default_factory=list)
    search_parameters: SearchParameters = Field(default_factory=SearchParameters)


class FeatureHandle(BaseModel):
    """Reference from a consensus feature to the feature of one input map."""

    model_config = ConfigDict(extra='forbid')

    map_index: int
    rt: float = 0.0
    mz: float = 0.0
    intensity: float = 0.0


class ConsensusFeature(MetaInfoModel):
    rt: float = 0.0
    mz: float = 0.0
    intensity: float = 0.0
    charge: int = 0
    handles: list[FeatureHandle] = Field(default_factory=list)
    peptide_identifications: list[PeptideIdentification] = Field(default_factory=list)


class ColumnHeader(BaseModel):
    """Description of one input map (column) of a consensus map."""

    model_config = ConfigDict(extra='forbid')

    filename: str
    label: str = ""
    size: int = 0


class ConsensusMap(MetaInfoModel):
    """Cross-run aggregation of features and identifications."""
    features: list[ConsensusFeature] = Field(default_factory=list)
    unassigned_peptide_identifications: list[PeptideIdentification] = Field(default_factory=list)
    protein_identifications: list[ProteinIdentification] = Field(default_factory=list)
    column_headers: dict[int, ColumnHeader] = Field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.features)

    def iter_peptide_identifications(self) -> Iterator[tuple[int, PeptideIdentification]]:
        """Yield ``(group, identification)`` for every ID, unassigned last."""
        for group, feature in enumerate(self.features):
            for pep_id in feature.peptide_identifications:
                yield group, pep_id
        for pep_id in self.unassigned_peptide_identifications:
            yield UNASSIGNED_GROUP, pep_id


class Feature(MetaInfoModel):
    rt: float = 0.0
    mz: float = 0.0
    intensity: float = 0.0
    charge: int = 0
    peptide_identifications: list[PeptideIdentification] = Field(default_factory=list)


class FeatureMap(MetaInfoModel):
    """Features of a single run after FDR filtering."""
    features: list[Feature] = Field(default_factory=list)
    unassigned_peptide_identifications: list[PeptideIdentification] = Field(default_factory=list)
    protein_identifications: list[ProteinIdentification] = Field(default_factory=list)
    primary_ms_run_path: list[str] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.features)

    def iter_peptide_identifications(self) -> Iterator[PeptideIdentification]:
        """Yield assigned IDs feature by feature, then the unassigned ones."""
        for feature in self.features:
            yield from feature.peptide_identifications
        yield from self.unassigned_peptide_identifications

    def search_parameters(self) -> SearchParameters:
        if self.protein_identifications:
            return self.protein_identifications[0].search_parameters
        return SearchParameters()
