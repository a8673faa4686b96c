"""Mass-spectrometry data structures and file loading.

- structures: Consensus/feature maps and identifications (pydantic)
- spectra: Raw spectra and native-ID lookup
- transformation: RT alignment transformations
- loader: JSON, mzML and FASTA I/O
"""

from msqc.ms.structures import (
    UNIQUE_ID_KEY,
    SOURCE_GROUP_KEY,
    UNASSIGNED_GROUP,
    PeptideHit,
    PeptideIdentification,
    ProteinIdentification,
    SearchParameters,
    ConsensusFeature,
    ConsensusMap,
    Feature,
    FeatureMap,
)
from msqc.ms.spectra import Spectrum, MSExperiment, SpectraMap
from msqc.ms.transformation import TransformationDescription
from msqc.ms.loader import MSDataLoader, FastaEntry

__all__ = [
    "UNIQUE_ID_KEY",
    "SOURCE_GROUP_KEY",
    "UNASSIGNED_GROUP",
    "PeptideHit",
    "PeptideIdentification",
    "ProteinIdentification",
    "SearchParameters",
    "ConsensusFeature",
    "ConsensusMap",
    "Feature",
    "FeatureMap",
    "Spectrum",
    "MSExperiment",
    "SpectraMap",
    "TransformationDescription",
    "MSDataLoader",
    "FastaEntry",
]
