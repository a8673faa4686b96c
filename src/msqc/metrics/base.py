"""Common interface of all QC metrics.

A metric declares which optional inputs it needs (``requires``) and is only
run when the pipeline's input ``Status`` covers them. Each metric has its own
``compute`` signature; ``run`` adapts the per-run input bundle to it so the
scheduler can treat all metrics alike.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Iterable, Iterator, Optional

from msqc.ms.spectra import MSExperiment, SpectraMap
from msqc.ms.structures import FeatureMap, PeptideIdentification
from msqc.ms.transformation import TransformationDescription

__all__ = ['Requirement', 'Status', 'RunData', 'QCMetric']


class Requirement(str, Enum):
    """Category of optional pipeline input."""
    RAW_MZML = "raw.mzML"
    POSTFDR_FEATURES = "postFDR.features"
    TRAFO_ALIGN = "trafoAlign.trafo"
    CONTAMINANTS = "contaminants.fasta"

    @property
    def label(self) -> str:
        return _REQUIREMENT_LABELS[self]

    @property
    def parameter(self) -> str:
        """Name of the input parameter supplying this requirement."""
        return _REQUIREMENT_PARAMETERS[self]


_REQUIREMENT_LABELS = {
    Requirement.RAW_MZML: "raw spectra",
    Requirement.POSTFDR_FEATURES: "post-FDR features",
    Requirement.TRAFO_ALIGN: "alignment transform",
    Requirement.CONTAMINANTS: "contaminant database",
}

_REQUIREMENT_PARAMETERS = {
    Requirement.RAW_MZML: "in_raw",
    Requirement.POSTFDR_FEATURES: "in_postfdr",
    Requirement.TRAFO_ALIGN: "in_trafo",
    Requirement.CONTAMINANTS: "in_contaminants",
}


class Status:
    """Set of requirements that are currently satisfied.

    >>> s = Status(Requirement.POSTFDR_FEATURES)
    >>> s.is_superset_of(Status())
    True
    >>> s.missing_from(Status(Requirement.RAW_MZML, Requirement.POSTFDR_FEATURES))
    [<Requirement.RAW_MZML: 'raw.mzML'>]
    """

    def __init__(self, *requirements: Requirement):
        self._requirements = set(requirements)

    def add(self, requirement: Requirement) -> "Status":
        self._requirements.add(requirement)
        return self

    def __or__(self, other: "Status | Requirement") -> "Status":
        result = Status(*self._requirements)
        if isinstance(other, Requirement):
            return result.add(other)
        result._requirements |= other._requirements
        return result

    def __ior__(self, other: "Status | Requirement") -> "Status":
        if isinstance(other, Requirement):
            return self.add(other)
        self._requirements |= other._requirements
        return self

    def is_superset_of(self, other: "Status") -> bool:
        return self._requirements >= other._requirements

    def missing_from(self, required: "Status") -> list[Requirement]:
        """Requirements in ``required`` that this status lacks, in enum order."""
        return [r for r in Requirement if r in required and r not in self]

    def __contains__(self, requirement: Requirement) -> bool:
        return requirement in self._requirements

    def __iter__(self) -> Iterator[Requirement]:
        return (r for r in Requirement if r in self._requirements)

    def __len__(self) -> int:
        return len(self._requirements)

    def __eq__(self, other) -> bool:
        return isinstance(other, Status) and self._requirements == other._requirements

    def __repr__(self) -> str:
        return f"Status({', '.join(r.name for r in self)})"


class RunData:
    """Inputs of one run, as handed to every metric.

    Inputs that were not supplied are empty (``MSExperiment()``,
    ``FeatureMap()``, identity transformation).
    """

    def __init__(self, index: int,
                 experiment: Optional[MSExperiment] = None,
                 feature_map: Optional[FeatureMap] = None,
                 transformation: Optional[TransformationDescription] = None):
        self.index = index
        self.experiment = experiment if experiment is not None else MSExperiment()
        self.spectra_map = SpectraMap(self.experiment)
        self.feature_map = feature_map if feature_map is not None else FeatureMap()
        self.transformation = transformation if transformation is not None else TransformationDescription()


class QCMetric(ABC):
    """Base class of a QC metric.

    Subclasses set ``name`` and ``required`` and implement ``compute`` and
    ``run``. Per-run results are appended to ``results`` (index = run).
    """

    name: str = ""
    required: Iterable[Requirement] = ()

    def __init__(self):
        self.results: list = []

    def requires(self) -> Status:
        return Status(*self.required)

    def get_results(self) -> list:
        return self.results

    @abstractmethod
    def run(self, run_data: RunData) -> Optional[list[PeptideIdentification]]:
        """Compute the metric for one run.

        Returns newly synthesized identifications, or None if the metric
        only annotates existing ones.
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
