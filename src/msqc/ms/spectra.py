"""In-memory raw spectra of one run."""

from typing import Iterator, Optional

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator

from msqc.contracts.failure import ConfigurationError

__all__ = ['Spectrum', 'MSExperiment', 'SpectraMap']


class Spectrum(BaseModel):
    """A single centroided spectrum.

    Retention time is in seconds. ``precursor_mz``/``precursor_charge`` are
    only set for MSn spectra.
    """

    model_config = ConfigDict(extra='forbid', arbitrary_types_allowed=True)

    native_id: str
    ms_level: int = 1
    rt: float = 0.0
    mz: np.ndarray = Field(default_factory=lambda: np.empty(0))
    intensity: np.ndarray = Field(default_factory=lambda: np.empty(0))
    precursor_mz: Optional[float] = None
    precursor_charge: Optional[int] = None

    @field_validator("mz", "intensity", mode="before")
    @classmethod
    def coerce_array(cls, v):
        """Accept lists as well as arrays."""
        return np.asarray(v, dtype=float)

    def total_intensity(self) -> float:
        return float(self.intensity.sum())


class MSExperiment(BaseModel):
    """Ordered spectra of one LC-MS run."""

    model_config = ConfigDict(extra='forbid')

    spectra: list[Spectrum] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.spectra)

    def __iter__(self) -> Iterator[Spectrum]:
        return iter(self.spectra)

    def __getitem__(self, index: int) -> Spectrum:
        return self.spectra[index]


class SpectraMap:
    """Lookup from spectrum native ID to its index in an experiment."""

    def __init__(self, experiment: Optional[MSExperiment] = None):
        self._index: dict[str, int] = {}
        if experiment is not None:
            self.calculate_map(experiment)

    def calculate_map(self, experiment: MSExperiment) -> None:
        self._index = {spec.native_id: i for i, spec in enumerate(experiment)}

    def __contains__(self, native_id: str) -> bool:
        return native_id in self._index

    def __len__(self) -> int:
        return len(self._index)

    def at(self, native_id: str) -> int:
        """Index of ``native_id``.

        Raises
        ------
        ConfigurationError
            If the raw file has no such spectrum (feature map and raw file
            do not belong together).
        """
        try:
            return self._index[native_id]
        except KeyError:
            raise ConfigurationError(
                f"spectrum '{native_id}' referenced by an identification is not in the raw file",
                parameter="in_raw",
            ) from None
