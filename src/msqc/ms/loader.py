"""Read and write the files consumed and produced by the QC pipeline.

Formats
-------
- Consensus map / feature map: JSON documents validated by the pydantic
  models in ``msqc.ms.structures``
- Transformation description: JSON document (``msqc.ms.transformation``)
- Raw spectra: mzML, read with ``pyteomics.mzml``
- Contaminant database: FASTA, read with ``pyteomics.fasta``

Unlike metric failures, I/O failures are always fatal: missing files raise
``FileNotFoundError`` and unparsable JSON raises ``InputFileCorrupt``.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from lxml import etree
from pydantic import BaseModel, ValidationError
from pyteomics import fasta, mzml
from pyteomics.auxiliary import PyteomicsError

from msqc.contracts.failure import InputFileCorrupt
from msqc.ms.spectra import MSExperiment, Spectrum
from msqc.ms.structures import ConsensusMap, FeatureMap
from msqc.ms.transformation import TransformationDescription

__all__ = ['MSDataLoader', 'FastaEntry']

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class FastaEntry(BaseModel):
    identifier: str
    description: str = ""
    sequence: str


class MSDataLoader:
    """Load and store the pipeline's input and output files.

    Stateless; one instance can serve the whole run.

    Examples
    --------
    >>> loader = MSDataLoader()
    >>> cmap = loader.load_consensus("linked.consensus.json")
    >>> exp = loader.load_experiment("run1.mzML")
    """

    # ------------------------------------------------------------------
    # JSON documents
    # ------------------------------------------------------------------

    def _load_json(self, path: PathLike, model: type[BaseModel]):
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Input file not found: {path}")
        try:
            obj = model.model_validate_json(path.read_text())
        except ValidationError as exc:
            raise InputFileCorrupt(path, f"not a valid {model.__name__} document ({exc.error_count()} errors)") from exc
        logger.debug("Loaded %s from %s", model.__name__, path)
        return obj

    def _store_json(self, path: PathLike, obj: BaseModel) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(obj.model_dump_json(indent=2))
        logger.debug("Stored %s to %s", type(obj).__name__, path)
        return path

    def load_consensus(self, path: PathLike) -> ConsensusMap:
        return self._load_json(path, ConsensusMap)

    def store_consensus(self, path: PathLike, cmap: ConsensusMap) -> Path:
        return self._store_json(path, cmap)

    def load_features(self, path: PathLike) -> FeatureMap:
        return self._load_json(path, FeatureMap)

    def store_features(self, path: PathLike, fmap: FeatureMap) -> Path:
        return self._store_json(path, fmap)

    def load_transformation(self, path: PathLike) -> TransformationDescription:
        return self._load_json(path, TransformationDescription)

    # ------------------------------------------------------------------
    # mzML / FASTA
    # ------------------------------------------------------------------

    def load_experiment(self, path: PathLike) -> MSExperiment:
        """Read all spectra of an mzML file.

        Retention times are converted to seconds. Precursor m/z and charge
        are taken from the first selected ion of the first precursor.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Input file not found: {path}")

        spectra = []
        try:
            with mzml.read(str(path)) as reader:
                for spec in reader:
                    spectra.append(self._to_spectrum(spec))
        except (PyteomicsError, etree.XMLSyntaxError) as exc:
            raise InputFileCorrupt(path, f"not a readable mzML file ({exc})") from exc

        logger.debug("Loaded %d spectra from %s", len(spectra), path)
        return MSExperiment(spectra=spectra)

    @staticmethod
    def _to_spectrum(spec: dict) -> Spectrum:
        rt = 0.0
        scans = spec.get("scanList", {}).get("scan", [])
        if scans and "scan start time" in scans[0]:
            start = scans[0]["scan start time"]
            rt = float(start)
            if getattr(start, "unit_info", None) == "minute":
                rt *= 60.0

        precursor_mz: Optional[float] = None
        precursor_charge: Optional[int] = None
        precursors = spec.get("precursorList", {}).get("precursor", [])
        if precursors:
            ions = precursors[0].get("selectedIonList", {}).get("selectedIon", [])
            if ions:
                if "selected ion m/z" in ions[0]:
                    precursor_mz = float(ions[0]["selected ion m/z"])
                if "charge state" in ions[0]:
                    precursor_charge = int(ions[0]["charge state"])

        return Spectrum(
            native_id=spec["id"],
            ms_level=int(spec.get("ms level", 1)),
            rt=rt,
            mz=spec.get("m/z array", []),
            intensity=spec.get("intensity array", []),
            precursor_mz=precursor_mz,
            precursor_charge=precursor_charge,
        )

    def load_fasta(self, path: PathLike) -> list[FastaEntry]:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Input file not found: {path}")

        entries = []
        with fasta.read(str(path)) as reader:
            for description, sequence in reader:
                identifier, _, rest = description.partition(" ")
                entries.append(FastaEntry(identifier=identifier, description=rest, sequence=sequence))

        logger.info("Loaded %d contaminant entries from %s", len(entries), path)
        return entries
