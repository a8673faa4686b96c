"""mzTab report of the annotated consensus map.

The report has three parts:

- MTD: metadata lines, including the ``custom`` parameters carrying
  per-run summaries (TIC curves, MS2 identification rates)
- PEP: one row per consensus feature
- PSM: one row per identification, hit-less ones included, with an
  ``opt_global_<key>`` column for every meta value found on an
  identification or its best hit. A key present on both is written
  once, with the best hit's value.

PEP and PSM sections are built as pandas DataFrames and written tab
separated; missing values are written as ``null``.
"""

import logging
from pathlib import Path
from typing import Optional, Sequence, Union

import pandas as pd
from pydantic import BaseModel, Field

from msqc.ms.structures import ConsensusMap, PeptideIdentification
from msqc.pipeline.conflict import resolve_conflicts

__all__ = [
    'MzTabParameter',
    'MzTabMetaData',
    'MzTab',
    'MzTabFile',
    'ReportAssembler',
    'export_consensus_map_to_mztab',
    'NULL',
]

logger = logging.getLogger(__name__)

NULL = "null"

PEP_COLUMNS = [
    "sequence", "accession", "unique", "database", "database_version",
    "search_engine", "best_search_engine_score[1]", "modifications",
    "retention_time", "charge", "mass_to_charge",
]

PSM_COLUMNS = [
    "sequence", "PSM_ID", "accession", "unique", "database", "database_version",
    "search_engine", "search_engine_score[1]", "modifications",
    "retention_time", "charge", "exp_mass_to_charge", "calc_mass_to_charge",
    "spectra_ref", "pre", "post", "start", "end",
]


def format_cell(value) -> str:
    """mzTab representation of a single value.

    Tabs and line breaks would split the row; they become spaces.
    """
    if value is None:
        return NULL
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (list, tuple)):
        return ",".join(format_cell(v) for v in value) if value else NULL
    text = str(value).replace("\t", " ").replace("\n", " ")
    return text if text else NULL


class MzTabParameter(BaseModel):
    """``[cv_label, accession, name, value]`` parameter of the metadata."""
    cv_label: str = ""
    accession: str = ""
    name: str = ""
    value: str = ""

    def is_null(self) -> bool:
        return not (self.cv_label or self.accession or self.name or self.value)

    def to_cell_string(self) -> str:
        if self.is_null():
            return NULL
        return f"[{self.cv_label}, {self.accession}, {self.name}, {self.value}]"


class MzTabMetaData(BaseModel):
    mztab_version: str = "1.0.0"
    mztab_mode: str = "Summary"
    mztab_type: str = "Identification"
    description: str = ""
    ms_run_locations: dict[int, str] = Field(default_factory=dict)
    search_engines: dict[int, MzTabParameter] = Field(default_factory=dict)
    custom: dict[int, MzTabParameter] = Field(default_factory=dict)

    def lines(self) -> list[str]:
        rows = [
            ("mzTab-version", self.mztab_version),
            ("mzTab-mode", self.mztab_mode),
            ("mzTab-type", self.mztab_type),
            ("description", self.description or NULL),
        ]
        for index, location in sorted(self.ms_run_locations.items()):
            rows.append((f"ms_run[{index}]-location", location))
        for index, engine in sorted(self.search_engines.items()):
            rows.append((f"psm_search_engine_score[{index}]", engine.to_cell_string()))
        for key, param in sorted(self.custom.items()):
            rows.append((f"custom[{key}]", param.to_cell_string()))
        return [f"MTD\t{name}\t{value}" for name, value in rows]


class MzTab:
    """In-memory mzTab document."""

    def __init__(self, metadata: Optional[MzTabMetaData] = None,
                 peptide_section: Optional[pd.DataFrame] = None,
                 psm_section: Optional[pd.DataFrame] = None):
        self.metadata = metadata if metadata is not None else MzTabMetaData()
        self.peptide_section = peptide_section if peptide_section is not None else pd.DataFrame(columns=PEP_COLUMNS)
        self.psm_section = psm_section if psm_section is not None else pd.DataFrame(columns=PSM_COLUMNS)


class MzTabFile:
    """Writer of the tab separated mzTab format."""

    @staticmethod
    def _write_section(fh, df: pd.DataFrame, header_tag: str, row_tag: str) -> None:
        # mzTab has no quoting; cells are written verbatim
        fh.write("\t".join([header_tag, *map(str, df.columns)]) + "\n")
        for row in df.fillna(NULL).itertuples(index=False, name=None):
            fh.write("\t".join([row_tag, *map(str, row)]) + "\n")

    def store(self, path: Union[str, Path], mztab: MzTab) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", newline="") as fh:
            fh.write("\n".join(mztab.metadata.lines()) + "\n")
            fh.write("\n")
            self._write_section(fh, mztab.peptide_section, "PEH", "PEP")
            fh.write("\n")
            self._write_section(fh, mztab.psm_section, "PSH", "PSM")
        logger.info("mzTab written: %s (%d PEP, %d PSM rows)", path,
                    len(mztab.peptide_section), len(mztab.psm_section))
        return path


def _run_locations(cmap: ConsensusMap) -> list[list[str]]:
    """Run paths per protein identification, in consensus map order."""
    return [list(prot_id.primary_ms_run_path) for prot_id in cmap.protein_identifications]


def _psm_row(psm_id: int, pep_id: PeptideIdentification, engines: dict[str, str],
             run_index: dict[str, int]) -> dict[str, str]:
    """PSM row of one identification; top-hit meta overrides ID meta on shared keys."""
    hit = pep_id.top_hit()
    row = {
        "sequence": hit.sequence if hit else NULL,
        "PSM_ID": str(psm_id),
        "accession": format_cell(hit.protein_accessions[0]) if hit and hit.protein_accessions else NULL,
        "search_engine": engines.get(pep_id.identifier, NULL),
        "search_engine_score[1]": format_cell(hit.score) if hit else NULL,
        "retention_time": format_cell(pep_id.rt),
        "charge": format_cell(hit.charge) if hit else NULL,
        "exp_mass_to_charge": format_cell(pep_id.mz),
    }
    if pep_id.spectrum_reference and pep_id.identifier in run_index:
        row["spectra_ref"] = f"ms_run[{run_index[pep_id.identifier]}]:{pep_id.spectrum_reference}"

    for key in pep_id.meta_keys():
        row[f"opt_global_{key}"] = format_cell(pep_id.get_meta_value(key))
    if hit is not None:
        for key in hit.meta_keys():
            row[f"opt_global_{key}"] = format_cell(hit.get_meta_value(key))
    return row


def _pep_row(feature, engines: dict[str, str]) -> dict[str, str]:
    row = {
        "retention_time": format_cell(feature.rt),
        "charge": format_cell(feature.charge),
        "mass_to_charge": format_cell(feature.mz),
    }
    for pep_id in feature.peptide_identifications:
        hit = pep_id.top_hit()
        if hit is None:
            continue
        row["sequence"] = hit.sequence
        row["accession"] = format_cell(hit.protein_accessions[0]) if hit.protein_accessions else NULL
        row["search_engine"] = engines.get(pep_id.identifier, NULL)
        row["best_search_engine_score[1]"] = format_cell(hit.score)
        break
    return row


def _table(rows: list[dict[str, str]], columns: Sequence[str]) -> pd.DataFrame:
    opt_columns = sorted({key for row in rows for key in row if key not in columns})
    return pd.DataFrame(rows, columns=list(columns) + opt_columns, dtype=object)


def export_consensus_map_to_mztab(cmap: ConsensusMap, filename: str,
                                  description: str = "",
                                  export_empty_identifications: bool = True) -> MzTab:
    """Build the mzTab document of a consensus map.

    Parameters
    ----------
    cmap : ConsensusMap
        Map to export; expected to hold at most one identification per
        consensus feature.
    filename : str
        Source file of ``cmap``, recorded in the description when none is
        given.
    description : str, optional
        Free text of the ``description`` metadata line.
    export_empty_identifications : bool, optional
        Whether identifications without hits get a PSM row (default True).
    """
    metadata = MzTabMetaData(description=description or f"Export of {filename}")

    run_index: dict[str, int] = {}
    engines: dict[str, str] = {}
    for i, prot_id in enumerate(cmap.protein_identifications, start=1):
        run_index[prot_id.identifier] = i
        engine = MzTabParameter(name=prot_id.search_engine) if prot_id.search_engine else MzTabParameter()
        engines[prot_id.identifier] = engine.to_cell_string()
        metadata.ms_run_locations[i] = ",".join(f"file://{p}" for p in prot_id.primary_ms_run_path) or NULL
    if cmap.protein_identifications and cmap.protein_identifications[0].search_engine:
        metadata.search_engines[1] = MzTabParameter(
            name=f"{cmap.protein_identifications[0].search_engine} score")

    pep_rows = [_pep_row(feature, engines) for feature in cmap.features]

    psm_rows = []
    for _, pep_id in cmap.iter_peptide_identifications():
        if not pep_id.hits and not export_empty_identifications:
            continue
        psm_rows.append(_psm_row(len(psm_rows), pep_id, engines, run_index))

    mztab = MzTab(metadata, _table(pep_rows, PEP_COLUMNS), _table(psm_rows, PSM_COLUMNS))
    logger.debug("Exported consensus map: %d PEP, %d PSM rows", len(pep_rows), len(psm_rows))
    return mztab


def _next_custom_key(custom: dict[int, MzTabParameter]) -> int:
    key = len(custom)
    while key in custom:
        key += 1
    return key


class ReportAssembler:
    """Final assembly of the consensus map and its mzTab report.

    Example usage::

        assembler = ReportAssembler(config.report.description)
        assembler.finalize(cmap, staged_ids)
        mztab = assembler.export(cmap, config.inputs.in_cm)
        assembler.add_summary_rows(mztab, tic.get_results(), ms2ir.get_results())
        assembler.store(config.outputs.out, mztab)
    """

    def __init__(self, description: str = "", export_empty_identifications: bool = True):
        self.description = description
        self.export_empty_identifications = export_empty_identifications

    @staticmethod
    def finalize(cmap: ConsensusMap, staged: Sequence[PeptideIdentification]) -> ConsensusMap:
        """Resolve per-feature conflicts, then append the staged identifications.

        Must run after the last merge. Conflict resolution removes
        identifications, which invalidates the join index.
        """
        resolve_conflicts(cmap)
        cmap.unassigned_peptide_identifications.extend(staged)
        logger.info("Appended %d synthesized identifications", len(staged))
        return cmap

    def export(self, cmap: ConsensusMap, filename: str) -> MzTab:
        return export_consensus_map_to_mztab(cmap, filename, self.description,
                                             self.export_empty_identifications)

    @staticmethod
    def add_summary_rows(mztab: MzTab, tic_results: Sequence, ms2ir_results: Sequence) -> None:
        """Append one ``custom`` parameter per run and summary.

        Existing custom parameters are never overwritten.
        """
        custom = mztab.metadata.custom
        for i, curve in enumerate(tic_results):
            values = ", ".join(f"{float(rt)}, {float(intensity)}" for rt, intensity in curve)
            custom[_next_custom_key(custom)] = MzTabParameter(
                cv_label="total ion current",
                accession="MS:1000285",
                name=f"TIC_{i + 1}",
                value=f"[{values}]",
            )
        for i, rate in enumerate(ms2ir_results):
            custom[_next_custom_key(custom)] = MzTabParameter(
                cv_label="MS2 identification rate",
                accession="null",
                name=f"MS2_ID_Rate_{i + 1}",
                value=str(100 * rate.identification_rate),
            )

    @staticmethod
    def store(path: Union[str, Path], mztab: MzTab) -> Path:
        return MzTabFile().store(path, mztab)
