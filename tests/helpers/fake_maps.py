"""Builders for small consensus maps, feature maps and experiments."""

from pathlib import Path
from typing import Iterable, Optional

from msqc.ms.loader import MSDataLoader
from msqc.ms.spectra import MSExperiment, Spectrum
from msqc.ms.structures import (
    UNIQUE_ID_KEY,
    ConsensusFeature,
    ConsensusMap,
    Feature,
    FeatureMap,
    PeptideHit,
    PeptideIdentification,
    ProteinIdentification,
    SearchParameters,
)


def make_hit(sequence="PEPTIDEK", score=0.01, charge=2, **meta):
    return PeptideHit(sequence=sequence, score=score, charge=charge, meta=dict(meta))


def make_pep_id(uid=None, sequence="PEPTIDEK", identifier="run_A", score=0.01,
                spectrum_reference=None, rt=100.0, mz=None, hits=None,
                higher_score_better=False, hit_meta=None, **meta):
    """Identification with one hit (or ``hits``) and optional ``UID``."""
    if uid is not None:
        meta[UNIQUE_ID_KEY] = uid
    if hits is None:
        hits = [make_hit(sequence, score=score, **(hit_meta or {}))]
    return PeptideIdentification(
        identifier=identifier,
        rt=rt,
        mz=mz,
        spectrum_reference=spectrum_reference,
        higher_score_better=higher_score_better,
        hits=hits,
        meta=meta,
    )


def make_protein_id(identifier="run_A", run_paths=("A.raw",), enzyme="trypsin",
                    fragment_tolerance=0.0, ppm=False):
    return ProteinIdentification(
        identifier=identifier,
        search_engine="Comet",
        primary_ms_run_path=list(run_paths),
        search_parameters=SearchParameters(
            digestion_enzyme=enzyme,
            fragment_mass_tolerance=fragment_tolerance,
            fragment_mass_tolerance_ppm=ppm,
        ),
    )


def make_consensus_map(groups: Iterable[Iterable[PeptideIdentification]] = (),
                       unassigned: Iterable[PeptideIdentification] = (),
                       runs: Optional[dict] = None) -> ConsensusMap:
    """Consensus map with one feature per entry of ``groups``.

    ``runs`` maps protein identifier to run paths
    (default: run_A → A.raw, run_B → B.raw).
    """
    if runs is None:
        runs = {"run_A": ["A.raw"], "run_B": ["B.raw"]}
    return ConsensusMap(
        features=[
            ConsensusFeature(rt=100.0 + i, mz=500.0 + i, charge=2, intensity=1e5,
                             peptide_identifications=list(ids))
            for i, ids in enumerate(groups)
        ],
        unassigned_peptide_identifications=list(unassigned),
        protein_identifications=[make_protein_id(k, v) for k, v in runs.items()],
    )


def make_feature_map(pep_ids: Iterable[PeptideIdentification] = (),
                     unassigned: Iterable[PeptideIdentification] = (),
                     run_paths=("A.raw",), identifier="run_A", **search) -> FeatureMap:
    """Feature map with one feature per identification in ``pep_ids``."""
    return FeatureMap(
        features=[Feature(rt=100.0, mz=500.0, intensity=1000.0, peptide_identifications=[p])
                  for p in pep_ids],
        unassigned_peptide_identifications=list(unassigned),
        protein_identifications=[make_protein_id(identifier, run_paths, **search)],
        primary_ms_run_path=list(run_paths),
    )


def make_spectrum(native_id, ms_level=1, rt=0.0, mz=(), intensity=(), precursor_mz=None):
    return Spectrum(native_id=native_id, ms_level=ms_level, rt=rt, mz=list(mz),
                    intensity=list(intensity), precursor_mz=precursor_mz,
                    precursor_charge=2 if ms_level == 2 else None)


def make_experiment():
    """MS1, MS2 (s2), MS2 (s3), MS1 at rt 10, 11, 12, 20 seconds."""
    return MSExperiment(spectra=[
        make_spectrum("s1", 1, 10.0, mz=(400.0, 500.0), intensity=(100.0, 200.0)),
        make_spectrum("s2", 2, 11.0, mz=(147.1128, 244.1656), intensity=(10.0, 20.0), precursor_mz=478.73),
        make_spectrum("s3", 2, 12.0, mz=(300.0,), intensity=(5.0,), precursor_mz=612.3),
        make_spectrum("s4", 1, 20.0, mz=(450.0,), intensity=(50.0,)),
    ])


def write_fasta(path: Path, entries) -> Path:
    """Write ``(identifier, sequence)`` pairs as FASTA."""
    path.write_text("".join(f">{ident} contaminant protein\n{seq}\n" for ident, seq in entries))
    return path


class InMemoryLoader(MSDataLoader):
    """Loader serving experiments from memory; JSON and FASTA still hit disk."""

    def __init__(self, experiments: Optional[dict] = None):
        self.experiments = dict(experiments or {})

    def load_experiment(self, path):
        if str(path) not in self.experiments:
            raise FileNotFoundError(f"Input file not found: {path}")
        return self.experiments[str(path)]
