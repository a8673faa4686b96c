"""Retention times of identifications before and after alignment."""

from msqc.metrics.base import QCMetric, Requirement, RunData
from msqc.ms.structures import FeatureMap
from msqc.ms.transformation import TransformationDescription

__all__ = ['RTAlignment']


class RTAlignment(QCMetric):
    """Annotates every identification with ``rt_raw`` and ``rt_align``.

    ``rt_align`` is the identification's retention time mapped through the
    run's alignment transformation. The per-run result is the number of
    annotated identifications.
    """

    name = "RTAlignment"
    required = (Requirement.POSTFDR_FEATURES, Requirement.TRAFO_ALIGN)

    def compute(self, feature_map: FeatureMap, transformation: TransformationDescription) -> int:
        annotated = 0
        for pep_id in feature_map.iter_peptide_identifications():
            if pep_id.rt is None:
                continue
            pep_id.set_meta_value("rt_raw", pep_id.rt)
            pep_id.set_meta_value("rt_align", transformation.apply(pep_id.rt))
            annotated += 1
        self.results.append(annotated)
        return annotated

    def run(self, run_data: RunData):
        self.compute(run_data.feature_map, run_data.transformation)
        return None
