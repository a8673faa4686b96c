"""Total ion current chromatogram of the MS1 spectra."""

from msqc.metrics.base import QCMetric, Requirement, RunData
from msqc.ms.spectra import MSExperiment

__all__ = ['TIC']


class TIC(QCMetric):
    """Summed intensity of every MS1 spectrum over retention time.

    The per-run result is a list of ``(rt, intensity)`` pairs in spectrum
    order. It is reported as ``TIC_<run>`` metadata in the mzTab output.
    """

    name = "TIC"
    required = (Requirement.RAW_MZML,)

    def compute(self, experiment: MSExperiment) -> list[tuple[float, float]]:
        curve = [(spec.rt, spec.total_intensity()) for spec in experiment if spec.ms_level == 1]
        self.results.append(curve)
        return curve

    def run(self, run_data: RunData):
        self.compute(run_data.experiment)
        return None
