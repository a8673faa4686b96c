"""QC metrics.

Every metric declares the inputs it requires; the pipeline runs it only
when they are available. ``METRIC_ORDER`` is the fixed invocation order,
which also fixes the order in which annotations are merged back.
"""

from msqc.metrics.base import QCMetric, Requirement, Status, RunData
from msqc.metrics.contaminants import Contaminants
from msqc.metrics.fragment_mass_error import FragmentMassError, ToleranceUnit
from msqc.metrics.missed_cleavages import MissedCleavages
from msqc.metrics.ms2_identification_rate import Ms2IdentificationRate
from msqc.metrics.mz_calibration import MzCalibration
from msqc.metrics.rt_alignment import RTAlignment
from msqc.metrics.tic import TIC
from msqc.metrics.top_n_over_rt import TopNoverRT

METRIC_ORDER = (
    Contaminants,
    FragmentMassError,
    MissedCleavages,
    Ms2IdentificationRate,
    MzCalibration,
    RTAlignment,
    TIC,
    TopNoverRT,
)

__all__ = [
    "QCMetric",
    "Requirement",
    "Status",
    "RunData",
    "Contaminants",
    "FragmentMassError",
    "ToleranceUnit",
    "MissedCleavages",
    "Ms2IdentificationRate",
    "MzCalibration",
    "RTAlignment",
    "TIC",
    "TopNoverRT",
    "METRIC_ORDER",
]
