"""Pipeline modules.

- orchestrator: Main pipeline controller
- processor: Per-run loading and metric execution
- file_status: Input availability and per-run file list validation
- join_index: Unique ID and run path lookups into the consensus map
- scheduler: Requirement-gated metric selection
- merge: Copy of per-run annotations into the consensus map
- conflict: One identification per consensus feature
- report: mzTab assembly and writing
"""

from msqc.pipeline.orchestrator import QualityControlPipeline
from msqc.pipeline.processor import RunProcessor
from msqc.pipeline.file_status import RunInputRegistry
from msqc.pipeline.join_index import IdentityJoinIndex, RunIdentifierMap
from msqc.pipeline.scheduler import MetricScheduler
from msqc.pipeline.report import ReportAssembler

__all__ = [
    "QualityControlPipeline",
    "RunProcessor",
    "RunInputRegistry",
    "IdentityJoinIndex",
    "RunIdentifierMap",
    "MetricScheduler",
    "ReportAssembler",
]
