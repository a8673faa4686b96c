"""Per-run processing: load inputs, run metrics, collect synthesized IDs."""

import logging
from pathlib import Path
from typing import Optional, Sequence

from msqc.contracts import assert_metric_output
from msqc.metrics.base import QCMetric, RunData
from msqc.ms.loader import MSDataLoader
from msqc.ms.structures import PeptideIdentification
from msqc.pipeline.join_index import RunIdentifierMap

__all__ = ['RunProcessor']

logger = logging.getLogger(__name__)


class RunProcessor:
    """Processes one run at a time through the scheduled metrics.

    **Per run, in order:**

    1. **Load**: mzML (if ``in_raw`` given), post-FDR feature map (if
       ``in_postfdr`` given) and alignment transformation (if ``in_trafo``
       given). Inputs not given are replaced by empty placeholders.

    2. **Compute**: every scheduled metric, in the fixed metric order.
       Metrics annotate the feature map in place.

    3. **Stage**: identifications synthesized by a metric are attributed
       to the run's protein identification (via ``RunIdentifierMap``) and
       returned. They are appended to the consensus map only after all
       runs are merged.

    Example usage (typically called by the pipeline)::

        processor = RunProcessor(loader, run_ids)
        run_data = processor.load_run(0, in_raw, in_postfdr, in_trafo)
        staged = processor.process_run(run_data, scheduler.runnable)
    """

    def __init__(self, loader: Optional[MSDataLoader] = None,
                 run_ids: Optional[RunIdentifierMap] = None):
        self.loader = loader if loader is not None else MSDataLoader()
        self.run_ids = run_ids if run_ids is not None else RunIdentifierMap()

    def load_run(self, index: int, in_raw: Sequence[str], in_postfdr: Sequence[str],
                 in_trafo: Sequence[str]) -> RunData:
        """Load the inputs of run ``index``; empty lists mean "not supplied"."""
        experiment = self.loader.load_experiment(in_raw[index]) if in_raw else None
        feature_map = self.loader.load_features(in_postfdr[index]) if in_postfdr else None
        transformation = self.loader.load_transformation(in_trafo[index]) if in_trafo else None

        names = [Path(files[index]).name for files in (in_raw, in_postfdr, in_trafo) if files]
        logger.info("Loaded run %d: %s", index + 1, ", ".join(names) or "no files")
        return RunData(index, experiment=experiment, feature_map=feature_map,
                       transformation=transformation)

    def process_run(self, run_data: RunData, metrics: Sequence[QCMetric]) -> list[PeptideIdentification]:
        """Run ``metrics`` on one run.

        Returns
        -------
        list of PeptideIdentification
            Identifications synthesized by the metrics, with their
            identifier set to the run's protein identification.

        Raises
        ------
        ConfigurationError
            If the feature map's run paths match no protein identification
            of the consensus map (only checked when IDs were synthesized).
        ContractViolation
            If a metric returns something other than None or a list of IDs.
        """
        staged = []
        for metric in metrics:
            new_ids = metric.run(run_data)
            assert_metric_output(metric.name, new_ids)
            if new_ids is None:
                logger.debug("%s done", metric.name)
                continue

            self.run_ids.stamp(run_data.feature_map.primary_ms_run_path, new_ids)
            staged.extend(new_ids)
            logger.debug("%s done, %d new identifications", metric.name, len(new_ids))
        return staged
