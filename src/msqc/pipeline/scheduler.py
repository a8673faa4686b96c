"""Requirement-gated selection of QC metrics."""

import logging
from typing import Iterable, Sequence

from msqc.metrics.base import QCMetric, Status

__all__ = ['MetricScheduler', 'is_runnable']

logger = logging.getLogger(__name__)


def is_runnable(metric: QCMetric, status: Status) -> bool:
    """True if ``status`` covers every input ``metric`` needs.

    Logs one warning per missing input otherwise.
    """
    required = metric.requires()
    if status.is_superset_of(required):
        return True
    for requirement in status.missing_from(required):
        logger.warning(
            "Metric '%s' cannot run because input data '%s' (%s) is missing!",
            metric.name, requirement.label, requirement.parameter,
        )
    return False


class MetricScheduler:
    """Decides once which metrics run, then hands them out per run.

    Runnability depends only on the input status, which is fixed before
    the first run, so skipped metrics are reported exactly once.

    Example usage::

        scheduler = MetricScheduler(metrics, registry.status)
        for i in range(registry.number_exps):
            for metric in scheduler.runnable:
                metric.run(run_data)
    """

    def __init__(self, metrics: Iterable[QCMetric], status: Status):
        self.metrics: list[QCMetric] = list(metrics)
        self.status = status
        self.runnable: list[QCMetric] = [m for m in self.metrics if is_runnable(m, status)]
        self.skipped: list[QCMetric] = [m for m in self.metrics if m not in self.runnable]

        logger.info("Metrics to run: %s",
                    ", ".join(m.name for m in self.runnable) or "none")

    def is_scheduled(self, metric_type: type) -> bool:
        return any(isinstance(m, metric_type) for m in self.runnable)

    def names(self) -> Sequence[str]:
        return [m.name for m in self.runnable]
