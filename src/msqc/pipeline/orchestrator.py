"""Single-pass quality control pipeline.

Validates the inputs, runs every applicable QC metric on each run, merges
the annotations back into the consensus map and writes the mzTab report.
"""

import logging
import time
from pathlib import Path
from typing import Optional, TYPE_CHECKING

from msqc.contracts import ExitCode
from msqc.metrics import (
    Contaminants,
    FragmentMassError,
    MissedCleavages,
    Ms2IdentificationRate,
    MzCalibration,
    RTAlignment,
    TIC,
    TopNoverRT,
)
from msqc.metrics.base import QCMetric, Requirement
from msqc.ms.loader import FastaEntry, MSDataLoader
from msqc.pipeline.file_status import RunInputRegistry
from msqc.pipeline.join_index import IdentityJoinIndex, RunIdentifierMap
from msqc.pipeline.merge import merge_feature_map
from msqc.pipeline.processor import RunProcessor
from msqc.pipeline.report import ReportAssembler
from msqc.pipeline.scheduler import MetricScheduler

if TYPE_CHECKING:
    from msqc.schemas import InternalConfig

__all__ = ['QualityControlPipeline']

logger = logging.getLogger(__name__)

LOG_FILENAME = "qc_pipeline.log"


class QualityControlPipeline:
    """Runs the complete quality control of one consensus map.

    This is the main entry point for running ``msqc``. All failures are
    raised as exceptions; mapping them to exit codes is left to the caller
    (``msqc.cli.run_qc``).

    **Stages:**

    1. **Input status**: per-run file lists (``in_raw``, ``in_postfdr``,
       ``in_trafo``) must be empty or of equal length. Every non-empty list
       marks its input as available.

    2. **Indexing**: the consensus map is loaded and two lookups are built,
       unique ID → identification and run paths → protein identifier.

    3. **Scheduling**: metrics whose inputs are missing are reported once
       and skipped for all runs.

    4. **Per run**: load, compute, store the annotated feature map (if
       ``out_feat`` given), merge annotations into the consensus map.

    5. **Report**: resolve conflicting identifications, append the
       synthesized ones, store the consensus map (if ``out_cm`` given),
       write the mzTab with TIC and MS2 identification rate summaries.

    **Logging:**

    Console, plus ``<log_dir>/qc_pipeline.log`` when ``logging.log_dir``
    is set. Level controlled via ``logging.level``.

    Example usage::

        from msqc.pipeline.orchestrator import QualityControlPipeline

        config = resolve_config(ParamConfig(), UserConfig(IN_CM="linked.consensus.json",
                                                          OUT="qc.mzTab"))
        code = QualityControlPipeline(config).run()
    """

    def __init__(self, config: "InternalConfig", loader: Optional[MSDataLoader] = None):
        """Initialize the pipeline.

        Parameters
        ----------
        config : InternalConfig
            Fully validated runtime configuration.
        loader : MSDataLoader, optional
            File reader/writer. A default instance is created if None.
        """
        self.config = config
        self.loader = loader if loader is not None else MSDataLoader()
        self.metrics: list[QCMetric] = []
        self._handlers: list[logging.Handler] = []
        self._root_level: Optional[int] = None

    def _setup_logging(self):
        """Configure console and file handlers on the root logger.

        Only handlers installed by an earlier call are replaced; handlers
        owned by the host application stay in place. The previous root
        level is restored by ``_teardown_logging``.
        """
        log_level = getattr(logging, self.config.logging.level.upper(), logging.INFO)

        formatter = logging.Formatter(
            fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        root = logging.getLogger()
        if self._root_level is None:
            self._root_level = root.level
        root.setLevel(log_level)
        for handler in self._handlers:
            root.removeHandler(handler)
            handler.close()
        self._handlers = []

        log_path = None
        if self.config.logging.log_dir:
            log_dir = Path(self.config.logging.log_dir)
            log_dir.mkdir(parents=True, exist_ok=True)
            log_path = log_dir / LOG_FILENAME

            fh = logging.FileHandler(log_path)
            fh.setLevel(log_level)
            fh.setFormatter(formatter)
            self._handlers.append(fh)

        ch = logging.StreamHandler()
        ch.setLevel(log_level)
        ch.setFormatter(formatter)
        self._handlers.append(ch)

        for handler in self._handlers:
            root.addHandler(handler)

        logger.info("Logging: level=%s, file=%s", logging.getLevelName(log_level), log_path or "none")

    def _teardown_logging(self):
        root = logging.getLogger()
        for handler in self._handlers:
            root.removeHandler(handler)
            handler.close()
        self._handlers = []
        if self._root_level is not None:
            root.setLevel(self._root_level)
            self._root_level = None

    def _create_metrics(self, contaminants: list[FastaEntry]) -> list[QCMetric]:
        """Instantiate all metrics in their fixed invocation order."""
        cfg = self.config
        return [
            Contaminants(contaminants, min_length=cfg.contaminants.min_peptide_length),
            FragmentMassError(cfg.fragment_mass_error.unit, cfg.fragment_mass_error.tolerance),
            MissedCleavages(),
            Ms2IdentificationRate(force_no_fdr=cfg.ms2_id_rate.force_no_fdr),
            MzCalibration(),
            RTAlignment(),
            TIC(),
            TopNoverRT(),
        ]

    def _metric(self, metric_type: type) -> QCMetric:
        return next(m for m in self.metrics if isinstance(m, metric_type))

    def run(self) -> ExitCode:
        """Run the pipeline once.

        Returns
        -------
        ExitCode
            ``EXECUTION_OK`` on success.

        Raises
        ------
        ConfigurationError
            Inconsistent inputs (file list lengths, unique IDs, run paths).
        FileNotFoundError
            A listed input file does not exist.
        InputFileCorrupt
            A JSON input cannot be validated.
        ContractViolation
            Internal pipeline error.
        """
        self._setup_logging()
        try:
            return self._run()
        finally:
            self._teardown_logging()

    def _run(self) -> ExitCode:
        inputs = self.config.inputs
        outputs = self.config.outputs
        start = time.time()

        logger.info("=" * 60)
        logger.info("Starting Quality Control Pipeline")
        logger.info("=" * 60)

        # Input status
        registry = RunInputRegistry()
        in_raw = registry.update_file_status("in_raw", inputs.in_raw, Requirement.RAW_MZML)
        in_postfdr = registry.update_file_status("in_postfdr", inputs.in_postfdr, Requirement.POSTFDR_FEATURES)
        in_trafo = registry.update_file_status("in_trafo", inputs.in_trafo, Requirement.TRAFO_ALIGN)
        out_feat = registry.check_output_files("out_feat", outputs.out_feat)

        contaminants = []
        if inputs.in_contaminants:
            contaminants = self.loader.load_fasta(inputs.in_contaminants)
        registry.note_availability(Requirement.CONTAMINANTS, bool(inputs.in_contaminants))
        logger.info("Runs: %d, available inputs: %s", registry.number_exps, registry.status)

        # Indexing
        cmap = self.loader.load_consensus(inputs.in_cm)
        join_index = IdentityJoinIndex.build(cmap)
        run_ids = RunIdentifierMap.build(cmap)

        # Scheduling
        self.metrics = self._create_metrics(contaminants)
        scheduler = MetricScheduler(self.metrics, registry.status)
        processor = RunProcessor(self.loader, run_ids)

        staged = []
        for i in range(registry.number_exps):
            logger.info("Processing run %d/%d", i + 1, registry.number_exps)
            run_data = processor.load_run(i, in_raw, in_postfdr, in_trafo)
            staged.extend(processor.process_run(run_data, scheduler.runnable))

            if out_feat:
                self.loader.store_features(out_feat[i], run_data.feature_map)
            merge_feature_map(run_data.feature_map, join_index)

        # Report
        assembler = ReportAssembler(self.config.report.description,
                                    self.config.report.export_empty_identifications)
        assembler.finalize(cmap, staged)
        if outputs.out_cm:
            self.loader.store_consensus(outputs.out_cm, cmap)
            logger.info("Consensus map written: %s", outputs.out_cm)

        mztab = assembler.export(cmap, inputs.in_cm)
        assembler.add_summary_rows(mztab,
                                   self._metric(TIC).get_results(),
                                   self._metric(Ms2IdentificationRate).get_results())
        assembler.store(outputs.out, mztab)

        logger.info("=" * 60)
        logger.info("Pipeline finished. Runtime: %.1f seconds", time.time() - start)
        logger.info("Runs: %d, metrics run: %s, synthesized IDs: %d",
                    registry.number_exps, ", ".join(scheduler.names()) or "none", len(staged))
        logger.info("=" * 60)
        return ExitCode.EXECUTION_OK
