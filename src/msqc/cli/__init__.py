"""Command-line interface modules for msqc pipeline execution.

This package contains the core execution logic; scripts/ are thin wrappers.
"""

from msqc.cli.run_qc import run_quality_control, main

__all__ = ['run_quality_control', 'main']
