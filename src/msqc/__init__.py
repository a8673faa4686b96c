"""`msqc` - Quality control across mass-spectrometry runs.

Subpackages:
- ms: Data structures and file loading (consensus, features, spectra)
- metrics: Pluggable QC metrics with declared input requirements
- pipeline: Scheduling, identity join, merge-back and mzTab report assembly
- schemas: Pydantic configuration (param < user < CLI)
- contracts: Fail-fast errors and exit codes
"""

__version__ = "0.1.0"
