"""msqc User Configuration.

This is the user-facing configuration file. Modify settings here to customize
the pipeline behavior. Expert defaults are in msqc.schemas.param.

Every per-run list (IN_RAW, IN_POSTFDR, IN_TRAFO, OUT_FEAT) is either empty
or holds one file per run, in the same run order.

Usage:
    python scripts/run_quality_control.py scripts/user_config.py
    python scripts/run_quality_control.py scripts/user_config.py --force-no-fdr
"""

CONFIG = {
    # ========================================================================
    # INPUTS
    # ========================================================================
    "IN_CM": "data/linked.consensus.json",   # Consensus map (required)
    "IN_RAW": [                               # Raw spectra (mzML)
        "data/run1.mzML",
        "data/run2.mzML",
    ],
    "IN_POSTFDR": [                           # Post-FDR feature maps
        "data/run1.features.json",
        "data/run2.features.json",
    ],
    "IN_TRAFO": [],                           # Alignment transformations
    "IN_CONTAMINANTS": None,                  # Contaminant database (FASTA)

    # ========================================================================
    # OUTPUTS
    # ========================================================================
    "OUT": "results/qc.mzTab",                # mzTab report (required)
    "OUT_CM": "results/annotated.consensus.json",
    "OUT_FEAT": [],

    # ========================================================================
    # METRIC SETTINGS
    # ========================================================================
    "FRAGMENT_MASS_ERROR_UNIT": "auto",       # "auto", "ppm" or "Da"
    "FRAGMENT_MASS_ERROR_TOLERANCE": 20,
    "FORCE_NO_FDR": False,                    # MS2 ID rate without target/decoy

    # ========================================================================
    # LOGGING
    # ========================================================================
    "LOG_LEVEL": "INFO",
    "LOG_DIR": "results/logs",
}
