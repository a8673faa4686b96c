#!/usr/bin/env python3
"""``msqc`` quality control pipeline runner.

Usage:
    python scripts/run_quality_control.py scripts/user_config.py
    python scripts/run_quality_control.py scripts/user_config.py --out qc.mzTab
    python scripts/run_quality_control.py --in-cm linked.consensus.json \
        --in-postfdr a.features.json b.features.json --out qc.mzTab

Note: User config in scripts/user_config.py, expert defaults in msqc.schemas.param
"""

import sys
from pathlib import Path

# Add src to path
project_root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(project_root / "src"))

from msqc.cli.run_qc import main


if __name__ == "__main__":
    sys.exit(main())
