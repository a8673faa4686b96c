"""Root-level pytest fixtures for the msqc test suite.

Provides shared configuration fixtures following the Pydantic-based
configuration layers. Tests use these fixtures instead of raw dict configs.
"""

import pytest
from pathlib import Path
import tempfile
import shutil

from msqc.ms.loader import MSDataLoader
from msqc.schemas import ParamConfig, UserConfig, resolve_config


# =============================================================================
# Configuration Fixtures (Pydantic-based)
# =============================================================================

@pytest.fixture
def param_config():
    """Expert configuration with all defaults.

    ``in_cm`` and ``out`` have no defaults; placeholders are set so that
    the config resolves. Tests that run the pipeline override them.
    """
    param = ParamConfig()
    param.inputs.in_cm = "input.consensus.json"
    param.outputs.out = "output.mzTab"
    return param


@pytest.fixture
def internal_config(param_config):
    """Fully validated runtime configuration (no overrides).

    Use this when tests don't care about specific config values and just
    need a valid InternalConfig to pass to constructors.
    """
    return resolve_config(param_config, None, None)


@pytest.fixture
def make_config(param_config):
    """Factory fixture for creating custom test configs.

    Returns a callable that accepts UserConfig-compatible kwargs.

    Examples
    --------
    >>> def test_ppm_unit(make_config):
    ...     config = make_config(fragment_mass_error_unit="PPM")
    ...     assert config.fragment_mass_error.unit == "ppm"
    """
    def _make(**user_overrides):
        """Create InternalConfig with user overrides."""
        if user_overrides:
            user = UserConfig(**user_overrides)
            return resolve_config(param_config, user, None)
        else:
            return resolve_config(param_config, None, None)

    return _make


# =============================================================================
# Directory Fixtures
# =============================================================================

@pytest.fixture
def temp_dir():
    """Temporary directory that is cleaned up after test."""
    d = tempfile.mkdtemp()
    yield Path(d)
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def loader():
    return MSDataLoader()
