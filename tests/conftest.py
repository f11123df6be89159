"""
Pytest configuration and fixtures for the processing tests.
"""
import numpy as np
import pytest
from pathlib import Path

# Add project root to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point AppSettings at a temporary directory for every test."""
    from models.app_settings import AppSettings

    settings_dir = tmp_path / "settings"
    monkeypatch.setenv(AppSettings.ENV_SETTINGS_DIR, str(settings_dir))
    AppSettings.reset_instance()
    yield settings_dir
    AppSettings.reset_instance()


@pytest.fixture
def synthetic_gather():
    """Small synthetic shot gather (40 traces x 300 samples, 2 ms)."""
    from utils.sample_data import generate_synthetic_gather

    return generate_synthetic_gather(n_traces=40, n_samples=300, seed=7)


@pytest.fixture
def flat_event_gather():
    """Three traces with an equal unit spike at sample 100, offsets 0/1000/2000."""
    from utils.sample_data import generate_spike_gather

    return generate_spike_gather(
        n_traces=3, n_samples=500, spike_sample=100, amplitude=1.0,
        offsets=[0.0, 1000.0, 2000.0], sample_interval=2.0,
    )


@pytest.fixture
def random_traces():
    """Random 2D trace array (n_samples, n_traces)."""
    rng = np.random.default_rng(42)
    return rng.standard_normal((256, 12))
