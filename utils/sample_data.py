"""
Sample seismic data generator for testing and demos.
Creates a synthetic shot gather with hyperbolic reflections and noise.
"""
import numpy as np

from models.seismic_data import SeismicData

# Zero-offset reflector times (samples) and their moveout velocities
REFLECTOR_SAMPLES = (100, 220, 350, 420)
REFLECTOR_VELOCITIES = (1500.0, 1800.0, 2200.0, 2800.0)
OFFSET_SPACING = 25.0  # meters
WAVELET_HALF_LENGTH = 10


def ricker_like_wavelet(half_length: int = WAVELET_HALF_LENGTH, sharpness: float = 0.2) -> np.ndarray:
    """Symmetric Ricker-shaped wavelet sampled at -half_length..half_length."""
    j = np.arange(-half_length, half_length + 1)
    arg = (np.pi * j * sharpness) ** 2
    return (1.0 - 2.0 * arg) * np.exp(-arg)


def generate_synthetic_gather(
    n_traces: int = 100,
    n_samples: int = 500,
    sample_interval: float = 2.0,
    noise_level: float = 0.1,
    seed: int = 42,
) -> SeismicData:
    """
    Generate a synthetic common-shot gather.

    Each of four reflectors follows t = sqrt(t0^2 + x^2 / (v / 10)) in
    samples, with x = 25 m * trace index. A Ricker-like wavelet of random
    strength (0.5 to 0.7) is placed at each arrival, then uniform noise of
    total width noise_level is added.

    Args:
        n_traces: Number of traces
        n_samples: Number of time samples
        sample_interval: Sample interval in milliseconds
        noise_level: Peak-to-peak noise amplitude
        seed: Random seed for reproducibility

    Returns:
        SeismicData with offset, shot_point and depth headers
    """
    rng = np.random.default_rng(seed)
    traces = np.zeros((n_samples, n_traces), dtype=np.float64)
    offsets = np.arange(n_traces) * OFFSET_SPACING
    wavelet = ricker_like_wavelet()

    for i, offset in enumerate(offsets):
        for t0, velocity in zip(REFLECTOR_SAMPLES, REFLECTOR_VELOCITIES):
            target = int(round(np.sqrt(t0 * t0 + offset * offset / (velocity / 10.0))))
            if target >= n_samples:
                continue

            start = target - WAVELET_HALF_LENGTH
            lo = max(0, start)
            hi = min(n_samples, target + WAVELET_HALF_LENGTH + 1)
            strength = 0.5 + rng.random(hi - lo) * 0.2
            traces[lo:hi, i] += wavelet[lo - start:hi - start] * strength

    traces += (rng.random((n_samples, n_traces)) - 0.5) * noise_level

    return SeismicData(
        traces=traces,
        sample_interval=sample_interval,
        headers={
            'shot_point': np.arange(n_traces, dtype=np.int64) + 1000,
            'offset': offsets,
            'depth': np.zeros(n_traces),
        },
        name='Demo_Line_001.segy',
        metadata={'generator': 'synthetic_gather', 'seed': seed},
    )


def generate_spike_gather(
    n_traces: int = 3,
    n_samples: int = 500,
    spike_sample: int = 100,
    amplitude: float = 1.0,
    offsets=None,
    sample_interval: float = 2.0,
) -> SeismicData:
    """
    Gather with a single spike at the same sample on every trace.

    Useful for checking filters, moveout and amplitude analysis.
    """
    traces = np.zeros((n_samples, n_traces), dtype=np.float64)
    traces[spike_sample, :] = amplitude
    if offsets is None:
        offsets = np.arange(n_traces) * OFFSET_SPACING
    return SeismicData(
        traces=traces,
        sample_interval=sample_interval,
        headers={'offset': np.asarray(offsets, dtype=np.float64)},
        name='Spike_Gather',
    )
