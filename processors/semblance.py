"""
Semblance velocity analysis.

For every trial velocity the gather is NMO-corrected (stretch mute
effectively disabled) and a windowed semblance is computed per sample:

    num(s) = sum_{i=s-w}^{s+w} (sum_traces a_i)^2
    den(s) = sum_{i=s-w}^{s+w} n_traces * sum_traces a_i^2
    semblance(s) = num / den   (0 when den == 0)

Samples within `w` of either end are left at 0. Values near 1 mark
reflectors flattened by that velocity.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from models.app_settings import get_settings
from models.seismic_data import SeismicData
from processors.nmo_processor import apply_nmo_gather

logger = logging.getLogger(__name__)

# Stretch tolerance used during the scan (no practical muting)
SCAN_STRETCH_LIMIT = 10.0
DEFAULT_WINDOW = 15


def trial_velocities(v_min: float, v_max: float, v_step: float) -> np.ndarray:
    """
    Trial velocities v_min, v_min + v_step, ... up to and including v_max.

    Raises:
        ValueError: If v_step is not positive
    """
    if v_step <= 0:
        raise ValueError(f"Velocity step must be positive, got {v_step}")
    if v_max < v_min:
        return np.zeros(0, dtype=np.float64)

    velocities: List[float] = []
    v = float(v_min)
    while v <= v_max:
        velocities.append(v)
        v += v_step
    return np.asarray(velocities, dtype=np.float64)


def _windowed_sum(values: np.ndarray, window: int) -> np.ndarray:
    """Sum of values[s - window : s + window + 1] for every valid s."""
    return sliding_window_view(values, 2 * window + 1).sum(axis=1)


def compute_semblance(
    traces: np.ndarray,
    offsets: np.ndarray,
    sample_interval: float,
    v_min: float,
    v_max: float,
    v_step: float,
    window: int = DEFAULT_WINDOW,
) -> np.ndarray:
    """
    Compute the semblance grid of a gather.

    Args:
        traces: 2D array (n_samples, n_traces)
        offsets: 1D array of offsets (n_traces,)
        sample_interval: Sample interval in milliseconds
        v_min: First trial velocity
        v_max: Last trial velocity (inclusive)
        v_step: Velocity increment
        window: Half-width of the vertical smoothing window in samples

    Returns:
        2D array (n_velocities, n_samples); an empty (0, 0) array when the
        gather has no traces
    """
    traces = np.asarray(traces, dtype=np.float64)
    n_samples, n_traces = traces.shape
    if n_traces == 0:
        return np.zeros((0, 0), dtype=np.float64)

    velocities = trial_velocities(v_min, v_max, v_step)
    grid = np.zeros((len(velocities), n_samples), dtype=np.float64)
    if n_samples <= 2 * window:
        return grid

    for v_idx, velocity in enumerate(velocities):
        nmo = apply_nmo_gather(traces, offsets, velocity, sample_interval, SCAN_STRETCH_LIMIT)

        sum_amp = nmo.sum(axis=1)
        sum_sq = (nmo ** 2).sum(axis=1)

        num = _windowed_sum(sum_amp ** 2, window)
        den = _windowed_sum(n_traces * sum_sq, window)

        with np.errstate(invalid='ignore', divide='ignore'):
            values = np.where(den > 0, num / np.where(den > 0, den, 1.0), 0.0)

        # values[k] belongs to sample k + window
        grid[v_idx, window:n_samples - window] = values[:n_samples - 2 * window]

    return grid


@dataclass
class VelocitySpectrum:
    """
    Semblance grid with its velocity axis.

    Attributes:
        velocities: Trial velocities (n_velocities,)
        semblance: Grid (n_velocities, n_samples)
        sample_interval: Sample interval in milliseconds
    """
    velocities: np.ndarray
    semblance: np.ndarray
    sample_interval: float

    @property
    def is_empty(self) -> bool:
        return self.semblance.size == 0

    def clipped(self) -> np.ndarray:
        """Semblance clamped to [0, 1]."""
        return np.clip(self.semblance, 0.0, 1.0)

    def best_velocities(self) -> np.ndarray:
        """Velocity of maximum semblance for every sample."""
        if self.is_empty:
            return np.zeros(0, dtype=np.float64)
        return self.velocities[np.argmax(self.clipped(), axis=0)]

    def velocity_at_time(self, time_ms: float) -> Optional[float]:
        """Best velocity at a given time, or None outside the grid."""
        if self.is_empty:
            return None
        sample = int(round(time_ms / self.sample_interval))
        if sample < 0 or sample >= self.semblance.shape[1]:
            return None
        return float(self.best_velocities()[sample])


class SemblanceAnalyzer:
    """
    Velocity analysis on a gather.

    Scan parameters not given explicitly come from the application
    settings (see AppSettings.get_semblance_params).
    """

    def __init__(self, v_min: float = None, v_max: float = None,
                 v_step: float = None, window: int = None):
        defaults = get_settings().get_semblance_params()
        self.v_min = float(defaults['v_min'] if v_min is None else v_min)
        self.v_max = float(defaults['v_max'] if v_max is None else v_max)
        self.v_step = float(defaults['v_step'] if v_step is None else v_step)
        self.window = int(defaults['window'] if window is None else window)

        if self.v_step <= 0:
            raise ValueError(f"Velocity step must be positive, got {self.v_step}")
        if self.window < 0:
            raise ValueError(f"Window must be >= 0, got {self.window}")

    def analyze(self, data: SeismicData) -> VelocitySpectrum:
        """
        Compute the velocity spectrum of a gather.

        Args:
            data: Gather with offset headers

        Returns:
            VelocitySpectrum (empty when the gather has no traces)
        """
        logger.info(
            f"Semblance scan {self.v_min:.0f}-{self.v_max:.0f} step {self.v_step:.0f} "
            f"on {data.n_traces} traces"
        )
        grid = compute_semblance(
            data.traces, data.offsets, data.sample_interval,
            self.v_min, self.v_max, self.v_step, self.window,
        )
        if grid.size == 0:
            velocities = np.zeros(0, dtype=np.float64)
        else:
            velocities = trial_velocities(self.v_min, self.v_max, self.v_step)
        return VelocitySpectrum(velocities=velocities, semblance=grid,
                                sample_interval=data.sample_interval)
