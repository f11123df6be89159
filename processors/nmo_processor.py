"""
NMO (Normal Moveout) Processor

Implements hyperbolic NMO correction with a constant velocity:
    t_nmo = sqrt(t0^2 + offset^2 / velocity^2)

with t0 = s * sample_interval (ms). The offset term is added exactly as
written, so offsets and velocities must be given in the units the time
axis expects.

Features:
- Linear interpolation between the two samples bracketing t_nmo
- Stretch mute: samples with t_nmo / t0 - 1 > stretch_limit are zeroed
- Samples whose corrected time falls past the trace end are zeroed

Usage:
    from processors.nmo_processor import NMOProcessor, NMOConfig

    processor = NMOProcessor(NMOConfig(velocity=2150.0, stretch_limit=0.7))
    corrected = processor.process(gather)
"""

import numpy as np
from dataclasses import dataclass
from typing import Union
import logging

from models.seismic_data import SeismicData
from processors.base_processor import BaseProcessor

logger = logging.getLogger(__name__)

DEFAULT_STRETCH_LIMIT = 0.7


def compute_nmo_time(
    t0: np.ndarray,
    offset: float,
    velocity: Union[float, np.ndarray],
) -> np.ndarray:
    """
    Compute NMO time for given t0, offset, and velocity.

    t_nmo = sqrt(t0^2 + (offset/v)^2)

    Args:
        t0: Zero-offset times
        offset: Source-receiver offset
        velocity: Velocity, scalar or array matching t0

    Returns:
        NMO times
    """
    t0 = np.asarray(t0, dtype=np.float64)
    return np.sqrt(t0 ** 2 + (offset * offset) / (np.asarray(velocity, dtype=np.float64) ** 2))


def compute_stretch_factor(
    t0: np.ndarray,
    offset: float,
    velocity: Union[float, np.ndarray],
) -> np.ndarray:
    """
    Compute NMO stretch factor.

    stretch = t_nmo / t0 - 1 (0 at t0 = 0)

    Args:
        t0: Zero-offset times
        offset: Source-receiver offset
        velocity: Velocity

    Returns:
        Stretch array
    """
    t0 = np.asarray(t0, dtype=np.float64)
    t_nmo = compute_nmo_time(t0, offset, velocity)

    with np.errstate(invalid='ignore', divide='ignore'):
        stretch = np.where(t0 > 0, t_nmo / np.where(t0 > 0, t0, 1.0) - 1.0, 0.0)

    return stretch


def apply_nmo(
    trace: np.ndarray,
    offset: float,
    velocity: float,
    sample_interval: float,
    stretch_limit: float = DEFAULT_STRETCH_LIMIT,
) -> np.ndarray:
    """
    Apply NMO correction to a single trace.

    Args:
        trace: 1D array of samples
        offset: Source-receiver offset
        velocity: NMO velocity (> 0)
        sample_interval: Sample interval in milliseconds
        stretch_limit: Maximum allowed relative stretch before muting

    Returns:
        NMO-corrected trace (zero where muted or out of range)
    """
    trace = np.asarray(trace, dtype=np.float64)
    n = len(trace)
    if offset == 0:
        # t_nmo == t0 everywhere and nothing stretches
        return trace.copy()

    t0 = np.arange(n) * sample_interval
    t_nmo = compute_nmo_time(t0, offset, velocity)
    stretch = compute_stretch_factor(t0, offset, velocity)
    muted = (t0 > 0) & (stretch > stretch_limit)

    s_nmo = t_nmo / sample_interval
    s_floor = np.floor(s_nmo).astype(np.int64)
    frac = s_nmo - s_floor
    s_ceil = s_floor + 1

    valid = (s_ceil < n) & ~muted

    out = np.zeros(n, dtype=np.float64)
    lower = s_floor[valid]
    upper = s_ceil[valid]
    w = frac[valid]
    out[valid] = (1.0 - w) * trace[lower] + w * trace[upper]
    return out


def apply_nmo_gather(
    traces: np.ndarray,
    offsets: np.ndarray,
    velocity: float,
    sample_interval: float,
    stretch_limit: float = DEFAULT_STRETCH_LIMIT,
) -> np.ndarray:
    """
    Apply NMO to every trace of a gather.

    Args:
        traces: 2D array (n_samples, n_traces)
        offsets: 1D array of offsets (n_traces,)
        velocity: NMO velocity
        sample_interval: Sample interval in milliseconds
        stretch_limit: Stretch mute limit

    Returns:
        NMO-corrected traces (n_samples, n_traces)
    """
    traces = np.asarray(traces, dtype=np.float64)
    corrected = np.zeros_like(traces)
    for i in range(traces.shape[1]):
        corrected[:, i] = apply_nmo(
            traces[:, i], float(offsets[i]), velocity, sample_interval, stretch_limit
        )
    return corrected


@dataclass(frozen=True)
class NMOConfig:
    """
    Configuration for NMO correction.

    Attributes:
        velocity: Constant NMO velocity
        stretch_limit: Samples with t_nmo/t0 - 1 above this are muted
    """
    velocity: float = 2150.0
    stretch_limit: float = DEFAULT_STRETCH_LIMIT

    def __post_init__(self):
        if self.velocity <= 0:
            raise ValueError(f"velocity must be > 0, got {self.velocity}")
        if self.stretch_limit < 0:
            raise ValueError(f"stretch_limit must be >= 0, got {self.stretch_limit}")


class NMOProcessor(BaseProcessor):
    """
    Normal Moveout (NMO) correction processor.

    Uses the offset header of every trace and a single velocity.

    Example:
        >>> nmo = NMOProcessor(velocity=2000.0, stretch_limit=0.7)
        >>> corrected = nmo.process(gather)
    """

    config_class = NMOConfig

    def get_description(self) -> str:
        """Get human-readable description."""
        return (f"NMO Correction (v={self.config.velocity:.0f}, "
                f"stretch_limit={self.config.stretch_limit})")

    def process(self, data: SeismicData) -> SeismicData:
        """
        Process SeismicData by applying NMO correction.

        Args:
            data: Input SeismicData with offset headers

        Returns:
            NMO-corrected SeismicData
        """
        corrected = np.zeros_like(data.traces, dtype=np.float64)
        for i in range(data.n_traces):
            corrected[:, i] = apply_nmo(
                data.traces[:, i],
                float(data.offsets[i]),
                self.config.velocity,
                data.sample_interval,
                self.config.stretch_limit,
            )
            self._report_progress(i + 1, data.n_traces, "NMO correction")

        return data.with_traces(corrected, self.get_description())
