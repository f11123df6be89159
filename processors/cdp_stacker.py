"""
Velocity Stacker - NMO-correct a gather at one velocity and stack it

The stack is the sample-by-sample mean of all NMO-corrected traces.
The output keeps the gather width: every output trace carries the same
stacked trace, and headers are preserved, so downstream modules see a
gather of identical traces rather than a single-trace dataset.

Usage:
    from processors.cdp_stacker import VelocityStacker, StackConfig

    stacker = VelocityStacker(StackConfig(velocity=2150.0))
    stacked = stacker.process(gather)
"""

import numpy as np
from dataclasses import dataclass
import logging

from models.seismic_data import SeismicData
from processors.base_processor import BaseProcessor
from processors.nmo_processor import apply_nmo_gather, DEFAULT_STRETCH_LIMIT

logger = logging.getLogger(__name__)


def stack_gather(traces: np.ndarray) -> np.ndarray:
    """
    Mean stack of a gather.

    Args:
        traces: 2D array (n_samples, n_traces)

    Returns:
        Stacked trace (n_samples,); zeros for an empty gather
    """
    traces = np.asarray(traces, dtype=np.float64)
    if traces.shape[1] == 0:
        return np.zeros(traces.shape[0], dtype=np.float64)
    return traces.sum(axis=1) / traces.shape[1]


def velocity_stack(
    traces: np.ndarray,
    offsets: np.ndarray,
    velocity: float,
    sample_interval: float,
) -> np.ndarray:
    """
    NMO-correct all traces at one velocity and broadcast their mean.

    Args:
        traces: 2D array (n_samples, n_traces)
        offsets: 1D array of offsets (n_traces,)
        velocity: Trial stacking velocity
        sample_interval: Sample interval in milliseconds

    Returns:
        2D array (n_samples, n_traces) with the stack in every column
    """
    traces = np.asarray(traces, dtype=np.float64)
    if traces.shape[1] == 0:
        return traces.copy()

    nmo_traces = apply_nmo_gather(traces, offsets, velocity, sample_interval, DEFAULT_STRETCH_LIMIT)
    stacked = stack_gather(nmo_traces)
    return np.repeat(stacked[:, np.newaxis], traces.shape[1], axis=1)


@dataclass(frozen=True)
class StackConfig:
    """
    Configuration for velocity stacking.

    Attributes:
        velocity: Constant stacking velocity
    """
    velocity: float = 2150.0

    def __post_init__(self):
        if self.velocity <= 0:
            raise ValueError(f"velocity must be > 0, got {self.velocity}")


class VelocityStacker(BaseProcessor):
    """
    NMO + mean stack at a single velocity.

    Example:
        >>> stacker = VelocityStacker(velocity=2000.0)
        >>> result = stacker.process(gather)
        >>> np.allclose(result.traces[:, 0], result.traces[:, -1])
        True
    """

    config_class = StackConfig

    def get_description(self) -> str:
        """Get human-readable description."""
        return f"Velocity Stack (v={self.config.velocity:.0f})"

    def process(self, data: SeismicData) -> SeismicData:
        """
        Process SeismicData by stacking traces.

        Args:
            data: Input SeismicData

        Returns:
            SeismicData of the same width, every trace the stack
        """
        stacked = velocity_stack(data.traces, data.offsets, self.config.velocity, data.sample_interval)
        logger.debug(f"Stacked {data.n_traces} traces at v={self.config.velocity}")
        return data.with_traces(stacked, self.get_description())
