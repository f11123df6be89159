"""
Trace mixing processor - lateral running average across neighbouring traces.

Each output trace is the mean of the raw input traces in a centered
window of half-width floor(num_traces / 2). Windows shrink at the gather
edges and the divisor shrinks with them.
"""
from dataclasses import dataclass

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from models.seismic_data import SeismicData
from processors.base_processor import BaseProcessor


def apply_mixing(traces: np.ndarray, num_traces: int) -> np.ndarray:
    """
    Mix neighbouring traces.

    Args:
        traces: 2D array (n_samples, n_traces)
        num_traces: Mix span in traces (<= 1 disables mixing)

    Returns:
        New mixed 2D array (same shape)
    """
    traces = np.asarray(traces, dtype=np.float64)
    if num_traces <= 1 or traces.shape[1] == 0:
        return traces.copy()

    n_traces = traces.shape[1]
    half = int(num_traces) // 2

    # Every window reads raw input
    padded = np.pad(traces, ((0, 0), (half, half)))
    totals = sliding_window_view(padded, 2 * half + 1, axis=1).sum(axis=-1)
    idx = np.arange(n_traces)
    counts = (np.minimum(n_traces, idx + half + 1) - np.maximum(0, idx - half)).astype(np.float64)

    return totals / counts[np.newaxis, :]


@dataclass(frozen=True)
class MixingConfig:
    """
    Configuration for trace mixing.

    Attributes:
        num_traces: Mix span (number of traces in the window)
    """
    num_traces: int = 3

    def __post_init__(self):
        object.__setattr__(self, 'num_traces', int(self.num_traces))


class TraceMixer(BaseProcessor):
    """Lateral trace mixing across the whole gather."""

    config_class = MixingConfig

    def process(self, data: SeismicData) -> SeismicData:
        mixed = apply_mixing(data.traces, self.config.num_traces)
        return data.with_traces(mixed, self.get_description())

    def get_description(self) -> str:
        return f"Trace mixing: span {self.config.num_traces}"
