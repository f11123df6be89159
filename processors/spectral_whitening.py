"""
Spectral whitening processor.

Time-domain balancing: each sample is normalized by the mean absolute
amplitude over a +/-50 sample window and scaled by 0.1.
"""
from dataclasses import dataclass

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from models.seismic_data import SeismicData
from processors.base_processor import BaseProcessor

WHITENING_WINDOW = 100
WHITENING_SCALE = 0.1
# Mean absolute amplitude below this passes the sample through
WHITENING_EPSILON = 0.001


def apply_whitening(trace: np.ndarray) -> np.ndarray:
    """
    Whiten a single trace.

    The window for sample i is [i - 50, i + 50), clamped to the trace.

    Args:
        trace: 1D array of samples

    Returns:
        New whitened trace
    """
    trace = np.asarray(trace, dtype=np.float64)
    n = len(trace)
    if n == 0:
        return trace.copy()
    half = WHITENING_WINDOW // 2

    padded = np.pad(np.abs(trace), half)
    total = sliding_window_view(padded, WHITENING_WINDOW)[:n].sum(axis=1)
    idx = np.arange(n)
    avg = total / (np.minimum(n, idx + half) - np.maximum(0, idx - half))

    out = trace.copy()
    live = avg > WHITENING_EPSILON
    out[live] = trace[live] / avg[live] * WHITENING_SCALE
    return out


@dataclass(frozen=True)
class WhiteningConfig:
    """Spectral whitening has no user parameters."""
    pass


class SpectralWhitening(BaseProcessor):
    """Applies spectral whitening trace by trace."""

    config_class = WhiteningConfig

    def process(self, data: SeismicData) -> SeismicData:
        traces = self._map_traces(data.traces, apply_whitening)
        return data.with_traces(traces, self.get_description())

    def get_description(self) -> str:
        return f"Spectral whitening: {WHITENING_WINDOW}-sample window"
