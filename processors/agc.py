"""
AGC (Automatic Gain Control) Processor

Sliding-window RMS amplitude equalization.
The window shrinks at the trace ends: only samples inside the trace count.
"""
import logging
from dataclasses import dataclass

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from models.seismic_data import SeismicData
from processors.base_processor import BaseProcessor

logger = logging.getLogger(__name__)

# RMS below this is treated as a dead window and passed through
RMS_EPSILON = 1e-6


def apply_agc(trace: np.ndarray, window_samples: float) -> np.ndarray:
    """
    Apply AGC to a single trace.

    For each sample i the RMS is taken over [i - half, i + half), clamped to
    the trace, with half = floor(window_samples / 2). The sample is divided by
    2 * rms when rms > 1e-6, otherwise passed through unchanged.

    Args:
        trace: 1D array of samples
        window_samples: Window length in samples (may be fractional)

    Returns:
        New AGC-applied trace (same length as input)
    """
    trace = np.asarray(trace, dtype=np.float64)
    if window_samples <= 0:
        return trace.copy()

    n = len(trace)
    half = int(np.floor(window_samples / 2))
    if half == 0 or n == 0:
        # Empty window: rms is 0 everywhere
        return trace.copy()

    # Window i covers padded[i:i + 2 * half], i.e. trace[i - half:i + half]
    padded = np.pad(trace ** 2, half)
    energy = sliding_window_view(padded, 2 * half)[:n].sum(axis=1)

    idx = np.arange(n)
    count = np.minimum(n, idx + half) - np.maximum(0, idx - half)
    rms = np.sqrt(energy / count)

    out = trace.copy()
    live = rms > RMS_EPSILON
    out[live] = trace[live] / (rms[live] * 2.0)
    return out


def calculate_agc_window_samples(window_ms: float, sample_interval_ms: float) -> float:
    """
    Convert AGC window from milliseconds to samples.

    Args:
        window_ms: Window length in milliseconds
        sample_interval_ms: Sample interval in milliseconds

    Returns:
        Window length in samples (not rounded)
    """
    return window_ms / sample_interval_ms


@dataclass(frozen=True)
class AGCConfig:
    """
    Configuration for AGC.

    Attributes:
        window_ms: AGC window length in milliseconds (<= 0 disables AGC)
    """
    window_ms: float = 400.0


class AGCProcessor(BaseProcessor):
    """Automatic Gain Control applied trace by trace."""

    config_class = AGCConfig

    def process(self, data: SeismicData) -> SeismicData:
        """
        Apply AGC to every trace.

        Args:
            data: Input seismic data

        Returns:
            AGC-applied seismic data
        """
        window_samples = calculate_agc_window_samples(self.config.window_ms, data.sample_interval)
        logger.debug(f"AGC window {self.config.window_ms}ms = {window_samples:.2f} samples")

        traces = self._map_traces(data.traces, lambda t: apply_agc(t, window_samples))
        return data.with_traces(traces, self.get_description())

    def get_description(self) -> str:
        return f"AGC: window {self.config.window_ms}ms"
