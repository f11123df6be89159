"""
Bandpass filter processor - 31-tap windowed-sinc FIR bandpass filter.

The kernel is the ideal bandpass impulse response tapered with a Hamming
window. Convolution is linear and zero-padded at the trace ends, and the
kernel is centered so the output is not time shifted.
"""
import logging
from dataclasses import dataclass

import numpy as np
from scipy import signal

from models.seismic_data import SeismicData
from processors.base_processor import BaseProcessor

logger = logging.getLogger(__name__)

N_TAPS = 31


def design_bandpass_kernel(low_cut_hz: float, high_cut_hz: float,
                           sample_rate_hz: float, n_taps: int = N_TAPS) -> np.ndarray:
    """
    Design the Hamming-windowed sinc bandpass kernel.

    Args:
        low_cut_hz: Low cut frequency in Hz
        high_cut_hz: High cut frequency in Hz
        sample_rate_hz: Sampling frequency in Hz
        n_taps: Number of taps (odd)

    Returns:
        Kernel coefficients (n_taps,)
    """
    mid = n_taps // 2
    f_low = low_cut_hz / sample_rate_hz
    f_high = high_cut_hz / sample_rate_hz

    n = np.arange(n_taps) - mid
    kernel = np.empty(n_taps, dtype=np.float64)
    nonzero = n != 0
    kernel[nonzero] = (
        np.sin(2 * np.pi * f_high * n[nonzero]) - np.sin(2 * np.pi * f_low * n[nonzero])
    ) / (np.pi * n[nonzero])
    kernel[~nonzero] = 2 * (f_high - f_low)

    # Symmetric Hamming: 0.54 - 0.46 cos(2 pi k / (N - 1))
    return kernel * signal.get_window('hamming', n_taps, fftbins=False)


def apply_bandpass(trace: np.ndarray, low_cut_hz: float, high_cut_hz: float,
                   sample_rate_hz: float) -> np.ndarray:
    """
    Apply the FIR bandpass to a single trace.

    Returns a copy of the trace when the pass band covers the whole
    spectrum (low cut <= 0 and high cut >= Nyquist).

    Args:
        trace: 1D array of samples
        low_cut_hz: Low cut frequency in Hz
        high_cut_hz: High cut frequency in Hz
        sample_rate_hz: Sampling frequency in Hz

    Returns:
        Filtered trace (same length as input)
    """
    trace = np.asarray(trace, dtype=np.float64)
    if low_cut_hz <= 0 and high_cut_hz >= sample_rate_hz / 2:
        return trace.copy()

    n = len(trace)
    if n == 0:
        return trace.copy()

    kernel = design_bandpass_kernel(low_cut_hz, high_cut_hz, sample_rate_hz)
    mid = len(kernel) // 2
    full = np.convolve(trace, kernel, mode='full')
    return full[mid:mid + n]


@dataclass(frozen=True)
class BandpassConfig:
    """
    Configuration for the FIR bandpass.

    Attributes:
        low_cut_hz: Low cut frequency in Hz
        high_cut_hz: High cut frequency in Hz (a cut below low_cut_hz
            gives the negated low-to-high band)
    """
    low_cut_hz: float = 10.0
    high_cut_hz: float = 65.0

    def __post_init__(self):
        if self.low_cut_hz < 0:
            raise ValueError(f"Low cut must be >= 0, got {self.low_cut_hz}")


class BandpassFilter(BaseProcessor):
    """
    Windowed-sinc FIR bandpass filter.

    The sample rate is taken from the dataset (1000 / sample_interval).
    """

    config_class = BandpassConfig

    def process(self, data: SeismicData) -> SeismicData:
        """
        Apply bandpass filter.

        Args:
            data: Input seismic data

        Returns:
            Filtered seismic data
        """
        fs = data.sample_rate_hz
        if self.config.high_cut_hz > data.nyquist_freq:
            logger.debug(
                f"High cut {self.config.high_cut_hz}Hz above Nyquist {data.nyquist_freq:.1f}Hz"
            )

        traces = self._map_traces(
            data.traces,
            lambda t: apply_bandpass(t, self.config.low_cut_hz, self.config.high_cut_hz, fs)
        )
        return data.with_traces(traces, self.get_description())

    def get_description(self) -> str:
        """Get description of this filter."""
        return (f"FIR bandpass: {self.config.low_cut_hz}-{self.config.high_cut_hz} Hz, "
                f"{N_TAPS} taps")
