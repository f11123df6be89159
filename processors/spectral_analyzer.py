"""
Spectral analyzer - average power spectrum of a gather for display.

Uses a direct 64-bin discrete Fourier transform over the first 256
samples of each sampled trace, taken at a stride of 2. Up to ~20 traces
are sampled at an even stride through the gather. The result is
normalized to the global maximum.
"""
import numpy as np
from typing import Optional, Tuple

from models.seismic_data import SeismicData

N_BINS = 64
MAX_SAMPLES = 256
SAMPLE_STRIDE = 2
TARGET_TRACES = 20


def _dft_basis(n_samples: int) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Sample indices and cosine/sine tables (N_BINS, n_used)."""
    t = np.arange(0, min(n_samples, MAX_SAMPLES), SAMPLE_STRIDE)
    f = np.arange(N_BINS)
    angle = 2 * np.pi * np.outer(f, t) / N_BINS
    return t, np.cos(angle), np.sin(angle)


def sampled_trace_indices(n_traces: int) -> np.ndarray:
    """Indices of the traces used for the average spectrum."""
    step = max(1, n_traces // TARGET_TRACES)
    return np.arange(0, n_traces, step)


def average_power_spectrum(traces: np.ndarray, scale: float = 1.0) -> np.ndarray:
    """
    Compute the normalized average amplitude spectrum.

    Args:
        traces: 2D array (n_samples, n_traces)
        scale: Value of the strongest bin (1.0 or 100.0 for percent)

    Returns:
        Spectrum (N_BINS,) in [0, scale]; empty when there are no traces.
        An all-zero gather returns all zeros.
    """
    traces = np.asarray(traces, dtype=np.float64)
    n_samples, n_traces = traces.shape
    if n_traces == 0:
        return np.zeros(0, dtype=np.float64)

    t, cos_table, sin_table = _dft_basis(n_samples)
    selected = traces[np.ix_(t, sampled_trace_indices(n_traces))]

    re = cos_table @ selected
    im = -(sin_table @ selected)
    spectrum = np.sqrt(re ** 2 + im ** 2).sum(axis=1)

    peak = spectrum.max()
    if peak == 0:
        peak = 1.0
    return spectrum / peak * scale


def spectrum_frequencies(sample_interval_ms: float) -> np.ndarray:
    """
    Frequency in Hz of each bin of average_power_spectrum.

    The basis phase advances by 2 pi f / N_BINS per input sample, so
    bin f sits at f / (N_BINS * dt). Bins above N_BINS / (2 * SAMPLE_STRIDE)
    alias because only every SAMPLE_STRIDE-th sample is read.
    """
    dt_s = sample_interval_ms / 1000.0
    return np.arange(N_BINS) / (N_BINS * dt_s)


class SpectralAnalyzer:
    """
    Computes the average spectrum of a gather.

    Attributes:
        scale: Value assigned to the strongest bin (100 = percent)
    """

    def __init__(self, scale: float = 1.0):
        """
        Initialize spectral analyzer.

        Args:
            scale: Normalization scale of the output
        """
        self.scale = scale

    def compute_average_spectrum(self, data: SeismicData) -> Tuple[np.ndarray, np.ndarray]:
        """
        Compute average amplitude spectrum across the gather.

        Args:
            data: Input gather

        Returns:
            Tuple of (frequencies, normalized_amplitudes); both empty for
            a gather without traces
        """
        amplitudes = average_power_spectrum(data.traces, self.scale)
        if amplitudes.size == 0:
            return np.zeros(0, dtype=np.float64), amplitudes
        return spectrum_frequencies(data.sample_interval), amplitudes

    def find_dominant_frequency(self, frequencies: np.ndarray,
                                amplitudes: np.ndarray,
                                freq_range: Tuple[float, float] = None) -> Optional[float]:
        """
        Find dominant (peak) frequency in spectrum.

        Args:
            frequencies: Frequency array
            amplitudes: Amplitude spectrum
            freq_range: Optional (min_freq, max_freq) to search within

        Returns:
            Dominant frequency in Hz, or None for an empty spectrum
        """
        # Apply frequency range filter if specified
        if freq_range is not None:
            min_freq, max_freq = freq_range
            mask = (frequencies >= min_freq) & (frequencies <= max_freq)
            search_freqs = frequencies[mask]
            search_amps = amplitudes[mask]
        else:
            search_freqs = frequencies
            search_amps = amplitudes

        if search_amps.size == 0:
            return None

        # Find peak
        peak_idx = np.argmax(search_amps)
        return float(search_freqs[peak_idx])
