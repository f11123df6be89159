"""
Gain processor - time-variant (T-gain) amplitude compensation.

Multiplies sample i by (1 + 0.001 * i) ** exponent, a deterministic
scale that grows with time for positive exponents and does not depend
on the amplitudes themselves.
"""

from dataclasses import dataclass

import numpy as np

from processors.base_processor import BaseProcessor
from models.seismic_data import SeismicData

# Per-sample growth rate of the gain curve
TGAIN_RATE = 0.001


def tgain_curve(n_samples: int, exponent: float) -> np.ndarray:
    """Gain factor for each sample index."""
    return (1.0 + np.arange(n_samples) * TGAIN_RATE) ** exponent


def apply_tgain(trace: np.ndarray, exponent: float) -> np.ndarray:
    """
    Apply T-gain to a single trace.

    Args:
        trace: 1D array of samples
        exponent: Gain power

    Returns:
        New gained trace
    """
    trace = np.asarray(trace, dtype=np.float64)
    return trace * tgain_curve(len(trace), exponent)


@dataclass(frozen=True)
class TGainConfig:
    """
    Configuration for T-gain.

    Attributes:
        exponent: Gain power n in (1 + 0.001 i) ** n
    """
    exponent: float = 1.5


class TGainProcessor(BaseProcessor):
    """
    Applies time-variant gain to all traces.

    The gain curve is the same for every trace, so it is computed once
    and broadcast across the gather.
    """

    config_class = TGainConfig

    def process(self, data: SeismicData) -> SeismicData:
        """
        Apply T-gain to all traces.

        Args:
            data: Input seismic data

        Returns:
            Gain-adjusted seismic data
        """
        gain = tgain_curve(data.n_samples, self.config.exponent)
        gained_traces = data.traces * gain[:, np.newaxis]
        return data.with_traces(gained_traces, self.get_description())

    def get_description(self) -> str:
        """Get description of this processor."""
        return f"T-Gain: exponent {self.config.exponent}"
