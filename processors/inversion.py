"""
Recursive inversion processor - reflectivity to acoustic impedance.

The trace is scaled to a reflectivity proxy r = (v / max|v|) * 0.15 and
integrated with the single-interface recursion

    Z[0]   = Z0
    Z[i+1] = Z[i] * (1 + r[i]) / max(0.001, 1 - r[i])
"""
import logging
from dataclasses import dataclass

import numpy as np

from models.seismic_data import SeismicData
from processors.base_processor import BaseProcessor

logger = logging.getLogger(__name__)

REFLECTIVITY_SCALE = 0.15
DENOMINATOR_FLOOR = 0.001


def recursive_inversion(trace: np.ndarray, initial_impedance: float,
                        recenter: bool = False) -> np.ndarray:
    """
    Convert one trace to an impedance trace.

    Args:
        trace: 1D array of samples (treated as reflectivity up to scale)
        initial_impedance: Impedance of the first sample
        recenter: Shift the result so its mean equals initial_impedance

    Returns:
        Impedance trace (same length as input)
    """
    trace = np.asarray(trace, dtype=np.float64)
    n = len(trace)
    if n == 0:
        return trace.copy()

    max_amp = np.max(np.abs(trace))
    if max_amp == 0:
        max_amp = 1.0
    r = trace / max_amp * REFLECTIVITY_SCALE

    ratios = (1.0 + r[:-1]) / np.maximum(DENOMINATOR_FLOOR, 1.0 - r[:-1])
    impedance = np.empty(n, dtype=np.float64)
    impedance[0] = initial_impedance
    impedance[1:] = initial_impedance * np.cumprod(ratios)

    if recenter:
        impedance = impedance - impedance.mean() + initial_impedance
    return impedance


@dataclass(frozen=True)
class InversionConfig:
    """
    Configuration for recursive inversion.

    Attributes:
        initial_impedance: Impedance at the first sample
        recenter: Recenter each impedance trace on initial_impedance
    """
    initial_impedance: float = 5000.0
    recenter: bool = True


class InversionProcessor(BaseProcessor):
    """Recursive trace-to-impedance inversion applied trace by trace."""

    config_class = InversionConfig

    def process(self, data: SeismicData) -> SeismicData:
        traces = self._map_traces(
            data.traces,
            lambda t: recursive_inversion(t, self.config.initial_impedance, self.config.recenter)
        )
        return data.with_traces(traces, self.get_description())

    def get_description(self) -> str:
        return f"Recursive inversion: Z0={self.config.initial_impedance:.0f}"
