"""
Deconvolution Processor - fixed-coefficient predictive (first-difference) filter.

    out[0] = in[0]
    out[i] = in[i] - 0.9 * in[i - 1]

The operator length is part of the module parameters and is carried in
the config, but the filter does not use it: the prediction operator is a
fixed one-sample predictor. A Wiener-Levinson design sized by the
operator length would change the output of existing flows.
"""

import logging
from dataclasses import dataclass

import numpy as np
from scipy.signal import lfilter

from processors.base_processor import BaseProcessor
from models.seismic_data import SeismicData

logger = logging.getLogger(__name__)

# One-sample prediction coefficient
PREDICTION_COEFFICIENT = 0.9


def apply_decon(trace: np.ndarray, op_length: float = 120) -> np.ndarray:
    """
    Apply the fixed first-difference prediction-error filter.

    Args:
        trace: 1D array of samples
        op_length: Operator length (accepted, not used)

    Returns:
        New deconvolved trace
    """
    trace = np.asarray(trace, dtype=np.float64)
    if len(trace) == 0:
        return trace.copy()
    return lfilter([1.0, -PREDICTION_COEFFICIENT], [1.0], trace)


@dataclass(frozen=True)
class DeconConfig:
    """
    Configuration for deconvolution.

    Attributes:
        op_length: Operator length (kept for the module interface)
    """
    op_length: float = 120.0

    def __post_init__(self):
        if self.op_length <= 0:
            raise ValueError(f"op_length must be > 0, got {self.op_length}")


class DeconvolutionProcessor(BaseProcessor):
    """
    Predictive deconvolution with a fixed one-sample predictor.

    Example:
        >>> processor = DeconvolutionProcessor(op_length=120)
        >>> result = processor.process(data)
    """

    config_class = DeconConfig

    def process(self, data: SeismicData) -> SeismicData:
        """
        Apply deconvolution to seismic data.

        Args:
            data: Input SeismicData

        Returns:
            Deconvolved SeismicData
        """
        logger.debug(
            f"Decon: fixed predictor {PREDICTION_COEFFICIENT}, "
            f"op_length {self.config.op_length} not used"
        )
        traces = self._map_traces(data.traces, lambda t: apply_decon(t, self.config.op_length))
        return data.with_traces(traces, self.get_description())

    def get_description(self) -> str:
        """Get human-readable description."""
        return f"Spiking Decon: op_length={self.config.op_length:.0f} (fixed predictor)"
