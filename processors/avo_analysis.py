"""
AVO (Amplitude Variation with Offset) analysis on a picked horizon.

For every pick the owning trace's offset header and the pick's absolute
amplitude are collected, sorted by offset, normalized by the largest
absolute amplitude, and fitted with an ordinary least-squares line

    norm_amplitude = intercept + slope * offset
"""
import logging
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from models.horizon import Horizon
from models.seismic_data import SeismicData

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegressionResult:
    """Least-squares line with its coefficient of determination."""
    slope: float
    intercept: float
    r_squared: float

    def predict(self, x):
        return self.intercept + self.slope * np.asarray(x, dtype=np.float64)


@dataclass(frozen=True)
class AVOPoint:
    """
    One AVO sample.

    Attributes:
        trace_index: Trace carrying the pick
        offset: Offset header of that trace
        amplitude: Absolute pick amplitude
        norm_amplitude: amplitude / max amplitude over the horizon
    """
    trace_index: int
    offset: float
    amplitude: float
    norm_amplitude: float


@dataclass
class AVOResult:
    """AVO points sorted by offset and their regression line."""
    points: List[AVOPoint]
    regression: RegressionResult

    @property
    def offsets(self) -> np.ndarray:
        return np.array([p.offset for p in self.points], dtype=np.float64)

    @property
    def norm_amplitudes(self) -> np.ndarray:
        return np.array([p.norm_amplitude for p in self.points], dtype=np.float64)


def linear_regression(x: np.ndarray, y: np.ndarray) -> Optional[RegressionResult]:
    """
    Closed-form least-squares fit of y = intercept + slope * x.

    A degenerate x (all equal) gives slope 0. R^2 is 1 when y has no
    variance.

    Args:
        x: Independent variable
        y: Dependent variable

    Returns:
        RegressionResult, or None for fewer than 2 points
    """
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    n = len(x)
    if n < 2:
        return None

    x_mean = x.mean()
    y_mean = y.mean()
    dx = x - x_mean
    sxx = (dx * dx).sum()

    # Equal offsets (up to rounding) have no gradient
    if sxx <= np.finfo(np.float64).eps * (x * x).sum():
        slope = 0.0
    else:
        slope = (dx * (y - y_mean)).sum() / sxx
    intercept = y_mean - slope * x_mean

    residuals = y - (intercept + slope * x)
    ss_res = float((residuals ** 2).sum())
    ss_tot = float(((y - y_mean) ** 2).sum())
    r_squared = 1.0 if ss_tot == 0 else 1.0 - ss_res / ss_tot

    return RegressionResult(slope=float(slope), intercept=float(intercept), r_squared=r_squared)


def compute_avo_curve(data: Optional[SeismicData], horizon: Optional[Horizon]) -> Optional[AVOResult]:
    """
    Extract the AVO curve of a horizon and fit its gradient.

    Picks on trace indices outside the dataset are ignored.

    Args:
        data: Dataset providing the offset headers
        horizon: Picked horizon

    Returns:
        AVOResult, or None when fewer than 2 usable picks exist
    """
    if data is None or horizon is None or len(horizon.points) < 2:
        return None

    raw = []
    for point in horizon.points:
        if not 0 <= point.trace_index < data.n_traces:
            logger.debug(f"Pick on trace {point.trace_index} outside dataset, skipped")
            continue
        raw.append((float(data.offsets[point.trace_index]), abs(point.amplitude), point.trace_index))

    if len(raw) < 2:
        return None

    raw.sort(key=lambda item: item[0])
    max_amp = max(amp for _, amp, _ in raw) or 1.0

    points = [
        AVOPoint(trace_index=idx, offset=offset, amplitude=amp, norm_amplitude=amp / max_amp)
        for offset, amp, idx in raw
    ]
    regression = linear_regression(
        np.array([p.offset for p in points]),
        np.array([p.norm_amplitude for p in points]),
    )
    logger.debug(
        f"AVO on {horizon.name}: {len(points)} points, slope={regression.slope:.3g}, "
        f"intercept={regression.intercept:.3g}, R2={regression.r_squared:.3f}"
    )
    return AVOResult(points=points, regression=regression)
