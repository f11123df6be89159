"""
Horizon picking - snap-to-peak picks and lateral auto-tracking.

Picks are made on a (processed) gather. A raw click position is snapped to
the sample of largest absolute amplitude within a small vertical window,
and the resulting HorizonPoint snapshots the amplitude at that sample.
"""
import logging
from typing import List, Optional

import numpy as np

from models.app_settings import get_settings
from models.horizon import Horizon, HorizonPoint
from models.seismic_data import SeismicData

logger = logging.getLogger(__name__)

DEFAULT_SNAP_RADIUS = 10
# Auto-tracking stops when the amplitude leaves this band relative to the previous pick
MIN_AMPLITUDE_RATIO = 0.1
MAX_AMPLITUDE_RATIO = 5.0


def find_local_peak(trace: np.ndarray, center: int, radius: int = DEFAULT_SNAP_RADIUS) -> int:
    """
    Index of maximum absolute amplitude within center +/- radius.

    The range is clamped to the trace. Ties resolve to the earliest index.

    Args:
        trace: 1D array of samples
        center: Starting sample index
        radius: Search half-width in samples

    Returns:
        Sample index of the peak; center itself if the clamped range is empty
    """
    trace = np.asarray(trace)
    start = max(0, center - radius)
    end = min(len(trace) - 1, center + radius)
    if end < start:
        return center
    # argmax returns the first occurrence of the maximum
    return start + int(np.argmax(np.abs(trace[start:end + 1])))


def pick_point(data: SeismicData, trace_index: int, sample_index: int,
               snap: bool = True, radius: int = DEFAULT_SNAP_RADIUS) -> HorizonPoint:
    """
    Build a pick on a trace, optionally snapped to the nearby peak.

    Raises:
        IndexError: If trace_index or the resulting sample is outside the gather
    """
    if not 0 <= trace_index < data.n_traces:
        raise IndexError(f"Trace index {trace_index} outside gather of {data.n_traces} traces")

    trace = data.traces[:, trace_index]
    if snap:
        sample_index = find_local_peak(trace, sample_index, radius)
    if not 0 <= sample_index < data.n_samples:
        raise IndexError(f"Sample index {sample_index} outside trace of {data.n_samples} samples")

    return HorizonPoint(
        trace_index=trace_index,
        sample_index=sample_index,
        time_ms=sample_index * data.sample_interval,
        amplitude=float(trace[sample_index]),
    )


def auto_track_horizon(seed: HorizonPoint, data: SeismicData,
                       search_window: int = 12, max_traces: int = 100) -> List[HorizonPoint]:
    """
    Follow a reflector left and right of a seed pick.

    Each neighbouring trace is snapped to the peak around the previous
    pick's sample. Tracking in a direction stops at the gather edge, after
    max_traces traces, or when the amplitude falls below 10% or rises above
    5x that of the previous pick.

    Args:
        seed: Starting pick
        data: Gather to track on
        search_window: Snap half-width in samples
        max_traces: Maximum number of traces tracked per direction

    Returns:
        Seed followed by the tracked picks (left side first)
    """
    points = [seed]
    for direction in (-1, 1):
        current_sample = seed.sample_index
        current_amp = abs(seed.amplitude)
        count = 0
        i = seed.trace_index + direction
        while 0 <= i < data.n_traces and count < max_traces:
            trace = data.traces[:, i]
            next_sample = find_local_peak(trace, current_sample, search_window)
            next_amp = abs(float(trace[next_sample]))

            if next_amp < current_amp * MIN_AMPLITUDE_RATIO or next_amp > current_amp * MAX_AMPLITUDE_RATIO:
                break

            points.append(HorizonPoint(
                trace_index=i,
                sample_index=next_sample,
                time_ms=next_sample * data.sample_interval,
                amplitude=float(trace[next_sample]),
            ))
            current_sample = next_sample
            current_amp = next_amp
            count += 1
            i += direction

    logger.debug(f"Auto-track from trace {seed.trace_index}: {len(points)} picks")
    return points


class HorizonPicker:
    """
    Interactive picking session on one gather.

    Snap radius and auto-tracking parameters come from AppSettings unless
    given explicitly.
    """

    def __init__(self, data: SeismicData, horizon: Optional[Horizon] = None,
                 snap_radius: int = None, auto_track: bool = None):
        settings = get_settings()
        self.data = data
        self.horizon = horizon if horizon is not None else Horizon()
        self.snap_radius = settings.get_snap_radius() if snap_radius is None else snap_radius
        self.auto_track = settings.get_auto_track_enabled() if auto_track is None else auto_track
        self.track_window = settings.get_auto_track_window()
        self.track_max_traces = settings.get_auto_track_max_traces()

    def set_data(self, data: SeismicData) -> None:
        """Pick on a different (e.g. re-processed) gather; existing picks are kept."""
        self.data = data

    def pick(self, trace_index: int, sample_index: int) -> List[HorizonPoint]:
        """
        Add a snapped pick to the active horizon.

        With auto-tracking on, the tracked neighbours are added as well.

        Returns:
            Points added or replaced
        """
        seed = pick_point(self.data, trace_index, sample_index, snap=True, radius=self.snap_radius)
        if self.auto_track:
            points = auto_track_horizon(seed, self.data, self.track_window, self.track_max_traces)
        else:
            points = [seed]

        for point in points:
            self.horizon.add_or_replace_point(point)
        return points

    def unpick(self, trace_index: int) -> bool:
        return self.horizon.remove_point(trace_index)
