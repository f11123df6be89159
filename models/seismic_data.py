"""
Seismic data model - container for a 2D trace gather and its headers.
Processing steps never modify a dataset; they build new ones.
"""
import numpy as np
import pandas as pd
from typing import Optional, Dict, Any, List, Sequence
from dataclasses import dataclass, field


# Trace header keys carried by every dataset
HEADER_KEYS = ('shot_point', 'offset', 'depth')


@dataclass
class SeismicData:
    """
    Container for one seismic gather.

    Processing never mutates a SeismicData in place; every processor
    returns a new object built with `with_traces()`.

    Attributes:
        traces: 2D array (n_samples, n_traces) of seismic amplitudes
        sample_interval: Sample interval in milliseconds (e.g., 2.0 for 2ms)
        headers: Per-trace header arrays ('shot_point', 'offset', 'depth')
        name: Dataset name (usually the source file name)
        metadata: Additional metadata (processing history, generator, etc.)
    """
    traces: np.ndarray
    sample_interval: float  # in milliseconds
    headers: Dict[str, np.ndarray] = field(default_factory=dict)
    name: str = 'Untitled'
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Validate data integrity."""
        traces = np.asarray(self.traces)
        if traces.ndim != 2:
            raise ValueError(f"Traces must be 2D array, got shape {traces.shape}")

        if self.sample_interval <= 0:
            raise ValueError(f"Sample interval must be positive, got {self.sample_interval}")

        # Ensure traces are float for processing
        if not np.issubdtype(traces.dtype, np.floating):
            traces = traces.astype(np.float64)
        object.__setattr__(self, 'traces', traces)

        n_traces = traces.shape[1]
        headers = {key: np.asarray(value) for key, value in (self.headers or {}).items()}
        if 'shot_point' not in headers:
            headers['shot_point'] = np.arange(n_traces, dtype=np.int64) + 1000
        if 'offset' not in headers:
            headers['offset'] = np.zeros(n_traces, dtype=np.float64)
        if 'depth' not in headers:
            headers['depth'] = np.zeros(n_traces, dtype=np.float64)

        for key, values in headers.items():
            if values.shape != (n_traces,):
                raise ValueError(
                    f"Header '{key}' has shape {values.shape}, expected ({n_traces},)"
                )
        if np.any(headers['offset'] < 0):
            raise ValueError("Offsets must be >= 0")

        object.__setattr__(self, 'headers', headers)

    @classmethod
    def from_trace_list(
        cls,
        traces: Sequence[Sequence[float]],
        sample_interval: float,
        offsets: Optional[Sequence[float]] = None,
        shot_points: Optional[Sequence[int]] = None,
        name: str = 'Untitled',
    ) -> 'SeismicData':
        """
        Build a dataset from a list of 1D traces.

        Raises:
            ValueError: If traces do not all share the same length
        """
        arrays: List[np.ndarray] = [np.asarray(t, dtype=np.float64) for t in traces]
        lengths = {len(a) for a in arrays}
        if len(lengths) > 1:
            raise ValueError(f"All traces must have the same number of samples, got {sorted(lengths)}")

        n_samples = lengths.pop() if lengths else 0
        if arrays:
            matrix = np.column_stack(arrays)
        else:
            matrix = np.zeros((n_samples, 0), dtype=np.float64)

        headers = {}
        if offsets is not None:
            headers['offset'] = np.asarray(offsets, dtype=np.float64)
        if shot_points is not None:
            headers['shot_point'] = np.asarray(shot_points, dtype=np.int64)

        return cls(traces=matrix, sample_interval=sample_interval, headers=headers, name=name)

    @property
    def n_samples(self) -> int:
        """Number of time samples."""
        return self.traces.shape[0]

    @property
    def n_traces(self) -> int:
        """Number of traces."""
        return self.traces.shape[1]

    @property
    def offsets(self) -> np.ndarray:
        """Source-receiver offsets in meters."""
        return self.headers['offset']

    @property
    def shot_points(self) -> np.ndarray:
        return self.headers['shot_point']

    @property
    def duration(self) -> float:
        """Total duration in milliseconds."""
        return (self.n_samples - 1) * self.sample_interval

    @property
    def sample_rate_hz(self) -> float:
        """Sampling frequency in Hz."""
        return 1000.0 / self.sample_interval

    @property
    def nyquist_freq(self) -> float:
        """Nyquist frequency in Hz."""
        return 1000.0 / (2.0 * self.sample_interval)

    def get_time_axis(self) -> np.ndarray:
        """Get time axis in milliseconds."""
        return np.arange(self.n_samples) * self.sample_interval

    def get_trace_axis(self) -> np.ndarray:
        """Get trace axis (trace numbers)."""
        return np.arange(self.n_traces)

    def trace(self, index: int) -> np.ndarray:
        """Return a copy of one trace's samples."""
        return self.traces[:, index].copy()

    def with_traces(self, traces: np.ndarray, description: Optional[str] = None) -> 'SeismicData':
        """
        Create a new dataset with replaced trace data and the same headers.

        Args:
            traces: New 2D array, must match the current shape
            description: Optional processing step appended to the history

        Returns:
            New SeismicData (this object is unchanged)
        """
        traces = np.asarray(traces)
        if traces.shape != self.traces.shape:
            raise ValueError(
                f"Replacement traces have shape {traces.shape}, expected {self.traces.shape}"
            )

        metadata = self.metadata.copy()
        history = list(metadata.get('processing_history', []))
        if description:
            history.append(description)
        metadata['processing_history'] = history

        return SeismicData(
            traces=traces,
            sample_interval=self.sample_interval,
            headers={key: value.copy() for key, value in self.headers.items()},
            name=self.name,
            metadata=metadata,
        )

    def headers_frame(self) -> pd.DataFrame:
        """Trace headers as a DataFrame indexed by trace number."""
        frame = pd.DataFrame({key: self.headers[key] for key in HEADER_KEYS})
        frame.index.name = 'trace_index'
        return frame

    def copy(self) -> 'SeismicData':
        """Create a deep copy of this data."""
        return SeismicData(
            traces=self.traces.copy(),
            sample_interval=self.sample_interval,
            headers={key: value.copy() for key, value in self.headers.items()},
            name=self.name,
            metadata=self.metadata.copy()
        )

    def __repr__(self) -> str:
        return (f"SeismicData(name={self.name!r}, n_samples={self.n_samples}, "
                f"n_traces={self.n_traces}, sample_interval={self.sample_interval}ms, "
                f"nyquist={self.nyquist_freq:.1f}Hz)")
