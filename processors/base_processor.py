"""
Base processor class - abstract interface for all seismic processing operations.
This ensures all processors follow the same contract.

Every processor is configured by one typed, frozen config dataclass
(its `config_class`). Configs can be given as objects or plain dicts.
"""
from abc import ABC, abstractmethod
from dataclasses import asdict
from typing import Optional, Callable, Type

import numpy as np

from models.seismic_data import SeismicData

# Type alias for progress callbacks: (current, total, message) -> None
ProgressCallback = Callable[[int, int, str], None]


class BaseProcessor(ABC):
    """
    Abstract base class for all seismic processors.

    All processors must:
    1. Be immutable (don't modify input data)
    2. Return new SeismicData object
    3. Validate parameters in __init__
    4. Provide clear parameter description
    """

    # Typed config dataclass for this processor (set by subclasses)
    config_class: Type = None

    def __init__(self, config=None, **params):
        """
        Initialize processor with a config object, a config dict or keywords.

        Args:
            config: Instance of `config_class` or its dict form
            **params: Config fields, used when no config is given
        """
        if config is None:
            config = self.config_class(**params)
        elif isinstance(config, dict):
            config = self.config_class(**config)
        elif not isinstance(config, self.config_class):
            raise ValueError(
                f"{self.__class__.__name__} expects {self.config_class.__name__}, "
                f"got {type(config).__name__}"
            )

        self.config = config
        self.params = asdict(config)
        self._progress_callback: Optional[ProgressCallback] = None
        self._validate_params()

    def set_progress_callback(self, callback: Optional[ProgressCallback]) -> 'BaseProcessor':
        """
        Set progress callback for processing status updates.

        Args:
            callback: Function(current, total, message) to receive progress updates.
                     Set to None to disable progress reporting.

        Returns:
            self for method chaining
        """
        self._progress_callback = callback
        return self

    def _report_progress(self, current: int, total: int, message: str = ""):
        """
        Report progress to callback if set.

        Args:
            current: Current progress value (e.g., traces processed)
            total: Total items to process
            message: Optional status message
        """
        if self._progress_callback is not None:
            self._progress_callback(current, total, message)

    def _validate_params(self):
        """Validate processor parameters. Raise ValueError if invalid."""
        pass

    def _map_traces(self, traces: np.ndarray, func: Callable[[np.ndarray], np.ndarray]) -> np.ndarray:
        """
        Apply a per-trace function to every column of a gather.

        Args:
            traces: 2D array (n_samples, n_traces)
            func: Function taking one trace and returning a new trace

        Returns:
            New 2D array of the same shape
        """
        n_traces = traces.shape[1]
        result = np.empty_like(traces, dtype=np.float64)
        for i in range(n_traces):
            result[:, i] = func(traces[:, i])
            self._report_progress(i + 1, n_traces, f"{self.__class__.__name__}: trace {i + 1}/{n_traces}")
        return result

    @abstractmethod
    def process(self, data: SeismicData) -> SeismicData:
        """
        Process seismic data.

        Args:
            data: Input seismic data

        Returns:
            Processed seismic data (new object, input unchanged)
        """
        pass

    @abstractmethod
    def get_description(self) -> str:
        """Get human-readable description of this processor and its parameters."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.params})"
