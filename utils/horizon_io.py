"""
Horizon export/import.

Formats:
- csv:  header TraceIndex,SampleIndex,TimeMs,Amplitude (plus ShotPoint and
        Offset when the dataset is supplied)
- json: full horizon dictionary (id, name, color, points, isVisible)
- dat:  headerless, tab separated trace, sample, time (2 decimals),
        amplitude (6 decimals)
"""
import json
import logging
from pathlib import Path
from typing import Optional, Union

import pandas as pd

from models.horizon import Horizon, HorizonPoint
from models.seismic_data import SeismicData

logger = logging.getLogger(__name__)

HORIZON_FORMATS = ('csv', 'json', 'dat')
BASE_COLUMNS = ['TraceIndex', 'SampleIndex', 'TimeMs', 'Amplitude']


def horizon_to_frame(horizon: Horizon, data: Optional[SeismicData] = None) -> pd.DataFrame:
    """
    Horizon picks as a DataFrame, one row per pick in trace order.

    With a dataset, ShotPoint and Offset columns are looked up from its
    trace headers (NaN for picks outside the dataset).
    """
    frame = pd.DataFrame(
        [(p.trace_index, p.sample_index, p.time_ms, p.amplitude) for p in horizon.points],
        columns=BASE_COLUMNS,
    )
    frame = frame.astype({'TraceIndex': 'int64', 'SampleIndex': 'int64',
                          'TimeMs': 'float64', 'Amplitude': 'float64'})

    if data is not None:
        headers = data.headers_frame()
        frame['ShotPoint'] = frame['TraceIndex'].map(headers['shot_point'])
        frame['Offset'] = frame['TraceIndex'].map(headers['offset'])

    return frame


def export_horizon(
    horizon: Horizon,
    filepath: Union[str, Path],
    fmt: Optional[str] = None,
    data: Optional[SeismicData] = None,
) -> Path:
    """
    Write a horizon to disk.

    Args:
        horizon: Horizon to export
        filepath: Output path (or directory, then named after the horizon)
        fmt: 'csv', 'json' or 'dat'; taken from the file suffix when omitted
        data: Optional dataset adding ShotPoint/Offset columns to csv output

    Returns:
        Path written

    Raises:
        ValueError: If the format is not supported
    """
    filepath = Path(filepath)
    if fmt is None:
        fmt = filepath.suffix.lstrip('.').lower()
    if fmt not in HORIZON_FORMATS:
        raise ValueError(f"Unsupported horizon format '{fmt}'. Use one of {HORIZON_FORMATS}")

    if filepath.is_dir():
        filepath = filepath / f"{horizon.name}.{fmt}"
    filepath.parent.mkdir(parents=True, exist_ok=True)

    if fmt == 'json':
        with open(filepath, 'w') as f:
            json.dump(horizon.to_dict(), f, indent=2)
    elif fmt == 'csv':
        horizon_to_frame(horizon, data).to_csv(filepath, index=False)
    else:
        with open(filepath, 'w') as f:
            f.write('\n'.join(
                f"{p.trace_index}\t{p.sample_index}\t{p.time_ms:.2f}\t{p.amplitude:.6f}"
                for p in horizon.points
            ))

    logger.info(f"Exported horizon '{horizon.name}' ({len(horizon.points)} picks) to {filepath}")
    return filepath


def load_horizon_csv(filepath: Union[str, Path], name: Optional[str] = None) -> Horizon:
    """
    Read a horizon written by export_horizon in csv format.

    Extra columns (ShotPoint, Offset) are ignored.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If a required column is missing
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"Horizon file not found: {filepath}")

    frame = pd.read_csv(filepath)
    missing = [c for c in BASE_COLUMNS if c not in frame.columns]
    if missing:
        raise ValueError(f"Horizon file {filepath} is missing columns: {missing}")

    points = [
        HorizonPoint(
            trace_index=int(row.TraceIndex),
            sample_index=int(row.SampleIndex),
            time_ms=float(row.TimeMs),
            amplitude=float(row.Amplitude),
        )
        for row in frame.itertuples(index=False)
    ]
    horizon = Horizon(name=name or filepath.stem, points=points)
    logger.info(f"Loaded horizon '{horizon.name}' with {len(horizon)} picks from {filepath}")
    return horizon


def load_horizon_json(filepath: Union[str, Path]) -> Horizon:
    """Read a horizon written by export_horizon in json format."""
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"Horizon file not found: {filepath}")

    with open(filepath, 'r') as f:
        return Horizon.from_dict(json.load(f))
