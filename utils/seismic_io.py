"""
Gather storage as NumPy .npz archives.

Archive keys: traces (n_samples, n_traces), sample_interval, one array per
trace header (header_<name>) and a JSON string with name and metadata.
"""
import json
import logging
from pathlib import Path
from typing import Union

import numpy as np

from models.seismic_data import SeismicData

logger = logging.getLogger(__name__)

HEADER_PREFIX = 'header_'


def write_gather_npz(data: SeismicData, filepath: Union[str, Path]) -> Path:
    """Write a gather to a .npz file (suffix added when missing)."""
    filepath = Path(filepath)
    if not filepath.suffix:
        filepath = filepath.with_suffix('.npz')
    filepath.parent.mkdir(parents=True, exist_ok=True)

    save_dict = {
        'traces': data.traces,
        'sample_interval': np.float64(data.sample_interval),
        'info': json.dumps({'name': data.name, 'metadata': data.metadata}, default=str),
    }
    for key, values in data.headers.items():
        save_dict[HEADER_PREFIX + key] = values

    np.savez(filepath, **save_dict)
    logger.info(f"Wrote gather {data.name} ({data.n_traces} traces) to {filepath}")
    return filepath


def read_gather_npz(filepath: Union[str, Path]) -> SeismicData:
    """
    Read a gather written by write_gather_npz.

    Archives holding only a 'traces' array get a 2 ms interval and default
    headers.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the archive has no traces
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"Gather file not found: {filepath}")

    with np.load(filepath, allow_pickle=False) as npz:
        if 'traces' not in npz.files:
            raise ValueError(f"{filepath} does not contain a 'traces' array")

        traces = npz['traces']
        sample_interval = float(npz['sample_interval']) if 'sample_interval' in npz.files else 2.0
        headers = {
            key[len(HEADER_PREFIX):]: npz[key]
            for key in npz.files if key.startswith(HEADER_PREFIX)
        }
        info = json.loads(str(npz['info'])) if 'info' in npz.files else {}

    data = SeismicData(
        traces=traces,
        sample_interval=sample_interval,
        headers=headers,
        name=info.get('name', filepath.stem),
        metadata=info.get('metadata', {}),
    )
    logger.info(f"Read gather from {filepath}: {data}")
    return data
