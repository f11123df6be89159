"""
Processing flow persistence (JSON).

A saved flow is {"flow": [module, ...]} where each module is the
serialized ActiveModule (id, name, type, params, instanceId).
"""
import json
import logging
from pathlib import Path
from typing import Union

from models.app_settings import get_settings
from processors.flow_runner import FlowRunner

logger = logging.getLogger(__name__)


def save_flow(runner: FlowRunner, filepath: Union[str, Path], remember: bool = True) -> Path:
    """
    Write a flow to a JSON file.

    Args:
        runner: Flow to save
        filepath: Output path
        remember: Add the file to the recent flows list in AppSettings
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    with open(filepath, 'w') as f:
        json.dump(runner.to_dict(), f, indent=2)

    if remember:
        get_settings().add_recent_flow(str(filepath))
    logger.info(f"Saved flow with {len(runner)} modules to {filepath}")
    return filepath


def load_flow(filepath: Union[str, Path], remember: bool = True) -> FlowRunner:
    """
    Read a flow from a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not a valid flow
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"Flow file not found: {filepath}")

    try:
        with open(filepath, 'r') as f:
            data = json.load(f)
        if isinstance(data, list):
            data = {'flow': data}
        runner = FlowRunner.from_dict(data)
    except (json.JSONDecodeError, KeyError, TypeError, AttributeError) as e:
        raise ValueError(f"Invalid flow file {filepath}: {e}")

    if remember:
        get_settings().add_recent_flow(str(filepath))
    logger.info(f"Loaded flow with {len(runner)} modules from {filepath}")
    return runner
