"""Utilities package - helper functions and tools."""
from .sample_data import generate_synthetic_gather, generate_spike_gather
from .horizon_picker import HorizonPicker, find_local_peak, pick_point, auto_track_horizon
from .horizon_io import horizon_to_frame, export_horizon, load_horizon_csv, load_horizon_json
from .flow_io import save_flow, load_flow
from .seismic_io import read_gather_npz, write_gather_npz

__all__ = [
    'generate_synthetic_gather',
    'generate_spike_gather',
    'HorizonPicker',
    'find_local_peak',
    'pick_point',
    'auto_track_horizon',
    'horizon_to_frame',
    'export_horizon',
    'load_horizon_csv',
    'load_horizon_json',
    'save_flow',
    'load_flow',
    'read_gather_npz',
    'write_gather_npz',
]
