"""
Unit tests for file I/O: horizons, flows, gathers and sample data.
"""
import json

import numpy as np
import pandas as pd
import pytest

from models.app_settings import get_settings
from models.horizon import Horizon, HorizonPoint
from processors.flow_runner import FlowRunner
from utils.flow_io import load_flow, save_flow
from utils.horizon_io import (
    export_horizon,
    horizon_to_frame,
    load_horizon_csv,
    load_horizon_json,
)
from utils.sample_data import generate_spike_gather, generate_synthetic_gather
from utils.seismic_io import read_gather_npz, write_gather_npz


@pytest.fixture
def horizon():
    return Horizon(name='Top_Chalk', points=[
        HorizonPoint(trace_index=0, sample_index=100, time_ms=200.0, amplitude=0.5),
        HorizonPoint(trace_index=2, sample_index=104, time_ms=208.0, amplitude=-0.1234567),
    ])


class TestHorizonExport:
    """csv / json / dat horizon files."""

    def test_frame_columns(self, horizon):
        frame = horizon_to_frame(horizon)

        assert list(frame.columns) == ['TraceIndex', 'SampleIndex', 'TimeMs', 'Amplitude']
        assert frame['TraceIndex'].tolist() == [0, 2]

    def test_frame_with_dataset_headers(self, horizon, synthetic_gather):
        frame = horizon_to_frame(horizon, synthetic_gather)

        assert frame['ShotPoint'].tolist() == [1000, 1002]
        assert frame['Offset'].tolist() == [0.0, 50.0]

    def test_csv(self, horizon, tmp_path):
        path = export_horizon(horizon, tmp_path / 'top.csv')

        lines = path.read_text().splitlines()
        assert lines[0] == 'TraceIndex,SampleIndex,TimeMs,Amplitude'
        assert len(lines) == 3

        loaded = load_horizon_csv(path)
        assert loaded.name == 'top'
        assert loaded.points == horizon.points

    def test_dat(self, horizon, tmp_path):
        path = export_horizon(horizon, tmp_path / 'top.dat')

        assert path.read_text().splitlines() == [
            '0\t100\t200.00\t0.500000',
            '2\t104\t208.00\t-0.123457',
        ]

    def test_json(self, horizon, tmp_path):
        path = export_horizon(horizon, tmp_path, fmt='json')

        assert path.name == 'Top_Chalk.json'
        assert json.loads(path.read_text())['name'] == 'Top_Chalk'
        assert load_horizon_json(path) == horizon

    def test_unsupported_format(self, horizon, tmp_path):
        with pytest.raises(ValueError):
            export_horizon(horizon, tmp_path / 'top.xyz')

    def test_csv_missing_columns(self, tmp_path):
        path = tmp_path / 'bad.csv'
        pd.DataFrame({'TraceIndex': [0]}).to_csv(path, index=False)
        with pytest.raises(ValueError):
            load_horizon_csv(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_horizon_csv(tmp_path / 'none.csv')


class TestFlowIO:
    """Flow JSON persistence."""

    def test_round_trip(self, tmp_path):
        runner = FlowRunner()
        runner.add_module('bandpass', lowCut=8, highCut=70)
        runner.add_module('agc', window=300)
        path = save_flow(runner, tmp_path / 'flows' / 'basic.json')

        loaded = load_flow(path)
        assert [m.id for m in loaded.modules] == ['bandpass', 'agc']
        assert loaded.modules[1].params['window'].value == 300

    def test_recent_flows_updated(self, tmp_path):
        path = save_flow(FlowRunner(), tmp_path / 'empty.json')
        assert get_settings().get_recent_flows()[0] == str(path)

    def test_invalid_file(self, tmp_path):
        path = tmp_path / 'broken.json'
        path.write_text('{"flow": [{"name": "no id"}]}')
        with pytest.raises(ValueError):
            load_flow(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_flow(tmp_path / 'missing.json')


class TestGatherIO:
    """.npz gather archives."""

    def test_round_trip(self, synthetic_gather, tmp_path):
        path = write_gather_npz(synthetic_gather, tmp_path / 'gather')

        assert path.suffix == '.npz'
        loaded = read_gather_npz(path)
        np.testing.assert_array_equal(loaded.traces, synthetic_gather.traces)
        np.testing.assert_array_equal(loaded.offsets, synthetic_gather.offsets)
        assert loaded.sample_interval == synthetic_gather.sample_interval
        assert loaded.name == synthetic_gather.name

    def test_bare_traces_archive(self, tmp_path):
        path = tmp_path / 'bare.npz'
        np.savez(path, traces=np.ones((20, 3)))
        loaded = read_gather_npz(path)

        assert loaded.sample_interval == 2.0
        assert loaded.name == 'bare'

    def test_archive_without_traces(self, tmp_path):
        path = tmp_path / 'empty.npz'
        np.savez(path, other=np.ones(3))
        with pytest.raises(ValueError):
            read_gather_npz(path)


class TestSampleData:
    """Synthetic gathers."""

    def test_synthetic_gather_layout(self):
        data = generate_synthetic_gather()

        assert data.traces.shape == (500, 100)
        assert data.sample_interval == 2.0
        assert data.name == 'Demo_Line_001.segy'
        np.testing.assert_array_equal(data.offsets[:3], [0.0, 25.0, 50.0])
        np.testing.assert_array_equal(data.shot_points[:2], [1000, 1001])

    def test_reproducible(self):
        a = generate_synthetic_gather(n_traces=10, n_samples=200, seed=1)
        b = generate_synthetic_gather(n_traces=10, n_samples=200, seed=1)
        np.testing.assert_array_equal(a.traces, b.traces)

    def test_first_reflector_at_zero_offset(self):
        """The shallowest event peaks at its zero-offset sample on trace 0."""
        data = generate_synthetic_gather(n_traces=5, n_samples=300, noise_level=0.0)
        assert np.argmax(data.traces[80:120, 0]) + 80 == 100

    def test_spike_gather(self):
        data = generate_spike_gather(n_traces=4, spike_sample=50)

        assert np.count_nonzero(data.traces) == 4
        np.testing.assert_array_equal(data.traces[50], 1.0)
