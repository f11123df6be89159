"""
Tests for the command line entry point.
"""
import numpy as np

import main
from processors.flow_runner import FlowRunner
from utils.flow_io import save_flow
from utils.seismic_io import read_gather_npz, write_gather_npz


class TestRunCommand:
    """`run` applies a flow and writes the result."""

    def test_default_modules_on_synthetic(self, tmp_path):
        output = tmp_path / 'out.npz'
        code = main.main(['run', '--traces', '8', '--samples', '120', '--output', str(output)])

        assert code == 0
        result = read_gather_npz(output)
        assert result.traces.shape == (120, 8)
        assert len(result.metadata['processing_history']) == 2

    def test_flow_file_and_input(self, tmp_path, synthetic_gather):
        input_path = write_gather_npz(synthetic_gather, tmp_path / 'in.npz')
        runner = FlowRunner()
        runner.add_module('v_stack', velocity=2000)
        flow_path = save_flow(runner, tmp_path / 'flow.json')
        output = tmp_path / 'stacked.npz'

        code = main.main(['run', '-i', str(input_path), '-f', str(flow_path), '-o', str(output)])

        assert code == 0
        result = read_gather_npz(output)
        np.testing.assert_allclose(result.traces[:, 0], result.traces[:, -1])

    def test_unknown_module_fails(self):
        assert main.main(['run', '--modules', 'fk_filter', '--traces', '4', '--samples', '50']) == 1


class TestAnalysisCommands:
    """`semblance` and `spectrum` print their results."""

    def test_spectrum(self, capsys):
        code = main.main(['spectrum', '--traces', '10', '--samples', '200'])

        assert code == 0
        assert 'Dominant frequency' in capsys.readouterr().out

    def test_semblance(self, capsys):
        code = main.main(['semblance', '--traces', '10', '--samples', '120',
                          '--v-min', '1500', '--v-max', '1700', '--v-step', '100', '--window', '5'])

        assert code == 0
        assert 'Velocity' in capsys.readouterr().out

    def test_missing_input_fails(self, tmp_path):
        assert main.main(['spectrum', '-i', str(tmp_path / 'none.npz')]) == 1
