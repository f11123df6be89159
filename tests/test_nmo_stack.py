"""
Unit tests for NMO correction, velocity stacking and semblance analysis.
"""
import numpy as np
import pytest

from models.seismic_data import SeismicData
from processors.nmo_processor import (
    NMOProcessor,
    NMOConfig,
    apply_nmo,
    apply_nmo_gather,
    compute_nmo_time,
    compute_stretch_factor,
)
from processors.cdp_stacker import VelocityStacker, StackConfig, stack_gather, velocity_stack
from processors.semblance import (
    SemblanceAnalyzer,
    VelocitySpectrum,
    compute_semblance,
    trial_velocities,
)
from models.app_settings import get_settings


class TestNMOTime:
    """Moveout and stretch formulas."""

    def test_nmo_time(self):
        t = compute_nmo_time(np.array([0.0, 400.0]), 1000.0, 2000.0)
        np.testing.assert_allclose(t, [0.5, np.sqrt(400.0 ** 2 + 0.25)])

    def test_stretch_zero_at_time_zero(self):
        stretch = compute_stretch_factor(np.array([0.0, 10.0]), 1000.0, 100.0)
        assert stretch[0] == 0.0
        assert stretch[1] > 0.0


class TestApplyNMO:
    """Single-trace NMO correction."""

    @pytest.mark.parametrize("velocity", [500.0, 2000.0, 6000.0])
    def test_zero_offset_is_identity(self, random_traces, velocity):
        trace = random_traces[:, 0]
        np.testing.assert_array_equal(apply_nmo(trace, 0.0, velocity, 2.0), trace)

    def test_zero_stretch_limit_mutes_everything_after_time_zero(self, random_traces):
        trace = random_traces[:, 1]
        out = apply_nmo(trace, 1000.0, 2000.0, 2.0, stretch_limit=0.0)
        np.testing.assert_array_equal(out[1:], 0.0)

    def test_impulse_scenario(self):
        """Unit impulse at sample 200, offset 1000, v 2000, dt 2 ms."""
        trace = np.zeros(500)
        trace[200] = 1.0
        out = apply_nmo(trace, 1000.0, 2000.0, 2.0)

        # t_nmo(200) = sqrt(400^2 + 0.25) reads just past input sample 200
        frac = np.sqrt(400.0 ** 2 + 0.25) / 2.0 - 200.0
        assert np.argmax(out) == 200
        assert out[200] == pytest.approx(1.0 - frac)
        assert out[200] == pytest.approx(1.0, abs=1e-3)

        others = np.delete(out, [199, 200])
        np.testing.assert_array_equal(others, 0.0)
        assert out[199] < 1e-3

    def test_samples_past_trace_end_are_zero(self):
        trace = np.ones(50)
        # Strong moveout pushes late samples beyond the last input sample
        out = apply_nmo(trace, 100.0, 1.0, 2.0, stretch_limit=100.0)
        assert out[-1] == 0.0

    def test_last_sample_zero_for_any_offset(self):
        """Tiny moveout lands exactly on the last sample, whose upper neighbour is missing."""
        out = apply_nmo(np.ones(50), 1.0, 1e7, 2.0)

        np.testing.assert_array_equal(out[:-1], 1.0)
        assert out[-1] == 0.0

    def test_gather_uses_each_offset(self, random_traces):
        offsets = np.linspace(0.0, 1100.0, random_traces.shape[1])
        out = apply_nmo_gather(random_traces, offsets, 1500.0, 2.0)

        np.testing.assert_array_equal(out[:, 0], random_traces[:, 0])
        np.testing.assert_allclose(out[:, 5], apply_nmo(random_traces[:, 5], offsets[5], 1500.0, 2.0))

    def test_config_validation(self):
        with pytest.raises(ValueError):
            NMOConfig(velocity=0.0)
        with pytest.raises(ValueError):
            NMOConfig(stretch_limit=-0.1)

    def test_processor_reads_offset_headers(self, synthetic_gather):
        result = NMOProcessor(velocity=2000.0, stretch_limit=0.7).process(synthetic_gather)

        assert result.traces.shape == synthetic_gather.traces.shape
        # Trace 0 has zero offset
        np.testing.assert_array_equal(result.traces[:, 0], synthetic_gather.traces[:, 0])


class TestVelocityStack:
    """NMO + mean stack broadcast across the gather."""

    def test_stack_gather_mean(self):
        traces = np.array([[1.0, 3.0], [2.0, 4.0]])
        np.testing.assert_allclose(stack_gather(traces), [2.0, 3.0])

    def test_zero_offsets_stack_is_mean(self, random_traces):
        offsets = np.zeros(random_traces.shape[1])
        out = velocity_stack(random_traces, offsets, 2000.0, 2.0)

        assert out.shape == random_traces.shape
        for i in range(out.shape[1]):
            np.testing.assert_allclose(out[:, i], random_traces.mean(axis=1))

    def test_processor_broadcasts_identical_traces(self, synthetic_gather):
        result = VelocityStacker(StackConfig(velocity=2150.0)).process(synthetic_gather)

        assert result.n_traces == synthetic_gather.n_traces
        np.testing.assert_array_equal(result.traces[:, 0], result.traces[:, -1])
        np.testing.assert_array_equal(result.offsets, synthetic_gather.offsets)


class TestSemblance:
    """Velocity analysis."""

    def test_trial_velocities_inclusive(self):
        np.testing.assert_allclose(trial_velocities(1500, 1600, 50), [1500, 1550, 1600])

    def test_trial_velocities_rejects_bad_step(self):
        with pytest.raises(ValueError):
            trial_velocities(1500, 1600, 0)

    def test_empty_gather_gives_empty_grid(self):
        grid = compute_semblance(np.zeros((100, 0)), np.zeros(0), 2.0, 1500, 4000, 50)
        assert grid.shape == (0, 0)

    def test_coherent_event_has_unit_semblance(self):
        """Identical zero-offset traces are perfectly coherent at every velocity."""
        trace = np.zeros(120)
        trace[60] = 1.0
        traces = np.repeat(trace[:, np.newaxis], 6, axis=1)
        grid = compute_semblance(traces, np.zeros(6), 2.0, 1500, 1700, 100, window=5)

        assert grid.shape == (3, 120)
        np.testing.assert_allclose(grid[:, 60], 1.0)
        # Margins stay zero, and samples with no energy give 0
        np.testing.assert_array_equal(grid[:, :5], 0.0)
        np.testing.assert_array_equal(grid[:, -5:], 0.0)
        np.testing.assert_array_equal(grid[:, 20], 0.0)

    def test_values_bounded(self, synthetic_gather):
        grid = compute_semblance(synthetic_gather.traces, synthetic_gather.offsets,
                                 synthetic_gather.sample_interval, 1500, 2500, 250)
        assert grid.min() >= 0.0
        assert grid.max() <= 1.0 + 1e-9

    def test_analyzer_uses_settings_defaults(self, synthetic_gather):
        get_settings().set_semblance_params(v_min=2000, v_max=2200, v_step=100, window=10)
        spectrum = SemblanceAnalyzer().analyze(synthetic_gather)

        np.testing.assert_allclose(spectrum.velocities, [2000, 2100, 2200])
        assert spectrum.semblance.shape == (3, synthetic_gather.n_samples)

    def test_analyzer_empty_gather(self):
        data = SeismicData(traces=np.zeros((100, 0)), sample_interval=2.0)
        spectrum = SemblanceAnalyzer(v_min=1500, v_max=2000, v_step=100).analyze(data)

        assert spectrum.is_empty
        assert spectrum.best_velocities().size == 0
        assert spectrum.velocity_at_time(100.0) is None

    def test_best_velocity_lookup(self):
        grid = np.array([[0.1, 0.9, 0.2], [0.5, 0.3, 1.4]])
        spectrum = VelocitySpectrum(velocities=np.array([1500.0, 2000.0]), semblance=grid,
                                    sample_interval=2.0)

        np.testing.assert_allclose(spectrum.best_velocities(), [2000.0, 1500.0, 2000.0])
        assert spectrum.velocity_at_time(2.0) == 1500.0
        assert spectrum.velocity_at_time(10.0) is None
        assert spectrum.clipped().max() == 1.0
