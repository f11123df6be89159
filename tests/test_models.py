"""
Unit tests for horizons, the module library and application settings.
"""
import json

import pytest

from models.app_settings import AppSettings, get_settings
from models.flow_modules import (
    MODULE_LIBRARY,
    ActiveModule,
    ModuleParam,
    create_active_module,
    get_module_spec,
)
from models.horizon import Horizon, HorizonPoint


def _point(trace_index, sample_index=100, amplitude=1.0):
    return HorizonPoint(trace_index=trace_index, sample_index=sample_index,
                        time_ms=sample_index * 2.0, amplitude=amplitude)


class TestHorizon:
    """Ordered, one-pick-per-trace point management."""

    def test_points_kept_sorted(self):
        horizon = Horizon(name='Top')
        for t in (5, 1, 3):
            horizon.add_or_replace_point(_point(t))

        assert [p.trace_index for p in horizon.points] == [1, 3, 5]

    def test_replace_on_same_trace(self):
        horizon = Horizon(points=[_point(1), _point(2)])
        horizon.add_or_replace_point(_point(2, sample_index=150, amplitude=-0.5))

        assert len(horizon) == 2
        assert horizon.get_point(2).sample_index == 150
        assert horizon.get_point(2).amplitude == -0.5

    def test_constructor_normalizes_points(self):
        """Duplicates collapse to the last pick and points are sorted."""
        horizon = Horizon(points=[_point(4), _point(2), _point(4, sample_index=90)])

        assert [p.trace_index for p in horizon.points] == [2, 4]
        assert horizon.get_point(4).sample_index == 90

    def test_remove_and_clear(self):
        horizon = Horizon(points=[_point(0), _point(1)])

        assert horizon.remove_point(0)
        assert not horizon.remove_point(7)
        assert horizon.get_point(0) is None
        horizon.clear()
        assert len(horizon) == 0

    def test_dict_round_trip(self):
        horizon = Horizon(name='Base', color='#ff0000', points=[_point(3), _point(1)], is_visible=False)
        d = horizon.to_dict()

        assert d['isVisible'] is False
        assert d['points'][0]['traceIndex'] == 1
        restored = Horizon.from_dict(json.loads(json.dumps(d)))
        assert restored == horizon

    def test_ids_unique(self):
        assert Horizon().id != Horizon().id


class TestModuleLibrary:
    """Module specs and flow instances."""

    def test_library_ids(self):
        ids = [spec.id for spec in MODULE_LIBRARY]
        assert ids == ['read_segy', 'bandpass', 'tgain', 'agc', 'whitening', 'mixing',
                       'decon', 'nmo_corr', 'v_stack', 'inversion']

    def test_get_module_spec_is_a_copy(self):
        spec = get_module_spec('agc')
        spec.params['window'].value = 10

        assert get_module_spec('agc').params['window'].value == 400

    def test_unknown_module(self):
        with pytest.raises(KeyError):
            get_module_spec('fk_filter')

    def test_set_param_clamps(self):
        module = create_active_module('agc')
        module.set_param('window', 10)
        assert module.params['window'].value == 50

        module.set_param('window', 5000)
        assert module.params['window'].value == 2000

    def test_set_unknown_param(self):
        module = create_active_module('tgain')
        with pytest.raises(KeyError):
            module.set_param('gain', 2.0)

    def test_instances_are_independent(self):
        a = create_active_module('nmo_corr', velocity=1800)
        b = create_active_module('nmo_corr')

        assert a.instance_id != b.instance_id
        assert a.params['velocity'].value == 1800
        assert b.params['velocity'].value == 2150

    def test_active_module_round_trip(self):
        module = create_active_module('bandpass', lowCut=5, highCut=80)
        restored = ActiveModule.from_dict(module.to_dict())

        assert restored.instance_id == module.instance_id
        assert restored.params['highCut'].value == 80
        assert restored.spec.module_type == 'Filter'

    def test_param_type_validated(self):
        with pytest.raises(ValueError):
            ModuleParam('Bad', 1, type='slider')

    def test_non_numeric_param(self):
        with pytest.raises(ValueError):
            ModuleParam('Velocity', 'fast').as_float()


class TestAppSettings:
    """JSON-backed settings singleton."""

    def test_defaults(self):
        settings = get_settings()

        assert settings.get_snap_radius() == 10
        assert settings.get_auto_track_enabled() is False
        assert settings.get_auto_track_window() == 12
        assert settings.get_auto_track_max_traces() == 100
        assert settings.get_semblance_params() == {
            'v_min': 1500.0, 'v_max': 4000.0, 'v_step': 50.0, 'window': 15,
        }
        assert settings.get_spectrum_scale() == 100.0

    def test_singleton(self):
        assert get_settings() is get_settings()

    def test_persisted_to_settings_dir(self, isolated_settings):
        get_settings().set_snap_radius(4)
        assert (isolated_settings / 'settings.json').exists()

        AppSettings.reset_instance()
        assert get_settings().get_snap_radius() == 4

    def test_corrupt_file_falls_back_to_defaults(self, isolated_settings):
        isolated_settings.mkdir(parents=True)
        (isolated_settings / 'settings.json').write_text('{not json')

        assert get_settings().get_snap_radius() == 10

    def test_invalid_values_rejected(self):
        with pytest.raises(ValueError):
            get_settings().set_snap_radius(-1)
        with pytest.raises(ValueError):
            get_settings().set_semblance_params(v_step=0)

    def test_recent_flows(self):
        settings = get_settings()
        for i in range(12):
            settings.add_recent_flow(f'flow_{i}.json')
        settings.add_recent_flow('flow_5.json')

        recent = settings.get_recent_flows()
        assert len(recent) == 10
        assert recent[0] == 'flow_5.json'
        assert recent.count('flow_5.json') == 1

    def test_reset_to_defaults(self):
        settings = get_settings()
        settings.set_auto_track_enabled(True)
        settings.reset_to_defaults()

        assert settings.get_auto_track_enabled() is False
