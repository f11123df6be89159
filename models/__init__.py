"""Models package - data structures and state management."""
from .seismic_data import SeismicData, HEADER_KEYS
from .horizon import Horizon, HorizonPoint
from .app_settings import AppSettings, get_settings
from .flow_modules import (
    ModuleParam,
    ModuleSpec,
    ActiveModule,
    MODULE_LIBRARY,
    get_module_spec,
    create_active_module,
)

__all__ = [
    'SeismicData',
    'HEADER_KEYS',
    'Horizon',
    'HorizonPoint',
    'AppSettings',
    'get_settings',
    # Flow modules
    'ModuleParam',
    'ModuleSpec',
    'ActiveModule',
    'MODULE_LIBRARY',
    'get_module_spec',
    'create_active_module',
]
