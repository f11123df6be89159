"""
Processing module library - the catalogue of steps a user can place in a flow.

Each ModuleSpec carries a generic parameter map (label, value, bounds) as
edited by the user. The FlowRunner converts an ActiveModule into a typed
config (see processors.flow_runner.config_from_module) before execution.
"""
import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union
from uuid import uuid4

ParamValue = Union[float, int, str, bool]


@dataclass
class ModuleParam:
    """
    One user-editable module parameter.

    Attributes:
        label: Display label
        value: Current value (numeric, string or toggle)
        type: 'number', 'string' or 'toggle'
        min: Optional lower bound for numeric values
        max: Optional upper bound for numeric values
    """
    label: str
    value: ParamValue
    type: str = 'number'
    min: Optional[float] = None
    max: Optional[float] = None

    def __post_init__(self):
        if self.type not in ('number', 'string', 'toggle'):
            raise ValueError(f"type must be 'number', 'string' or 'toggle', got {self.type}")

    def as_float(self) -> float:
        """Numeric value of this parameter (strings are parsed)."""
        try:
            return float(self.value)
        except (TypeError, ValueError):
            raise ValueError(f"Parameter '{self.label}' is not numeric: {self.value!r}")

    def to_dict(self) -> Dict[str, Any]:
        d = {'label': self.label, 'value': self.value, 'type': self.type}
        if self.min is not None:
            d['min'] = self.min
        if self.max is not None:
            d['max'] = self.max
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'ModuleParam':
        return cls(
            label=d.get('label', ''),
            value=d['value'],
            type=d.get('type', 'number'),
            min=d.get('min'),
            max=d.get('max'),
        )


@dataclass
class ModuleSpec:
    """A processing step as listed in the module library."""
    id: str
    name: str
    module_type: str
    description: str = ''
    params: Dict[str, ModuleParam] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'type': self.module_type,
            'description': self.description,
            'params': {key: p.to_dict() for key, p in self.params.items()},
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'ModuleSpec':
        return cls(
            id=d['id'],
            name=d.get('name', d['id']),
            module_type=d.get('type', 'Signal'),
            description=d.get('description', ''),
            params={key: ModuleParam.from_dict(p) for key, p in d.get('params', {}).items()},
        )


@dataclass
class ActiveModule:
    """A module spec instance placed in a flow."""
    spec: ModuleSpec
    instance_id: str = field(default_factory=lambda: uuid4().hex)

    @property
    def id(self) -> str:
        return self.spec.id

    @property
    def params(self) -> Dict[str, ModuleParam]:
        return self.spec.params

    def set_param(self, key: str, value: ParamValue) -> None:
        """Set a parameter value, clamping numeric values into [min, max]."""
        if key not in self.spec.params:
            raise KeyError(f"Module '{self.id}' has no parameter '{key}'")
        param = self.spec.params[key]
        if param.type == 'number':
            value = float(value)
            if param.min is not None:
                value = max(param.min, value)
            if param.max is not None:
                value = min(param.max, value)
        param.value = value

    def to_dict(self) -> Dict[str, Any]:
        d = self.spec.to_dict()
        d['instanceId'] = self.instance_id
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'ActiveModule':
        return cls(spec=ModuleSpec.from_dict(d), instance_id=d.get('instanceId') or uuid4().hex)


MODULE_LIBRARY: List[ModuleSpec] = [
    ModuleSpec(
        id='read_segy', name='Read SEGY', module_type='IO',
        description='Import seismic data from SEGY file.',
        params={'file': ModuleParam('Source File', 'data_01.segy', type='string')},
    ),
    ModuleSpec(
        id='bandpass', name='Bandpass Filter', module_type='Filter',
        description='Apply windowed-sinc FIR frequency filtering to traces.',
        params={
            'lowCut': ModuleParam('Low Cut (Hz)', 10, min=0, max=100),
            'highCut': ModuleParam('High Cut (Hz)', 65, min=20, max=200),
        },
    ),
    ModuleSpec(
        id='tgain', name='T-Gain Compensation', module_type='Signal',
        description='Compensate for deep signal attenuation using exponential gain.',
        params={'exponent': ModuleParam('Gain Power (n)', 1.5, min=0, max=5.0)},
    ),
    ModuleSpec(
        id='agc', name='AGC', module_type='Signal',
        description='Automatic Gain Control for amplitude balancing.',
        params={'window': ModuleParam('Window (ms)', 400, min=50, max=2000)},
    ),
    ModuleSpec(
        id='whitening', name='Spectral Whitening', module_type='Signal',
        description='Enhance high frequencies and flatten spectrum.',
    ),
    ModuleSpec(
        id='mixing', name='Trace Mixing', module_type='Imaging',
        description='Lateral coherence enhancement by trace summation.',
        params={'numTraces': ModuleParam('Mix Span', 3, min=1, max=11)},
    ),
    ModuleSpec(
        id='decon', name='Spiking Decon', module_type='Signal',
        description='Predictive deconvolution to compress wavelets.',
        params={'opLength': ModuleParam('Operator Length', 120, min=10, max=500)},
    ),
    ModuleSpec(
        id='nmo_corr', name='NMO Correction', module_type='Imaging',
        description='Normal moveout correction with stretch mute.',
        params={
            'velocity': ModuleParam('RMS Velocity', 2150, min=1000, max=5000),
            'stretchLimit': ModuleParam('Stretch Limit', 0.7, min=0, max=10.0),
        },
    ),
    ModuleSpec(
        id='v_stack', name='Velocity Stack', module_type='Imaging',
        description='NMO correction and trace stacking.',
        params={'velocity': ModuleParam('RMS Velocity', 2150, min=1000, max=5000)},
    ),
    ModuleSpec(
        id='inversion', name='Recursive Inversion', module_type='Interpretation',
        description='Reflectivity to acoustic impedance by recursive integration.',
        params={'initialImpedance': ModuleParam('Initial Impedance', 5000, min=1000, max=20000)},
    ),
]


def get_module_spec(module_id: str) -> ModuleSpec:
    """
    Get a fresh copy of a library module spec.

    Raises:
        KeyError: If module id is not in the library
    """
    for spec in MODULE_LIBRARY:
        if spec.id == module_id:
            return copy.deepcopy(spec)
    raise KeyError(f"Unknown module: {module_id}. Available: {[s.id for s in MODULE_LIBRARY]}")


def create_active_module(module_id: str, **values: ParamValue) -> ActiveModule:
    """Instantiate a library module for a flow, optionally overriding values."""
    module = ActiveModule(spec=get_module_spec(module_id))
    for key, value in values.items():
        module.set_param(key, value)
    return module
