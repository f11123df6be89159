"""
Flow runner - executes an ordered list of processing modules.

The flow is a list of ActiveModules (generic parameter maps as edited by
the user). Before execution every module is converted into its typed
config (one frozen dataclass per module kind); the config type selects
the processor through PROCESSOR_REGISTRY. Modules run strictly in order
on a copy of the raw dataset, and only the final result is returned.
"""
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Type, Union

from models.flow_modules import ActiveModule, create_active_module
from models.seismic_data import SeismicData
from processors.agc import AGCConfig, AGCProcessor
from processors.bandpass_filter import BandpassConfig, BandpassFilter
from processors.base_processor import BaseProcessor, ProgressCallback
from processors.cdp_stacker import StackConfig, VelocityStacker
from processors.deconvolution import DeconConfig, DeconvolutionProcessor
from processors.gain_processor import TGainConfig, TGainProcessor
from processors.inversion import InversionConfig, InversionProcessor
from processors.nmo_processor import NMOConfig, NMOProcessor
from processors.spectral_whitening import SpectralWhitening, WhiteningConfig
from processors.trace_mixing import MixingConfig, TraceMixer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReadSegyConfig:
    """IO module: data is already loaded, the step only syncs headers."""
    file: str = ''


ModuleConfig = Union[
    ReadSegyConfig,
    AGCConfig,
    BandpassConfig,
    TGainConfig,
    WhiteningConfig,
    MixingConfig,
    DeconConfig,
    NMOConfig,
    StackConfig,
    InversionConfig,
]

# Processor class for every processing config (IO configs have none)
PROCESSOR_REGISTRY: Dict[Type, Type[BaseProcessor]] = {
    AGCConfig: AGCProcessor,
    BandpassConfig: BandpassFilter,
    TGainConfig: TGainProcessor,
    WhiteningConfig: SpectralWhitening,
    MixingConfig: TraceMixer,
    DeconConfig: DeconvolutionProcessor,
    NMOConfig: NMOProcessor,
    StackConfig: VelocityStacker,
    InversionConfig: InversionProcessor,
}

IO_CONFIGS: Tuple[Type, ...] = (ReadSegyConfig,)

# module id -> (config type, {module param key: config field})
MODULE_CONFIGS: Dict[str, Tuple[Type, Dict[str, str]]] = {
    'read_segy': (ReadSegyConfig, {'file': 'file'}),
    'agc': (AGCConfig, {'window': 'window_ms'}),
    'bandpass': (BandpassConfig, {'lowCut': 'low_cut_hz', 'highCut': 'high_cut_hz'}),
    'tgain': (TGainConfig, {'exponent': 'exponent'}),
    'whitening': (WhiteningConfig, {}),
    'mixing': (MixingConfig, {'numTraces': 'num_traces'}),
    'decon': (DeconConfig, {'opLength': 'op_length'}),
    'nmo_corr': (NMOConfig, {'velocity': 'velocity', 'stretchLimit': 'stretch_limit'}),
    'v_stack': (StackConfig, {'velocity': 'velocity'}),
    'inversion': (InversionConfig, {'initialImpedance': 'initial_impedance'}),
}

# Every config in the union must be dispatchable
_covered = set(PROCESSOR_REGISTRY) | set(IO_CONFIGS)
_declared = set(ModuleConfig.__args__)
if _covered != _declared:
    raise RuntimeError(f"Flow dispatch does not cover: {sorted(c.__name__ for c in _declared - _covered)}")


def config_from_module(module: ActiveModule) -> Optional[ModuleConfig]:
    """
    Convert an ActiveModule's generic parameters into its typed config.

    Missing parameters take the config defaults. String parameters stay
    strings; all others are converted to numbers.

    Args:
        module: Module instance from the flow

    Returns:
        Typed config, or None for an unknown module id

    Raises:
        ValueError: If a parameter cannot be converted or fails validation
    """
    entry = MODULE_CONFIGS.get(module.id)
    if entry is None:
        return None

    config_type, field_map = entry
    kwargs: Dict[str, Any] = {}
    for param_key, field_name in field_map.items():
        param = module.params.get(param_key)
        if param is None:
            continue
        kwargs[field_name] = param.value if param.type == 'string' else param.as_float()
    return config_type(**kwargs)


def build_processor(config: ModuleConfig) -> Optional[BaseProcessor]:
    """Processor for a config; None for IO-only configs."""
    if isinstance(config, IO_CONFIGS):
        return None
    return PROCESSOR_REGISTRY[type(config)](config)


class FlowRunner:
    """
    Ordered chain of processing modules.

    Order matters: filters do not commute, and a velocity stack collapses
    the gather so later modules see identical traces.
    """

    def __init__(self, modules: Optional[List[ActiveModule]] = None):
        self.modules: List[ActiveModule] = list(modules or [])
        self._progress_callback: Optional[ProgressCallback] = None

    def set_progress_callback(self, callback: Optional[ProgressCallback]) -> 'FlowRunner':
        """Report (module index, module count, module name) as the flow advances."""
        self._progress_callback = callback
        return self

    # =========================================================================
    # Flow editing
    # =========================================================================

    def add_module(self, module: Union[ActiveModule, str], **values) -> ActiveModule:
        """Append a module instance (or a library module id) to the flow."""
        if isinstance(module, str):
            module = create_active_module(module, **values)
        self.modules.append(module)
        return module

    def remove_module(self, instance_id: str) -> bool:
        before = len(self.modules)
        self.modules = [m for m in self.modules if m.instance_id != instance_id]
        return len(self.modules) != before

    def move_module(self, instance_id: str, delta: int) -> None:
        """Move a module up (negative delta) or down, clamped to the flow ends."""
        for i, module in enumerate(self.modules):
            if module.instance_id == instance_id:
                target = max(0, min(len(self.modules) - 1, i + delta))
                self.modules.insert(target, self.modules.pop(i))
                return
        raise KeyError(f"No module with instance id {instance_id}")

    def clear(self) -> None:
        self.modules = []

    # =========================================================================
    # Execution
    # =========================================================================

    def run(self, raw: SeismicData) -> SeismicData:
        """
        Run the flow on a copy of the raw dataset.

        Args:
            raw: Raw (unprocessed) dataset, left unchanged

        Returns:
            New processed dataset with the same name, headers and interval
        """
        logger.info(f"Running process sequence: {len(self.modules)} modules on {raw.name}")
        start_time = time.perf_counter()

        working = raw.copy()
        total = len(self.modules)
        for i, module in enumerate(self.modules):
            if self._progress_callback is not None:
                self._progress_callback(i, total, module.spec.name)

            config = config_from_module(module)
            if config is None:
                logger.warning(f"Unknown module id '{module.id}', skipped")
                continue

            processor = build_processor(config)
            if processor is None:
                logger.info(f"IO: Module {module.id} active. Syncing headers...")
                continue

            logger.debug(f"Step {i + 1}/{total}: {processor.get_description()}")
            working = processor.process(working)

        if self._progress_callback is not None:
            self._progress_callback(total, total, 'done')

        elapsed_ms = (time.perf_counter() - start_time) * 1000.0
        logger.info(f"Flow completed in {elapsed_ms:.1f}ms")
        return working

    def get_description(self) -> str:
        """Get description of entire flow."""
        if not self.modules:
            return "No processing applied"

        steps = [f"{i+1}. {m.spec.name}" for i, m in enumerate(self.modules)]
        return "Processing flow:\n" + "\n".join(steps)

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_dict(self) -> Dict[str, Any]:
        return {'flow': [m.to_dict() for m in self.modules]}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'FlowRunner':
        return cls([ActiveModule.from_dict(m) for m in d.get('flow', [])])

    def __len__(self) -> int:
        return len(self.modules)

    def __repr__(self) -> str:
        return f"FlowRunner(steps={len(self.modules)})"
