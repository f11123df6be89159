"""
Processors package - seismic data processing operations.
"""
from .base_processor import BaseProcessor, ProgressCallback
from .agc import AGCProcessor, AGCConfig, apply_agc
from .bandpass_filter import BandpassFilter, BandpassConfig, apply_bandpass, design_bandpass_kernel
from .gain_processor import TGainProcessor, TGainConfig, apply_tgain
from .spectral_whitening import SpectralWhitening, WhiteningConfig, apply_whitening
from .deconvolution import DeconvolutionProcessor, DeconConfig, apply_decon
from .trace_mixing import TraceMixer, MixingConfig, apply_mixing

# NMO, stacking and velocity analysis
from .nmo_processor import NMOProcessor, NMOConfig, apply_nmo, apply_nmo_gather, compute_nmo_time
from .cdp_stacker import VelocityStacker, StackConfig, stack_gather, velocity_stack
from .semblance import SemblanceAnalyzer, VelocitySpectrum, compute_semblance, trial_velocities

# Inversion and analysis
from .inversion import InversionProcessor, InversionConfig, recursive_inversion
from .spectral_analyzer import SpectralAnalyzer, average_power_spectrum, spectrum_frequencies
from .avo_analysis import AVOResult, AVOPoint, RegressionResult, compute_avo_curve, linear_regression

# Flow execution
from .flow_runner import (
    FlowRunner,
    ModuleConfig,
    ReadSegyConfig,
    PROCESSOR_REGISTRY,
    config_from_module,
    build_processor,
)

__all__ = [
    # Base classes
    'BaseProcessor',
    'ProgressCallback',
    # Trace processors
    'AGCProcessor',
    'AGCConfig',
    'apply_agc',
    'BandpassFilter',
    'BandpassConfig',
    'apply_bandpass',
    'design_bandpass_kernel',
    'TGainProcessor',
    'TGainConfig',
    'apply_tgain',
    'SpectralWhitening',
    'WhiteningConfig',
    'apply_whitening',
    'DeconvolutionProcessor',
    'DeconConfig',
    'apply_decon',
    'TraceMixer',
    'MixingConfig',
    'apply_mixing',
    # NMO, stacking and velocity analysis
    'NMOProcessor',
    'NMOConfig',
    'apply_nmo',
    'apply_nmo_gather',
    'compute_nmo_time',
    'VelocityStacker',
    'StackConfig',
    'stack_gather',
    'velocity_stack',
    'SemblanceAnalyzer',
    'VelocitySpectrum',
    'compute_semblance',
    'trial_velocities',
    # Inversion and analysis
    'InversionProcessor',
    'InversionConfig',
    'recursive_inversion',
    'SpectralAnalyzer',
    'average_power_spectrum',
    'spectrum_frequencies',
    'AVOResult',
    'AVOPoint',
    'RegressionResult',
    'compute_avo_curve',
    'linear_regression',
    # Flow
    'FlowRunner',
    'ModuleConfig',
    'ReadSegyConfig',
    'PROCESSOR_REGISTRY',
    'config_from_module',
    'build_processor',
]
