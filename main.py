#!/usr/bin/env python3
"""
Seismic processing workbench - command line entry point.

Commands:
    run        Apply a processing flow to a gather and save the result
    semblance  Velocity analysis: best semblance velocity per time
    spectrum   Average amplitude spectrum and dominant frequency

Input gathers are .npz archives (see utils.seismic_io); without --input a
synthetic shot gather is generated.

Usage:
    python main.py run --flow flow.json --output processed.npz
    python main.py run --modules bandpass,agc
    python main.py semblance --v-min 1500 --v-max 4000
    python main.py spectrum --input gather.npz
"""
import argparse
import logging
import sys

import numpy as np

from models.app_settings import get_settings
from models.seismic_data import SeismicData
from processors.flow_runner import FlowRunner
from processors.semblance import SemblanceAnalyzer
from processors.spectral_analyzer import SpectralAnalyzer
from utils.flow_io import load_flow, save_flow
from utils.sample_data import generate_synthetic_gather
from utils.seismic_io import read_gather_npz, write_gather_npz

# Set up logging
logger = logging.getLogger(__name__)


def _load_input(args) -> SeismicData:
    if args.input:
        return read_gather_npz(args.input)
    logger.info("No input given, generating synthetic gather")
    return generate_synthetic_gather(n_traces=args.traces, n_samples=args.samples)


def cmd_run(args) -> int:
    data = _load_input(args)

    if args.flow:
        runner = load_flow(args.flow)
    else:
        runner = FlowRunner()
        for module_id in filter(None, (m.strip() for m in args.modules.split(','))):
            runner.add_module(module_id)

    print(runner.get_description())
    result = runner.run(data)

    if args.save_flow:
        save_flow(runner, args.save_flow)
    if args.output:
        write_gather_npz(result, args.output)

    print(f"Processed {result}")
    print(f"RMS amplitude: {np.sqrt(np.mean(result.traces ** 2)):.6f}")
    return 0


def cmd_semblance(args) -> int:
    data = _load_input(args)
    analyzer = SemblanceAnalyzer(v_min=args.v_min, v_max=args.v_max,
                                 v_step=args.v_step, window=args.window)
    spectrum = analyzer.analyze(data)
    if spectrum.is_empty:
        print("Gather has no traces")
        return 0

    best = spectrum.best_velocities()
    peak = spectrum.clipped().max(axis=0)
    print(f"{'Time(ms)':>10} {'Velocity':>10} {'Semblance':>10}")
    for sample in range(0, data.n_samples, args.every):
        print(f"{sample * data.sample_interval:10.1f} {best[sample]:10.0f} {peak[sample]:10.3f}")
    return 0


def cmd_spectrum(args) -> int:
    data = _load_input(args)
    scale = get_settings().get_spectrum_scale() if args.scale is None else args.scale
    analyzer = SpectralAnalyzer(scale=scale)
    freqs, amps = analyzer.compute_average_spectrum(data)
    if amps.size == 0:
        print("Gather has no traces")
        return 0

    for f, a in zip(freqs, amps):
        print(f"{f:8.2f} Hz  {a:8.2f}")
    dominant = analyzer.find_dominant_frequency(freqs, amps)
    print(f"Dominant frequency: {dominant:.2f} Hz")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Seismic processing workbench")
    parser.add_argument('-v', '--verbose', action='store_true', help="Enable debug logging")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('--input', '-i', help="Input gather (.npz); synthetic if omitted")
    common.add_argument('--traces', type=int, default=100, help="Synthetic gather traces")
    common.add_argument('--samples', type=int, default=500, help="Synthetic gather samples")

    sub = parser.add_subparsers(dest='command', required=True)

    run = sub.add_parser('run', parents=[common], help="Apply a processing flow")
    run.add_argument('--flow', '-f', help="Flow JSON file")
    run.add_argument('--modules', '-m', default='bandpass,agc',
                     help="Comma separated module ids (used without --flow)")
    run.add_argument('--output', '-o', help="Output gather (.npz)")
    run.add_argument('--save-flow', help="Save the flow to a JSON file")
    run.set_defaults(func=cmd_run)

    semb = sub.add_parser('semblance', parents=[common], help="Semblance velocity analysis")
    semb.add_argument('--v-min', type=float)
    semb.add_argument('--v-max', type=float)
    semb.add_argument('--v-step', type=float)
    semb.add_argument('--window', type=int)
    semb.add_argument('--every', type=int, default=25, help="Print every Nth sample")
    semb.set_defaults(func=cmd_semblance)

    spectrum = sub.add_parser('spectrum', parents=[common], help="Average amplitude spectrum")
    spectrum.add_argument('--scale', type=float, help="Value of the strongest bin")
    spectrum.set_defaults(func=cmd_spectrum)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    try:
        return args.func(args)
    except (ValueError, KeyError, OSError) as e:
        logger.error(f"Workflow failed: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
