"""Command-line interface for RotorForge.

Runs trials headlessly with a simulated operator, validates configuration
files, lists components and plots saved results.

Example:
    $ rotorforge run trial.yml --operator follow --output result.json
    $ rotorforge validate trial.yml
    $ rotorforge list-components
    $ rotorforge visualize result.json --save result.png
"""

import argparse
import dataclasses
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from rotorforge.config.schema import TrialConfig, TrialConfigError
from rotorforge.config.yaml_utils import load_config_file
from rotorforge.core.harness import run_headless
from rotorforge.core.results import load_result, save_result
from rotorforge.registry import OPERATOR_REGISTRY, PATH_REGISTRY


def parse_key_press(text: str) -> Tuple[float, str]:
    """Parse ``T_MS:KEY`` (e.g. ``5000:r``) into ``(5000.0, "r")``."""
    t_text, sep, key = text.partition(":")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected T_MS:KEY, got '{text}'")
    try:
        return float(t_text), key
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid time in '{text}'") from None


def build_config(config_path: str, seed: Optional[int] = None) -> TrialConfig:
    """Load, optionally reseed, and validate a trial configuration file."""
    config = TrialConfig.from_dict(load_config_file(config_path))
    if seed is not None:
        config = dataclasses.replace(config, trial=dataclasses.replace(config.trial, seed=seed))
    config.validate()
    return config


def cmd_run(args: argparse.Namespace) -> int:
    """Run one trial headlessly from a YAML config.

    Returns:
        Exit code (0 for success, 1 for error).
    """
    try:
        config = build_config(args.config, seed=args.seed)
        operator_params = {}
        if args.operator == "follow":
            operator_params = {
                "lag_ms": args.lag_ms,
                "noise_px": args.noise_px,
                "chase_probes": not args.ignore_probes,
            }

        print(f"Running trial from {args.config} "
              f"(duration: {config.trial.duration_ms:.0f}ms, operator: {args.operator})...")
        result = run_headless(
            config,
            operator=args.operator,
            frame_ms=args.frame_ms,
            key_presses=args.key_press or [],
            stop_at_ms=args.stop_at,
            progress=args.progress,
            operator_params=operator_params,
            debug=args.debug,
        )

        print("\nTrial completed" if result.completed else "\nTrial finished early")
        print(f"Duration: {result.duration_ms:.1f} ms")
        print(f"On target: {result.on_target_ms:.1f} ms ({result.on_target_prop:.1%})")
        print(f"Mapping: go={result.mapping['go']} flip={result.mapping['flip']}")
        print(f"Frames: {len(result.frames)}  Events: {len(result.events)}")
        hits = sum(1 for p in result.probes if p["outcome"] == "hit")
        print(f"Probes: {hits}/{len(result.probes)} answered")

        if args.output:
            output_path = save_result(result, args.output, config=config.to_dict())
            print(f"Results saved to {output_path}")
        return 0

    except (FileNotFoundError, TrialConfigError, ValueError) as e:
        print(f"Error running trial: {e}", file=sys.stderr)
        return 1


def cmd_validate(args: argparse.Namespace) -> int:
    """Validate a YAML configuration without running it."""
    try:
        config = build_config(args.config)
    except FileNotFoundError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"❌ Configuration validation failed: {e}", file=sys.stderr)
        return 1

    t = config.trial
    print(f"✓ Configuration is valid: {args.config}")
    print(f"  Duration: {t.duration_ms:.0f} ms  Canvas: {t.canvas_extent}")
    print(f"  Path: {config.path.kind} (radius {config.path.radius} px)  "
          f"omega: {t.omega} rad/s  direction: {t.direction:+d}")
    print(f"  Jitter: {config.jitter.type} (amp {config.jitter.amp})")
    if config.probes.enabled:
        isi_min, isi_max = config.probes.isi_range_ms
        print(f"  Probes: {config.probes.duration_ms:.0f} ms every {isi_min}-{isi_max} ms, "
              f"colors {dict(config.probes.colors)}")
    else:
        print("  Probes: disabled")
    if t.sample_interval_ms is not None:
        print(f"  Sampling: fixed grid every {t.sample_interval_ms} ms")
    return 0


def cmd_list_components(args: argparse.Namespace) -> int:
    """List registered path kinds and simulated operators."""
    print("Available RotorForge Components:")
    print("=" * 50)
    print("\nPaths:")
    for name in PATH_REGISTRY.list_registered():
        print(f"  - {name}")
    print("  - custom (Python callable supplied in PathConfig.function)")
    print("\nJitter types:")
    print("  - none, angle (rad), radial (px)")
    print("\nSimulated operators:")
    for name in OPERATOR_REGISTRY.list_registered():
        print(f"  - {name}")
    return 0


def cmd_visualize(args: argparse.Namespace) -> int:
    """Plot a saved result to an image file."""
    try:
        # Imported here so the other commands never load matplotlib.
        from rotorforge.core.visualization import save_trial_figure

        result = load_result(args.result)
        save_path = Path(args.save) if args.save else Path(args.result).with_suffix(".png")
        save_trial_figure(result, save_path, on_target_px=args.on_target_px)
        print(f"Figure saved to {save_path}")
        return 0
    except (FileNotFoundError, ValueError) as e:
        print(f"Error visualizing result: {e}", file=sys.stderr)
        return 1


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="rotorforge",
        description="RotorForge: pursuit-rotor tracking-trial engine",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    run_parser = subparsers.add_parser("run", help="Run a trial headlessly from a YAML config")
    run_parser.add_argument("config", help="Path to YAML configuration file")
    run_parser.add_argument("--output", help="Save the result (.json, .pt or .pth)")
    run_parser.add_argument(
        "--operator",
        default="follow",
        choices=OPERATOR_REGISTRY.list_registered(),
        help="Simulated operator (default: follow)",
    )
    run_parser.add_argument("--lag-ms", type=float, default=120.0,
                            help="Pursuit time constant of the follow operator (default: 120)")
    run_parser.add_argument("--noise-px", type=float, default=0.0,
                            help="Tremor amplitude of the follow operator (default: 0)")
    run_parser.add_argument("--ignore-probes", action="store_true",
                            help="Follow operator never steers towards probes")
    run_parser.add_argument("--frame-ms", type=float, default=1000.0 / 60.0,
                            help="Simulated frame period in ms (default: 16.67)")
    run_parser.add_argument("--seed", type=int, help="Override the trial seed")
    run_parser.add_argument("--stop-at", type=float,
                            help="Force the trial to finish at this time (ms)")
    run_parser.add_argument("--key-press", type=parse_key_press, action="append",
                            metavar="T_MS:KEY", help="Scripted key press (repeatable)")
    run_parser.add_argument("--progress", action="store_true", help="Show a progress bar")
    run_parser.add_argument("--debug", action="store_true", help="Print engine debug lines")

    validate_parser = subparsers.add_parser("validate", help="Validate YAML config without running")
    validate_parser.add_argument("config", help="Path to YAML configuration file")

    subparsers.add_parser("list-components", help="List path kinds and simulated operators")

    viz_parser = subparsers.add_parser("visualize", help="Plot a saved trial result")
    viz_parser.add_argument("result", help="Result file (.json, .pt or .pth)")
    viz_parser.add_argument("--save", help="Image path (default: result path with .png)")
    viz_parser.add_argument("--on-target-px", type=float,
                            help="Draw the on-target threshold on the distance panel")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point.

    Returns:
        Exit code (0 for success, non-zero for error).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    commands = {
        "run": cmd_run,
        "validate": cmd_validate,
        "list-components": cmd_list_components,
        "visualize": cmd_visualize,
    }
    handler = commands.get(args.command)
    if handler:
        return handler(args)
    print(f"Unknown command: {args.command}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
