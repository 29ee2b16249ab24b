import math

from rotorforge import TrialConfig, run_headless
from rotorforge.config import PathConfig, TrialSettings, load_config_file
from rotorforge.core.visualization import plot_trial


def figure_eight(phase, params):
    """Lemniscate of Gerono scaled by R."""
    return (
        params["cx"] + params["R"] * math.sin(phase),
        params["cy"] + params["R"] * math.sin(phase) * math.cos(phase),
    )


def main():
    # Load the canonical configuration shared with the CLI
    config = TrialConfig.from_dict(load_config_file("examples/configs/default_trial.yml"))

    # Simulated operator with lag and tremor, reversing twice by key
    result = run_headless(
        config,
        operator="follow",
        operator_params={"lag_ms": 150.0, "noise_px": 3.0, "seed": 0},
        key_presses=[(6000.0, "r"), (12000.0, "r")],
        progress=True,
    )
    print(f"On target: {result.on_target_prop:.1%}  mapping: {result.mapping}")
    for probe in result.probes:
        print(f"  probe {probe['index']} at {probe['onset_ms']:.0f} ms ({probe['role']}): {probe['outcome']}")

    # Same operator on a custom path, sampled on a 10 ms grid
    custom = TrialConfig(
        trial=TrialSettings(duration_ms=10000.0, sample_interval_ms=10.0, seed=1),
        path=PathConfig(kind="custom", radius=150.0, function=figure_eight),
    )
    custom_result = run_headless(custom, operator="follow", operator_params={"lag_ms": 80.0})
    print(f"Figure-eight on target: {custom_result.on_target_prop:.1%} "
          f"({len(custom_result.frames)} grid samples)")

    plot_trial(result, on_target_px=config.trial.on_target_px).savefig("trial_default.png")
    plot_trial(custom_result, on_target_px=custom.trial.on_target_px).savefig("trial_custom.png")


if __name__ == "__main__":
    main()
