"""
Test configuration and fixtures for the RotorForge trial engine.
"""
import os
import sys
from pathlib import Path

import pytest
import torch

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("OMP_NUM_THREADS", "1")
os.environ.setdefault("MKL_NUM_THREADS", "1")
torch.set_num_threads(1)

from rotorforge.config.schema import (  # noqa: E402
    JitterConfig,
    PathConfig,
    ProbeConfig,
    TrialConfig,
    TrialSettings,
)


def make_config(probes=False, seed=7, **trial_kwargs):
    """Small deterministic trial: 2 s, 600 px canvas, radius 100 circle."""
    settings = dict(duration_ms=2000.0, canvas_size=600, omega=1.0, seed=seed)
    settings.update(trial_kwargs)
    return TrialConfig(
        trial=TrialSettings(**settings),
        path=PathConfig(kind="circle", radius=100.0),
        jitter=JitterConfig(),
        probes=ProbeConfig(enabled=probes),
    )


def tick_until(engine, end_ms, step_ms=10.0, start_ms=0.0):
    """Tick a fake clock from ``start_ms`` to ``end_ms``; returns the result or None."""
    now = start_ms
    result = None
    while now <= end_ms + 1e-9 and result is None:
        result = engine.tick(now)
        now += step_ms
    return result


@pytest.fixture
def base_config():
    """Probe-free 2 s trial with a fixed seed."""
    return make_config()


@pytest.fixture
def probe_config():
    """10 s trial with probes enabled and a fixed seed."""
    return TrialConfig(
        trial=TrialSettings(duration_ms=10000.0, seed=11),
        probes=ProbeConfig(enabled=True, isi_range_ms=(1500, 3500), duration_ms=400.0),
    )


@pytest.fixture
def trial_yaml(tmp_path):
    """A valid trial YAML file on disk."""
    path = tmp_path / "trial.yml"
    path.write_text(
        "metadata:\n"
        "  participant: P01\n"
        "trial:\n"
        "  duration_ms: 1000\n"
        "  canvas_size: 400\n"
        "  omega: 1.2\n"
        "  key_reverse: r\n"
        "  seed: 3\n"
        "path:\n"
        "  kind: circle\n"
        "  radius: 120\n"
        "probes:\n"
        "  enabled: false\n"
    )
    return path


@pytest.fixture
def config_factory():
    """Factory for small deterministic configs (see ``make_config``)."""
    return make_config


@pytest.fixture
def clock():
    """Fake frame clock driving an engine (see ``tick_until``)."""
    return tick_until
