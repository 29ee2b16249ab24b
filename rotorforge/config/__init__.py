"""Trial configuration schema and YAML loading."""

from .schema import (
    JitterConfig,
    MarkerConfig,
    PathConfig,
    PointerJitterConfig,
    ProbeConfig,
    TrialConfig,
    TrialConfigError,
    TrialSettings,
)
from .yaml_utils import load_config_file, load_yaml

__all__ = [
    "JitterConfig",
    "MarkerConfig",
    "PathConfig",
    "PointerJitterConfig",
    "ProbeConfig",
    "TrialConfig",
    "TrialConfigError",
    "TrialSettings",
    "load_config_file",
    "load_yaml",
]
