"""YAML loading for trial configuration files."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, TextIO, Union

import yaml


class UniqueKeyLoader(yaml.SafeLoader):
    """Safe YAML loader that rejects duplicate mapping keys.

    A repeated key in a trial file (two ``duration_ms`` lines, say) would
    otherwise silently keep the last value.
    """


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict:
    mapping = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise ValueError(
                f"Duplicate key '{key}' detected in YAML (line {key_node.start_mark.line + 1})."
            )
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


def load_yaml(stream: Union[str, TextIO]) -> Any:
    """Parse YAML text or a file-like object with duplicate-key validation."""
    return yaml.load(stream, Loader=UniqueKeyLoader)


def load_config_file(config_path: Union[str, Path]) -> Dict[str, Any]:
    """Load a trial configuration mapping from a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is empty, not a mapping, or has duplicate keys.
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    with open(path, "r", encoding="utf-8") as f:
        config = load_yaml(f)
    if not isinstance(config, dict) or not config:
        raise ValueError(f"Empty or invalid config file: {config_path}")
    return config
