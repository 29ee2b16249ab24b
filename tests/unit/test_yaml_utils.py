"""Unit tests for YAML loading helpers."""

import pytest

from rotorforge.config.yaml_utils import load_config_file, load_yaml


class TestLoadYaml:
    """Test duplicate-key rejection."""

    def test_plain_mapping(self):
        """Ordinary documents load as with safe_load."""
        assert load_yaml("trial:\n  duration_ms: 1000\n") == {"trial": {"duration_ms": 1000}}

    def test_duplicate_key_rejected(self):
        """A repeated key raises ValueError naming it and its line."""
        with pytest.raises(ValueError, match="duration_ms.*line 3"):
            load_yaml("trial:\n  duration_ms: 1000\n  duration_ms: 2000\n")


class TestLoadConfigFile:
    """Test file loading."""

    def test_loads_mapping(self, trial_yaml):
        """A valid file yields its mapping."""
        data = load_config_file(trial_yaml)
        assert data["trial"]["key_reverse"] == "r"

    def test_missing_file(self, tmp_path):
        """A missing path raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config_file(tmp_path / "absent.yml")

    def test_empty_file(self, tmp_path):
        """An empty document is rejected."""
        path = tmp_path / "empty.yml"
        path.write_text("")
        with pytest.raises(ValueError, match="Empty or invalid"):
            load_config_file(path)
