"""Unit tests for canonical configuration schema."""

import pytest
import yaml

from rotorforge.config.schema import (
    JitterConfig,
    MarkerConfig,
    PathConfig,
    ProbeConfig,
    TrialConfig,
    TrialConfigError,
    TrialSettings,
)


class TestTrialSettings:
    """Test TrialSettings dataclass."""

    def test_defaults(self):
        """Defaults describe a 20 s trial on a 600 px canvas."""
        settings = TrialSettings()
        assert settings.duration_ms == 20000.0
        assert settings.on_target_px == 25.0
        assert settings.max_tick_delta_ms == 50.0
        assert settings.canvas_center == (300.0, 300.0)

    def test_rectangular_canvas(self):
        """A (w, h) canvas survives a dict round trip."""
        settings = TrialSettings.from_dict({"canvas_size": [800, 400], "unknown": 1})
        assert settings.canvas_extent == (800.0, 400.0)
        assert settings.canvas_center == (400.0, 200.0)
        assert settings.to_dict()["canvas_size"] == [800, 400]


class TestSectionConfigs:
    """Test the per-section dataclasses."""

    def test_path_accepts_plugin_radius(self):
        """params.R is taken as the base radius."""
        path = PathConfig.from_dict({"kind": "circle", "params": {"R": 90}})
        assert path.radius == 90
        assert "R" not in path.params

    def test_path_resolve_uses_canvas_centre(self):
        """Without an explicit centre the canvas centre is used."""
        spec = PathConfig(radius=50.0).resolve((200.0, 100.0))
        assert spec.position(0.0) == pytest.approx((250.0, 100.0))

    def test_probe_isi_forms(self):
        """isi_range_ms accepts a list or a min/max mapping."""
        assert ProbeConfig.from_dict({"isi_range_ms": [1000, 2000]}).isi_range_ms == (1000, 2000)
        assert ProbeConfig.from_dict({"isi_range_ms": {"min": 900, "max": 1200}}).isi_range_ms == (900, 1200)

    def test_marker_shapes_tuple(self):
        """Shapes become a tuple."""
        assert MarkerConfig.from_dict({"shapes": ["square"]}).shapes == ("square",)


class TestTrialConfig:
    """Test the full configuration."""

    def test_default_is_valid(self):
        """The default configuration validates."""
        TrialConfig().validate()

    def test_yaml_round_trip(self):
        """to_yaml/from_yaml reproduce the configuration."""
        config = TrialConfig(
            trial=TrialSettings(duration_ms=5000.0, key_reverse="r", seed=4),
            path=PathConfig(kind="ellipse", radius=120.0, params={"aspect": 0.6}),
            jitter=JitterConfig(type="angle", amp=0.05),
            metadata={"participant": "P07"},
        )
        restored = TrialConfig.from_yaml(config.to_yaml())
        assert restored == config
        assert yaml.safe_load(config.to_yaml())["trial"]["key_reverse"] == "r"

    def test_missing_sections_take_defaults(self):
        """from_dict fills absent sections."""
        config = TrialConfig.from_dict({"trial": {"duration_ms": 1000}})
        assert config.path == PathConfig()
        assert config.probes == ProbeConfig()

    def test_from_yaml_rejects_non_mapping(self):
        """A YAML scalar is not a configuration."""
        with pytest.raises(TrialConfigError):
            TrialConfig.from_yaml("- 1\n- 2\n")

    @pytest.mark.parametrize(
        "config, message",
        [
            (TrialConfig(path=PathConfig(kind="spiral")), "unknown path.kind"),
            (TrialConfig(path=PathConfig(kind="custom")), "callable"),
            (TrialConfig(probes=ProbeConfig(colors={"go": "#fff"})), "missing role"),
            (TrialConfig(probes=ProbeConfig(colors={"go": "#fff", "flip": "#fff"})), "must differ"),
            (TrialConfig(trial=TrialSettings(direction=0)), "direction"),
            (TrialConfig(probes=ProbeConfig(isi_range_ms=(3000, 1000))), "isi_range_ms"),
            (TrialConfig(probes=ProbeConfig(isi_range_ms=(300, 900))), "cannot overlap"),
            (TrialConfig(jitter=JitterConfig(type="wobble")), "jitter.type"),
            (TrialConfig(jitter=JitterConfig(alpha=0.0)), "alpha"),
            (TrialConfig(trial=TrialSettings(sample_interval_ms=0)), "sample_interval_ms"),
            (TrialConfig(trial=TrialSettings(duration_ms=0)), "duration_ms"),
        ],
    )
    def test_validation_errors(self, config, message):
        """Each invalid field is reported."""
        with pytest.raises(TrialConfigError, match=message):
            config.validate()

    def test_validation_collects_all_errors(self):
        """All problems are listed in one error."""
        config = TrialConfig(
            trial=TrialSettings(direction=2, on_target_px=-1),
            jitter=JitterConfig(type="wobble"),
        )
        with pytest.raises(TrialConfigError) as excinfo:
            config.validate()
        text = str(excinfo.value)
        assert "direction" in text and "on_target_px" in text and "jitter.type" in text

    def test_disabled_probes_skip_timing_checks(self):
        """Probe timing is not checked when probes are off."""
        TrialConfig(probes=ProbeConfig(enabled=False, isi_range_ms=(10, 5))).validate()


class TestReadOnlyMappings:
    """Test that mapping fields cannot be changed after construction."""

    def test_mappings_are_read_only(self):
        """colors, params and metadata reject item assignment."""
        config = TrialConfig(
            path=PathConfig(kind="ellipse", params={"aspect": 0.5}),
            metadata={"participant": "P01"},
        )
        with pytest.raises(TypeError):
            config.probes.colors["go"] = "#000000"
        with pytest.raises(TypeError):
            config.path.params["aspect"] = 2.0
        with pytest.raises(TypeError):
            config.metadata["participant"] = "P02"

    def test_input_dicts_are_copied(self):
        """Mutating the caller's dict afterwards does not reach the config."""
        colors = {"go": "#111111", "flip": "#222222"}
        labels = {"participant": "P01"}
        config = TrialConfig(probes=ProbeConfig(colors=colors), metadata=labels)
        colors["go"] = "#333333"
        labels["participant"] = "P09"
        assert config.probes.colors["go"] == "#111111"
        assert config.metadata["participant"] == "P01"

    def test_to_dict_returns_plain_dicts(self):
        """Serialised sections are ordinary, mutable dicts."""
        data = TrialConfig(metadata={"participant": "P01"}).to_dict()
        assert type(data["probes"]["colors"]) is dict
        assert type(data["metadata"]) is dict
        assert type(data["path"]["params"]) is dict
