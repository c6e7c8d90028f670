"""Tests for slider configuration and YAML import/export."""

import pytest

from src.domain.scaling import Scaling
from src.rangeslider.config.io import (
    export_slider_config,
    import_slider_config,
    scaling_from_dict,
    scaling_to_dict,
)
from src.rangeslider.config.settings import GeometrySettings, ScalingConfig, SliderConfig
from src.rangeslider.core.slider import RangeSlider
from src.shared.exceptions import ConfigError


class TestSliderConfig:
    """Test SliderConfig validation."""

    def test_defaults(self):
        """Test the default configuration."""
        config = SliderConfig()
        assert config.lower_value == 0.25
        assert config.upper_value == 0.75
        assert config.step is None
        assert config.scaling.kind == "linear"
        assert config.build_scaling() == Scaling.linear(0, 1)

    @pytest.mark.parametrize("step", [0, -0.5])
    def test_invalid_step(self, step):
        """Test that the step must be positive."""
        with pytest.raises(ConfigError):
            SliderConfig(step=step)

    def test_invalid_geometry(self):
        """Test that widths must be non-negative."""
        with pytest.raises(ConfigError):
            GeometrySettings(track_width=-10)

    def test_unknown_scaling_kind(self):
        """Test scaling kind validation."""
        with pytest.raises(ConfigError):
            ScalingConfig(kind="logarithmic")

    def test_piecewise_needs_segments(self):
        """Test that a piecewise scaling without segments is rejected."""
        with pytest.raises(ConfigError):
            ScalingConfig(kind="piecewise")

    def test_reversed_domain_fails_on_build(self):
        """Test that interval errors surface as ConfigError."""
        config = ScalingConfig(domain=[5, 1])
        with pytest.raises(ConfigError):
            config.build()

    def test_from_dict(self):
        """Test parsing nested dictionaries."""
        config = SliderConfig.from_dict(
            {
                "lower_value": 1,
                "upper_value": 9,
                "step": 1,
                "scaling": {
                    "kind": "piecewise",
                    "segments": [{"internal": [0, 50], "external": [0, 10]}],
                },
                "geometry": {"track_width": 100, "thumb_width": 10},
            }
        )
        assert config.scaling.segments[0].external == [0.0, 10.0]
        assert config.geometry.thumb_width == 10.0

    @pytest.mark.parametrize(
        "data",
        [
            {"colour": "red"},
            {"lower_value": "low"},
            {"scaling": {"kind": "linear", "bounds": [0, 1]}},
            ["lower_value", 1],
        ],
    )
    def test_from_dict_rejects_bad_input(self, data):
        """Test that malformed dictionaries raise ConfigError."""
        with pytest.raises(ConfigError):
            SliderConfig.from_dict(data)


class TestScalingDict:
    """Test scaling_to_dict / scaling_from_dict."""

    def test_linear(self):
        """Test a linear scaling description."""
        data = scaling_to_dict(Scaling.linear(-1, 1))
        assert data == {"kind": "linear", "domain": [-1.0, 1.0]}
        assert scaling_from_dict(data) == Scaling.linear(-1, 1)

    def test_piecewise(self, piecewise_scaling):
        """Test a piecewise scaling description."""
        data = scaling_to_dict(piecewise_scaling)
        assert data["kind"] == "piecewise"
        assert data["segments"][3] == {"internal": [90.0, 100.0], "external": [500.0, 1000.0]}
        assert scaling_from_dict(data) == piecewise_scaling

    def test_not_a_mapping(self):
        """Test input type validation."""
        with pytest.raises(ConfigError):
            scaling_from_dict([0, 1])


class TestYamlFiles:
    """Test export_slider_config / import_slider_config."""

    def test_round_trip(self, temp_dir, piecewise_scaling):
        """Test exporting a live slider and importing it again."""
        slider = RangeSlider(
            100, 500, scaling=piecewise_scaling, step=5, track_width=300, thumb_width=12
        )
        path = temp_dir / "nested" / "slider.yaml"

        export_slider_config(slider, path)
        config = import_slider_config(path)

        assert config.to_dict() == slider.to_config().to_dict()
        assert "!!python" not in path.read_text()

        rebuilt = RangeSlider.from_config(config)
        assert rebuilt.lower_value == pytest.approx(100)
        assert rebuilt.upper_value == pytest.approx(500)

    def test_export_config_object(self, temp_dir):
        """Test exporting a plain config."""
        path = temp_dir / "config.yaml"
        export_slider_config(SliderConfig(step=0.1), path)
        assert import_slider_config(path).step == pytest.approx(0.1)

    def test_missing_file(self, temp_dir):
        """Test that a missing file raises ConfigError with its path."""
        path = temp_dir / "missing.yaml"
        with pytest.raises(ConfigError) as exc_info:
            import_slider_config(path)
        assert exc_info.value.config_path == str(path)

    def test_empty_file(self, temp_dir):
        """Test that an empty file is rejected."""
        path = temp_dir / "empty.yaml"
        path.write_text("")
        with pytest.raises(ConfigError):
            import_slider_config(path)

    def test_invalid_yaml(self, temp_dir):
        """Test that unparsable YAML is rejected."""
        path = temp_dir / "broken.yaml"
        path.write_text("lower_value: [1, 2\n")
        with pytest.raises(ConfigError):
            import_slider_config(path)

    def test_invalid_values_carry_path(self, temp_dir):
        """Test that validation errors mention the file."""
        path = temp_dir / "bad_step.yaml"
        path.write_text("step: -1\n")
        with pytest.raises(ConfigError) as exc_info:
            import_slider_config(path)
        assert exc_info.value.config_path == str(path)
