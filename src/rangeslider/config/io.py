"""
Configuration import/export for range sliders.

Exports and imports slider configurations (values, scaling, step, geometry)
to/from YAML files.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from src.domain.scaling import Scaling
from src.rangeslider.config.settings import ScalingConfig, SliderConfig
from src.shared.exceptions import ConfigError

if TYPE_CHECKING:
    from src.rangeslider.core.slider import RangeSlider

logger = logging.getLogger(__name__)


def _plain(obj: Any) -> Any:
    """
    Recursively convert tuples into lists for YAML serialization.

    ``yaml.safe_dump`` refuses Python-specific types, so everything written
    must be made of dicts, lists and scalars.
    """
    if isinstance(obj, dict):
        return {key: _plain(value) for key, value in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_plain(item) for item in obj]
    return obj


def scaling_to_dict(scaling: Scaling) -> dict[str, object]:
    """Describe a scaling as a plain dictionary."""
    return ScalingConfig.from_scaling(scaling).to_dict()


def scaling_from_dict(data: dict[str, Any]) -> Scaling:
    """
    Build a scaling from the output of :func:`scaling_to_dict`.

    Raises
    ------
    ConfigError
        If the dictionary does not describe a valid scaling
    """
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a mapping, got {type(data).__name__}", field_name="scaling")
    try:
        return ScalingConfig(**data).build()
    except TypeError as e:
        raise ConfigError(f"Invalid scaling: {e}", field_name="scaling") from e


def export_slider_config(
    slider: RangeSlider | SliderConfig,
    output_path: Path | str,
) -> None:
    """
    Export a slider configuration to a YAML file.

    Parameters
    ----------
    slider : RangeSlider | SliderConfig
        Live slider (its current values are exported) or a config
    output_path : Path | str
        Path to output YAML file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    config = slider if isinstance(slider, SliderConfig) else slider.to_config()
    export_data = _plain(config.to_dict())

    with open(output_path, "w") as f:
        yaml.safe_dump(export_data, f, default_flow_style=False, sort_keys=False)

    logger.info(f"Exported slider config to {output_path}")


def import_slider_config(input_path: Path | str) -> SliderConfig:
    """
    Import a slider configuration from a YAML file.

    Parameters
    ----------
    input_path : Path | str
        Path to input YAML file

    Returns
    -------
    SliderConfig
        Parsed and validated configuration

    Raises
    ------
    ConfigError
        If the file is missing, not valid YAML, or describes an invalid slider
    """
    input_path = Path(input_path)

    if not input_path.exists():
        raise ConfigError("Config file not found", config_path=str(input_path))

    try:
        with open(input_path, "r") as f:
            import_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML: {e}", config_path=str(input_path)) from e

    if not import_data:
        raise ConfigError("Empty config file", config_path=str(input_path))

    try:
        config = SliderConfig.from_dict(import_data)
    except ConfigError as e:
        raise ConfigError(str(e), config_path=str(input_path)) from e

    logger.info(f"Imported slider config from {input_path}")
    return config


__all__ = [
    "export_slider_config",
    "import_slider_config",
    "scaling_from_dict",
    "scaling_to_dict",
]
