"""
Configuration dataclasses for the range slider.

This module provides type-safe configuration for building a slider: initial
values, the scaling between domains, the step and the thumb geometry. The
dataclasses hold plain numbers and lists only, so they serialize to YAML
without custom tags.
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass, field
from typing import Any

from src.domain.scaling import Interval, LinearScaling, PiecewiseScaling, Scaling
from src.shared.exceptions import ConfigError, PreconditionError


logger = logging.getLogger(__name__)


SCALING_KINDS = ("linear", "piecewise")


def _pair(value: Any, field_name: str) -> list[float]:
    """Coerce a two-element sequence into ``[lower, upper]`` floats."""
    try:
        lower, upper = value
        return [float(lower), float(upper)]
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Expected a [lower, upper] pair, got {value!r}", field_name=field_name) from e


@dataclass
class SegmentConfig:
    """One ``internal -> external`` interval pair of a piecewise scaling."""

    internal: list[float]
    external: list[float]

    def __post_init__(self):
        self.internal = _pair(self.internal, "internal")
        self.external = _pair(self.external, "external")


@dataclass
class ScalingConfig:
    """Serializable description of a :class:`Scaling`.

    Attributes
    ----------
    kind : str
        ``"linear"`` or ``"piecewise"``
    domain : list[float]
        ``[lower, upper]`` of a linear scaling
    segments : list[SegmentConfig]
        Ordered segments of a piecewise scaling
    """

    kind: str = "linear"
    domain: list[float] = field(default_factory=lambda: [0.0, 1.0])
    segments: list[SegmentConfig] = field(default_factory=list)

    def __post_init__(self):
        """Validate settings after initialization."""
        if self.kind not in SCALING_KINDS:
            raise ConfigError(
                f"Unknown scaling kind {self.kind!r}, expected one of {SCALING_KINDS}",
                field_name="kind",
            )
        self.domain = _pair(self.domain, "domain")
        self.segments = [
            segment if isinstance(segment, SegmentConfig) else SegmentConfig(**segment)
            for segment in self.segments
        ]
        if self.kind == "piecewise" and not self.segments:
            raise ConfigError("Piecewise scaling needs at least one segment", field_name="segments")

    def build(self) -> Scaling:
        """Create the described scaling."""
        try:
            if self.kind == "linear":
                return Scaling.linear(*self.domain)
            return Scaling.piecewise(
                (segment.internal, segment.external) for segment in self.segments
            )
        except PreconditionError as e:
            raise ConfigError(f"Invalid scaling: {e}", field_name="scaling") from e

    @classmethod
    def from_scaling(cls, scaling: Scaling) -> ScalingConfig:
        """Describe an existing scaling."""
        if isinstance(scaling, LinearScaling):
            return cls(kind="linear", domain=_interval_list(scaling.domain))
        if isinstance(scaling, PiecewiseScaling):
            return cls(
                kind="piecewise",
                segments=[
                    SegmentConfig(_interval_list(s.internal), _interval_list(s.external))
                    for s in scaling.segments
                ],
            )
        raise ConfigError(f"Unsupported scaling type {type(scaling).__name__}", field_name="scaling")

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary, omitting fields unused by ``kind``."""
        if self.kind == "linear":
            return {"kind": self.kind, "domain": list(self.domain)}
        return {"kind": self.kind, "segments": [asdict(s) for s in self.segments]}


@dataclass
class GeometrySettings:
    """Thumb travel geometry fed in by the view layer (abstract units)."""

    track_width: float = 0.0  # Width available for thumb travel
    thumb_width: float = 0.0  # Visual thumb width, defines the minimum separation

    def __post_init__(self):
        """Validate settings after initialization."""
        for name in ("track_width", "thumb_width"):
            value = float(getattr(self, name))
            if not math.isfinite(value) or value < 0:
                raise ConfigError(f"{name} must be a non-negative number, got {value}", field_name=name)
            setattr(self, name, value)

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for easy serialization."""
        return asdict(self)


@dataclass
class SliderConfig:
    """Complete configuration of a range slider.

    Attributes
    ----------
    lower_value : float
        Initial external value of the lower thumb
    upper_value : float
        Initial external value of the upper thumb
    step : float | None
        Quantization granularity in the external domain
    scaling : ScalingConfig
        Mapping between internal and external domains
    geometry : GeometrySettings
        Track and thumb widths
    """

    lower_value: float = 0.25
    upper_value: float = 0.75
    step: float | None = None
    scaling: ScalingConfig = field(default_factory=ScalingConfig)
    geometry: GeometrySettings = field(default_factory=GeometrySettings)

    def __post_init__(self):
        """Validate settings after initialization."""
        if self.step is not None:
            self.step = float(self.step)
            if not math.isfinite(self.step) or self.step <= 0:
                raise ConfigError(f"step must be positive, got {self.step}", field_name="step")
        if isinstance(self.scaling, dict):
            self.scaling = ScalingConfig(**self.scaling)
        if isinstance(self.geometry, dict):
            self.geometry = GeometrySettings(**self.geometry)
        self.lower_value = float(self.lower_value)
        self.upper_value = float(self.upper_value)

    def build_scaling(self) -> Scaling:
        """Create the configured scaling."""
        return self.scaling.build()

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for easy serialization."""
        return {
            "lower_value": self.lower_value,
            "upper_value": self.upper_value,
            "step": self.step,
            "scaling": self.scaling.to_dict(),
            "geometry": self.geometry.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SliderConfig:
        """
        Build a config from a plain dictionary.

        Raises
        ------
        ConfigError
            If the dictionary has unknown keys or invalid values
        """
        if not isinstance(data, dict):
            raise ConfigError(f"Expected a mapping, got {type(data).__name__}")

        known = {"lower_value", "upper_value", "step", "scaling", "geometry"}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown config keys: {sorted(unknown)}")

        try:
            return cls(**data)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid config: {e}") from e


def _interval_list(interval: Interval) -> list[float]:
    return [interval.lower_bound, interval.upper_bound]


__all__ = [
    "GeometrySettings",
    "ScalingConfig",
    "SegmentConfig",
    "SliderConfig",
]
