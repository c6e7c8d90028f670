"""Configuration module for the range slider."""

from src.rangeslider.config.settings import (
    GeometrySettings,
    ScalingConfig,
    SegmentConfig,
    SliderConfig,
)


__all__ = [
    "GeometrySettings",
    "ScalingConfig",
    "SegmentConfig",
    "SliderConfig",
]
