"""
Host-facing range slider model.

:class:`RangeSlider` wires the :class:`TwoThumbCoordinator` to a gesture
tracker, the thumb geometry reported by the view layer and an
:class:`EventBus`. Observers (views, haptics, the host application) subscribe
to the bus instead of being called by the model directly.
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass

import numpy as np

from src.domain.scaling import Scaling
from src.domain.value_transformer import Representation
from src.rangeslider.config.settings import GeometrySettings, ScalingConfig, SliderConfig
from src.rangeslider.interaction.events import EventBus, EventType
from src.rangeslider.interaction.gestures import GesturePhase, GestureTracker
from src.rangeslider.state.thumb_coordinator import Thumb, TwoThumbCoordinator
from src.shared.exceptions import PreconditionError
from src.shared.math import STEP_TOLERANCE, round_half_away_from_zero


logger = logging.getLogger(__name__)

DEFAULT_MAX_TICKS = 1000

_GESTURE_EVENTS = {
    GesturePhase.BEGAN: EventType.GESTURE_BEGAN,
    GesturePhase.ENDED: EventType.GESTURE_ENDED,
    GesturePhase.CANCELLED: EventType.GESTURE_CANCELLED,
}


@dataclass
class RangeSliderState:
    """Read-only summary of a slider, e.g. for printing or logging."""

    lower_value: float
    upper_value: float
    minimum_value: float
    maximum_value: float
    lower_percentage: float
    upper_percentage: float
    step: float | None

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for easy serialization."""
        return asdict(self)


def _validate_width(width: float, field_name: str) -> float:
    if not math.isfinite(width) or width < 0:
        raise PreconditionError("Width must be a non-negative number", field_name=field_name, value=width)
    return float(width)


class RangeSlider:
    """
    Two-thumb slider value model.

    Parameters
    ----------
    lower_value : float
        Initial external value of the lower thumb
    upper_value : float
        Initial external value of the upper thumb
    scaling : Scaling | None
        Mapping between the domains (default: linear over ``[0, 1]``)
    step : float | None
        Quantization granularity in the external domain
    track_width : float
        Width available for thumb travel, in points
    thumb_width : float
        Width of one thumb, in points
    event_bus : EventBus | None
        Bus to publish on (a private bus is created if omitted)
    """

    def __init__(
        self,
        lower_value: float = 0.25,
        upper_value: float = 0.75,
        *,
        scaling: Scaling | None = None,
        step: float | None = None,
        track_width: float = 0.0,
        thumb_width: float = 0.0,
        event_bus: EventBus | None = None,
    ):
        scaling = scaling if scaling is not None else Scaling.linear(0.0, 1.0)
        self._track_width = _validate_width(track_width, "track_width")
        self._thumb_width = _validate_width(thumb_width, "thumb_width")
        self.event_bus = event_bus if event_bus is not None else EventBus(name="range_slider")

        self._coordinator = TwoThumbCoordinator(
            lower_value,
            upper_value,
            scaling=scaling,
            step=step,
            minimum_separation=self._separation_for(scaling),
        )
        self._gestures = GestureTracker(self._coordinator)

        logger.debug(
            f"RangeSlider initialized: lower={self.lower_value}, upper={self.upper_value}, "
            f"step={step}"
        )

    @classmethod
    def from_config(cls, config: SliderConfig, event_bus: EventBus | None = None) -> RangeSlider:
        """Build a slider from a :class:`SliderConfig`."""
        return cls(
            config.lower_value,
            config.upper_value,
            scaling=config.build_scaling(),
            step=config.step,
            track_width=config.geometry.track_width,
            thumb_width=config.geometry.thumb_width,
            event_bus=event_bus,
        )

    def to_config(self) -> SliderConfig:
        """Describe the current slider as a :class:`SliderConfig`."""
        return SliderConfig(
            lower_value=self.lower_value,
            upper_value=self.upper_value,
            step=self.step,
            scaling=ScalingConfig.from_scaling(self.scaling),
            geometry=GeometrySettings(self._track_width, self._thumb_width),
        )

    @property
    def coordinator(self) -> TwoThumbCoordinator:
        """Underlying two-thumb state."""
        return self._coordinator

    # =========================================================================
    # Values
    # =========================================================================

    @property
    def lower_value(self) -> float:
        """External value of the lower thumb."""
        return self._coordinator.value(Thumb.LOWER)

    @lower_value.setter
    def lower_value(self, value: float) -> None:
        self.set_value(Thumb.LOWER, value)

    @property
    def upper_value(self) -> float:
        """External value of the upper thumb."""
        return self._coordinator.value(Thumb.UPPER)

    @upper_value.setter
    def upper_value(self, value: float) -> None:
        self.set_value(Thumb.UPPER, value)

    def set_value(self, thumb: Thumb, value: float) -> bool:
        """
        Set a thumb's external value. Out-of-range values are clamped.

        Returns
        -------
        bool
            True if the thumb's external value changed
        """
        previous = self._coordinator.value(thumb)
        changed = self._coordinator.set_value(thumb, value, Representation.EXTERNAL)
        if changed:
            self._notify(thumb, previous)
        return changed

    @property
    def minimum_value(self) -> float:
        """Lowest external value a thumb can take."""
        return self._coordinator.domain_lower_bound(Representation.EXTERNAL)

    @property
    def maximum_value(self) -> float:
        """Highest external value a thumb can take."""
        return self._coordinator.domain_upper_bound(Representation.EXTERNAL)

    @property
    def lower_value_as_percentage(self) -> float:
        """Lower thumb position in percent (0-100) of the track."""
        return self._coordinator.lower.percentage

    @property
    def upper_value_as_percentage(self) -> float:
        """Upper thumb position in percent (0-100) of the track."""
        return self._coordinator.upper.percentage

    def value_range(self, thumb: Thumb) -> tuple[float, float]:
        """External values the thumb can currently reach, given the other thumb."""
        return self._coordinator.transformer(thumb).value_range(Representation.EXTERNAL)

    def state(self) -> RangeSliderState:
        """Snapshot of the current values for display."""
        return RangeSliderState(
            lower_value=self.lower_value,
            upper_value=self.upper_value,
            minimum_value=self.minimum_value,
            maximum_value=self.maximum_value,
            lower_percentage=self.lower_value_as_percentage,
            upper_percentage=self.upper_value_as_percentage,
            step=self.step,
        )

    # =========================================================================
    # Configuration
    # =========================================================================

    @property
    def scaling(self) -> Scaling:
        """Mapping between the internal and external domains."""
        return self._coordinator.scaling

    @scaling.setter
    def scaling(self, scaling: Scaling) -> None:
        previous = self._values()
        self._coordinator.reconfigure(
            scaling=scaling, minimum_separation=self._separation_for(scaling)
        )
        self.event_bus.emit(EventType.SCALING_CHANGED, source="range_slider", scaling=scaling)
        self._notify_all(previous)

    @property
    def step(self) -> float | None:
        """Quantization granularity in the external domain, or None."""
        return self._coordinator.step

    @step.setter
    def step(self, step: float | None) -> None:
        previous = self._values()
        self._coordinator.step = step
        self.event_bus.emit(EventType.STEP_CHANGED, source="range_slider", step=step)
        self._notify_all(previous)

    # =========================================================================
    # Geometry
    # =========================================================================

    @property
    def track_width(self) -> float:
        return self._track_width

    @property
    def thumb_width(self) -> float:
        return self._thumb_width

    def set_geometry(self, track_width: float, thumb_width: float) -> None:
        """
        Feed the layout measurements of the view.

        Parameters
        ----------
        track_width : float
            Width available for thumb travel, in points
        thumb_width : float
            Width of one thumb, in points; the thumbs are kept at least this
            far apart
        """
        track_width = _validate_width(track_width, "track_width")
        thumb_width = _validate_width(thumb_width, "thumb_width")
        if (track_width, thumb_width) == (self._track_width, self._thumb_width):
            return

        previous = self._values()
        self._track_width = track_width
        self._thumb_width = thumb_width
        self._coordinator.minimum_separation = self.minimum_value_difference
        self.event_bus.emit(
            EventType.GEOMETRY_CHANGED,
            source="range_slider",
            track_width=track_width,
            thumb_width=thumb_width,
        )
        self._notify_all(previous)

    @property
    def value_change_per_point(self) -> float:
        """Internal-domain change for one point of thumb travel."""
        return self._change_per_point(self.scaling)

    @property
    def minimum_value_difference(self) -> float:
        """Minimum internal distance between the thumbs (one thumb width)."""
        return self._separation_for(self.scaling)

    # =========================================================================
    # Gestures
    # =========================================================================

    def drag(
        self,
        thumb: Thumb,
        translation: float,
        phase: GesturePhase = GesturePhase.CHANGED,
    ) -> bool:
        """
        Apply one pan gesture update to a thumb.

        Parameters
        ----------
        thumb : Thumb
            Thumb being dragged
        translation : float
            Horizontal pointer movement since the previous update, in points
        phase : GesturePhase
            Phase reported by the gesture recognizer

        Returns
        -------
        bool
            True if the thumb's external value changed
        """
        if not math.isfinite(translation):
            raise PreconditionError("Translation must be finite", field_name="translation", value=translation)

        previous = self._coordinator.value(thumb)
        delta = translation * self.value_change_per_point
        changed = self._gestures.handle(thumb, phase, delta)
        if changed:
            self._notify(thumb, previous)

        event_type = _GESTURE_EVENTS.get(phase)
        if event_type is not None:
            self.event_bus.emit(event_type, source="range_slider", thumb=thumb, phase=phase)
        return changed

    def is_dragging(self, thumb: Thumb) -> bool:
        """Check whether a drag is in progress on ``thumb``."""
        return self._gestures.is_tracking(thumb)

    # =========================================================================
    # Tick marks
    # =========================================================================

    def tick_marks(self, max_ticks: int = DEFAULT_MAX_TICKS) -> tuple[np.ndarray, np.ndarray]:
        """
        Step positions across the whole track.

        Parameters
        ----------
        max_ticks : int
            Upper limit on the number of ticks; denser grids are thinned to
            every n-th step

        Returns
        -------
        tuple[np.ndarray, np.ndarray]
            External values and their percent (0-100) positions. Both are
            empty when the slider has no step.
        """
        if max_ticks < 1:
            raise PreconditionError("max_ticks must be at least 1", field_name="max_ticks", value=max_ticks)

        step = self.step
        low, high = self.minimum_value, self.maximum_value
        if step is None or high < low:
            return np.empty(0), np.empty(0)

        count = int(round_half_away_from_zero((high - low) / step)) + 1
        stride = max(1, math.ceil(count / max_ticks))
        values = low + np.arange(0, count, stride, dtype=float) * step
        values = np.clip(values, low, high)

        scaling = self.scaling
        internal = scaling.to_internal_array(values)
        span = scaling.input_span
        if span == 0:
            percents = np.zeros_like(internal)
        else:
            percents = (internal - scaling.input_lower_bound) / span * 100.0
        return values, percents

    # =========================================================================
    # Helpers
    # =========================================================================

    def _change_per_point(self, scaling: Scaling) -> float:
        if self._track_width == 0:
            return 0.0
        return scaling.input_span / self._track_width

    def _separation_for(self, scaling: Scaling) -> float:
        return self._change_per_point(scaling) * self._thumb_width

    def _values(self) -> dict[Thumb, float]:
        return {thumb: self._coordinator.value(thumb) for thumb in Thumb}

    def _notify_all(self, previous: dict[Thumb, float]) -> None:
        for thumb in Thumb:
            if self._coordinator.value(thumb) != previous[thumb]:
                self._notify(thumb, previous[thumb])

    def _notify(self, thumb: Thumb, previous: float) -> None:
        value = self._coordinator.value(thumb)
        self.event_bus.emit(
            EventType.VALUE_CHANGED,
            source="range_slider",
            thumb=thumb,
            value=value,
            previous=previous,
        )

        edge = None
        if math.isclose(value, self.minimum_value, rel_tol=STEP_TOLERANCE, abs_tol=STEP_TOLERANCE):
            edge = "minimum"
        elif math.isclose(value, self.maximum_value, rel_tol=STEP_TOLERANCE, abs_tol=STEP_TOLERANCE):
            edge = "maximum"
        if edge is not None:
            logger.debug(f"{thumb.value} thumb reached {edge} value {value}")
            self.event_bus.emit(
                EventType.BOUNDARY_REACHED,
                source="range_slider",
                thumb=thumb,
                value=value,
                edge=edge,
            )


__all__ = ["DEFAULT_MAX_TICKS", "RangeSlider", "RangeSliderState"]
