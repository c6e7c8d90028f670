"""Numeric state of a single slider thumb.

A :class:`ValueTransformer` stores exactly one number, the *internal* value,
and exposes it in both representations through its :class:`Scaling`. Every
mutator ends with an explicit call to :meth:`ValueTransformer.sanitize`,
which clamps the value into the active percent window and snaps it onto the
external step grid.

Example
-------
>>> transformer = ValueTransformer(50, step=0.1, scaling=Scaling.linear(0, 100))
>>> transformer.set(60.09, Representation.EXTERNAL)
>>> transformer.value(Representation.EXTERNAL)  # 60.1
>>> transformer.maximum_percent = 40
>>> transformer.value(Representation.INTERNAL)  # 40.0
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum

from src.domain.scaling import Scaling
from src.shared.exceptions import PreconditionError
from src.shared.math import RoundingRule, clamp, round_to_step


logger = logging.getLogger(__name__)


class Representation(Enum):
    """Domain a value is expressed in."""

    INTERNAL = "internal"  # Normalized domain used for geometry and percents
    EXTERNAL = "external"  # Domain the host application reads and writes


@dataclass(frozen=True)
class TransformerSnapshot:
    """Captured thumb value, used to revert a cancelled gesture."""

    internal_value: float


def _validate_step(step: float | None) -> float | None:
    if step is None:
        return None
    if not math.isfinite(step) or step <= 0:
        raise PreconditionError("Step must be greater than 0", field_name="step", value=step)
    return float(step)


def _validate_finite(value: float, field_name: str) -> float:
    if not math.isfinite(value):
        raise PreconditionError("Value must be finite", field_name=field_name, value=value)
    return float(value)


class ValueTransformer:
    """
    Owns one thumb's value, step and percent window.

    The internal value is the single source of truth. External reads go
    through the scaling; external writes are clamped into the external domain,
    converted and then sanitized, so no write is ever rejected for being out
    of range.

    Parameters
    ----------
    value : float
        Initial value
    representation : Representation
        Domain ``value`` is expressed in (default EXTERNAL)
    step : float | None
        Quantization granularity in the external domain
    scaling : Scaling
        Mapping between the internal and external domains
    """

    def __init__(
        self,
        value: float,
        representation: Representation = Representation.EXTERNAL,
        step: float | None = None,
        *,
        scaling: Scaling,
    ):
        self._scaling = scaling
        self._step = _validate_step(step)
        self._minimum_percent = 0.0
        self._maximum_percent = 100.0
        self._internal_value = self._to_internal(value, representation)
        self.sanitize()

    def __repr__(self) -> str:
        return (
            f"ValueTransformer(internal={self._internal_value}, step={self._step}, "
            f"window=[{self._minimum_percent}, {self._maximum_percent}])"
        )

    # =========================================================================
    # Reading
    # =========================================================================

    def value(self, representation: Representation = Representation.EXTERNAL) -> float:
        """
        Current value in the requested representation.

        External reads are re-snapped to the nearest step multiple, which
        removes floating-point noise picked up by the scaling round trip.
        A snap that would leave the window is skipped, so a window holding
        no step multiple reads back the unquantized value.
        """
        if representation is Representation.INTERNAL:
            return self._internal_value

        external = self._scaling.to_external(self._internal_value)
        if self._step is None:
            return external

        snapped = round_to_step(external, self._step, RoundingRule.NEAREST)
        if self.lower_bound(Representation.EXTERNAL) <= snapped <= self.upper_bound(
            Representation.EXTERNAL
        ):
            return snapped
        return external

    def lower_bound(self, representation: Representation = Representation.INTERNAL) -> float:
        """
        Lowest value allowed by the current window.

        The external bound is rounded up onto the step grid, so the reported
        bound is always reachable.
        """
        internal = self._internal_bound(self._minimum_percent)
        if representation is Representation.INTERNAL:
            return internal
        external = self._scaling.to_external(internal)
        if self._step is not None:
            external = round_to_step(external, self._step, RoundingRule.UP)
        return external

    def upper_bound(self, representation: Representation = Representation.INTERNAL) -> float:
        """
        Highest value allowed by the current window.

        The external bound is rounded down onto the step grid.
        """
        internal = self._internal_bound(self._maximum_percent)
        if representation is Representation.INTERNAL:
            return internal
        external = self._scaling.to_external(internal)
        if self._step is not None:
            external = round_to_step(external, self._step, RoundingRule.DOWN)
        return external

    def value_range(
        self, representation: Representation = Representation.INTERNAL
    ) -> tuple[float, float]:
        """``(lower_bound, upper_bound)`` in the requested representation."""
        return self.lower_bound(representation), self.upper_bound(representation)

    @property
    def percentage(self) -> float:
        """Position of the value as a percent (0-100) of the full internal domain."""
        span = self._scaling.input_span
        if span == 0:
            return 0.0
        return (self._internal_value - self._scaling.input_lower_bound) / span * 100.0

    def is_at_lower_bound(self) -> bool:
        """Whether the thumb already sits on the lowest reachable value."""
        if not self._window_holds_step():
            return self._internal_value <= self.lower_bound(Representation.INTERNAL)
        return self.value(Representation.EXTERNAL) <= self.lower_bound(Representation.EXTERNAL)

    def is_at_upper_bound(self) -> bool:
        """Whether the thumb already sits on the highest reachable value."""
        if not self._window_holds_step():
            return self._internal_value >= self.upper_bound(Representation.INTERNAL)
        return self.value(Representation.EXTERNAL) >= self.upper_bound(Representation.EXTERNAL)

    # =========================================================================
    # Mutation
    # =========================================================================

    def set(self, value: float, representation: Representation = Representation.EXTERNAL) -> None:
        """Store a new value, then sanitize it. Out-of-range values are clamped."""
        self._internal_value = self._to_internal(value, representation)
        self.sanitize()

    @property
    def step(self) -> float | None:
        """Quantization granularity in the external domain, or None."""
        return self._step

    @step.setter
    def step(self, step: float | None) -> None:
        self._step = _validate_step(step)
        self.sanitize()

    @property
    def scaling(self) -> Scaling:
        """Mapping between the internal and external domains."""
        return self._scaling

    @scaling.setter
    def scaling(self, scaling: Scaling) -> None:
        # Keep the value at the same fraction of the domain span
        old = self._scaling
        if old.input_span == 0:
            fraction = 0.0
        else:
            fraction = (self._internal_value - old.input_lower_bound) / old.input_span

        self._scaling = scaling
        self._internal_value = scaling.input_lower_bound + fraction * scaling.input_span
        self.sanitize()

    @property
    def minimum_percent(self) -> float:
        """Lower edge of the active window, in percent of the internal domain."""
        return self._minimum_percent

    @minimum_percent.setter
    def minimum_percent(self, percent: float) -> None:
        self.set_window(percent, self._maximum_percent)

    @property
    def maximum_percent(self) -> float:
        """Upper edge of the active window, in percent of the internal domain."""
        return self._maximum_percent

    @maximum_percent.setter
    def maximum_percent(self, percent: float) -> None:
        self.set_window(self._minimum_percent, percent)

    def set_window(self, minimum_percent: float, maximum_percent: float) -> bool:
        """
        Replace both window edges at once, then sanitize.

        Parameters
        ----------
        minimum_percent : float
            New lower edge, in ``[0, maximum_percent]``
        maximum_percent : float
            New upper edge, in ``[minimum_percent, 100]``

        Returns
        -------
        bool
            True if the value had to move to stay inside the new window

        Raises
        ------
        PreconditionError
            If ``0 <= minimum_percent <= maximum_percent <= 100`` does not hold
        """
        if not 0.0 <= minimum_percent <= 100.0:
            raise PreconditionError(
                "Percent must be in the range 0...100",
                field_name="minimum_percent",
                value=minimum_percent,
            )
        if not 0.0 <= maximum_percent <= 100.0:
            raise PreconditionError(
                "Percent must be in the range 0...100",
                field_name="maximum_percent",
                value=maximum_percent,
            )
        if minimum_percent > maximum_percent:
            raise PreconditionError(
                f"Minimum percent {minimum_percent} exceeds maximum percent {maximum_percent}",
                field_name="minimum_percent",
                value=minimum_percent,
            )

        self._minimum_percent = float(minimum_percent)
        self._maximum_percent = float(maximum_percent)
        return self.sanitize()

    def snapshot(self) -> TransformerSnapshot:
        """Capture the current value."""
        return TransformerSnapshot(internal_value=self._internal_value)

    def restore(self, snapshot: TransformerSnapshot) -> None:
        """Return to a captured value, sanitized against the current window."""
        self.set(snapshot.internal_value, Representation.INTERNAL)

    def sanitize(self) -> bool:
        """
        Restore the invariant after a mutation.

        The value is clamped into the window first. The rounding direction
        of the following step snap depends on which bound triggered the
        clamp, so a quantized value can never land just outside a tightened
        window (0.99 under a maximum of 1.00 with a step of 0.02 resolves to
        1.00, not 1.02).

        Returns
        -------
        bool
            True if the stored value changed
        """
        previous = self._internal_value
        value = previous
        lower = self.lower_bound(Representation.INTERNAL)
        upper = self.upper_bound(Representation.INTERNAL)

        if value > upper:
            value = upper
            rule = RoundingRule.DOWN
        elif value < lower:
            value = lower
            rule = RoundingRule.UP
        else:
            rule = RoundingRule.NEAREST

        if self._step is not None:
            external = round_to_step(self._scaling.to_external(value), self._step, rule)
            external_lower = self.lower_bound(Representation.EXTERNAL)
            external_upper = self.upper_bound(Representation.EXTERNAL)

            if external > external_upper:
                external -= self._step
            elif external < external_lower:
                external += self._step

            if external_lower <= external <= external_upper:
                value = self._scaling.to_internal(external)
            else:
                # Window narrower than one step: keep the unquantized clamp
                logger.debug(f"No step multiple fits window [{lower}, {upper}], keeping {value}")

            value = clamp(value, lower, upper)

        if value == previous:
            return False

        logger.debug(f"Sanitized internal value {previous} -> {value}")
        self._internal_value = value
        return True

    # =========================================================================
    # Helpers
    # =========================================================================

    def _window_holds_step(self) -> bool:
        # Inward-rounded external bounds cross when no multiple fits
        return self.lower_bound(Representation.EXTERNAL) <= self.upper_bound(
            Representation.EXTERNAL
        )

    def _internal_bound(self, percent: float) -> float:
        scaling = self._scaling
        bound = scaling.input_lower_bound + scaling.input_span * percent / 100.0
        return clamp(bound, scaling.input_lower_bound, scaling.input_upper_bound)

    def _to_internal(self, value: float, representation: Representation) -> float:
        value = _validate_finite(value, "value")
        if representation is Representation.INTERNAL:
            return value
        # Clamp first so the lookup always finds a segment
        external = clamp(
            value, self._scaling.output_lower_bound, self._scaling.output_upper_bound
        )
        return self._scaling.to_internal(external)


__all__ = [
    "Representation",
    "TransformerSnapshot",
    "ValueTransformer",
]
