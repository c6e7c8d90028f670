"""
Cross-constrained state of the two slider thumbs.

This module keeps the lower and upper :class:`ValueTransformer` from crossing
each other. Each thumb's percent window is derived from the live position of
the other thumb plus a minimum separation supplied by the geometry layer.
"""

from __future__ import annotations

import logging
import math
from enum import Enum

from src.domain.scaling import Scaling
from src.domain.value_transformer import Representation, TransformerSnapshot, ValueTransformer
from src.shared.exceptions import PreconditionError
from src.shared.math import RoundingRule, clamp, round_to_step


logger = logging.getLogger(__name__)

# Each pass can only move a thumb towards a valid configuration, so windows
# settle after two passes; the extra passes absorb floating-point jitter.
_MAX_WINDOW_PASSES = 4


class Thumb(Enum):
    """The two handles of a range slider."""

    LOWER = "lower"
    UPPER = "upper"


class TwoThumbCoordinator:
    """
    Owns the lower and upper thumb values and keeps their windows current.

    This class is responsible for:
    - Sharing one scaling and step between both thumbs
    - Deriving each thumb's percent window from the other thumb's position
    - Applying proposed internal deltas and reporting visible changes
    - Snapshotting a thumb at gesture start and reverting on cancel

    Parameters
    ----------
    lower_value : float
        Initial value of the lower thumb
    upper_value : float
        Initial value of the upper thumb
    scaling : Scaling
        Mapping shared by both thumbs
    step : float | None
        Quantization granularity in the external domain
    minimum_separation : float
        Minimum distance between the thumbs, in internal units
    representation : Representation
        Domain the initial values are expressed in (default EXTERNAL)
    """

    def __init__(
        self,
        lower_value: float,
        upper_value: float,
        *,
        scaling: Scaling,
        step: float | None = None,
        minimum_separation: float = 0.0,
        representation: Representation = Representation.EXTERNAL,
    ):
        self._minimum_separation = self._validate_separation(minimum_separation)
        self._lower = ValueTransformer(lower_value, representation, step, scaling=scaling)
        self._upper = ValueTransformer(upper_value, representation, step, scaling=scaling)
        self._snapshots: dict[Thumb, TransformerSnapshot] = {}
        self.update_window()

        logger.debug(
            f"TwoThumbCoordinator initialized: lower={self._lower}, upper={self._upper}"
        )

    # =========================================================================
    # Access
    # =========================================================================

    @property
    def lower(self) -> ValueTransformer:
        """Transformer of the lower thumb."""
        return self._lower

    @property
    def upper(self) -> ValueTransformer:
        """Transformer of the upper thumb."""
        return self._upper

    def transformer(self, thumb: Thumb) -> ValueTransformer:
        """Transformer of the given thumb."""
        return self._lower if thumb is Thumb.LOWER else self._upper

    def value(self, thumb: Thumb, representation: Representation = Representation.EXTERNAL) -> float:
        """Current value of a thumb."""
        return self.transformer(thumb).value(representation)

    def domain_lower_bound(self, representation: Representation = Representation.EXTERNAL) -> float:
        """Lowest value any thumb can take, ignoring the other thumb."""
        scaling = self.scaling
        if representation is Representation.INTERNAL:
            return scaling.input_lower_bound
        bound = scaling.to_external(scaling.input_lower_bound)
        if self.step is not None:
            bound = round_to_step(bound, self.step, RoundingRule.UP)
        return bound

    def domain_upper_bound(self, representation: Representation = Representation.EXTERNAL) -> float:
        """Highest value any thumb can take, ignoring the other thumb."""
        scaling = self.scaling
        if representation is Representation.INTERNAL:
            return scaling.input_upper_bound
        bound = scaling.to_external(scaling.input_upper_bound)
        if self.step is not None:
            bound = round_to_step(bound, self.step, RoundingRule.DOWN)
        return bound

    @property
    def separation_percent(self) -> float:
        """Minimum separation expressed as a percent of the internal domain."""
        span = self.scaling.input_span
        if span == 0:
            return 0.0
        percent = self._minimum_separation / span * 100.0
        if percent > 100.0:
            logger.warning(
                f"Minimum separation {self._minimum_separation} exceeds the domain span {span}"
            )
        return clamp(percent, 0.0, 100.0)

    # =========================================================================
    # Shared configuration
    # =========================================================================

    @property
    def scaling(self) -> Scaling:
        """Mapping shared by both thumbs."""
        return self._lower.scaling

    @scaling.setter
    def scaling(self, scaling: Scaling) -> None:
        self.reconfigure(scaling=scaling)

    @property
    def step(self) -> float | None:
        """Quantization granularity shared by both thumbs."""
        return self._lower.step

    @step.setter
    def step(self, step: float | None) -> None:
        self._lower.step = step
        self._upper.step = step
        self.update_window()

    @property
    def minimum_separation(self) -> float:
        """Minimum distance between the thumbs, in internal units."""
        return self._minimum_separation

    @minimum_separation.setter
    def minimum_separation(self, separation: float) -> None:
        self.reconfigure(minimum_separation=separation)

    def reconfigure(
        self,
        *,
        scaling: Scaling | None = None,
        minimum_separation: float | None = None,
    ) -> None:
        """
        Replace the scaling and the separation together.

        The separation is expressed in internal units of the new scaling.
        Windows are re-derived once, after both are in place, so a
        separation still sized for the old domain never pushes the thumbs.

        Parameters
        ----------
        scaling : Scaling | None
            New mapping for both thumbs, or None to keep the current one
        minimum_separation : float | None
            New separation in internal units, or None to keep the current one
        """
        if minimum_separation is not None:
            self._minimum_separation = self._validate_separation(minimum_separation)
        if scaling is not None:
            self._lower.scaling = scaling
            self._upper.scaling = scaling
        self.update_window()

    # =========================================================================
    # Mutation
    # =========================================================================

    def update_window(self) -> None:
        """
        Re-derive both percent windows from the current thumb positions.

        Both targets are computed before either transformer is touched, so
        the result does not depend on which thumb is updated first. If the
        new windows move a thumb, the windows are derived again until both
        thumbs are at rest.
        """
        for _ in range(_MAX_WINDOW_PASSES):
            separation = self.separation_percent
            lower_target = clamp(
                self._upper.percentage - separation, self._lower.minimum_percent, 100.0
            )
            upper_target = clamp(
                self._lower.percentage + separation, 0.0, self._upper.maximum_percent
            )

            lower_moved = self._lower.set_window(self._lower.minimum_percent, lower_target)
            upper_moved = self._upper.set_window(upper_target, self._upper.maximum_percent)
            if not (lower_moved or upper_moved):
                return

        logger.debug(f"Thumb windows still moving after {_MAX_WINDOW_PASSES} passes")

    def set_value(
        self,
        thumb: Thumb,
        value: float,
        representation: Representation = Representation.EXTERNAL,
    ) -> bool:
        """
        Set a thumb's value directly.

        Returns
        -------
        bool
            True if the thumb's external value changed
        """
        transformer = self.transformer(thumb)
        previous = transformer.value(Representation.EXTERNAL)
        transformer.set(value, representation)
        self.update_window()
        return transformer.value(Representation.EXTERNAL) != previous

    def propose_change(self, thumb: Thumb, delta: float) -> bool:
        """
        Move a thumb by an internal-domain delta.

        A zero delta, or a delta pushing a thumb further past a bound it
        already occupies, is rejected before any mutation.

        Parameters
        ----------
        thumb : Thumb
            Thumb to move
        delta : float
            Change in internal units

        Returns
        -------
        bool
            True if the thumb's external value changed
        """
        if delta == 0:
            return False

        transformer = self.transformer(thumb)
        if delta > 0 and transformer.is_at_upper_bound():
            logger.debug(f"Rejected {thumb.value} delta {delta}: already at upper bound")
            return False
        if delta < 0 and transformer.is_at_lower_bound():
            logger.debug(f"Rejected {thumb.value} delta {delta}: already at lower bound")
            return False

        return self.set_value(
            thumb,
            transformer.value(Representation.INTERNAL) + delta,
            Representation.INTERNAL,
        )

    def begin(self, thumb: Thumb) -> None:
        """Capture a thumb's value at the start of a gesture."""
        self._snapshots[thumb] = self.transformer(thumb).snapshot()

    def end(self, thumb: Thumb) -> None:
        """Discard the snapshot of a finished gesture."""
        self._snapshots.pop(thumb, None)

    def cancel(self, thumb: Thumb) -> bool:
        """
        Revert a thumb to the value captured by :meth:`begin`.

        Returns
        -------
        bool
            True if the thumb's external value changed
        """
        snapshot = self._snapshots.pop(thumb, None)
        if snapshot is None:
            logger.debug(f"No snapshot to restore for {thumb.value} thumb")
            return False

        transformer = self.transformer(thumb)
        previous = transformer.value(Representation.EXTERNAL)
        transformer.restore(snapshot)
        self.update_window()
        return transformer.value(Representation.EXTERNAL) != previous

    @staticmethod
    def _validate_separation(separation: float) -> float:
        if not math.isfinite(separation) or separation < 0:
            raise PreconditionError(
                "Minimum separation must be a non-negative number",
                field_name="minimum_separation",
                value=separation,
            )
        return float(separation)


__all__ = ["Thumb", "TwoThumbCoordinator"]
