"""
Pan gesture handling for the slider thumbs.

This module turns the phases of a pan gesture on one thumb into calls on the
:class:`TwoThumbCoordinator`. Recognising the gesture and converting pointer
translations into internal units both happen outside; this module only sees
internal-domain deltas.
"""

from __future__ import annotations

import logging
from enum import Enum, auto

from src.domain.value_transformer import Representation
from src.rangeslider.state.thumb_coordinator import Thumb, TwoThumbCoordinator


logger = logging.getLogger(__name__)


class GesturePhase(Enum):
    """Phases reported by a pan gesture recognizer."""

    BEGAN = auto()
    CHANGED = auto()
    ENDED = auto()
    CANCELLED = auto()
    FAILED = auto()


class GestureTracker:
    """
    Applies pan gesture phases to the thumbs of a coordinator.

    Deltas that are too small to move a stepped thumb are not lost: the part
    of each delta that did not turn into movement is carried over to the next
    update, so the thumb keeps following the pointer. The carry is dropped
    whenever the thumb is pinned against a bound in the direction of travel.
    """

    def __init__(self, coordinator: TwoThumbCoordinator):
        """
        Initialize gesture tracker.

        Parameters
        ----------
        coordinator : TwoThumbCoordinator
            Coordinator owning the thumb values
        """
        self.coordinator = coordinator
        self._pending: dict[Thumb, float] = {}

    def is_tracking(self, thumb: Thumb) -> bool:
        """Check whether a gesture is in progress on ``thumb``."""
        return thumb in self._pending

    def handle(self, thumb: Thumb, phase: GesturePhase, delta: float = 0.0) -> bool:
        """
        Process one gesture update.

        Parameters
        ----------
        thumb : Thumb
            Thumb the gesture acts on
        phase : GesturePhase
            Current recognizer phase
        delta : float
            Translation since the previous update, in internal units

        Returns
        -------
        bool
            True if the thumb's external value changed
        """
        if phase is GesturePhase.BEGAN:
            self.coordinator.begin(thumb)
            self._pending[thumb] = 0.0
            return self._apply(thumb, delta) if delta else False

        if phase is GesturePhase.CHANGED:
            return self._apply(thumb, delta)

        if phase is GesturePhase.ENDED:
            changed = self._apply(thumb, delta)
            self._finish(thumb)
            return changed

        if phase is GesturePhase.CANCELLED:
            self._pending.pop(thumb, None)
            changed = self.coordinator.cancel(thumb)
            logger.debug(f"Gesture on {thumb.value} thumb cancelled (reverted={changed})")
            return changed

        # FAILED: nothing was applied that needs undoing
        self._finish(thumb)
        return False

    def _apply(self, thumb: Thumb, delta: float) -> bool:
        pending = self._pending.get(thumb, 0.0) + delta
        if pending == 0:
            return False

        transformer = self.coordinator.transformer(thumb)
        before = transformer.value(Representation.INTERNAL)
        changed = self.coordinator.propose_change(thumb, pending)
        moved = transformer.value(Representation.INTERNAL) - before

        remaining = pending - moved
        if (pending > 0 and transformer.is_at_upper_bound()) or (
            pending < 0 and transformer.is_at_lower_bound()
        ):
            remaining = 0.0

        self._pending[thumb] = remaining
        return changed

    def _finish(self, thumb: Thumb) -> None:
        self._pending.pop(thumb, None)
        self.coordinator.end(thumb)
