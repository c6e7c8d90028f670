"""Scaling between the internal and external value domains.

A slider thumb stores a single internal value. The internal domain is what
geometry and percent-based layout work in; the external domain is what the
host application reads and writes. A :class:`Scaling` describes how one maps
onto the other.

Two variants exist:

- :class:`LinearScaling`: both domains are the same interval (identity).
- :class:`PiecewiseScaling`: an ordered list of segments, each mapping an
  internal interval onto an external interval by linear interpolation.

Example
-------
>>> scaling = Scaling.piecewise([
...     ((0, 50), (0, 100)),
...     ((50, 100), (100, 1000)),
... ])
>>> scaling.to_external(75)  # 550.0
>>> scaling.to_internal(100)  # 50.0
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import numpy as np

from src.shared.exceptions import PreconditionError, ScalingLookupError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Interval:
    """Closed interval ``[lower_bound, upper_bound]``.

    Attributes
    ----------
    lower_bound : float
        Inclusive lower end
    upper_bound : float
        Inclusive upper end, never below ``lower_bound``
    """

    lower_bound: float
    upper_bound: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "lower_bound", float(self.lower_bound))
        object.__setattr__(self, "upper_bound", float(self.upper_bound))
        if self.lower_bound > self.upper_bound:
            raise PreconditionError(
                f"Interval lower bound {self.lower_bound} exceeds upper bound {self.upper_bound}",
                field_name="lower_bound",
                value=self.lower_bound,
            )

    @property
    def span(self) -> float:
        """Distance between the two bounds."""
        return self.upper_bound - self.lower_bound

    def contains(self, value: float) -> bool:
        """Check whether ``value`` lies inside the interval (inclusive)."""
        return self.lower_bound <= value <= self.upper_bound

    def map_to(self, value: float, target: Interval) -> float:
        """Linearly map ``value`` from this interval onto ``target``.

        A zero-width source interval maps everything to ``target.lower_bound``.
        """
        if self.span == 0:
            return target.lower_bound
        fraction = (value - self.lower_bound) / self.span
        return target.lower_bound + fraction * target.span

    @classmethod
    def coerce(cls, value: Interval | Sequence[float]) -> Interval:
        """Build an interval from an ``Interval`` or a ``(lower, upper)`` pair."""
        if isinstance(value, Interval):
            return value
        lower, upper = value
        return cls(lower, upper)


@dataclass(frozen=True)
class Segment:
    """One ``internal -> external`` pair of a piecewise scaling."""

    internal: Interval
    external: Interval


class Scaling(ABC):
    """Immutable mapping between the internal and external domains.

    All operations are pure. Lookups for values outside every segment of a
    piecewise scaling raise :class:`ScalingLookupError`; they are never
    silently clamped.
    """

    @property
    @abstractmethod
    def input_lower_bound(self) -> float:
        """Lowest value of the internal domain."""

    @property
    @abstractmethod
    def input_upper_bound(self) -> float:
        """Highest value of the internal domain."""

    @property
    @abstractmethod
    def output_lower_bound(self) -> float:
        """Lowest value of the external domain."""

    @property
    @abstractmethod
    def output_upper_bound(self) -> float:
        """Highest value of the external domain."""

    @property
    def input_span(self) -> float:
        """Width of the internal domain."""
        return self.input_upper_bound - self.input_lower_bound

    @abstractmethod
    def to_external(self, internal_value: float) -> float:
        """Transform an internal value into the external domain."""

    @abstractmethod
    def to_internal(self, external_value: float) -> float:
        """Transform an external value into the internal domain."""

    @abstractmethod
    def to_external_array(self, internal_values: np.ndarray | Sequence[float]) -> np.ndarray:
        """Vectorized :meth:`to_external`."""

    @abstractmethod
    def to_internal_array(self, external_values: np.ndarray | Sequence[float]) -> np.ndarray:
        """Vectorized :meth:`to_internal`."""

    # =========================================================================
    # Factory Methods
    # =========================================================================

    @staticmethod
    def linear(lower_bound: float, upper_bound: float) -> LinearScaling:
        """Create an identity scaling over ``[lower_bound, upper_bound]``."""
        return LinearScaling(Interval(lower_bound, upper_bound))

    @staticmethod
    def piecewise(
        segments: Iterable[Segment | tuple[Sequence[float], Sequence[float]]],
    ) -> PiecewiseScaling:
        """Create a piecewise scaling from segments or ``(internal, external)`` pairs.

        Parameters
        ----------
        segments : Iterable
            Either :class:`Segment` instances or pairs of ``(lower, upper)``
            tuples, in evaluation order

        Returns
        -------
        PiecewiseScaling
            Scaling evaluating the segments first-match in the given order
        """
        built = []
        for segment in segments:
            if isinstance(segment, Segment):
                built.append(segment)
            else:
                internal, external = segment
                built.append(Segment(Interval.coerce(internal), Interval.coerce(external)))
        return PiecewiseScaling(tuple(built))


@dataclass(frozen=True)
class LinearScaling(Scaling):
    """Identity scaling: internal and external domains are both ``domain``."""

    domain: Interval

    @property
    def input_lower_bound(self) -> float:
        return self.domain.lower_bound

    @property
    def input_upper_bound(self) -> float:
        return self.domain.upper_bound

    @property
    def output_lower_bound(self) -> float:
        return self.domain.lower_bound

    @property
    def output_upper_bound(self) -> float:
        return self.domain.upper_bound

    def to_external(self, internal_value: float) -> float:
        return float(internal_value)

    def to_internal(self, external_value: float) -> float:
        return float(external_value)

    def to_external_array(self, internal_values: np.ndarray | Sequence[float]) -> np.ndarray:
        return np.array(internal_values, dtype=float)

    def to_internal_array(self, external_values: np.ndarray | Sequence[float]) -> np.ndarray:
        return np.array(external_values, dtype=float)


@dataclass(frozen=True)
class PiecewiseScaling(Scaling):
    """Ordered piecewise-linear scaling.

    Segments are searched in listed order and the first one whose interval
    contains the query value wins. Segments are expected to partition the
    internal domain contiguously; gaps and overlaps are accepted but logged,
    and values falling into a gap raise :class:`ScalingLookupError`.
    """

    segments: tuple[Segment, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "segments", tuple(self.segments))
        if not self.segments:
            raise PreconditionError(
                "Piecewise scaling needs at least one segment", field_name="segments"
            )

        for previous, current in zip(self.segments, self.segments[1:]):
            if (
                previous.internal.upper_bound != current.internal.lower_bound
                or previous.external.upper_bound != current.external.lower_bound
            ):
                logger.warning(
                    f"Piecewise segments are not contiguous: {previous} -> {current}"
                )

    @property
    def input_lower_bound(self) -> float:
        return min(segment.internal.lower_bound for segment in self.segments)

    @property
    def input_upper_bound(self) -> float:
        return max(segment.internal.upper_bound for segment in self.segments)

    @property
    def output_lower_bound(self) -> float:
        return min(segment.external.lower_bound for segment in self.segments)

    @property
    def output_upper_bound(self) -> float:
        return max(segment.external.upper_bound for segment in self.segments)

    def to_external(self, internal_value: float) -> float:
        for segment in self.segments:
            if segment.internal.contains(internal_value):
                return segment.internal.map_to(internal_value, segment.external)
        raise ScalingLookupError("No segment contains value", internal_value, "internal")

    def to_internal(self, external_value: float) -> float:
        for segment in self.segments:
            if segment.external.contains(external_value):
                return segment.external.map_to(external_value, segment.internal)
        raise ScalingLookupError("No segment contains value", external_value, "external")

    def to_external_array(self, internal_values: np.ndarray | Sequence[float]) -> np.ndarray:
        pairs = [(segment.internal, segment.external) for segment in self.segments]
        return _map_first_match(internal_values, pairs, "internal")

    def to_internal_array(self, external_values: np.ndarray | Sequence[float]) -> np.ndarray:
        pairs = [(segment.external, segment.internal) for segment in self.segments]
        return _map_first_match(external_values, pairs, "external")


def _map_first_match(
    values: np.ndarray | Sequence[float],
    pairs: list[tuple[Interval, Interval]],
    representation: str,
) -> np.ndarray:
    """Map every element through the first ``(source, target)`` pair containing it.

    Parameters
    ----------
    values : np.ndarray | Sequence[float]
        Values in the source domain
    pairs : list[tuple[Interval, Interval]]
        Source and target intervals, in evaluation order
    representation : str
        Name of the source domain, used in error messages

    Returns
    -------
    np.ndarray
        Mapped values with the same shape as ``values``
    """
    values = np.asarray(values, dtype=float)
    result = np.empty(values.shape, dtype=float)
    matched = np.zeros(values.shape, dtype=bool)

    for source, target in pairs:
        hit = ~matched & (values >= source.lower_bound) & (values <= source.upper_bound)
        if source.span == 0:
            result[hit] = target.lower_bound
        else:
            fraction = (values[hit] - source.lower_bound) / source.span
            result[hit] = target.lower_bound + fraction * target.span
        matched |= hit

    if not matched.all():
        missing = float(values[~matched].flat[0])
        raise ScalingLookupError("No segment contains value", missing, representation)

    return result


__all__ = [
    "Interval",
    "LinearScaling",
    "PiecewiseScaling",
    "Scaling",
    "Segment",
]
