"""
Change notifications for range slider observers.

The slider model only knows about an :class:`EventBus`. Views, haptics and
the host application subscribe to the event types they care about, so the
value model never calls into them directly.
"""
import logging
from collections.abc import Callable
from typing import Any
from dataclasses import dataclass
from enum import Enum, auto

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Notifications emitted by a range slider."""

    # Value events
    VALUE_CHANGED = auto()  # {"thumb": Thumb, "value": float, "previous": float}
    BOUNDARY_REACHED = auto()  # {"thumb": Thumb, "value": float, "edge": "minimum" | "maximum"}

    # Gesture events
    GESTURE_BEGAN = auto()
    GESTURE_ENDED = auto()
    GESTURE_CANCELLED = auto()

    # Configuration events
    SCALING_CHANGED = auto()
    STEP_CHANGED = auto()
    GEOMETRY_CHANGED = auto()


@dataclass
class Event:
    """One notification, as delivered to subscribers."""
    type: EventType
    data: dict[str, Any]
    source: str | None = None


Handler = Callable[[Event], None]


class EventBus:
    """
    Delivers slider notifications to subscribed handlers.

    Handlers of one event type run in descending priority; equal priorities
    keep subscription order.

    Parameters
    ----------
    name : str
        Label used in log messages
    """

    def __init__(self, name: str = "default"):
        self.name = name
        self._handlers: dict[EventType, list[tuple[int, Handler]]] = {}

    def subscribe(self, event_type: EventType, handler: Handler, priority: int = 0) -> None:
        """
        Register ``handler`` for ``event_type``.

        Parameters
        ----------
        event_type : EventType
            Notification to listen for
        handler : Callable[[Event], None]
            Called with each matching :class:`Event`
        priority : int
            Handlers with a higher priority are called first
        """
        handlers = self._handlers.setdefault(event_type, [])
        position = next(
            (i for i, (existing, _) in enumerate(handlers) if priority > existing),
            len(handlers),
        )
        handlers.insert(position, (priority, handler))
        logger.debug(
            f"[{self.name}] {getattr(handler, '__name__', handler)} listens for "
            f"{event_type.name} (priority={priority})"
        )

    def emit(self, event_type: EventType, source: str | None = None, **data) -> None:
        """
        Deliver one notification to every handler of ``event_type``.

        A handler that raises is logged and skipped; the remaining handlers
        still run.
        """
        event = Event(type=event_type, data=data, source=source)
        handlers = list(self._handlers.get(event_type, ()))
        logger.debug(
            f"[{self.name}] {event_type.name} from {source or 'unknown'} "
            f"-> {len(handlers)} handler(s)"
        )

        for _, handler in handlers:
            try:
                handler(event)
            except Exception as e:
                logger.error(
                    f"[{self.name}] Handler {getattr(handler, '__name__', handler)} "
                    f"failed on {event_type.name}: {e}",
                    exc_info=True,
                )


__all__ = [
    "Event",
    "EventBus",
    "EventType",
]
