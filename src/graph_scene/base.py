"""
Shared event plumbing for the layout engine.

EventEmitter provides the start/tick/end callback registry. Callbacks may be
passed to the constructor or attached later with ``on()``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from typing_extensions import Self

from .types import Event, EventCallback, EventType


class EventEmitter:
    """
    Holds one callback per EventType.

    Example:
        engine.on("tick", lambda e: print(e["ticks"]))
    """

    def __init__(
        self,
        *,
        on_start: Optional[EventCallback] = None,
        on_tick: Optional[EventCallback] = None,
        on_end: Optional[EventCallback] = None,
    ) -> None:
        self._events: dict[EventType, EventCallback] = {}
        if on_start:
            self._events[EventType.start] = on_start
        if on_tick:
            self._events[EventType.tick] = on_tick
        if on_end:
            self._events[EventType.end] = on_end

    # -------------------------------------------------------------------------
    # Event System
    # -------------------------------------------------------------------------

    def on(self, event: EventType | str, callback: Optional[EventCallback]) -> Self:
        """
        Subscribe to an event, replacing any previous callback.

        Args:
            event: Event type (EventType enum or string name)
            callback: Function to call when the event fires; None unsubscribes

        Returns:
            self (for chaining)
        """
        if isinstance(event, str):
            event = EventType[event]
        if callback is None:
            self._events.pop(event, None)
        else:
            self._events[event] = callback
        return self

    def trigger(self, event: Event) -> None:
        """Call the callback registered for ``event["type"]``, if any."""
        event_type = event.get("type")
        if event_type is not None and event_type in self._events:
            self._events[event_type](event)


__all__ = ["EventEmitter"]
