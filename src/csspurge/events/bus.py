"""Synchronous event bus for purge pass progress and diagnostics."""

from __future__ import annotations

from typing import Any, Callable

Listener = Callable[[Any], None]


class EventBus:
    """Dispatches purge events to listeners in registration order.

    A listener registered for a type also receives subclasses of it;
    ``object`` listens to everything.
    """

    def __init__(self) -> None:
        self._listeners: list[tuple[type, Listener]] = []

    def subscribe(self, event_type: type, callback: Listener) -> None:
        self._listeners.append((event_type, callback))

    def on(self, event_type: type) -> Callable[[Listener], Listener]:
        """Decorator form of :meth:`subscribe`."""

        def register(callback: Listener) -> Listener:
            self.subscribe(event_type, callback)
            return callback

        return register

    def record(self, event_type: type = object) -> list[Any]:
        """Return a list that fills up with every matching event emitted from now on."""
        seen: list[Any] = []
        self.subscribe(event_type, seen.append)
        return seen

    def emit(self, event: Any) -> None:
        for event_type, callback in self._listeners:
            if isinstance(event, event_type):
                callback(event)
