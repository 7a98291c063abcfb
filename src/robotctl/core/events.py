"""Synchronous multi-listener event dispatch."""

from typing import Any, Callable


class EventEmitter:
    """
    Dispatches named events to listeners, in registration order.

    Listeners only see events emitted after they were added.
    """

    def __init__(self):
        self._listeners: dict[str, list[Callable[..., Any]]] = {}

    def on(self, event: str, listener: Callable[..., Any]) -> "EventEmitter":
        self._listeners.setdefault(event, []).append(listener)
        return self

    def once(self, event: str, listener: Callable[..., Any]) -> "EventEmitter":
        """Add a listener that is removed after its first call."""

        def wrapper(*args: Any) -> None:
            self.off(event, wrapper)
            listener(*args)

        return self.on(event, wrapper)

    def off(self, event: str, listener: Callable[..., Any]) -> "EventEmitter":
        handlers = self._listeners.get(event, [])
        if listener in handlers:
            handlers.remove(listener)
        return self

    def listeners(self, event: str) -> tuple[Callable[..., Any], ...]:
        return tuple(self._listeners.get(event, ()))

    def emit(self, event: str, *args: Any) -> bool:
        """
        Call every listener of `event` with `args`.

        Returns:
            True if the event had listeners
        """
        handlers = self.listeners(event)
        for handler in handlers:
            handler(*args)
        return bool(handlers)
