from typing import Any, Callable, Dict, List, Optional
import inspect

from docplane.core.logging import log


Handler = Callable[[Dict[str, Any]], Any]


class EventBus:
    """
    Simple in-process publish/subscribe bus.

    - Each event type has its own list of handlers.
    - broadcast() delivers to every handler of that type, the publisher included.
    - Handlers may be plain functions or coroutines.

    A cross-process transport delivers remote signals by calling broadcast()
    on the receiving side.
    """

    def __init__(self) -> None:
        # event_type -> list[handler]
        self.subscribers: Dict[str, List[Handler]] = {}

    def subscribe(self, event_type: str, handler: Handler) -> None:
        handlers = self.subscribers.setdefault(event_type, [])
        if handler not in handlers:
            handlers.append(handler)

    def unsubscribe(self, event_type: str, handler: Handler) -> None:
        handlers = self.subscribers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)
        if not handlers and event_type in self.subscribers:
            del self.subscribers[event_type]

    async def broadcast(self, event_type: str, payload: Optional[Dict[str, Any]] = None) -> int:
        """
        Deliver an event to all handlers subscribed to `event_type`.
        Handlers subscribed during delivery wait for the next event.
        Returns the number of handlers called.
        """
        handlers = list(self.subscribers.get(event_type, []))

        event = {"type": event_type, **(payload or {})}
        log("EVENTS", f"Broadcasting {event_type} to {len(handlers)} handler(s)")

        for handler in handlers:
            result = handler(event)
            if inspect.isawaitable(result):
                await result

        return len(handlers)
