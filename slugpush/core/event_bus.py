# slugpush/core/event_bus.py
"""Typed publish/subscribe for progress events"""

import logging
from typing import Callable, Dict, List, Any, Optional

from ..models.events import Event, EventType

Subscriber = Callable[[Event], None]


class EventBus:
    """Synchronous, in-process event dispatcher

    Subscribers are kept per event type in registration order and are called
    on the emitting task. A failing subscriber is logged and skipped; it
    never interrupts the other subscribers or the pipeline.
    """

    def __init__(self):
        self._subscribers: Dict[EventType, List[Subscriber]] = {et: [] for et in EventType}
        self.logger = logging.getLogger("EventBus")

    def subscribe(self, event_type: EventType, subscriber: Subscriber) -> 'EventBus':
        """
        Register a subscriber for one event type

        Args:
            event_type: Event type to listen to
            subscriber: Callable receiving the Event

        Returns:
            self, so registrations can be chained
        """
        self._subscribers[event_type].append(subscriber)
        return self

    def subscribe_all(self, subscriber: Subscriber) -> 'EventBus':
        """Register a subscriber for every event type"""
        for event_type in EventType:
            self._subscribers[event_type].append(subscriber)
        return self

    def unsubscribe(self, event_type: EventType, subscriber: Subscriber) -> None:
        """Remove a subscriber from one event type"""
        if subscriber in self._subscribers[event_type]:
            self._subscribers[event_type].remove(subscriber)

    def subscribers(self, event_type: EventType) -> List[Subscriber]:
        """Get subscribers of an event type in dispatch order"""
        return list(self._subscribers[event_type])

    def emit(self, event_type: EventType, payload: Any = None) -> Event:
        """
        Deliver an event to its subscribers

        Args:
            event_type: Event type
            payload: Stage-specific payload

        Returns:
            The delivered Event
        """
        event = Event(event_type, payload)

        for subscriber in self.subscribers(event_type):
            try:
                subscriber(event)
            except Exception:
                self.logger.exception(f"Subscriber {subscriber!r} failed handling {event_type.value}")

        return event


class EventRecorder:
    """Subscriber that keeps every event it receives"""

    def __init__(self, bus: Optional[EventBus] = None):
        self.events: List[Event] = []
        if bus is not None:
            bus.subscribe_all(self)

    def __call__(self, event: Event) -> None:
        self.events.append(event)

    @property
    def types(self) -> List[EventType]:
        return [e.type for e in self.events]

    def payloads(self, event_type: EventType) -> List[Any]:
        return [e.payload for e in self.events if e.type == event_type]
