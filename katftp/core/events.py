"""
In-process event bus

The core publishes connection state transitions and transfer results here;
presentation code subscribes instead of being called back from inside the core.
"""
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from .logging import get_logger

logger = get_logger(__name__)

CONNECTION_STATE = "connection.state"
TRANSFER_FINISHED = "transfer.finished"


@dataclass
class Event:
    """Event record"""
    name: str
    timestamp: float = field(default_factory=time.time)
    metadata: Dict[str, Any] = field(default_factory=dict)


Subscriber = Callable[[Event], None]


class EventBus:
    """Synchronous publish/subscribe with a bounded history"""
    
    def __init__(self, history_size: int = 256):
        self._subscribers: List[tuple[Optional[str], Subscriber]] = []
        self._events: List[Event] = []
        self._history_size = history_size
        self._lock = threading.Lock()
    
    def subscribe(self, callback: Subscriber, name: Optional[str] = None) -> Callable[[], None]:
        """
        Register a subscriber.
        
        Args:
            callback: Called with every matching Event
            name: Only deliver events with this name (all events if None)
        
        Returns:
            Function that removes the subscription
        """
        entry = (name, callback)
        with self._lock:
            self._subscribers.append(entry)
        
        def unsubscribe() -> None:
            with self._lock:
                if entry in self._subscribers:
                    self._subscribers.remove(entry)
        
        return unsubscribe
    
    def publish(self, name: str, **metadata: Any) -> Event:
        """Record an event and deliver it to subscribers"""
        event = Event(name=name, metadata=metadata)
        with self._lock:
            self._events.append(event)
            if len(self._events) > self._history_size:
                del self._events[: len(self._events) - self._history_size]
            subscribers = [cb for wanted, cb in self._subscribers if wanted in (None, name)]
        
        for callback in subscribers:
            try:
                callback(event)
            except Exception:
                logger.exception("Event subscriber failed for %s", name)
        return event
    
    def get_events(self, name: Optional[str] = None) -> List[Event]:
        """Get recorded events, optionally filtered by name"""
        with self._lock:
            return [e for e in self._events if name is None or e.name == name]
    
    def clear(self) -> None:
        """Clear recorded events"""
        with self._lock:
            self._events.clear()


# Global event bus instance
_event_bus = EventBus()


def get_event_bus() -> EventBus:
    """Get global event bus instance"""
    return _event_bus
