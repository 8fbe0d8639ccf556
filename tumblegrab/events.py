""" This module contains the EventBus class and the events it carries. """

from collections import defaultdict
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from tumblegrab.errors import ScrapeError
from tumblegrab.typing_custom import Cursor, MediaRecord

WILDCARD = "*"

Listener = Callable[[Any], Any]


class EventKind(str, Enum):
    """ Represents the kinds of events published during a walk """
    MEDIA = "media"
    PAGE_BOUNDARY = "page_boundary"
    WALK_ERROR = "walk_error"


@dataclass(frozen=True)
class PageBoundaryEvent:
    """ Published once a page is drained, before the next one is fetched """
    blog: str
    next_cursor: Cursor
    records: tuple[MediaRecord, ...]


@dataclass(frozen=True)
class WalkErrorEvent:
    """ Published when a walk hits an error """
    error: ScrapeError
    scope: str
    fatal: bool
    # Where a resumed walk should start
    cursor: Optional[Cursor] = None


class EventBus:
    """
    Publish/subscribe registry keyed by scope and event kind.

    Every event is delivered to the listeners of its scope (the blog name)
    first, then to the listeners of the wildcard scope.
    """
    _listeners: dict[tuple[str, EventKind], list[Listener]]

    def __init__(self):
        self._listeners = defaultdict(list)

    def on(self, kind: EventKind, listener: Listener, scope: str = WILDCARD) -> Callable[[], None]:
        """ Subscribes the listener, returns a function that unsubscribes it. """
        self._listeners[(scope, EventKind(kind))].append(listener)
        return lambda: self.off(kind, listener, scope)

    def off(self, kind: EventKind, listener: Listener, scope: str = WILDCARD) -> None:
        """ Unsubscribes the listener, does nothing if it is not subscribed. """
        listeners = self._listeners.get((scope, EventKind(kind)), [])
        if listener in listeners:
            listeners.remove(listener)

    def has_listeners(self, kind: EventKind, scope: str) -> bool:
        """ Returns True if an event of this kind published on the scope would reach anyone. """
        kind = EventKind(kind)
        return bool(self._listeners.get((scope, kind))) or bool(self._listeners.get((WILDCARD, kind)))

    def emit(self, kind: EventKind, payload: Any, scope: str) -> list[Any]:
        """ Delivers the payload and returns what every listener returned. """
        kind = EventKind(kind)
        targets = list(self._listeners.get((scope, kind), []))
        if scope != WILDCARD:
            targets += self._listeners.get((WILDCARD, kind), [])
        return [listener(payload) for listener in targets]

    def vote(self, kind: EventKind, payload: Any, scope: str) -> bool:
        """ Emits the event and returns False if any listener explicitly returned False. """
        return not any(result is False for result in self.emit(kind, payload, scope))
