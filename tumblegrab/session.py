""" This module contains the ScrapeSession class. """

from logging import Logger
from typing import Optional

from tumblegrab.events import WILDCARD, EventBus, EventKind, Listener
from tumblegrab.paginator import CursorPaginator, Walk
from tumblegrab.typing_custom import MediaRecord, Transport, WalkOptions
from tumblegrab.utils import NullLogger


class ScrapeSession:
    """ The main Tumblegrab class, walks blogs over a single transport and session token. """
    _transport: Transport
    _events: EventBus
    _paginator: CursorPaginator
    _logger: Logger

    _token: Optional[str] = None
    _media_count = 0

    def __init__(self, transport: Transport, logger: Optional[Logger] = None, events: Optional[EventBus] = None):
        self._transport = transport
        self._logger = logger if logger is not None else NullLogger()
        self._events = events if events is not None else EventBus()
        self._paginator = CursorPaginator(transport, self.token, self._events, self._logger)

        self._events.on(EventKind.MEDIA, self._count_media)

    @property
    def events(self) -> EventBus:
        """ Returns the event bus every walk of this session publishes on. """
        return self._events

    def on(self, kind: EventKind, listener: Listener, scope: str = WILDCARD):
        """ Subscribes to events of the given kind, for a single blog or for all of them. """
        return self._events.on(kind, listener, scope)

    def off(self, kind: EventKind, listener: Listener, scope: str = WILDCARD) -> None:
        """ Unsubscribes a listener. """
        self._events.off(kind, listener, scope)

    def token(self) -> str:
        """ Returns the session token, acquiring it on first use. """
        if self._token is None:
            self._logger.debug("Acquiring session token")
            self._token = self._transport.acquire_session_token()
        return self._token

    def reset_token(self) -> None:
        """ Forgets the session token, the next fetch acquires a new one. """
        self._token = None

    def walk(self, blog: str, options: Optional[WalkOptions] = None) -> Walk:
        """ Returns a lazy walk over all media of the blog. """
        options = options if options is not None else WalkOptions()
        self._logger.debug("Walking %s from page %d (offset %d)", blog, options.start_page, options.start_offset)
        return self._paginator.walk(blog, options)

    def collect(self, blog: str, pages: int = 1, start_page: int = 1, start_offset: int = 0) -> list[MediaRecord]:
        """ Collects the media of the given number of pages into a list. """
        options = WalkOptions(start_page=start_page, start_offset=start_offset, max_index=pages)
        return list(self.walk(blog, options))

    def total_pages(self) -> int:
        """ Returns the number of pages fetched by this session. """
        return self._paginator.pages_fetched

    def total_media(self) -> int:
        """ Returns the number of media records produced by this session. """
        return self._media_count

    def _count_media(self, _: MediaRecord) -> None:
        self._media_count += 1
