""" This module contains the CursorPaginator class and the Walk it produces. """

from logging import Logger
from typing import Callable, Iterator, Optional

from tumblegrab.errors import ExtractionError, ScrapeError
from tumblegrab.events import EventBus, EventKind, PageBoundaryEvent, WalkErrorEvent
from tumblegrab.extractor import extract
from tumblegrab.reblog import ReblogResolver
from tumblegrab.selector import select
from tumblegrab.typing_custom import (
    Cursor, MediaCandidate, MediaRecord, Page, Post, Transport, WalkOptions, WalkState
)
from tumblegrab.utils import NullLogger


def to_records(post: Post, candidates: list[MediaCandidate], author: str, cursor: Optional[Cursor]) -> list[MediaRecord]:
    """
    Resolves every candidate of the post to a MediaRecord.
    A single candidate keeps the post id, several get a 1-based suffix.
    """
    records = []
    for (index, candidate) in enumerate(candidates):
        try:
            url = select(candidate.variants)
        except ExtractionError as e:
            e.post_id = post.id
            raise
        records.append(MediaRecord(
            id=post.id if len(candidates) == 1 else f"{post.id}_{index + 1}",
            url=url,
            tags=post.tags,
            author=author,
            cursor=cursor,
            post_id=post.id,
            kind=candidate.kind,
        ))
    return records


class Walk:
    """
    A lazy, single-pass walk over the media of a blog.

    Iterating pulls one record at a time; a page is only fetched once the
    records of the previous one have all been handed out.
    """
    state: WalkState
    error: Optional[ScrapeError] = None
    pages_fetched: int = 0
    records_emitted: int = 0

    def __init__(self, paginator: "CursorPaginator", blog: str, options: WalkOptions):
        self._paginator = paginator
        self._blog = blog
        self._options = options
        self._cursor: Optional[Cursor] = None
        self._seen: set[str] = set()
        self.state = WalkState.IDLE
        self._records = self._run()

    @property
    def blog(self) -> str:
        """ Returns the blog being walked. """
        return self._blog

    @property
    def cursor(self) -> Optional[Cursor]:
        """ Returns the next page cursor of the last fetched page. """
        return self._cursor

    def __iter__(self):
        return self

    def __next__(self) -> MediaRecord:
        return next(self._records)

    def close(self) -> None:
        """ Stops the walk, no further page is fetched. """
        self._records.close()
        if self.state not in (WalkState.DONE, WalkState.FAILED):
            self.state = WalkState.DONE

    def _limit_reached(self, cursor: Cursor) -> bool:
        if self._options.max_index is not None and self.pages_fetched >= self._options.max_index:
            self._paginator.logger.debug("Reached %d pages on %s, stopping", self.pages_fetched, self._blog)
            return True
        if self._options.max_pages is not None and cursor.page_number > self._options.max_pages:
            self._paginator.logger.debug("Reached page %d on %s, stopping", self._options.max_pages, self._blog)
            return True
        return False

    def _run(self) -> Iterator[MediaRecord]:
        paginator = self._paginator
        cursor = self._options.start_cursor()

        while True:
            if self._limit_reached(cursor):
                self.state = WalkState.DONE
                return

            self.state = WalkState.FETCHING_PAGE
            paginator.logger.debug("Fetching page %d (offset %d) of %s", cursor.page_number, cursor.offset, self._blog)
            try:
                page = paginator.fetch_page(self._blog, cursor)
            except ScrapeError as e:
                if e.cursor is None:
                    e.cursor = cursor
                self._fail(e)
                return
            self.pages_fetched += 1
            self._cursor = page.next_cursor

            self.state = WalkState.DRAINING_PAGE
            produced: list[MediaRecord] = []
            stopped = False
            for post in page.posts:
                if post.id in self._options.stop_at:
                    paginator.logger.info("Reached post %s on %s, stopping", post.id, self._blog)
                    stopped = True
                    break

                try:
                    records = paginator.records_for(post, page.next_cursor)
                except ExtractionError as e:
                    if e.post_id is None:
                        e.post_id = post.id
                    e.cursor = cursor
                    self._isolate(e)
                    continue
                except ScrapeError as e:
                    e.cursor = cursor
                    self._fail(e)
                    return

                for record in records:
                    if record.id in self._seen:
                        paginator.logger.debug("Skipping %s - already emitted during this walk", record.id)
                        continue
                    self._seen.add(record.id)
                    paginator.bus.emit(EventKind.MEDIA, record, self._blog)
                    produced.append(record)
                    self.records_emitted += 1
                    yield record

            if stopped or page.next_cursor is None or not self._options.auto_advance:
                self.state = WalkState.DONE
                return

            self.state = WalkState.AWAITING_ADVANCE_DECISION
            event = PageBoundaryEvent(self._blog, page.next_cursor, tuple(produced))
            if not paginator.bus.vote(EventKind.PAGE_BOUNDARY, event, self._blog):
                paginator.logger.info("Walk of %s cancelled after page %d", self._blog, cursor.page_number)
                self.state = WalkState.DONE
                return

            cursor = page.next_cursor

    def _isolate(self, error: ExtractionError) -> None:
        bus = self._paginator.bus
        if not bus.has_listeners(EventKind.WALK_ERROR, self._blog):
            self.error = error
            self.state = WalkState.FAILED
            raise error
        self._paginator.logger.debug("Skipping post %s from %s - %s", error.post_id, self._blog, error)
        bus.emit(EventKind.WALK_ERROR, WalkErrorEvent(error, self._blog, error.fatal, error.cursor), self._blog)

    def _fail(self, error: ScrapeError) -> None:
        self.error = error
        self.state = WalkState.FAILED
        bus = self._paginator.bus
        if not bus.has_listeners(EventKind.WALK_ERROR, self._blog):
            raise error
        self._paginator.logger.debug("Walk of %s stopped early: %s", self._blog, error)
        bus.emit(EventKind.WALK_ERROR, WalkErrorEvent(error, self._blog, error.fatal, error.cursor), self._blog)


class CursorPaginator:
    """ Follows the continuation cursors of a blog, turning posts into media records. """
    transport: Transport
    bus: EventBus
    logger: Logger
    pages_fetched: int = 0

    def __init__(self, transport: Transport, token: Callable[[], str], bus: EventBus, logger: Optional[Logger] = None):
        self.transport = transport
        self.bus = bus
        self.logger = logger if logger is not None else NullLogger()
        self._token = token
        self._resolver = ReblogResolver(transport, token, self.logger)

    def walk(self, blog: str, options: Optional[WalkOptions] = None) -> Walk:
        """ Returns a lazy walk over the media of the blog. """
        return Walk(self, blog, options if options is not None else WalkOptions())

    def fetch_page(self, blog: str, cursor: Cursor) -> Page:
        """ Fetches one page of posts. """
        page = self.transport.fetch_page(blog, cursor, self._token())
        self.pages_fetched += 1
        return page

    def records_for(self, post: Post, cursor: Optional[Cursor]) -> list[MediaRecord]:
        """ Returns the media records of a post, fetching its root post if needed. """
        candidates = extract(post)
        if len(candidates) > 0:
            return to_records(post, candidates, post.author(), cursor)

        if not post.is_reblog():
            self.logger.debug("Post %s has no media", post.id)
            return []

        self.logger.debug("Post %s has no inline media, resolving reblog root", post.id)
        root = self._resolver.resolve(post.reblogged_root_name, post.reblogged_root_id)
        return to_records(post, extract(root), post.author(), cursor)
