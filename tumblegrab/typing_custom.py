""" This module contains custom types used in the Tumblegrab package. """

from dataclasses import dataclass, field
from typing import Any, Optional, Protocol
from enum import Enum

PostId = str

TUMBLR_USER_AGENT = "Mozilla/5.0 (Macintosh; Intel Mac OS X 10.15; rv:135.0) Gecko/20100101 Firefox/135.0"


class MediaKind(Enum):
    """ Represents the kind of a content block """
    IMAGE = 1
    VIDEO = 2
    OTHER = 3


class CandidateKind(str, Enum):
    """ Represents the kind of an extracted media candidate """
    IMAGE = "image"
    VIDEO_POSTER = "video-poster"


@dataclass(frozen=True)
class MediaVariant:
    """ One resolution of a media asset """
    width: int
    url: str
    media_key: Optional[str] = None


@dataclass(frozen=True)
class ContentBlock:
    """ A single block embedded in a post or in its trail """
    kind: MediaKind
    media: tuple[MediaVariant, ...] = ()
    poster: tuple[MediaVariant, ...] = ()
    media_key: Optional[str] = None

    def has_poster(self) -> bool:
        """ Returns True if the block carries a non-empty poster. """
        return len(self.poster) > 0


@dataclass(frozen=True)
class Post:
    """ Represents a post on Tumblr """
    id: PostId
    blog_name: str
    tags: tuple[str, ...] = ()
    reblogged_root_name: Optional[str] = None
    reblogged_root_id: Optional[PostId] = None
    parent_post_id: Optional[PostId] = None
    content: tuple[ContentBlock, ...] = ()
    trail: tuple[tuple[ContentBlock, ...], ...] = ()

    def is_reblog(self) -> bool:
        """ Returns True if the post points to a different root post. """
        return (self.reblogged_root_id is not None
                and self.reblogged_root_name is not None
                and self.reblogged_root_id != self.id)

    def author(self) -> str:
        """ Returns the ultimate root author for reblogs, the blog name otherwise. """
        if self.is_reblog():
            return self.reblogged_root_name
        return self.blog_name


@dataclass(frozen=True)
class MediaCandidate:
    """ A media asset found in a post, not yet resolved to a single URL """
    kind: CandidateKind
    variants: tuple[MediaVariant, ...]


@dataclass(frozen=True)
class Cursor:
    """ Tells the transport how to fetch a page of posts """
    page_number: int = 1
    offset: int = 0
    # Continuation query parameters exactly as the server sent them
    params: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)


@dataclass(frozen=True)
class MediaRecord:
    """ A resolved media item, ready to be downloaded """
    id: str
    url: str
    tags: tuple[str, ...]
    author: str
    cursor: Optional[Cursor]
    post_id: PostId
    kind: CandidateKind


@dataclass(frozen=True)
class Page:
    """ One page of posts and the cursor of the page after it """
    posts: tuple[Post, ...]
    next_cursor: Optional[Cursor] = None


@dataclass
class WalkOptions:
    """ Options of a single blog walk """
    start_page: int = 1
    start_offset: int = 0
    auto_advance: bool = True
    max_pages: Optional[int] = None
    max_index: Optional[int] = None
    stop_at: frozenset[PostId] = frozenset()

    def start_cursor(self) -> Cursor:
        """ Returns the cursor of the first page to fetch. """
        return Cursor(page_number=self.start_page, offset=self.start_offset)


class WalkState(Enum):
    """ Represents the state of a blog walk """
    IDLE = "idle"
    FETCHING_PAGE = "fetching_page"
    DRAINING_PAGE = "draining_page"
    AWAITING_ADVANCE_DECISION = "awaiting_advance_decision"
    DONE = "done"
    FAILED = "failed"


@dataclass
class TumblrConfig:
    """ Represents the Tumblr client configuration """
    user_agent: str = TUMBLR_USER_AGENT
    proxy_url: Optional[str] = None
    api_token: Optional[str] = None


class Transport(Protocol):
    """ The remote calls a walk depends on """

    def acquire_session_token(self) -> str:
        """ Returns a bearer token for the following fetches. """

    def fetch_page(self, blog: str, cursor: Cursor, token: str) -> Page:
        """ Fetches the page of posts described by the cursor. """

    def fetch_permalink(self, root_author: str, root_id: PostId, token: str) -> dict:
        """ Fetches the raw permalink representation of a post. """
