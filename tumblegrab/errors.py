""" This module contains the exceptions raised while walking a blog. """

from typing import Optional


class ScrapeError(Exception):
    """ Base class of every error raised by a walk. """
    fatal: bool = True

    def __init__(self, message: str, cursor=None):
        super().__init__(message)
        # Cursor from which resuming the walk makes sense, if known
        self.cursor = cursor


class TransportError(ScrapeError):
    """ Raised when a page or permalink fetch fails. """

    def __init__(self, message: str, status_code: Optional[int] = None, cursor=None):
        super().__init__(message, cursor)
        self.status_code = status_code


class AuthorizationError(TransportError):
    """ Raised when Tumblr rejects the session token. """


class MalformedResponseError(ScrapeError):
    """ Raised when a page, cursor or post cannot be parsed. """


class ExtractionError(ScrapeError):
    """ Raised when the media of a single post cannot be resolved. """
    fatal = False

    def __init__(self, message: str, post_id: Optional[str] = None, cursor=None):
        super().__init__(message, cursor)
        self.post_id = post_id


class NoVariantsError(ExtractionError):
    """ Raised when a media asset has no variant to pick from. """
