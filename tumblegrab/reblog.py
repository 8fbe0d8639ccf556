""" This module contains the ReblogResolver class. """

from logging import Logger
from typing import Callable, Optional

from tumblegrab.errors import AuthorizationError, ExtractionError, ScrapeError
from tumblegrab.normalize import to_post
from tumblegrab.typing_custom import Post, PostId, Transport
from tumblegrab.utils import NullLogger


# pylint: disable=too-few-public-methods
class ReblogResolver:
    """ Fetches the original post of a reblog that carries no usable trail. """
    _transport: Transport
    _token: Callable[[], str]
    _logger: Logger

    def __init__(self, transport: Transport, token: Callable[[], str], logger: Optional[Logger] = None):
        self._transport = transport
        self._token = token
        self._logger = logger if logger is not None else NullLogger()

    def resolve(self, root_author: str, root_id: PostId) -> Post:
        """ Returns the root post, normalized the same way as any ingested post. """
        self._logger.debug("Fetching root post %s from %s", root_id, root_author)
        try:
            return to_post(self._transport.fetch_permalink(root_author, root_id, self._token()))
        except AuthorizationError:
            raise
        except ScrapeError as e:
            raise ExtractionError(f"Failed to resolve root post {root_id} from {root_author}: {e}") from e
