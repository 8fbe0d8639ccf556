""" This module contains the TumblrClient class, the transport used to talk to Tumblr. """

import re
from logging import Logger
from typing import Any, Optional

from requests.exceptions import JSONDecodeError, RequestException
from requests.models import Response

from tumblegrab.errors import AuthorizationError, MalformedResponseError, TransportError
from tumblegrab.httpclient import HTTPClient, RetryLimitExceededException
from tumblegrab.normalize import to_page
from tumblegrab.typing_custom import Cursor, Page, PostId, TumblrConfig
from tumblegrab.utils import NullLogger


class TumblrClient:
    """ Fetches pages and permalinks from the Tumblr web API. """
    _home = "https://www.tumblr.com/"
    _api = "https://www.tumblr.com/api/v2"

    _config: TumblrConfig
    _logger: Logger
    _http_client: HTTPClient

    def __init__(self, config: Optional[TumblrConfig] = None, logger: Optional[Logger] = None):
        self._config = config if config is not None else TumblrConfig()
        self._logger = logger if logger is not None else NullLogger()
        self._http_client = HTTPClient({"User-Agent": self._config.user_agent}, self._logger, self._config.proxy_url)

    def acquire_session_token(self) -> str:
        """ Returns the configured API token, or the one embedded in the Tumblr home page. """
        if self._config.api_token:
            return self._config.api_token

        self._logger.debug("Acquiring API token from %s", self._home)
        response = self._send(self._home)
        match = re.search(r'"API_TOKEN"\s*:\s*"([^"]+)"', response.text)
        if match is None:
            raise TransportError("No API token found on the Tumblr home page", response.status_code)
        return match.group(1)

    def fetch_page(self, blog: str, cursor: Cursor, token: str) -> Page:
        """ Fetches the page of posts of the blog described by the cursor. """
        if cursor.params:
            params = dict(cursor.params)
        else:
            params = {
                "npf": "true",
                "reblog_info": "true",
                "offset": cursor.offset,
                "page_number": cursor.page_number,
            }
        body = self._get_json(f"{self._api}/blog/{blog}/posts", token, params)
        return to_page(body, cursor)

    def fetch_permalink(self, root_author: str, root_id: PostId, token: str) -> dict:
        """ Fetches the raw permalink representation of a post. """
        body = self._get_json(f"{self._api}/blog/{root_author}/posts/{root_id}/permalink", token, {"reblog_info": "true"})

        response = body.get("response") if isinstance(body, dict) else None
        if not isinstance(response, dict):
            raise MalformedResponseError(f"Permalink of post {root_id} has no response object")

        timeline = response.get("timeline")
        posts = timeline.get("elements") if isinstance(timeline, dict) else response.get("posts")
        if not isinstance(posts, list) or len(posts) == 0:
            raise MalformedResponseError(f"Permalink of post {root_id} contains no post")
        return posts[0]

    def _get_json(self, url: str, token: str, params: dict) -> Any:
        response = self._send(url, params=params, headers={"Authorization": f"Bearer {token}"})
        try:
            return response.json()
        except JSONDecodeError as e:
            raise MalformedResponseError(f"Response from {url} is not JSON") from e
        except RequestException as e:
            raise TransportError(f"Failed to read response from {url}: {e}") from e

    def _send(self, url: str, **kwargs) -> Response:
        try:
            response = self._http_client.get(url, **kwargs)
        except RetryLimitExceededException as e:
            raise TransportError(str(e)) from e
        except RequestException as e:
            raise TransportError(f"Request to {url} failed: {e}") from e

        if response.status_code in (401, 403):
            raise AuthorizationError(f"Tumblr refused {url} ({response.status_code})", response.status_code)
        if not response.ok:
            raise TransportError(f"Request to {url} failed ({response.status_code})", response.status_code)
        return response
