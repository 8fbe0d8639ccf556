""" This module contains a wrapper around the "requests" library. """

from time import sleep
from logging import Logger
from typing import Optional

import requests
from requests.models import Response

from tumblegrab.utils import NullLogger

class RetryLimitExceededException(Exception):
    """ Raised when the maximum number of retries is exceeded. """

class HTTPClient:
    """ A wrapper around the requests library that handles retries, backoff and proxying. """
    _headers: dict[str, str]
    _proxies: dict[str, str]
    _logger: Logger
    _backoff_factor: float = 0.5

    def __init__(self, headers: dict | None = None, logger: Logger | None = None, proxy_url: Optional[str] = None):
        self._headers = headers if headers is not None else {}
        self._proxies = {"http": proxy_url, "https": proxy_url} if proxy_url else {}
        self._logger = logger if logger is not None else NullLogger()

    def request(self, method: str, url: str, max_tries: int = 5, timeout: int = 30, headers: dict | None = None, **kwargs) -> Response:
        """ Sends a request to the specified URL. """
        merged_headers = {**self._headers, **(headers if headers is not None else {})}
        if self._proxies:
            kwargs.setdefault("proxies", self._proxies)

        retry_count = 0
        while retry_count < max_tries:
            try:
                return requests.request(method, url, headers=merged_headers, timeout=timeout, **kwargs)
            except (requests.exceptions.ConnectionError, requests.exceptions.ReadTimeout) as e:
                self._logger.debug("Request to %s failed (%s), attempt %d/%d", url, e, retry_count + 1, max_tries)

            retry_count += 1
            if retry_count < max_tries:
                sleep(self._backoff_factor * (2 ** retry_count))
        raise RetryLimitExceededException(f"Failed to fetch data from {url} after {max_tries} tries")

    def get(self, url: str, params: dict | None = None, **kwargs) -> Response:
        """ Sends a GET request to the specified URL. """
        return self.request("GET", url, params=params if params is not None else {}, **kwargs)
