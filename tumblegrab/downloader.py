""" This module contains the Downloader class. """

from pathlib import Path
from typing import Optional
from logging import Logger

from requests.exceptions import RequestException

from tumblegrab.httpclient import HTTPClient, RetryLimitExceededException
from tumblegrab.typing_custom import MediaKind, MediaRecord, TumblrConfig
from tumblegrab.utils import guess_media_type, guess_media_extension, NullLogger

# pylint: disable=too-few-public-methods
class Downloader:
    """ Saves the media of records to disk. """
    _logger: Logger
    _http_client: HTTPClient

    def __init__(self, config: Optional[TumblrConfig] = None, logger: Optional[Logger] = None):
        config = config if config is not None else TumblrConfig()
        self._logger = logger if logger is not None else NullLogger()
        self._http_client = HTTPClient({"User-Agent": config.user_agent}, self._logger, config.proxy_url)

    @staticmethod
    def existing(record: MediaRecord, target_dir: Path) -> Optional[Path]:
        """ Returns the file a record was previously saved to, if any. """
        return next(
            (file for file in target_dir.glob(f"{record.id}.*") if file.is_file() and file.suffix != ".part"),
            None,
        )

    def download(self, record: MediaRecord, target_dir: Path) -> Optional[Path]:
        """
        Downloads the media of the record into the target directory, returns None on failure.
        The bytes go to a .part file first, so an interrupted transfer never looks like a saved photo.
        """
        target_dir.mkdir(parents=True, exist_ok=True)
        target = target_dir / record.id

        try:
            response = self._http_client.get(record.url, stream=True)
        except (RetryLimitExceededException, RequestException) as e:
            self._logger.warning("Failed to download %s: %s", record.id, e)
            return None

        with response:
            if response.status_code != 200:
                self._logger.warning("Failed to download %s: HTTP %d", record.id, response.status_code)
                return None

            if guess_media_type(response) is MediaKind.OTHER:
                self._logger.warning("Failed to download %s: %s is not media", record.id, record.url)
                return None

            extension = guess_media_extension(response)
            if extension:
                target = target.with_suffix(extension)
            else:
                self._logger.warning("Failed to guess extension, using .bin")
                target = target.with_suffix(".bin")

            partial = target.with_name(target.name + ".part")
            try:
                with open(partial, "wb") as f:
                    for chunk in response.iter_content(chunk_size=1024 * 1024 * 1):  # 1 MB
                        f.write(chunk)
            except RequestException as e:
                partial.unlink(missing_ok=True)
                self._logger.warning("Failed to download %s: %s", record.id, e)
                return None

        partial.replace(target)
        self._logger.debug("Saved %s to %s", record.id, target)
        return target
