""" This file contains helper functions for the tumblegrab package. """

import json
from mimetypes import guess_extension
from pathlib import Path
from typing import Optional
from logging import Logger
import tomllib
import importlib.util

from requests.models import Response

from tumblegrab.typing_custom import MediaKind, TumblrConfig


def guess_media_type(response: Response) -> MediaKind:
    """ Tries to guess the media type of the response """
    media_type = response.headers.get("content-type", "")
    if "image" in media_type.lower():
        return MediaKind.IMAGE
    if "video" in media_type.lower():
        return MediaKind.VIDEO
    return MediaKind.OTHER


def guess_media_extension(response: Response) -> Optional[str]:
    """ Tries to guess the media extension of the response """
    return guess_extension(response.headers.get("content-type", "").split(";")[0].strip(), strict=False)


def load_config(path: Optional[Path]) -> TumblrConfig:
    """ Loads the Tumblr client configuration from a JSON file, or the defaults if no file is given """
    if path is None:
        return TumblrConfig()
    with open(path, encoding="utf-8") as f:
        return TumblrConfig(**json.load(f))


class NullLogger(Logger):
    """ A logger that logs nothing """

    def __init__(self):
        super().__init__("NullLogger")

    def debug(self, *args, **kwargs):
        pass

    def info(self, *args, **kwargs):
        pass

    def warning(self, *args, **kwargs):
        pass

    def error(self, *args, **kwargs):
        pass

    def critical(self, *args, **kwargs):
        pass


def find_pyproject_from_module(module_name: str) -> Path:
    """
    Given a module name (e.g. 'myapp'), find its installation root,
    then walk upward to find pyproject.toml.
    """
    spec = importlib.util.find_spec(module_name)
    if spec is None or not spec.origin:
        raise ImportError(f"Cannot find module {module_name}")

    current = Path(spec.origin).resolve().parent
    while current != current.parent:
        candidate = current / "pyproject.toml"
        if candidate.is_file():
            return candidate
        current = current.parent
    raise FileNotFoundError("pyproject.toml not found")

def get_version() -> str:
    """ Returns the current version. """
    with open(find_pyproject_from_module('tumblegrab'), 'rb') as f:
        # noinspection PyTypeChecker
        pyproject_data = tomllib.load(f)
    return pyproject_data['project']['version']
