""" Tests for the utils module functions """

import json
from pathlib import Path

import pytest
from requests.models import Response

from tumblegrab.utils import guess_media_type, guess_media_extension, load_config, NullLogger
from tumblegrab.typing_custom import MediaKind, TumblrConfig, TUMBLR_USER_AGENT

def test_guess_media_type():
    """ Tests the guess_media_type function """
    response = Response()

    response.headers["content-type"] = "image/jpeg"
    assert guess_media_type(response) == MediaKind.IMAGE

    response.headers["content-type"] = "video/mp4"
    assert guess_media_type(response) == MediaKind.VIDEO

    response.headers["content-type"] = "text/html; charset=utf-8"
    assert guess_media_type(response) == MediaKind.OTHER

def test_guess_media_extension():
    """ Tests the guess_media_extension function """
    response = Response()

    response.headers["content-type"] = "image/jpeg"
    assert guess_media_extension(response) == ".jpg"

    response.headers["content-type"] = "image/png; charset=binary"
    assert guess_media_extension(response) == ".png"

    response.headers["content-type"] = "application/json"
    assert guess_media_extension(response) == ".json"

def test_load_config(tmp_path: Path):
    """ Tests the load_config function """
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"proxy_url": "http://proxy:8080", "api_token": "secret"}), encoding="utf-8")

    config = load_config(path)
    assert config == TumblrConfig(user_agent=TUMBLR_USER_AGENT, proxy_url="http://proxy:8080", api_token="secret")
    assert load_config(None) == TumblrConfig()

def test_load_config_unknown_key(tmp_path: Path):
    """ Tests that unknown configuration keys are rejected """
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"password": "hunter2"}), encoding="utf-8")

    with pytest.raises(TypeError):
        load_config(path)

def test_null_logger(capsys):
    """ Tests the NullLogger class """
    logger = NullLogger()
    logger.debug("Debug message")
    logger.info("Info message")
    logger.warning("Warning message")
    logger.error("Error message")
    logger.critical("Critical message")
    captured = capsys.readouterr()
    assert captured.out == ""
