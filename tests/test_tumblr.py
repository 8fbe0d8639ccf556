""" Tests for the TumblrClient class """

import json

import pytest
from flexmock import flexmock
from requests.exceptions import ContentDecodingError, InvalidSchema, TooManyRedirects
from requests.models import Response

from fakes import image_block, raw_post
from tumblegrab.errors import AuthorizationError, MalformedResponseError, TransportError
from tumblegrab.httpclient import HTTPClient, RetryLimitExceededException
from tumblegrab.tumblr import TumblrClient
from tumblegrab.typing_custom import Cursor, TumblrConfig


def make_response(status_code: int = 200, body=None, text: str | None = None) -> Response:
    """ Builds a requests Response without touching the network """
    response = Response()
    response.status_code = status_code
    response.encoding = "utf-8"
    response._content = (text if text is not None else json.dumps(body)).encode("utf-8")
    return response


@pytest.fixture(name="client")
def fixture_client():
    """ Fixture of the TumblrClient """
    return TumblrClient(TumblrConfig(api_token="secret"))


def test_configured_token(client: TumblrClient):
    """ Tests that a configured token skips the home page """
    flexmock(HTTPClient).should_receive("get").never()
    assert client.acquire_session_token() == "secret"


def test_scraped_token():
    """ Tests reading the token embedded in the home page """
    html = '<script>window.___INITIAL_STATE___ = {"API_TOKEN": "abc123", "other": 1}</script>'
    flexmock(HTTPClient).should_receive("get").with_args("https://www.tumblr.com/").and_return(make_response(text=html))
    assert TumblrClient().acquire_session_token() == "abc123"


def test_missing_token():
    """ Tests that a home page without token is a transport error """
    flexmock(HTTPClient).should_receive("get").and_return(make_response(text="<html></html>"))
    with pytest.raises(TransportError):
        TumblrClient().acquire_session_token()


def test_fetch_first_page(client: TumblrClient):
    """ Tests the first page request and its parsing """
    body = {
        "meta": {"status": 200},
        "response": {
            "posts": [raw_post("1", content=[image_block("https://a")])],
            "links": {"next": {"queryParams": {"offset": "20", "pageNumber": "2", "npf": "true"}}},
        },
    }
    flexmock(HTTPClient).should_receive("get").with_args(
        "https://www.tumblr.com/api/v2/blog/carpics/posts",
        params={"npf": "true", "reblog_info": "true", "offset": 0, "page_number": 1},
        headers={"Authorization": "Bearer secret"},
    ).and_return(make_response(body=body)).once()

    result = client.fetch_page("carpics", Cursor(), "secret")
    assert [post.id for post in result.posts] == ["1"]
    assert result.next_cursor == Cursor(2, 20)


def test_fetch_page_sends_cursor_verbatim(client: TumblrClient):
    """ Tests that the server supplied parameters are sent back untouched """
    params = {"offset": "20", "pageNumber": "2", "npf": "true", "tumblelog": "carpics"}
    flexmock(HTTPClient).should_receive("get").with_args(
        "https://www.tumblr.com/api/v2/blog/carpics/posts",
        params=params,
        headers={"Authorization": "Bearer secret"},
    ).and_return(make_response(body={"response": {"posts": []}})).once()

    result = client.fetch_page("carpics", Cursor(2, 20, params), "secret")
    assert result.posts == ()
    assert result.next_cursor is None


@pytest.mark.parametrize("status_code", [401, 403])
def test_fetch_page_unauthorized(client: TumblrClient, status_code: int):
    """ Tests that rejected tokens raise an AuthorizationError """
    flexmock(HTTPClient).should_receive("get").and_return(make_response(status_code, body={}))
    with pytest.raises(AuthorizationError) as error:
        client.fetch_page("carpics", Cursor(), "secret")
    assert error.value.status_code == status_code


def test_fetch_page_server_error(client: TumblrClient):
    """ Tests that error statuses raise a TransportError """
    flexmock(HTTPClient).should_receive("get").and_return(make_response(500, body={}))
    with pytest.raises(TransportError) as error:
        client.fetch_page("carpics", Cursor(), "secret")
    assert not isinstance(error.value, AuthorizationError)
    assert error.value.status_code == 500


def test_fetch_page_retries_exhausted(client: TumblrClient):
    """ Tests that connection failures surface as a TransportError """
    flexmock(HTTPClient).should_receive("get").and_raise(RetryLimitExceededException("nope"))
    with pytest.raises(TransportError):
        client.fetch_page("carpics", Cursor(), "secret")


def test_fetch_page_not_json(client: TumblrClient):
    """ Tests that an HTML body is a malformed response """
    flexmock(HTTPClient).should_receive("get").and_return(make_response(text="<html>maintenance</html>"))
    with pytest.raises(MalformedResponseError):
        client.fetch_page("carpics", Cursor(), "secret")


def test_fetch_permalink(client: TumblrClient):
    """ Tests reading the root post out of a permalink timeline """
    root = raw_post("1", blog="root", content=[image_block("https://a")])
    flexmock(HTTPClient).should_receive("get").with_args(
        "https://www.tumblr.com/api/v2/blog/root/posts/1/permalink",
        params={"reblog_info": "true"},
        headers={"Authorization": "Bearer secret"},
    ).and_return(make_response(body={"response": {"timeline": {"elements": [root]}}}))

    assert client.fetch_permalink("root", "1", "secret") == root


def test_fetch_permalink_empty(client: TumblrClient):
    """ Tests that a permalink without post is a malformed response """
    flexmock(HTTPClient).should_receive("get").and_return(make_response(body={"response": {"timeline": {"elements": []}}}))
    with pytest.raises(MalformedResponseError):
        client.fetch_permalink("root", "1", "secret")


@pytest.mark.parametrize("error", [TooManyRedirects("loop"), InvalidSchema("socks5h://proxy")])
def test_fetch_page_request_error(client: TumblrClient, error: Exception):
    """ Tests that any requests failure surfaces as a TransportError """
    flexmock(HTTPClient).should_receive("get").and_raise(error)
    with pytest.raises(TransportError) as raised:
        client.fetch_page("carpics", Cursor(), "secret")
    assert raised.value.__cause__ is error


def test_fetch_permalink_request_error(client: TumblrClient):
    """ Tests that a redirect loop on a permalink is a TransportError """
    flexmock(HTTPClient).should_receive("get").and_raise(TooManyRedirects("loop"))
    with pytest.raises(TransportError):
        client.fetch_permalink("root", "1", "secret")


def test_fetch_page_undecodable_body(client: TumblrClient):
    """ Tests that a failure while reading the body is a TransportError """
    response = make_response(body={"response": {"posts": []}})
    flexmock(response).should_receive("json").and_raise(ContentDecodingError("bad gzip"))
    flexmock(HTTPClient).should_receive("get").and_return(response)
    with pytest.raises(TransportError):
        client.fetch_page("carpics", Cursor(), "secret")
