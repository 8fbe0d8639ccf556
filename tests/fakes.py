""" In-memory stand-ins for the Tumblr API used across the tests """

from typing import Optional

from tumblegrab.normalize import to_post
from tumblegrab.typing_custom import Cursor, Page


def image_block(url: str, width: int = 500, key: Optional[str] = None) -> dict:
    """ Builds a raw NPF image block with a single variant """
    media = {"url": url, "width": width}
    if key is not None:
        media["mediaKey"] = key
    return {"type": "image", "media": [media]}


def video_block(poster_url: Optional[str] = None, key: Optional[str] = None) -> dict:
    """ Builds a raw NPF video block, with a poster if a URL is given """
    block = {"type": "video", "url": "https://va.media.tumblr.com/video.mp4"}
    if poster_url is not None:
        poster = {"url": poster_url, "width": 540}
        if key is not None:
            poster["mediaKey"] = key
        block["poster"] = [poster]
    return block


def raw_post(post_id: str, blog: str = "carpics", content: Optional[list] = None, trail: Optional[list] = None, **extra) -> dict:
    """ Builds a raw post the way the Tumblr web API returns it """
    post = {
        "idString": post_id,
        "blogName": blog,
        "tags": ["cars"],
        "content": content if content is not None else [],
        "trail": [{"content": entry} for entry in (trail if trail is not None else [])],
    }
    post.update(extra)
    return post


def reblog(post_id: str, root_author: str, root_id: str, **extra) -> dict:
    """ Builds a raw reblog of another post, without any inline content """
    return raw_post(post_id, rebloggedRootName=root_author, rebloggedRootId=root_id, parentPostId=root_id, **extra)


def page(*posts: dict, next_cursor: Optional[Cursor] = None) -> Page:
    """ Builds a page out of raw posts """
    return Page(posts=tuple(to_post(post) for post in posts), next_cursor=next_cursor)


class FakeTransport:
    """ Serves pre-built pages and permalinks, recording every call """

    def __init__(self, pages: Optional[list] = None, permalinks: Optional[dict] = None):
        # Items are either a Page or an exception to raise
        self.pages = pages if pages is not None else []
        self.permalinks = permalinks if permalinks is not None else {}
        self.page_calls: list[tuple[str, Cursor, str]] = []
        self.permalink_calls: list[tuple[str, str]] = []
        self.token_calls = 0

    def acquire_session_token(self) -> str:
        self.token_calls += 1
        return f"token-{self.token_calls}"

    def fetch_page(self, blog: str, cursor: Cursor, token: str) -> Page:
        self.page_calls.append((blog, cursor, token))
        result = self.pages[len(self.page_calls) - 1]
        if isinstance(result, Exception):
            raise result
        return result

    def fetch_permalink(self, root_author: str, root_id: str, token: str) -> dict:
        self.permalink_calls.append((root_author, root_id))
        result = self.permalinks[(root_author, root_id)]
        if isinstance(result, Exception):
            raise result
        return result
