""" This module turns raw Tumblr payloads into Tumblegrab types. """

import re
from typing import Any, Mapping, Optional

from tumblegrab.errors import MalformedResponseError
from tumblegrab.typing_custom import ContentBlock, Cursor, MediaKind, MediaVariant, Page, Post

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")

_BLOCK_KINDS = {
    "image": MediaKind.IMAGE,
    "video": MediaKind.VIDEO,
}


def snake_case(key: Any) -> Any:
    """ Converts a camelCase key to snake_case, leaving anything else untouched """
    if not isinstance(key, str):
        return key
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def normalize_keys(value: Any) -> Any:
    """
    Recursively maps every mapping key to snake_case.
    Safe to apply to data that is already normalized.
    """
    if isinstance(value, Mapping):
        return {snake_case(key): normalize_keys(item) for key, item in value.items()}
    if isinstance(value, list):
        return [normalize_keys(item) for item in value]
    return value


def _coerce_id(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        value = value.strip()
        return value if value else None
    return None


def _coerce_int(value: Any, default: int = 0) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return default


def _as_list(value: Any) -> list:
    if isinstance(value, list):
        return value
    if isinstance(value, Mapping):
        return [value]
    return []


def to_variants(media: Any) -> tuple[MediaVariant, ...]:
    """ Converts a list of normalized media objects to variants, skipping the ones without a URL """
    variants = []
    for item in _as_list(media):
        if not isinstance(item, Mapping):
            continue
        url = item.get("url")
        if not isinstance(url, str) or not url:
            continue
        variants.append(MediaVariant(
            width=_coerce_int(item.get("width")),
            url=url,
            media_key=_coerce_id(item.get("media_key")),
        ))
    return tuple(variants)


def _first_media_key(variants: tuple[MediaVariant, ...]) -> Optional[str]:
    return next((variant.media_key for variant in variants if variant.media_key), None)


def to_block(block: Any) -> ContentBlock:
    """ Converts a normalized NPF content block """
    if not isinstance(block, Mapping):
        return ContentBlock(MediaKind.OTHER)

    kind = _BLOCK_KINDS.get(block.get("type"), MediaKind.OTHER)
    match kind:
        case MediaKind.IMAGE:
            media = to_variants(block.get("media"))
            return ContentBlock(kind, media=media, media_key=_first_media_key(media))
        case MediaKind.VIDEO:
            poster = to_variants(block.get("poster"))
            return ContentBlock(kind, poster=poster, media_key=_first_media_key(poster))
    return ContentBlock(MediaKind.OTHER)


def _legacy_photo_blocks(photos: Any) -> list[ContentBlock]:
    # Pre-NPF photo posts list each photo as an original size plus smaller alternatives
    blocks = []
    for photo in _as_list(photos):
        if not isinstance(photo, Mapping):
            continue
        sizes = [photo.get("original_size")] + _as_list(photo.get("alt_sizes"))
        media = to_variants([size for size in sizes if size is not None])
        blocks.append(ContentBlock(MediaKind.IMAGE, media=media, media_key=_first_media_key(media)))
    return blocks


def to_post(raw: Any) -> Post:
    """ Converts a raw post, as received from Tumblr, to a Post """
    if not isinstance(raw, Mapping):
        raise MalformedResponseError(f"Expected a post object, got {type(raw).__name__}")

    data = normalize_keys(raw)

    post_id = _coerce_id(data.get("id_string")) or _coerce_id(data.get("id"))
    if post_id is None:
        raise MalformedResponseError("Post without an id")

    blog = data.get("blog")
    blog_name = data.get("blog_name")
    if not blog_name and isinstance(blog, Mapping):
        blog_name = blog.get("name")

    content = [to_block(block) for block in _as_list(data.get("content"))]
    if not content:
        content = _legacy_photo_blocks(data.get("photos"))

    trail = []
    for entry in _as_list(data.get("trail")):
        if isinstance(entry, Mapping):
            trail.append(tuple(to_block(block) for block in _as_list(entry.get("content"))))

    tags = tuple(tag for tag in _as_list(data.get("tags")) if isinstance(tag, str))

    return Post(
        id=post_id,
        blog_name=blog_name if isinstance(blog_name, str) else "",
        tags=tags,
        reblogged_root_name=data.get("reblogged_root_name") or None,
        reblogged_root_id=_coerce_id(data.get("reblogged_root_id")),
        parent_post_id=_coerce_id(data.get("parent_post_id")) or _coerce_id(data.get("reblogged_from_id")),
        content=tuple(content),
        trail=tuple(trail),
    )


def to_cursor(links: Any, current: Cursor) -> Optional[Cursor]:
    """ Reads the next page cursor from the raw links object of a response """
    if links is None:
        return None
    if not isinstance(links, Mapping):
        raise MalformedResponseError("Links object is not a mapping")

    following = links.get("next")
    if following is None:
        return None
    if not isinstance(following, Mapping):
        raise MalformedResponseError("Next link is not a mapping")

    params = following.get("queryParams", following.get("query_params"))
    if not isinstance(params, Mapping):
        raise MalformedResponseError("Next link has no query parameters")

    normalized = normalize_keys(params)
    for key in ("offset", "page_number"):
        if key in normalized and _coerce_int(normalized[key], default=-1) < 0:
            raise MalformedResponseError(f"Cursor {key} is not a number: {normalized[key]!r}")

    return Cursor(
        page_number=_coerce_int(normalized.get("page_number"), default=current.page_number + 1),
        offset=_coerce_int(normalized.get("offset")),
        params=dict(params),
    )


def to_page(body: Any, current: Cursor) -> Page:
    """ Converts the body of a posts response into a Page """
    if not isinstance(body, Mapping) or not isinstance(body.get("response"), Mapping):
        raise MalformedResponseError("Response body has no response object", cursor=current)

    response = body["response"]
    posts = response.get("posts")
    if not isinstance(posts, list):
        raise MalformedResponseError("Response has no posts list", cursor=current)

    try:
        links = response.get("links", response.get("_links"))
        return Page(
            posts=tuple(to_post(post) for post in posts),
            next_cursor=to_cursor(links, current),
        )
    except MalformedResponseError as e:
        e.cursor = current
        raise
