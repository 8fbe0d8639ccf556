""" This module extracts media candidates from a post and its reblog trail. """

from typing import Iterator

from tumblegrab.typing_custom import CandidateKind, ContentBlock, MediaCandidate, MediaKind, Post


def _blocks(post: Post) -> Iterator[ContentBlock]:
    # Images seen through a reblog only live in the trail, so it is read as if inline
    yield from post.content
    for entry in post.trail:
        yield from entry


def _relevant(block: ContentBlock) -> bool:
    if block.kind is MediaKind.IMAGE:
        return True
    return block.kind is MediaKind.VIDEO and block.has_poster()


def extract(post: Post) -> list[MediaCandidate]:
    """
    Returns the media candidates of a post, video posters first, then images.
    Blocks sharing a media key are only kept at their first occurrence.
    """
    seen_keys: set[str] = set()
    posters: list[MediaCandidate] = []
    images: list[MediaCandidate] = []

    for block in _blocks(post):
        if not _relevant(block):
            continue

        if block.media_key is not None:
            if block.media_key in seen_keys:
                continue
            seen_keys.add(block.media_key)

        if block.kind is MediaKind.VIDEO:
            posters.append(MediaCandidate(CandidateKind.VIDEO_POSTER, block.poster))
        else:
            images.append(MediaCandidate(CandidateKind.IMAGE, block.media))

    return posters + images
