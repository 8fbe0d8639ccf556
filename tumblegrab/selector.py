""" This module picks the best variant of a media asset. """

from typing import Iterable

from tumblegrab.errors import NoVariantsError
from tumblegrab.typing_custom import MediaVariant


def select(variants: Iterable[MediaVariant]) -> str:
    """ Returns the URL of the widest variant, the first one listed on ties. """
    # sorted() is stable, so equally wide variants keep their original order
    ranked = sorted(variants, key=lambda variant: variant.width, reverse=True)
    if len(ranked) == 0:
        raise NoVariantsError("No variants to select from")
    return ranked[0].url
