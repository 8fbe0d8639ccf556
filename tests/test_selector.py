""" Tests for the select function """

import pytest

from tumblegrab.errors import ExtractionError, NoVariantsError
from tumblegrab.selector import select
from tumblegrab.typing_custom import MediaVariant


def test_select_widest():
    """ Tests that the widest variant wins """
    variants = [MediaVariant(100, "a"), MediaVariant(500, "b"), MediaVariant(300, "c")]
    assert select(variants) == "b"


def test_select_ties_keep_order():
    """ Tests that the first of equally wide variants wins """
    variants = [MediaVariant(100, "a"), MediaVariant(640, "b"), MediaVariant(640, "c")]
    assert select(variants) == "b"


def test_select_empty():
    """ Tests that an empty set of variants is a per-item failure """
    with pytest.raises(NoVariantsError) as error:
        select([])
    assert isinstance(error.value, ExtractionError)
    assert error.value.fatal is False
