import pytest

from src.core.entities.car_listing import Page
from src.core.entities.listing_query import PageRequest, SortSpec
from src.core.exceptions import InvalidSortFieldError


def test_default_sort():
    assert SortSpec.parse(None) == SortSpec(field="created_at", descending=True)


@pytest.mark.parametrize("raw,expected", [
    ("price,asc", SortSpec("price", False)),
    ("price,DESC", SortSpec("price", True)),
    ("mileage", SortSpec("mileage", False)),
    ("createdAt,desc", SortSpec("created_at", True)),
])
def test_parse_sort(raw, expected):
    assert SortSpec.parse(raw) == expected


def test_parse_sort_rejects_unknown_field():
    with pytest.raises(InvalidSortFieldError) as exc:
        SortSpec.parse("password_hash,asc")
    assert str(exc.value) == "Sorting by field 'password_hash' is not allowed."


def test_parse_sort_rejects_bad_direction():
    with pytest.raises(ValueError):
        SortSpec.parse("price,sideways")


def test_page_request_bounds():
    assert PageRequest(page=2, size=10).offset == 20
    with pytest.raises(ValueError):
        PageRequest(page=-1)
    with pytest.raises(ValueError):
        PageRequest(size=0)


def test_page_metadata():
    page = Page(content=[], page=0, size=10, total_elements=21)
    assert page.total_pages == 3
    assert page.last is False
    assert Page(content=[], page=0, size=10, total_elements=0).last is True
