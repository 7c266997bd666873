import pytest

from schemas.inventory import (
    SearchQuery,
    is_all_categories,
    is_all_footprints,
    is_no_footprint,
    staged_display,
)


@pytest.mark.parametrize("staged, shown", [(None, ""), (0, ""), (3, "3"), (-1, "!")])
def test_staged_display(staged, shown):
    assert staged_display(staged) == shown


@pytest.mark.parametrize("value", ["", "all", "All Categories", "ALL CATEGORIES", None])
def test_all_categories_sentinel(value):
    assert is_all_categories(value)


def test_real_category_is_not_a_sentinel():
    assert not is_all_categories("CapCeramic")


def test_footprint_sentinels():
    assert is_all_footprints("All Footprints")
    assert not is_all_footprints("No Footprint")
    assert is_no_footprint("No Footprint")
    assert is_no_footprint("none")
    assert not is_no_footprint("0603")


def test_text_fields_are_stripped():
    q = SearchQuery(category="  Resistor ", search=" 47k ", min_val=None)
    assert q.category == "Resistor"
    assert q.search == "47k"
    assert q.min_val == ""
