import pytest
from sqlalchemy.dialects import postgresql

from core.search import SEARCH_LIMIT, arrange_options, build_search
from schemas.inventory import SearchQuery


def _sql(query: SearchQuery) -> str:
    return str(build_search(query).compile(dialect=postgresql.dialect()))


# SearchQuery normalization


def test_defaults_sort_by_mpn_descending():
    q = SearchQuery()
    assert q.sort == "mpn"
    assert q.dir == "desc"


@pytest.mark.parametrize("sort", ["price", "id; drop table parts", "", None])
def test_unknown_sort_falls_back_to_mpn(sort):
    assert SearchQuery(sort=sort).sort == "mpn"


@pytest.mark.parametrize("direction, expected", [("asc", "asc"), ("ASC", "asc"), ("desc", "desc"), ("up", "desc"), (None, "desc")])
def test_direction_normalization(direction, expected):
    assert SearchQuery(dir=direction).dir == expected


# Compiled SQL


def test_search_text_is_bound_not_inlined():
    sql = _sql(SearchQuery(search="x' OR 1=1 --"))
    assert "1=1" not in sql
    assert "ILIKE" in sql


def test_search_is_capped():
    stmt = build_search(SearchQuery())
    assert stmt._limit == SEARCH_LIMIT == 100


def test_no_filters_means_no_where_clause():
    assert "WHERE" not in _sql(SearchQuery(category="All Categories", footprint="All Footprints"))


def test_unparseable_bounds_are_dropped():
    sql = _sql(SearchQuery(min_val="abc", max_val="k"))
    assert "WHERE" not in sql


def test_no_footprint_sentinel_becomes_is_null():
    sql = _sql(SearchQuery(footprint="No Footprint"))
    assert "inventory.footprint IS NULL" in sql


# Execution against a store


@pytest.mark.asyncio
async def test_search_composition(catalog, add_item):
    await add_item("R-47K-A", footprint=None, value=47e3, comments="pull-up")
    await add_item("R-10K", footprint=None, value=10e3, comments="has 47K in notes")
    await add_item("R-47K-B", footprint="0603", value=47e3)
    await add_item("C-1", category="CapCeramic", footprint=None, value=1e-9, comments="nothing")

    rows = await catalog.search(SearchQuery(category="all", footprint="No Footprint", search="47k"))

    assert [r.mpn for r in rows] == ["R-47K-A", "R-10K"]
    assert all(r.footprint is None for r in rows)


@pytest.mark.asyncio
async def test_search_wildcards_in_text_are_literal(catalog, add_item):
    await add_item("ABC")
    await add_item("A%C")

    rows = await catalog.search(SearchQuery(search="%"))

    assert [r.mpn for r in rows] == ["A%C"]


@pytest.mark.asyncio
async def test_value_range_uses_engineering_notation(catalog, add_item):
    await add_item("R1", value=1e3)
    await add_item("R2", value=4.7e3)
    await add_item("R3", value=100e3)

    rows = await catalog.search(SearchQuery(min_val="2k", max_val="50 k", sort="value", dir="asc"))

    assert [r.mpn for r in rows] == ["R2"]
    assert rows[0].value_display == "4.70 kΩ"


@pytest.mark.asyncio
async def test_stock_and_stage_flags(catalog, add_item):
    await add_item("EMPTY", quantity=0)
    await add_item("UNKNOWN", quantity=None)
    await add_item("STOCKED", quantity=5)
    await add_item("STAGED", quantity=5, staged=2)

    in_stock = await catalog.search(SearchQuery(in_stock=True, dir="asc"))
    in_stage = await catalog.search(SearchQuery(in_stage=True))

    assert [r.mpn for r in in_stock] == ["STAGED", "STOCKED"]
    assert [r.mpn for r in in_stage] == ["STAGED"]
    assert in_stage[0].staged_display == "2"


@pytest.mark.asyncio
async def test_category_and_footprint_exact_match(catalog, add_item):
    await add_item("R1", footprint="0603")
    await add_item("R2", footprint="0805")
    await add_item("C1", category="CapCeramic", footprint="0603")

    rows = await catalog.search(SearchQuery(category="Resistor", footprint="0603"))

    assert [r.mpn for r in rows] == ["R1"]


@pytest.mark.asyncio
async def test_search_returns_at_most_limit_rows(catalog, add_item):
    for i in range(SEARCH_LIMIT + 5):
        await add_item(f"P{i:03d}")

    rows = await catalog.search(SearchQuery())

    assert len(rows) == SEARCH_LIMIT
    assert rows[0].mpn == f"P{SEARCH_LIMIT + 4:03d}"


# Filter option lists


def test_arrange_moves_selection_first():
    values = ["0402", "0603", "0805", "No Footprint"]
    assert arrange_options(values, "0805", "All Footprints") == [
        "0805",
        "All Footprints",
        "0402",
        "0603",
        "No Footprint",
    ]


def test_arrange_sentinel_selection_keeps_order():
    values = ["0402", "0603"]
    assert arrange_options(values, "All Footprints", "All Footprints") == ["All Footprints", "0402", "0603"]


def test_arrange_missing_selection_is_ignored():
    assert arrange_options(["0402"], "1206", "All Footprints") == ["All Footprints", "0402"]


@pytest.mark.asyncio
async def test_footprints_are_cross_filtered_by_category(catalog, add_item):
    await add_item("R1", footprint="0603")
    await add_item("R2", footprint="0402")
    await add_item("R3", footprint=None)
    await add_item("C1", category="CapCeramic", footprint="1206")

    options = await catalog.footprints(category="Resistor", selected="0603")

    assert options == ["0603", "All Footprints", "0402", "No Footprint"]


@pytest.mark.asyncio
async def test_no_footprint_selection_stays_first(catalog, add_item):
    await add_item("R1", footprint="0603")
    await add_item("R2", footprint=None)

    options = await catalog.footprints(category="All Categories", selected="No Footprint")

    assert options == ["No Footprint", "All Footprints", "0603"]


@pytest.mark.asyncio
async def test_categories_are_cross_filtered_by_footprint(catalog, add_item):
    await add_item("R1", footprint="0603")
    await add_item("C1", category="CapCeramic", footprint="0603")
    await add_item("L1", category="Inductor", footprint=None)

    options = await catalog.categories(footprint="0603", selected="Resistor")
    no_fp = await catalog.categories(footprint="No Footprint", selected="All Categories")

    assert options == ["Resistor", "All Categories", "CapCeramic"]
    assert no_fp == ["All Categories", "Inductor"]
