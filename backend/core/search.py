"""
Catalog search and filter option lists.

User input never reaches SQL text: every literal is a bound parameter, the
sort column comes from a fixed whitelist and the result size is capped.
"""

import logging
from typing import List, Optional

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.errors import STORE_FAILURES, StoreError
from core.units import parse_value
from db.inventory import inventory
from schemas.inventory import (
    ALL_CATEGORIES,
    ALL_FOOTPRINTS,
    NO_FOOTPRINT,
    InventoryItemOut,
    SearchQuery,
    is_all_categories,
    is_all_footprints,
    is_no_footprint,
)

logger = logging.getLogger(__name__)

# Hard cap on rows per search; there is no paging.
SEARCH_LIMIT = 100


def _category_predicates(category: Optional[str]) -> list:
    if is_all_categories(category):
        return []
    return [inventory.c.category == category.strip()]


def _footprint_predicates(footprint: Optional[str]) -> list:
    if is_all_footprints(footprint):
        return []
    if is_no_footprint(footprint):
        return [inventory.c.footprint.is_(None)]
    return [inventory.c.footprint == footprint.strip()]


def search_predicates(query: SearchQuery) -> list:
    """WHERE clauses for a search request; all of them must hold."""
    preds = _category_predicates(query.category) + _footprint_predicates(query.footprint)

    if query.in_stock:
        preds.append(inventory.c.quantity > 0)
    if query.in_stage:
        preds.append(inventory.c.staged > 0)

    # A bound that does not parse is simply left out.
    min_val = parse_value(query.min_val)
    if min_val is not None:
        preds.append(inventory.c.value >= min_val)
    max_val = parse_value(query.max_val)
    if max_val is not None:
        preds.append(inventory.c.value <= max_val)

    if query.search:
        preds.append(
            or_(
                inventory.c.mpn.icontains(query.search, autoescape=True),
                inventory.c.category.icontains(query.search, autoescape=True),
                inventory.c.comments.icontains(query.search, autoescape=True),
            )
        )
    return preds


def build_search(query: SearchQuery) -> Select:
    order_col = inventory.c[query.sort]
    ordering = order_col.asc() if query.dir == "asc" else order_col.desc()
    tiebreak = inventory.c.id.asc() if query.dir == "asc" else inventory.c.id.desc()
    return (
        select(inventory)
        .where(*search_predicates(query))
        .order_by(ordering, tiebreak)
        .limit(SEARCH_LIMIT)
    )


def build_category_options(footprint: Optional[str]) -> Select:
    return (
        select(inventory.c.category)
        .where(inventory.c.category.is_not(None), *_footprint_predicates(footprint))
        .distinct()
        .order_by(inventory.c.category.asc())
    )


def build_footprint_options(category: Optional[str]) -> Select:
    footprint = func.coalesce(inventory.c.footprint, NO_FOOTPRINT).label("footprint")
    return (
        select(footprint)
        .where(*_category_predicates(category))
        .distinct()
        .order_by(footprint.asc())
    )


def arrange_options(values: List[str], selected: Optional[str], all_sentinel: str) -> List[str]:
    """Order a selector's options: current selection, then the "all" sentinel, then the rest.

    The selection only moves to the front when it is still among the values
    and is not the "all" sentinel itself.
    """
    selected = (selected or "").strip()
    rest = [v for v in values if v != all_sentinel]
    if selected and selected != all_sentinel and selected in rest:
        rest.remove(selected)
        return [selected, all_sentinel] + rest
    return [all_sentinel] + rest


class InventoryCatalog:
    """Read access to the inventory relation. Nothing is cached between calls."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self._session_maker = session_maker

    async def _fetch(self, stmt: Select, what: str):
        try:
            async with self._session_maker() as session:
                res = await session.execute(stmt)
                return res.all()
        except STORE_FAILURES as e:
            logger.exception("%s query failed", what)
            raise StoreError() from e

    async def search(self, query: SearchQuery) -> List[InventoryItemOut]:
        logger.debug("Search query: %r", query)
        rows = await self._fetch(build_search(query), "search")
        return [InventoryItemOut.from_row(r) for r in rows]

    async def categories(self, footprint: Optional[str] = None, selected: Optional[str] = None) -> List[str]:
        rows = await self._fetch(build_category_options(footprint), "category list")
        return arrange_options([r[0] for r in rows], selected, ALL_CATEGORIES)

    async def footprints(self, category: Optional[str] = None, selected: Optional[str] = None) -> List[str]:
        rows = await self._fetch(build_footprint_options(category), "footprint list")
        return arrange_options([r[0] for r in rows], selected, ALL_FOOTPRINTS)
