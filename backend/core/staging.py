"""
Staged (reserved but not yet taken) quantities.

Every write is a single conditional UPDATE whose WHERE clause re-checks the
bounds against the row as it is at write time, so concurrent adjusters on
the same item serialize in the store and can never push ``staged`` outside
``[0, quantity]``.
"""

import inspect
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, Union

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.errors import STORE_FAILURES, StoreError
from db.inventory import Stock

logger = logging.getLogger(__name__)

ChangeListener = Callable[[int], Union[None, Awaitable[None]]]


@dataclass(frozen=True)
class StageResult:
    item_id: int
    applied: bool
    # New value when applied, otherwise the value currently stored (None if unknown)
    staged: Optional[int]

    @property
    def is_anomaly(self) -> bool:
        return self.staged is not None and self.staged < 0


class StagingLedger:
    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self._session_maker = session_maker
        self._listeners: List[ChangeListener] = []

    def add_listener(self, listener: ChangeListener) -> None:
        """Register a callback invoked with the row count after each successful commit."""
        self._listeners.append(listener)

    async def stage(self, item_id: int) -> StageResult:
        return await self.adjust(item_id, 1)

    async def unstage(self, item_id: int) -> StageResult:
        return await self.adjust(item_id, -1)

    async def adjust(self, item_id: int, delta: int) -> StageResult:
        stock_tbl = Stock.__table__
        new_staged = func.coalesce(stock_tbl.c.staged, 0) + delta
        # A part may be stocked in several locations; stage against its first countable row only
        candidates = stock_tbl.alias("candidates")
        target_id = (
            select(func.min(candidates.c.id))
            .where(candidates.c.part_id == item_id, candidates.c.quantity.is_not(None))
            .scalar_subquery()
        )
        stmt = (
            update(stock_tbl)
            .where(
                stock_tbl.c.id == target_id,
                stock_tbl.c.quantity.is_not(None),
                new_staged >= 0,
                new_staged <= stock_tbl.c.quantity,
            )
            .values(staged=new_staged)
            .returning(stock_tbl.c.staged)
        )

        try:
            async with self._session_maker() as session:
                async with session.begin():
                    row = (await session.execute(stmt)).first()
                    if row is not None:
                        logger.info("Item %s staged %+d -> %s", item_id, delta, row.staged)
                        return StageResult(item_id=item_id, applied=True, staged=row.staged)

                    # Rejected by the bounds; read back only to show the current value
                    current = (
                        await session.execute(
                            select(stock_tbl.c.staged)
                            .where(stock_tbl.c.part_id == item_id)
                            .order_by(stock_tbl.c.quantity.is_(None), stock_tbl.c.id)
                            .limit(1)
                        )
                    ).scalar_one_or_none()
        except STORE_FAILURES as e:
            logger.exception("Staging adjust failed for item %s (delta %+d)", item_id, delta)
            raise StoreError() from e

        logger.info("Item %s staging %+d rejected (staged=%s)", item_id, delta, current)
        return StageResult(item_id=item_id, applied=False, staged=current)

    async def commit(self) -> int:
        """Turn every valid reservation into a quantity deduction, all rows in one statement.

        Rows whose staged amount exceeds their quantity are left untouched.
        Returns the number of rows committed.
        """
        stock_tbl = Stock.__table__
        stmt = (
            update(stock_tbl)
            .where(
                stock_tbl.c.staged.is_not(None),
                stock_tbl.c.quantity.is_not(None),
                stock_tbl.c.staged <= stock_tbl.c.quantity,
            )
            .values(
                quantity=stock_tbl.c.quantity - func.coalesce(stock_tbl.c.staged, 0),
                staged=None,
            )
        )

        try:
            async with self._session_maker() as session:
                async with session.begin():
                    res = await session.execute(stmt)
                    committed = res.rowcount
        except STORE_FAILURES as e:
            logger.exception("Staging commit failed")
            raise StoreError() from e

        logger.info("Committed staging for %d stock rows", committed)
        await self._notify(committed)
        return committed

    async def _notify(self, committed: int) -> None:
        for listener in self._listeners:
            try:
                outcome = listener(committed)
                if inspect.isawaitable(outcome):
                    await outcome
            except Exception:
                # The commit is already durable at this point
                logger.exception("Inventory change listener %r failed", listener)
