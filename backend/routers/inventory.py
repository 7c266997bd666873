from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from core.auth import require_auth
from core.errors import PROCESSING_ERROR, StoreError
from core.search import InventoryCatalog
from core.staging import StageResult, StagingLedger
from schemas.inventory import (
    CommitResultOut,
    InventoryItemOut,
    SearchQuery,
    StageResultOut,
    staged_display,
)

router = APIRouter(dependencies=[Depends(require_auth)])

# Event name renderers listen for to refresh after a commit
INVENTORY_CHANGED_EVENT = "inventory-changed"


def get_catalog(request: Request) -> InventoryCatalog:
    return request.app.state.catalog


def get_ledger(request: Request) -> StagingLedger:
    return request.app.state.ledger


def _store_unavailable() -> HTTPException:
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=PROCESSING_ERROR)


def _stage_out(result: StageResult) -> StageResultOut:
    return StageResultOut(
        id=result.item_id,
        applied=result.applied,
        staged=result.staged,
        staged_display=staged_display(result.staged),
        anomaly=result.is_anomaly,
    )


@router.get("/search", response_model=List[InventoryItemOut])
async def search_inventory(
    category: str = "",
    footprint: str = "",
    min_val: str = "",
    max_val: str = "",
    in_stock: Optional[str] = None,
    in_stage: Optional[str] = None,
    search: str = "",
    sort: Optional[str] = None,
    dir: Optional[str] = None,
    catalog: InventoryCatalog = Depends(get_catalog),
):
    """
    Search the catalog (at most 100 rows).

    - in_stock / in_stage are presence flags, as sent by an HTML checkbox.
    - min_val / max_val accept engineering notation ("4.7k", "100n"); bounds that don't parse are ignored.
    """
    query = SearchQuery(
        category=category,
        footprint=footprint,
        min_val=min_val,
        max_val=max_val,
        in_stock=in_stock is not None,
        in_stage=in_stage is not None,
        search=search,
        sort=sort,
        dir=dir,
    )
    try:
        return await catalog.search(query)
    except StoreError:
        raise _store_unavailable()


@router.get("/categories", response_model=List[str])
async def list_categories(
    footprint: str = "",
    category: str = "",
    catalog: InventoryCatalog = Depends(get_catalog),
):
    try:
        return await catalog.categories(footprint=footprint, selected=category)
    except StoreError:
        raise _store_unavailable()


@router.get("/footprints", response_model=List[str])
async def list_footprints(
    category: str = "",
    footprint: str = "",
    catalog: InventoryCatalog = Depends(get_catalog),
):
    try:
        return await catalog.footprints(category=category, selected=footprint)
    except StoreError:
        raise _store_unavailable()


@router.post("/{item_id}/stage", response_model=StageResultOut)
async def stage_item(item_id: int, ledger: StagingLedger = Depends(get_ledger)):
    try:
        return _stage_out(await ledger.stage(item_id))
    except StoreError:
        raise _store_unavailable()


@router.post("/{item_id}/unstage", response_model=StageResultOut)
async def unstage_item(item_id: int, ledger: StagingLedger = Depends(get_ledger)):
    try:
        return _stage_out(await ledger.unstage(item_id))
    except StoreError:
        raise _store_unavailable()


@router.post("/staging/confirm", response_model=CommitResultOut)
async def confirm_staging(response: Response, ledger: StagingLedger = Depends(get_ledger)):
    try:
        committed = await ledger.commit()
    except StoreError:
        raise _store_unavailable()

    response.headers["HX-Trigger"] = INVENTORY_CHANGED_EVENT
    return CommitResultOut(committed=committed)
