from typing import Literal, Optional

from pydantic import BaseModel, field_validator

from core.units import format_value

ALL_CATEGORIES = "All Categories"
ALL_FOOTPRINTS = "All Footprints"
NO_FOOTPRINT = "No Footprint"

SortColumn = Literal["mpn", "category", "footprint", "value", "quantity"]
SortDirection = Literal["asc", "desc"]

SORT_COLUMNS = ("mpn", "category", "footprint", "value", "quantity")
ANOMALY_MARKER = "!"


def is_all_categories(value: Optional[str]) -> bool:
    v = (value or "").strip().lower()
    return v in ("", "all", ALL_CATEGORIES.lower())


def is_all_footprints(value: Optional[str]) -> bool:
    v = (value or "").strip().lower()
    return v in ("", "all", ALL_FOOTPRINTS.lower())


def is_no_footprint(value: Optional[str]) -> bool:
    v = (value or "").strip().lower()
    return v in ("none", NO_FOOTPRINT.lower())


def staged_display(staged: Optional[int]) -> str:
    """Staged column text: blank when nothing is staged, a marker when the stored value is negative."""
    if staged is None or staged == 0:
        return ""
    if staged < 0:
        return ANOMALY_MARKER
    return str(staged)


class SearchQuery(BaseModel):
    category: str = ""
    footprint: str = ""
    min_val: str = ""
    max_val: str = ""
    in_stock: bool = False
    in_stage: bool = False
    search: str = ""
    sort: SortColumn = "mpn"
    dir: SortDirection = "desc"

    @field_validator("category", "footprint", "min_val", "max_val", "search", mode="before")
    @classmethod
    def _strip(cls, v: Optional[str]) -> str:
        return (v or "").strip()

    @field_validator("sort", mode="before")
    @classmethod
    def _sort(cls, v: Optional[str]) -> str:
        v = (v or "").strip().lower()
        return v if v in SORT_COLUMNS else "mpn"

    @field_validator("dir", mode="before")
    @classmethod
    def _dir(cls, v: Optional[str]) -> str:
        return "asc" if (v or "").strip().lower() == "asc" else "desc"


class InventoryItemOut(BaseModel):
    id: int
    mpn: Optional[str] = None
    category: Optional[str] = None
    footprint: Optional[str] = None
    value: Optional[float] = None
    location: Optional[str] = None
    quantity: Optional[int] = None
    staged: Optional[int] = None
    comments: Optional[str] = None
    value_display: str = ""
    staged_display: str = ""

    @classmethod
    def from_row(cls, row) -> "InventoryItemOut":
        return cls(
            id=row.id,
            mpn=row.mpn,
            category=row.category,
            footprint=row.footprint,
            value=row.value,
            location=row.location,
            quantity=row.quantity,
            staged=row.staged,
            comments=row.comments,
            value_display=format_value(row.category, row.value),
            staged_display=staged_display(row.staged),
        )


class StageResultOut(BaseModel):
    id: int
    applied: bool
    staged: Optional[int] = None
    staged_display: str = ""
    anomaly: bool = False


class CommitResultOut(BaseModel):
    ok: bool = True
    committed: int
