from sqlalchemy import select

from .part import Category, Footprint, Part
from .stock import Location, Stock

# One row per part (and stock location), flattened for searching and display.
inventory = (
    select(
        Part.id.label("id"),
        Part.mpn.label("mpn"),
        Category.name.label("category"),
        Footprint.name.label("footprint"),
        Part.value.label("value"),
        Location.name.label("location"),
        Stock.quantity.label("quantity"),
        Stock.staged.label("staged"),
        Part.comments.label("comments"),
    )
    .select_from(Part)
    .outerjoin(Stock, Part.id == Stock.part_id)
    .outerjoin(Location, Stock.location_id == Location.id)
    .outerjoin(Category, Part.category_id == Category.id)
    .outerjoin(Footprint, Part.footprint_id == Footprint.id)
    .subquery("inventory")
)
