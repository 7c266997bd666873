"""
Electronic component catalog.

Models:
- Category / Footprint / Location (lookup tables)
- Part (one row per manufacturer part)
- Stock (quantity and staged reservation per part per location)

`inventory` is the flattened read relation the search and staging code works against.
"""

from .part import Category, Footprint, Part
from .stock import Location, Stock
from .view import inventory

__all__ = ["Category", "Footprint", "Location", "Part", "Stock", "inventory"]
