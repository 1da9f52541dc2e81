"""MRP result models. Derived on every request, never persisted."""

from typing import List

from pydantic import BaseModel

from .entities import Item


class MRPResult(BaseModel):
    """Reorder proposal for one item."""
    item: Item
    is_shortage: bool
    qty_to_order: int
    estimated_cost: float


class MRPSummary(BaseModel):
    """Totals over the complete item set, independent of the displayed page."""
    item_count: int
    shortage_count: int
    total_estimated_cost: float


class MRPPage(BaseModel):
    data: List[MRPResult]
    total: int
    summary: MRPSummary
