"""
Reorder-point MRP over the item master.

An item is short when its stock is strictly below its safety stock; the
proposal restores it to the safety level at the item's unit cost. No currency
rounding happens here.

Shortage status must be computed over the complete item set. Callers that
display results page by page paginate the *output* of ``compute``, never its
input.
"""

from typing import Iterable, List

from ..models.entities import Item
from ..models.mrp import MRPResult, MRPSummary


def evaluate(item: Item) -> MRPResult:
    qty_to_order = max(0, item.safety_stock - item.stock)
    return MRPResult(
        item=item,
        is_shortage=item.stock < item.safety_stock,
        qty_to_order=qty_to_order,
        estimated_cost=qty_to_order * item.cost,
    )


def compute(items: Iterable[Item]) -> List[MRPResult]:
    """One result per item, in input order."""
    return [evaluate(item) for item in items]


def summarize(results: List[MRPResult]) -> MRPSummary:
    shortages = [r for r in results if r.is_shortage]
    return MRPSummary(
        item_count=len(results),
        shortage_count=len(shortages),
        total_estimated_cost=sum(r.estimated_cost for r in shortages),
    )
