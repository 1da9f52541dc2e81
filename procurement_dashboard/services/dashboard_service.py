"""Landing-page figures for one company."""

import asyncio
import logging
from collections import defaultdict
from typing import Dict, List, Sequence

from ..core import mrp_engine
from ..models.analysis import CategorySpend, DashboardOverview
from ..models.entities import Item
from .ai_service import ProcurementAnalyst
from .data_store import SpreadsheetDataStore

logger = logging.getLogger(__name__)


def inventory_value(items: Sequence[Item]) -> float:
    return sum(item.stock * item.cost for item in items)


def category_spend(items: Sequence[Item]) -> List[CategorySpend]:
    """Stock value per category, largest first."""
    totals: Dict[str, float] = defaultdict(float)
    for item in items:
        totals[item.category.value] += item.stock * item.cost
    return [
        CategorySpend(category=category, value=value)
        for category, value in sorted(totals.items(), key=lambda kv: kv[1], reverse=True)
    ]


async def build_overview(
    company_id: str, store: SpreadsheetDataStore, analyst: ProcurementAnalyst
) -> DashboardOverview:
    items, suppliers = await asyncio.gather(store.items.list_all(), store.suppliers.list_all())
    shortages = sum(1 for result in mrp_engine.compute(items) if result.is_shortage)
    analysis = await analyst.analyze_procurement_data(items, suppliers)

    logger.info(
        f"Overview for {company_id}: {len(items)} items, {len(suppliers)} suppliers, "
        f"{shortages} shortages (analysis degraded={analysis.degraded})"
    )
    return DashboardOverview(
        company_id=company_id,
        item_count=len(items),
        supplier_count=len(suppliers),
        shortage_count=shortages,
        total_inventory_value=inventory_value(items),
        category_spend=category_spend(items),
        analysis=analysis,
    )
