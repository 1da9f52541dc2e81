"""MRP over the live item master, paginated after the fact."""

import logging

from ..config import settings
from ..core import mrp_engine
from ..models.mrp import MRPPage
from ..models.pagination import PageRequest, slice_page
from .data_store import SpreadsheetDataStore

logger = logging.getLogger(__name__)


async def calculate_mrp(
    store: SpreadsheetDataStore,
    page: int = 1,
    page_size: int = settings.MRP_PAGE_SIZE,
    search: str = "",
) -> MRPPage:
    """
    Compute reorder proposals for every item, then return one page of them.

    The search term narrows which items are planned; it is not a page. The
    summary always covers all planned items, not just the returned page.
    """
    request = PageRequest(page=page, page_size=page_size, search=search)
    items = await store.items.list_all(search=request.search)
    results = mrp_engine.compute(items)
    summary = mrp_engine.summarize(results)
    logger.info(
        f"MRP computed over {summary.item_count} items: {summary.shortage_count} shortages, "
        f"estimated reorder cost {summary.total_estimated_cost:.2f}"
    )
    return MRPPage(data=slice_page(results, request), total=len(results), summary=summary)
