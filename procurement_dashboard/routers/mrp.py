"""MRP API routes."""

from fastapi import APIRouter, Depends, Query

from ..config import settings
from ..dependencies import get_store
from ..models.mrp import MRPPage
from ..security import get_api_key
from ..services.data_store import SpreadsheetDataStore
from ..services.mrp_service import calculate_mrp

router = APIRouter(
    prefix="/companies/{company_id}",
    tags=["mrp"],
    dependencies=[Depends(get_api_key)],
)


@router.get("/mrp", response_model=MRPPage)
async def get_mrp(
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.MRP_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    search: str = Query("", description="Restrict planning to items matching name or SKU"),
    store: SpreadsheetDataStore = Depends(get_store),
):
    """
    Reorder proposals for every item below safety stock.

    Planning runs over the full item set; ``page`` and ``page_size`` only
    select which results are returned. ``summary`` covers all planned items.
    """
    return await calculate_mrp(store, page, page_size, search)
