"""Purchase order and logistics API routes."""

from fastapi import APIRouter, Depends, Query

from ..config import settings
from ..dependencies import get_store
from ..models.entities import LogisticsEvent, PurchaseOrder
from ..models.pagination import PageResult
from ..security import get_api_key
from ..services.data_store import SpreadsheetDataStore

router = APIRouter(
    prefix="/companies/{company_id}",
    tags=["operations"],
    dependencies=[Depends(get_api_key)],
)


@router.get("/orders", response_model=PageResult[PurchaseOrder])
async def list_orders(
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    search: str = Query("", description="Filter on order id, supplier name or tracking code"),
    store: SpreadsheetDataStore = Depends(get_store),
):
    return await store.list_orders(page, page_size, search)


@router.get("/logistics", response_model=PageResult[LogisticsEvent])
async def list_logistics(
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    search: str = Query("", description="Filter on event id, reference, courier or tracking"),
    store: SpreadsheetDataStore = Depends(get_store),
):
    return await store.list_logistics_events(page, page_size, search)
