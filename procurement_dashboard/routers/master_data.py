"""
Master data API routes: items, suppliers and customers.

GET endpoints page the company sheet (or the seed data while signed out).
POST appends a new row. PUT overwrites the row named by the record's
``row_index``, so records taken from search results must be refetched by
page before they can be updated.
"""

from fastapi import APIRouter, Depends, Query, status

from ..config import settings
from ..dependencies import get_store
from ..models.entities import Customer, Item, Supplier
from ..models.pagination import PageResult
from ..security import get_api_key
from ..services.data_store import SpreadsheetDataStore

router = APIRouter(
    prefix="/companies/{company_id}",
    tags=["master-data"],
    dependencies=[Depends(get_api_key)],
)

PAGE_QUERY = Query(1, ge=1, description="1-based page number")
PAGE_SIZE_QUERY = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE)
SEARCH_QUERY = Query("", description="Case-insensitive substring filter")


# --- Items ---

@router.get("/items", response_model=PageResult[Item])
async def list_items(
    page: int = PAGE_QUERY,
    page_size: int = PAGE_SIZE_QUERY,
    search: str = SEARCH_QUERY,
    store: SpreadsheetDataStore = Depends(get_store),
):
    """Items matching ``search`` on name or SKU."""
    return await store.items.list(page, page_size, search)


@router.post("/items", response_model=Item, status_code=status.HTTP_201_CREATED)
async def create_item(item: Item, store: SpreadsheetDataStore = Depends(get_store)):
    await store.items.create(item)
    return item


@router.put("/items", response_model=Item)
async def update_item(item: Item, store: SpreadsheetDataStore = Depends(get_store)):
    await store.items.update(item)
    return item


# --- Suppliers ---

@router.get("/suppliers", response_model=PageResult[Supplier])
async def list_suppliers(
    page: int = PAGE_QUERY,
    page_size: int = PAGE_SIZE_QUERY,
    search: str = SEARCH_QUERY,
    store: SpreadsheetDataStore = Depends(get_store),
):
    return await store.suppliers.list(page, page_size, search)


@router.post("/suppliers", response_model=Supplier, status_code=status.HTTP_201_CREATED)
async def create_supplier(supplier: Supplier, store: SpreadsheetDataStore = Depends(get_store)):
    await store.suppliers.create(supplier)
    return supplier


@router.put("/suppliers", response_model=Supplier)
async def update_supplier(supplier: Supplier, store: SpreadsheetDataStore = Depends(get_store)):
    await store.suppliers.update(supplier)
    return supplier


# --- Customers ---

@router.get("/customers", response_model=PageResult[Customer])
async def list_customers(
    page: int = PAGE_QUERY,
    page_size: int = PAGE_SIZE_QUERY,
    search: str = SEARCH_QUERY,
    store: SpreadsheetDataStore = Depends(get_store),
):
    return await store.customers.list(page, page_size, search)


@router.post("/customers", response_model=Customer, status_code=status.HTTP_201_CREATED)
async def create_customer(customer: Customer, store: SpreadsheetDataStore = Depends(get_store)):
    await store.customers.create(customer)
    return customer


@router.put("/customers", response_model=Customer)
async def update_customer(customer: Customer, store: SpreadsheetDataStore = Depends(get_store)):
    await store.customers.update(customer)
    return customer
