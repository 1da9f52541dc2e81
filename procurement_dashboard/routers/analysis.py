"""Dashboard overview and AI assistance API routes."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from ..core.session import SessionContext
from ..dependencies import find_company, get_analyst, get_backend, get_request_session, get_store
from ..models.analysis import (
    DashboardOverview,
    EngagementDocument,
    EngagementRequest,
    ScoutingMode,
    ScoutingRequest,
    ScoutingResult,
)
from ..security import get_api_key
from ..services.ai_service import ProcurementAnalyst
from ..services.dashboard_service import build_overview
from ..services.data_store import SpreadsheetDataStore
from ..services.sheets_backend import SheetsBackend

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["analysis"],
    dependencies=[Depends(get_api_key)],
)


@router.get("/companies/{company_id}/overview", response_model=DashboardOverview)
async def get_overview(
    company_id: str,
    store: SpreadsheetDataStore = Depends(get_store),
    analyst: ProcurementAnalyst = Depends(get_analyst),
):
    """Inventory value, spend per category, shortage count and AI analysis."""
    return await build_overview(company_id, store, analyst)


@router.post("/ai/scouting", response_model=ScoutingResult)
async def scout_suppliers(
    request: ScoutingRequest,
    backend: SheetsBackend = Depends(get_backend),
    session: SessionContext = Depends(get_request_session),
    analyst: ProcurementAnalyst = Depends(get_analyst),
):
    """
    Look for alternative sources.

    ITEM mode searches suppliers for the item ``target_id`` (a SKU);
    SUPPLIER mode searches competitors of the supplier ``target_id``.
    """
    company = find_company(request.company_id)
    store = SpreadsheetDataStore(backend, session, company.spreadsheet_id)

    if request.mode == ScoutingMode.ITEM:
        item = await store.items.find(request.target_id)
        if item is None:
            raise HTTPException(status_code=404, detail=f"Item {request.target_id} not found")
        supplier = await store.suppliers.find(item.supplier_id)
        context_name = supplier.name if supplier else item.supplier_id
        return await analyst.scout_suppliers(item, context_name, request.mode)

    supplier = await store.suppliers.find(request.target_id)
    if supplier is None:
        raise HTTPException(status_code=404, detail=f"Supplier {request.target_id} not found")
    return await analyst.scout_suppliers(supplier, supplier.name, request.mode)


@router.post("/ai/engagement", response_model=EngagementDocument)
async def generate_engagement(
    request: EngagementRequest,
    analyst: ProcurementAnalyst = Depends(get_analyst),
):
    """Draft an RFI email, NDA text or RFQ email for a scouted candidate."""
    return await analyst.generate_engagement_content(
        request.doc_type, request.candidate_name, request.item_name, request.company_name
    )
