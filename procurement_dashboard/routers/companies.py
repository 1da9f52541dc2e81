"""Company (tenant) API routes."""

from typing import List

from fastapi import APIRouter, Depends

from ..config import settings
from ..dependencies import get_company
from ..models.entities import AdminProfile, Company
from ..security import get_api_key
from ..services.seed_data import SEED_ADMIN_PROFILE

router = APIRouter(
    prefix="/companies",
    tags=["companies"],
    dependencies=[Depends(get_api_key)],
)


@router.get("", response_model=List[Company])
async def list_companies():
    return settings.COMPANIES


@router.get("/{company_id}", response_model=Company)
async def get_company_by_id(company: Company = Depends(get_company)):
    return company


@router.get("/{company_id}/admin-profile", response_model=AdminProfile)
async def get_admin_profile(company: Company = Depends(get_company)):
    """Registered company details used on generated documents."""
    # One profile for every tenant until profiles get their own sheet.
    return SEED_ADMIN_PROFILE
