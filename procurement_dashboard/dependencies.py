"""FastAPI dependencies: tenant lookup, credential and store wiring."""

import logging
from typing import Optional

from fastapi import Depends

from .config import settings
from .core.errors import UnknownCompanyError
from .core.session import SessionContext
from .models.entities import Company
from .security import get_sheets_token
from .services.ai_service import ProcurementAnalyst
from .services.data_store import SpreadsheetDataStore
from .services.sheets_backend import GoogleSheetsBackend, SheetsBackend

logger = logging.getLogger(__name__)

# Process-wide credential, fed by the sign-in flow through /api/session/token.
_session = SessionContext()
if settings.SHEETS_ACCESS_TOKEN:
    _session.activate(settings.SHEETS_ACCESS_TOKEN)
    logger.info("Sheets access token loaded from environment")

_backend: Optional[GoogleSheetsBackend] = None
_analyst: Optional[ProcurementAnalyst] = None


def get_session() -> SessionContext:
    return _session


def get_backend() -> SheetsBackend:
    global _backend
    if _backend is None:
        _backend = GoogleSheetsBackend()
    return _backend


async def close_backend() -> None:
    global _backend
    if _backend is not None:
        await _backend.aclose()
        _backend = None


def get_analyst() -> ProcurementAnalyst:
    global _analyst
    if _analyst is None:
        _analyst = ProcurementAnalyst()
    return _analyst


def get_request_session(
    token: Optional[str] = Depends(get_sheets_token),
    session: SessionContext = Depends(get_session),
) -> SessionContext:
    """A bearer token on the request takes precedence over the shared session."""
    if token:
        return SessionContext.with_token(token)
    return session


def find_company(company_id: str) -> Company:
    for company in settings.COMPANIES:
        if company.id == company_id:
            return company
    raise UnknownCompanyError(company_id)


def get_company(company_id: str) -> Company:
    return find_company(company_id)


def get_store(
    company: Company = Depends(get_company),
    backend: SheetsBackend = Depends(get_backend),
    session: SessionContext = Depends(get_request_session),
) -> SpreadsheetDataStore:
    return SpreadsheetDataStore(backend, session, company.spreadsheet_id)
