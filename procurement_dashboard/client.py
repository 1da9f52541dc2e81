"""
Async client for the Procurement Dashboard API.

Besides plain list/create/update calls it hands out paginated query
controllers bound to a list endpoint, which is what a tabbed UI drives.
"""

import logging
from typing import Any, Dict, Optional, Type

import httpx
from pydantic import BaseModel

from .config import settings
from .core.errors import (
    AuthenticationRequiredError,
    MissingRowIndexError,
    ProcurementError,
    UnknownCompanyError,
    WriteFailedError,
)
from .core.paginated_query import PaginatedQueryController
from .models.analysis import DashboardOverview, EngagementDocument, EngagementRequest, ScoutingRequest, ScoutingResult
from .models.entities import Customer, Item, LogisticsEvent, PurchaseOrder, Supplier
from .models.mrp import MRPPage
from .models.pagination import PageResult

logger = logging.getLogger(__name__)

ENTITY_MODELS: Dict[str, Type[BaseModel]] = {
    "items": Item,
    "suppliers": Supplier,
    "customers": Customer,
    "orders": PurchaseOrder,
    "logistics": LogisticsEvent,
}

_ERRORS_BY_CODE = {
    AuthenticationRequiredError.code: AuthenticationRequiredError,
    UnknownCompanyError.code: UnknownCompanyError,
    MissingRowIndexError.code: MissingRowIndexError,
    WriteFailedError.code: WriteFailedError,
}


class ProcurementApiClient:
    """
    Args:
        company_id: Tenant every entity call is scoped to
        base_url: API root, defaults to ``API_BASE_URL``
        api_key: Value for the ``X-API-Key`` header
        sheets_token: Optional Google Sheets token sent as a bearer token
    """

    def __init__(
        self,
        company_id: str,
        base_url: str = settings.API_BASE_URL,
        api_key: Optional[str] = settings.API_KEY,
        sheets_token: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 60.0,
    ):
        self.company_id = company_id
        headers = {}
        if api_key:
            headers["X-API-Key"] = api_key
        if sheets_token:
            headers["Authorization"] = f"Bearer {sheets_token}"
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self._headers = headers

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ProcurementApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _request(self, method: str, endpoint: str, **kwargs) -> Any:
        response = await self._client.request(method, f"/api{endpoint}", headers=self._headers, **kwargs)
        if response.is_error:
            raise _error_from_response(response)
        return response.json()

    def _company_path(self, suffix: str) -> str:
        return f"/companies/{self.company_id}/{suffix}"

    # --- master data ---

    async def list(self, entity: str, page: int = 1, page_size: int = settings.DEFAULT_PAGE_SIZE, search: str = "") -> PageResult:
        model = ENTITY_MODELS[entity]
        payload = await self._request(
            "GET",
            self._company_path(entity),
            params={"page": page, "page_size": page_size, "search": search},
        )
        return PageResult[model].model_validate(payload)

    async def create(self, entity: str, record: BaseModel) -> BaseModel:
        payload = await self._request("POST", self._company_path(entity), json=record.model_dump(mode="json"))
        return ENTITY_MODELS[entity].model_validate(payload)

    async def update(self, entity: str, record: BaseModel) -> BaseModel:
        payload = await self._request("PUT", self._company_path(entity), json=record.model_dump(mode="json"))
        return ENTITY_MODELS[entity].model_validate(payload)

    def paginated(
        self,
        entity: str,
        page_size: int = settings.DEFAULT_PAGE_SIZE,
        initial_search: str = "",
        debounce_seconds: float = settings.SEARCH_DEBOUNCE_SECONDS,
    ) -> PaginatedQueryController:
        """Controller whose fetches go to this client's list endpoint for ``entity``."""
        if entity not in ENTITY_MODELS:
            raise ValueError(f"Unknown entity '{entity}'")

        async def fetch(page: int, size: int, search: str) -> PageResult:
            return await self.list(entity, page, size, search)

        return PaginatedQueryController(
            fetch,
            page_size=page_size,
            initial_search=initial_search,
            debounce_seconds=debounce_seconds,
            name=entity,
        )

    # --- planning and analysis ---

    async def mrp(self, page: int = 1, page_size: int = settings.MRP_PAGE_SIZE, search: str = "") -> MRPPage:
        payload = await self._request(
            "GET", self._company_path("mrp"), params={"page": page, "page_size": page_size, "search": search}
        )
        return MRPPage.model_validate(payload)

    async def overview(self) -> DashboardOverview:
        return DashboardOverview.model_validate(await self._request("GET", self._company_path("overview")))

    async def scout(self, request: ScoutingRequest) -> ScoutingResult:
        payload = await self._request("POST", "/ai/scouting", json=request.model_dump(mode="json"))
        return ScoutingResult.model_validate(payload)

    async def engagement(self, request: EngagementRequest) -> EngagementDocument:
        payload = await self._request("POST", "/ai/engagement", json=request.model_dump(mode="json"))
        return EngagementDocument.model_validate(payload)


def _error_from_response(response: httpx.Response) -> ProcurementError:
    """Rebuild the server-side error from an ``ErrorResponse`` body where possible."""
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}

    message = body.get("error") or body.get("detail") or f"HTTP {response.status_code}"
    if not isinstance(message, str):
        message = str(message)
    error_type = _ERRORS_BY_CODE.get(body.get("code"))
    logger.error(f"API request {response.request.method} {response.request.url.path} failed: {message}")

    if error_type is AuthenticationRequiredError:
        return AuthenticationRequiredError(message)
    if error_type is WriteFailedError:
        return WriteFailedError(message, body.get("details"))
    if error_type is MissingRowIndexError:
        details = body.get("details") or {}
        return MissingRowIndexError(details.get("entity", "record"), details.get("key"), details.get("row_index"))
    if error_type is UnknownCompanyError:
        details = body.get("details") or {}
        return UnknownCompanyError(details.get("company_id", ""))
    return ProcurementError(message, {"status_code": response.status_code})
