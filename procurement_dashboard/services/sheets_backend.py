"""Google Sheets values API access.

Only the three calls the data store needs: read a range, overwrite a range,
append below a range. The bearer token is passed per call so the caller
decides which credential snapshot a request runs with.
"""

import logging
from typing import Any, List, Optional, Protocol
from urllib.parse import quote

import httpx

from ..config import settings
from ..core.errors import AuthenticationRequiredError, RangeReadError, WriteFailedError

logger = logging.getLogger(__name__)

Rows = List[List[Any]]


class SheetsBackend(Protocol):
    """Spreadsheet API used by the data store."""

    async def get_values(self, spreadsheet_id: str, range_address: str, token: str) -> Rows:
        ...

    async def update_values(self, spreadsheet_id: str, range_address: str, values: Rows, token: str) -> None:
        ...

    async def append_values(self, spreadsheet_id: str, range_address: str, values: Rows, token: str) -> None:
        ...


class GoogleSheetsBackend:
    """Sheets API v4 client over ``httpx.AsyncClient``.

    Raises:
        AuthenticationRequiredError: the backend answered 401 (token expired or revoked)
        RangeReadError: any other failure on ``get_values``
        WriteFailedError: any other failure on ``update_values``/``append_values``
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        base_url: str = settings.SHEETS_API_BASE_URL,
        timeout: float = settings.SHEETS_TIMEOUT_SECONDS,
    ):
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "GoogleSheetsBackend":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    @staticmethod
    def _values_path(spreadsheet_id: str, range_address: str, suffix: str = "") -> str:
        return f"/spreadsheets/{spreadsheet_id}/values/{quote(range_address, safe='')}{suffix}"

    @staticmethod
    def _headers(token: str) -> dict:
        return {"Authorization": f"Bearer {token}"}

    async def get_values(self, spreadsheet_id: str, range_address: str, token: str) -> Rows:
        try:
            response = await self._client.get(
                self._values_path(spreadsheet_id, range_address),
                params={"valueRenderOption": settings.SHEETS_VALUE_RENDER_OPTION},
                headers=self._headers(token),
            )
        except httpx.HTTPError as e:
            raise RangeReadError(range_address, str(e)) from e

        if response.status_code == 401:
            raise AuthenticationRequiredError("Access token rejected by Google Sheets.")
        if response.is_error:
            raise RangeReadError(range_address, f"HTTP {response.status_code}: {response.text[:200]}")

        # Sheets omits "values" entirely for an empty range.
        return response.json().get("values", [])

    async def update_values(self, spreadsheet_id: str, range_address: str, values: Rows, token: str) -> None:
        await self._write(
            "PUT",
            self._values_path(spreadsheet_id, range_address),
            range_address,
            values,
            token,
        )

    async def append_values(self, spreadsheet_id: str, range_address: str, values: Rows, token: str) -> None:
        await self._write(
            "POST",
            self._values_path(spreadsheet_id, range_address, ":append"),
            range_address,
            values,
            token,
        )

    async def _write(self, method: str, path: str, range_address: str, values: Rows, token: str) -> None:
        try:
            response = await self._client.request(
                method,
                path,
                params={"valueInputOption": settings.SHEETS_VALUE_INPUT_OPTION},
                json={"values": values},
                headers=self._headers(token),
            )
        except httpx.HTTPError as e:
            raise WriteFailedError(f"Write to {range_address} failed: {e}", {"range": range_address}) from e

        if response.status_code == 401:
            raise AuthenticationRequiredError("Access token rejected by Google Sheets.")
        if response.is_error:
            raise WriteFailedError(
                f"Write to {range_address} rejected: HTTP {response.status_code}",
                {"range": range_address, "status_code": response.status_code, "body": response.text[:500]},
            )
        logger.info(f"{method} {range_address}: {len(values)} row(s) written")
