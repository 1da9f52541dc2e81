"""Shared fixtures: in-memory Sheets backend, sessions, fake text generator, API client."""

import re
from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from procurement_dashboard.core.codecs import CUSTOMER_SCHEMA, ITEM_SCHEMA, SUPPLIER_SCHEMA
from procurement_dashboard.core.errors import AIGenerationError, AuthenticationRequiredError, RangeReadError
from procurement_dashboard.core.session import SessionContext
from procurement_dashboard.models.analysis import GenerationRequest, GenerationResponse
from procurement_dashboard.services.ai_service import ProcurementAnalyst
from procurement_dashboard.services.data_store import SpreadsheetDataStore
from procurement_dashboard.services.seed_data import seed_rows

_A1 = re.compile(r"^(?P<sheet>[^!]+)!A(?P<start>\d*)(?::(?P<col>[A-Z]+)(?P<end>\d*))?$")

SPREADSHEET_ID = "sheet-under-test"
TOKEN = "test-token"


class FakeSheetsBackend:
    """
    In-memory spreadsheet. ``sheets[name]`` holds the data rows only; data row
    ``n`` of the sheet (1-based, header on row 1) is ``sheets[name][n - 2]``.
    """

    def __init__(self, sheets: Optional[Dict[str, List[list]]] = None):
        self.sheets = {name: [list(r) for r in rows] for name, rows in (sheets or {}).items()}
        self.calls: List[tuple] = []
        self.fail_reads: set = set()
        self.reject_reads: set = set()
        self.fail_writes: Optional[Exception] = None
        self.reject_tokens = False

    def _parse(self, range_address: str):
        match = _A1.match(range_address)
        assert match, f"unexpected range {range_address}"
        return match

    async def get_values(self, spreadsheet_id, range_address, token):
        self.calls.append(("get", range_address, token))
        if self.reject_tokens or range_address in self.reject_reads:
            raise AuthenticationRequiredError("Access token rejected by Google Sheets.")
        if range_address in self.fail_reads:
            raise RangeReadError(range_address, "HTTP 503: backend unavailable")

        match = self._parse(range_address)
        rows = self.sheets.get(match["sheet"], [])
        start = int(match["start"]) - 2
        end = int(match["end"]) - 1 if match["end"] else len(rows)
        block = rows[start:end]
        if match["col"] == "A":
            return [row[:1] for row in block]
        return [list(row) for row in block]

    async def update_values(self, spreadsheet_id, range_address, values, token):
        self.calls.append(("update", range_address, values, token))
        self._check_write()
        match = self._parse(range_address)
        rows = self.sheets.setdefault(match["sheet"], [])
        index = int(match["start"]) - 2
        while len(rows) <= index:
            rows.append([])
        rows[index] = list(values[0])

    async def append_values(self, spreadsheet_id, range_address, values, token):
        self.calls.append(("append", range_address, values, token))
        self._check_write()
        match = self._parse(range_address)
        self.sheets.setdefault(match["sheet"], []).extend(list(v) for v in values)

    def _check_write(self):
        if self.reject_tokens:
            raise AuthenticationRequiredError("Access token rejected by Google Sheets.")
        if self.fail_writes is not None:
            raise self.fail_writes

    @property
    def writes(self) -> List[tuple]:
        return [c for c in self.calls if c[0] in ("update", "append")]


class FakeTextGenerator:
    """Answers every request with ``response``, or raises ``error`` when set."""

    def __init__(self, response: Optional[GenerationResponse] = None, error: Optional[Exception] = None):
        self.response = response or GenerationResponse(free_text="ok")
        self.error = error
        self.requests: List[GenerationRequest] = []

    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.response


def seeded_sheets() -> Dict[str, List[list]]:
    return {schema.sheet: seed_rows(schema) for schema in (ITEM_SCHEMA, SUPPLIER_SCHEMA, CUSTOMER_SCHEMA)}


@pytest.fixture
def backend():
    return FakeSheetsBackend(seeded_sheets())


@pytest.fixture
def live_session():
    return SessionContext.with_token(TOKEN)


@pytest.fixture
def mock_session():
    return SessionContext()


@pytest.fixture
def live_store(backend, live_session):
    return SpreadsheetDataStore(backend, live_session, SPREADSHEET_ID)


@pytest.fixture
def mock_store(backend, mock_session):
    return SpreadsheetDataStore(backend, mock_session, SPREADSHEET_ID)


@pytest.fixture
def generator():
    return FakeTextGenerator(error=AIGenerationError("LLM call failed: offline"))


@pytest.fixture
def api(backend, mock_session, generator):
    """TestClient wired to the fake backend, a fresh shared session and the fake generator."""
    from procurement_dashboard import dependencies
    from procurement_dashboard.main import app
    from procurement_dashboard.security import get_api_key

    app.dependency_overrides[dependencies.get_backend] = lambda: backend
    app.dependency_overrides[dependencies.get_session] = lambda: mock_session
    app.dependency_overrides[dependencies.get_analyst] = lambda: ProcurementAnalyst(generator)
    app.dependency_overrides[get_api_key] = lambda: "test-key"
    yield TestClient(app)
    app.dependency_overrides.clear()
