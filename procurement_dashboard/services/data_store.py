"""
Spreadsheet-as-database access for one company.

Each entity lives on its own sheet with a single header row. Plain paging
reads exactly the rows of the requested page and tags every record with its
sheet row, which is what updates write back to. Searching reads the whole
sheet, filters locally and slices; records found that way carry no row index
and must be refetched by page before they can be updated.

Without an active credential every read is answered from the seed dataset
through the same decode/filter/slice path, and every write is refused.
A token the backend rejects expires the session, and the read is answered the
same way.
"""

import asyncio
import logging
from typing import Callable, Generic, Iterable, List, Optional, Sequence, TypeVar

from ..config import settings
from ..core.codecs import (
    CUSTOMER_SCHEMA,
    ITEM_SCHEMA,
    SUPPLIER_SCHEMA,
    EntitySchema,
    Row,
    is_blank,
)
from ..core.errors import AuthenticationRequiredError, MissingRowIndexError, RangeReadError
from ..core.range_addressing import (
    FIRST_DATA_ROW,
    RangeAddress,
    append_range,
    full_range,
    key_column_range,
    page_range,
    write_range,
)
from ..core.session import SessionContext
from ..models.entities import Customer, Item, LogisticsEvent, PurchaseOrder, Supplier
from ..models.pagination import PageRequest, PageResult, slice_page
from .seed_data import SEED_LOGISTICS, SEED_ORDERS, seed_rows
from .sheets_backend import SheetsBackend

logger = logging.getLogger(__name__)

Record = TypeVar("Record")


class EntityRepository(Generic[Record]):
    """List/create/update for one entity sheet."""

    def __init__(
        self,
        schema: EntitySchema,
        backend: SheetsBackend,
        session: SessionContext,
        spreadsheet_id: str,
    ):
        self.schema = schema
        self._backend = backend
        self._session = session
        self._spreadsheet_id = spreadsheet_id

    # --- reads ---

    async def list(
        self,
        page: int = 1,
        page_size: int = settings.DEFAULT_PAGE_SIZE,
        search: str = "",
    ) -> PageResult[Record]:
        """
        One page of records. A rejected token expires the session and the
        page is served from seed data instead, never as an empty sheet.
        """
        request = PageRequest(page=page, page_size=page_size, search=search)
        token = self._session.snapshot()
        try:
            return await self._page(token, request)
        except RangeReadError as e:
            logger.error(f"[{self.schema.sheet}] {e.message}. Returning empty page.")
            return PageResult.empty()
        except AuthenticationRequiredError as e:
            self._on_rejected_token(e)
            return await self._page(None, request)

    async def list_all(self, search: str = "") -> List[Record]:
        """Every record on the sheet, optionally filtered. Read failures yield an empty list."""
        token = self._session.snapshot()
        term = search.strip()
        try:
            rows = await self._read_all(token)
        except RangeReadError as e:
            logger.error(f"[{self.schema.sheet}] {e.message}. Returning no records.")
            return []
        except AuthenticationRequiredError as e:
            self._on_rejected_token(e)
            rows = await self._read_all(None)

        if term:
            return [self.schema.decode(row, None) for row in self._filter(rows, term)]
        return self._decode_block(rows, FIRST_DATA_ROW)

    async def find(self, key: str) -> Optional[Record]:
        for record in await self.list_all():
            if self.schema.key_of(record) == key:
                return record
        return None

    def _on_rejected_token(self, error: AuthenticationRequiredError) -> None:
        self._session.expire()
        logger.warning(f"[{self.schema.sheet}] {error.message} Falling back to seed data.")

    async def _page(self, token: Optional[str], request: PageRequest) -> PageResult[Record]:
        if request.search.strip():
            return await self._search_page(token, request)
        return await self._range_page(token, request)

    async def _range_page(self, token: Optional[str], request: PageRequest) -> PageResult[Record]:
        address = page_range(self.schema.sheet, request.page, request.page_size, self.schema.last_column)
        rows, count = await asyncio.gather(
            self._read_block(token, address),
            self._count_rows(token),
            return_exceptions=True,
        )
        if isinstance(rows, BaseException):
            raise rows
        if isinstance(count, AuthenticationRequiredError):
            raise count

        data = self._decode_block(rows, address.start_row)
        if isinstance(count, BaseException):
            logger.warning(f"[{self.schema.sheet}] Row count unavailable ({count}), using estimate")
            count = address.start_row - FIRST_DATA_ROW + len(rows)
        return PageResult(data=data, total=count)

    async def _search_page(self, token: Optional[str], request: PageRequest) -> PageResult[Record]:
        matches = self._filter(await self._read_all(token), request.search.strip())
        data = [self.schema.decode(row, None) for row in slice_page(matches, request)]
        return PageResult(data=data, total=len(matches))

    def _filter(self, rows: Iterable[Row], term: str) -> List[Row]:
        return [row for row in rows if not is_blank(row) and self.schema.matches(row, term)]

    def _decode_block(self, rows: Sequence[Row], start_row: int) -> List[Record]:
        return [
            self.schema.decode(row, start_row + offset)
            for offset, row in enumerate(rows)
            if not is_blank(row)
        ]

    # --- raw access (live or seed) ---

    async def _read_block(self, token: Optional[str], address: RangeAddress) -> List[Row]:
        if token is None:
            self._warn_mock()
            seed = seed_rows(self.schema)
            return seed[address.start_row - FIRST_DATA_ROW:address.end_row - FIRST_DATA_ROW + 1]
        return await self._backend.get_values(self._spreadsheet_id, address.a1, token)

    async def _read_all(self, token: Optional[str]) -> List[Row]:
        if token is None:
            self._warn_mock()
            return seed_rows(self.schema)
        return await self._backend.get_values(
            self._spreadsheet_id, full_range(self.schema.sheet, self.schema.last_column), token
        )

    async def _count_rows(self, token: Optional[str]) -> int:
        if token is None:
            rows = seed_rows(self.schema)
        else:
            rows = await self._backend.get_values(
                self._spreadsheet_id, key_column_range(self.schema.sheet), token
            )
        return sum(1 for row in rows if not is_blank(row))

    def _warn_mock(self) -> None:
        logger.warning(f"[{self.schema.sheet}] No access token. Serving seed data.")

    # --- writes ---

    async def create(self, record: Record) -> None:
        """Append a new row; the sheet decides where it lands."""
        token = self._require_token()
        values = [self.schema.encode(record)]
        await self._write(self._backend.append_values, append_range(self.schema.sheet), values, token)
        logger.info(f"[{self.schema.sheet}] Created {self.schema.entity} {self.schema.key_of(record)}")

    async def update(self, record: Record) -> None:
        """Overwrite the single row the record was read from."""
        row_index = getattr(record, "row_index", None)
        if row_index is None or row_index < FIRST_DATA_ROW:
            raise MissingRowIndexError(self.schema.entity, self.schema.key_of(record), row_index)
        token = self._require_token()
        values = [self.schema.encode(record)]
        await self._write(
            self._backend.update_values, write_range(self.schema.sheet, row_index), values, token
        )
        logger.info(
            f"[{self.schema.sheet}] Updated {self.schema.entity} {self.schema.key_of(record)} at row {row_index}"
        )

    def _require_token(self) -> str:
        token = self._session.snapshot()
        if token is None:
            raise AuthenticationRequiredError()
        return token

    async def _write(self, call: Callable, range_address: str, values: List[list], token: str) -> None:
        try:
            await call(self._spreadsheet_id, range_address, values, token)
        except AuthenticationRequiredError:
            self._session.expire()
            raise


class SpreadsheetDataStore:
    """
    Sole gateway to one company's spreadsheet.

    Args:
        backend: Spreadsheet API implementation
        session: Credential holder, read (never mutated except to mark an
            expired token) on every request
        spreadsheet_id: The company's spreadsheet
    """

    def __init__(self, backend: SheetsBackend, session: SessionContext, spreadsheet_id: str):
        self.session = session
        self.spreadsheet_id = spreadsheet_id
        self.items: EntityRepository[Item] = EntityRepository(ITEM_SCHEMA, backend, session, spreadsheet_id)
        self.suppliers: EntityRepository[Supplier] = EntityRepository(
            SUPPLIER_SCHEMA, backend, session, spreadsheet_id
        )
        self.customers: EntityRepository[Customer] = EntityRepository(
            CUSTOMER_SCHEMA, backend, session, spreadsheet_id
        )

    @property
    def live(self) -> bool:
        return self.session.snapshot() is not None

    async def list_orders(
        self, page: int = 1, page_size: int = settings.DEFAULT_PAGE_SIZE, search: str = ""
    ) -> PageResult[PurchaseOrder]:
        # Orders have no sheet yet; the seed list stands in for both modes.
        request = PageRequest(page=page, page_size=page_size, search=search)
        return _page_of(
            SEED_ORDERS,
            request,
            lambda o: (o.id, o.supplier_name, o.tracking_code or ""),
        )

    async def list_logistics_events(
        self, page: int = 1, page_size: int = settings.DEFAULT_PAGE_SIZE, search: str = ""
    ) -> PageResult[LogisticsEvent]:
        request = PageRequest(page=page, page_size=page_size, search=search)
        return _page_of(
            SEED_LOGISTICS,
            request,
            lambda e: (e.id, e.reference_id, e.courier or "", e.tracking or ""),
        )


def _page_of(records: List, request: PageRequest, fields: Callable) -> PageResult:
    term = request.search.strip().lower()
    if term:
        records = [r for r in records if any(term in f.lower() for f in fields(r))]
    return PageResult(data=slice_page(records, request), total=len(records))
