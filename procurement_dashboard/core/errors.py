"""Error taxonomy for the procurement data layer.

Read failures are absorbed by the store (empty page + log line); write
failures always propagate to the caller.
"""

from typing import Optional


class ProcurementError(Exception):
    """Base class for all procurement dashboard errors."""

    code = "procurement_error"

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class AuthenticationRequiredError(ProcurementError):
    """A write was attempted without an active spreadsheet credential."""

    code = "authentication_required"

    def __init__(self, message: str = "Sign-in required to save data."):
        super().__init__(message)


class MissingRowIndexError(ProcurementError):
    """An update was attempted on a record that carries no usable row index.

    Always a caller bug, typically an edit made from search results without
    refetching the row by range first.
    """

    code = "missing_row_index"

    def __init__(self, entity: str, key: Optional[str] = None, row_index: Optional[int] = None):
        if row_index is None:
            message = f"Cannot update {entity} '{key}': row index missing."
        else:
            message = f"Cannot update {entity} '{key}': invalid row index {row_index}."
        super().__init__(message, {"entity": entity, "key": key, "row_index": row_index})


class WriteFailedError(ProcurementError):
    """The spreadsheet backend rejected a write (stale or out-of-range row, quota, network)."""

    code = "write_failed"


class RangeReadError(ProcurementError):
    """Transient backend failure while reading a range."""

    code = "range_read_failed"

    def __init__(self, range_address: str, reason: str):
        super().__init__(
            f"Error fetching range {range_address}: {reason}",
            {"range": range_address},
        )
        self.range_address = range_address


class AIGenerationError(ProcurementError):
    """The text-generation collaborator failed or returned an unusable answer."""

    code = "ai_generation_failed"


class UnknownCompanyError(ProcurementError):
    """No tenant is configured under the requested company id."""

    code = "unknown_company"

    def __init__(self, company_id: str):
        super().__init__(f"Company '{company_id}' not found", {"company_id": company_id})
