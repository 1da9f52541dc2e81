"""A1-notation addressing for sheet-per-entity storage.

Every entity sheet has a single header row, so data starts at row 2. Row
indices are 1-based sheet coordinates throughout.
"""

from dataclasses import dataclass

HEADER_ROWS = 1
FIRST_DATA_ROW = HEADER_ROWS + 1


@dataclass(frozen=True)
class RangeAddress:
    """A contiguous block of rows on one sheet."""

    sheet: str
    start_row: int
    end_row: int
    last_column: str

    @property
    def a1(self) -> str:
        return f"{self.sheet}!A{self.start_row}:{self.last_column}{self.end_row}"

    def __str__(self) -> str:
        return self.a1


def page_range(sheet: str, page: int, page_size: int, last_column: str = "Z") -> RangeAddress:
    """Rows holding the given 1-based page. No clamping against the real row count."""
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")
    start_row = (page - 1) * page_size + FIRST_DATA_ROW
    end_row = start_row + page_size - 1
    return RangeAddress(sheet, start_row, end_row, last_column)


def write_range(sheet: str, row_index: int) -> str:
    """Single-row write target anchored at column A."""
    return f"{sheet}!A{row_index}"


def full_range(sheet: str, last_column: str) -> str:
    """Every data row of the sheet, open-ended downwards."""
    return f"{sheet}!A{FIRST_DATA_ROW}:{last_column}"


def key_column_range(sheet: str) -> str:
    return f"{sheet}!A{FIRST_DATA_ROW}:A"


def append_range(sheet: str) -> str:
    return f"{sheet}!A:A"
