"""Positional row <-> record mapping for the entity sheets.

Sheet rows come back short whenever trailing cells are empty, and numeric
cells come back either as numbers or as locale-formatted strings. Decoding
fills the gaps with defaults; encoding always writes the full fixed-width row.
"""

import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Callable, Generic, List, Optional, Sequence, Tuple, TypeVar

from pydantic import BaseModel

from ..models.entities import Customer, Item, ItemCategory, Supplier

logger = logging.getLogger(__name__)

Row = Sequence[Any]
Record = TypeVar("Record", bound=BaseModel)

_CURRENCY_CHARS = re.compile(r"[€$%\s]")
_THOUSANDS_GROUPED = re.compile(r"^-?\d{1,3}(\.\d{3})+$")


def _cell(row: Row, index: int) -> Any:
    return row[index] if index < len(row) else None


def _text(row: Row, index: int) -> str:
    value = _cell(row, index)
    if value is None:
        return ""
    return str(value).strip()


def parse_number(value: Any, default: float = 0.0) -> float:
    """Parse a sheet cell into a float.

    Formatted strings follow the Italian locale of the company sheets: ``,`` is
    the decimal separator and ``.`` groups thousands ("1.234,50", "1.200").
    A lone dot not followed by a group of three digits is read as a decimal
    separator ("0.5"). Non-finite values ("nan", "inf", "1e400") fall back to
    ``default``.
    """
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        cleaned = _CURRENCY_CHARS.sub("", str(value))
        if not cleaned:
            return default
        if "," in cleaned or _THOUSANDS_GROUPED.match(cleaned):
            cleaned = cleaned.replace(".", "").replace(",", ".")
        try:
            number = float(cleaned)
        except ValueError:
            logger.warning(f"Unparseable numeric cell {value!r}, using {default}")
            return default
    if not math.isfinite(number):
        logger.warning(f"Non-finite numeric cell {value!r}, using {default}")
        return default
    return number


def _non_negative_int(row: Row, index: int, field: str) -> int:
    value = int(parse_number(_cell(row, index)))
    if value < 0:
        logger.warning(f"Negative {field} {value} clamped to 0")
        return 0
    return value


def _category(row: Row, index: int) -> ItemCategory:
    raw = _text(row, index).lower()
    for category in ItemCategory:
        if category.value.lower() == raw:
            return category
    return ItemCategory.GENERICO


def is_blank(row: Row) -> bool:
    return all(cell is None or str(cell).strip() == "" for cell in row)


# --- Items ---
# SKU(0), Name(1), Category(2), Stock(3), SafetyStock(4), Cost(5), SupplierId(6), LeadTime(7)

def decode_item(row: Row, row_index: Optional[int] = None) -> Item:
    return Item(
        sku=_text(row, 0),
        name=_text(row, 1),
        category=_category(row, 2),
        stock=_non_negative_int(row, 3, "stock"),
        safety_stock=_non_negative_int(row, 4, "safety stock"),
        cost=max(0.0, parse_number(_cell(row, 5))),
        supplier_id=_text(row, 6),
        lead_time_days=_non_negative_int(row, 7, "lead time"),
        row_index=row_index,
    )


def encode_item(item: Item) -> List[Any]:
    return [
        item.sku,
        item.name,
        item.category.value,
        item.stock,
        item.safety_stock,
        item.cost,
        item.supplier_id,
        item.lead_time_days,
    ]


# --- Suppliers ---
# ID(0), Name(1), Rating(2), Email(3), PaymentTerms(4)

DEFAULT_RATING = 3.0


def decode_supplier(row: Row, row_index: Optional[int] = None) -> Supplier:
    rating = parse_number(_cell(row, 2), default=DEFAULT_RATING)
    return Supplier(
        id=_text(row, 0),
        name=_text(row, 1),
        rating=min(5.0, max(1.0, rating)),
        email=_text(row, 3),
        payment_terms=_text(row, 4),
        row_index=row_index,
    )


def encode_supplier(supplier: Supplier) -> List[Any]:
    return [supplier.id, supplier.name, supplier.rating, supplier.email, supplier.payment_terms]


# --- Customers ---
# ID(0), Name(1), Email(2), VAT(3), Address(4), Region(5), Payment(6)

def decode_customer(row: Row, row_index: Optional[int] = None) -> Customer:
    return Customer(
        id=_text(row, 0),
        name=_text(row, 1),
        email=_text(row, 2),
        vat_number=_text(row, 3),
        address=_text(row, 4),
        region=_text(row, 5),
        payment_terms=_text(row, 6),
        row_index=row_index,
    )


def encode_customer(customer: Customer) -> List[Any]:
    return [
        customer.id,
        customer.name,
        customer.email,
        customer.vat_number,
        customer.address,
        customer.region,
        customer.payment_terms,
    ]


@dataclass(frozen=True)
class EntitySchema(Generic[Record]):
    """Fixed sheet layout of one entity type."""

    entity: str
    sheet: str
    last_column: str
    width: int
    key_field: str
    search_columns: Tuple[int, ...]
    decode: Callable[[Row, Optional[int]], Record]
    encode: Callable[[Record], List[Any]]

    def matches(self, row: Row, term: str) -> bool:
        """Case-insensitive substring match over the searchable columns."""
        needle = term.lower()
        return any(needle in _text(row, col).lower() for col in self.search_columns)

    def key_of(self, record: Record) -> str:
        return str(getattr(record, self.key_field))


ITEM_SCHEMA: EntitySchema[Item] = EntitySchema(
    entity="item",
    sheet="Articoli",
    last_column="H",
    width=8,
    key_field="sku",
    search_columns=(1, 0),
    decode=decode_item,
    encode=encode_item,
)

SUPPLIER_SCHEMA: EntitySchema[Supplier] = EntitySchema(
    entity="supplier",
    sheet="Fornitori",
    last_column="E",
    width=5,
    key_field="id",
    search_columns=(1,),
    decode=decode_supplier,
    encode=encode_supplier,
)

CUSTOMER_SCHEMA: EntitySchema[Customer] = EntitySchema(
    entity="customer",
    sheet="Clienti",
    last_column="G",
    width=7,
    key_field="id",
    search_columns=(1,),
    decode=decode_customer,
    encode=encode_customer,
)
