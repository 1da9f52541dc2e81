"""Master data and transactional records stored in the company spreadsheet."""

from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class ItemCategory(str, Enum):
    """Item families used across the plant."""
    IDRAULICA = "Idraulica"
    CARPENTERIA = "Carpenteria"
    ELETTRONICA = "Elettronica"
    VERNICIATURA = "Verniciatura"
    SALDATURA = "Saldatura"
    GENERICO = "Generico"


class Item(BaseModel):
    """
    Inventory item (sheet "Articoli").

    Attributes:
        sku: Unique item code
        supplier_id: Weak reference to a Supplier id, not validated
        row_index: 1-based sheet row the record was read from. Only set for
            records loaded by a paginated range read; required for updates.
    """
    sku: str
    name: str = ""
    category: ItemCategory = ItemCategory.GENERICO
    cost: float = Field(default=0.0, ge=0)
    stock: int = Field(default=0, ge=0)
    safety_stock: int = Field(default=0, ge=0)
    supplier_id: str = ""
    lead_time_days: int = Field(default=0, ge=0)
    row_index: Optional[int] = Field(default=None, ge=1)


class Supplier(BaseModel):
    """Supplier master record (sheet "Fornitori")."""
    id: str
    name: str = ""
    rating: float = Field(default=3.0, ge=1, le=5)
    email: str = ""
    payment_terms: str = ""
    row_index: Optional[int] = Field(default=None, ge=1)


class Customer(BaseModel):
    """Customer master record (sheet "Clienti")."""
    id: str
    name: str = ""
    vat_number: str = ""
    email: str = ""
    address: str = ""
    region: str = ""
    payment_terms: str = ""
    row_index: Optional[int] = Field(default=None, ge=1)


class Company(BaseModel):
    """A tenant and the spreadsheet that backs it."""
    id: str
    name: str
    spreadsheet_id: str


class AdminProfile(BaseModel):
    """Registry data of the company running the dashboard."""
    company_name: str
    vat_number: str
    tax_id: str
    address: str
    city: str
    zip_code: str
    province: str
    country: str
    email: str
    phone: str
    website: str
    bank_name: str
    iban: str
    swift: str


class PurchaseOrderLine(BaseModel):
    sku: str
    description: str
    qty: int
    unit_price: float
    total: float


class PurchaseOrder(BaseModel):
    """Purchase order header with its lines."""
    id: str
    date: str
    supplier_id: str
    supplier_name: str
    status: Literal["DRAFT", "SENT", "CONFIRMED", "SHIPPED", "RECEIVED", "PARTIAL", "CANCELLED"]
    items: List[PurchaseOrderLine] = Field(default_factory=list)
    total_amount: float
    expected_delivery_date: Optional[str] = None
    tracking_code: Optional[str] = None
    notes: Optional[str] = None


class LogisticsEvent(BaseModel):
    """Inbound or outbound shipment tracked against an order."""
    id: str
    type: Literal["INBOUND", "OUTBOUND"]
    reference_id: str
    date: str
    courier: Optional[str] = None
    tracking: Optional[str] = None
    status: Literal["TRANSIT", "DELIVERED", "EXCEPTION"]
    items_count: int
