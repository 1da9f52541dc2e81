"""Seed dataset served while no spreadsheet credential is active.

Master data is kept as typed records and rendered to sheet rows on demand, so
mock reads go through exactly the same decode/filter/slice path as live reads.
"""

from typing import Any, Dict, List

from ..core.codecs import CUSTOMER_SCHEMA, ITEM_SCHEMA, SUPPLIER_SCHEMA, EntitySchema
from ..models.entities import (
    AdminProfile,
    Customer,
    Item,
    ItemCategory,
    LogisticsEvent,
    PurchaseOrder,
    PurchaseOrderLine,
    Supplier,
)

SEED_ITEMS: List[Item] = [
    Item(sku="HYD-VAL-001", name="Valvola Controllo Flusso", category=ItemCategory.IDRAULICA,
         stock=12, safety_stock=20, cost=150, supplier_id="SUP-01", lead_time_days=7),
    Item(sku="STL-PLT-5MM", name="Piastra Acciaio 5mm", category=ItemCategory.CARPENTERIA,
         stock=500, safety_stock=200, cost=45, supplier_id="SUP-02", lead_time_days=7),
    Item(sku="ELC-PLC-X2", name="Centralina PLC Veicolare", category=ItemCategory.ELETTRONICA,
         stock=5, safety_stock=10, cost=800, supplier_id="SUP-03", lead_time_days=7),
    Item(sku="PNT-YEL-RAL", name="Vernice Gialla RAL1023", category=ItemCategory.VERNICIATURA,
         stock=50, safety_stock=40, cost=20, supplier_id="SUP-04", lead_time_days=7),
    Item(sku="WLD-ROD-X1", name="Elettrodi Saldatura Inox", category=ItemCategory.SALDATURA,
         stock=1000, safety_stock=500, cost=0.5, supplier_id="SUP-02", lead_time_days=7),
]

SEED_SUPPLIERS: List[Supplier] = [
    Supplier(id="SUP-01", name="HydraForce Italia", rating=4.8, email="sales@hydraforce.it", payment_terms="60 DFFM"),
    Supplier(id="SUP-02", name="Acciaierie Venete", rating=4.2, email="ordini@acciaierie.it", payment_terms="30 DF"),
    Supplier(id="SUP-03", name="AutoElectric Pro", rating=3.9, email="info@autoelectric.com", payment_terms="RB 30/60"),
]

SEED_CUSTOMERS: List[Customer] = [
    Customer(id="CUST-01", name="Municipalità di Milano", email="appalti@comune.milano.it",
             vat_number="01199250158", address="Piazza della Scala, 2", region="Lombardia",
             payment_terms="Bonifico 30gg"),
    Customer(id="CUST-02", name="Roma Multiservizi", email="acquisti@romamultiservizi.it",
             vat_number="05438871003", address="Via Tiburtina 100", region="Lazio",
             payment_terms="Bonifico 60gg"),
    Customer(id="CUST-03", name="Hera SpA", email="procurement@gruppohera.it",
             vat_number="04245520376", address="Viale Berti Pichat 2/4", region="Emilia-Romagna",
             payment_terms="Bonifico 90gg"),
]

SEED_ADMIN_PROFILE = AdminProfile(
    company_name="EB-pro Procurement Solutions S.r.l.",
    vat_number="IT12345678901",
    tax_id="12345678901",
    address="Via dell'Innovazione Tecnologica, 42",
    city="Milano",
    zip_code="20100",
    province="MI",
    country="Italia",
    email="admin@eb-pro.com",
    phone="+39 02 555 1234",
    website="www.eb-pro.com",
    bank_name="Intesa Sanpaolo",
    iban="IT60X0306903200100000012345",
    swift="BCITITMM",
)

SEED_ORDERS: List[PurchaseOrder] = [
    PurchaseOrder(
        id="PO-2023-1001", date="2023-10-01", supplier_id="SUP-01", supplier_name="HydraForce Italia",
        status="RECEIVED", total_amount=4500.50, tracking_code="DHL-123456",
        items=[PurchaseOrderLine(sku="HYD-VAL-001", description="Valvola Controllo Flusso",
                                 qty=30, unit_price=150.0, total=4500.0)],
    ),
    PurchaseOrder(
        id="PO-2023-1015", date="2023-10-18", supplier_id="SUP-02", supplier_name="Acciaierie Venete",
        status="SHIPPED", total_amount=9000.0, expected_delivery_date="2023-10-25",
        items=[PurchaseOrderLine(sku="STL-PLT-5MM", description="Piastra Acciaio 5mm",
                                 qty=200, unit_price=45.0, total=9000.0)],
    ),
]

SEED_LOGISTICS: List[LogisticsEvent] = [
    LogisticsEvent(id="LOG-001", type="INBOUND", reference_id="PO-2023-1015", date="2023-10-23",
                   courier="Bartolini", tracking="BRT-998877", status="TRANSIT", items_count=150),
    LogisticsEvent(id="LOG-002", type="INBOUND", reference_id="PO-2023-1001", date="2023-10-05",
                   courier="DHL", tracking="DHL-123456", status="DELIVERED", items_count=30),
]

_SEED_RECORDS: Dict[str, list] = {
    ITEM_SCHEMA.sheet: SEED_ITEMS,
    SUPPLIER_SCHEMA.sheet: SEED_SUPPLIERS,
    CUSTOMER_SCHEMA.sheet: SEED_CUSTOMERS,
}


def seed_rows(schema: EntitySchema) -> List[List[Any]]:
    """Seed records of one sheet, as the data rows a live sheet would hold."""
    return [schema.encode(record) for record in _SEED_RECORDS.get(schema.sheet, [])]
