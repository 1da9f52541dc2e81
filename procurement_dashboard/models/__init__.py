from .common import ErrorResponse, HealthResponse, TokenRequest
from .entities import (
    AdminProfile,
    Company,
    Customer,
    Item,
    ItemCategory,
    LogisticsEvent,
    PurchaseOrder,
    PurchaseOrderLine,
    Supplier,
)
from .pagination import PageRequest, PageResult
from .mrp import MRPPage, MRPResult, MRPSummary
from .analysis import (
    AiAnalysisResult,
    CategorySpend,
    DashboardOverview,
    EngagementDocument,
    EngagementRequest,
    EngagementType,
    GenerationRequest,
    GenerationResponse,
    GroundingSource,
    Kpi,
    ScoutingMode,
    ScoutingRequest,
    ScoutingResult,
)

__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "TokenRequest",
    "AdminProfile",
    "Company",
    "Customer",
    "Item",
    "ItemCategory",
    "LogisticsEvent",
    "PurchaseOrder",
    "PurchaseOrderLine",
    "Supplier",
    "PageRequest",
    "PageResult",
    "MRPPage",
    "MRPResult",
    "MRPSummary",
    "AiAnalysisResult",
    "CategorySpend",
    "DashboardOverview",
    "EngagementDocument",
    "EngagementRequest",
    "EngagementType",
    "GenerationRequest",
    "GenerationResponse",
    "GroundingSource",
    "Kpi",
    "ScoutingMode",
    "ScoutingRequest",
    "ScoutingResult",
]
