"""Request and response models for AI-assisted analysis."""

from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class Kpi(BaseModel):
    label: str
    value: str
    trend: Literal["up", "down", "neutral"] = "neutral"


class AiAnalysisResult(BaseModel):
    """
    Structured procurement analysis.

    Attributes:
        summary: Narrative summary of inventory and supplier state
        kpis: Headline indicators
        recommendations: Operational recommendations
        degraded: True when the text was produced by the local fallback
    """
    summary: str
    kpis: List[Kpi] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    degraded: bool = False


class GroundingSource(BaseModel):
    title: str
    uri: str


class ScoutingMode(str, Enum):
    """What the scouting search looks for."""
    ITEM = "ITEM"
    SUPPLIER = "SUPPLIER"


class ScoutingRequest(BaseModel):
    company_id: str
    mode: ScoutingMode
    target_id: str = Field(..., description="SKU in ITEM mode, supplier id in SUPPLIER mode")


class ScoutingResult(BaseModel):
    analysis_text: str
    sources: List[GroundingSource] = Field(default_factory=list)
    degraded: bool = False


class EngagementType(str, Enum):
    RFI = "RFI"
    NDA = "NDA"
    RFQ = "RFQ"


class EngagementRequest(BaseModel):
    doc_type: EngagementType
    candidate_name: str
    item_name: str
    company_name: str


class EngagementDocument(BaseModel):
    doc_type: EngagementType
    content: str
    degraded: bool = False


class GenerationRequest(BaseModel):
    """
    Call contract of the text-generation collaborator.

    Attributes:
        response_schema: JSON schema the answer must follow; when given the
            collaborator answers with ``structured_json``
        grounded: Ask for a web-grounded answer with sources
    """
    system_prompt: str
    user_prompt: str
    response_schema: Optional[Dict[str, Any]] = None
    grounded: bool = False


class GenerationResponse(BaseModel):
    structured_json: Optional[Dict[str, Any]] = None
    free_text: Optional[str] = None
    grounding_sources: List[GroundingSource] = Field(default_factory=list)


class CategorySpend(BaseModel):
    category: str
    value: float


class DashboardOverview(BaseModel):
    """Landing-page figures, computed over the full item and supplier sets."""
    company_id: str
    item_count: int
    supplier_count: int
    shortage_count: int
    total_inventory_value: float
    category_spend: List[CategorySpend]
    analysis: AiAnalysisResult
