"""Tests for AI analysis, scouting and engagement drafts, including fallbacks."""

from types import SimpleNamespace

import pytest

from procurement_dashboard.core.errors import AIGenerationError
from procurement_dashboard.models.analysis import (
    EngagementType,
    GenerationRequest,
    GenerationResponse,
    GroundingSource,
    ScoutingMode,
)
from procurement_dashboard.services.ai_service import (
    ENGAGEMENT_FALLBACK_TEXT,
    MODEL_NOT_FOUND_MESSAGE,
    SCOUTING_EMPTY_TEXT,
    SCOUTING_FALLBACK_TEXT,
    GenAIHubTextGenerator,
    ProcurementAnalyst,
    unique_sources,
)
from procurement_dashboard.services.seed_data import SEED_ITEMS, SEED_SUPPLIERS

from conftest import FakeTextGenerator

ANALYSIS_JSON = {
    "summary": "Scorte critiche su due articoli.",
    "kpis": [{"label": "Valore Inventario", "value": "€ 36.350", "trend": "up"}],
    "recommendations": ["Riordinare HYD-VAL-001"],
}


class TestAnalysis:

    @pytest.mark.asyncio
    async def test_structured_answer_is_returned(self):
        generator = FakeTextGenerator(GenerationResponse(structured_json=ANALYSIS_JSON))
        result = await ProcurementAnalyst(generator).analyze_procurement_data(SEED_ITEMS, SEED_SUPPLIERS)
        assert result.summary == ANALYSIS_JSON["summary"]
        assert result.kpis[0].trend == "up"
        assert not result.degraded

    @pytest.mark.asyncio
    async def test_request_carries_schema_and_data(self):
        generator = FakeTextGenerator(GenerationResponse(structured_json=ANALYSIS_JSON))
        await ProcurementAnalyst(generator).analyze_procurement_data(SEED_ITEMS, SEED_SUPPLIERS)
        request = generator.requests[0]
        assert request.response_schema is not None
        assert "HYD-VAL-001" in request.user_prompt
        assert "HydraForce Italia" in request.user_prompt

    @pytest.mark.asyncio
    async def test_failure_falls_back_to_counts(self):
        generator = FakeTextGenerator(error=AIGenerationError("LLM call failed: connection refused"))
        result = await ProcurementAnalyst(generator).analyze_procurement_data(SEED_ITEMS, SEED_SUPPLIERS)
        assert result.degraded
        values = {kpi.label: kpi.value for kpi in result.kpis}
        assert values == {"Totale Articoli": "5", "Fornitori Attivi": "3"}
        assert result.recommendations

    @pytest.mark.asyncio
    async def test_model_not_found_is_reported(self):
        generator = FakeTextGenerator(error=AIGenerationError("LLM call failed: 404 model not found"))
        result = await ProcurementAnalyst(generator).analyze_procurement_data([], [])
        assert result.summary.startswith(MODEL_NOT_FOUND_MESSAGE)

    @pytest.mark.asyncio
    async def test_malformed_answer_falls_back(self):
        generator = FakeTextGenerator(GenerationResponse(structured_json={"kpis": "none"}))
        result = await ProcurementAnalyst(generator).analyze_procurement_data(SEED_ITEMS, [])
        assert result.degraded

    @pytest.mark.asyncio
    async def test_missing_structured_answer_falls_back(self):
        generator = FakeTextGenerator(GenerationResponse(free_text="testo libero"))
        result = await ProcurementAnalyst(generator).analyze_procurement_data(SEED_ITEMS, [])
        assert result.degraded


class TestScouting:

    @pytest.mark.asyncio
    async def test_sources_are_deduplicated(self):
        response = GenerationResponse(
            free_text="Candidati trovati",
            grounding_sources=[
                GroundingSource(title="Bosch Rexroth", uri="https://boschrexroth.com"),
                GroundingSource(title="Placeholder", uri="#"),
                GroundingSource(title="Bosch Rexroth IT", uri="https://boschrexroth.com"),
                GroundingSource(title="Parker", uri="https://parker.com"),
            ],
        )
        generator = FakeTextGenerator(response)
        result = await ProcurementAnalyst(generator).scout_suppliers(
            SEED_ITEMS[0], "HydraForce Italia", ScoutingMode.ITEM
        )
        assert [s.uri for s in result.sources] == ["https://boschrexroth.com", "https://parker.com"]
        assert result.sources[0].title == "Bosch Rexroth"
        assert generator.requests[0].grounded
        assert "HydraForce Italia" in generator.requests[0].user_prompt

    @pytest.mark.asyncio
    async def test_supplier_mode_prompt(self):
        generator = FakeTextGenerator(GenerationResponse(free_text="Competitor"))
        await ProcurementAnalyst(generator).scout_suppliers(
            SEED_SUPPLIERS[1], SEED_SUPPLIERS[1].name, ScoutingMode.SUPPLIER
        )
        assert "Acciaierie Venete" in generator.requests[0].user_prompt
        assert "4.2/5" in generator.requests[0].user_prompt

    @pytest.mark.asyncio
    async def test_empty_answer(self):
        generator = FakeTextGenerator(GenerationResponse(free_text=""))
        result = await ProcurementAnalyst(generator).scout_suppliers(SEED_ITEMS[0], "x", ScoutingMode.ITEM)
        assert result.analysis_text == SCOUTING_EMPTY_TEXT

    @pytest.mark.asyncio
    async def test_failure_returns_apology_without_sources(self):
        generator = FakeTextGenerator(error=AIGenerationError("timeout"))
        result = await ProcurementAnalyst(generator).scout_suppliers(SEED_ITEMS[0], "x", ScoutingMode.ITEM)
        assert result.analysis_text == SCOUTING_FALLBACK_TEXT
        assert result.sources == []
        assert result.degraded

    def test_unique_sources_drops_empty_uri(self):
        sources = [GroundingSource(title="a", uri=""), GroundingSource(title="b", uri="https://b.it")]
        assert [s.title for s in unique_sources(sources)] == ["b"]


class TestEngagement:

    @pytest.mark.asyncio
    async def test_rfq_prompt_names_parties(self):
        generator = FakeTextGenerator(GenerationResponse(free_text="Gentile fornitore..."))
        document = await ProcurementAnalyst(generator).generate_engagement_content(
            EngagementType.RFQ, "Parker", "Valvola Controllo Flusso", "EcoCompact Spa"
        )
        assert document.content == "Gentile fornitore..."
        assert document.doc_type == EngagementType.RFQ
        prompt = generator.requests[0].user_prompt
        assert "Parker" in prompt and "Valvola Controllo Flusso" in prompt

    @pytest.mark.asyncio
    async def test_failure_returns_fixed_text(self):
        generator = FakeTextGenerator(error=AIGenerationError("offline"))
        document = await ProcurementAnalyst(generator).generate_engagement_content(
            EngagementType.NDA, "Parker", "Valvola", "EcoCompact Spa"
        )
        assert document.content == ENGAGEMENT_FALLBACK_TEXT
        assert document.degraded


class FakeOrchestration:
    """Stands in for OrchestrationService; answers every call with ``content``."""

    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    async def arun(self, config=None, history=None):
        self.calls.append((config, history))
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(orchestration_result=SimpleNamespace(choices=[SimpleNamespace(message=message)]))


class TestGenAIHubTextGenerator:

    @pytest.mark.asyncio
    async def test_structured_answer_in_code_fence(self):
        orchestration = FakeOrchestration('```json\n{"summary": "ok"}\n```')
        generator = GenAIHubTextGenerator(orchestration_service=orchestration)
        response = await generator.generate(
            GenerationRequest(system_prompt="s", user_prompt="u", response_schema={"type": "object"})
        )
        assert response.structured_json == {"summary": "ok"}

    @pytest.mark.asyncio
    async def test_invalid_json_raises(self):
        generator = GenAIHubTextGenerator(orchestration_service=FakeOrchestration("not json"))
        with pytest.raises(AIGenerationError):
            await generator.generate(
                GenerationRequest(system_prompt="s", user_prompt="u", response_schema={"type": "object"})
            )

    @pytest.mark.asyncio
    async def test_grounded_answer_lists_markdown_links(self):
        text = "- **Parker** [Parker Hannifin](https://parker.com)\n- [Bosch](https://bosch.com) e altro"
        generator = GenAIHubTextGenerator(orchestration_service=FakeOrchestration(text))
        response = await generator.generate(GenerationRequest(system_prompt="s", user_prompt="u", grounded=True))
        assert response.free_text == text
        assert [s.uri for s in response.grounding_sources] == ["https://parker.com", "https://bosch.com"]

    @pytest.mark.asyncio
    async def test_service_error_is_wrapped(self):
        orchestration = FakeOrchestration(error=RuntimeError("401 Unauthorized"))
        generator = GenAIHubTextGenerator(orchestration_service=orchestration)
        with pytest.raises(AIGenerationError):
            await generator.generate(GenerationRequest(system_prompt="s", user_prompt="u"))

    @pytest.mark.asyncio
    async def test_empty_content_raises(self):
        generator = GenAIHubTextGenerator(orchestration_service=FakeOrchestration(""))
        with pytest.raises(AIGenerationError):
            await generator.generate(GenerationRequest(system_prompt="s", user_prompt="u"))


class TestForeignGeneratorFailures:
    """Any exception from a generator, not only AIGenerationError, yields the fallback."""

    @pytest.mark.asyncio
    async def test_analysis(self):
        generator = FakeTextGenerator(error=ConnectionError("reset by peer"))
        result = await ProcurementAnalyst(generator).analyze_procurement_data(SEED_ITEMS, SEED_SUPPLIERS)
        assert result.degraded

    @pytest.mark.asyncio
    async def test_scouting(self):
        generator = FakeTextGenerator(error=RuntimeError("quota exceeded"))
        result = await ProcurementAnalyst(generator).scout_suppliers(SEED_ITEMS[0], "x", ScoutingMode.ITEM)
        assert result.analysis_text == SCOUTING_FALLBACK_TEXT
        assert result.sources == []

    @pytest.mark.asyncio
    async def test_engagement(self):
        generator = FakeTextGenerator(error=TimeoutError())
        document = await ProcurementAnalyst(generator).generate_engagement_content(
            EngagementType.RFI, "Parker", "Valvola", "EcoCompact Spa"
        )
        assert document.content == ENGAGEMENT_FALLBACK_TEXT
        assert document.degraded
