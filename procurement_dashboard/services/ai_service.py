"""
AI-assisted procurement analysis through SAP Generative AI Hub.

The text generator is an opaque collaborator. Every call made here has a
deterministic local fallback, so an unreachable model or an unusable answer
never stops the dashboard from rendering.
"""

import asyncio
import json
import logging
import re
from typing import Any, Dict, List, Optional, Protocol, Sequence, Union

from gen_ai_hub.orchestration.models.config import OrchestrationConfig
from gen_ai_hub.orchestration.models.llm import LLM
from gen_ai_hub.orchestration.models.message import SystemMessage, UserMessage
from gen_ai_hub.orchestration.models.template import Template
from gen_ai_hub.orchestration.service import OrchestrationService

from ..config import settings
from ..core.errors import AIGenerationError
from ..models.analysis import (
    AiAnalysisResult,
    EngagementDocument,
    EngagementType,
    GenerationRequest,
    GenerationResponse,
    GroundingSource,
    Kpi,
    ScoutingMode,
    ScoutingResult,
)
from ..models.entities import Item, Supplier

logger = logging.getLogger(__name__)

# --- Prompts ---

ANALYST_SYSTEM_PROMPT = """Sei un esperto analista di approvvigionamento AI per un ERP di produzione di compattatori per rifiuti.
Il tuo obiettivo è analizzare i dati dell'inventario e dei fornitori per identificare opportunità di risparmio, rischi e KPI di performance."""

ANALYSIS_PROMPT_TEMPLATE = """Analizza i seguenti dati JSON che rappresentano il nostro inventario attuale e la lista fornitori.
1. Calcola il valore totale dell'inventario attuale.
2. Identifica il fornitore principale per volume di articoli collegati.
3. Suggerisci eventuali rischi basati su bassi livelli di scorta (assumi logica scorta di sicurezza).
4. Restituisci una risposta strutturata con un riepilogo, 3 KPI distinti e raccomandazioni operative.

Dati: {data}"""

ANALYSIS_RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "summary": {"type": "string"},
        "kpis": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "label": {"type": "string"},
                    "value": {"type": "string"},
                    "trend": {"type": "string", "enum": ["up", "down", "neutral"]},
                },
            },
        },
        "recommendations": {"type": "array", "items": {"type": "string"}},
    },
}

SCOUTING_ITEM_PROMPT = """Sto cercando nuovi fornitori alternativi per questo articolo:
- Prodotto: {name} ({category})
- Fornitore Attuale: {context_name}
- Costo attuale: € {cost}

Trova 2-3 produttori o distributori reali e affidabili (preferibilmente in Europa/Italia) che vendono prodotti simili.

Per ogni candidato trovato:
1. Spiega il motivo della scelta (specializzazione, certificazioni visibili, posizione geografica).
2. Fai una breve analisi comparativa rispetto al fornitore attuale.
3. Fornisci un link al sito web in formato Markdown [nome](url) se disponibile.

Formatta la risposta in Markdown chiaro e leggibile, usando elenchi puntati e grassetti."""

SCOUTING_SUPPLIER_PROMPT = """Sto cercando COMPETITORS diretti del seguente fornitore:
- Azienda Target: {name}
- Settore: Forniture industriali / Metalmeccanica
- Rating Interno: {rating}/5

Trova 2-3 aziende concorrenti che operano nello stesso mercato (Italia/Europa).

Per ogni competitor trovato:
1. Analizza i punti di forza rispetto a {name} (es. gamma prodotti più ampia, tecnologie più recenti, logistica).
2. Valuta la reputazione online se disponibile.
3. Fornisci link al sito web in formato Markdown [nome](url).

Formatta la risposta in Markdown chiaro."""

ENGAGEMENT_PROMPTS = {
    EngagementType.RFI: (
        'Scrivi una email formale di Request For Information (RFI) indirizzata a "{candidate}". '
        'Noi siamo "{company}". Siamo interessati al loro prodotto "{item}" per la nostra produzione di compattatori. '
        "Chiedi informazioni su capacità produttiva, certificazioni ISO e lead time standard. Tono professionale ma diretto."
    ),
    EngagementType.NDA: (
        'Genera un breve testo per un accordo di riservatezza (NDA) standard tra "{company}" e "{candidate}". '
        'Oggetto: Scambio informazioni tecniche per fornitura di "{item}". '
        "Includi clausole standard su durata (2 anni) e penali generiche."
    ),
    EngagementType.RFQ: (
        'Scrivi una email di Request For Quotation (RFQ) per "{candidate}". '
        'Richiediamo quotazione per 1000 unità di "{item}". '
        "Chiedi scontistica per volumi, termini di pagamento e resa (Incoterms)."
    ),
}

# --- Fallback texts ---

AI_UNAVAILABLE_MESSAGE = "Servizio AI non disponibile."
MODEL_NOT_FOUND_MESSAGE = "Modello AI non trovato o credenziali non valide."
SCOUTING_FALLBACK_TEXT = (
    "Impossibile completare la ricerca web al momento. Verifica la connessione o le credenziali AI."
)
SCOUTING_EMPTY_TEXT = "Nessun risultato trovato."
ENGAGEMENT_FALLBACK_TEXT = "Errore durante la generazione del testo."

_MARKDOWN_LINK = re.compile(r"\[([^\]]+)\]\((https?://[^)\s]+)\)")
_JSON_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$")


class TextGenerator(Protocol):
    """Text-generation collaborator contract."""

    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        ...


class GenAIHubTextGenerator:
    """
    TextGenerator backed by the Generative AI Hub orchestration service.

    Structured requests embed the JSON schema in the system prompt and parse the
    answer as JSON. Orchestration responses carry no grounding metadata, so for
    grounded requests the sources are the Markdown links found in the answer.
    """

    def __init__(
        self,
        orchestration_service: Optional[OrchestrationService] = None,
        model: str = settings.LLM_MODEL_NAME,
        grounded_model: str = settings.LLM_SCOUTING_MODEL_NAME,
        temperature: float = settings.LLM_TEMPERATURE,
        timeout: float = settings.LLM_TIMEOUT_SECONDS,
    ):
        self._orchestration = orchestration_service
        self._model = model
        self._grounded_model = grounded_model
        self._temperature = temperature
        self._timeout = timeout

    def _service(self) -> OrchestrationService:
        # Built lazily: the constructor reads AI Core credentials from the environment.
        if self._orchestration is None:
            self._orchestration = OrchestrationService()
        return self._orchestration

    def _build_config(self, system_prompt: str, model: str) -> OrchestrationConfig:
        return OrchestrationConfig(
            template=Template(messages=[SystemMessage(system_prompt)]),
            llm=LLM(name=model, parameters={"temperature": self._temperature}),
        )

    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        system_prompt = request.system_prompt
        if request.response_schema is not None:
            system_prompt += (
                "\n\nReturn ONLY a JSON object that follows this JSON schema, with no other text:\n"
                + json.dumps(request.response_schema)
            )
        model = self._grounded_model if request.grounded else self._model

        try:
            result = await asyncio.wait_for(
                self._service().arun(
                    config=self._build_config(system_prompt, model),
                    history=[UserMessage(request.user_prompt)],
                ),
                timeout=self._timeout,
            )
            content = result.orchestration_result.choices[0].message.content
        except asyncio.TimeoutError as e:
            raise AIGenerationError(f"LLM call timed out after {self._timeout}s") from e
        except Exception as e:
            raise AIGenerationError(f"LLM call failed: {e}") from e

        if not content:
            raise AIGenerationError("Empty response from LLM")

        if request.response_schema is not None:
            try:
                parsed = json.loads(_JSON_FENCE.sub("", content.strip()))
            except json.JSONDecodeError as e:
                raise AIGenerationError(f"LLM response is not valid JSON: {e}") from e
            if not isinstance(parsed, dict):
                raise AIGenerationError("LLM response is not a JSON object")
            return GenerationResponse(structured_json=parsed)

        sources = []
        if request.grounded:
            sources = [GroundingSource(title=t, uri=u) for t, u in _MARKDOWN_LINK.findall(content)]
        return GenerationResponse(free_text=content, grounding_sources=sources)


def unique_sources(sources: Sequence[GroundingSource]) -> List[GroundingSource]:
    """Drop placeholder URIs and keep the first source per URI."""
    seen = set()
    unique = []
    for source in sources:
        if not source.uri or source.uri == "#" or source.uri in seen:
            continue
        seen.add(source.uri)
        unique.append(source)
    return unique


class ProcurementAnalyst:
    """Procurement analysis, supplier scouting and engagement drafts."""

    def __init__(self, generator: Optional[TextGenerator] = None):
        self._generator = generator or GenAIHubTextGenerator()

    async def analyze_procurement_data(
        self, items: Sequence[Item], suppliers: Sequence[Supplier]
    ) -> AiAnalysisResult:
        data_context = json.dumps(
            {
                "inventorySummary": [
                    {"sku": i.sku, "name": i.name, "stock": i.stock, "cost": i.cost, "supplier": i.supplier_id}
                    for i in items
                ],
                "supplierSummary": [{"id": s.id, "name": s.name, "rating": s.rating} for s in suppliers],
            },
            ensure_ascii=False,
        )
        request = GenerationRequest(
            system_prompt=ANALYST_SYSTEM_PROMPT,
            user_prompt=ANALYSIS_PROMPT_TEMPLATE.format(data=data_context),
            response_schema=ANALYSIS_RESPONSE_SCHEMA,
        )
        try:
            response = await self._generator.generate(request)
            if response.structured_json is None:
                raise AIGenerationError("No structured answer from AI")
            return AiAnalysisResult.model_validate(response.structured_json)
        except Exception as e:
            logger.error(f"AI procurement analysis failed: {e}")
            return fallback_analysis(items, suppliers, reason=_describe_failure(e))

    async def scout_suppliers(
        self, target: Union[Item, Supplier], context_name: str, mode: ScoutingMode
    ) -> ScoutingResult:
        if mode == ScoutingMode.ITEM:
            prompt = SCOUTING_ITEM_PROMPT.format(
                name=target.name, category=target.category.value, context_name=context_name, cost=target.cost
            )
        else:
            prompt = SCOUTING_SUPPLIER_PROMPT.format(name=target.name, rating=target.rating)

        request = GenerationRequest(system_prompt=ANALYST_SYSTEM_PROMPT, user_prompt=prompt, grounded=True)
        try:
            response = await self._generator.generate(request)
        except Exception as e:
            logger.error(f"Scouting failed: {e}")
            return ScoutingResult(analysis_text=SCOUTING_FALLBACK_TEXT, sources=[], degraded=True)

        return ScoutingResult(
            analysis_text=response.free_text or SCOUTING_EMPTY_TEXT,
            sources=unique_sources(response.grounding_sources),
        )

    async def generate_engagement_content(
        self, doc_type: EngagementType, candidate_name: str, item_name: str, company_name: str
    ) -> EngagementDocument:
        prompt = ENGAGEMENT_PROMPTS[doc_type].format(
            candidate=candidate_name, item=item_name, company=company_name
        )
        request = GenerationRequest(system_prompt=ANALYST_SYSTEM_PROMPT, user_prompt=prompt)
        try:
            response = await self._generator.generate(request)
        except Exception as e:
            logger.error(f"Engagement draft ({doc_type.value}) failed: {e}")
            return EngagementDocument(doc_type=doc_type, content=ENGAGEMENT_FALLBACK_TEXT, degraded=True)
        return EngagementDocument(doc_type=doc_type, content=response.free_text or ENGAGEMENT_FALLBACK_TEXT)


def fallback_analysis(
    items: Sequence[Item], suppliers: Sequence[Supplier], reason: str = AI_UNAVAILABLE_MESSAGE
) -> AiAnalysisResult:
    """Minimal locally computed summary used whenever the AI call fails."""
    return AiAnalysisResult(
        summary=f"{reason} Visualizzazione calcoli base.",
        kpis=[
            Kpi(label="Totale Articoli", value=str(len(items)), trend="neutral"),
            Kpi(label="Fornitori Attivi", value=str(len(suppliers)), trend="up"),
        ],
        recommendations=[
            "Controllare registri inventario manuali",
            "Verificare configurazione credenziali AI",
        ],
        degraded=True,
    )


def _describe_failure(error: Exception) -> str:
    if "404" in str(error):
        return MODEL_NOT_FOUND_MESSAGE
    return AI_UNAVAILABLE_MESSAGE
