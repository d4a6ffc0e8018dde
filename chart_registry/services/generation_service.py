"""ChartGenerationService: prompt -> classified, synthesized, optionally saved chart.

Steps:
1. Classify the prompt (heuristic, deterministic)
2. Synthesize the primary chart and up to two alternatives
3. If the caller asked to save to the organization, persist the primary
   chart through the viewer's organization registry

Generation problems come back as GenerationResult(success=False) with a
readable reason so the caller can offer a retry. PersistenceError is not a
generation problem and propagates.
"""

import time

import structlog

from chart_registry.core.auth import ViewerContext
from chart_registry.core.exceptions import GenerationError, PersistenceError
from chart_registry.domain.classifier import classify
from chart_registry.domain.synthesizer import ChartSynthesizer
from chart_registry.schemas.charts import CreatorInfo, GenerateChartRequest, GenerationResult
from chart_registry.services.registry_provider import RegistryProvider

logger = structlog.get_logger(__name__)

NO_CHART_ERROR = "Unable to generate charts from the provided prompt"


class ChartGenerationService:
    """Orchestrates classifier, synthesizer and organizational registry."""

    def __init__(self, provider: RegistryProvider, synthesizer: ChartSynthesizer | None = None):
        self.provider = provider
        self.synthesizer = synthesizer or ChartSynthesizer()

    async def generate_chart(self, request: GenerateChartRequest, viewer: ViewerContext) -> GenerationResult:
        started = time.perf_counter()

        try:
            classification = classify(request.prompt)
            primary = self.synthesizer.synthesize(classification, request.prompt)
            if primary is None:
                raise GenerationError(NO_CHART_ERROR)
            alternatives = self.synthesizer.synthesize_alternatives(classification, request.prompt)
        except GenerationError as e:
            logger.info("chart_generation_empty", prompt_length=len(request.prompt))
            return GenerationResult(success=False, error=str(e), suggestions=[])
        except Exception as e:
            logger.error("chart_generation_failed", error=str(e), error_type=type(e).__name__)
            return GenerationResult(success=False, error=f"Failed to generate chart: {e}", suggestions=[])

        elapsed_ms = int((time.perf_counter() - started) * 1000)

        if not request.options.save_to_organization:
            logger.info("chart_generated", chart_type=primary.chart_type.value, saved=False)
            return GenerationResult(success=True, chart=primary, suggestions=alternatives)

        try:
            registry = await self.provider.get(viewer.organization_id)
            saved = await registry.save_generated_chart(
                request,
                primary,
                viewer.viewer_id,
                CreatorInfo(name=viewer.viewer_name, email=viewer.viewer_email, role=viewer.viewer_role),
                classification=classification,
                generation_time_ms=elapsed_ms,
            )
        except PersistenceError:
            logger.error("chart_generation_not_saved", organization_id=viewer.organization_id)
            raise

        logger.info("chart_generated", chart_type=saved.chart_type.value, saved=True, chart_id=saved.id)
        return GenerationResult(success=True, chart=saved, suggestions=alternatives)
