"""Holistic assessment of a complex by the content generator."""
from typing import Optional
import logging

from .llm import ContentGenerator
from .prompts import ANALYSIS_PROMPT, ANALYSIS_PARAMS, create_complex_summary
from ..extraction.schemas import ComplexAnalysis
from ..extraction.validator import ResponseValidator
from ..graph.registry import ComplexRegistry
from ..metrics.graph_metrics import ComplexMetrics

log = logging.getLogger(__name__)


class ComplexAnalyzer:
    """Summarizes a complex and asks the generator to assess it. Read-only."""

    def __init__(
        self,
        registry: ComplexRegistry,
        generator: ContentGenerator,
        validator: Optional[ResponseValidator] = None,
        metrics: Optional[ComplexMetrics] = None
    ):
        self.registry = registry
        self.generator = generator
        self.validator = validator or ResponseValidator()
        self.metrics = metrics or ComplexMetrics()

    async def analyze_complex(self, complex_id: str) -> ComplexAnalysis:
        """Assess the strength and coherence of a complex.

        Args:
            complex_id: Complex ID

        Returns:
            ComplexAnalysis: Scores, insights and suggestions

        Raises:
            NotFoundError: If the complex does not exist
            GenerationError: If the generator response is unusable
        """
        inquiry = self.registry.get(complex_id)
        summary = create_complex_summary(inquiry, self.metrics.compute(inquiry))

        response = await self.generator.complete(
            ANALYSIS_PROMPT.format(question=inquiry.central_question, summary=summary),
            temperature=ANALYSIS_PARAMS.temperature,
            max_tokens=ANALYSIS_PARAMS.max_tokens
        )
        analysis = self.validator.validate(response, ComplexAnalysis).unwrap()
        log.info(
            f"Analyzed complex {complex_id}: strength {analysis.overall_strength:.2f}, "
            f"coherence {analysis.coherence_score:.2f}"
        )
        return analysis
