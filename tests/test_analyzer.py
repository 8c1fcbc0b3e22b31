"""Tests for the complex analyzer."""
import json

import pytest

from inquiry_complex.exceptions import NotFoundError, GenerationContentError
from inquiry_complex.reasoning import ComplexAnalyzer
from inquiry_complex.reasoning.prompts import ANALYSIS_PARAMS

ANALYSIS = {
    "overallStrength": 0.75,
    "coherenceScore": 0.8,
    "keyInsights": ["X depends on Y"],
    "suggestions": ["Refute the second objection"],
    "weakAreas": ["Evidence for Y"],
}


@pytest.fixture
def analyzer(registry, generator):
    return ComplexAnalyzer(registry, generator)


@pytest.fixture
def registered(registry, dialectic):
    inquiry, ids = dialectic
    registry.add(inquiry)
    return inquiry


@pytest.mark.asyncio
async def test_analyze_complex(analyzer, generator, registered):
    """Test analysis of a registered complex."""
    generator.queue("Here you go:\n" + json.dumps(ANALYSIS))
    before = registered.model_copy(deep=True)

    analysis = await analyzer.analyze_complex(registered.id)

    assert analysis.overall_strength == 0.75
    assert analysis.coherence_score == 0.8
    assert analysis.key_insights == ["X depends on Y"]
    assert analysis.suggestions == ["Refute the second objection"]
    assert analysis.weak_areas == ["Evidence for Y"]
    assert analysis.balance_score is None
    assert registered == before

    call = generator.calls[0]
    assert call["temperature"] == ANALYSIS_PARAMS.temperature
    assert call["max_tokens"] == ANALYSIS_PARAMS.max_tokens
    assert "Is X true?" in call["prompt"]
    assert "COMPLEX OVERVIEW:" in call["prompt"]
    assert "But Y is false" in call["prompt"]


@pytest.mark.asyncio
async def test_analyze_missing_fields(analyzer, generator, registered):
    generator.queue(json.dumps({"overallStrength": 0.5}))

    with pytest.raises(GenerationContentError):
        await analyzer.analyze_complex(registered.id)


@pytest.mark.asyncio
async def test_analyze_missing_complex(analyzer, generator):
    with pytest.raises(NotFoundError):
        await analyzer.analyze_complex("missing")
    assert generator.calls == []
