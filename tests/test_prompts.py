"""Tests for prompt templates."""
import json

import pytest

from inquiry_complex.models import NodeType
from inquiry_complex.metrics import ComplexMetrics
from inquiry_complex.reasoning.prompts import (
    CENTRAL_POINT_PROMPT,
    OBJECTIONS_PROMPT,
    REFUTATION_PROMPT,
    SYNTHESIS_PROMPT,
    FOLLOW_UP_QUESTIONS_PROMPT,
    ANALYSIS_PROMPT,
    describe_path,
    create_complex_summary,
)


@pytest.mark.parametrize("template, fields", [
    (CENTRAL_POINT_PROMPT, {"question": "Q?"}),
    (OBJECTIONS_PROMPT, {"question": "Q?", "path": "1. P", "content": "P"}),
    (REFUTATION_PROMPT, {"question": "Q?", "path": "1. P", "point": "P", "objection": "O"}),
    (SYNTHESIS_PROMPT, {"question": "Q?", "path": "1. P", "first": "A", "second": "B"}),
    (FOLLOW_UP_QUESTIONS_PROMPT, {"question": "Q?", "path": "1. P", "content": "P"}),
    (ANALYSIS_PROMPT, {"question": "Q?", "summary": "S"}),
])
def test_templates_format_to_json_examples(template, fields):
    """Test that every template formats and carries a valid JSON example."""
    prompt = template.format(**fields)

    assert '"Q?"' in prompt
    example = prompt[prompt.index("{"):]
    assert isinstance(json.loads(example), dict)


def test_describe_path(dialectic, factory):
    inquiry, ids = dialectic
    path = factory.get_path_to_node(inquiry, ids[NodeType.REFUTATION])

    text = describe_path(path)

    assert text.splitlines() == [
        "1. [POINT] X is true because of Y",
        "  2. [OBJECTION] But Y is false",
        "    3. [REFUTATION] Y holds here",
    ]


def test_create_complex_summary(dialectic):
    inquiry, ids = dialectic

    summary = create_complex_summary(inquiry)

    assert summary.startswith("COMPLEX OVERVIEW:")
    assert "- Central Question: Is X true?" in summary
    assert "- Total Nodes: 4" in summary
    assert "- Max Depth: 2" in summary
    assert "POINTS (1):" in summary
    assert "OBJECTIONS (1):" in summary
    assert "REFUTATIONS (1):" in summary
    assert "SYNTHESES (1):" in summary
    assert "[Depth 1, Strength 0.60] But Y is false" in summary
    assert "Leaves" not in summary


def test_create_complex_summary_with_metrics(dialectic):
    inquiry, ids = dialectic

    summary = create_complex_summary(inquiry, ComplexMetrics().compute(inquiry))

    assert "- Leaves: 2" in summary
    assert "- Unexplored Frontier: 0" in summary


def test_summary_omits_empty_sections(factory):
    inquiry = factory.create_complex("Q", "C")

    summary = create_complex_summary(inquiry)

    assert "POINTS (1):" in summary
    assert "OBJECTIONS" not in summary
