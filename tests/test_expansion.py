"""Tests for the expansion orchestrator."""
import asyncio
import json

import pytest

from inquiry_complex.exceptions import (
    NotFoundError,
    ValidationError,
    GenerationParseError,
    GenerationContentError,
    NothingToSynthesizeError,
    ExpansionInProgressError,
)
from inquiry_complex.models import NodeType, ExpansionType
from inquiry_complex.reasoning import ExpansionOrchestrator
from inquiry_complex.reasoning.prompts import OBJECTIONS_PARAMS, CENTRAL_POINT_PARAMS

CENTRAL = json.dumps({"content": "X is true because…", "strength": 0.8, "tags": []})
OBJECTIONS = json.dumps({
    "objections": [
        {"content": "But Y", "strength": 0.5},
        {"content": "Also Z", "strength": 0.6},
    ]
})


@pytest.fixture
def orchestrator(registry, generator):
    return ExpansionOrchestrator(registry, generator)


@pytest.fixture
def seeded(registry):
    """Registered complex with a point and two objections of equal strength."""
    inquiry = registry.create("Is X true?", "X is true")
    root_id = inquiry.central_point_id
    first = registry.factory.add_node(inquiry, root_id, NodeType.OBJECTION, "But Y")
    second = registry.factory.add_node(inquiry, root_id, NodeType.OBJECTION, "Also Z")
    return inquiry, root_id, first, second


@pytest.mark.asyncio
async def test_create_then_expand_objections(orchestrator, generator, registry):
    """Test the create-and-expand flow against a stubbed generator."""
    generator.queue(CENTRAL)
    inquiry = await orchestrator.create_complex("Is X true?")

    assert inquiry.id in registry
    assert list(inquiry.nodes) == [inquiry.central_point_id]
    root = inquiry.central_point
    assert root.depth == 0
    assert root.content == "X is true because…"
    assert root.metadata["strength"] == 0.8
    assert generator.calls[0]["temperature"] == CENTRAL_POINT_PARAMS.temperature
    assert "Is X true?" in generator.calls[0]["prompt"]

    generator.queue(OBJECTIONS)
    new_ids = await orchestrator.expand_node(
        inquiry.id, inquiry.central_point_id, "objections"
    )

    assert len(new_ids) == 2
    objections = [inquiry.nodes[node_id] for node_id in new_ids]
    assert [n.content for n in objections] == ["But Y", "Also Z"]
    assert [n.metadata["strength"] for n in objections] == [0.5, 0.6]
    for node in objections:
        assert node.type == NodeType.OBJECTION
        assert node.parent_id == inquiry.central_point_id
        assert node.depth == 1
    assert inquiry.metadata.max_depth == 1
    assert inquiry.metadata.exploration_stats.nodes_by_type["objection"] == 2
    assert generator.calls[1]["max_tokens"] == OBJECTIONS_PARAMS.max_tokens
    assert not root.is_expanding


@pytest.mark.asyncio
async def test_create_complex_parse_failure(orchestrator, generator, registry):
    generator.queue("I'd rather not answer.")

    with pytest.raises(GenerationParseError):
        await orchestrator.create_complex("Is X true?")
    assert len(registry) == 0


@pytest.mark.asyncio
async def test_objection_defaults_and_metadata(orchestrator, generator, seeded):
    inquiry, root_id, first, second = seeded
    generator.queue('```json\n{"objections": [{"content": "Z", "type": "empirical", '
                    '"focusArea": "data", "tags": ["t"]}]}\n```')

    [node_id] = await orchestrator.expand_node(inquiry.id, root_id)

    metadata = inquiry.nodes[node_id].metadata
    assert metadata["strength"] == 0.6
    assert metadata["objectionType"] == "empirical"
    assert metadata["focusArea"] == "data"
    assert metadata["tags"] == ["t"]
    assert metadata["sources"] == []


@pytest.mark.asyncio
async def test_objections_require_point(orchestrator, generator, seeded):
    inquiry, root_id, first, second = seeded

    with pytest.raises(ValidationError):
        await orchestrator.expand_node(inquiry.id, first, ExpansionType.OBJECTIONS)
    assert generator.calls == []
    assert not inquiry.nodes[first].is_expanding


@pytest.mark.asyncio
async def test_missing_objections_array(orchestrator, generator, seeded):
    """Test a response without the expected array leaves the complex unchanged."""
    inquiry, root_id, first, second = seeded
    generator.queue('{"points": ["nope"]}')

    with pytest.raises(GenerationContentError):
        await orchestrator.expand_node(inquiry.id, root_id)
    assert len(inquiry.nodes) == 3
    assert not inquiry.central_point.is_expanding


@pytest.mark.asyncio
async def test_generate_refutation(orchestrator, generator, seeded):
    inquiry, root_id, first, second = seeded
    generator.queue(json.dumps({
        "content": "Y is irrelevant",
        "strategy": "reframing",
        "concessions": ["Y matters elsewhere"],
    }))

    new_ids = await orchestrator.expand_node(inquiry.id, first, ExpansionType.REFUTATION)

    assert len(new_ids) == 1
    node = inquiry.nodes[new_ids[0]]
    assert node.type == NodeType.REFUTATION
    assert node.parent_id == first
    assert node.depth == 2
    assert node.metadata["strength"] == 0.7
    assert node.metadata["strategy"] == "reframing"
    prompt = generator.calls[0]["prompt"]
    assert "X is true" in prompt
    assert "But Y" in prompt
    assert inquiry.metadata.max_depth == 2


@pytest.mark.asyncio
async def test_refutation_requires_objection(orchestrator, generator, seeded):
    inquiry, root_id, first, second = seeded

    with pytest.raises(ValidationError):
        await orchestrator.expand_node(inquiry.id, root_id, ExpansionType.REFUTATION)
    assert generator.calls == []


@pytest.mark.asyncio
async def test_implicit_synthesis_uses_strongest_objection(orchestrator, generator, seeded):
    """Test implicit synthesis pairs the point with its strongest objection."""
    inquiry, root_id, first, second = seeded
    inquiry.nodes[second].metadata["strength"] = 0.9
    generator.queue(json.dumps({"content": "Both", "newInsight": "insight"}))

    [node_id] = await orchestrator.expand_node(inquiry.id, root_id, ExpansionType.SYNTHESIS)

    node = inquiry.nodes[node_id]
    assert node.type == NodeType.SYNTHESIS
    assert node.parent_id == root_id
    assert node.depth == 1
    assert node.metadata["strength"] == 0.8
    assert node.metadata["synthesizedFrom"] == [root_id, second]
    assert node.metadata["newInsight"] == "insight"
    assert "Also Z" in generator.calls[0]["prompt"]


@pytest.mark.asyncio
async def test_implicit_synthesis_tie_keeps_first(orchestrator, generator, seeded):
    inquiry, root_id, first, second = seeded
    generator.queue(json.dumps({"content": "Both"}))

    [node_id] = await orchestrator.expand_node(inquiry.id, root_id, ExpansionType.SYNTHESIS)

    assert inquiry.nodes[node_id].metadata["synthesizedFrom"] == [root_id, first]


@pytest.mark.asyncio
async def test_nothing_to_synthesize(orchestrator, generator, registry):
    inquiry = registry.create("Q", "C")

    with pytest.raises(NothingToSynthesizeError):
        await orchestrator.expand_node(
            inquiry.id, inquiry.central_point_id, ExpansionType.SYNTHESIS
        )
    assert generator.calls == []
    assert not inquiry.central_point.is_expanding


@pytest.mark.asyncio
async def test_explicit_synthesis_under_common_parent(orchestrator, generator, seeded):
    inquiry, root_id, first, second = seeded
    refutation = orchestrator.factory.add_node(inquiry, first, NodeType.REFUTATION, "R")
    generator.queue(json.dumps({"content": "Merged"}))

    [node_id] = await orchestrator.expand_node(
        inquiry.id, refutation, ExpansionType.SYNTHESIS, other_node_id=second
    )

    node = inquiry.nodes[node_id]
    assert node.parent_id == root_id
    assert node.metadata["synthesizedFrom"] == [refutation, second]


@pytest.mark.asyncio
async def test_synthesis_with_itself_rejected(orchestrator, generator, seeded):
    inquiry, root_id, first, second = seeded

    with pytest.raises(ValidationError):
        await orchestrator.expand_node(
            inquiry.id, root_id, ExpansionType.SYNTHESIS, other_node_id=root_id
        )
    assert generator.calls == []
    assert len(inquiry.nodes) == 3
    assert not inquiry.central_point.is_expanding


@pytest.mark.asyncio
async def test_second_node_rejected_outside_synthesis(orchestrator, generator, seeded):
    inquiry, root_id, first, second = seeded

    with pytest.raises(ValidationError):
        await orchestrator.expand_node(
            inquiry.id, root_id, ExpansionType.OBJECTIONS, other_node_id=first
        )
    with pytest.raises(ValidationError):
        await orchestrator.expand_node(
            inquiry.id, first, ExpansionType.REFUTATION, other_node_id=second
        )
    assert generator.calls == []
    assert len(inquiry.nodes) == 3


@pytest.mark.asyncio
async def test_not_found(orchestrator, seeded):
    inquiry, root_id, first, second = seeded

    with pytest.raises(NotFoundError):
        await orchestrator.expand_node("missing", root_id)
    with pytest.raises(NotFoundError):
        await orchestrator.expand_node(inquiry.id, "missing")
    with pytest.raises(NotFoundError):
        await orchestrator.expand_node(
            inquiry.id, root_id, ExpansionType.SYNTHESIS, other_node_id="missing"
        )


@pytest.mark.asyncio
async def test_unknown_expansion_type(orchestrator, seeded):
    inquiry, root_id, first, second = seeded

    with pytest.raises(ValidationError):
        await orchestrator.expand_node(inquiry.id, root_id, "rebuttal")


class BlockingGenerator:
    """Generator that waits until released."""

    def __init__(self, response):
        self.response = response
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def complete(self, prompt, temperature=0.7, max_tokens=1000):
        self.started.set()
        await self.release.wait()
        return self.response


@pytest.mark.asyncio
async def test_concurrent_expansion_rejected(registry, seeded):
    """Test a second expansion of an in-flight node is refused."""
    inquiry, root_id, first, second = seeded
    generator = BlockingGenerator(json.dumps({"content": "R"}))
    orchestrator = ExpansionOrchestrator(registry, generator)

    task = asyncio.create_task(
        orchestrator.expand_node(inquiry.id, first, ExpansionType.REFUTATION)
    )
    await generator.started.wait()

    assert inquiry.nodes[first].is_expanding
    with pytest.raises(ExpansionInProgressError):
        await orchestrator.expand_node(inquiry.id, first, ExpansionType.REFUTATION)

    generator.release.set()
    new_ids = await task

    assert len(new_ids) == 1
    assert not inquiry.nodes[first].is_expanding
    assert len(inquiry.children_of(first)) == 1


@pytest.mark.asyncio
async def test_follow_up_questions(orchestrator, generator, seeded):
    inquiry, root_id, first, second = seeded
    generator.queue(json.dumps({
        "questions": [
            {"question": "What is Y?", "type": "assumption", "depth": "deeper"},
            {"question": "Where does X fail?"},
        ]
    }))

    questions = await orchestrator.generate_follow_up_questions(inquiry.id, first)

    assert [q.question for q in questions] == ["What is Y?", "Where does X fail?"]
    assert questions[0].type == "assumption"
    assert len(inquiry.nodes) == 3
