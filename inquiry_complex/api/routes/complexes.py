"""API routes for inquiry complexes."""
from typing import Any, Dict, List
import logging

from fastapi import APIRouter, Body, Depends, Path, Query, status

from ..dependencies import (
    get_registry,
    get_orchestrator,
    get_auto_expander,
    get_analyzer,
    get_store,
)
from ..models import (
    ErrorResponse,
    ComplexCreate,
    ComplexSummary,
    ExpandRequest,
    ExpandResponse,
    AutoExpandRequest,
    CommonParentResponse,
    SaveResponse,
)
from ...extraction.schemas import ComplexAnalysis, FollowUpQuestion
from ...graph.registry import ComplexRegistry
from ...reasoning.analyzer import ComplexAnalyzer
from ...reasoning.expansion import ExpansionOrchestrator
from ...reasoning.planner import AutoExpander, AutoExpansionResult
from ...storage.json_store import JsonComplexStore

# Setup logging
logger = logging.getLogger(__name__)

# Create router
router = APIRouter(
    prefix="/complexes",
    tags=["complexes"],
    responses={
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
        status.HTTP_422_UNPROCESSABLE_ENTITY: {"model": ErrorResponse},
        status.HTTP_502_BAD_GATEWAY: {"model": ErrorResponse},
    },
)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Create complex",
    description="Create a complex from a question, generating the central point if none is given",
)
async def create_complex(
    body: ComplexCreate,
    registry: ComplexRegistry = Depends(get_registry),
    orchestrator: ExpansionOrchestrator = Depends(get_orchestrator),
) -> Dict[str, Any]:
    """Create a new complex."""
    if body.central_content:
        inquiry = registry.create(body.question, body.central_content)
    else:
        inquiry = await orchestrator.create_complex(body.question)
    return registry.factory.serialize(inquiry)


@router.get(
    "",
    response_model=List[ComplexSummary],
    summary="List complexes",
    description="Get a summary of every active complex",
)
async def list_complexes(
    registry: ComplexRegistry = Depends(get_registry),
) -> List[ComplexSummary]:
    """List active complexes."""
    return [ComplexSummary.from_complex(inquiry) for inquiry in registry.list()]


@router.post(
    "/import",
    status_code=status.HTTP_201_CREATED,
    summary="Import complex",
    description="Register a complex from its serialized form",
)
async def import_complex(
    data: Dict[str, Any] = Body(..., description="Serialized complex"),
    registry: ComplexRegistry = Depends(get_registry),
) -> Dict[str, Any]:
    """Import a serialized complex."""
    inquiry = registry.import_complex(data)
    return registry.factory.serialize(inquiry)


@router.post(
    "/load/{complex_id}",
    summary="Load complex",
    description="Restore a complex from persistent storage into the registry",
)
async def load_complex(
    complex_id: str = Path(..., description="Complex ID"),
    registry: ComplexRegistry = Depends(get_registry),
    store: JsonComplexStore = Depends(get_store),
) -> Dict[str, Any]:
    """Load a stored complex."""
    inquiry = registry.import_complex(await store.load(complex_id))
    return registry.factory.serialize(inquiry)


@router.get(
    "/{complex_id}",
    summary="Get complex",
    description="Get the serialized form of a complex",
)
async def get_complex(
    complex_id: str = Path(..., description="Complex ID"),
    registry: ComplexRegistry = Depends(get_registry),
) -> Dict[str, Any]:
    """Get a complex."""
    return registry.export_complex(complex_id)


@router.get(
    "/{complex_id}/export",
    summary="Export complex",
    description="Get the serialized form to hand to persistence",
)
async def export_complex(
    complex_id: str = Path(..., description="Complex ID"),
    registry: ComplexRegistry = Depends(get_registry),
) -> Dict[str, Any]:
    """Export a complex."""
    return registry.export_complex(complex_id)


@router.delete(
    "/{complex_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete complex",
    description="Remove a complex from the registry",
)
async def delete_complex(
    complex_id: str = Path(..., description="Complex ID"),
    registry: ComplexRegistry = Depends(get_registry),
) -> None:
    """Delete a complex."""
    registry.delete(complex_id)


@router.post(
    "/{complex_id}/save",
    response_model=SaveResponse,
    summary="Save complex",
    description="Write the serialized complex to persistent storage",
)
async def save_complex(
    complex_id: str = Path(..., description="Complex ID"),
    registry: ComplexRegistry = Depends(get_registry),
    store: JsonComplexStore = Depends(get_store),
) -> SaveResponse:
    """Persist a complex."""
    location = await store.save(registry.export_complex(complex_id))
    return SaveResponse(complex_id=complex_id, location=str(location))


@router.get(
    "/{complex_id}/nodes/{node_id}/path",
    summary="Get node path",
    description="Get the nodes from the central point to a node",
)
async def get_node_path(
    complex_id: str = Path(..., description="Complex ID"),
    node_id: str = Path(..., description="Node ID"),
    registry: ComplexRegistry = Depends(get_registry),
) -> List[Dict[str, Any]]:
    """Get the path to a node."""
    inquiry = registry.get(complex_id)
    path = registry.factory.get_path_to_node(inquiry, node_id)
    return [node.model_dump(by_alias=True, mode="json") for node in path]


@router.get(
    "/{complex_id}/common-parent",
    response_model=CommonParentResponse,
    summary="Find common parent",
    description="Find the lowest common ancestor of two nodes",
)
async def get_common_parent(
    complex_id: str = Path(..., description="Complex ID"),
    a: str = Query(..., description="First node ID"),
    b: str = Query(..., description="Second node ID"),
    registry: ComplexRegistry = Depends(get_registry),
) -> CommonParentResponse:
    """Find the common parent of two nodes."""
    inquiry = registry.get(complex_id)
    return CommonParentResponse(node_id=registry.factory.find_common_parent(inquiry, a, b))


@router.post(
    "/{complex_id}/nodes/{node_id}/expand",
    response_model=ExpandResponse,
    summary="Expand node",
    description="Generate objections, a refutation or a synthesis for a node",
)
async def expand_node(
    body: ExpandRequest,
    complex_id: str = Path(..., description="Complex ID"),
    node_id: str = Path(..., description="Node ID"),
    orchestrator: ExpansionOrchestrator = Depends(get_orchestrator),
) -> ExpandResponse:
    """Expand a node."""
    new_ids = await orchestrator.expand_node(
        complex_id,
        node_id,
        body.expansion_type,
        other_node_id=body.other_node_id,
    )
    inquiry = orchestrator.registry.get(complex_id)
    return ExpandResponse(
        complex_id=complex_id,
        node_id=node_id,
        new_node_ids=new_ids,
        nodes=[
            inquiry.nodes[new_id].model_dump(by_alias=True, mode="json")
            for new_id in new_ids
        ],
    )


@router.post(
    "/{complex_id}/auto-expand",
    response_model=AutoExpansionResult,
    summary="Auto-expand complex",
    description="Plan and run a bounded growth pass over a complex",
)
async def auto_expand(
    body: AutoExpandRequest,
    complex_id: str = Path(..., description="Complex ID"),
    auto_expander: AutoExpander = Depends(get_auto_expander),
) -> AutoExpansionResult:
    """Auto-expand a complex."""
    return await auto_expander.auto_expand(
        complex_id,
        target_depth=body.target_depth,
        max_nodes=body.max_nodes,
    )


@router.post(
    "/{complex_id}/nodes/{node_id}/follow-ups",
    response_model=List[FollowUpQuestion],
    summary="Suggest follow-up questions",
    description="Ask the generator for questions that deepen the inquiry at a node",
)
async def follow_up_questions(
    complex_id: str = Path(..., description="Complex ID"),
    node_id: str = Path(..., description="Node ID"),
    orchestrator: ExpansionOrchestrator = Depends(get_orchestrator),
) -> List[FollowUpQuestion]:
    """Generate follow-up questions."""
    return await orchestrator.generate_follow_up_questions(complex_id, node_id)


@router.post(
    "/{complex_id}/analyze",
    response_model=ComplexAnalysis,
    summary="Analyze complex",
    description="Assess the overall strength and coherence of a complex",
)
async def analyze_complex(
    complex_id: str = Path(..., description="Complex ID"),
    analyzer: ComplexAnalyzer = Depends(get_analyzer),
) -> ComplexAnalysis:
    """Analyze a complex."""
    return await analyzer.analyze_complex(complex_id)
