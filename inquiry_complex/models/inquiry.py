"""Inquiry complex model: one argumentation graph rooted at a question."""
from datetime import datetime, timezone
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field

from .node import Node, NodeType
from ..exceptions import NotFoundError


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def empty_type_counts() -> Dict[str, int]:
    return {node_type.value: 0 for node_type in NodeType}


class ExplorationStats(BaseModel):
    """Node counts kept in sync on every insertion."""

    model_config = ConfigDict(populate_by_name=True)

    total_nodes: int = Field(default=0, alias="totalNodes")
    nodes_by_type: Dict[str, int] = Field(
        default_factory=empty_type_counts,
        alias="nodesByType"
    )


class ComplexMetadata(BaseModel):
    """Complex-level metadata."""

    model_config = ConfigDict(populate_by_name=True)

    created_at: datetime = Field(default_factory=utcnow, alias="createdAt")
    last_updated: datetime = Field(default_factory=utcnow, alias="lastUpdated")
    max_depth: int = Field(default=0, ge=0, alias="maxDepth")
    exploration_stats: ExplorationStats = Field(
        default_factory=ExplorationStats,
        alias="explorationStats"
    )


class InquiryComplex(BaseModel):
    """An argumentation tree rooted at a central question.

    ``nodes`` is the only store of nodes in the complex. All relationships
    between nodes are expressed as id references into it.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(description="Unique identifier for the complex")
    central_question: str = Field(
        alias="centralQuestion",
        description="Question that seeded the complex"
    )
    central_point_id: str = Field(
        alias="centralPointId",
        description="ID of the depth-0 node"
    )
    nodes: Dict[str, Node] = Field(
        default_factory=dict,
        description="All nodes keyed by id, in insertion order"
    )
    metadata: ComplexMetadata = Field(default_factory=ComplexMetadata)

    @property
    def central_point(self) -> Node:
        return self.get_node(self.central_point_id)

    def get_node(self, node_id: str) -> Node:
        """Get node by ID.

        Args:
            node_id: Node ID

        Returns:
            Node: The node

        Raises:
            NotFoundError: If the node is not part of this complex
        """
        node = self.nodes.get(node_id)
        if node is None:
            raise NotFoundError(f"Node {node_id} not found in complex {self.id}")
        return node

    def children_of(self, node_id: str) -> List[Node]:
        """Get the children of a node in creation order."""
        return [self.nodes[child_id] for child_id in self.get_node(node_id).child_ids]
