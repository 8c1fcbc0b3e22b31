"""Node model for inquiry complexes."""
from enum import Enum
from typing import Dict, Any, List, Optional, FrozenSet
from pydantic import BaseModel, ConfigDict, Field


class NodeType(str, Enum):
    """Kinds of argumentative node."""

    POINT = "point"
    OBJECTION = "objection"
    REFUTATION = "refutation"
    SYNTHESIS = "synthesis"


class ExpansionType(str, Enum):
    """Kinds of expansion that can be requested for a node."""

    OBJECTIONS = "objections"
    REFUTATION = "refutation"
    SYNTHESIS = "synthesis"


# Child types each parent type may receive. Refutations and syntheses are leaves.
LEGAL_TRANSITIONS: Dict[NodeType, FrozenSet[NodeType]] = {
    NodeType.POINT: frozenset({NodeType.OBJECTION, NodeType.SYNTHESIS}),
    NodeType.OBJECTION: frozenset({NodeType.REFUTATION, NodeType.SYNTHESIS}),
    NodeType.REFUTATION: frozenset(),
    NodeType.SYNTHESIS: frozenset(),
}

SUMMARY_LENGTH = 100


def is_legal_transition(parent_type: NodeType, child_type: NodeType) -> bool:
    """Check whether a node of child_type may be attached under parent_type."""
    return child_type in LEGAL_TRANSITIONS.get(parent_type, frozenset())


class Node(BaseModel):
    """A typed unit of argument in an inquiry complex."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(description="Unique identifier for the node")
    type: NodeType = Field(description="Argumentative role of the node")
    content: str = Field(description="Natural-language content of the node")
    depth: int = Field(ge=0, description="Distance from the central point")
    parent_id: Optional[str] = Field(
        default=None,
        alias="parentId",
        description="ID of the parent node, None for the central point"
    )
    child_ids: List[str] = Field(
        default_factory=list,
        alias="childIds",
        description="IDs of child nodes in creation order"
    )
    metadata: Dict[str, Any] = Field(
        default_factory=dict,
        description="Strength, tags and generator-supplied fields"
    )

    @property
    def summary(self) -> str:
        """Content shortened for prompts and overviews."""
        if len(self.content) > SUMMARY_LENGTH:
            return self.content[:SUMMARY_LENGTH - 3] + "..."
        return self.content

    @property
    def strength(self) -> float:
        value = self.metadata.get("strength")
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
        return 0.0

    @property
    def is_expanding(self) -> bool:
        return bool(self.metadata.get("isExpanding", False))

    @property
    def is_root(self) -> bool:
        return self.parent_id is None
