"""Pydantic models for request/response validation in the API."""
from datetime import datetime, timezone
from typing import Dict, List, Optional, Any
from pydantic import BaseModel, Field

from ..models.inquiry import InquiryComplex
from ..models.node import ExpansionType


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ErrorResponse(BaseModel):
    """Error response model."""

    detail: str = Field(..., description="Error message")
    error_code: str = Field(..., description="Error code for programmatic handling")
    path: Optional[str] = Field(None, description="Path where the error occurred")
    timestamp: datetime = Field(default_factory=_utcnow, description="Timestamp of the error")


class ComplexCreate(BaseModel):
    """Model for creating a new complex."""

    question: str = Field(..., min_length=1, description="Central question")
    central_content: Optional[str] = Field(
        None,
        min_length=1,
        description="Central point text; generated from the question when omitted"
    )


class ComplexSummary(BaseModel):
    """Model for a complex in listings."""

    id: str = Field(..., description="Complex ID")
    central_question: str = Field(..., description="Central question")
    central_point_id: str = Field(..., description="ID of the central point")
    node_count: int = Field(..., description="Number of nodes")
    max_depth: int = Field(..., description="Greatest node depth")
    nodes_by_type: Dict[str, int] = Field(..., description="Node counts per type")
    created_at: datetime = Field(..., description="Creation timestamp")
    last_updated: datetime = Field(..., description="Last modification timestamp")

    @classmethod
    def from_complex(cls, inquiry: InquiryComplex) -> "ComplexSummary":
        return cls(
            id=inquiry.id,
            central_question=inquiry.central_question,
            central_point_id=inquiry.central_point_id,
            node_count=len(inquiry.nodes),
            max_depth=inquiry.metadata.max_depth,
            nodes_by_type=dict(inquiry.metadata.exploration_stats.nodes_by_type),
            created_at=inquiry.metadata.created_at,
            last_updated=inquiry.metadata.last_updated,
        )


class ExpandRequest(BaseModel):
    """Model for a single node expansion."""

    expansion_type: ExpansionType = Field(
        ExpansionType.OBJECTIONS,
        description="objections, refutation or synthesis"
    )
    other_node_id: Optional[str] = Field(
        None,
        description="Second node for an explicit synthesis"
    )


class ExpandResponse(BaseModel):
    """Model for the result of a node expansion."""

    complex_id: str = Field(..., description="Complex ID")
    node_id: str = Field(..., description="Expanded node ID")
    new_node_ids: List[str] = Field(..., description="IDs of the created nodes")
    nodes: List[Dict[str, Any]] = Field(..., description="Serialized created nodes")


class AutoExpandRequest(BaseModel):
    """Model for an auto-expansion pass."""

    target_depth: int = Field(3, ge=1, le=10, description="Expand nodes shallower than this")
    max_nodes: int = Field(20, ge=1, le=100, description="Maximum number of expansion steps")


class CommonParentResponse(BaseModel):
    node_id: str = Field(..., description="ID of the lowest common ancestor")


class SaveResponse(BaseModel):
    complex_id: str = Field(..., description="Complex ID")
    location: str = Field(..., description="Where the serialized complex was written")
