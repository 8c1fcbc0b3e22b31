"""Expected shapes of generator responses."""
from typing import Dict, Any, List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator

TextOrList = Union[str, List[str]]


class GeneratedNodePayload(BaseModel):
    """Common fields of every generated node."""

    model_config = ConfigDict(populate_by_name=True)

    content: str = Field(description="Text of the generated node")
    strength: Optional[float] = Field(
        default=None,
        ge=0.0,
        le=1.0,
        description="Confidence/quality score"
    )
    tags: List[str] = Field(default_factory=list)

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("content cannot be empty")
        return value

    def node_metadata(self, default_strength: float) -> Dict[str, Any]:
        """Metadata to attach to the node created from this payload.

        Args:
            default_strength: Strength used when the generator supplied none

        Returns:
            Dict[str, Any]: Metadata with camelCase keys
        """
        metadata = self.model_dump(
            by_alias=True,
            exclude_none=True,
            exclude={"content", "strength"}
        )
        metadata["strength"] = default_strength if self.strength is None else self.strength
        return metadata


class CentralPointPayload(GeneratedNodePayload):
    key_terms: List[str] = Field(default_factory=list, alias="keyTerms")
    reasoning: str = ""


class ObjectionPayload(GeneratedNodePayload):
    objection_type: Optional[str] = Field(
        default=None,
        validation_alias="type",
        serialization_alias="objectionType"
    )
    focus_area: Optional[str] = Field(default=None, alias="focusArea")


class ObjectionsPayload(BaseModel):
    objections: List[ObjectionPayload] = Field(min_length=1)


class RefutationPayload(GeneratedNodePayload):
    strategy: Optional[str] = None
    concessions: Optional[TextOrList] = None
    new_clarifications: Optional[TextOrList] = Field(
        default=None,
        alias="newClarifications"
    )


class SynthesisPayload(GeneratedNodePayload):
    approach: Optional[str] = None
    preserved_elements: List[str] = Field(
        default_factory=list,
        alias="preservedElements"
    )
    new_insight: Optional[str] = Field(default=None, alias="newInsight")
    implications: Optional[TextOrList] = None


class FollowUpQuestion(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question: str = Field(min_length=1)
    type: Optional[str] = None
    depth: Optional[str] = None
    rationale: Optional[str] = None


class FollowUpQuestionsPayload(BaseModel):
    questions: List[FollowUpQuestion] = Field(min_length=1)


class ComplexAnalysis(BaseModel):
    """Holistic assessment of a complex."""

    model_config = ConfigDict(populate_by_name=True)

    overall_strength: float = Field(ge=0.0, le=1.0, alias="overallStrength")
    coherence_score: float = Field(ge=0.0, le=1.0, alias="coherenceScore")
    key_insights: List[str] = Field(alias="keyInsights")
    suggestions: List[str]
    balance_score: Optional[float] = Field(
        default=None, ge=0.0, le=1.0, alias="balanceScore"
    )
    depth_score: Optional[float] = Field(
        default=None, ge=0.0, le=1.0, alias="depthScore"
    )
    weak_areas: List[str] = Field(default_factory=list, alias="weakAreas")
    strong_areas: List[str] = Field(default_factory=list, alias="strongAreas")
    missing_perspectives: List[str] = Field(
        default_factory=list,
        alias="missingPerspectives"
    )
