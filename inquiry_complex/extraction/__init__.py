"""Parsing and validation of content generator responses."""
from .parser import GenerationResponseParser
from .validator import ResponseValidator, ParsedResponse
from .schemas import (
    CentralPointPayload,
    ObjectionPayload,
    ObjectionsPayload,
    RefutationPayload,
    SynthesisPayload,
    FollowUpQuestion,
    FollowUpQuestionsPayload,
    ComplexAnalysis,
)

__all__ = [
    "GenerationResponseParser",
    "ResponseValidator",
    "ParsedResponse",
    "CentralPointPayload",
    "ObjectionPayload",
    "ObjectionsPayload",
    "RefutationPayload",
    "SynthesisPayload",
    "FollowUpQuestion",
    "FollowUpQuestionsPayload",
    "ComplexAnalysis",
]
