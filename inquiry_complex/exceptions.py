"""Custom exceptions for the inquiry complex engine."""
from typing import Any, Optional


class InquiryComplexError(Exception):
    """Base exception for inquiry complex operations."""
    pass


class NotFoundError(InquiryComplexError):
    """Referenced complex or node does not exist."""
    pass


class ValidationError(InquiryComplexError):
    """Illegal parent reference or node type transition."""
    pass


class GenerationError(InquiryComplexError):
    """Error at the content generator boundary."""

    def __init__(self, message: str, raw_text: str = ""):
        super().__init__(message)
        self.raw_text = raw_text


class GenerationParseError(GenerationError):
    """Generator output could not be parsed as JSON."""
    pass


class GenerationContentError(GenerationError):
    """Generator output parsed but does not have the expected shape."""

    def __init__(
        self,
        message: str,
        raw_text: str = "",
        details: Optional[Any] = None
    ):
        super().__init__(message, raw_text)
        self.details = details


class ExpansionError(InquiryComplexError):
    """Expansion request cannot be carried out in the current graph state."""
    pass


class NothingToSynthesizeError(ExpansionError):
    """Point has no objection children to synthesize with."""
    pass


class ExpansionInProgressError(ExpansionError):
    """Node is already being expanded."""
    pass
