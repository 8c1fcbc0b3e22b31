"""Data models for inquiry complexes."""
from .node import Node, NodeType, ExpansionType, LEGAL_TRANSITIONS, is_legal_transition
from .inquiry import InquiryComplex, ComplexMetadata, ExplorationStats

__all__ = [
    "Node",
    "NodeType",
    "ExpansionType",
    "LEGAL_TRANSITIONS",
    "is_legal_transition",
    "InquiryComplex",
    "ComplexMetadata",
    "ExplorationStats",
]
