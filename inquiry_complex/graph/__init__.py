"""Graph construction and storage for inquiry complexes."""
from .factory import GraphFactory
from .registry import ComplexRegistry

__all__ = ["GraphFactory", "ComplexRegistry"]
