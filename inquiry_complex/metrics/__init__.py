"""Structural metrics for inquiry complexes."""
from .graph_metrics import ComplexMetrics

__all__ = ["ComplexMetrics"]
