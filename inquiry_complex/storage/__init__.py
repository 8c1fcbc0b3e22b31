"""Persistence of serialized inquiry complexes."""
from .json_store import JsonComplexStore

__all__ = ["JsonComplexStore"]
