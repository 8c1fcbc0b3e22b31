"""Dependencies resolving the engine components attached to the app."""
from typing import Optional

from fastapi import HTTPException, Request, status

from ..graph.registry import ComplexRegistry
from ..reasoning.analyzer import ComplexAnalyzer
from ..reasoning.expansion import ExpansionOrchestrator
from ..reasoning.planner import AutoExpander
from ..storage.json_store import JsonComplexStore


def get_registry(request: Request) -> ComplexRegistry:
    return request.app.state.registry


def get_orchestrator(request: Request) -> ExpansionOrchestrator:
    return request.app.state.orchestrator


def get_auto_expander(request: Request) -> AutoExpander:
    return request.app.state.auto_expander


def get_analyzer(request: Request) -> ComplexAnalyzer:
    return request.app.state.analyzer


def get_store(request: Request) -> JsonComplexStore:
    store: Optional[JsonComplexStore] = request.app.state.store
    if store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Complex persistence is not configured",
        )
    return store
