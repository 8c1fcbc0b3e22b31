"""Generator-backed growth and assessment of inquiry complexes."""
from .llm import ContentGenerator, LLMClient, LLMConfig
from .llm_factory import create_llm
from .expansion import ExpansionOrchestrator
from .planner import (
    ExpansionStep,
    AutoExpansionResult,
    AutoExpander,
    plan_auto_expansion,
)
from .analyzer import ComplexAnalyzer

__all__ = [
    "ContentGenerator",
    "LLMClient",
    "LLMConfig",
    "create_llm",
    "ExpansionOrchestrator",
    "ExpansionStep",
    "AutoExpansionResult",
    "AutoExpander",
    "plan_auto_expansion",
    "ComplexAnalyzer",
]
