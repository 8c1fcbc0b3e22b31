"""Auto-expansion planning and execution."""
from typing import List, Optional
import asyncio
import logging
import random

from pydantic import BaseModel, ConfigDict, Field

from .expansion import ExpansionOrchestrator
from ..models.inquiry import InquiryComplex
from ..models.node import NodeType, ExpansionType

log = logging.getLogger(__name__)

SYNTHESIS_PROBABILITY = 0.3
DEFAULT_PACING_DELAY = 1.0


class ExpansionStep(BaseModel):
    """One scheduled expansion."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    node_id: str = Field(alias="nodeId")
    expansion_type: ExpansionType = Field(alias="expansionType")


class FailedStep(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    step: ExpansionStep
    error: str


class AutoExpansionResult(BaseModel):
    """Outcome of one auto-expansion pass."""

    model_config = ConfigDict(populate_by_name=True)

    complex_id: str = Field(alias="complexId")
    planned: List[ExpansionStep] = Field(default_factory=list)
    completed: List[ExpansionStep] = Field(default_factory=list)
    failed: List[FailedStep] = Field(default_factory=list)
    new_node_ids: List[str] = Field(default_factory=list, alias="newNodeIds")


def plan_auto_expansion(
    inquiry: InquiryComplex,
    target_depth: int,
    max_nodes: int,
    rng: Optional[random.Random] = None,
    synthesis_probability: float = SYNTHESIS_PROBABILITY
) -> List[ExpansionStep]:
    """Choose which nodes to grow next.

    Nodes shallower than ``target_depth`` are visited by ascending depth,
    then descending strength. A childless point gets objections, a
    childless objection gets a refutation, and a point with more than one
    child gets a synthesis with probability ``synthesis_probability``.

    Args:
        inquiry: Complex to plan for
        target_depth: Only nodes with depth below this are candidates
        max_nodes: Maximum number of steps in the plan
        rng: Random source for the synthesis draw
        synthesis_probability: Chance of scheduling a synthesis per eligible point

    Returns:
        List[ExpansionStep]: Steps in execution order, at most ``max_nodes``
    """
    rng = rng or random.Random()
    plan: List[ExpansionStep] = []
    if max_nodes <= 0:
        return plan

    # sorted() is stable, so ties keep insertion order
    candidates = sorted(
        (node for node in inquiry.nodes.values() if node.depth < target_depth),
        key=lambda node: (node.depth, -node.strength)
    )

    for node in candidates:
        if len(plan) >= max_nodes:
            break

        if not node.child_ids:
            if node.type == NodeType.POINT:
                plan.append(ExpansionStep(node_id=node.id, expansion_type=ExpansionType.OBJECTIONS))
            elif node.type == NodeType.OBJECTION:
                plan.append(ExpansionStep(node_id=node.id, expansion_type=ExpansionType.REFUTATION))

        if (
            node.type == NodeType.POINT
            and len(node.child_ids) > 1
            and len(plan) < max_nodes
            and rng.random() < synthesis_probability
        ):
            plan.append(ExpansionStep(node_id=node.id, expansion_type=ExpansionType.SYNTHESIS))

    return plan


class AutoExpander:
    """Drives the orchestrator through a planned sequence of expansions.

    Steps run one at a time with a pacing delay between generator calls.
    A failing step is logged and skipped; the rest of the plan still runs.
    """

    def __init__(
        self,
        orchestrator: ExpansionOrchestrator,
        pacing_delay: float = DEFAULT_PACING_DELAY,
        rng: Optional[random.Random] = None,
        synthesis_probability: float = SYNTHESIS_PROBABILITY
    ):
        """Initialize auto-expander.

        Args:
            orchestrator: Orchestrator performing each expansion
            pacing_delay: Seconds to wait between steps
            rng: Random source for planning, seed it for reproducible plans
            synthesis_probability: Chance of scheduling a synthesis per eligible point
        """
        self.orchestrator = orchestrator
        self.registry = orchestrator.registry
        self.pacing_delay = pacing_delay
        self.rng = rng or random.Random()
        self.synthesis_probability = synthesis_probability

    def plan(
        self,
        inquiry: InquiryComplex,
        target_depth: int,
        max_nodes: int
    ) -> List[ExpansionStep]:
        return plan_auto_expansion(
            inquiry,
            target_depth,
            max_nodes,
            rng=self.rng,
            synthesis_probability=self.synthesis_probability
        )

    async def auto_expand(
        self,
        complex_id: str,
        target_depth: int = 3,
        max_nodes: int = 20
    ) -> AutoExpansionResult:
        """Plan and execute one growth pass over a complex.

        Args:
            complex_id: Complex ID
            target_depth: Only nodes with depth below this are expanded
            max_nodes: Maximum number of expansion steps

        Returns:
            AutoExpansionResult: Planned, completed and failed steps
        """
        inquiry = self.registry.get(complex_id)
        steps = self.plan(inquiry, target_depth, max_nodes)
        result = AutoExpansionResult(complex_id=complex_id, planned=steps)
        log.info(f"Auto-expanding complex {complex_id}: {len(steps)} step(s) planned")

        for index, step in enumerate(steps):
            if index > 0 and self.pacing_delay > 0:
                await asyncio.sleep(self.pacing_delay)
            try:
                new_ids = await self.orchestrator.expand_node(
                    complex_id,
                    step.node_id,
                    step.expansion_type
                )
            except Exception as e:
                log.error(
                    f"Auto-expansion step {step.expansion_type.value} "
                    f"on node {step.node_id} failed: {e}"
                )
                result.failed.append(FailedStep(step=step, error=str(e)))
                continue
            result.completed.append(step)
            result.new_node_ids.extend(new_ids)

        log.info(
            f"Auto-expansion of {complex_id} finished: {len(result.completed)} completed, "
            f"{len(result.failed)} failed, {len(result.new_node_ids)} new node(s)"
        )
        return result
