"""Structured prompts for growing and assessing inquiry complexes."""
from typing import Dict, Any, List, NamedTuple, Optional

from ..models.node import Node, NodeType
from ..models.inquiry import InquiryComplex


class GenerationParams(NamedTuple):
    temperature: float
    max_tokens: int


CENTRAL_POINT_PARAMS = GenerationParams(0.7, 400)
OBJECTIONS_PARAMS = GenerationParams(0.8, 600)
REFUTATION_PARAMS = GenerationParams(0.7, 500)
SYNTHESIS_PARAMS = GenerationParams(0.8, 700)
FOLLOW_UP_PARAMS = GenerationParams(0.7, 500)
ANALYSIS_PARAMS = GenerationParams(0.6, 800)

SECTION_TITLES = {
    NodeType.POINT: "POINTS",
    NodeType.OBJECTION: "OBJECTIONS",
    NodeType.REFUTATION: "REFUTATIONS",
    NodeType.SYNTHESIS: "SYNTHESES",
}

CENTRAL_POINT_PROMPT = """You are a philosopher formulating a central position on a question.

INQUIRY QUESTION: "{question}"

Write a central point that:
1. Takes a clear position on the question
2. Gives initial reasoning or evidence
3. Is nuanced and intellectually honest
4. Is neither obviously true nor obviously false
5. Can sustain objections, refutations and syntheses

Keep it to 2-4 sentences.

Respond with ONLY valid JSON:
{{
  "content": "The position addressing the question",
  "strength": 0.75,
  "tags": ["short", "labels"],
  "keyTerms": ["important", "concepts"],
  "reasoning": "Brief account of the logical foundation"
}}"""

OBJECTIONS_PROMPT = """You are a critical philosopher skilled in dialectical reasoning.

CENTRAL QUESTION: "{question}"

ARGUMENT SO FAR:
{path}

TARGET POSITION: "{content}"

Generate 2-3 distinct objections to the target position. Each objection should:
1. Challenge a different aspect of the position
2. Use a different strategy (logical, empirical, conceptual, practical, ethical)
3. Avoid strawman attacks
4. Be 1-3 sentences long

Respond with ONLY valid JSON:
{{
  "objections": [
    {{
      "content": "Objection text",
      "type": "logical|empirical|conceptual|practical|ethical",
      "strength": 0.65,
      "focusArea": "Aspect of the position this targets",
      "tags": ["short", "labels"]
    }}
  ]
}}"""

REFUTATION_PROMPT = """You are defending a position against an objection.

CENTRAL QUESTION: "{question}"

ARGUMENT SO FAR:
{path}

ORIGINAL POSITION: "{point}"

OBJECTION TO REFUTE: "{objection}"

Write a refutation that:
1. Addresses the core of the objection directly
2. Uses sound reasoning and evidence where possible
3. Concedes what the objection gets right
4. Clarifies or strengthens the original position

Keep it to 2-4 sentences.

Respond with ONLY valid JSON:
{{
  "content": "Refutation text",
  "strategy": "clarification|counterevidence|reframing|qualification|strengthening",
  "strength": 0.68,
  "concessions": "Valid points acknowledged in the objection",
  "newClarifications": "Clarifications added to the original position",
  "tags": ["short", "labels"]
}}"""

SYNTHESIS_PROMPT = """You are a philosopher resolving a tension between two positions.

CENTRAL QUESTION: "{question}"

ARGUMENT SO FAR:
{path}

POSITION 1: "{first}"

POSITION 2: "{second}"

Write a synthesis that:
1. Keeps the legitimate insight of each position
2. Moves past the apparent contradiction
3. Addresses the concerns that produced the opposition
4. Opens new directions for inquiry

Keep it to 3-5 sentences.

Respond with ONLY valid JSON:
{{
  "content": "Synthesis text",
  "approach": "dialectical|pragmatic|conceptual|reframing|hierarchical",
  "strength": 0.80,
  "preservedElements": ["Insights kept from each position"],
  "newInsight": "The new perspective this produces",
  "implications": "What this suggests about the broader question",
  "tags": ["short", "labels"]
}}"""

FOLLOW_UP_QUESTIONS_PROMPT = """You are identifying productive directions for deeper inquiry.

CENTRAL QUESTION: "{question}"

ARGUMENT SO FAR:
{path}

CURRENT POSITION: "{content}"

Generate 3-4 follow-up questions that probe assumptions, consequences,
related issues or new angles of challenge.

Respond with ONLY valid JSON:
{{
  "questions": [
    {{
      "question": "Follow-up question",
      "type": "assumption|implication|application|connection|challenge",
      "depth": "deeper|broader|practical|theoretical",
      "rationale": "Why this question matters"
    }}
  ]
}}"""

ANALYSIS_PROMPT = """You are evaluating the coherence of a structured inquiry.

CENTRAL QUESTION: "{question}"

INQUIRY COMPLEX STRUCTURE:
{summary}

Assess:
1. Rigor and coherence
2. Balance of perspectives
3. Depth of exploration
4. Weak or underdeveloped areas
5. Productive next steps

Respond with ONLY valid JSON:
{{
  "overallStrength": 0.75,
  "coherenceScore": 0.80,
  "balanceScore": 0.70,
  "depthScore": 0.85,
  "weakAreas": ["Areas needing development"],
  "strongAreas": ["Well-developed aspects"],
  "suggestions": ["Recommendations for further exploration"],
  "missingPerspectives": ["Viewpoints not yet considered"],
  "keyInsights": ["Most important insights so far"]
}}"""


def describe_path(path: List[Node]) -> str:
    """Render a root-first path as a numbered, indented outline."""
    return "\n".join(
        f"{'  ' * index}{index + 1}. [{node.type.value.upper()}] {node.summary}"
        for index, node in enumerate(path)
    )


def create_complex_summary(
    inquiry: InquiryComplex,
    stats: Optional[Dict[str, Any]] = None
) -> str:
    """Build a compact overview of a complex grouped by node type.

    Args:
        inquiry: Complex to summarize
        stats: Optional structural metrics to include

    Returns:
        str: Summary text
    """
    lines = [
        "COMPLEX OVERVIEW:",
        f"- Central Question: {inquiry.central_question}",
        f"- Total Nodes: {len(inquiry.nodes)}",
        f"- Max Depth: {inquiry.metadata.max_depth}",
    ]
    if stats:
        lines.append(f"- Leaves: {stats.get('leaf_count', 0)}")
        lines.append(f"- Unexplored Frontier: {stats.get('frontier_size', 0)}")
        lines.append(
            f"- Average Branching: {stats.get('avg_branching_factor', 0.0):.2f}"
        )
    lines.append("")

    for node_type in NodeType:
        nodes = [node for node in inquiry.nodes.values() if node.type == node_type]
        if not nodes:
            continue
        lines.append(f"{SECTION_TITLES[node_type]} ({len(nodes)}):")
        for node in nodes:
            lines.append(
                f"  - [Depth {node.depth}, Strength {node.strength:.2f}] {node.summary}"
            )
        lines.append("")

    return "\n".join(lines)
