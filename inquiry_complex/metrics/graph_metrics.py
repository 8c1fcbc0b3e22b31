"""Graph metrics implementation."""
from typing import Dict, Any, List
import logging

import networkx as nx

from ..models.inquiry import InquiryComplex
from ..models.node import NodeType

log = logging.getLogger(__name__)


class ComplexMetrics:
    """Computes structural metrics of a complex through NetworkX."""

    @staticmethod
    def to_networkx(inquiry: InquiryComplex) -> nx.DiGraph:
        """Build a directed parent-to-child graph.

        Args:
            inquiry: Complex to convert

        Returns:
            nx.DiGraph: Graph with type, depth and strength node attributes
        """
        graph = nx.DiGraph()
        for node in inquiry.nodes.values():
            graph.add_node(
                node.id,
                type=node.type.value,
                depth=node.depth,
                strength=node.strength
            )
        for node in inquiry.nodes.values():
            for child_id in node.child_ids:
                graph.add_edge(node.id, child_id)
        return graph

    def compute(self, inquiry: InquiryComplex) -> Dict[str, Any]:
        """Compute structural metrics.

        Args:
            inquiry: Complex to measure

        Returns:
            Dict[str, Any]: node_count, leaf_count, avg_branching_factor,
            height, frontier_size, avg_strength_by_type, is_tree
        """
        graph = self.to_networkx(inquiry)

        out_degrees = dict(graph.out_degree())
        internal = [degree for degree in out_degrees.values() if degree > 0]
        frontier = [
            node for node in inquiry.nodes.values()
            if not node.child_ids and node.type in (NodeType.POINT, NodeType.OBJECTION)
        ]

        strengths: Dict[str, List[float]] = {}
        for node in inquiry.nodes.values():
            strengths.setdefault(node.type.value, []).append(node.strength)

        is_tree = nx.is_arborescence(graph)
        height = nx.dag_longest_path_length(graph) if is_tree else 0
        if not is_tree:
            log.warning(f"Complex {inquiry.id} is not a tree")

        return {
            "node_count": graph.number_of_nodes(),
            "leaf_count": len(out_degrees) - len(internal),
            "avg_branching_factor": sum(internal) / len(internal) if internal else 0.0,
            "height": height,
            "frontier_size": len(frontier),
            "avg_strength_by_type": {
                node_type: sum(values) / len(values)
                for node_type, values in strengths.items()
            },
            "is_tree": is_tree,
        }
