"""Graph factory: the only place inquiry complexes are built and mutated."""
from typing import Dict, Any, List, Optional, Callable, Mapping, Union, Iterable
from datetime import datetime
import logging
import uuid

from pydantic import ValidationError as SchemaError

from ..models.node import Node, NodeType, is_legal_transition
from ..models.inquiry import (
    InquiryComplex,
    ComplexMetadata,
    ExplorationStats,
    empty_type_counts,
    utcnow,
)
from ..exceptions import NotFoundError, ValidationError

log = logging.getLogger(__name__)

CENTRAL_POINT_STRENGTH = 0.8

INITIAL_STRENGTH: Dict[NodeType, float] = {
    NodeType.POINT: 0.7,
    NodeType.OBJECTION: 0.6,
    NodeType.SYNTHESIS: 0.8,
    NodeType.REFUTATION: 0.6,
}

TRANSIENT_METADATA_KEYS = ("isExpanding",)


def _new_id() -> str:
    return str(uuid.uuid4())


class GraphFactory:
    """Creates complexes, inserts nodes and converts complexes to and from
    their serialized form.

    All operations are synchronous and perform no I/O. Each mutation
    validates only the delta it introduces, so the tree invariants hold
    by construction for any complex built through ``create_complex`` and
    ``add_node``.
    """

    def __init__(
        self,
        id_factory: Optional[Callable[[], str]] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        """Initialize graph factory.

        Args:
            id_factory: Callable producing unique ids (defaults to uuid4)
            clock: Callable returning the current time
        """
        self.id_factory = id_factory or _new_id
        self.clock = clock or utcnow

    def create_complex(
        self,
        question: str,
        central_content: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> InquiryComplex:
        """Create a new complex with a central point.

        Args:
            question: Central question seeding the complex
            central_content: Content of the depth-0 point
            metadata: Optional metadata merged into the central node's defaults

        Returns:
            InquiryComplex: The new complex
        """
        now = self.clock()
        central = Node(
            id=self.id_factory(),
            type=NodeType.POINT,
            content=central_content,
            depth=0,
            parent_id=None,
            metadata={
                **self._default_metadata(NodeType.POINT, now),
                "strength": CENTRAL_POINT_STRENGTH,
                **(metadata or {})
            }
        )
        counts = empty_type_counts()
        counts[NodeType.POINT.value] = 1

        inquiry = InquiryComplex(
            id=self.id_factory(),
            central_question=question,
            central_point_id=central.id,
            nodes={central.id: central},
            metadata=ComplexMetadata(
                created_at=now,
                last_updated=now,
                max_depth=0,
                exploration_stats=ExplorationStats(total_nodes=1, nodes_by_type=counts)
            )
        )
        log.debug(f"Created complex {inquiry.id} with central point {central.id}")
        return inquiry

    def add_node(
        self,
        inquiry: InquiryComplex,
        parent_id: str,
        node_type: Union[NodeType, str],
        content: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> str:
        """Add a new node under an existing parent.

        Args:
            inquiry: Complex to mutate
            parent_id: ID of the parent node
            node_type: Type of the new node
            content: Content of the new node
            metadata: Optional metadata merged over the type defaults

        Returns:
            str: ID of the new node

        Raises:
            ValidationError: If the parent is unknown or the transition is illegal
        """
        try:
            node_type = NodeType(node_type)
        except ValueError as e:
            raise ValidationError(f"Unknown node type: {node_type}") from e

        parent = inquiry.nodes.get(parent_id)
        if parent is None:
            raise ValidationError(
                f"Parent node {parent_id} not found in complex {inquiry.id}"
            )
        if not is_legal_transition(parent.type, node_type):
            raise ValidationError(
                f"Cannot add {node_type.value} as child of {parent.type.value}"
            )

        now = self.clock()
        node = Node(
            id=self.id_factory(),
            type=node_type,
            content=content,
            depth=parent.depth + 1,
            parent_id=parent_id,
            metadata={**self._default_metadata(node_type, now), **(metadata or {})}
        )
        if node.id in inquiry.nodes:
            raise ValidationError(f"Node id {node.id} already in use")

        parent.child_ids.append(node.id)
        inquiry.nodes[node.id] = node

        stats = inquiry.metadata.exploration_stats
        inquiry.metadata.max_depth = max(inquiry.metadata.max_depth, node.depth)
        inquiry.metadata.last_updated = now
        stats.total_nodes += 1
        stats.nodes_by_type[node_type.value] = stats.nodes_by_type.get(node_type.value, 0) + 1

        log.debug(
            f"Added {node_type.value} {node.id} under {parent_id} "
            f"at depth {node.depth} in complex {inquiry.id}"
        )
        return node.id

    def get_path_to_node(self, inquiry: InquiryComplex, node_id: str) -> List[Node]:
        """Get the path from the central point to a node.

        Args:
            inquiry: Complex to search
            node_id: Target node ID

        Returns:
            List[Node]: Nodes from the central point to the target, root first

        Raises:
            NotFoundError: If the node is not in the complex
        """
        node = inquiry.get_node(node_id)
        path = [node]
        seen = {node.id}
        while node.parent_id is not None:
            parent = inquiry.nodes.get(node.parent_id)
            if parent is None:
                raise NotFoundError(
                    f"Parent {node.parent_id} of node {node.id} not found"
                )
            if parent.id in seen:
                raise ValidationError(f"Cycle detected at node {parent.id}")
            seen.add(parent.id)
            path.append(parent)
            node = parent
        path.reverse()
        return path

    def find_common_parent(
        self,
        inquiry: InquiryComplex,
        node_id_a: str,
        node_id_b: str
    ) -> str:
        """Find the deepest node shared by the paths to two nodes.

        Args:
            inquiry: Complex to search
            node_id_a: First node ID
            node_id_b: Second node ID

        Returns:
            str: ID of the lowest common ancestor
        """
        path_a = self.get_path_to_node(inquiry, node_id_a)
        path_b = self.get_path_to_node(inquiry, node_id_b)

        common_id = None
        for node_a, node_b in zip(path_a, path_b):
            if node_a.id != node_b.id:
                break
            common_id = node_a.id

        return common_id if common_id is not None else inquiry.central_point_id

    def get_nodes_by_type(
        self,
        inquiry: InquiryComplex,
        node_type: Union[NodeType, str]
    ) -> List[Node]:
        """Get all nodes of one type in insertion order."""
        node_type = NodeType(node_type)
        return [node for node in inquiry.nodes.values() if node.type == node_type]

    def serialize(self, inquiry: InquiryComplex) -> Dict[str, Any]:
        """Convert a complex to a plain JSON-compatible dictionary.

        Args:
            inquiry: Complex to serialize

        Returns:
            Dict[str, Any]: Self-contained representation with nodes as an
            insertion-ordered list
        """
        nodes = []
        for node in inquiry.nodes.values():
            data = node.model_dump(by_alias=True, mode="json")
            for key in TRANSIENT_METADATA_KEYS:
                data["metadata"].pop(key, None)
            nodes.append(data)

        return {
            "id": inquiry.id,
            "centralQuestion": inquiry.central_question,
            "centralPointId": inquiry.central_point_id,
            "nodes": nodes,
            "metadata": inquiry.metadata.model_dump(by_alias=True, mode="json"),
        }

    def deserialize(self, data: Mapping[str, Any]) -> InquiryComplex:
        """Rebuild a complex from its serialized form.

        Nodes may be given as a list of node objects, a list of
        ``[id, node]`` pairs or a mapping keyed by id.

        Args:
            data: Serialized complex

        Returns:
            InquiryComplex: Reconstructed complex

        Raises:
            ValidationError: If the data is malformed or violates the tree invariants
        """
        if not isinstance(data, Mapping):
            raise ValidationError("Serialized complex must be a mapping")

        nodes: Dict[str, Node] = {}
        for entry in self._node_entries(data.get("nodes")):
            try:
                node = Node.model_validate(entry)
            except SchemaError as e:
                raise ValidationError(f"Invalid node data: {e}") from e
            if node.id in nodes:
                raise ValidationError(f"Duplicate node id {node.id}")
            for key in TRANSIENT_METADATA_KEYS:
                node.metadata.pop(key, None)
            nodes[node.id] = node

        payload = {key: value for key, value in data.items() if key != "nodes"}
        payload["nodes"] = nodes
        try:
            inquiry = InquiryComplex.model_validate(payload)
        except SchemaError as e:
            raise ValidationError(f"Invalid complex data: {e}") from e

        counts = empty_type_counts()
        for node in nodes.values():
            counts[node.type.value] += 1
        stats = inquiry.metadata.exploration_stats
        stats.nodes_by_type = counts
        stats.total_nodes = len(nodes)
        computed_depth = max((node.depth for node in nodes.values()), default=0)
        inquiry.metadata.max_depth = max(inquiry.metadata.max_depth, computed_depth)

        self.validate_complex(inquiry)
        return inquiry

    def validate_complex(self, inquiry: InquiryComplex) -> None:
        """Check the whole tree against the structural invariants.

        Args:
            inquiry: Complex to check

        Raises:
            ValidationError: On the first violated invariant
        """
        nodes = inquiry.nodes
        root = nodes.get(inquiry.central_point_id)
        if root is None:
            raise ValidationError(
                f"Central point {inquiry.central_point_id} not found"
            )
        if root.parent_id is not None or root.depth != 0:
            raise ValidationError("Central point must have no parent and depth 0")
        if root.type != NodeType.POINT:
            raise ValidationError("Central point must be a point")

        for node in nodes.values():
            if node.id != root.id:
                if node.parent_id is None:
                    raise ValidationError(f"Node {node.id} has no parent")
                parent = nodes.get(node.parent_id)
                if parent is None:
                    raise ValidationError(
                        f"Parent {node.parent_id} of node {node.id} not found"
                    )
                if node.depth != parent.depth + 1:
                    raise ValidationError(
                        f"Node {node.id} has depth {node.depth}, "
                        f"expected {parent.depth + 1}"
                    )
                if not is_legal_transition(parent.type, node.type):
                    raise ValidationError(
                        f"Illegal {node.type.value} under {parent.type.value} "
                        f"at node {node.id}"
                    )
                if node.id not in parent.child_ids:
                    raise ValidationError(
                        f"Node {node.id} missing from children of {parent.id}"
                    )

            if len(set(node.child_ids)) != len(node.child_ids):
                raise ValidationError(f"Duplicate child ids under node {node.id}")
            for child_id in node.child_ids:
                child = nodes.get(child_id)
                if child is None or child.parent_id != node.id:
                    raise ValidationError(
                        f"Child {child_id} of node {node.id} does not point back"
                    )

        reachable = 0
        stack = [root.id]
        while stack:
            reachable += 1
            stack.extend(nodes[stack.pop()].child_ids)
        if reachable != len(nodes):
            raise ValidationError("Node set is not a single rooted tree")

        counts = empty_type_counts()
        for node in nodes.values():
            counts[node.type.value] += 1
        if inquiry.metadata.exploration_stats.nodes_by_type != counts:
            raise ValidationError("Node type counts out of sync")

    def _node_entries(self, raw_nodes: Any) -> Iterable[Dict[str, Any]]:
        """Normalize the accepted node layouts into node dictionaries."""
        if raw_nodes is None:
            raise ValidationError("Serialized complex has no nodes")

        if isinstance(raw_nodes, Mapping):
            pairs = list(raw_nodes.items())
        elif isinstance(raw_nodes, (list, tuple)):
            pairs = []
            for item in raw_nodes:
                if isinstance(item, Mapping):
                    pairs.append((item.get("id"), item))
                elif (
                    isinstance(item, (list, tuple))
                    and len(item) == 2
                    and isinstance(item[1], Mapping)
                ):
                    pairs.append((item[0], item[1]))
                else:
                    raise ValidationError(f"Unrecognized node entry: {item!r}")
        else:
            raise ValidationError("Nodes must be a list or a mapping")

        entries = []
        for node_id, node_data in pairs:
            entry = dict(node_data)
            entry.setdefault("id", node_id)
            if entry["id"] != node_id and node_id is not None:
                raise ValidationError(
                    f"Node key {node_id} does not match node id {entry['id']}"
                )
            entries.append(entry)
        return entries

    def _default_metadata(self, node_type: NodeType, now: datetime) -> Dict[str, Any]:
        return {
            "strength": INITIAL_STRENGTH[node_type],
            "tags": [],
            "sources": [],
            "createdAt": now.isoformat(),
        }
