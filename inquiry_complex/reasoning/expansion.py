"""Expansion orchestrator: grows a complex by asking the content generator
for new arguments and attaching the validated results as nodes."""
from typing import List, Optional, Type, Union
import logging

from .llm import ContentGenerator
from .prompts import (
    GenerationParams,
    CENTRAL_POINT_PROMPT,
    OBJECTIONS_PROMPT,
    REFUTATION_PROMPT,
    SYNTHESIS_PROMPT,
    FOLLOW_UP_QUESTIONS_PROMPT,
    CENTRAL_POINT_PARAMS,
    OBJECTIONS_PARAMS,
    REFUTATION_PARAMS,
    SYNTHESIS_PARAMS,
    FOLLOW_UP_PARAMS,
    describe_path,
)
from ..extraction.schemas import (
    CentralPointPayload,
    ObjectionsPayload,
    RefutationPayload,
    SynthesisPayload,
    FollowUpQuestion,
    FollowUpQuestionsPayload,
)
from ..extraction.validator import ResponseValidator, PayloadT
from ..graph.factory import CENTRAL_POINT_STRENGTH
from ..graph.registry import ComplexRegistry
from ..models.inquiry import InquiryComplex
from ..models.node import NodeType, ExpansionType, is_legal_transition
from ..exceptions import (
    ValidationError,
    NothingToSynthesizeError,
    ExpansionInProgressError,
)

log = logging.getLogger(__name__)

DEFAULT_OBJECTION_STRENGTH = 0.6
DEFAULT_REFUTATION_STRENGTH = 0.7
DEFAULT_SYNTHESIS_STRENGTH = 0.8


class ExpansionOrchestrator:
    """Runs generator-backed expansions against complexes in a registry.

    Only the generator call suspends; every graph mutation goes through the
    registry's graph factory and completes without yielding. Nothing is
    persisted here: callers export the complex after a successful call.
    """

    def __init__(
        self,
        registry: ComplexRegistry,
        generator: ContentGenerator,
        validator: Optional[ResponseValidator] = None
    ):
        """Initialize orchestrator.

        Args:
            registry: Registry holding the complexes to expand
            generator: External content generator
            validator: Response parser/validator
        """
        self.registry = registry
        self.generator = generator
        self.factory = registry.factory
        self.validator = validator or ResponseValidator()

    async def create_complex(self, question: str) -> InquiryComplex:
        """Create and register a complex whose central point is generated.

        Args:
            question: Central question

        Returns:
            InquiryComplex: The new complex
        """
        payload = await self._request(
            CENTRAL_POINT_PROMPT.format(question=question),
            CENTRAL_POINT_PARAMS,
            CentralPointPayload
        )
        inquiry = self.registry.create(
            question,
            payload.content,
            payload.node_metadata(CENTRAL_POINT_STRENGTH)
        )
        log.info(f"Created complex {inquiry.id} for question: {question}")
        return inquiry

    async def expand_node(
        self,
        complex_id: str,
        node_id: str,
        expansion_type: Union[ExpansionType, str] = ExpansionType.OBJECTIONS,
        other_node_id: Optional[str] = None
    ) -> List[str]:
        """Expand a node with generated children.

        Args:
            complex_id: Complex ID
            node_id: Node to expand
            expansion_type: objections, refutation or synthesis
            other_node_id: Second node for an explicit synthesis

        Returns:
            List[str]: IDs of the new nodes

        Raises:
            NotFoundError: If the complex or a node does not exist
            ValidationError: If the expansion does not fit the node
            ExpansionInProgressError: If the node is already being expanded
            GenerationError: If the generator response is unusable
        """
        inquiry = self.registry.get(complex_id)
        node = inquiry.get_node(node_id)
        if other_node_id is not None:
            inquiry.get_node(other_node_id)
        try:
            expansion_type = ExpansionType(expansion_type)
        except ValueError as e:
            raise ValidationError(f"Unknown expansion type: {expansion_type}") from e
        if other_node_id is not None and expansion_type != ExpansionType.SYNTHESIS:
            raise ValidationError(
                f"A second node only applies to synthesis, not {expansion_type.value}"
            )

        if node.is_expanding:
            raise ExpansionInProgressError(f"Node {node_id} is already being expanded")

        node.metadata["isExpanding"] = True
        try:
            if expansion_type == ExpansionType.OBJECTIONS:
                return await self.generate_objections(inquiry, node_id)
            if expansion_type == ExpansionType.REFUTATION:
                return [await self.generate_refutation(inquiry, node_id)]
            return [await self.generate_synthesis(inquiry, node_id, other_node_id)]
        except Exception as e:
            log.error(f"Failed to expand node {node_id} with {expansion_type.value}: {e}")
            raise
        finally:
            node.metadata.pop("isExpanding", None)

    async def generate_objections(self, inquiry: InquiryComplex, point_id: str) -> List[str]:
        """Generate objection children for a point.

        Returns:
            List[str]: IDs of the new objection nodes
        """
        point = inquiry.get_node(point_id)
        if point.type != NodeType.POINT:
            raise ValidationError(
                f"Objections can only be raised against points, not {point.type.value}"
            )
        path = self.factory.get_path_to_node(inquiry, point_id)

        payload = await self._request(
            OBJECTIONS_PROMPT.format(
                question=inquiry.central_question,
                path=describe_path(path),
                content=point.content
            ),
            OBJECTIONS_PARAMS,
            ObjectionsPayload
        )

        new_ids = [
            self.factory.add_node(
                inquiry,
                point_id,
                NodeType.OBJECTION,
                objection.content,
                objection.node_metadata(DEFAULT_OBJECTION_STRENGTH)
            )
            for objection in payload.objections
        ]
        log.info(f"Added {len(new_ids)} objections to point {point_id}")
        return new_ids

    async def generate_refutation(self, inquiry: InquiryComplex, objection_id: str) -> str:
        """Generate a refutation child for an objection.

        Returns:
            str: ID of the new refutation node
        """
        objection = inquiry.get_node(objection_id)
        if objection.type != NodeType.OBJECTION:
            raise ValidationError(
                f"Only objections can be refuted, not {objection.type.value}"
            )
        point = inquiry.get_node(objection.parent_id)
        path = self.factory.get_path_to_node(inquiry, objection_id)

        payload = await self._request(
            REFUTATION_PROMPT.format(
                question=inquiry.central_question,
                path=describe_path(path),
                point=point.content,
                objection=objection.content
            ),
            REFUTATION_PARAMS,
            RefutationPayload
        )

        node_id = self.factory.add_node(
            inquiry,
            objection_id,
            NodeType.REFUTATION,
            payload.content,
            payload.node_metadata(DEFAULT_REFUTATION_STRENGTH)
        )
        log.info(f"Added refutation {node_id} to objection {objection_id}")
        return node_id

    async def generate_synthesis(
        self,
        inquiry: InquiryComplex,
        node_id: str,
        other_node_id: Optional[str] = None
    ) -> str:
        """Generate a synthesis node.

        With ``other_node_id`` the synthesis combines the two nodes and is
        placed under their common parent. Without it, the node must be a
        point and is combined with its strongest objection.

        Returns:
            str: ID of the new synthesis node
        """
        first = inquiry.get_node(node_id)
        if other_node_id is not None:
            if other_node_id == node_id:
                raise ValidationError(f"Cannot synthesize node {node_id} with itself")
            second = inquiry.get_node(other_node_id)
            parent_id = self.factory.find_common_parent(inquiry, node_id, other_node_id)
        else:
            objections = [
                child for child in inquiry.children_of(node_id)
                if child.type == NodeType.OBJECTION
            ]
            if not objections:
                raise NothingToSynthesizeError(
                    f"Node {node_id} has no objections to synthesize with"
                )
            # max() keeps the earliest objection among equal strengths
            second = max(objections, key=lambda objection: objection.strength)
            parent_id = node_id

        parent = inquiry.get_node(parent_id)
        if not is_legal_transition(parent.type, NodeType.SYNTHESIS):
            raise ValidationError(
                f"Cannot place a synthesis under {parent.type.value} {parent_id}"
            )
        path = self.factory.get_path_to_node(inquiry, parent_id)

        payload = await self._request(
            SYNTHESIS_PROMPT.format(
                question=inquiry.central_question,
                path=describe_path(path),
                first=first.content,
                second=second.content
            ),
            SYNTHESIS_PARAMS,
            SynthesisPayload
        )

        metadata = payload.node_metadata(DEFAULT_SYNTHESIS_STRENGTH)
        metadata["synthesizedFrom"] = [first.id, second.id]
        synthesis_id = self.factory.add_node(
            inquiry,
            parent_id,
            NodeType.SYNTHESIS,
            payload.content,
            metadata
        )
        log.info(f"Added synthesis {synthesis_id} of {first.id} and {second.id}")
        return synthesis_id

    async def generate_follow_up_questions(
        self,
        complex_id: str,
        node_id: str
    ) -> List[FollowUpQuestion]:
        """Ask for follow-up questions about a node. Does not modify the complex."""
        inquiry = self.registry.get(complex_id)
        node = inquiry.get_node(node_id)
        path = self.factory.get_path_to_node(inquiry, node_id)

        payload = await self._request(
            FOLLOW_UP_QUESTIONS_PROMPT.format(
                question=inquiry.central_question,
                path=describe_path(path),
                content=node.content
            ),
            FOLLOW_UP_PARAMS,
            FollowUpQuestionsPayload
        )
        return payload.questions

    async def _request(
        self,
        prompt: str,
        params: GenerationParams,
        schema: Type[PayloadT]
    ) -> PayloadT:
        response = await self.generator.complete(
            prompt,
            temperature=params.temperature,
            max_tokens=params.max_tokens
        )
        return self.validator.validate(response, schema).unwrap()
