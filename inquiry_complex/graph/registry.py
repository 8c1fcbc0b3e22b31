"""Process-lifetime registry of active inquiry complexes."""
from typing import Dict, Any, List, Optional, Mapping
import logging

from .factory import GraphFactory
from ..models.inquiry import InquiryComplex
from ..exceptions import NotFoundError

log = logging.getLogger(__name__)


class ComplexRegistry:
    """In-memory store of complexes keyed by id.

    Nothing here is durable. Callers push ``export_complex`` output to a
    persistence collaborator and restore it with ``import_complex``.
    """

    def __init__(self, factory: Optional[GraphFactory] = None):
        """Initialize registry.

        Args:
            factory: Graph factory used for creation and (de)serialization
        """
        self.factory = factory or GraphFactory()
        self._complexes: Dict[str, InquiryComplex] = {}

    def __len__(self) -> int:
        return len(self._complexes)

    def __contains__(self, complex_id: object) -> bool:
        return complex_id in self._complexes

    def create(
        self,
        question: str,
        central_content: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> InquiryComplex:
        """Create a complex and store it."""
        inquiry = self.factory.create_complex(question, central_content, metadata)
        return self.add(inquiry)

    def add(self, inquiry: InquiryComplex) -> InquiryComplex:
        """Store a complex, replacing any complex with the same id."""
        if inquiry.id in self._complexes:
            log.warning(f"Replacing complex {inquiry.id} in registry")
        self._complexes[inquiry.id] = inquiry
        return inquiry

    def get(self, complex_id: str) -> InquiryComplex:
        """Get complex by ID.

        Raises:
            NotFoundError: If no complex has this id
        """
        inquiry = self._complexes.get(complex_id)
        if inquiry is None:
            raise NotFoundError(f"Complex {complex_id} not found")
        return inquiry

    def list(self) -> List[InquiryComplex]:
        return list(self._complexes.values())

    def delete(self, complex_id: str) -> None:
        """Remove a complex.

        Raises:
            NotFoundError: If no complex has this id
        """
        if complex_id not in self._complexes:
            raise NotFoundError(f"Complex {complex_id} not found")
        del self._complexes[complex_id]
        log.info(f"Deleted complex {complex_id}")

    def import_complex(self, data: Mapping[str, Any]) -> InquiryComplex:
        """Deserialize a complex and store it."""
        return self.add(self.factory.deserialize(data))

    def export_complex(self, complex_id: str) -> Dict[str, Any]:
        """Serialize a stored complex."""
        return self.factory.serialize(self.get(complex_id))
