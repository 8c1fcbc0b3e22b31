"""Schema validation of parsed generator responses."""
from dataclasses import dataclass
from typing import Generic, Optional, Type, TypeVar
import logging

from pydantic import BaseModel
from pydantic import ValidationError as SchemaError

from .parser import GenerationResponseParser
from ..exceptions import GenerationError, GenerationParseError, GenerationContentError

log = logging.getLogger(__name__)

PayloadT = TypeVar("PayloadT", bound=BaseModel)


@dataclass
class ParsedResponse(Generic[PayloadT]):
    """Outcome of reading one generator response.

    Exactly one of ``payload`` and ``error`` is set.
    """

    raw: str
    payload: Optional[PayloadT] = None
    error: Optional[GenerationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> PayloadT:
        """Return the payload or raise the recorded error."""
        if self.error is not None:
            raise self.error
        if self.payload is None:
            raise GenerationContentError("Response has no payload", raw_text=self.raw)
        return self.payload


class ResponseValidator:
    """Parses generator output and checks it against a payload schema."""

    def __init__(self, parser: Optional[GenerationResponseParser] = None):
        """Initialize validator.

        Args:
            parser: JSON extraction parser
        """
        self.parser = parser or GenerationResponseParser()

    def validate(self, response: str, schema: Type[PayloadT]) -> ParsedResponse[PayloadT]:
        """Parse and validate a generator response.

        Args:
            response: Raw generator output
            schema: Expected payload model

        Returns:
            ParsedResponse: Payload on success, error kind otherwise
        """
        try:
            data = self.parser.parse(response)
        except GenerationParseError as e:
            log.warning(f"Failed to parse generator response for {schema.__name__}")
            return ParsedResponse(raw=str(response), error=e)

        try:
            payload = schema.model_validate(data)
        except SchemaError as e:
            log.warning(
                f"Generator response does not match {schema.__name__}: "
                f"{e.error_count()} error(s)"
            )
            return ParsedResponse(
                raw=response,
                error=GenerationContentError(
                    f"Response missing or malformed fields for {schema.__name__}",
                    raw_text=response,
                    details=e.errors(include_url=False)
                )
            )

        return ParsedResponse(raw=response, payload=payload)
