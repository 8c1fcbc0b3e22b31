"""JSON extraction from free-text generator responses."""
from typing import Dict, Any, Iterator, List, Tuple
import re
import json
import logging
from itertools import islice

from ..exceptions import GenerationParseError

log = logging.getLogger(__name__)

OPENING_FENCE = re.compile(r"^```[A-Za-z0-9_+.-]*[ \t]*\n?")
CLOSING_FENCE = re.compile(r"\n?[ \t]*```$")

# Balanced spans tried after the whole text fails to decode.
MAX_CANDIDATES = 64


class GenerationResponseParser:
    """Extracts a single JSON object from generator output.

    The generator is asked for JSON but returns free text, so the response
    may be wrapped in a fenced code block or surrounded by prose.
    """

    def parse(self, response: str) -> Dict[str, Any]:
        """Parse generator output into a JSON object.

        Args:
            response: Raw generator output

        Returns:
            Dict[str, Any]: The decoded object

        Raises:
            GenerationParseError: If no JSON object can be decoded
        """
        if not isinstance(response, str):
            raise GenerationParseError(
                f"Expected text response, got {type(response).__name__}",
                raw_text=repr(response)
            )

        text = self.strip_fence(response.strip())

        value = self._loads(text)
        if isinstance(value, dict):
            return value

        for candidate in islice(self.iter_balanced_objects(text), MAX_CANDIDATES):
            value = self._loads(candidate)
            if isinstance(value, dict):
                return value

        log.debug(f"Unparseable generator response: {response!r}")
        raise GenerationParseError("Invalid generator response format", raw_text=response)

    @staticmethod
    def strip_fence(text: str) -> str:
        """Remove a surrounding triple-backtick fence, with or without language tag."""
        if text.startswith("```"):
            text = OPENING_FENCE.sub("", text, count=1)
            text = CLOSING_FENCE.sub("", text, count=1)
        return text.strip()

    @staticmethod
    def iter_balanced_objects(text: str) -> Iterator[str]:
        """Yield balanced ``{...}`` substrings in order of their opening brace.

        Spans are collected in a single pass over the text. Braces inside
        JSON string literals are ignored, and quotes outside any brace are
        treated as prose.
        """
        spans: List[Tuple[int, int]] = []
        openings: List[int] = []
        in_string = False
        escaped = False
        for index, char in enumerate(text):
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
            elif char == '"':
                in_string = bool(openings)
            elif char == "{":
                openings.append(index)
            elif char == "}" and openings:
                spans.append((openings.pop(), index))

        for start, end in sorted(spans):
            yield text[start:end + 1]

    @staticmethod
    def _loads(text: str) -> Any:
        try:
            return json.loads(text)
        except (ValueError, RecursionError):
            return None
