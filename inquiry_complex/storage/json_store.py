"""File-backed store for serialized complexes."""
from typing import Dict, Any, List, Union
import gzip
import json
import logging
import re
from pathlib import Path

from ..exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

SAFE_ID = re.compile(r"^[A-Za-z0-9_.-]+$")


class JsonComplexStore:
    """Stores one JSON document per complex.

    Only the serialized form produced by ``GraphFactory.serialize`` is
    written or read; in-memory complexes never reach this class.
    """

    def __init__(self, base_dir: Union[str, Path], compress: bool = True):
        """Initialize store.

        Args:
            base_dir: Directory holding the documents
            compress: Whether to gzip documents
        """
        self.base_dir = Path(base_dir)
        self.compress = compress
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, complex_id: str, compressed: bool) -> Path:
        if not SAFE_ID.match(complex_id):
            raise ValidationError(f"Invalid complex id for storage: {complex_id!r}")
        suffix = ".json.gz" if compressed else ".json"
        return self.base_dir / f"{complex_id}{suffix}"

    async def save(self, serialized: Dict[str, Any]) -> Path:
        """Write a serialized complex, replacing any previous version.

        Args:
            serialized: Output of ``GraphFactory.serialize``

        Returns:
            Path: Path of the written document
        """
        complex_id = serialized.get("id")
        if not isinstance(complex_id, str):
            raise ValidationError("Serialized complex has no id")

        path = self._path(complex_id, self.compress)
        payload = json.dumps(serialized, indent=2).encode("utf-8")
        tmp_path = path.with_name(path.name + ".tmp")
        if self.compress:
            with gzip.open(tmp_path, "wb") as f:
                f.write(payload)
        else:
            with open(tmp_path, "wb") as f:
                f.write(payload)
        tmp_path.replace(path)

        stale = self._path(complex_id, not self.compress)
        if stale.exists():
            stale.unlink()

        logger.info(f"Saved complex {complex_id} to {path}")
        return path

    async def load(self, complex_id: str) -> Dict[str, Any]:
        """Read a serialized complex.

        Raises:
            NotFoundError: If no document exists for the id
        """
        compressed = self._path(complex_id, True)
        plain = self._path(complex_id, False)
        if compressed.exists():
            with gzip.open(compressed, "rb") as f:
                return json.loads(f.read().decode("utf-8"))
        if plain.exists():
            with open(plain, "r", encoding="utf-8") as f:
                return json.load(f)
        raise NotFoundError(f"No stored complex {complex_id}")

    async def list_ids(self) -> List[str]:
        ids = set()
        for path in self.base_dir.iterdir():
            name = path.name
            if name.endswith(".json.gz"):
                ids.add(name[:-len(".json.gz")])
            elif name.endswith(".json"):
                ids.add(name[:-len(".json")])
        return sorted(ids)

    async def delete(self, complex_id: str) -> None:
        """Remove a stored complex.

        Raises:
            NotFoundError: If no document exists for the id
        """
        removed = False
        for compressed in (True, False):
            path = self._path(complex_id, compressed)
            if path.exists():
                path.unlink()
                removed = True
        if not removed:
            raise NotFoundError(f"No stored complex {complex_id}")
        logger.info(f"Deleted stored complex {complex_id}")
