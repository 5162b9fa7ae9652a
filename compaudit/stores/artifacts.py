"""File-based artifact store shared by pipeline stages."""

from __future__ import annotations

from datetime import UTC, datetime
import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Type, TypeVar

from ..logging import get_logger
from ..models import AnalysisResult, ComponentRecord, Serializable

_ARTIFACT_VERSION = 1

INVENTORY_ARTIFACT = "component-inventory.json"

_R = TypeVar("_R", bound=Serializable)


class ArtifactError(RuntimeError):
    """Raised when a persisted artifact cannot be read."""


class MissingArtifactError(ArtifactError):
    """Raised when a required prerequisite artifact has not been produced."""

    def __init__(self, name: str, detail: str | None = None) -> None:
        self.name = name
        message = f"Missing prerequisite artifact: {name}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


def utc_timestamp() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


class ArtifactStore:
    """Reads and writes the JSON documents produced by each audit stage."""

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = Path(output_dir)
        self.logger = get_logger("artifacts")

    def path_for(self, name: str) -> Path:
        return self.output_dir / name

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    # ------------------------------------------------------------------
    # Raw documents

    def write_json(self, name: str, payload: Any) -> Path:
        path = self.path_for(name)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, indent=2, sort_keys=True) + "\n", encoding="utf-8")
        self.logger.debug("Wrote artifact %s", path)
        return path

    def read_json(self, name: str) -> Any:
        path = self.path_for(name)
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise MissingArtifactError(name) from exc
        except (OSError, json.JSONDecodeError) as exc:
            raise ArtifactError(f"Unable to read artifact {name}: {exc}") from exc

    def write_text(self, name: str, text: str) -> Path:
        path = self.path_for(name)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        self.logger.debug("Wrote artifact %s", path)
        return path

    # ------------------------------------------------------------------
    # Typed stage outputs

    def save_inventory(
        self, components: Sequence[ComponentRecord], source_root: Path | None = None
    ) -> Path:
        """Write the inventory; ``source_root`` is the directory component paths are relative to."""
        extra = {"source_root": str(source_root)} if source_root is not None else None
        return self._write_envelope(INVENTORY_ARTIFACT, "components", components, extra)

    def load_inventory(self) -> List[ComponentRecord]:
        return self._read_envelope(INVENTORY_ARTIFACT, "components", ComponentRecord)

    def load_inventory_root(self) -> Optional[Path]:
        """Return the source root recorded with the inventory, if any."""
        data = self.read_json(INVENTORY_ARTIFACT)
        root = data.get("source_root") if isinstance(data, dict) else None
        return Path(root) if isinstance(root, str) and root else None

    def save_results(self, name: str, results: Sequence[AnalysisResult]) -> Path:
        return self._write_envelope(name, "results", results)

    def load_results(
        self, name: str, result_type: Type[_R], *, required: bool = True
    ) -> List[_R]:
        """Load an analyzer artifact; optional artifacts degrade to an empty list."""
        try:
            return self._read_envelope(name, "results", result_type)
        except MissingArtifactError:
            if required:
                raise
            self.logger.debug("Artifact %s not found; treating as empty", name)
            return []
        except ArtifactError as exc:
            if required:
                raise
            self.logger.warning("Ignoring unreadable artifact %s: %s", name, exc)
            return []

    # ------------------------------------------------------------------
    # Internal helpers

    def _write_envelope(
        self,
        name: str,
        key: str,
        items: Sequence[Serializable],
        extra: Mapping[str, Any] | None = None,
    ) -> Path:
        payload: Dict[str, Any] = {
            "version": _ARTIFACT_VERSION,
            "generated_at": utc_timestamp(),
            key: [item.to_dict() for item in items],
        }
        if extra:
            payload.update(extra)
        return self.write_json(name, payload)

    def _read_envelope(self, name: str, key: str, item_type: Type[_R]) -> List[_R]:
        data = self.read_json(name)
        if not isinstance(data, dict) or data.get("version") != _ARTIFACT_VERSION:
            raise ArtifactError(f"Artifact {name} has an unsupported format")
        items = data.get(key)
        if not isinstance(items, list):
            raise ArtifactError(f"Artifact {name} is missing its '{key}' list")
        try:
            return [item_type.from_dict(item) for item in items]
        except (TypeError, ValueError) as exc:
            raise ArtifactError(f"Artifact {name} contains invalid entries: {exc}") from exc


__all__ = [
    "ArtifactError",
    "ArtifactStore",
    "INVENTORY_ARTIFACT",
    "MissingArtifactError",
    "utc_timestamp",
]
