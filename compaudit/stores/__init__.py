"""Persistence helpers for compaudit."""

from .artifacts import (
    INVENTORY_ARTIFACT,
    ArtifactError,
    ArtifactStore,
    MissingArtifactError,
    utc_timestamp,
)

__all__ = [
    "ArtifactError",
    "ArtifactStore",
    "INVENTORY_ARTIFACT",
    "MissingArtifactError",
    "utc_timestamp",
]
