"""Artifact records, parsing and schema validation."""

from plugdex.artifacts.base import Argument, Artifact, ArtifactKind, Event
from plugdex.artifacts.parser import ParsedArtifact, parse_artifact, parse_artifact_file
from plugdex.artifacts.schema import REQUIRED_FIELDS, validate_artifact

__all__ = [
    "Argument",
    "Artifact",
    "ArtifactKind",
    "Event",
    "ParsedArtifact",
    "REQUIRED_FIELDS",
    "parse_artifact",
    "parse_artifact_file",
    "validate_artifact",
]
