"""Registry and invocation dispatcher for Markdown-defined assistant extensions."""

from plugdex.artifacts import Argument, Artifact, ArtifactKind, Event
from plugdex.config import PlugdexConfig
from plugdex.errors import (
    DuplicateArtifact,
    HookInvocationError,
    InvocationError,
    LoadError,
    MalformedArtifact,
    MissingArgument,
    NotFound,
    NotInvocable,
    PlugdexError,
    SchemaViolation,
    SourceNotFound,
)
from plugdex.facade import ExtensionHost
from plugdex.hooks import HookFiring, HookOutcome
from plugdex.invocation import BoundPayload, InvocationRequest
from plugdex.registry import Snapshot

__version__ = "0.1.0"

__all__ = [
    "Argument",
    "Artifact",
    "ArtifactKind",
    "BoundPayload",
    "DuplicateArtifact",
    "Event",
    "ExtensionHost",
    "HookFiring",
    "HookInvocationError",
    "HookOutcome",
    "InvocationError",
    "InvocationRequest",
    "LoadError",
    "MalformedArtifact",
    "MissingArgument",
    "NotFound",
    "NotInvocable",
    "PlugdexConfig",
    "PlugdexError",
    "SchemaViolation",
    "Snapshot",
    "SourceNotFound",
    "__version__",
]
