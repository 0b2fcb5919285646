"""Error types raised while loading, resolving and invoking artifacts."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from plugdex.artifacts.base import ArtifactKind, Event


class PlugdexError(Exception):
    """Base exception for plugdex."""


# Load-time errors (recorded per source, never abort a load)


class LoadError(PlugdexError):
    """Base class for errors found while building a snapshot."""

    source: Path | None = None


class MalformedArtifact(LoadError):
    """Raised when an artifact file has no usable metadata block."""

    def __init__(self, reason: str, source: Path | None = None) -> None:
        self.reason = reason
        self.source = source
        where = f"{source}: " if source is not None else ""
        super().__init__(f"{where}malformed artifact: {reason}")


class SchemaViolation(LoadError):
    """Raised when artifact metadata does not match its kind's schema."""

    def __init__(
        self,
        kind: ArtifactKind,
        field: str,
        reason: str,
        source: Path | None = None,
    ) -> None:
        self.kind = kind
        self.field = field
        self.reason = reason
        self.source = source
        where = f"{source}: " if source is not None else ""
        super().__init__(f"{where}{kind.value} field '{field}' {reason}")


class DuplicateArtifact(LoadError):
    """Two artifacts of the same kind declare the same name."""

    def __init__(
        self,
        kind: ArtifactKind,
        name: str,
        source: Path | None = None,
        previous: Path | None = None,
    ) -> None:
        self.kind = kind
        self.name = name
        self.source = source
        self.previous = previous
        super().__init__(
            f"duplicate {kind.value} '{name}' in {source or '<memory>'} "
            f"(previously defined in {previous or '<memory>'})"
        )


class SourceNotFound(LoadError):
    """Raised when a configured source directory does not exist."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.source = path
        super().__init__(f"Source directory not found: {path}")


# Invocation-time errors (surfaced to the caller)


class InvocationError(PlugdexError):
    """Base class for errors surfaced by resolve/invoke."""


class NotFound(InvocationError):
    """Raised when no artifact of a kind is registered under a name."""

    def __init__(self, kind: ArtifactKind, name: str) -> None:
        self.kind = kind
        self.name = name
        super().__init__(f"No {kind.value} named '{name}'")


class MissingArgument(InvocationError):
    """Raised when a required argument was not supplied."""

    def __init__(self, name: str, kind: ArtifactKind, artifact: str) -> None:
        self.name = name
        self.kind = kind
        self.artifact = artifact
        super().__init__(
            f"Missing required argument '{name}' for {kind.value} '{artifact}'"
        )


class NotInvocable(InvocationError):
    """Raised when invoking an artifact kind that takes no arguments."""

    def __init__(self, kind: ArtifactKind, name: str) -> None:
        self.kind = kind
        self.name = name
        super().__init__(f"{kind.value} '{name}' cannot be invoked directly")


# Dispatch-time errors (isolated per hook)


class HookInvocationError(PlugdexError):
    """Wraps an exception raised by a single hook during dispatch."""

    def __init__(self, hook: str, event: Event, cause: BaseException) -> None:
        self.hook = hook
        self.event = event
        self.cause = cause
        super().__init__(f"Hook '{hook}' failed on {event.value}: {cause}")
