"""Typed artifact records."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any


class ArtifactKind(str, Enum):
    """Category of an extension artifact."""

    COMMAND = "command"
    SKILL = "skill"
    AGENT = "agent"
    HOOK = "hook"

    @property
    def dirname(self) -> str:
        """Pack directory holding artifacts of this kind (e.g. 'commands')."""
        return f"{self.value}s"

    @property
    def takes_arguments(self) -> bool:
        return self in (ArtifactKind.COMMAND, ArtifactKind.SKILL)

    @classmethod
    def parse(cls, value: ArtifactKind | str) -> ArtifactKind:
        """Accept a kind, its value or its directory name, case-insensitive."""
        if isinstance(value, ArtifactKind):
            return value
        normalized = value.strip().lower()
        for kind in cls:
            if normalized in (kind.value, kind.dirname):
                return kind
        valid = ", ".join(k.value for k in cls)
        raise ValueError(f"Unknown artifact kind '{value}' (expected one of: {valid})")


class Event(str, Enum):
    """Lifecycle events a hook can subscribe to."""

    PRE_TOOL_USE = "PreToolUse"
    POST_TOOL_USE = "PostToolUse"
    USER_PROMPT_SUBMIT = "UserPromptSubmit"
    NOTIFICATION = "Notification"
    STOP = "Stop"
    SUBAGENT_STOP = "SubagentStop"
    PRE_COMPACT = "PreCompact"
    SESSION_START = "SessionStart"
    SESSION_END = "SessionEnd"

    @classmethod
    def parse(cls, value: Event | str) -> Event:
        """Look up an event by its value, e.g. 'PreToolUse'."""
        if isinstance(value, Event):
            return value
        try:
            return cls(value)
        except ValueError:
            valid = ", ".join(e.value for e in cls)
            raise ValueError(
                f"Unknown event '{value}' (expected one of: {valid})"
            ) from None


@dataclass(frozen=True)
class Argument:
    """A parameter declared by a command or skill."""

    name: str
    description: str = ""
    required: bool = False

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"name": self.name}
        if self.description:
            result["description"] = self.description
        if self.required:
            result["required"] = True
        return result


@dataclass(frozen=True)
class Artifact:
    """One named, typed extension unit.

    Kind-specific fields are left at their defaults for kinds that do not
    use them; the schema validator is the only place that builds these.
    """

    kind: ArtifactKind
    name: str
    description: str
    body: str = ""
    source: Path | None = None  # File the artifact was loaded from

    # Commands and skills
    arguments: tuple[Argument, ...] = ()
    argument_hint: str | None = None

    # Agents
    color: str | None = None

    # Hooks
    events: frozenset[Event] = frozenset()
    matcher: str | None = None  # Regex over the firing's tool_name

    # Any kind
    model: str | None = None
    tools: tuple[str, ...] = ()

    @property
    def key(self) -> tuple[ArtifactKind, str]:
        return (self.kind, self.name)

    @property
    def required_arguments(self) -> tuple[Argument, ...]:
        return tuple(arg for arg in self.arguments if arg.required)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for display, omitting unset fields."""
        result: dict[str, Any] = {
            "kind": self.kind.value,
            "name": self.name,
            "description": self.description,
        }
        if self.arguments:
            result["arguments"] = [arg.to_dict() for arg in self.arguments]
        if self.argument_hint is not None:
            result["argument-hint"] = self.argument_hint
        if self.color is not None:
            result["color"] = self.color
        if self.events:
            result["events"] = sorted(e.value for e in self.events)
        if self.matcher is not None:
            result["matcher"] = self.matcher
        if self.model is not None:
            result["model"] = self.model
        if self.tools:
            result["tools"] = list(self.tools)
        if self.source is not None:
            result["source"] = str(self.source)
        # body is runtime payload, not metadata
        return result
