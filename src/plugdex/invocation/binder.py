"""Bind caller-supplied arguments to a command or skill."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from plugdex.artifacts.base import Artifact, ArtifactKind
from plugdex.errors import MissingArgument, NotInvocable

ALL_ARGUMENTS_PLACEHOLDER = "ARGUMENTS"

# $name or ${name}; braces allow names that are not identifiers
PLACEHOLDER_PATTERN = re.compile(
    r"\$(?:\{(?P<braced>[^{}\s]+)\}|(?P<named>[A-Za-z_][A-Za-z0-9_]*))"
)


@dataclass(frozen=True)
class InvocationRequest:
    """A caller's request to invoke an artifact."""

    kind: ArtifactKind
    name: str
    arguments: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class BoundPayload:
    """An artifact together with its bound arguments.

    This is what gets handed to the language-model session; the body is
    never interpreted here.
    """

    artifact: Artifact
    arguments: dict[str, Any] = field(default_factory=dict)

    def render(self) -> str:
        """Merge the bound arguments into the artifact body.

        ``$ARGUMENTS`` expands to all values joined by spaces; ``$name`` and
        ``${name}`` expand to single values. Only bound names are replaced;
        any other text, including ``$$`` and unknown placeholders, is left
        as written.
        """
        values = {key: _format_value(value) for key, value in self.arguments.items()}
        values[ALL_ARGUMENTS_PLACEHOLDER] = " ".join(
            v for v in values.values() if v
        )

        def replace(match: re.Match[str]) -> str:
            key = match.group("braced") or match.group("named")
            return values.get(key, match.group(0))

        return PLACEHOLDER_PATTERN.sub(replace, self.artifact.body)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.artifact.kind.value,
            "name": self.artifact.name,
            "arguments": dict(self.arguments),
            "prompt": self.render(),
        }


def _format_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return " ".join(_format_value(v) for v in value)
    return str(value)


def bind_arguments(artifact: Artifact, supplied: Mapping[str, Any]) -> dict[str, Any]:
    """Bind supplied values to the artifact's declared arguments.

    Declared arguments come first, in declared order; an absent optional
    argument is omitted. Undeclared keys are passed through unchanged after
    them. Raises MissingArgument for the first absent required argument.
    """
    if not artifact.kind.takes_arguments:
        raise NotInvocable(artifact.kind, artifact.name)

    bound: dict[str, Any] = {}
    for arg in artifact.arguments:
        if arg.name in supplied:
            bound[arg.name] = supplied[arg.name]
        elif arg.required:
            raise MissingArgument(arg.name, artifact.kind, artifact.name)

    for key, value in supplied.items():
        if key not in bound:
            bound[key] = value

    return bound


def bind(artifact: Artifact, supplied: Mapping[str, Any]) -> BoundPayload:
    """Bind arguments and wrap the result as a payload."""
    return BoundPayload(artifact=artifact, arguments=bind_arguments(artifact, supplied))
