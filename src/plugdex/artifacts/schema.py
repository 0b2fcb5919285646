"""Per-kind metadata schema and validation into typed Artifacts."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

from plugdex.artifacts.base import Argument, Artifact, ArtifactKind, Event
from plugdex.artifacts.parser import ParsedArtifact
from plugdex.errors import SchemaViolation

# Required metadata fields per kind, in the order they are checked
REQUIRED_FIELDS: dict[ArtifactKind, tuple[str, ...]] = {
    ArtifactKind.COMMAND: ("name", "description"),
    ArtifactKind.SKILL: ("name", "description"),
    ArtifactKind.AGENT: ("name", "description"),
    ArtifactKind.HOOK: ("name", "events", "description"),
}


def _require_str(
    kind: ArtifactKind, data: dict[str, Any], key: str, source: Path | None
) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise SchemaViolation(kind, key, "must be a string", source)
    return value


def _optional_str(
    kind: ArtifactKind, data: dict[str, Any], key: str, source: Path | None
) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, (str, int, float)) or isinstance(value, bool):
        raise SchemaViolation(kind, key, "must be a string", source)
    return str(value)


def _parse_tools(data: dict[str, Any]) -> tuple[str, ...]:
    """Accept 'allowed-tools' or 'tools' as a list or comma-separated string."""
    raw = data.get("allowed-tools", data.get("tools"))
    if raw is None:
        return ()
    if isinstance(raw, str):
        return tuple(t.strip() for t in raw.split(",") if t.strip())
    if isinstance(raw, (list, tuple)):
        return tuple(str(t) for t in raw)
    return ()


def _parse_arguments(
    kind: ArtifactKind, data: dict[str, Any], source: Path | None
) -> tuple[Argument, ...]:
    raw = data.get("arguments")
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise SchemaViolation(kind, "arguments", "must be a list", source)

    arguments: list[Argument] = []
    seen: set[str] = set()
    for index, entry in enumerate(raw):
        field = f"arguments[{index}]"
        if not isinstance(entry, dict):
            raise SchemaViolation(kind, field, "must be a mapping", source)
        name = entry.get("name")
        if not isinstance(name, str) or not name.strip():
            raise SchemaViolation(kind, f"{field}.name", "is missing", source)
        name = name.strip()
        if name in seen:
            raise SchemaViolation(
                kind, f"{field}.name", f"duplicates argument '{name}'", source
            )
        seen.add(name)

        required = entry.get("required", False)
        if not isinstance(required, bool):
            raise SchemaViolation(
                kind, f"{field}.required", "must be true or false", source
            )
        description = entry.get("description") or ""
        arguments.append(
            Argument(name=name, description=str(description), required=required)
        )

    return tuple(arguments)


def _parse_events(
    kind: ArtifactKind, data: dict[str, Any], source: Path | None
) -> frozenset[Event]:
    raw = data.get("events")
    if not isinstance(raw, list) or not raw:
        raise SchemaViolation(kind, "events", "must be a non-empty list", source)

    events: set[Event] = set()
    for value in raw:
        try:
            events.add(Event(value))
        except ValueError:
            raise SchemaViolation(
                kind, "events", f"contains unknown event '{value}'", source
            ) from None
    return frozenset(events)


def _parse_matcher(
    kind: ArtifactKind, data: dict[str, Any], source: Path | None
) -> str | None:
    matcher = _optional_str(kind, data, "matcher", source)
    if matcher is None or matcher in ("", "*"):
        return None
    try:
        re.compile(matcher)
    except re.error as e:
        raise SchemaViolation(
            kind, "matcher", f"is not a valid regular expression: {e}", source
        ) from e
    return matcher


def validate_artifact(kind: ArtifactKind, parsed: ParsedArtifact) -> Artifact:
    """Check parsed metadata against the schema for `kind`.

    Returns a typed Artifact. Raises SchemaViolation on the first problem.
    """
    data = parsed.metadata
    source = parsed.source

    for key in REQUIRED_FIELDS[kind]:
        if key not in data or data[key] is None:
            raise SchemaViolation(kind, key, "is required", source)

    name = _require_str(kind, data, "name", source).strip()
    if not name:
        raise SchemaViolation(kind, "name", "must not be empty", source)
    description = _require_str(kind, data, "description", source).strip()

    fields: dict[str, Any] = {
        "model": _optional_str(kind, data, "model", source),
        "tools": _parse_tools(data),
    }

    if kind.takes_arguments:
        fields["arguments"] = _parse_arguments(kind, data, source)
        fields["argument_hint"] = _optional_str(kind, data, "argument-hint", source)
    elif kind is ArtifactKind.AGENT:
        color = data.get("color")
        if color is not None and not isinstance(color, str):
            raise SchemaViolation(kind, "color", "must be a string", source)
        fields["color"] = color
    elif kind is ArtifactKind.HOOK:
        fields["events"] = _parse_events(kind, data, source)
        fields["matcher"] = _parse_matcher(kind, data, source)

    return Artifact(
        kind=kind,
        name=name,
        description=description,
        body=parsed.body,
        source=source,
        **fields,
    )
