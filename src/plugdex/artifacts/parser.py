"""Split an artifact file into its YAML metadata block and body."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from plugdex.errors import MalformedArtifact

FENCE = "---"


@dataclass(frozen=True)
class ParsedArtifact:
    """Untyped result of parsing: metadata map plus body text."""

    metadata: dict[str, Any] = field(default_factory=dict)
    body: str = ""
    source: Path | None = None


def parse_artifact(text: str, source: Path | None = None) -> ParsedArtifact:
    """Parse artifact text of the form::

        ---
        name: django:model
        description: Create a model
        ---
        Body text...

    Raises MalformedArtifact if the metadata block is absent, unterminated,
    or does not load as a YAML mapping. An empty block parses to {}.
    """
    text = text.removeprefix("\ufeff")
    lines = text.splitlines()

    if not lines or lines[0].strip() != FENCE:
        raise MalformedArtifact("missing metadata block (must start with ---)", source)

    end: int | None = None
    for i, line in enumerate(lines[1:], start=1):
        if line.strip() == FENCE:
            end = i
            break
    if end is None:
        raise MalformedArtifact("unterminated metadata block (missing closing ---)", source)

    block = "\n".join(lines[1:end])
    try:
        data = yaml.safe_load(block)
    except yaml.YAMLError as e:
        raise MalformedArtifact(f"metadata is not valid YAML: {e}", source) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise MalformedArtifact(
            f"metadata must be a mapping, got {type(data).__name__}", source
        )

    body = "\n".join(lines[end + 1 :]).strip("\n")
    metadata = {str(k): v for k, v in data.items()}
    return ParsedArtifact(metadata=metadata, body=body, source=source)


def parse_artifact_file(path: Path) -> ParsedArtifact:
    """Read and parse an artifact file."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise MalformedArtifact(f"cannot read file: {e}", path) from e
    return parse_artifact(text, source=path)
