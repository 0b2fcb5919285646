"""Shared fixtures for building pack directories on disk."""

from collections.abc import Callable
from pathlib import Path

import pytest

WriteArtifact = Callable[..., Path]


def make_artifact_text(metadata: str, body: str = "") -> str:
    """Return artifact file text with a metadata block and body."""
    return f"---\n{metadata.strip()}\n---\n{body}"


@pytest.fixture
def write_artifact() -> WriteArtifact:
    """Write an artifact file below `<root>/<kind_dir>/<relpath>`."""

    def _write(
        root: Path, kind_dir: str, relpath: str, metadata: str, body: str = ""
    ) -> Path:
        path = root / kind_dir / relpath
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(make_artifact_text(metadata, body), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def django_pack(tmp_path: Path, write_artifact: WriteArtifact) -> Path:
    """A small pack with one artifact of each kind plus extra hooks."""
    root = tmp_path / "pack"
    write_artifact(
        root,
        "commands",
        "django/model.md",
        """
name: django:model
description: Create a Django model
arguments:
  - name: app_label
    required: true
  - name: model_name
    required: true
  - name: fields
    description: Comma-separated field list
""",
        "Create model $model_name in app $app_label.\nAll: $ARGUMENTS",
    )
    write_artifact(
        root,
        "skills",
        "orm-patterns/SKILL.md",
        "name: orm-patterns\ndescription: ORM query patterns",
        "Use select_related for foreign keys.",
    )
    write_artifact(
        root,
        "agents",
        "reviewer.md",
        "name: reviewer\ndescription: Reviews Django code\ncolor: blue",
        "You review code.",
    )
    write_artifact(
        root,
        "hooks",
        "b-migrations.md",
        "name: b-migrations\ndescription: Check migrations\nevents: [PreToolUse]",
        "Ensure migrations exist.",
    )
    write_artifact(
        root,
        "hooks",
        "a-settings.md",
        "name: a-settings\ndescription: Guard settings\nevents: [PreToolUse]",
        "Never edit production settings.",
    )
    write_artifact(
        root,
        "hooks",
        "format.md",
        "name: format\ndescription: Run formatter\nevents: [PostToolUse]",
        "Format the file.",
    )
    return root
