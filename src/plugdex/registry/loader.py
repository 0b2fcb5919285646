"""Artifact discovery and loading from pack directories."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Literal

from plugdex.artifacts.base import Artifact, ArtifactKind
from plugdex.artifacts.parser import parse_artifact_file
from plugdex.artifacts.schema import validate_artifact
from plugdex.errors import LoadError, SourceNotFound
from plugdex.registry.snapshot import DuplicatePolicy, Snapshot, SnapshotBuilder

logger = logging.getLogger(__name__)

MissingSourcePolicy = Literal["warn", "error"]

# Constants
PACK_DIRNAME = "pack"
SKILL_FILENAME = "SKILL.md"
IGNORED_FILENAMES = frozenset({"README.md"})


def get_global_pack_path() -> Path:
    """Get path to the user's global pack: ~/.plugdex/pack/."""
    return Path.home() / ".plugdex" / PACK_DIRNAME


def get_local_pack_path() -> Path:
    """Get path to the project pack: ./.plugdex/pack/."""
    return Path.cwd() / ".plugdex" / PACK_DIRNAME


def get_pack_search_paths() -> list[Path]:
    """Return existing default pack paths in load order (lowest priority first).

    Load order (later wins for same name):
    1. Global user pack (~/.plugdex/pack/)
    2. Local project pack (./.plugdex/pack/)
    """
    return [p for p in (get_global_pack_path(), get_local_pack_path()) if p.is_dir()]


def _is_hidden(path: Path, base: Path) -> bool:
    return any(part.startswith(".") for part in path.relative_to(base).parts)


def discover_artifact_files(base_path: Path) -> list[tuple[ArtifactKind, Path]]:
    """Discover artifact files within a pack directory.

    Commands, agents and hooks are any ``*.md`` below their kind directory.
    Skills are either ``skills/<name>/SKILL.md`` or ``skills/<name>.md``.
    Hidden paths and README.md files are skipped. Files are returned grouped
    by kind and sorted by relative path within each kind.
    """
    found: list[tuple[ArtifactKind, Path]] = []
    if not base_path.is_dir():
        return found

    for kind in ArtifactKind:
        kind_dir = base_path / kind.dirname
        if not kind_dir.is_dir():
            continue

        if kind is ArtifactKind.SKILL:
            candidates = [*kind_dir.glob("*.md"), *kind_dir.glob(f"*/{SKILL_FILENAME}")]
        else:
            candidates = list(kind_dir.rglob("*.md"))

        for path in sorted(candidates, key=lambda p: p.relative_to(kind_dir).as_posix()):
            if not path.is_file() or path.name in IGNORED_FILENAMES:
                continue
            if _is_hidden(path, base_path):
                continue
            found.append((kind, path))

    return found


def load_artifact_file(kind: ArtifactKind, path: Path) -> Artifact:
    """Parse and validate one artifact file.

    Raises MalformedArtifact or SchemaViolation.
    """
    return validate_artifact(kind, parse_artifact_file(path))


def load_source(base_path: Path) -> tuple[list[Artifact], list[LoadError]]:
    """Load every artifact in one pack directory.

    A bad file is recorded and skipped; it never stops the rest of the load.
    """
    artifacts: list[Artifact] = []
    errors: list[LoadError] = []

    for kind, path in discover_artifact_files(base_path):
        try:
            artifacts.append(load_artifact_file(kind, path))
        except LoadError as e:
            logger.warning("Skipping %s", e)
            errors.append(e)

    return artifacts, errors


def load_sources(
    sources: Iterable[Path],
    on_duplicate: DuplicatePolicy = "override",
    missing_sources: MissingSourcePolicy = "warn",
) -> Snapshot:
    """Load pack directories in order into a new snapshot.

    Each source is one layer; artifacts in later layers override earlier
    ones of the same kind and name.

    Raises SourceNotFound for a missing directory when missing_sources is
    "error"; otherwise the directory is recorded as a load error and skipped.
    """
    builder = SnapshotBuilder(on_duplicate=on_duplicate)

    for layer, source in enumerate(sources):
        source = Path(source)
        if not source.is_dir():
            missing = SourceNotFound(source)
            if missing_sources == "error":
                raise missing
            logger.warning("%s", missing)
            builder.add_error(missing)
            continue

        artifacts, errors = load_source(source)
        for artifact in artifacts:
            builder.add(artifact, layer=layer)
        for error in errors:
            builder.add_error(error)

        logger.debug(
            "Loaded %d artifacts from %s (%d errors)", len(artifacts), source, len(errors)
        )

    return builder.build()
