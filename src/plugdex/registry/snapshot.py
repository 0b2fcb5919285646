"""Immutable registry snapshot and its builder."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from types import MappingProxyType
from typing import Literal

from plugdex.artifacts.base import Artifact, ArtifactKind
from plugdex.errors import DuplicateArtifact, LoadError, NotFound

logger = logging.getLogger(__name__)

DuplicatePolicy = Literal["override", "error"]
DUPLICATE_POLICIES: tuple[str, ...] = ("override", "error")


class Snapshot:
    """Fully validated, read-only view of all loaded artifacts.

    Built once per load by SnapshotBuilder. Nothing mutates a snapshot after
    construction, so any number of readers can share one without locking.
    """

    def __init__(
        self,
        artifacts: dict[tuple[ArtifactKind, str], Artifact],
        layers: dict[tuple[ArtifactKind, str], int],
        warnings: tuple[DuplicateArtifact, ...] = (),
        errors: tuple[LoadError, ...] = (),
    ) -> None:
        self._artifacts = MappingProxyType(dict(artifacts))
        self._layers = MappingProxyType(dict(layers))
        self._sorted: dict[ArtifactKind, tuple[Artifact, ...]] = {
            kind: tuple(
                sorted(
                    (a for a in self._artifacts.values() if a.kind is kind),
                    key=lambda a: a.name,
                )
            )
            for kind in ArtifactKind
        }
        self._warnings = tuple(warnings)
        self._errors = tuple(errors)

    @classmethod
    def empty(cls) -> Snapshot:
        return cls({}, {})

    def resolve(self, kind: ArtifactKind | str, name: str) -> Artifact:
        """Look up an artifact by kind and name. Raises NotFound."""
        kind = ArtifactKind.parse(kind)
        try:
            return self._artifacts[(kind, name)]
        except KeyError:
            raise NotFound(kind, name) from None

    def get(self, kind: ArtifactKind | str, name: str) -> Artifact | None:
        """Like resolve, but returns None when absent."""
        return self._artifacts.get((ArtifactKind.parse(kind), name))

    def list(self, kind: ArtifactKind | str) -> list[Artifact]:
        """Artifacts of one kind, sorted by name."""
        return list(self._sorted[ArtifactKind.parse(kind)])

    def names(self, kind: ArtifactKind | str) -> list[str]:
        return [a.name for a in self._sorted[ArtifactKind.parse(kind)]]

    def registration_order(self, artifact: Artifact) -> tuple[int, str]:
        """Sort key: (index of the source layer that registered it, name)."""
        return (self._layers.get(artifact.key, 0), artifact.name)

    @property
    def warnings(self) -> tuple[DuplicateArtifact, ...]:
        """Duplicates that were overridden while building this snapshot."""
        return self._warnings

    @property
    def errors(self) -> tuple[LoadError, ...]:
        return self._errors

    @property
    def ok(self) -> bool:
        """True when the load that built this snapshot recorded no errors."""
        return not self.errors

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, tuple) or len(key) != 2:
            return False
        kind, name = key
        if not isinstance(kind, str):
            return False
        try:
            return (ArtifactKind.parse(kind), name) in self._artifacts
        except ValueError:
            return False

    def __iter__(self) -> Iterator[Artifact]:
        for kind in ArtifactKind:
            yield from self._sorted[kind]

    def __len__(self) -> int:
        return len(self._artifacts)

    def __repr__(self) -> str:
        counts = ", ".join(
            f"{kind.dirname}={len(self._sorted[kind])}" for kind in ArtifactKind
        )
        return f"Snapshot({counts}, errors={len(self.errors)})"


class SnapshotBuilder:
    """Accumulates validated artifacts and applies the collision policy.

    With the default "override" policy a later artifact replaces an earlier
    one of the same kind and name, and a warning is recorded. With "error"
    the first one is kept and the duplicate is recorded as a load error.
    """

    def __init__(self, on_duplicate: DuplicatePolicy = "override") -> None:
        if on_duplicate not in DUPLICATE_POLICIES:
            raise ValueError(f"Unknown duplicate policy: {on_duplicate}")
        self.on_duplicate = on_duplicate
        self._artifacts: dict[tuple[ArtifactKind, str], Artifact] = {}
        self._layers: dict[tuple[ArtifactKind, str], int] = {}
        self._warnings: list[DuplicateArtifact] = []
        self._errors: list[LoadError] = []

    def add(self, artifact: Artifact, layer: int = 0) -> None:
        """Register an artifact loaded from source layer `layer`."""
        previous = self._artifacts.get(artifact.key)
        if previous is not None:
            duplicate = DuplicateArtifact(
                artifact.kind, artifact.name, artifact.source, previous.source
            )
            if self.on_duplicate == "error":
                logger.warning("Rejected %s", duplicate)
                self._errors.append(duplicate)
                return
            logger.warning("Overriding %s", duplicate)
            self._warnings.append(duplicate)
            # Re-insert so the replacement takes the later position
            del self._artifacts[artifact.key]

        self._artifacts[artifact.key] = artifact
        self._layers[artifact.key] = layer

    def add_error(self, error: LoadError) -> None:
        self._errors.append(error)

    def build(self) -> Snapshot:
        return Snapshot(
            self._artifacts,
            self._layers,
            warnings=tuple(self._warnings),
            errors=tuple(self._errors),
        )


def build_snapshot(
    artifacts: Iterable[Artifact],
    errors: Iterable[LoadError] = (),
    on_duplicate: DuplicatePolicy = "override",
) -> Snapshot:
    """Build a snapshot from artifacts in load order (single source layer)."""
    builder = SnapshotBuilder(on_duplicate=on_duplicate)
    for artifact in artifacts:
        builder.add(artifact)
    for error in errors:
        builder.add_error(error)
    return builder.build()
