"""Single entry point for hosts: load, list, resolve, invoke and fire."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from plugdex.artifacts.base import Artifact, ArtifactKind, Event
from plugdex.config.loader import load_config, resolve_sources
from plugdex.config.schema import DEFAULT_CONFIG, PlugdexConfig
from plugdex.hooks.dispatcher import HookDispatcher, HookFiring, HookOutcome, HookRunner
from plugdex.invocation.binder import BoundPayload, InvocationRequest, bind
from plugdex.registry.loader import load_sources
from plugdex.registry.snapshot import Snapshot

logger = logging.getLogger(__name__)


class ExtensionHost:
    """Owns the current registry snapshot and serves host requests.

    load() builds a complete new snapshot before swapping it in, so
    concurrent list/resolve/invoke/fire calls always see one consistent
    snapshot. Racing loads resolve last-write-wins.
    """

    def __init__(
        self,
        config: PlugdexConfig | None = None,
        runner: HookRunner | None = None,
    ) -> None:
        self.config = DEFAULT_CONFIG.merge(config) if config is not None else None
        self._dispatcher = HookDispatcher(runner=runner)
        self._snapshot = Snapshot.empty()
        self._sources: list[Path] | None = None
        self._swap_lock = threading.Lock()

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    @property
    def sources(self) -> list[Path]:
        """Sources used by the most recent load."""
        return list(self._sources or [])

    def _effective_config(self) -> PlugdexConfig:
        if self.config is None:
            self.config = load_config()
        return self.config

    def load(self, sources: Iterable[Path | str] | None = None) -> Snapshot:
        """Load pack directories into a new snapshot and make it current.

        Bad files are recorded in snapshot.errors rather than raised. With
        no sources given, the configured sources are used.
        """
        config = self._effective_config()
        if sources is None:
            paths = resolve_sources(config)
        else:
            paths = [Path(s) for s in sources]

        snapshot = load_sources(
            paths,
            on_duplicate=config.on_duplicate or "override",
            missing_sources=config.missing_sources or "warn",
        )

        with self._swap_lock:
            self._snapshot = snapshot
            self._sources = paths

        logger.info(
            "Loaded %d artifacts from %d sources (%d errors, %d overrides)",
            len(snapshot),
            len(paths),
            len(snapshot.errors),
            len(snapshot.warnings),
        )
        return snapshot

    def reload(self) -> Snapshot:
        """Reload from the sources of the previous load.

        Before any load this is the same as load() with configured sources.
        """
        return self.load(self._sources)

    def list(self, kind: ArtifactKind | str) -> list[Artifact]:
        return self._snapshot.list(kind)

    def resolve(self, kind: ArtifactKind | str, name: str) -> Artifact:
        return self._snapshot.resolve(kind, name)

    def invoke(
        self,
        kind: ArtifactKind | str,
        name: str,
        arguments: Mapping[str, Any] | None = None,
    ) -> BoundPayload:
        """Resolve an artifact and bind arguments to it.

        Raises NotFound, MissingArgument or NotInvocable.
        """
        return self.handle(
            InvocationRequest(ArtifactKind.parse(kind), name, arguments or {})
        )

    def handle(self, request: InvocationRequest) -> BoundPayload:
        snapshot = self._snapshot
        artifact = snapshot.resolve(request.kind, request.name)
        return bind(artifact, request.arguments)

    def fire(
        self, event: Event | str, payload: Mapping[str, Any] | None = None
    ) -> list[HookOutcome]:
        """Dispatch a lifecycle event to the hooks of the current snapshot."""
        firing = HookFiring(Event.parse(event), payload or {})
        return self._dispatcher.dispatch(self._snapshot, firing)
