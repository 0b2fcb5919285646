"""Artifact registry: discovery, loading and immutable snapshots."""

from plugdex.registry.loader import (
    discover_artifact_files,
    get_global_pack_path,
    get_local_pack_path,
    get_pack_search_paths,
    load_artifact_file,
    load_source,
    load_sources,
)
from plugdex.registry.snapshot import (
    DUPLICATE_POLICIES,
    Snapshot,
    SnapshotBuilder,
    build_snapshot,
)

__all__ = [
    "DUPLICATE_POLICIES",
    "Snapshot",
    "SnapshotBuilder",
    "build_snapshot",
    "discover_artifact_files",
    "get_global_pack_path",
    "get_local_pack_path",
    "get_pack_search_paths",
    "load_artifact_file",
    "load_source",
    "load_sources",
]
