"""Configuration schema for plugdex."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, cast

from plugdex.registry.loader import MissingSourcePolicy
from plugdex.registry.snapshot import DuplicatePolicy


@dataclass
class PlugdexConfig:
    """Plugdex configuration schema.

    None values indicate "not set" and will use defaults or be inherited.
    """

    # Pack directories, loaded in order (later overrides earlier)
    sources: list[str] | None = None

    # Collision policy for two artifacts with the same kind and name
    on_duplicate: DuplicatePolicy | None = None

    # What to do when a source directory does not exist
    missing_sources: MissingSourcePolicy | None = None

    def merge(self, other: PlugdexConfig) -> PlugdexConfig:
        """Merge another config into this one.

        Values from `other` take precedence when they are not None.
        Returns a new PlugdexConfig instance.
        """
        return PlugdexConfig(
            sources=other.sources if other.sources is not None else self.sources,
            on_duplicate=(
                other.on_duplicate
                if other.on_duplicate is not None
                else self.on_duplicate
            ),
            missing_sources=(
                other.missing_sources
                if other.missing_sources is not None
                else self.missing_sources
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary, excluding None values."""
        result: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not None:
                result[f.name] = value
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PlugdexConfig:
        """Create a PlugdexConfig from a dictionary.

        Unknown keys and invalid values are ignored.
        """
        sources_raw = data.get("sources")
        sources: list[str] | None = None
        if isinstance(sources_raw, str):
            sources = [sources_raw]
        elif isinstance(sources_raw, list):
            sources = [str(s) for s in sources_raw]

        on_duplicate_raw = data.get("on_duplicate")
        on_duplicate: DuplicatePolicy | None = None
        if on_duplicate_raw in ("override", "error"):
            on_duplicate = cast(DuplicatePolicy, on_duplicate_raw)

        missing_raw = data.get("missing_sources")
        missing_sources: MissingSourcePolicy | None = None
        if missing_raw in ("warn", "error"):
            missing_sources = cast(MissingSourcePolicy, missing_raw)

        return cls(
            sources=sources,
            on_duplicate=on_duplicate,
            missing_sources=missing_sources,
        )


# Default configuration values (used when not specified anywhere)
DEFAULT_CONFIG = PlugdexConfig(
    on_duplicate="override",
    missing_sources="warn",
)
