"""Tests for snapshots, collision policy and pack discovery."""

import logging
from collections.abc import Callable
from pathlib import Path

import pytest

from plugdex.artifacts import Artifact, ArtifactKind, Event
from plugdex.errors import (
    DuplicateArtifact,
    MalformedArtifact,
    NotFound,
    SchemaViolation,
    SourceNotFound,
)
from plugdex.registry import (
    Snapshot,
    SnapshotBuilder,
    build_snapshot,
    discover_artifact_files,
    load_source,
    load_sources,
)

WriteArtifact = Callable[..., Path]


def _command(name: str, source: str | None = None) -> Artifact:
    return Artifact(
        kind=ArtifactKind.COMMAND,
        name=name,
        description=f"{name} command",
        source=Path(source) if source else None,
    )


class TestSnapshot:
    """Tests for snapshot lookup and listing."""

    def test_resolve(self) -> None:
        """Test resolve returns the registered artifact."""
        artifact = _command("django:model")
        snapshot = build_snapshot([artifact])

        assert snapshot.resolve(ArtifactKind.COMMAND, "django:model") is artifact
        assert snapshot.resolve("commands", "django:model") is artifact

    def test_resolve_missing_raises_not_found(self) -> None:
        """Test resolve raises a structured NotFound."""
        snapshot = build_snapshot([_command("a")])

        with pytest.raises(NotFound) as exc_info:
            snapshot.resolve(ArtifactKind.COMMAND, "missing")

        assert exc_info.value.kind is ArtifactKind.COMMAND
        assert exc_info.value.name == "missing"

    def test_names_are_per_kind(self) -> None:
        """Test the same name in two kinds does not collide."""
        agent = Artifact(kind=ArtifactKind.AGENT, name="a", description="agent")
        snapshot = build_snapshot([_command("a"), agent])

        assert len(snapshot) == 2
        assert snapshot.resolve(ArtifactKind.AGENT, "a") is agent
        assert not snapshot.warnings

    def test_list_is_sorted_regardless_of_load_order(self) -> None:
        """Test list returns artifacts lexicographically by name."""
        snapshot = build_snapshot([_command("zeta"), _command("alpha"), _command("mid")])

        assert snapshot.names(ArtifactKind.COMMAND) == ["alpha", "mid", "zeta"]
        assert [a.name for a in snapshot.list("command")] == ["alpha", "mid", "zeta"]

    def test_list_empty_kind(self) -> None:
        """Test listing a kind with no artifacts returns an empty list."""
        assert build_snapshot([]).list(ArtifactKind.HOOK) == []

    def test_list_returns_copy(self) -> None:
        """Test mutating a listing does not affect the snapshot."""
        snapshot = build_snapshot([_command("a")])
        snapshot.list(ArtifactKind.COMMAND).clear()

        assert snapshot.names(ArtifactKind.COMMAND) == ["a"]

    def test_contains_and_get(self) -> None:
        """Test membership by (kind, name) key and optional lookup."""
        snapshot = build_snapshot([_command("a")])

        assert (ArtifactKind.COMMAND, "a") in snapshot
        assert snapshot.get(ArtifactKind.COMMAND, "b") is None

    def test_contains_accepts_kind_names(self) -> None:
        """Test membership normalizes string kinds like resolve does."""
        snapshot = build_snapshot([_command("a")])

        assert ("command", "a") in snapshot
        assert ("Commands", "a") in snapshot
        assert ("plugin", "a") not in snapshot
        assert "a" not in snapshot

    def test_warnings_and_errors_are_read_only(self) -> None:
        """Test load results cannot be replaced on a built snapshot."""
        snapshot = build_snapshot([_command("a"), _command("a")])

        with pytest.raises(AttributeError):
            snapshot.warnings = ()  # type: ignore[misc]
        with pytest.raises(AttributeError):
            snapshot.errors = ()  # type: ignore[misc]
        assert len(snapshot.warnings) == 1

    def test_empty_snapshot(self) -> None:
        """Test an empty snapshot has no artifacts and no errors."""
        snapshot = Snapshot.empty()

        assert len(snapshot) == 0
        assert snapshot.ok


class TestCollisionPolicy:
    """Tests for duplicate (kind, name) handling."""

    def test_later_artifact_wins(self) -> None:
        """Test the later-loaded duplicate replaces the earlier one."""
        first = _command("django:view", "first.md")
        second = _command("django:view", "second.md")

        snapshot = build_snapshot([first, second])

        assert snapshot.resolve(ArtifactKind.COMMAND, "django:view") is second
        assert snapshot.names(ArtifactKind.COMMAND) == ["django:view"]

    def test_override_records_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test an override is recorded on the snapshot and logged."""
        with caplog.at_level(logging.WARNING, logger="plugdex"):
            snapshot = build_snapshot(
                [_command("x", "first.md"), _command("x", "second.md")]
            )

        assert len(snapshot.warnings) == 1
        warning = snapshot.warnings[0]
        assert isinstance(warning, DuplicateArtifact)
        assert warning.source == Path("second.md")
        assert warning.previous == Path("first.md")
        assert snapshot.ok
        assert "duplicate command 'x'" in caplog.text

    def test_error_policy_keeps_first(self) -> None:
        """Test on_duplicate='error' keeps the first and records an error."""
        first = _command("x", "first.md")
        snapshot = build_snapshot(
            [first, _command("x", "second.md")], on_duplicate="error"
        )

        assert snapshot.resolve(ArtifactKind.COMMAND, "x") is first
        assert not snapshot.ok
        assert isinstance(snapshot.errors[0], DuplicateArtifact)

    def test_unknown_policy_rejected(self) -> None:
        """Test an unknown policy name is a ValueError."""
        with pytest.raises(ValueError):
            SnapshotBuilder(on_duplicate="merge")  # type: ignore[arg-type]

    def test_registration_order_uses_layer(self) -> None:
        """Test registration order sorts by layer, then name."""
        builder = SnapshotBuilder()
        late = _command("a")
        early = _command("b")
        builder.add(late, layer=1)
        builder.add(early, layer=0)
        snapshot = builder.build()

        ordered = sorted(snapshot.list(ArtifactKind.COMMAND), key=snapshot.registration_order)
        assert [a.name for a in ordered] == ["b", "a"]


class TestDiscovery:
    """Tests for finding artifact files in a pack."""

    def test_discovers_each_kind(self, django_pack: Path) -> None:
        """Test files are found under their kind directories."""
        found = discover_artifact_files(django_pack)
        by_kind = {kind: [p.name for k, p in found if k is kind] for kind in ArtifactKind}

        assert by_kind[ArtifactKind.COMMAND] == ["model.md"]
        assert by_kind[ArtifactKind.SKILL] == ["SKILL.md"]
        assert by_kind[ArtifactKind.AGENT] == ["reviewer.md"]
        assert by_kind[ArtifactKind.HOOK] == ["a-settings.md", "b-migrations.md", "format.md"]

    def test_skips_readme_and_hidden(self, tmp_path: Path, write_artifact: WriteArtifact) -> None:
        """Test README.md and hidden paths are ignored."""
        write_artifact(tmp_path, "commands", "README.md", "name: r\ndescription: d")
        write_artifact(tmp_path, "commands", ".drafts/wip.md", "name: w\ndescription: d")
        write_artifact(tmp_path, "commands", "real.md", "name: real\ndescription: d")

        found = discover_artifact_files(tmp_path)

        assert [p.name for _, p in found] == ["real.md"]

    def test_skill_layouts(self, tmp_path: Path, write_artifact: WriteArtifact) -> None:
        """Test skills load from SKILL.md directories and flat files only."""
        write_artifact(tmp_path, "skills", "flat.md", "name: flat\ndescription: d")
        write_artifact(tmp_path, "skills", "nested/SKILL.md", "name: nested\ndescription: d")
        write_artifact(tmp_path, "skills", "nested/reference.md", "name: ref\ndescription: d")

        found = discover_artifact_files(tmp_path)

        assert sorted(p.relative_to(tmp_path).as_posix() for _, p in found) == [
            "skills/flat.md",
            "skills/nested/SKILL.md",
        ]

    def test_missing_directory(self, tmp_path: Path) -> None:
        """Test a nonexistent base path yields nothing."""
        assert discover_artifact_files(tmp_path / "nope") == []


class TestLoading:
    """Tests for loading sources into snapshots."""

    def test_load_source_collects_errors(
        self, tmp_path: Path, write_artifact: WriteArtifact
    ) -> None:
        """Test bad files are reported without stopping the load."""
        write_artifact(tmp_path, "commands", "good.md", "name: good\ndescription: d")
        write_artifact(tmp_path, "commands", "no-name.md", "description: d")
        (tmp_path / "commands" / "broken.md").write_text("no metadata here")

        artifacts, errors = load_source(tmp_path)

        assert [a.name for a in artifacts] == ["good"]
        assert len(errors) == 2
        assert {type(e) for e in errors} == {MalformedArtifact, SchemaViolation}

    def test_load_sources_layers_override(
        self, tmp_path: Path, write_artifact: WriteArtifact
    ) -> None:
        """Test artifacts in later sources override earlier ones."""
        builtin = tmp_path / "builtin"
        user = tmp_path / "user"
        write_artifact(builtin, "commands", "a.md", "name: a\ndescription: builtin")
        write_artifact(builtin, "commands", "b.md", "name: b\ndescription: builtin")
        write_artifact(user, "commands", "a.md", "name: a\ndescription: user")

        snapshot = load_sources([builtin, user])

        assert snapshot.resolve(ArtifactKind.COMMAND, "a").description == "user"
        assert snapshot.resolve(ArtifactKind.COMMAND, "b").description == "builtin"
        assert len(snapshot.warnings) == 1

    def test_missing_source_warns_by_default(self, tmp_path: Path) -> None:
        """Test a missing source is recorded as an error, not raised."""
        snapshot = load_sources([tmp_path / "nope"])

        assert len(snapshot) == 0
        assert isinstance(snapshot.errors[0], SourceNotFound)

    def test_missing_source_error_policy(self, tmp_path: Path) -> None:
        """Test missing_sources='error' raises SourceNotFound."""
        with pytest.raises(SourceNotFound):
            load_sources([tmp_path / "nope"], missing_sources="error")

    def test_hook_events_loaded(self, django_pack: Path) -> None:
        """Test hooks load with their events."""
        snapshot = load_sources([django_pack])

        hook = snapshot.resolve(ArtifactKind.HOOK, "format")
        assert hook.events == frozenset({Event.POST_TOOL_USE})
        assert hook.body == "Format the file."
