"""Lifecycle event dispatch to subscribed hook artifacts."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from plugdex.artifacts.base import Artifact, ArtifactKind, Event
from plugdex.errors import HookInvocationError

if TYPE_CHECKING:
    from plugdex.registry.snapshot import Snapshot

logger = logging.getLogger(__name__)


class DispatchPhase(Enum):
    """Phases a single firing moves through."""

    RECEIVED = "received"
    MATCHING = "matching"
    INVOKING = "invoking"
    DONE = "done"


@dataclass(frozen=True)
class HookFiring:
    """One occurrence of a lifecycle event with its opaque payload."""

    event: Event
    payload: Mapping[str, Any] = field(default_factory=dict)

    @property
    def tool_name(self) -> str | None:
        value = self.payload.get("tool_name")
        return str(value) if value is not None else None


@dataclass(frozen=True)
class HookOutcome:
    """Result of running one hook for one firing."""

    hook: str
    event: Event
    result: Any = None
    error: HookInvocationError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def blocked(self) -> bool:
        """True when the hook returned a ``{"decision": "block"}`` mapping."""
        return isinstance(self.result, Mapping) and self.result.get("decision") == "block"

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "hook": self.hook,
            "event": self.event.value,
            "ok": self.ok,
        }
        if self.error is not None:
            result["error"] = str(self.error.cause)
        else:
            result["result"] = self.result
        return result


# A runner executes one hook's body/validator for a firing
HookRunner = Callable[[Artifact, HookFiring], Any]
PhaseCallback = Callable[[DispatchPhase, HookFiring, Artifact | None], None]


def default_hook_runner(hook: Artifact, firing: HookFiring) -> dict[str, Any]:
    """Compose the hook's body with the firing payload for the host session."""
    return {
        "hook": hook.name,
        "event": firing.event.value,
        "prompt": hook.body,
        "payload": dict(firing.payload),
    }


def hook_matches(hook: Artifact, firing: HookFiring) -> bool:
    """Check whether a hook subscribes to a firing.

    The firing's event must be in the hook's events. A hook with a matcher
    additionally requires the payload's tool_name to match it.
    """
    if hook.kind is not ArtifactKind.HOOK or firing.event not in hook.events:
        return False
    if hook.matcher is None:
        return True
    tool_name = firing.tool_name
    if tool_name is None:
        return False
    return re.search(hook.matcher, tool_name) is not None


def match_hooks(snapshot: Snapshot, firing: HookFiring) -> list[Artifact]:
    """Hooks subscribed to a firing, in registration order then by name."""
    matched = [h for h in snapshot.list(ArtifactKind.HOOK) if hook_matches(h, firing)]
    return sorted(matched, key=snapshot.registration_order)


class HookDispatcher:
    """Runs the hooks matching a firing, one after another.

    A failing hook is recorded in its outcome and never stops the hooks
    after it. The caller decides whether any failure should block the
    underlying tool action.
    """

    def __init__(
        self,
        runner: HookRunner | None = None,
        on_phase: PhaseCallback | None = None,
    ) -> None:
        self._runner = runner or default_hook_runner
        self._on_phase = on_phase

    def _enter(
        self, phase: DispatchPhase, firing: HookFiring, hook: Artifact | None = None
    ) -> None:
        if hook is None:
            logger.debug("%s: %s", firing.event.value, phase.value)
        else:
            logger.debug("%s: %s %s", firing.event.value, phase.value, hook.name)
        if self._on_phase is not None:
            self._on_phase(phase, firing, hook)

    def _invoke(self, hook: Artifact, firing: HookFiring) -> HookOutcome:
        try:
            result = self._runner(hook, firing)
        except Exception as e:
            error = HookInvocationError(hook.name, firing.event, e)
            logger.warning("%s", error, exc_info=True)
            return HookOutcome(hook=hook.name, event=firing.event, error=error)
        return HookOutcome(hook=hook.name, event=firing.event, result=result)

    def dispatch(self, snapshot: Snapshot, firing: HookFiring) -> list[HookOutcome]:
        """Run every hook subscribed to the firing and collect outcomes."""
        self._enter(DispatchPhase.RECEIVED, firing)
        matched = match_hooks(snapshot, firing)

        self._enter(DispatchPhase.MATCHING, firing)
        outcomes: list[HookOutcome] = []
        for hook in matched:
            self._enter(DispatchPhase.INVOKING, firing, hook)
            outcomes.append(self._invoke(hook, firing))

        self._enter(DispatchPhase.DONE, firing)
        return outcomes


def summarize_outcomes(outcomes: list[HookOutcome]) -> tuple[int, list[str]]:
    """Return (number of successful hooks, names of failed hooks)."""
    failed = [o.hook for o in outcomes if not o.ok]
    return len(outcomes) - len(failed), failed
