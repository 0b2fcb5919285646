"""Hook event dispatch."""

from plugdex.hooks.dispatcher import (
    DispatchPhase,
    HookDispatcher,
    HookFiring,
    HookOutcome,
    HookRunner,
    default_hook_runner,
    hook_matches,
    match_hooks,
    summarize_outcomes,
)

__all__ = [
    "DispatchPhase",
    "HookDispatcher",
    "HookFiring",
    "HookOutcome",
    "HookRunner",
    "default_hook_runner",
    "hook_matches",
    "match_hooks",
    "summarize_outcomes",
]
