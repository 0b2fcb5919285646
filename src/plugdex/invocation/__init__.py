"""Argument binding for command and skill invocation."""

from plugdex.invocation.binder import (
    BoundPayload,
    InvocationRequest,
    bind,
    bind_arguments,
)

__all__ = [
    "BoundPayload",
    "InvocationRequest",
    "bind",
    "bind_arguments",
]
