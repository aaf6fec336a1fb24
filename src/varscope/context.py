import contextvars
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

from varscope.errors import NoActorContext
from varscope.variables import VariableScopeStack


@dataclass
class ActorContext:
    """Everything that belongs to one executing actor. Passed explicitly to every element."""

    name: str
    variables: VariableScopeStack
    samples: list[dict[str, Any]] = field(default_factory=list)


_current_actor: contextvars.ContextVar[ActorContext | None] = contextvars.ContextVar(
    "varscope_current_actor", default=None
)


def new_actor_context(name: str, preload=None) -> ActorContext:
    return ActorContext(name=name, variables=VariableScopeStack(actor_name=name, preload=preload))


@contextmanager
def actor_context(ctx: ActorContext):
    """Binds ctx to the current thread (or task) for code that isn't handed the context directly."""
    token = _current_actor.set(ctx)
    try:
        yield ctx
    finally:
        _current_actor.reset(token)


def current_actor() -> ActorContext:
    ctx = _current_actor.get()
    if ctx is None:
        raise NoActorContext("No actor is executing in this thread")
    return ctx


def current_actor_variable_store() -> VariableScopeStack:
    return current_actor().variables
