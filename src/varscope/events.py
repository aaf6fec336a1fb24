from __future__ import annotations

import contextvars
import logging
import time
import uuid
from contextlib import contextmanager
from typing import Any

from blinker import Namespace

_logger = logging.getLogger(__name__)

RUN_STARTED = "run.started"
RUN_FINISHED = "run.finished"
ACTOR_STARTED = "actor.started"
ACTOR_FINISHED = "actor.finished"
ACTOR_FAILED = "actor.failed"
ITERATION_STARTED = "iteration.started"
SCOPE_ENTERED = "scope.entered"
SCOPE_EXITED = "scope.exited"

_ns = Namespace()
_event_context: contextvars.ContextVar[dict[str, Any]] = contextvars.ContextVar(
    "varscope_event_context", default={}
)


def now_ms() -> int:
    return int(time.time() * 1000)


def new_run_id() -> str:
    return uuid.uuid4().hex


def signal(name: str):
    return _ns.signal(name)


def current_context() -> dict[str, Any]:
    return dict(_event_context.get())


@contextmanager
def with_context(**kwargs):
    merged = current_context()
    merged.update({k: v for k, v in kwargs.items() if v is not None})
    token = _event_context.set(merged)
    try:
        yield merged
    finally:
        _event_context.reset(token)


def emit(name: str, **payload):
    msg = current_context()
    msg.update(payload)
    msg.setdefault("ts", now_ms())
    try:
        return signal(name).send(None, event=name, **msg)
    except Exception as e:
        # Receiver failures must not break an actor's scope bookkeeping.
        _logger.debug("Event subscriber error for %s: %s", name, e, exc_info=True)
        return []
