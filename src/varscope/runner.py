from __future__ import annotations

import contextvars
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping

from varscope import events
from varscope.context import actor_context, new_actor_context
from varscope.controller import Element
from varscope.util import log


@dataclass
class ActorResult:
    name: str
    samples: list[dict[str, Any]] = field(default_factory=list)
    iterations: int = 0
    depth: int = 1
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class RunResult:
    run_id: str
    actors: list[ActorResult]
    elapsed_ms: float = 0

    @property
    def failures(self) -> list[ActorResult]:
        return [actor for actor in self.actors if not actor.ok]

    @property
    def ok(self) -> bool:
        return not self.failures


def start_timestamps(now: datetime | None = None) -> dict[str, str]:
    """The START.* variables every actor of a run is preloaded with."""
    now = now or datetime.now()
    ms = str(int(now.timestamp() * 1000))
    return {
        "START.MS": ms,
        "START.YMD": now.strftime("%Y%m%d"),
        "START.HMS": now.strftime("%H%M%S"),
        "TESTSTART.MS": ms,
    }


def actor_name(index: int) -> str:
    return f"actor-{index + 1}"


def run_actor(root: Element, name: str, iterations: int, preload: Mapping[str, Any] | None = None) -> ActorResult:
    ctx = new_actor_context(name, preload)
    result = ActorResult(name=name)
    with actor_context(ctx), events.with_context(actor=name):
        events.emit(events.ACTOR_STARTED)
        try:
            for _ in range(iterations):
                root.run(ctx)
                ctx.variables.advance_iteration()
        except Exception as e:
            # scope errors included, the actor stops and the others carry on
            log.error(f"{name}: {type(e).__name__}: {e}")
            result.error = e
            events.emit(events.ACTOR_FAILED, error=str(e), error_type=type(e).__name__)
        finally:
            result.samples = list(ctx.samples)
            result.iterations = ctx.variables.current_iteration()
            result.depth = ctx.variables.depth()
        events.emit(events.ACTOR_FINISHED, iterations=result.iterations, ok=result.ok)
    return result


def run_actors(
    root: Element,
    actors: int = 1,
    iterations: int = 1,
    variables: Mapping[str, Any] | None = None,
    preload_timestamps: bool = True,
) -> RunResult:
    """Runs the element tree for a number of actors, each one on its own thread with its own variables."""
    preload = dict(start_timestamps()) if preload_timestamps else {}
    preload.update(variables or {})
    run_id = events.new_run_id()
    results: list[ActorResult | None] = [None] * actors

    def _target(index):
        results[index] = run_actor(root, actor_name(index), iterations, preload)

    start = time.perf_counter()
    with events.with_context(run_id=run_id):
        events.emit(events.RUN_STARTED, actor_count=actors, iterations=iterations)
        threads = [threading.Thread(target=contextvars.copy_context().run, args=(_target, i), name=actor_name(i)) for i in range(actors)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        elapsed_ms = (time.perf_counter() - start) * 1000
        run_result = RunResult(run_id=run_id, actors=list(results), elapsed_ms=elapsed_ms)
        events.emit(events.RUN_FINISHED, success=run_result.ok, elapsed_ms=elapsed_ms)
    return run_result
