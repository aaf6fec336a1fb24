"""
Control elements of a test plan and the scope lifecycle hooked into them.

Elements only carry static configuration (they are shared by every actor running the plan),
everything that changes during execution lives in the ActorContext handed to run().
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterable, Sequence

from varscope import events
from varscope.context import ActorContext
from varscope.errors import ScopeMismatch
from varscope.frame import SCOPE_DEPTH_KEY, VariableFrame
from varscope.policy import DEFAULT_POLICY, ScopePolicy, policy_from_string, policy_to_string
from varscope.util import dict_util, log
from varscope.variables import VariableScopeStack

SCOPED_VARIABLE_POLICY = "ScopeController.scoped_variable_policy"


class ScopeLifecycle:
    """Pushes a frame when an iteration starts, pops it and applies the policy when it's exhausted."""

    def __init__(self, policy: ScopePolicy = DEFAULT_POLICY):
        self.policy = policy

    def on_iteration_start(self, variables: VariableScopeStack) -> VariableFrame:
        return variables.push_frame()

    def on_iteration_exhausted(self, variables: VariableScopeStack, pushed: VariableFrame | None = None) -> VariableFrame:
        popped = variables.pop_frame()
        if pushed is not None and popped is not pushed:
            # someone else pushed (or popped) in between, the stack no longer matches the nesting
            raise ScopeMismatch(
                f"Scope frame at depth {popped.get(SCOPE_DEPTH_KEY)!r} was popped, expected the one at depth {pushed.get(SCOPE_DEPTH_KEY)!r}"
            )
        match self.policy:
            case ScopePolicy.MERGE:
                variables.merge_frame_into_current(popped)
            case ScopePolicy.DISCARD:
                pass
        return popped

    @contextmanager
    def scope(self, variables: VariableScopeStack):
        frame = self.on_iteration_start(variables)
        events.emit(events.SCOPE_ENTERED, depth=variables.depth(), policy=str(self.policy))
        try:
            yield frame
        finally:
            self.on_iteration_exhausted(variables, frame)
            events.emit(events.SCOPE_EXITED, depth=variables.depth(), policy=str(self.policy))


class Element:
    def __init__(self, name: str | None = None):
        self.name = name or type(self).__name__

    def run(self, ctx: ActorContext) -> None:
        raise NotImplementedError

    def __repr__(self):
        return f"{type(self).__name__}({self.name!r})"


class Sampler(Element):
    """A unit of work, the leaves of the tree."""


class SetVariable(Sampler):
    def __init__(self, key: str, value: Any, name: str | None = None):
        super().__init__(name)
        self.key = key
        self.value = value

    def run(self, ctx: ActorContext) -> None:
        ctx.variables.put(self.key, self.value)


class RemoveVariable(Sampler):
    def __init__(self, key: str, name: str | None = None):
        super().__init__(name)
        self.key = key

    def run(self, ctx: ActorContext) -> None:
        ctx.variables.remove(self.key)


class DebugSampler(Sampler):
    """Records what is visible to the actor right now, optionally limited to some names."""

    def __init__(self, name: str | None = None, keys: Sequence[str] | None = None):
        super().__init__(name)
        self.keys = list(keys) if keys else None

    def run(self, ctx: ActorContext) -> None:
        visible = dict(ctx.variables.entries())
        if self.keys is not None:
            visible = dict_util.subset(visible, self.keys)
        ctx.samples.append(
            {
                "label": self.name,
                "iteration": ctx.variables.current_iteration(),
                "depth": ctx.variables.depth(),
                "variables": visible,
            }
        )


class GenericController(Element):
    """Runs its children once, in order."""

    def __init__(self, name: str | None = None, children: Iterable[Element] = ()):
        super().__init__(name)
        self.children: list[Element] = list(children)
        self.properties: dict[str, str] = {}

    def add(self, child: Element) -> "GenericController":
        self.children.append(child)
        return self

    def run(self, ctx: ActorContext) -> None:
        with self.iteration(ctx):
            self.run_children(ctx)
        self.next_is_null(ctx)

    def run_children(self, ctx: ActorContext) -> None:
        for child in self.children:
            child.run(ctx)

    @contextmanager
    def iteration(self, ctx: ActorContext):
        events.emit(events.ITERATION_STARTED, controller=self.name)
        yield

    def next_is_null(self, ctx: ActorContext) -> None:
        """Called once there is nothing more to run in this pass."""
        log.debug(f"{ctx.name}: {self.name} done")


class LoopController(GenericController):
    def __init__(self, name: str | None = None, children: Iterable[Element] = (), loops: int = 1):
        super().__init__(name, children)
        if loops < 0:
            raise ValueError(f"Loop count can't be negative: {loops}")
        self.loops = loops

    def run(self, ctx: ActorContext) -> None:
        for _ in range(self.loops):
            with self.iteration(ctx):
                self.run_children(ctx)
        self.next_is_null(ctx)


class ScopeController(GenericController):
    """
    Variables created or changed while running the children are discarded or merged
    into the enclosing scope (depending on the policy) once the children are done.
    """

    def __init__(self, name: str | None = None, children: Iterable[Element] = (), policy: ScopePolicy | str = DEFAULT_POLICY):
        super().__init__(name, children)
        self.set_scoped_variable_policy(policy)

    def set_scoped_variable_policy(self, policy: ScopePolicy | str) -> None:
        self.properties[SCOPED_VARIABLE_POLICY] = policy_to_string(policy_from_string(policy))

    def get_scoped_variable_policy(self) -> ScopePolicy:
        return policy_from_string(self.properties[SCOPED_VARIABLE_POLICY])

    @contextmanager
    def iteration(self, ctx: ActorContext):
        lifecycle = ScopeLifecycle(self.get_scoped_variable_policy())
        with super().iteration(ctx), lifecycle.scope(ctx.variables):
            yield
