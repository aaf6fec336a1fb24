from typing import Any, Iterable, Mapping

from varscope.errors import ScopeUnderflow
from varscope.frame import ABSENT, SCOPE_DEPTH_KEY, VariableFrame
from varscope.util import log


class VariableScopeStack:
    """
    The variables of a single actor, as a stack of frames.

    Reads scan the frames from the innermost to the outermost one and stop at the
    first frame that contains the key, even if the value stored there is None.
    That way an inner scope can shadow an outer value with None.
    Writes only ever touch the current (innermost) frame.

    A stack belongs to one actor and is never shared between threads, so there's no locking.
    """

    def __init__(self, actor_name: str | None = None, preload: Mapping[str, Any] | None = None) -> None:
        self.actor_name = actor_name
        # innermost frame last
        self._frames: list[VariableFrame] = []
        self._current: VariableFrame | None = None
        self._iteration = 0
        base = self.push_frame()
        if preload:
            base.put_all(preload)

    def push_frame(self) -> VariableFrame:
        frame = VariableFrame()
        frame.put(SCOPE_DEPTH_KEY, str(len(self._frames)))
        self._frames.append(frame)
        self._current = frame
        log.debug(f"{self._who()} pushed scope, depth={len(self._frames)}")
        return frame

    def pop_frame(self) -> VariableFrame:
        if len(self._frames) <= 1:
            raise ScopeUnderflow(f"{self._who()} tried to pop the base scope")
        frame = self._frames.pop()
        self._current = self._frames[-1]
        log.debug(f"{self._who()} popped scope, depth={len(self._frames)}")
        return frame

    @property
    def current_frame(self) -> VariableFrame:
        return self._current

    def frame_at(self, depth: int) -> VariableFrame:
        """Returns the frame pushed at the given depth, the base frame is at depth 0."""
        if depth < 0:
            raise IndexError(f"Scope depth can't be negative: {depth}")
        return self._frames[depth]

    def depth(self) -> int:
        return len(self._frames)

    def get(self, key: str) -> Any:
        if len(self._frames) == 1:
            return self._current.get(key)
        for frame in reversed(self._frames):
            if key in frame:
                # present at this level, even a None stops the search
                return frame.get(key)
        return ABSENT

    def get_str(self, key: str) -> str | None:
        value = self.get(key)
        if value is ABSENT or value is None:
            return None
        return str(value)

    def contains(self, key: str) -> bool:
        return any(key in frame for frame in self._frames)

    def __contains__(self, key: str) -> bool:
        return self.contains(key)

    def put(self, key: str, value: Any) -> None:
        self._current.put(key, value)

    def put_all(self, variables: "Mapping[str, Any] | Iterable[tuple[str, Any]] | VariableScopeStack") -> None:
        if isinstance(variables, VariableScopeStack):
            variables = variables.flatten().entries()
        self._current.put_all(variables)

    def remove(self, key: str) -> Any:
        return self._current.remove(key)

    def merge_frame_into_current(self, popped: VariableFrame) -> None:
        """
        Writes every entry of a popped frame into the current frame, overwriting
        whatever was there. The depth marker of the current frame is left alone.
        """
        self._current.put_all((k, v) for k, v in popped.entries() if k != SCOPE_DEPTH_KEY)

    def flatten(self) -> VariableFrame:
        """
        Returns a detached frame with everything that is visible from the current frame,
        outer frames are written first so that inner frames win.
        """
        flat = VariableFrame()
        for frame in self._frames:
            flat.put_all(frame.entries())
        return flat

    def entries(self) -> tuple[tuple[str, Any], ...]:
        return self.flatten().entries()

    def current_iteration(self) -> int:
        return self._iteration

    def advance_iteration(self) -> None:
        self._iteration += 1

    def _who(self) -> str:
        return self.actor_name or "actor"

    def __repr__(self) -> str:
        return f"VariableScopeStack(actor={self.actor_name!r}, depth={len(self._frames)}, iteration={self._iteration})"
