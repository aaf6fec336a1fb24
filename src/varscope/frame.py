from typing import Any, Iterable, Mapping

SCOPE_DEPTH_KEY = "__varscope__depth"


class _Absent:
    """Returned by lookups when a key is not present at all (as opposed to stored as None)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return "ABSENT"


ABSENT = _Absent()


class VariableFrame:
    """
    The variables that were written at one scope level.
    This is what happened at that level, not what is visible from it, visibility
    is decided by stacking frames in a VariableScopeStack.
    """

    def __init__(self, variables: Mapping[str, Any] | None = None) -> None:
        self._vars: dict[str, Any] = dict(variables or {})

    def get(self, key: str) -> Any:
        return self._vars.get(key, ABSENT)

    def get_str(self, key: str) -> str | None:
        value = self._vars.get(key)
        return None if value is None else str(value)

    def contains(self, key: str) -> bool:
        return key in self._vars

    def __contains__(self, key: str) -> bool:
        return self.contains(key)

    def put(self, key: str, value: Any) -> None:
        self._vars[key] = value

    def put_all(self, variables: Mapping[str, Any] | Iterable[tuple[str, Any]]) -> None:
        self._vars.update(variables)

    def remove(self, key: str) -> Any:
        return self._vars.pop(key, ABSENT)

    def entries(self) -> tuple[tuple[str, Any], ...]:
        # a copy, later writes to the frame are not visible through it
        return tuple(self._vars.items())

    def as_dict(self) -> dict[str, Any]:
        return dict(self._vars)

    @property
    def depth(self) -> int | None:
        # None when the marker was overwritten with something that isn't a number
        try:
            return int(self._vars.get(SCOPE_DEPTH_KEY))
        except (TypeError, ValueError):
            return None

    def __len__(self) -> int:
        return len(self._vars)

    def __repr__(self) -> str:
        return f"VariableFrame({self._vars!r})"
