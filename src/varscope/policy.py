from enum import Enum

from varscope.errors import ConfigurationError


class ScopePolicy(Enum):
    """What a scope does with its variables when it ends."""

    # variables altered within the scope are dropped
    DISCARD = "Discard"
    # variables altered within the scope overwrite the ones of the enclosing scope
    MERGE = "Merge"

    def __str__(self):
        return self.value


DEFAULT_POLICY = ScopePolicy.MERGE

_legacy_names = {
    "clear_after_scope": ScopePolicy.DISCARD,
    "merge_after_scope": ScopePolicy.MERGE,
}


def policy_from_string(name: str) -> ScopePolicy:
    if isinstance(name, ScopePolicy):
        return name
    if not isinstance(name, str):
        raise ConfigurationError(f"Scope policy needs to be a string, got: {name!r}")
    key = name.strip().lower()
    for policy in ScopePolicy:
        if key in (policy.value.lower(), policy.name.lower()):
            return policy
    if key in _legacy_names:
        return _legacy_names[key]
    allowed = ", ".join(p.value for p in ScopePolicy)
    raise ConfigurationError(f"Unknown scope policy: '{name}' (expected one of: {allowed})")


def policy_to_string(policy: ScopePolicy) -> str:
    return policy.value
