class VarscopeError(Exception):
    pass


class ScopeError(VarscopeError):
    """Scope depth no longer matches the control-flow nesting of an actor."""


class ScopeUnderflow(ScopeError):
    pass


class ScopeMismatch(ScopeError):
    pass


class ConfigurationError(VarscopeError, ValueError):
    pass


class NoActorContext(VarscopeError, LookupError):
    pass
