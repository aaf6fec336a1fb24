import logging
from typing import Any, Mapping

from varscope.config import Settings, conf_get, read_config
from varscope.controller import (DebugSampler, Element, GenericController, LoopController, RemoveVariable,
                                 ScopeController, SetVariable)
from varscope.errors import ConfigurationError
from varscope.policy import policy_from_string
from varscope.util import dict_util

ELEMENT_TYPES = ("sequence", "loop", "scope", "set", "remove", "debug")


def build_element(definition: Mapping[str, Any], default_policy: str = Settings.SCOPE_POLICY.default) -> Element:
    """
    Builds an element tree from its dict form, e.g.:
        {"type": "scope", "policy": "Discard", "children": [{"type": "set", "key": "x", "value": 1}]}
    Invalid trees (unknown types, missing fields, unknown policies) are rejected here,
    before anything runs.
    """
    if not isinstance(definition, Mapping):
        raise ConfigurationError(f"Expected an element, got: {definition!r}")
    kind = definition.get("type")
    name = definition.get("name")
    try:
        match kind:
            case "sequence":
                return GenericController(name, _build_children(definition, default_policy))
            case "loop":
                loops = definition.get("count", 1)
                if not isinstance(loops, int) or loops < 0:
                    raise ConfigurationError(f"Loop count needs to be a non-negative integer, got: {loops!r}")
                return LoopController(name, _build_children(definition, default_policy), loops=loops)
            case "scope":
                policy = policy_from_string(definition.get("policy", default_policy))
                return ScopeController(name, _build_children(definition, default_policy), policy=policy)
            case "set":
                key, value = dict_util.get_all(definition, "key", "value")
                return SetVariable(key, value, name=name)
            case "remove":
                key, = dict_util.get_all(definition, "key")
                return RemoveVariable(key, name=name)
            case "debug":
                return DebugSampler(name, keys=definition.get("keys"))
            case _:
                raise ConfigurationError(f"Unknown element type: {kind!r} (expected one of: {', '.join(ELEMENT_TYPES)})")
    except KeyError as e:
        raise ConfigurationError(f"Element of type '{kind}' is missing field {e}") from e


def _build_children(definition, default_policy):
    children = definition.get("children", [])
    if not isinstance(children, list):
        raise ConfigurationError(f"'children' needs to be a list, got: {children!r}")
    return [build_element(child, default_policy) for child in children]


def _check_count(conf, option):
    value = conf_get(conf, option)
    # bool is an int too, but "actors": true is a mistake
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise ConfigurationError(f"'{option.key}' needs to be a non-negative integer, got: {value!r}")


def validate_settings(conf: Mapping[str, Any]) -> None:
    """Rejects bad run settings up front, before any actor starts."""
    _check_count(conf, Settings.ACTORS)
    _check_count(conf, Settings.ITERATIONS)
    variables = conf_get(conf, Settings.VARIABLES)
    if not isinstance(variables, Mapping):
        raise ConfigurationError(f"'{Settings.VARIABLES.key}' needs to be an object, got: {variables!r}")
    level = conf_get(conf, Settings.LOG_LEVEL)
    if not isinstance(level, str) or level.upper() not in logging.getLevelNamesMapping():
        raise ConfigurationError(f"Unknown '{Settings.LOG_LEVEL.key}': {level!r}")
    policy_from_string(conf_get(conf, Settings.SCOPE_POLICY))


def build_plan(conf: Mapping[str, Any]) -> Element:
    validate_settings(conf)
    root = conf_get(conf, Settings.PLAN)
    if root is None:
        raise ConfigurationError("No plan to execute")
    return build_element(root, conf_get(conf, Settings.SCOPE_POLICY))


def load_plan(filename: str, *overrides) -> tuple[Element, Mapping[str, Any]]:
    conf = read_config(filename, *overrides)
    return build_plan(conf), conf
