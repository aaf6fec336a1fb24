import pytest

from varscope.controller import GenericController, LoopController, ScopeController, SetVariable
from varscope.errors import ConfigurationError
from varscope.plan import build_element, build_plan, load_plan
from varscope.policy import ScopePolicy


def test_build_tree():
    root = build_element({
        "type": "loop", "name": "outer", "count": 2, "children": [
            {"type": "scope", "policy": "Discard", "children": [
                {"type": "set", "key": "x", "value": 1},
                {"type": "remove", "key": "x"},
                {"type": "debug", "name": "dump", "keys": ["x"]},
            ]},
            {"type": "sequence"},
        ]
    })
    assert isinstance(root, LoopController)
    assert root.name == "outer"
    assert root.loops == 2
    scope, seq = root.children
    assert isinstance(scope, ScopeController)
    assert scope.get_scoped_variable_policy() is ScopePolicy.DISCARD
    assert isinstance(seq, GenericController)
    set_var, _remove, debug = scope.children
    assert isinstance(set_var, SetVariable)
    assert (set_var.key, set_var.value) == ("x", 1)
    assert debug.name == "dump"
    assert debug.keys == ["x"]


def test_scope_uses_default_policy():
    scope = build_element({"type": "scope"}, default_policy="Discard")
    assert scope.get_scoped_variable_policy() is ScopePolicy.DISCARD
    scope = build_element({"type": "scope"})
    assert scope.get_scoped_variable_policy() is ScopePolicy.MERGE


@pytest.mark.parametrize("definition", [
    {"type": "nope"},
    {"name": "no type"},
    {"type": "set", "key": "x"},
    {"type": "remove"},
    {"type": "scope", "policy": "Sometimes"},
    {"type": "loop", "count": -1},
    {"type": "loop", "count": "3"},
    {"type": "sequence", "children": {"type": "set"}},
    {"type": "sequence", "children": [{"type": "set", "value": 1}]},
    ["not", "a", "dict"],
])
def test_invalid_elements(definition):
    with pytest.raises(ConfigurationError):
        build_element(definition)


def test_build_plan_requires_plan():
    with pytest.raises(ConfigurationError):
        build_plan({})


def test_load_plan(write_plan):
    filename = write_plan({
        "actors": 3,
        "scope_policy": "Discard",
        "plan": {"type": "scope"},
    })
    root, conf = load_plan(filename, {"actors": 5})
    assert conf["actors"] == 5
    assert conf["iterations"] == 1
    assert root.get_scoped_variable_policy() is ScopePolicy.DISCARD


def test_load_plan_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json")
    with pytest.raises(ConfigurationError):
        load_plan(str(path))


@pytest.mark.parametrize("settings", [
    {"actors": "2"},
    {"actors": -1},
    {"actors": True},
    {"iterations": 1.5},
    {"variables": ["a"]},
    {"log_level": "LOUD"},
    {"log_level": 10},
    # every scope declares its own policy, the default still has to be valid
    {"scope_policy": "Sometimes"},
])
def test_invalid_settings(settings):
    conf = {"plan": {"type": "scope", "policy": "Merge"}, **settings}
    with pytest.raises(ConfigurationError):
        build_plan(conf)


def test_log_level_is_case_insensitive():
    build_plan({"plan": {"type": "sequence"}, "log_level": "debug"})
