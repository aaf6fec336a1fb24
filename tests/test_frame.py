from varscope.frame import ABSENT, SCOPE_DEPTH_KEY, VariableFrame


def test_put_and_get():
    frame = VariableFrame()
    frame.put("x", 42)
    assert frame.get("x") == 42
    frame.put("x", "overwritten")
    assert frame.get("x") == "overwritten"


def test_absent_is_not_none():
    frame = VariableFrame()
    frame.put("null", None)
    assert frame.get("null") is None
    assert frame.get("missing") is ABSENT
    assert "null" in frame
    assert "missing" not in frame
    assert not ABSENT
    assert repr(ABSENT) == "ABSENT"


def test_get_str():
    frame = VariableFrame({"n": 12, "s": "abc", "null": None})
    assert frame.get_str("n") == "12"
    assert frame.get_str("s") == "abc"
    assert frame.get_str("null") is None
    assert frame.get_str("missing") is None


def test_remove_returns_previous_value():
    frame = VariableFrame({"a": 1, "null": None})
    assert frame.remove("a") == 1
    assert frame.get("a") is ABSENT
    assert frame.remove("null") is None
    assert frame.remove("a") is ABSENT


def test_entries_is_a_snapshot():
    frame = VariableFrame({"a": 1})
    entries = frame.entries()
    frame.put("b", 2)
    frame.put("a", 100)
    assert entries == (("a", 1),)
    assert dict(frame.entries()) == {"a": 100, "b": 2}


def test_as_dict_is_a_copy():
    frame = VariableFrame({"a": 1})
    d = frame.as_dict()
    d["b"] = 2
    assert frame.get("b") is ABSENT


def test_put_all_and_len():
    frame = VariableFrame()
    frame.put_all({"a": 1, "b": 2})
    frame.put_all([("c", 3)])
    assert len(frame) == 3
    assert "VariableFrame" in repr(frame)


def test_depth():
    assert VariableFrame().depth is None
    assert VariableFrame({SCOPE_DEPTH_KEY: "3"}).depth == 3


def test_depth_ignores_overwritten_marker():
    assert VariableFrame({SCOPE_DEPTH_KEY: "not a number"}).depth is None
    assert VariableFrame({SCOPE_DEPTH_KEY: None}).depth is None
