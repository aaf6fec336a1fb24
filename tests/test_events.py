from varscope import events


def _connect(signal_name, receiver):
    sig = events.signal(signal_name)
    sig.connect(receiver)
    return lambda: sig.disconnect(receiver)


def test_emit_delivers_payload_and_timestamp():
    captured = []
    disconnect = _connect("test.custom", lambda _s, **kw: captured.append(kw))
    try:
        events.emit("test.custom", foo="bar")
    finally:
        disconnect()

    assert len(captured) == 1
    assert captured[0]["event"] == "test.custom"
    assert captured[0]["foo"] == "bar"
    assert isinstance(captured[0]["ts"], int)


def test_context_is_merged_into_payload():
    captured = []
    disconnect = _connect("test.ctx", lambda _s, **kw: captured.append(kw))
    try:
        with events.with_context(actor="a1", ignored=None):
            with events.with_context(run_id="r1"):
                events.emit("test.ctx")
            events.emit("test.ctx")
        events.emit("test.ctx")
    finally:
        disconnect()

    assert captured[0]["actor"] == "a1"
    assert captured[0]["run_id"] == "r1"
    assert "ignored" not in captured[0]
    assert "run_id" not in captured[1]
    assert "actor" not in captured[2]


def test_subscriber_failure_does_not_propagate():
    def bad_receiver(_sender, **kw):
        raise RuntimeError("boom")

    disconnect = _connect("test.boom", bad_receiver)
    try:
        assert events.emit("test.boom") == []
    finally:
        disconnect()
