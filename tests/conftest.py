import json

import pytest

from varscope import events
from varscope.context import ActorContext
from varscope.variables import VariableScopeStack
from varscope.util import log


@pytest.fixture(autouse=True)
def _restore_log_level():
    """CLI tests change the module logger's level; keep it from leaking into other tests."""
    level = log._logger.level
    yield
    log._logger.setLevel(level)


@pytest.fixture
def variables():
    return VariableScopeStack(actor_name="test-actor")


@pytest.fixture
def ctx(variables):
    return ActorContext(name="test-actor", variables=variables)


@pytest.fixture
def captured_events():
    """Collects (event name, payload) for every signal emitted during a test."""
    captured = []
    names = [
        events.RUN_STARTED, events.RUN_FINISHED,
        events.ACTOR_STARTED, events.ACTOR_FINISHED, events.ACTOR_FAILED,
        events.ITERATION_STARTED, events.SCOPE_ENTERED, events.SCOPE_EXITED,
    ]
    receivers = []
    for name in names:
        receiver = lambda _sender, _name=name, **kw: captured.append((_name, kw))
        events.signal(name).connect(receiver)
        receivers.append((name, receiver))
    yield captured
    for name, receiver in receivers:
        events.signal(name).disconnect(receiver)


@pytest.fixture
def write_plan(tmp_path):
    def _write(data, filename="plan.json"):
        path = tmp_path / filename
        path.write_text(json.dumps(data))
        return str(path)
    return _write
