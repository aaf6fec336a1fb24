import contextvars
import json
import logging
import sys
from contextlib import contextmanager

from rich.console import Console
from rich.logging import RichHandler

_logger = logging.getLogger(__name__)

def _create_plain_handler():
    h = logging.StreamHandler(sys.stdout)
    h.terminator = ""
    h.setFormatter(logging.Formatter("%(message)s"))
    return h


def _create_rich_handler():
    h = RichHandler(
        console=Console(),
        show_time=False,
        show_path=False,
        markup=True,
    )
    h.terminator = ""
    h.setFormatter(logging.Formatter("%(message)s"))
    return h

_handler = _create_rich_handler()
_logger.setLevel(logging.INFO)
_logger.propagate = False
_logger.addHandler(_handler)
_name_width = 12

# Lines held back while an actor's report is being written. Actor threads copy the
# context they start in, so a report in one thread never swallows another thread's lines.
_report_buffer: contextvars.ContextVar[list | None] = contextvars.ContextVar("varscope_report_buffer", default=None)

def _log(level, msg, new_line=True):
    if new_line and not msg.endswith("\n"):
        msg += "\n"
    _logger.log(level, msg)


def _buffer_or_log(level, msg, new_line=True):
    buf = _report_buffer.get()
    if buf is not None:
        buf.append((level, msg, new_line))
    else:
        _log(level, msg, new_line)


def debug(msg, new_line=True):
    if _logger.isEnabledFor(logging.DEBUG):
        _buffer_or_log(logging.DEBUG, msg, new_line)


def info(msg, new_line=True):
    _buffer_or_log(logging.INFO, msg, new_line)


def error(msg, new_line=True):
    _buffer_or_log(logging.ERROR, msg, new_line)


def set_default_level(level):
    _logger.setLevel(level)


def use_plain_output():
    """Swaps the rich handler for a plain one, e.g. when output is piped."""
    global _handler
    _logger.removeHandler(_handler)
    _handler = _create_plain_handler()
    _logger.addHandler(_handler)


def align_actor_names(names):
    global _name_width
    if names:
        _name_width = max(len(n) for n in names) + 4


def sample(entry: dict):
    """One debug snapshot of an actor, e.g. '  [2] after request depth=2 {"user": null}'."""
    variables = json.dumps(entry["variables"], sort_keys=True, default=str)
    info(f"  [{entry['iteration']}] {entry['label']} depth={entry['depth']} {variables}")


def _status_line(actor) -> str:
    status = "[green]OK[/green]" if actor.ok else "[blink][red]FAILED[/red][/blink]"
    return f"{actor.name.ljust(_name_width)} {status} [dim]iterations={actor.iterations} depth={actor.depth}[/dim]"


@contextmanager
def actor_report(actor):
    """
    Collects everything logged about one finished actor and prints it under a
    status line ('actor-1   OK iterations=3 depth=1'), a failed actor's error first.
    """
    buf = []
    token = _report_buffer.set(buf)
    try:
        if not actor.ok:
            error(f"[red]{type(actor.error).__name__}: {actor.error}[/red]")
        yield
    finally:
        _report_buffer.reset(token)
        _log(logging.INFO, _status_line(actor))
        for level, msg, new_line in buf:
            if _logger.isEnabledFor(level):
                _log(level, msg, new_line)
