from typing import NamedTuple, Dict, Any, ChainMap, Mapping

from varscope.util.file_util import parse_json


class Option(NamedTuple):
    key: str
    default: Any
    help: str = ""


class Settings:
    LOG_LEVEL = Option("log_level", "INFO", "Logging level")
    ACTORS = Option("actors", 1, "Number of concurrently executing actors")
    ITERATIONS = Option("iterations", 1, "How many times each actor runs the plan")
    SCOPE_POLICY = Option("scope_policy", "Merge", "Policy of scope elements that don't declare one")
    PRELOAD_TIMESTAMPS = Option("preload_timestamps", True, "Preload START.* timestamp variables into every actor")
    VARIABLES = Option("variables", {}, "Variables every actor starts out with")
    PLAN = Option("plan", None, "The element tree to execute")

def get_all_settings() -> list[Option]:
    return [ option for _name, option in vars(Settings).items() if isinstance(option, Option) ]

def create_config(*dicts: Dict[str, object]) -> Mapping[str, object]:
    """Creates a dict-like configuration from multiple dictionaries
    Priority order:
    1. command-line arguments
    2. plan file
    3. default values
    """
    defaults = {option.key: option.default for option in get_all_settings()}
    priority = [*dicts, defaults]
    return ChainMap({}, *priority)

def conf_get(d, option: Option):
    return d.get(option.key, option.default)

def read_config(filename: str, *overrides: Dict[str, object]) -> Mapping[str, object]:
    return create_config(*overrides, parse_json(filename))
