from varscope.config import Settings, conf_get, create_config, get_all_settings, read_config


def test_defaults():
    conf = create_config()
    for option in get_all_settings():
        assert conf_get(conf, option) == option.default


def test_priority_order():
    conf = create_config({"actors": 10}, {"actors": 2, "iterations": 3})
    assert conf_get(conf, Settings.ACTORS) == 10
    assert conf_get(conf, Settings.ITERATIONS) == 3
    assert conf_get(conf, Settings.LOG_LEVEL) == "INFO"


def test_read_config(write_plan):
    filename = write_plan({"iterations": 4, "variables": {"a": 1}})
    conf = read_config(filename, {"iterations": 2})
    assert conf_get(conf, Settings.ITERATIONS) == 2
    assert conf_get(conf, Settings.VARIABLES) == {"a": 1}
    assert conf_get(conf, Settings.PRELOAD_TIMESTAMPS) is True
