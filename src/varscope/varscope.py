"""varscope

Usage:
    varscope <plan_file> [-n <actors>] [-i <iterations>] [--plain]
    varscope -h | --help
    varscope -v | --version

Options:
    -h --help           show this screen.
    -v --version        show version.
    -n <actors>         number of concurrently executing actors (overrides the plan file)
    -i <iterations>     iterations per actor (overrides the plan file)
    --plain             no colors or markup in the output
"""

from docopt import docopt

from varscope import __version__
from varscope.config import Settings, conf_get
from varscope.errors import ConfigurationError
from varscope.plan import load_plan
from varscope.runner import RunResult, run_actors
from varscope.util import log

version = __version__
log.set_default_level("INFO")


def _int_arg(arguments, flag):
    value = arguments.get(flag)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"{flag} expects a number, got: {value}")


def cli_overrides(arguments) -> dict:
    overrides = {
        Settings.ACTORS.key: _int_arg(arguments, "-n"),
        Settings.ITERATIONS.key: _int_arg(arguments, "-i"),
    }
    return {k: v for k, v in overrides.items() if v is not None}


def report(run_result: RunResult):
    log.align_actor_names([actor.name for actor in run_result.actors])
    for actor in run_result.actors:
        with log.actor_report(actor):
            for sample in actor.samples:
                log.sample(sample)


def summary(run_result: RunResult):
    failures = len(run_result.failures)
    num_actors = len(run_result.actors)
    if failures > 0:
        log.info("%s actors of %s failed. :(" % (failures, num_actors))
        return False
    elif num_actors == 0:
        log.info("No actors ran!")
        return False
    else:
        log.info("All %s actors finished in %.0f ms." % (num_actors, run_result.elapsed_ms))
        return True


def run(argv=None):
    arguments = docopt(__doc__, argv=argv, version=f"varscope {version}")
    if arguments.get("--plain"):
        log.use_plain_output()
    plan_file = arguments.get("<plan_file>")
    log.info(f"[b]varscope[/b] [u]{version}[/u] | plan={plan_file}")
    try:
        root, conf = load_plan(plan_file, cli_overrides(arguments))
    except (ConfigurationError, OSError) as e:
        log.error(f"[red]Invalid plan:[/red] {e}")
        return False
    log.set_default_level(conf_get(conf, Settings.LOG_LEVEL).upper())

    run_result = run_actors(
        root,
        actors=conf_get(conf, Settings.ACTORS),
        iterations=conf_get(conf, Settings.ITERATIONS),
        variables=conf_get(conf, Settings.VARIABLES),
        preload_timestamps=conf_get(conf, Settings.PRELOAD_TIMESTAMPS),
    )
    report(run_result)
    return summary(run_result)


def run_varscope():
    result = run()
    if not result:
        exit(1)
    else:
        exit(0)


if __name__ == "__main__":
    run_varscope()
