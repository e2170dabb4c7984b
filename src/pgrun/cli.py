"""Click entry point: run + config commands."""

import contextlib
import sys

import click
import yaml
from click.core import ParameterSource

from pgrun import __version__, config, executor, log
from pgrun.errors import LaunchError, SubprocessError


def _load(config_path):
    try:
        cfg = config.load_config(config_path)
    except (yaml.YAMLError, ValueError) as e:
        log.error(f"invalid config: {e}")
        sys.exit(1)
    except OSError as e:
        log.error(f"cannot read config: {e}")
        sys.exit(1)
    return cfg


def _exit_status(exit_code: int) -> int:
    """Map a Result exit code to a shell-style status (128+N for signal N)."""
    if exit_code < 0:
        return 128 - exit_code
    return exit_code


@click.group()
@click.version_option(version=__version__, prog_name="pgrun")
def main():
    """Run commands in their own process group and capture their output."""


@main.command(context_settings={"ignore_unknown_options": True})
@click.option("--cwd", default=None, help="Working directory for the command")
@click.option("--check/--no-check", default=False, help="Exit 1 with an error if the command fails")
@click.option("--debug", is_flag=True, default=False, help="Trace the command and its output")
@click.option("--config", "config_path", default=None, help="Path to a .pgrun.yml file")
@click.argument("command", nargs=-1, type=click.UNPROCESSED)
def run(cwd, check, debug, config_path, command):
    """Run COMMAND to completion and relay its stdout/stderr."""
    if not command:
        click.echo("Error: No command specified", err=True)
        sys.exit(1)

    cfg = _load(config_path)
    if cwd is not None:
        cfg.cwd = cwd
    if click.get_current_context().get_parameter_source("check") is not ParameterSource.DEFAULT:
        cfg.check = check
    if debug:
        cfg.debug = True

    problems = config.validate(cfg)
    if problems:
        for problem in problems:
            log.error(problem)
        sys.exit(1)

    traces = log.debug_traces() if cfg.debug else contextlib.nullcontext()
    try:
        with traces:
            result = executor.execute(list(command), cwd=cfg.cwd, raise_on_fail=cfg.check)
    except LaunchError as e:
        log.error(str(e))
        sys.exit(127)
    except SubprocessError as e:
        if e.result is not None:
            click.echo(e.result.stdout, nl=False)
        log.error(str(e))
        sys.exit(1)

    click.echo(result.stdout, nl=False)
    click.echo(result.stderr, nl=False, err=True)
    sys.exit(_exit_status(result.exit_code))


@main.command(name="config")
@click.option("--config", "config_path", default=None, help="Path to a .pgrun.yml file")
def show_config(config_path):
    """Show the effective configuration."""
    cfg = _load(config_path)
    log.info(f"cwd: {cfg.cwd or '(inherit)'}")
    log.info(f"check: {cfg.check}")
    log.info(f"debug: {cfg.debug}")
    for problem in config.validate(cfg):
        log.error(problem)


if __name__ == "__main__":
    main()
