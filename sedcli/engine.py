"""
Entry point: resolve, validate, execute; the result is the process exit status.
"""
import sys

from .extractor import extract
from .faults import SUCCESS, CommandException, trigger
from .resolver import resolve
from .runner import run


def dispatch(app, argv=None, /):
    """
    run one invocation of app and return its exit status.

    argv defaults to sys.argv; argv[0] is the program name. Parse errors are
    rendered (shell mode) or raised; handler results are returned as they are.
    """
    argv = list(sys.argv if argv is None else argv)

    try:
        resolution = resolve(app, argv)
        if resolution.help:
            return SUCCESS
        if resolution.options is not None:
            extract(resolution, argv)
    except CommandException as fault:
        return trigger(fault, app=app)

    return run(app, resolution.command, argv)


def main(app, argv=None, /):
    sys.exit(dispatch(app, argv))


__all__ = (
    "dispatch",
    "main",
)
