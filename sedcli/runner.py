"""
Execution wrapper: run the resolved handler, decode its result, audit the call.

The handler runs to completion; the wrapper only measures how long it took.
"""
import logging
import os
import time

from .audit import log_command
from .specs import NamespaceCommand, OptionCommand, PlainCommand
from .status import StatusDecoder
from .tokens import is_help, is_version

log = logging.getLogger(__name__)

SYSLOG_PATHS = ("/var/log/messages", "/var/log/syslog")


class SyslogCursor:
    """
    Read-only cursor at the end of the first system log that can be opened.

    Entering never raises; when no candidate opens, `path` stays None and
    read() returns b"". The file is closed on exit.
    """

    def __init__(self, paths=SYSLOG_PATHS):
        self.paths = tuple(paths)
        self.path = None
        self.offset = 0
        self._stream = None

    def __enter__(self):
        for path in self.paths:
            try:
                self._stream = open(path, "rb")
            except OSError:
                continue
            self.path = path
            self.offset = self._stream.seek(0, os.SEEK_END)
            break
        return self

    def __exit__(self, *exc_info):
        if self._stream is not None:
            self._stream.close()
            self._stream = None

    def read(self):
        """
        bytes appended to the system log since the cursor was placed.
        """
        if self._stream is None:
            return b""
        self._stream.seek(self.offset)
        return self._stream.read()


def execute(command):
    match command:
        case PlainCommand() | OptionCommand() | NamespaceCommand():
            return command.handler()
        case _:
            raise TypeError("cannot execute %r" % (command,))


def run(app, command, argv):
    """
    run command's handler and return its result as the exit status.
    """
    start = time.monotonic_ns()
    with SyslogCursor(app.syslog) as cursor:
        result = execute(command)

        if not (is_help(argv[1]) or is_version(argv[1])):
            StatusDecoder(app.status).report(result, app.reporter)

        elapsed = (time.monotonic_ns() - start) // 1_000_000

        if not command.is_version:
            log_command(app.journal, argv, result, elapsed, reporter=app.reporter)

        if cursor.path is not None:
            log.debug("%d bytes appended to %s while running --%s", len(cursor.read()), cursor.path, command.name)

    return result


__all__ = (
    "SYSLOG_PATHS",
    "SyslogCursor",
    "execute",
    "run",
)
