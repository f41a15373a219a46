"""
The application table: program metadata, commands and runtime settings.
"""
import os

from .audit import JOURNAL_PATH, Journal
from .reporting import Reporter
from .runner import SYSLOG_PATHS
from .specs import Command
from .status import StatusConfig
from .utils import Unset, nullify


def is_privileged():
    """
    True when the effective user is root.
    """
    return os.geteuid() == 0


class App:
    """
    Program metadata, command table and runtime settings for one tool.

    Parameters
    - name: program name used in usage lines, messages and the journal.
    - commands: Command variants; scanned in order, first match wins.
    - title: banner printed on top of the top-level help (defaults to name).
    - info: usage tail printed after the program name.
    - man: manpage name for the help footer, or None.
    - journal: path of the append-only log shared by all invocations.
    - syslog: candidate system log paths, tried in order, opened read-only.
    - status: StatusConfig for the diagnostic decoder.
    - privileged: () -> bool probe for the SU_REQUIRED check.
    - shell: render faults and return failure (True) or raise them (False).
    - colorful: style console output.
    - stdout / stderr: file objects for console output (default: sys streams).
    """

    def __init__(
            self,
            name,
            commands,
            *,
            title=None,
            info="<command> [option...]",
            man=None,
            journal=JOURNAL_PATH,
            syslog=SYSLOG_PATHS,
            status=Unset,
            privileged=is_privileged,
            shell=True,
            colorful=True,
            stdout=None,
            stderr=None,
    ):
        if not isinstance(name, str) or not name.strip():
            raise ValueError("app name must be a non-empty string")
        if not (commands := tuple(commands)):
            raise ValueError("app must declare at least one command")
        for command in commands:
            if not isinstance(command, Command):
                raise TypeError("app commands must be command instances")
        if not callable(privileged):
            raise TypeError("app privileged probe must be callable")

        self.name = name.strip()
        self.commands = commands
        self.title = title if title is not None else self.name
        self.info = info
        self.man = man
        self.syslog = tuple(syslog)
        self.status = nullify(status, StatusConfig(program=self.name))
        self.privileged = privileged
        self.shell = shell
        self.colorful = colorful
        self.journal = Journal(journal, program=self.name)
        self.reporter = Reporter(journal=self.journal, colorful=colorful, stdout=stdout, stderr=stderr)
        self._configured = False

    def __repr__(self):
        return "app(name=%r, commands=%r)" % (self.name, tuple(command.name for command in self.commands))

    @property
    def prog(self):
        """
        program label in messages; the host may override it with __prog__ in __main__.
        """
        return getattr(__import__("__main__"), "__prog__", self.name)

    def configure(self):
        """
        run every command's configure callback, once per process.
        """
        if self._configured:
            return
        self._configured = True
        for command in self.commands:
            if command.configure is not None and command.configure() < 0:
                command.hide()


__all__ = (
    "App",
    "is_privileged",
)
