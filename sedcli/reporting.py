"""
Console reporting for the dispatcher, the decoder and the help renderer.

- Severity follows the syslog levels (EMERG=0 … DEBUG=7); lower is more severe.
- WARNING and more severe messages go to stderr and are mirrored into the
  journal; everything else goes to stdout only.
- Output is rendered with rich; when the reporter is not colorful, styles are
  dropped so the text is plain.
"""
import enum

from rich.console import Console
from rich.text import Text


class Severity(enum.IntEnum):
    EMERG = 0
    ALERT = 1
    CRIT = 2
    ERR = 3
    WARNING = 4
    NOTICE = 5
    INFO = 6
    DEBUG = 7


MAX_JOURNAL_SEVERITY = Severity.WARNING


class Reporter:
    """
    Route messages to stdout/stderr and mirror errors into the journal.

    stdout/stderr default to the live sys streams (resolved by rich at print
    time); tests pass io.StringIO objects instead.
    """

    def __init__(self, *, journal=None, colorful=True, stdout=None, stderr=None):
        self.journal = journal
        self.colorful = colorful
        self.stdout = Console(file=stdout, highlight=False, soft_wrap=True, no_color=not colorful)
        self.stderr = Console(file=stderr, stderr=stderr is None, highlight=False, soft_wrap=True, no_color=not colorful)

    def text(self, fragment, style=""):
        if isinstance(fragment, Text):
            return fragment if self.colorful else Text(fragment.plain)
        return Text(str(fragment), style if self.colorful else "")

    def report(self, severity, message, /, style="", *, record=None):
        """
        print message (str, Text or any rich renderable) at the given severity.

        record is the plain line mirrored into the journal; it defaults to the
        message text.
        """
        if isinstance(message, str | Text):
            message = self.text(message, style)

        if severity > MAX_JOURNAL_SEVERITY:
            self.stdout.print(message)
            return

        self.stderr.print(message)
        if self.journal is not None:
            if record is None:
                record = message.plain if isinstance(message, Text) else str(message)
            self.journal.write(record)

    def info(self, message, /, style=""):
        self.report(Severity.INFO, message, style)

    def error(self, message, /, style="", *, record=None):
        self.report(Severity.ERR, message, style, record=record)


__all__ = (
    "Severity",
    "MAX_JOURNAL_SEVERITY",
    "Reporter",
)
