"""
Audit logging: one line per invocation in a journal shared by every process.

- CommandLine rebuilds the invocation as typed ("prog --cmd --opt value") in a
  byte buffer that grows to (needed + capacity) * 2 when a token does not fit;
  growth never drops what was already written.
- Journal appends timestamped lines while holding an exclusive advisory lock
  (fcntl.lockf). Open, lock or write failures are reported as a False return, never
  raised.
- log_command formats the audit line.
"""
import fcntl
import logging
import os
import sys
import time

log = logging.getLogger(__name__)

JOURNAL_PATH = "/var/log/sedcli.log"
DEFAULT_CAPACITY = 100


class CommandLine:
    """
    Growable buffer joining tokens with single spaces.
    """

    def __init__(self, capacity=DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError("command line capacity must be positive")
        self.capacity = capacity
        self._buffer = bytearray(capacity)
        self._length = 0

    def __len__(self):
        return max(self._length - 1, 0)

    def _grow(self, needed):
        capacity = (needed + self.capacity) * 2
        self._buffer.extend(bytes(capacity - self.capacity))
        self.capacity = capacity

    def append(self, token):
        try:
            data = os.fsencode(token)
        except UnicodeEncodeError:
            # unencodable characters are logged escaped
            data = token.encode(sys.getfilesystemencoding(), "backslashreplace")
        if len(data) + 1 + self._length > self.capacity:
            self._grow(len(data) + 1)
        end = self._length + len(data)
        self._buffer[self._length:end] = data
        # separator slot; the last one is dropped on read
        self._buffer[end] = 0x20
        self._length = end + 1
        return self

    def extend(self, tokens):
        for token in tokens:
            self.append(token)
        return self

    def __str__(self):
        return os.fsdecode(bytes(self._buffer[:len(self)]))


class Journal:
    """
    Append-only log file guarded by an exclusive advisory lock per line.
    """

    def __init__(self, path=JOURNAL_PATH, *, program="sedcli"):
        self.path = path
        self.program = program

    def __repr__(self):
        return "journal(path=%r)" % self.path

    def write(self, message):
        """
        append '<asctime> <program>: <message>' and return True on success.
        """
        try:
            stream = open(self.path, "a", errors="backslashreplace")
        except OSError as error:
            log.debug("cannot open journal %s: %s", self.path, error)
            return False

        with stream:
            try:
                fcntl.lockf(stream, fcntl.LOCK_EX)
            except OSError as error:
                log.debug("cannot lock journal %s: %s", self.path, error)
                return False
            try:
                stream.seek(0, os.SEEK_END)
                stream.write("%s %s: %s\n" % (time.asctime(time.localtime()), self.program, message))
                stream.flush()
            except (OSError, ValueError) as error:
                log.debug("cannot write journal %s: %s", self.path, error)
                return False
            finally:
                fcntl.lockf(stream, fcntl.LOCK_UN)
        return True


def format_duration(elapsed):
    """
    milliseconds as '<seconds>.<hundredths>'.
    """
    return "%d.%02d" % (elapsed // 1000, (elapsed % 1000) // 10)


def log_command(journal, argv, result, elapsed, *, reporter=None, capacity=DEFAULT_CAPACITY):
    """
    write the audit line for one invocation; True when it reached the journal.
    """
    try:
        command = CommandLine(capacity).extend(argv)
    except MemoryError:
        if reporter is not None:
            reporter.error("%s: Memory allocation failed for logging." % journal.program)
        return False

    return journal.write("%s. Exit status is %d (%s). Command took %s s." % (
        command,
        result,
        "failure" if result else "success",
        format_duration(elapsed),
    ))


__all__ = (
    "JOURNAL_PATH",
    "DEFAULT_CAPACITY",
    "CommandLine",
    "Journal",
    "format_duration",
    "log_command",
)
