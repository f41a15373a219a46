"""
Execution wrapper tests (system log cursor, handler execution, auditing).

Scope
- SyslogCursor: candidate fallback, read-only tail, nothing to open.
- run(): handler result passthrough, decoding, audit line, version exemption.

Conventions
- Test method names follow CamelCase per project convention.
- run() is driven through a resolved command of the shared fixture tool.
"""

from __future__ import annotations

import os
import tempfile
import unittest
from unittest import TestCase

from sedcli.runner import SyslogCursor, execute, run

from support import Tool


class TestSyslogCursor(TestCase):
    """Behavioral tests for SyslogCursor."""

    def setUp(self):
        self.directory = tempfile.TemporaryDirectory()
        self.missing = os.path.join(self.directory.name, "missing")
        self.syslog = os.path.join(self.directory.name, "syslog")
        with open(self.syslog, "wb") as stream:
            stream.write(b"old line\n")

    def tearDown(self):
        self.directory.cleanup()

    def testFallsBackToNextCandidate(self):
        with SyslogCursor((self.missing, self.syslog)) as cursor:
            self.assertEqual(cursor.path, self.syslog)
            self.assertEqual(cursor.offset, len(b"old line\n"))

    def testReadsOnlyWhatWasAppended(self):
        with SyslogCursor((self.syslog,)) as cursor:
            self.assertEqual(cursor.read(), b"")
            with open(self.syslog, "ab") as stream:
                stream.write(b"new line\n")
            self.assertEqual(cursor.read(), b"new line\n")

    def testNothingToOpen(self):
        with SyslogCursor((self.missing,)) as cursor:
            self.assertIsNone(cursor.path)
            self.assertEqual(cursor.read(), b"")

    def testClosedOnExit(self):
        cursor = SyslogCursor((self.syslog,))
        with cursor:
            pass
        self.assertEqual(cursor.read(), b"")


class TestRun(TestCase):
    """Behavioral tests for execute() and run()."""

    def setUp(self):
        self.tool = Tool()

    def tearDown(self):
        self.tool.cleanup()

    def testExecuteCallsHandler(self):
        self.tool.result = 3
        self.assertEqual(execute(self.tool.command("debug")), 3)
        self.assertEqual(self.tool.handled, ["debug"])

    def testExecuteRejectsOtherObjects(self):
        with self.assertRaises(TypeError):
            execute(object())

    def testResultIsReturnedUnchanged(self):
        self.tool.result = 0x07
        argv = ["sedcli", "--debug"]
        self.assertEqual(run(self.tool.app, self.tool.command("debug"), argv), 0x07)
        self.assertEqual(self.tool.stderr.getvalue(), "status: 0x07 NO_SESSIONS_AVAILABLE\n")

    def testAuditLine(self):
        run(self.tool.app, self.tool.command("debug"), ["sedcli", "--debug"])
        lines = self.tool.journal_lines()
        self.assertEqual(len(lines), 1)
        self.assertRegex(lines[0], r"sedcli: sedcli --debug\. Exit status is 0 \(success\)\. Command took \d+\.\d\d s\.$")
        self.assertEqual(self.tool.stdout.getvalue(), "status: 0x00 SUCCESS\n")

    def testErrorDiagnosticIsMirroredIntoJournal(self):
        self.tool.result = 0x01
        run(self.tool.app, self.tool.command("debug"), ["sedcli", "--debug"])
        lines = self.tool.journal_lines()
        self.assertEqual(len(lines), 2)
        self.assertTrue(lines[0].endswith("sedcli: status: 0x01 NOT_AUTHORIZED"))
        self.assertIn("Exit status is 1 (failure)", lines[1])

    def testVersionIsNeitherDecodedNorAudited(self):
        self.tool.result = 0x01
        self.assertEqual(run(self.tool.app, self.tool.command("version"), ["sedcli", "-V"]), 0x01)
        self.assertEqual(self.tool.journal_lines(), [])
        self.assertEqual(self.tool.stdout.getvalue(), "")
        self.assertEqual(self.tool.stderr.getvalue(), "")

    def testSystemLogIsLeftUntouched(self):
        with open(self.tool.messages, "wb") as stream:
            stream.write(b"boot\n")
        run(self.tool.app, self.tool.command("debug"), ["sedcli", "--debug"])
        with open(self.tool.messages, "rb") as stream:
            self.assertEqual(stream.read(), b"boot\n")


if __name__ == "__main__":
    unittest.main()
