"""
Help renderer tests (top level, option commands, namespaced commands, custom renderers).

Scope
- Validate the top-level banner, command listing and footer.
- Validate the usage line built from required options.
- Validate that hidden commands and hidden options are left out.
- Validate that a command's own help callable replaces the renderer.

Conventions
- Test method names follow CamelCase per project convention.
- Output is rendered without colors and compared line by line.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from sedcli.helps import render_command_help, render_help, render_options
from sedcli.specs import Option, OptionFlag, PlainCommand

from support import Tool


class HelpCase(TestCase):
    def setUp(self):
        self.tool = Tool()

    def tearDown(self):
        self.tool.cleanup()

    def lines(self):
        return self.tool.stdout.getvalue().splitlines()


class TestTopLevel(HelpCase):
    """render_help()."""

    def testBanner(self):
        render_help(self.tool.app)
        lines = self.lines()
        self.assertEqual(lines[0], "Drive management tool")
        self.assertIn("Usage: sedcli <command> [option...]", lines)
        self.assertIn("The '<device>' must be a block device (e.g. /dev/nvme0n1).", lines)
        self.assertIn("Available commands:", lines)

    def testCommandListing(self):
        render_help(self.tool.app)
        lines = self.lines()
        self.assertIn("   -s  --status" + " " * 19 + "Print the drive status", lines)
        self.assertIn("   --tag" + " " * 22 + "Attach labels to a drive", lines)
        self.assertIn("   -V  --version" + " " * 18 + "Print version", lines)

    def testHiddenCommandsAreLeftOut(self):
        render_help(self.tool.app)
        output = self.tool.stdout.getvalue()
        self.assertNotIn("--debug", output)
        self.assertIn("--experimental", output)

    def testHiddenByConfigureAfterConfiguration(self):
        self.tool.app.configure()
        render_help(self.tool.app)
        self.assertNotIn("--experimental", self.tool.stdout.getvalue())

    def testFooter(self):
        render_help(self.tool.app)
        lines = self.lines()
        self.assertIn("See 'sedcli <command> --help' for more information on a specific command.", lines)
        self.assertIn("   sedcli --status --help", lines)
        self.assertEqual(lines[-1], "For more information, please refer to manpage (man sedcli).")

    def testHelpGoesToStdoutOnly(self):
        render_help(self.tool.app)
        self.assertEqual(self.tool.stderr.getvalue(), "")
        self.assertEqual(self.tool.journal_lines(), [])


class TestCommandHelp(HelpCase):
    """render_command_help() for option and plain commands."""

    def testRequiredOnlyUsage(self):
        render_command_help(self.tool.app, self.tool.command("status"))
        lines = self.lines()
        self.assertEqual(lines[0], "Usage: sedcli --status --device <DEVICE>")
        self.assertIn("   Print the drive status", lines)
        self.assertIn("Options that are valid with --status (-s) are:", lines)
        self.assertIn("   -d  --device <DEVICE>" + " " * 21 + "Device node", lines)

    def testUsageWithOptionalOptions(self):
        render_command_help(self.tool.app, self.tool.command("tag"))
        lines = self.lines()
        self.assertEqual(lines[0], "Usage: sedcli --tag --label <LABEL> [option...]")
        self.assertIn("Options that are valid with --tag are:", lines)

    def testOptionForms(self):
        render_command_help(self.tool.app, self.tool.command("tag"))
        output = self.tool.stdout.getvalue()
        self.assertIn("-v  --value [<VALUE>]", output)
        self.assertIn("-f  --force ", output)
        self.assertIn("-n  --notes <NOTE>", output)

    def testHiddenOptionsAreLeftOut(self):
        render_command_help(self.tool.app, self.tool.command("tag"))
        self.assertNotIn("--secret", self.tool.stdout.getvalue())

    def testPlainCommand(self):
        render_command_help(self.tool.app, self.tool.command("version"))
        lines = self.lines()
        self.assertEqual(lines[0], "Usage: sedcli --version")
        self.assertNotIn("are:", self.tool.stdout.getvalue())

    def testCustomRenderer(self):
        seen = []
        command = PlainCommand("inspect", lambda: 0, help=lambda app, command: seen.append((app, command)))
        render_command_help(self.tool.app, command)
        self.assertEqual(seen, [(self.tool.app, command)])
        self.assertEqual(self.tool.stdout.getvalue(), "")

    def testRenderOptions(self):
        render_options(self.tool.app, (Option("quiet", None, "Say less", flags=OptionFlag.HIDDEN), Option("loud")))
        self.assertEqual([line.rstrip() for line in self.lines()], ["       --loud"])


class TestNamespaceHelp(HelpCase):
    """render_command_help() for namespaced commands."""

    def setUp(self):
        super().setUp()
        render_command_help(self.tool.app, self.tool.command("manage"))

    def testUsage(self):
        self.assertEqual(self.lines()[0], "Usage: sedcli --manage --object <NAME>")

    def testLongDescription(self):
        self.assertIn("   Manage user and admin objects stored on the drive", self.lines())

    def testEntries(self):
        lines = self.lines()
        self.assertIn("Valid values of NAME are:", lines)
        self.assertIn("   user - Regular user", lines)
        self.assertIn("   admin - Administrator", lines)

    def testEntryOptions(self):
        lines = self.lines()
        self.assertIn("Options that are valid with --manage (-m) --object (-o) user are:", lines)
        self.assertIn("Options that are valid with --manage (-m) --object (-o) admin are:", lines)
        self.assertIn("   -n  --name <NAME>" + " " * 25 + "Admin name", lines)


if __name__ == "__main__":
    unittest.main()
