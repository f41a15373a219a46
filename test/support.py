"""
Shared fixture for the behavioral suites: a small device tool with every command shape.

Commands
- --status/-s  --device <DEVICE>                   options, device required (max 1)
- --tag        --label <LABEL> (required, max 2), --value [<VALUE>] (optional, max 1),
               --force, --notes <NOTE> (unbounded)
- --manage/-m  --object/-o user|admin              namespaced; each entry has its own options
- --lock       --device <DEVICE>                   requires root
- --debug                                          statically hidden
- --experimental                                   hidden by its configure callback
- --version/-V
"""
import io
import os
import tempfile

from sedcli import (
    App,
    CommandFlag,
    Namespace,
    NamespaceCommand,
    NamespaceEntry,
    Option,
    OptionCommand,
    OptionFlag,
    PlainCommand,
    StatusConfig,
)


class Tool:
    """
    Build an App whose callbacks record what they receive.

    Attributes
    - calls: option callback invocations, in order.
    - handled: names of the commands whose handler ran.
    - configured: number of configure callback invocations.
    - result / parse_result: values returned by handlers / option callbacks.
    """

    def __init__(self, *, privileged=True, shell=False, status=None):
        self.calls = []
        self.handled = []
        self.configured = 0
        self.result = 0
        self.parse_result = 0

        self.directory = tempfile.TemporaryDirectory()
        self.journal = os.path.join(self.directory.name, "sedcli.log")
        self.messages = os.path.join(self.directory.name, "messages")
        self.stdout = io.StringIO()
        self.stderr = io.StringIO()

        device = Option("device", "d", "Device node", "DEVICE", OptionFlag.REQUIRED, 1)

        self.app = App(
            "sedcli",
            (
                OptionCommand(
                    "status",
                    self.handler("status"),
                    short_name="s",
                    descr="Print the drive status",
                    options=(device,),
                    options_parse=self.options_parse,
                ),
                OptionCommand(
                    "tag",
                    self.handler("tag"),
                    descr="Attach labels to a drive",
                    options=(
                        Option("label", "l", "Label to attach", "LABEL", OptionFlag.REQUIRED, 2),
                        Option("value", "v", "Optional value", "VALUE", OptionFlag.OPTIONAL, 1),
                        Option("force", "f", "Overwrite existing labels"),
                        Option("notes", "n", "Free-form notes", "NOTE"),
                        Option("secret", None, "Hidden switch", flags=OptionFlag.HIDDEN),
                    ),
                    options_parse=self.options_parse,
                ),
                NamespaceCommand(
                    "manage",
                    self.handler("manage"),
                    short_name="m",
                    descr="Manage objects",
                    long_descr="Manage user and admin objects stored on the drive",
                    namespace=Namespace("object", "o", (
                        NamespaceEntry("user", "Regular user", (
                            Option("name", "n", "User name", "NAME", OptionFlag.REQUIRED, 1),
                        )),
                        NamespaceEntry("admin", "Administrator", (
                            Option("name", "n", "Admin name", "NAME", OptionFlag.REQUIRED, 1),
                            Option("force", "f", "Skip confirmation"),
                        )),
                    )),
                    namespace_opts_parse=self.namespace_opts_parse,
                ),
                OptionCommand(
                    "lock",
                    self.handler("lock"),
                    descr="Lock the drive",
                    flags=CommandFlag.SU_REQUIRED,
                    options=(device,),
                    options_parse=self.options_parse,
                ),
                PlainCommand("debug", self.handler("debug"), descr="Debug dump", flags=CommandFlag.HIDDEN),
                PlainCommand(
                    "experimental",
                    self.handler("experimental"),
                    descr="Experimental feature",
                    configure=self.configure,
                ),
                PlainCommand("version", self.handler("version"), short_name="V", descr="Print version"),
            ),
            title="Drive management tool",
            man="sedcli",
            journal=self.journal,
            syslog=(self.messages,),
            status=status if status is not None else StatusConfig(),
            privileged=lambda: privileged,
            shell=shell,
            colorful=False,
            stdout=self.stdout,
            stderr=self.stderr,
        )

    def cleanup(self):
        self.directory.cleanup()

    def handler(self, name):
        def handle():
            self.handled.append(name)
            return self.result
        return handle

    def configure(self):
        self.configured += 1
        return -1

    def options_parse(self, option, values):
        self.calls.append((option, values))
        return self.parse_result

    def namespace_opts_parse(self, entry, option, values):
        self.calls.append((entry, option, values))
        return self.parse_result

    def command(self, name):
        for command in self.app.commands:
            if command.name == name:
                return command
        raise KeyError(name)

    def journal_lines(self):
        try:
            with open(self.journal) as stream:
                return stream.read().splitlines()
        except FileNotFoundError:
            return []
