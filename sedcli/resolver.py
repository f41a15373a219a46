"""
Resolver: match the invocation against the command table.

Order of checks (each failure is a distinct fault):
1. a command selector exists (argv[1]);
2. the selector is a well-formed short or long option;
3. the selector names a command (or is a help alias → top-level help);
4. every command's configure callback runs once;
5. a help alias anywhere from argv[2] on → command help, done;
6. the privilege requirement of the command holds;
7. for namespaced commands: the namespace switch (argv[2]), the entry name
   (argv[3]) and a matching entry.

The result names the active option schema and where option tokens start.
"""
import logging
from typing import NamedTuple

from .faults import *
from .helps import render_command_help, render_help
from .specs import Command, NamespaceCommand, NamespaceEntry, Option, OptionCommand
from .tokens import MAX_NAME_LENGTH, TokenKind, classify, help_position, is_help, matches

log = logging.getLogger(__name__)


class Resolution(NamedTuple):
    """
    - command: the matched command (None for top-level help).
    - entry: the matched namespace entry, for namespaced commands.
    - options: the active option schema, or None when no option parsing applies.
    - offset: index of the first option token in argv.
    - help: True when the invocation was fully served by rendering help.
    """
    command: Command | None
    entry: NamespaceEntry | None = None
    options: tuple[Option, ...] | None = None
    offset: int = 2
    help: bool = False


def find_command(commands, token):
    for command in commands:
        if matches(token, command.name, command.short_name):
            return command
    return None


def find_entry(namespace, name):
    for entry in namespace.entries:
        if name[:MAX_NAME_LENGTH] == entry.name[:MAX_NAME_LENGTH]:
            return entry
    return None


def resolve(app, argv):
    if len(argv) < 2:
        raise MissingCommandError("No command given.")

    selector = argv[1]
    if classify(selector).kind is TokenKind.MALFORMED:
        raise UnrecognizedError("Unrecognized command %s." % selector, token=selector)

    if (command := find_command(app.commands, selector)) is None:
        if is_help(selector):
            render_help(app)
            return Resolution(None, help=True)
        raise UnrecognizedCommandError("Unrecognized command %s." % selector, token=selector)

    app.configure()

    if len(argv) >= 3 and help_position(argv) != -1:
        if not command.hidden:
            render_command_help(app, command)
        return Resolution(command, help=True)

    if command.su_required and not app.privileged():
        raise InsufficientPrivilegeError("Must be run as root.")

    log.debug("resolved %r to command --%s", selector, command.name)

    match command:
        case OptionCommand(options=options):
            return Resolution(command, options=options, offset=2)
        case NamespaceCommand(namespace=namespace):
            if len(argv) < 3:
                raise MissingNamespaceFlagError("Missing namespace option.")
            if len(argv) < 4:
                raise MissingNamespaceNameError("Missing namespace name.")
            if not matches(argv[2], namespace.long_name, namespace.short_name):
                raise UnrecognizedNamespaceFlagError("Unrecognized option %s." % argv[2], token=argv[2])
            if (entry := find_entry(namespace, argv[3])) is None:
                raise UnrecognizedNamespaceEntryError("Unrecognized namespace entry %s." % argv[3], token=argv[3])
            return Resolution(command, entry=entry, options=entry.options, offset=4)
        case _:
            return Resolution(command)


__all__ = (
    "Resolution",
    "find_command",
    "find_entry",
    "resolve",
)
