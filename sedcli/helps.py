"""
Help rendering for the top level, for commands and for namespaced commands.

Hidden commands and hidden options never appear here. A command can bring its
own renderer through its `help` field; it is then called as help(app, command).

Palette keys (override with __styles__ in __main__)
- title, usage-label, program-name, command-name, option-name, metavar,
  entry-name, description, footer
"""
from rich.text import Text

from .specs import NamespaceCommand, OptionCommand
from .utils import styles

PADDING = "   "


def _palette():
    return styles({
        "title": "bold",
        "usage-label": "bold",
        "program-name": "bold",
        "command-name": "bold cyan",
        "option-name": "cyan",
        "metavar": "yellow",
        "entry-name": "bold cyan",
        "description": "",
        "footer": "dim",
    })


def _short(short_name):
    return "-%s" % short_name if short_name else ""


def _bracketed(short_name, long_name):
    if short_name:
        return "--%s (-%s)" % (long_name, short_name)
    return "--%s" % long_name


def _option_form(option):
    if option.metavar is None:
        return "--%s" % option.long_name
    if option.optional:
        return "--%s [<%s>]" % (option.long_name, option.metavar)
    return "--%s <%s>" % (option.long_name, option.metavar)


def render_options(app, options):
    """
    one line per visible option: short name, long form with metavar, description.
    """
    reporter, palette = app.reporter, _palette()
    for option in options:
        if option.hidden:
            continue
        reporter.info(Text.assemble(
            PADDING,
            reporter.text("%-4s" % _short(option.short_name), palette["option-name"]),
            reporter.text("%-38s" % _option_form(option), palette["option-name"]),
            reporter.text(option.descr or "", palette["description"]),
        ))


def render_help(app):
    """
    top-level help: banner, usage, visible commands and pointers.
    """
    reporter, palette = app.reporter, _palette()

    reporter.info(reporter.text(app.title, palette["title"]))
    reporter.info("")
    reporter.info(Text.assemble(
        reporter.text("Usage: ", palette["usage-label"]),
        reporter.text(app.prog, palette["program-name"]),
        " ",
        app.info,
    ))
    reporter.info("")
    reporter.info("The '<device>' must be a block device (e.g. /dev/nvme0n1).")
    reporter.info("")
    reporter.info("Available commands:")

    for command in app.commands:
        if command.hidden:
            continue
        if command.short_name:
            name = "%-4s--%-25s" % (_short(command.short_name), command.name)
        else:
            name = "--%-25s" % command.name
        reporter.info(Text.assemble(
            PADDING,
            reporter.text(name, palette["command-name"]),
            reporter.text(command.descr or "", palette["description"]),
        ))

    reporter.info("")
    reporter.info(reporter.text(
        "See '%s <command> --help' for more information on a specific command.\ne.g.\n%s%s --%s --help" % (
            app.prog, PADDING, app.prog, app.commands[0].name
        ),
        palette["footer"],
    ))
    if app.man is not None:
        reporter.info(reporter.text("For more information, please refer to manpage (man %s)." % app.man, palette["footer"]))
    else:
        reporter.info(reporter.text("For more information, please refer to manpage.", palette["footer"]))


def _render_header(app, command):
    app.reporter.info("%s%s" % (PADDING, command.long_descr or command.descr or ""))
    app.reporter.info("")


def _render_namespace_help(app, command):
    reporter, palette = app.reporter, _palette()
    namespace = command.namespace

    reporter.info(Text.assemble(
        reporter.text("Usage: ", palette["usage-label"]),
        reporter.text(app.prog, palette["program-name"]),
        " --%s --%s <NAME>" % (command.name, namespace.long_name),
    ))
    reporter.info("")
    _render_header(app, command)

    command_name = _bracketed(command.short_name, command.name)
    option_name = _bracketed(namespace.short_name, namespace.long_name)

    reporter.info("Valid values of NAME are:")
    for entry in namespace.entries:
        reporter.info(Text.assemble(
            PADDING,
            reporter.text(entry.name, palette["entry-name"]),
            " - ",
            reporter.text(entry.descr or "", palette["description"]),
        ))
    reporter.info("")

    for index, entry in enumerate(namespace.entries):
        reporter.info("Options that are valid with %s %s %s are:" % (command_name, option_name, entry.name))
        render_options(app, entry.options)
        if index + 1 < len(namespace.entries):
            reporter.info("")


def render_command_help(app, command):
    """
    help for one command: usage with required options, description, options.
    """
    if command.help is not None:
        command.help(app, command)
        return

    if isinstance(command, NamespaceCommand):
        _render_namespace_help(app, command)
        return

    reporter, palette = app.reporter, _palette()
    usage = Text.assemble(
        reporter.text("Usage: ", palette["usage-label"]),
        reporter.text(app.prog, palette["program-name"]),
        " --%s" % command.name,
    )

    visible = ()
    if isinstance(command, OptionCommand):
        visible = tuple(option for option in command.options if not option.hidden)
        for option in visible:
            if option.required:
                usage.append(" --%s" % option.long_name)
                if option.metavar is not None:
                    usage.append(" [<%s>]" % option.metavar if option.optional else " <%s>" % option.metavar)
        if not all(option.required for option in visible):
            usage.append(" [option...]")

    reporter.info(usage)
    reporter.info("")
    _render_header(app, command)

    if visible:
        reporter.info("Options that are valid with %s are:" % _bracketed(command.short_name, command.name))
        render_options(app, command.options)


__all__ = (
    "render_options",
    "render_help",
    "render_command_help",
)
