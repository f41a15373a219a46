r"""
sedcli command model: options, namespaces and command variants.

Overview
- Specs
  • Option: a named switch (--long/-s) that optionally takes value tokens.
  • NamespaceEntry: a named sub-entry (e.g. an object kind) owning its own option schema.
  • Namespace: the switch that selects an entry (--object <NAME>) plus its entries.
  • Command variants (closed set, dispatched with a single match):
      – PlainCommand: takes no options at all.
      – OptionCommand: owns an option schema and an options_parse callback.
      – NamespaceCommand: owns a namespace and a namespace_opts_parse callback.
- The application table that bundles commands with program metadata lives in
  sedcli.app.

Introspection & representation
- SpecType metaclass provides stable __repr__/__rich_repr__ and exposes every field
  listed in __introspectable__ as a read-only property backed by guarded storage.

Validation highlights
- long names must start with an ASCII letter; short names are a single ASCII letter.
- long names are unique within one schema; entry names are unique within a namespace.
- max_count (and its two split knobs) must be non-negative integers.

Mutation
- The model is built once; the only later mutation is Command.hide(), used by the
  configure pass. Nothing ever un-hides a command.
"""
import enum
import functools
import operator
import re
from collections.abc import Iterable

from rich.text import Text

from .utils import *


class OptionFlag(enum.IntFlag):
    """
    option behavior bits.

    - REQUIRED: the option must appear at least once.
    - OPTIONAL: the option's value is optional (help renders it as [<VALUE>]).
    - HIDDEN:   the option is left out of help listings.
    """
    REQUIRED = enum.auto()
    OPTIONAL = enum.auto()
    HIDDEN = enum.auto()


class CommandFlag(enum.IntFlag):
    """
    command behavior bits.

    - SU_REQUIRED: the command must be run with an effective uid of 0.
    - HIDDEN:      the command is left out of help listings (still runnable).
    """
    SU_REQUIRED = enum.auto()
    HIDDEN = enum.auto()


class SpecType(type):
    """
    Metaclass that turns specs into introspectable, read-only records.

    Responsibilities
    - Derive __typename__ from the class name (camel-case split with hyphens).
    - Expose every name in __introspectable__ as a read-only view over '-<name>'.
    - Provide stable __repr__/__rich_repr__ implementations for diagnostics.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: view(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return "%s(%s)" % (
                type(self).__typename__,
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            )
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_name(cls, name, /, *, field="long name"):
    if not isinstance(name, str):
        raise TypeError(f"{cls.__typename__} {field} must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} {field} cannot be empty")
    elif not re.fullmatch(r"[A-Za-z][\w-]*", name):
        raise ValueError(f"{cls.__typename__} {field} must start with a letter ({name!r})")
    return name


def _sanitize_short_name(cls, short_name, /):
    if short_name is None:
        return None
    if not isinstance(short_name, str):
        raise TypeError(f"{cls.__typename__} short name must be a string or None")
    elif not re.fullmatch(r"[A-Za-z]", short_name):
        raise ValueError(f"{cls.__typename__} short name must be a single letter ({short_name!r})")
    return short_name


def _sanitize_text(cls, text, /, *, field="descr"):
    if text is None:
        return None
    if not isinstance(text, str | Text):
        raise TypeError(f"{cls.__typename__} {field!r} must be a string")
    elif isinstance(text, str) and not (text := text.strip()):
        raise ValueError(f"{cls.__typename__} {field!r} cannot be empty")
    return text


def _sanitize_count(cls, count, /, *, field="max count"):
    if isinstance(count, bool) or not isinstance(count, int):
        raise TypeError(f"{cls.__typename__} {field} must be an integer")
    elif count < 0:
        raise ValueError(f"{cls.__typename__} {field} cannot be negative")
    return count


def _sanitize_options(cls, options, /):
    if not isinstance(options, Iterable):
        raise TypeError(f"{cls.__typename__} options must be an iterable of options")
    names = set()
    for option in (options := tuple(options)):
        if not isinstance(option, Option):
            raise TypeError(f"{cls.__typename__} options must be option instances")
        elif option.long_name in names:
            raise ValueError(f"{cls.__typename__} option {option.long_name!r} is declared twice")
        names.add(option.long_name)
    return options


def _sanitize_callback(cls, callback, /, *, field, optional=False):
    if callback is None and optional:
        return None
    if not callable(callback):
        raise TypeError(f"{cls.__typename__} {field} must be callable")
    return callback


class Option(StorageGuard, metaclass=SpecType):
    """
    A named switch that may carry value tokens.

    Fields
    - long_name:  the --name key, unique within its schema.
    - short_name: single letter for the -x form, or None.
    - descr:      help text.
    - metavar:    value label; its presence means the option takes value(s).
    - flags:      OptionFlag bits.
    - max_count:  compatibility knob; when nonzero it bounds both how many times the
                  option may appear and how many values one occurrence may consume.
    - max_occurrences / max_values: the two limits max_count feeds. Each can be set
                  on its own; when omitted they both follow max_count.
    """
    __introspectable__ = (
        "long_name",
        "short_name",
        "descr",
        "metavar",
        "flags",
        "max_count",
        "max_occurrences",
        "max_values",
    )

    def __new__(
            cls,
            long_name,
            short_name=None,
            descr=None,
            metavar=None,
            flags=OptionFlag(0),
            max_count=0,
            *,
            max_occurrences=Unset,
            max_values=Unset,
    ):
        long_name = _sanitize_name(cls, long_name)
        short_name = _sanitize_short_name(cls, short_name)
        descr = _sanitize_text(cls, descr)
        metavar = _sanitize_text(cls, metavar, field="metavar")
        max_count = _sanitize_count(cls, max_count)
        max_occurrences = _sanitize_count(cls, nullify(max_occurrences, max_count), field="max occurrences")
        max_values = _sanitize_count(cls, nullify(max_values, max_count), field="max values")

        with super().__new__(cls) as self:
            setattr(self, "-long_name", long_name)
            setattr(self, "-short_name", short_name)
            setattr(self, "-descr", descr)
            setattr(self, "-metavar", metavar)
            setattr(self, "-flags", OptionFlag(flags))
            setattr(self, "-max_count", max_count)
            setattr(self, "-max_occurrences", max_occurrences)
            setattr(self, "-max_values", max_values)
        return self

    @property
    def required(self):
        return OptionFlag.REQUIRED in self.flags

    @property
    def optional(self):
        return OptionFlag.OPTIONAL in self.flags

    @property
    def hidden(self):
        return OptionFlag.HIDDEN in self.flags

    @property
    def takes_values(self):
        return self.metavar is not None

    @property
    def label(self):
        """
        '-x/--name' or '--name', as used in error messages.
        """
        if self.short_name:
            return "-%s/--%s" % (self.short_name, self.long_name)
        return "--%s" % self.long_name


class NamespaceEntry(StorageGuard, metaclass=SpecType):
    """
    A named sub-entry of a namespace with its own, independent option schema.

    The name is matched verbatim against a positional token (no dashes).
    """
    __introspectable__ = ("name", "descr", "options")

    def __new__(cls, name, descr=None, options=()):
        name = _sanitize_name(cls, name, field="name")
        descr = _sanitize_text(cls, descr)
        options = _sanitize_options(cls, options)

        with super().__new__(cls) as self:
            setattr(self, "-name", name)
            setattr(self, "-descr", descr)
            setattr(self, "-options", options)
        return self


class Namespace(StorageGuard, metaclass=SpecType):
    """
    The selector switch of a namespaced command and its (non-empty) entries.
    """
    __introspectable__ = ("long_name", "short_name", "entries")

    def __new__(cls, long_name, short_name=None, entries=()):
        long_name = _sanitize_name(cls, long_name)
        short_name = _sanitize_short_name(cls, short_name)

        if not isinstance(entries, Iterable):
            raise TypeError(f"{cls.__typename__} entries must be an iterable of entries")
        if not (entries := tuple(entries)):
            raise ValueError(f"{cls.__typename__} must declare at least one entry")
        names = set()
        for entry in entries:
            if not isinstance(entry, NamespaceEntry):
                raise TypeError(f"{cls.__typename__} entries must be namespace-entry instances")
            elif entry.name in names:
                raise ValueError(f"{cls.__typename__} entry {entry.name!r} is declared twice")
            names.add(entry.name)

        with super().__new__(cls) as self:
            setattr(self, "-long_name", long_name)
            setattr(self, "-short_name", short_name)
            setattr(self, "-entries", entries)
        return self


class Command(StorageGuard, metaclass=SpecType):
    """
    Base of the closed set of command variants.

    Shared fields
    - name / short_name: the --name and -x selectors.
    - descr / long_descr: one-line and long help text.
    - flags: CommandFlag bits.
    - handler: () -> int, the command body; its result is the exit status.
    - configure: optional () -> int, run once before resolution; a negative result
      hides the command.
    - help: optional (app, command) -> None, replaces the built-in help renderer.

    Use PlainCommand, OptionCommand or NamespaceCommand; Command itself is abstract.
    """
    __introspectable__ = (
        "name",
        "short_name",
        "descr",
        "long_descr",
        "flags",
        "handler",
        "configure",
        "help",
    )

    def __new__(
            cls,
            name,
            /,
            handler,
            *,
            short_name=None,
            descr=None,
            long_descr=None,
            flags=CommandFlag(0),
            configure=None,
            help=None,
            **fields,
    ):
        if cls is Command:
            raise TypeError("type 'command' is abstract; use one of its variants")

        metadata = {
            "name": _sanitize_name(cls, name, field="name"),
            "short_name": _sanitize_short_name(cls, short_name),
            "descr": _sanitize_text(cls, descr),
            "long_descr": _sanitize_text(cls, long_descr, field="long_descr"),
            "flags": CommandFlag(flags),
            "handler": _sanitize_callback(cls, handler, field="handler"),
            "configure": _sanitize_callback(cls, configure, field="configure", optional=True),
            "help": _sanitize_callback(cls, help, field="help", optional=True),
        }

        if unknown := fields.keys() - set(cls.__introspectable__):
            raise TypeError(f"{cls.__typename__} got unexpected fields: {', '.join(sorted(unknown))}")

        with super().__new__(cls) as self:
            for key, value in (metadata | fields).items():
                setattr(self, "-" + key, value)
        return self

    @property
    def hidden(self):
        return CommandFlag.HIDDEN in self.flags

    @property
    def su_required(self):
        return CommandFlag.SU_REQUIRED in self.flags

    @property
    def is_version(self):
        """
        True for the version command, which is never audit-logged.
        """
        return self.name == "version" or self.short_name == "V"

    def hide(self):
        """
        Add the HIDDEN flag. There is no inverse.
        """
        with self._rebuild():
            setattr(self, "-flags", self.flags | CommandFlag.HIDDEN)


class PlainCommand(Command):
    """
    A command without options: resolution ends at the selector and the handler runs.
    """


class OptionCommand(Command):
    """
    A command owning an option schema; each parsed option is handed to
    options_parse(option_name, values) -> int.
    """
    __introspectable__ = Command.__introspectable__ + ("options", "options_parse")

    def __new__(cls, name, /, handler, *, options, options_parse, **metadata):
        return super().__new__(
            cls,
            name,
            handler,
            options=_sanitize_options(cls, options),
            options_parse=_sanitize_callback(cls, options_parse, field="options_parse"),
            **metadata,
        )


class NamespaceCommand(Command):
    """
    A command selecting a namespace entry first; each parsed option is handed to
    namespace_opts_parse(entry_name, option_name, values) -> int.
    """
    __introspectable__ = Command.__introspectable__ + ("namespace", "namespace_opts_parse")

    def __new__(cls, name, /, handler, *, namespace, namespace_opts_parse, **metadata):
        if not isinstance(namespace, Namespace):
            raise TypeError(f"{cls.__typename__} namespace must be a namespace instance")
        return super().__new__(
            cls,
            name,
            handler,
            namespace=namespace,
            namespace_opts_parse=_sanitize_callback(cls, namespace_opts_parse, field="namespace_opts_parse"),
            **metadata,
        )


__all__ = (
    "OptionFlag",
    "CommandFlag",
    "Option",
    "NamespaceEntry",
    "Namespace",
    "Command",
    "PlainCommand",
    "OptionCommand",
    "NamespaceCommand",
)
