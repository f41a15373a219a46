"""
sedcli faults (parse errors) and rendering.

Scope
- FaultCode: stable numeric identifiers for every user-facing parse error, grouped
  by domain so logs and searches stay predictable.
- CommandException: base type carrying message + options; knows how to render
  itself (one error line plus one hint line) and how to surface itself.
- trigger(): central entry point that merges runtime options into a fault and
  surfaces it.

Surfacing
- shell mode (the CLI default): the fault is printed on stderr and mirrored into the
  journal, the "Try `<prog> --help'" hint follows on stdout, and FAILURE is returned.
- non-shell mode (embedders, tests): the fault is raised.

Handler results are never faults: they flow to the status decoder and the exit
status unchanged.
"""
from enum import IntEnum
from types import MappingProxyType

from rich.text import Text

from .utils import Unset, styles

SUCCESS = 0
FAILURE = 1


def _palette():
    return styles({
        "prog-name": "bold",
        "error-message": "bold red",
        "hint": "italic",
    })


class FaultCode(IntEnum):
    """
    canonical fault codes used across the cli (stable identifiers).

    grouping (by high-level domain)
    - routing (111xx)
      • MISSING_COMMAND, UNRECOGNIZED, UNRECOGNIZED_COMMAND, INSUFFICIENT_PRIVILEGE
    - namespaces (112xx)
      • MISSING_NAMESPACE_FLAG, MISSING_NAMESPACE_NAME, UNRECOGNIZED_NAMESPACE_FLAG,
        UNRECOGNIZED_NAMESPACE_ENTRY
    - options (113xx)
      • MISSING_REQUIRED_OPTION, OPTION_REPEATED_TOO_MANY_TIMES, INVALID_TOKEN_FORMAT,
        UNRECOGNIZED_OPTION, INVALID_ARGUMENT_COUNT
    - delegated (114xx)
      • OPTION_HANDLER_FAILED, INTERNAL_ERROR
    """
    # --- routing errors ---
    MISSING_COMMAND                 = 11101
    UNRECOGNIZED                    = 11102
    UNRECOGNIZED_COMMAND            = 11103
    INSUFFICIENT_PRIVILEGE          = 11104

    # --- namespace errors ---
    MISSING_NAMESPACE_FLAG          = 11201
    MISSING_NAMESPACE_NAME          = 11202
    UNRECOGNIZED_NAMESPACE_FLAG     = 11203
    UNRECOGNIZED_NAMESPACE_ENTRY    = 11204

    # --- option errors ---
    MISSING_REQUIRED_OPTION         = 11301
    OPTION_REPEATED_TOO_MANY_TIMES  = 11302
    INVALID_TOKEN_FORMAT            = 11303
    UNRECOGNIZED_OPTION             = 11304
    INVALID_ARGUMENT_COUNT          = 11305

    # --- delegated errors ---
    OPTION_HANDLER_FAILED           = 11401
    INTERNAL_ERROR                  = 11402

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__ to
        override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class CommandException(Exception):
    """
    A parse error with a stable code, a one-sentence message and a hint.

    Options (all optional at construction, merged in by trigger())
    - code: FaultCode
    - hint: str | None; when absent the top-level help pointer is used, None drops it
    - app: the App being dispatched (program label, reporter, shell mode)
    - token: the offending token, when there is one
    """
    code = Unset

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType({"code": type(self).code} | options)
        self.code = self.options["code"]

    def hint(self, prog):
        if "hint" in self.options:
            return self.options["hint"]
        return "Try `%s --help' for more information." % prog

    def render(self, reporter, prog):
        """
        the error line: "<prog>: <message>".
        """
        palette = _palette()
        return Text.assemble(
            reporter.text(prog, palette["prog-name"]),
            ": ",
            reporter.text(self.message, palette["error-message"]),
        )

    def render_hint(self, reporter, prog):
        if (hint := self.hint(prog)) is None:
            return None
        return reporter.text(hint, _palette()["hint"])

    def __trigger__(self):
        app = self.options["app"]
        if not app.shell:
            raise self from None
        prog = app.prog
        app.reporter.error(
            self.render(app.reporter, prog),
            record="%s [fault %s]" % (self.message, self.code.normalize()),
        )
        if (hint := self.render_hint(app.reporter, prog)) is not None:
            app.reporter.info(hint)
        return FAILURE

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        fault = type(self)(self.message, **{**self.options, **overrides})
        return fault.with_traceback(self.__traceback__)


class MissingCommandError(CommandException):
    code = FaultCode.MISSING_COMMAND
class UnrecognizedError(CommandException):
    code = FaultCode.UNRECOGNIZED
class UnrecognizedCommandError(CommandException):
    code = FaultCode.UNRECOGNIZED_COMMAND
class InsufficientPrivilegeError(CommandException):
    code = FaultCode.INSUFFICIENT_PRIVILEGE
class MissingNamespaceFlagError(CommandException):
    code = FaultCode.MISSING_NAMESPACE_FLAG
class MissingNamespaceNameError(CommandException):
    code = FaultCode.MISSING_NAMESPACE_NAME
class UnrecognizedNamespaceFlagError(CommandException):
    code = FaultCode.UNRECOGNIZED_NAMESPACE_FLAG
class UnrecognizedNamespaceEntryError(CommandException):
    code = FaultCode.UNRECOGNIZED_NAMESPACE_ENTRY
class MissingRequiredOptionError(CommandException):
    code = FaultCode.MISSING_REQUIRED_OPTION
class OptionRepeatedError(CommandException):
    code = FaultCode.OPTION_REPEATED_TOO_MANY_TIMES
class InvalidTokenFormatError(CommandException):
    code = FaultCode.INVALID_TOKEN_FORMAT
class UnrecognizedOptionError(CommandException):
    code = FaultCode.UNRECOGNIZED_OPTION
class InvalidArgumentCountError(CommandException):
    code = FaultCode.INVALID_ARGUMENT_COUNT
class OptionHandlerError(CommandException):
    code = FaultCode.OPTION_HANDLER_FAILED
class InternalError(CommandException):
    code = FaultCode.INTERNAL_ERROR


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options and return the exit status.

    contract
    - fault must provide __trigger__ and __replace__ methods (see CommandException).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode the fault is rendered and FAILURE is returned; otherwise it is raised.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    return fault.__replace__(**options).__trigger__()


__all__ = (
    "SUCCESS",
    "FAILURE",
    "FaultCode",
    "CommandException",
    "MissingCommandError",
    "UnrecognizedError",
    "UnrecognizedCommandError",
    "InsufficientPrivilegeError",
    "MissingNamespaceFlagError",
    "MissingNamespaceNameError",
    "UnrecognizedNamespaceFlagError",
    "UnrecognizedNamespaceEntryError",
    "MissingRequiredOptionError",
    "OptionRepeatedError",
    "InvalidTokenFormatError",
    "UnrecognizedOptionError",
    "InvalidArgumentCountError",
    "OptionHandlerError",
    "InternalError",
    "trigger",
)
