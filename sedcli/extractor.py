"""
Option validator and extractor.

Pass 1 (audit) looks at every option token before any value is taken:
- a REQUIRED option must occur at least once;
- an option with max_occurrences must not occur more often than that.

Pass 2 (extract) walks the tokens left to right:
- each token must be a well-formed option of the active schema;
- an option with a metavar takes every following token up to the next option;
  with max_values set, that run must hold at most max_values tokens, and at
  least one when the option is REQUIRED or OPTIONAL;
- the values are handed to the command's callback, a nonzero result stops
  the walk.
"""
import logging

from .faults import *
from .specs import NamespaceCommand, OptionCommand
from .tokens import TokenKind, classify, count_values, matches

log = logging.getLogger(__name__)


def find_option(options, token):
    for option in options:
        if matches(token, option.long_name, option.short_name):
            return option
    return None


def audit(options, tokens):
    for option in options:
        count = sum(1 for token in tokens if matches(token, option.long_name, option.short_name))

        if option.required and not count:
            raise MissingRequiredOptionError("Missing required option %s." % option.label)

        if option.max_occurrences and count > option.max_occurrences:
            raise OptionRepeatedError("Option supplied too many times %s." % option.label)


def _deliver(resolution, option, values):
    match resolution.command:
        case OptionCommand(options_parse=parse):
            return parse(option.long_name, values)
        case NamespaceCommand(namespace_opts_parse=parse) if resolution.entry is not None:
            return parse(resolution.entry.name, option.long_name, values)
        case _:
            raise InternalError("Internal error.", hint=None)


def extract(resolution, argv):
    """
    validate argv[resolution.offset:] against the active schema and feed the callbacks.
    """
    options = resolution.options
    tokens = list(argv[resolution.offset:])

    audit(options, tokens)

    index = 0
    while index < len(tokens):
        token = tokens[index]
        if classify(token).kind is TokenKind.MALFORMED:
            raise InvalidTokenFormatError("Invalid format %s." % token, token=token)

        if (option := find_option(options, token)) is None:
            raise UnrecognizedOptionError("Unrecognized option %s." % token, token=token)

        values = ()
        if option.takes_values:
            count = count_values(tokens[index + 1:])
            if option.max_values:
                if count == 0 and (option.required or option.optional):
                    raise InvalidArgumentCountError("Invalid number of arguments for %s." % token, token=token)
                if count > option.max_values:
                    raise InvalidArgumentCountError("Invalid number of arguments for %s." % token, token=token)
            values = tuple(tokens[index + 1:index + 1 + count])

        log.debug("option --%s receives %r", option.long_name, values)
        if _deliver(resolution, option, values) != 0:
            raise OptionHandlerError("Error during options handling.")

        index += 1 + len(values)


__all__ = (
    "find_option",
    "audit",
    "extract",
)
