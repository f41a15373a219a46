"""
Token classifier: tell short options, long options and everything else apart.

Rules
- short option: '-' followed by exactly one ASCII letter ('-d').
- long option:  '--' followed by an ASCII letter, then anything ('--device').
  The name is the remainder, compared verbatim and case-sensitively; there is
  no prefix matching and no '--name=value' splitting.
- anything else is malformed: '', '-', '--', '-5', '--5', '-dv', 'value'.

Positional values (device paths, entry names, option values) classify as
malformed too; callers decide whether a malformed token is acceptable where
it appears.
"""
import enum
from typing import NamedTuple

MAX_NAME_LENGTH = 255
"""
names are compared on at most this many characters.
"""


class TokenKind(enum.Enum):
    SHORT = "short"
    LONG = "long"
    MALFORMED = "malformed"


class Token(NamedTuple):
    kind: TokenKind
    name: str | None = None


def _is_letter(char):
    return ("a" <= char <= "z") or ("A" <= char <= "Z")


def classify(token):
    """
    classify a raw token; pure, no state.

    returns a Token whose name is the option key (letter or long name) for
    SHORT/LONG and None for MALFORMED.
    """
    if not isinstance(token, str) or len(token) < 2 or token[0] != "-":
        return Token(TokenKind.MALFORMED)

    if _is_letter(token[1]):
        if len(token) == 2:
            return Token(TokenKind.SHORT, token[1])
        return Token(TokenKind.MALFORMED)

    if token[1] == "-" and len(token) > 2 and _is_letter(token[2]):
        return Token(TokenKind.LONG, token[2:])

    return Token(TokenKind.MALFORMED)


def is_option(token):
    return classify(token).kind is not TokenKind.MALFORMED


def matches(token, long_name, short_name=None):
    """
    True when token selects the switch named long_name / short_name.

    a short_name of None never matches a short option.
    """
    kind, name = classify(token)
    if kind is TokenKind.SHORT:
        return short_name is not None and name == short_name
    if kind is TokenKind.LONG:
        return name[:MAX_NAME_LENGTH] == long_name[:MAX_NAME_LENGTH]
    return False


def is_help(token):
    return matches(token, "help", "H")


def is_version(token):
    return matches(token, "version", "V")


def help_position(tokens):
    """
    index of the first help alias at or after the third token, or -1.
    """
    for index in range(2, len(tokens)):
        if is_help(tokens[index]):
            return index
    return -1


def count_values(tokens):
    """
    number of leading tokens before the next option token.
    """
    count = 0
    for token in tokens:
        if is_option(token):
            break
        count += 1
    return count


__all__ = (
    "MAX_NAME_LENGTH",
    "TokenKind",
    "Token",
    "classify",
    "is_option",
    "matches",
    "is_help",
    "is_version",
    "help_position",
    "count_values",
)
