"""
Identifier rules for command and parameter names.

A valid name starts with an ASCII letter or an underscore and continues with
ASCII letters, digits or underscores. Empty or blank names are reported as
EmptyNameError before the pattern is checked, so callers can tell the two
failure kinds apart.
"""
import re

from .faults import EmptyNameError, InvalidNameError, FaultCode

_PATTERN = re.compile(r"[_a-zA-Z][_a-zA-Z0-9]*")


def is_valid(name, /):
    """
    return whether name is a string that satisfies the identifier rules.
    """
    return isinstance(name, str) and _PATTERN.fullmatch(name) is not None


def assure_valid(name, /, *, kind="name"):
    """
    raise unless name satisfies the identifier rules.

    parameters
    - name: candidate identifier.
    - kind: label used in messages ("command name", "parameter name", ...).

    raises
    - TypeError: name is not a string.
    - EmptyNameError: name is empty or only whitespace.
    - InvalidNameError: name does not match [_a-zA-Z][_a-zA-Z0-9]*.
    """
    if not isinstance(name, str):
        raise TypeError(f"{kind} must be a string")
    if not name.strip():
        raise EmptyNameError(
            "%s cannot be empty" % kind,
            title="empty name",
            code=FaultCode.EMPTY_NAME,
            hint="use a letter or an underscore followed by letters, digits or underscores",
            name=name,
        )
    if not _PATTERN.fullmatch(name):
        raise InvalidNameError(
            "%s %r is not valid" % (kind, name),
            title="invalid name",
            code=FaultCode.INVALID_NAME,
            hint="use a letter or an underscore followed by letters, digits or underscores",
            name=name,
        )


__all__ = (
    "is_valid",
    "assure_valid",
)
