"""
commandtools faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for all user-facing issues
  (errors and warnings). Codes are grouped by domain to keep copy consistent
  and make logs/searches predictable.
- CommandException / CommandWarning: base types that carry message + options and
  know how to render themselves in a friendly, lowercased, and actionable way.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

Taxonomy
- FormatError: malformed input line (unterminated quote or array, illegal escape)
  or malformed substitution template.
- InvalidNameError / EmptyNameError: identifier rules for command and parameter names.
- CommandNotSupportedError: no command name given, or no registered command matches it.
- ParameterNotFoundError: a supplied name is not declared, or a positional value has no slot.
- ParameterTypeMismatchError: a token or a default value does not fit the declared type.
- DuplicateParameterError: a parameter is bound twice, or declared twice on one command.
- MissingParameterError: a parameter ends up with neither a bound value nor a default.
- InvalidStateError: a single-use builder is reused after being finalized.
- DelegatedCommandError: a command body raised; reported by the loop, never propagated.

Integration
- Dispatch raises these exceptions directly (fail fast, nothing partial is exposed).
- The command loop catches them and renders them via rich (see Shell).
"""
import copy
import inspect
import sys
import warnings
from abc import ABC
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the engine (stable identifiers).

    grouping (by high-level domain)
    - tokenizing (110xx)
      • UNTERMINATED_STRING, ILLEGAL_ESCAPE, UNTERMINATED_ARRAY, MALFORMED_TEMPLATE
    - naming (1102x)
      • EMPTY_NAME, INVALID_NAME
    - routing (1110x)
      • MISSING_COMMAND, UNSUPPORTED_COMMAND
    - binding (1111x)
      • UNKNOWN_PARAMETER, UNEXPECTED_POSITIONAL, TYPE_MISMATCH, DUPLICATE_PARAMETER,
        MISSING_PARAMETER, MISSING_VALUE
    - state (1130x)
      • INVALID_STATE
    - delegated errors (11131)
      • DELEGATED_ERROR
    - warnings (12xxx)
      • UNKNOWN_IDENTIFIER, LOAD_FAILURE
    """
    # --- tokenizing errors (110xx) ---
    UNTERMINATED_STRING         = 11001
    ILLEGAL_ESCAPE              = 11002
    UNTERMINATED_ARRAY          = 11003
    MALFORMED_TEMPLATE          = 11004

    # --- naming errors (1102x) ---
    EMPTY_NAME                  = 11021
    INVALID_NAME                = 11022

    # --- routing errors (1110x) ---
    MISSING_COMMAND             = 11100
    UNSUPPORTED_COMMAND         = 11101

    # --- binding errors (1111x) ---
    UNKNOWN_PARAMETER           = 11111
    UNEXPECTED_POSITIONAL       = 11112
    TYPE_MISMATCH               = 11113
    DUPLICATE_PARAMETER         = 11114
    MISSING_PARAMETER           = 11115
    MISSING_VALUE               = 11116

    # --- state errors (1130x) ---
    INVALID_STATE               = 11301

    # --- delegated errors (11131) ---
    DELEGATED_ERROR             = 11131

    # --- warnings (12xxx) ---
    UNKNOWN_IDENTIFIER          = 12101
    LOAD_FAILURE                = 12102

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, palette, title, /):
    """
    build the rich renderable shared by exceptions and warnings.

    layout
    - header: "[ <prog> — <code> | <Title> ]"
    - body:   the message, then " → <hint>" when a hint is present
    - footer: " docs: <text>" from the docs option, or getdoc(code)
    - fancy:  the same content wrapped in a left-titled Panel
    """
    main = __import__("__main__")
    options = fault.options

    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))

    def styler(style):
        return styles[style] if options.get("colorful", False) else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not options.get("colorful", False):
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    prog = text(getattr(main, "__prog__", options.get("tool", "commandtools")), styler("prog-name"))
    code = options.get("code")

    header = Text.assemble(
        "[ ",
        prog,
        " — ",
        text(code.normalize() if isinstance(code, FaultCode) else "-", styler("code")),
        " | ",
        text(str(options.get("title", type(fault).__name__)).title(), styler(title)),
        " ]"
    )
    message = text(coalesce(fault.message, ""), styler(title.replace("title", "message")))
    parts = [message]
    if hint := options.get("hint"):
        parts.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))
    if docs := options.get("docs") or (getdoc(code) if isinstance(code, FaultCode) else None):
        parts.append(text(" docs: %s" % docs, styler("docs")))

    if options.get("fancy", False):
        return Panel(Group(*parts), title=header, title_align="left")

    return Group(header, *parts)


class CommandException(Exception):
    """
    base type for every error surfaced by the engine.

    carries
    - message: lowercase, one-sentence description (also the str() of the exception).
    - options: read-only mapping with title/code/hint and kind-specific payload
      (e.g. name, token, parameter, expected, index).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(coalesce(message, ""))
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
            "docs": "underline #00E5FF dim",  # footer looked up through getdoc
        }, "error-title")

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        self.options.get("console", console).print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})

    def __reduce__(self):
        return _restore, (type(self), self.message, dict(self.options))


def _restore(cls, message, options):
    return cls(message, **options)


class FormatError(CommandException): ...
class InvalidNameError(CommandException): ...
class EmptyNameError(InvalidNameError): ...
class CommandNotSupportedError(CommandException): ...
class ParameterNotFoundError(CommandException): ...
class ParameterTypeMismatchError(CommandException): ...
class DuplicateParameterError(CommandException): ...
class MissingParameterError(CommandException): ...
class InvalidStateError(CommandException): ...
class DelegatedCommandError(CommandException): ...


class CommandWarning(ABC, Warning):
    """
    base type for non-fatal issues (rendered in shell mode, warned otherwise).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(coalesce(message, ""))
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #FFB400",  # amber fault code for warnings
            "warning-title": "bold #FFC2E0",  # softer pinky title for warnings

            # body
            "warning-message": "#D6D6DE",  # slightly lighter gray body
            "hint-arrow": "#B8EFAF dim",  # softer green arrow
            "hint": "italic #B8EFAF",  # softer green hint text
            "docs": "underline #FFB400 dim",  # footer looked up through getdoc
        }, "warning-title")

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        self.options.get("console", console).print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class LoadFailureWarning(CommandWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via rich console; otherwise, exceptions are
      raised and warnings are emitted through the warnings module.

    typical options
    - tool, shell, fancy, colorful, console (where to print in shell mode),
      title, code, hint, and any other context the
      reporter may want to show (e.g., name/token/index/parameter).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    lookup
    - the host application may expose a __docs__ mapping in __main__ where keys
      are FaultCode instances and values are short documentation strings.
    - when not found, returns None (renderers treat docs as optional).
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "CommandException",
    "FormatError",
    "InvalidNameError",
    "EmptyNameError",
    "CommandNotSupportedError",
    "ParameterNotFoundError",
    "ParameterTypeMismatchError",
    "DuplicateParameterError",
    "MissingParameterError",
    "InvalidStateError",
    "DelegatedCommandError",
    "CommandWarning",
    "LoadFailureWarning",
    "FaultCode",
    "trigger",
    "getdoc",
)
