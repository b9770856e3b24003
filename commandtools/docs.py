"""
commandtools documentation generator.

render(command) produces the fixed-format help text of a command. The layout
is a contract consumed by the help command and asserted literally in tests:

    <name>:
        <description line 1>
        <description line n>
      Parameters:
        <marker> <param> (<Type>[|<default>]): [[<A, B, C>]; ]<description line 1>
                  <description line n>

- the header line and the "Parameters:" line carry one trailing space.
- every line, the last included, ends with a newline.
- description lines keep their own line breaks; long lines are not re-wrapped.
- the "Parameters" section is omitted for commands without parameters.
- parameters appear in declaration order.
- marker: positional parameters show their 1-based rank among the positional
  parameters, right-aligned to the width of the positional count and followed
  by "."; named-only parameters show "-" left-aligned to that width plus one.
- enum-typed parameters list their members in brackets before the description.
"""
from .commands import Command
from .strings import substitute
from .types import EnumType

CONTINUATION = " " * 14


def _marker(command, parameter, width):
    if not parameter.positional:
        return "-".ljust(width + 1)
    return "%s." % str(command.position(parameter)).rjust(width)


def _parameter_lines(command, parameter, width):
    first, *rest = parameter.descr.splitlines() or [""]

    signature = parameter.type.name
    if not parameter.required:
        signature += "|" + parameter.type.format(parameter.default)

    listing = ""
    if isinstance(parameter.type, EnumType):
        listing = "[%s]; " % ", ".join(parameter.type.members)

    yield substitute(
        "    {0} {1} ({2}): {3}{4}\n", _marker(command, parameter, width), parameter.name, signature, listing, first
    )
    for line in rest:
        yield CONTINUATION + line + "\n"


def render(command, /):
    """
    return the help text of command (see the module documentation for the layout).
    """
    if not isinstance(command, Command):
        raise TypeError("render() argument must be a command")

    lines = [substitute("{0}: \n", command.name)]
    lines.extend("    %s\n" % line for line in command.descr.splitlines())

    if command.parameters:
        width = len(str(len(command.cardinals)))
        lines.append("  Parameters: \n")
        for parameter in command.parameters:
            lines.extend(_parameter_lines(command, parameter, width))

    return "".join(lines)


__all__ = (
    "render",
)
