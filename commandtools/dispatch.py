"""
commandtools binder/dispatcher: raw line -> ExecutableCommand.

Algorithm
1. tokenize the line; no tokens at all is CommandNotSupportedError (nothing to run).
2. the first token names the command, looked up in the registry (which applies
   its defaults toggle); an unknown name is CommandNotSupportedError.
3. the remaining tokens are consumed left to right, each one classified as
   • a shortcut: "--name" binds the boolean parameter to True, "--not-name" to
     False; one token is consumed.
   • a named binding: the token equals a declared parameter name; the next token
     is its value.
   • otherwise a positional value for the next unbound parameter in ascending
     ordinal order (named-only parameters never take positional values).
   named and shortcut recognition always win over positional consumption.
4. values are parsed with the parameter's type; failures abort the dispatch.
5. a parameter bound twice is DuplicateParameterError; an unknown name, or a
   positional value with no slot left, is ParameterNotFoundError.
6. unbound parameters take their default; a parameter with neither is
   MissingParameterError.

Every failure is raised before anything runs; nothing partially bound escapes.
Messages are position-first: positions count tokens from 1 (the command name
is the first position).
"""
import difflib
from collections import deque

from .commands import ExecutableCommand
from .faults import *
from .parameters import ParameterValue, ParameterValuesList
from .strings import tokenize
from .utils import ordinal

SHORTCUT = "--"
NEGATED_SHORTCUT = "--not-"


def _resolve_command(registry, name, /):
    if (command := registry.lookup(name)) is not None:
        return command

    suggestions = difflib.get_close_matches(name, list(registry.names()), 5)
    try:
        hint = "did you mean %r? run 'help' to list the available commands" % suggestions[0]
    except IndexError:
        hint = "run 'help' to list the available commands"
    raise CommandNotSupportedError(
        "command %r is not supported" % name,
        title="unsupported command",
        code=FaultCode.UNSUPPORTED_COMMAND,
        hint=hint,
        name=name,
    )


def _parse(command, parameter, token, index, /):
    try:
        return parameter.type.parse(token, parameter=parameter.name)
    except ParameterTypeMismatchError as error:
        raise ParameterTypeMismatchError(
            "value %r at %s position cannot be parsed as %s (for parameter %r)" % (
                token, ordinal(index), parameter.type.name, parameter.name
            ),
            **error.options | {
                "hint": "pass a %s; run 'help %s' to see expected inputs" % (parameter.type.name, command.name),
                "index": index,
            },
        ) from error.__cause__


def bind(command, tokens, /):
    """
    bind the argument tokens of one line to the parameters of command.

    parameters
    - command: Command.
    - tokens: the tokens following the command name.

    returns
    - ParameterValuesList with one entry per declared parameter.
    """
    bound = {}
    cardinals = deque(command.cardinals)
    queue = deque(enumerate(tokens, 2))

    def assign(parameter, value, index):
        if parameter.name in bound:
            raise DuplicateParameterError(
                "parameter %r at %s position was already given" % (parameter.name, ordinal(index)),
                title="duplicate parameter",
                code=FaultCode.DUPLICATE_PARAMETER,
                hint="give each parameter at most once",
                parameter=parameter.name,
                index=index,
            )
        bound[parameter.name] = ParameterValue(parameter.name, value, parameter.type)

    while queue:
        index, token = queue.popleft()

        if token.startswith(SHORTCUT):
            negated = token.startswith(NEGATED_SHORTCUT)
            name = token.removeprefix(NEGATED_SHORTCUT if negated else SHORTCUT)
            if (parameter := command.parameter(name)) is None:
                suggestions = difflib.get_close_matches(name, [x.name for x in command.parameters], 5)
                raise ParameterNotFoundError(
                    "unknown parameter %r at %s position" % (name, ordinal(index)),
                    title="parameter not found",
                    code=FaultCode.UNKNOWN_PARAMETER,
                    hint=(
                        "did you mean %r? " % suggestions[0] if suggestions else ""
                    ) + "run 'help %s' to see expected inputs" % command.name,
                    name=name,
                    index=index,
                )
            if not isinstance(True, parameter.type):
                raise ParameterTypeMismatchError(
                    "shortcut %r at %s position requires a boolean parameter but %r is a %s" % (
                        token, ordinal(index), parameter.name, parameter.type.name
                    ),
                    title="type mismatch",
                    code=FaultCode.TYPE_MISMATCH,
                    hint="write '%s <value>' instead" % parameter.name,
                    parameter=parameter.name,
                    token=token,
                    expected=parameter.type.name,
                    index=index,
                )
            assign(parameter, not negated, index)

        elif (parameter := command.parameter(token)) is not None:
            if not queue:
                raise MissingParameterError(
                    "parameter %r at %s position requires a value" % (parameter.name, ordinal(index)),
                    title="missing value",
                    code=FaultCode.MISSING_VALUE,
                    hint="write '%s <value>'" % parameter.name,
                    parameter=parameter.name,
                    index=index,
                )
            value_index, value = queue.popleft()
            if parameter.name not in bound:
                value = _parse(command, parameter, value, value_index)
            assign(parameter, value, index)

        else:
            while cardinals and cardinals[0].name in bound:
                cardinals.popleft()
            if not cardinals:
                raise ParameterNotFoundError(
                    "unexpected value %r at %s position (no positional parameter left)" % (token, ordinal(index)),
                    title="parameter not found",
                    code=FaultCode.UNEXPECTED_POSITIONAL,
                    hint="name the parameter explicitly; run 'help %s' to see expected inputs" % command.name,
                    token=token,
                    index=index,
                )
            parameter = cardinals.popleft()
            assign(parameter, _parse(command, parameter, token, index), index)

    values = {}
    for parameter in command.parameters:
        if parameter.name in bound:
            values[parameter.name] = bound[parameter.name]
        elif not parameter.required:
            values[parameter.name] = ParameterValue(parameter.name, parameter.default, parameter.type)
        else:
            raise MissingParameterError(
                "missing value for parameter %r (it has no default)" % parameter.name,
                title="missing parameter",
                code=FaultCode.MISSING_PARAMETER,
                hint="run 'help %s' to see expected inputs" % command.name,
                parameter=parameter.name,
            )
    return ParameterValuesList(values)


def dispatch(registry, line, /):
    """
    resolve a raw input line into an ExecutableCommand.

    parameters
    - registry: the Registry holding the commands.
    - line: str, the raw line as typed.

    raises
    - FormatError, CommandNotSupportedError, ParameterNotFoundError,
      ParameterTypeMismatchError, DuplicateParameterError, MissingParameterError.
    """
    if not isinstance(line, str):
        raise TypeError("dispatch() second argument must be a string")

    if not (tokens := tokenize(line)):
        raise CommandNotSupportedError(
            "nothing to execute (no command name given)",
            title="missing command",
            code=FaultCode.MISSING_COMMAND,
            hint="type a command name; run 'help' to list the available commands",
        )

    name, *arguments = tokens
    command = _resolve_command(registry, name)
    return ExecutableCommand(command, bind(command, arguments))


__all__ = (
    "bind",
    "dispatch",
)
