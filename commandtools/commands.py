"""
commandtools command layer: command descriptors and bound invocations.

What this module provides
- Command: immutable descriptor pairing a name, a description and a list of
  Parameter descriptors with the callable that implements the command.
  • The callable (the "body") is called as body(values, output) where values is
    a ParameterValuesList and output a writable text stream.
  • The body may return None (success), a bool, or an ExecutionResult.

- command(...): create a Command, or a decorator that produces one.

- ExecutableCommand: a Command with its bound ParameterValuesList, as returned
  by dispatching a line. execute() runs the body once.

- execute(executable, output): runs an ExecutableCommand and never raises for
  body failures; those are rendered as DelegatedCommandError and turned into an
  unsuccessful ExecutionResult.

Quick start
    from commandtools import command, Parameter, CommonTypes

    @command(parameters=[Parameter("name", CommonTypes.String, "who to greet", ordinal=0)])
    def greet(values, output):
        \"\"\"Greets someone.\"\"\"
        print("hello,", values.value("name"), file=output)

Invariants enforced at construction
- the name passes the identifier rules.
- the description is a non-empty string (defaults to the body's docstring).
- no two parameters share a name, and no two claim the same ordinal.
"""
import functools
import inspect
import operator
import sys

from .faults import *
from .naming import assure_valid
from .parameters import Parameter, ParameterValuesList
from .results import ExecutionResult
from .utils import *


def _sanitize_parameters(name, parameters, /):
    """
    Internal: validate the parameter list of a command.

    - every item must be a Parameter.
    - names must be unique.
    - ordinals, when declared, must be unique (gaps are fine).
    """
    names = set()
    ordinals = {}
    for parameter in (parameters := tuple(parameters)):
        if not isinstance(parameter, Parameter):
            raise TypeError("command 'parameters' must contain only parameters")
        if parameter.name in names:
            raise DuplicateParameterError(
                "parameter %r is declared twice on command %r" % (parameter.name, name),
                title="duplicate parameter",
                code=FaultCode.DUPLICATE_PARAMETER,
                hint="give every parameter of a command a distinct name",
                command=name,
                parameter=parameter.name,
            )
        names.add(parameter.name)
        if parameter.positional:
            if parameter.ordinal in ordinals:
                raise DuplicateParameterError(
                    "parameters %r and %r of command %r both claim ordinal %d" % (
                        ordinals[parameter.ordinal], parameter.name, name, parameter.ordinal
                    ),
                    title="duplicate parameter",
                    code=FaultCode.DUPLICATE_PARAMETER,
                    hint="give every positional parameter its own ordinal",
                    command=name,
                    parameter=parameter.name,
                    ordinal=parameter.ordinal,
                )
            ordinals[parameter.ordinal] = parameter.name
    return parameters


class Command:
    """
    Immutable command descriptor.

    Properties
    - name: identifier typed as the first token of a line.
    - descr: non-empty description (multi-line allowed) shown by help.
    - parameters: tuple of Parameter in declaration order.
    - delete_input: whether the command loop clears the console before running it.
    - callback: the body, called as callback(values, output).

    Derived
    - cardinals: positional parameters in ascending ordinal order.
    """
    __slots__ = ("_callback", "_name", "_descr", "_parameters", "_delete_input", "_lookup")
    __introspectable__ = ("name", "descr", "parameters", "delete_input")

    callback = view("callback")
    name = view("name")
    descr = view("descr")
    parameters = view("parameters")
    delete_input = view("delete_input")

    def __init__(self, source, /, name=Unset, descr=Unset, parameters=(), *, delete_input=False):
        """
        Build a command descriptor around a body.

        Parameters
        - source: callable(values, output) -> None | bool | ExecutionResult.
        - name: str | Unset; defaults to source.__name__.
        - descr: str | Unset; defaults to the docstring of source.
        - parameters: iterable of Parameter.
        - delete_input: bool.

        Raises
        - TypeError / ValueError: malformed arguments.
        - InvalidNameError / EmptyNameError: the name breaks the identifier rules.
        - DuplicateParameterError: two parameters share a name or an ordinal.
        """
        if not callable(source):
            raise TypeError("command 'source' must be callable")

        if not isinstance(name := coalesce(name, getattr(source, "__name__", Unset)), str):
            raise TypeError("command 'name' must be a string")
        assure_valid(name, kind="command name")

        if not isinstance(descr := coalesce(descr, inspect.getdoc(source)), str):
            raise TypeError("command 'descr' must be a string (or the callable must have a docstring)")
        elif not (descr := descr.strip()):
            raise ValueError("command 'descr' cannot be empty")

        self._callback = source
        self._name = name
        self._descr = descr
        self._parameters = _sanitize_parameters(name, parameters)
        self._delete_input = bool(delete_input)
        self._lookup = {parameter.name: parameter for parameter in self._parameters}

    @property
    def cardinals(self):
        return tuple(sorted(filter(lambda x: x.positional, self._parameters), key=lambda x: x.ordinal))

    def parameter(self, name, /):
        """return the parameter declared under name, or None."""
        return self._lookup.get(name)

    def position(self, parameter, /):
        """
        return the 1-based rank of a positional parameter among the cardinals,
        or None for named-only parameters.
        """
        if isinstance(parameter, str):
            parameter = self._lookup[parameter]
        if not parameter.positional:
            return None
        return self.cardinals.index(parameter) + 1

    def __call__(self, values, output, /):
        return self._callback(values, output)

    def __repr__(self):
        return f"command({
            ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
        })"

    def __rich_repr__(self):
        for name in self.__introspectable__:
            yield name, getattr(self, name)


def command(source=Unset, /, *args, **kwargs):
    """
    Create a Command or return a decorator to build it later.

    Invocation modes
    - Direct callback:
        cmd = command(func, name="x", parameters=[...])
    - Decorator:
        @command(parameters=[...], delete_input=True)
        def func(values, output): ...

    Parameters
    - source: Unset | Callable
    - *args, **kwargs: forwarded to Command (name, descr, parameters, delete_input).
    """
    @rename("command")
    def wrapper(source, /):
        if not callable(source) or isinstance(source, Command):
            raise TypeError("@command() must be applied to a callable")
        return Command(source, *args, **kwargs)

    return wrapper(source) if source is not Unset else wrapper


def _normalize_result(result, name, /):
    match result:
        case None:
            return ExecutionResult(True)
        case bool():
            return ExecutionResult(result)
        case ExecutionResult():
            return result
    raise TypeError(
        "command %r returned %s; expected None, a bool or an execution result" % (name, type(result).__name__)
    )


class ExecutableCommand:
    """
    A command bound to the values of one invocation.

    Produced by dispatching a line; holds no state besides its bound data.
    """
    __slots__ = ("_command", "_values")

    command = view("command")
    values = view("values")

    def __init__(self, command, values, /):
        if not isinstance(command, Command):
            raise TypeError("executable command 'command' must be a command")
        if not isinstance(values, ParameterValuesList):
            raise TypeError("executable command 'values' must be a parameter values list")
        self._command = command
        self._values = values

    @property
    def delete_input(self):
        return self._command.delete_input

    @property
    def name(self):
        return self._command.name

    def execute(self, output=Unset, /):
        """
        run the command body once against the bound values.

        exceptions raised by the body propagate; see the module-level execute()
        for the reporting variant used by the command loop.
        """
        return _normalize_result(self._command(self._values, coalesce(output, sys.stdout)), self._command.name)

    def __repr__(self):
        return f"executable-command(name={self._command.name!r}, values={self._values!r})"


def execute(executable, output=Unset, /, **options):
    """
    Execute a dispatched command without letting body failures escape.

    Behavior
    - Runs executable.execute(output).
    - If the body raises, the exception is wrapped in a DelegatedCommandError,
      rendered (shell mode, so it is printed and not raised) with the given
      options (fancy, colorful, console, ...) and ExecutionResult(False) is returned.

    Returns
    - ExecutionResult
    """
    if not isinstance(executable, ExecutableCommand):
        raise TypeError("execute() first argument must be an executable command")
    try:
        return executable.execute(output)
    except Exception as exception:
        trigger(
            DelegatedCommandError(
                "command %r failed: %s" % (executable.name, str(exception) or type(exception).__name__),
                title="command failed",
                code=FaultCode.DELEGATED_ERROR,
                command=executable.name,
                exception=exception,
            ),
            **options | {"shell": True},
        )
        return ExecutionResult(False)


__all__ = (
    "Command",
    "command",
    "ExecutableCommand",
    "execute",
)
