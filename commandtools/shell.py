"""
commandtools interactive command loop.

Shell reads one line at a time, dispatches it against its Registry, executes
the result and reports failures, strictly one command after the other.

Per line
- dispatch failures (any CommandException) are rendered on the console and the
  loop continues; nothing runs.
- commands declared with delete_input clear the console before running.
- body failures are rendered as DelegatedCommandError (see commands.execute).
- an unsuccessful result prints "command finished without success.".

The loop ends on the exit command, end of input (Ctrl-D) or Ctrl-C.

Configuration
- prompt: substitute() template, {0} is the login name (default "{0}>").
- fancy / colorful: fault rendering options (panel chrome, palette).
- console: rich Console used for output (stdout by default); command bodies
  write to console.file.
"""
import getpass

from rich.console import Console

from .commands import execute
from .defaults import help_command, exit_command, clear_command
from .faults import CommandException, trigger
from .registry import Registry
from .strings import substitute
from .utils import Unset, coalesce


def _login():
    try:
        return getpass.getuser()
    except OSError:
        return "user"


class Shell:
    """
    Synchronous read-dispatch-execute loop over a Registry.

    The default commands (help, exit, clear) are registered into the registry's
    default table on construction.
    """
    __slots__ = ("_registry", "_prompt", "_fancy", "_colorful", "_console", "_running")

    def __init__(self, registry=Unset, /, *, prompt="{0}>", fancy=False, colorful=False, console=Unset):
        if not isinstance(registry := Registry() if registry is Unset else registry, Registry):
            raise TypeError("shell 'registry' must be a registry")
        if not isinstance(prompt, str):
            raise TypeError("shell 'prompt' must be a string")

        self._registry = registry
        self._prompt = prompt
        self._fancy = bool(fancy)
        self._colorful = bool(colorful)
        self._console = Console() if console is Unset else console
        self._running = False

        registry.register(help_command(registry), default=True)
        registry.register(exit_command(self.stop), default=True)
        registry.register(clear_command(), default=True)

    @property
    def registry(self):
        return self._registry

    @property
    def console(self):
        return self._console

    @property
    def running(self):
        return self._running

    @property
    def prompt(self):
        return substitute(self._prompt, _login())

    def stop(self):
        self._running = False

    def _options(self):
        return {
            "shell": True,
            "fancy": self._fancy,
            "colorful": self._colorful,
            "console": self._console,
        }

    def step(self, line, /):
        """
        handle one input line.

        returns
        - ExecutionResult of the command, or None when the line could not be
          dispatched (the fault has been rendered).
        """
        try:
            executable = self._registry.dispatch(line)
        except CommandException as fault:
            trigger(fault, **self._options())
            return None

        if executable.delete_input:
            self._console.clear()

        result = execute(executable, self._console.file, **self._options())
        if not result.success:
            self._console.print("command finished without success.", markup=False, highlight=False)
        return result

    def run(self, input=Unset, /):
        """
        run the loop until exit, end of input or interruption.

        parameters
        - input: callable(prompt) -> str; defaults to the console's input().
        """
        reader = coalesce(input, self._console.input)
        self._running = True
        while self._running:
            try:
                self.step(reader(self.prompt))
            except (EOFError, KeyboardInterrupt):
                self._console.print()
                break
        self._running = False


__all__ = (
    "Shell",
)
