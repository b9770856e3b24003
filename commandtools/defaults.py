"""
commandtools default commands: help, exit and clear.

These are registered into the default table of a Registry (see Shell), so they
take part in lookups only while registry.defaults_enabled is True, and an
application command registered first under the same name wins.
"""
from .commands import Command
from .docs import render
from .parameters import Parameter
from .types import CommonTypes


def help_command(registry, /):
    """
    build the "help [command]" command for registry.

    - without an argument, prints the documentation of every command visible
      to lookups (so default commands are listed only while enabled).
    - with a name, prints that command's documentation; an unknown name is
      reported and the result is unsuccessful.
    """
    def help(values, output):
        if not (name := values.value("command", CommonTypes.String)):
            print("documentation of all recognized commands: ", file=output)
            print(file=output)
            for command in registry.commands():
                print(render(command), file=output)
            return True

        if (command := registry.lookup(name)) is None:
            print("the command %r was not recognized." % name, file=output)
            return False

        print("printing help for command %r: " % name, file=output)
        print(render(command), file=output)
        return True

    return Command(help, "help", "prints the help you are currently reading.", [
        Parameter("command", CommonTypes.String, "the command to print the documentation for.", 0, ""),
    ])


def exit_command(stop, /):
    """
    build the "exit" command; running it calls stop() (normally Shell.stop).
    """
    if not callable(stop):
        raise TypeError("exit_command() argument must be callable")

    def exit(values, output):
        stop()

    return Command(exit, "exit", "exits the current program.")


def clear_command():
    """
    build the "clear" command.

    it is declared with delete_input, so the command loop clears the console
    before running it and the body has nothing left to do.
    """
    def clear(values, output):
        return True

    return Command(clear, "clear", "clears the current output from the command line.", delete_input=True)


__all__ = (
    "help_command",
    "exit_command",
    "clear_command",
)
