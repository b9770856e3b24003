import enum

from commandtools import *

__prog__ = "commandtools-demo"


class Mode(enum.Enum):
    FAST = enum.auto()
    SAFE = enum.auto()


@command(parameters=[
    Parameter("name", CommonTypes.String, "who to greet.", 0),
    Parameter("times", CommonTypes.Integer, "how often to greet.", 1, 1),
    Parameter("shout", CommonTypes.Boolean, "greet in capital letters.", default=False),
    Parameter("mode", EnumType(Mode), "how to greet.\nsafe greetings are a little slower.", default=Mode.SAFE),
])
def greet(values, output):
    """Greets someone, possibly several times."""
    line = "hello, %s!" % values.value("name", CommonTypes.String)
    for _ in range(values.value("times", CommonTypes.Integer)):
        print(line.upper() if values.value("shout") else line, file=output)


def _load_math(registry):
    @command(parameters=[Parameter("numbers", ArrayType(CommonTypes.Long), "the numbers to add up.", 0)])
    def total(values, output):
        """Adds up a list of numbers, e.g. total {1, 2, 3}."""
        print(sum(values.value("numbers")), file=output)

    registry.register(total)


if __name__ == '__main__':
    shell = Shell(fancy=True, colorful=True)
    shell.registry.register(greet)
    shell.registry.provide("math", _load_math, names=("total",))
    shell.run()
