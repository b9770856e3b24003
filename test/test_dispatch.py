"""
Binder/dispatcher tests.

Scope
- Routing: empty lines and unknown names raise CommandNotSupportedError.
- Binding: named, shortcut and positional forms; precedence of names over positions.
- Defaults, duplicates, missing values and type mismatches.
- The greet and flags scenarios bind exactly as documented.

Conventions
- Test method names follow CamelCase per project convention.
- Every test builds its own Registry.
"""
import enum
import unittest
from unittest import TestCase

from commandtools import (
    Command,
    Parameter,
    Registry,
    CommonTypes,
    EnumType,
    ArrayType,
    ExecutableCommand,
    ParameterValuesList,
    Array,
    dispatch,
)
from commandtools.faults import (
    CommandNotSupportedError,
    ParameterNotFoundError,
    ParameterTypeMismatchError,
    DuplicateParameterError,
    MissingParameterError,
    FormatError,
    FaultCode,
)


class Level(enum.Enum):
    LOW = 1
    HIGH = 2


def body(values, output):
    """Test body."""


class DispatchTestCase(TestCase):
    """Shared fixture: a fresh registry with a handful of commands."""

    def setUp(self) -> None:
        self.registry = Registry()
        self.registry.register(Command(body, "greet", "Greets someone.", [
            Parameter("name", CommonTypes.String, "who to greet", 0),
        ]))
        self.registry.register(Command(body, "flags", "Boolean flags.", [
            Parameter("a", CommonTypes.Boolean, "first flag", 0, False),
            Parameter("b", CommonTypes.Boolean, "second flag", default=True),
        ]))
        self.registry.register(Command(body, "pair", "Two integers.", [
            Parameter("second", CommonTypes.Integer, "bound second", 1),
            Parameter("first", CommonTypes.Integer, "bound first", 0),
        ]))
        self.registry.register(Command(body, "mixed", "Positional and named-only.", [
            Parameter("path", CommonTypes.String, "a path", 0),
            Parameter("level", EnumType(Level), "a level", default=Level.LOW),
            Parameter("numbers", ArrayType(CommonTypes.Integer), "some numbers", default=ArrayType(CommonTypes.Integer).parse("{}")),
        ]))
        self.registry.register(Command(body, "total", "Adds numbers.", [
            Parameter("numbers", ArrayType(CommonTypes.Integer), "the numbers", default=ArrayType(CommonTypes.Integer).parse("{1, 2}")),
        ]))
        self.registry.register(Command(body, "ping", "No parameters."))
        self.registry.register(Command(body, "wipe", "Clears things.", delete_input=True))

    def values(self, line):
        return self.registry.dispatch(line).values.asdict()


class TestRouting(DispatchTestCase):
    """Resolving the command name."""

    def testEmptyLine(self):
        for line in ("", "   "):
            with self.subTest(line=line):
                with self.assertRaises(CommandNotSupportedError) as context:
                    self.registry.dispatch(line)
                self.assertEqual(context.exception.options["code"], FaultCode.MISSING_COMMAND)

    def testUnknownCommand(self):
        with self.assertRaises(CommandNotSupportedError) as context:
            self.registry.dispatch("gret Bob")
        self.assertEqual(context.exception.options["code"], FaultCode.UNSUPPORTED_COMMAND)
        self.assertEqual(context.exception.options["name"], "gret")
        self.assertIn("'greet'", context.exception.options["hint"])

    def testNamesAreCaseSensitive(self):
        with self.assertRaises(CommandNotSupportedError):
            self.registry.dispatch("GREET Bob")

    def testValuesAreAParameterValuesList(self):
        values = self.registry.dispatch("greet Bob").values
        self.assertIsInstance(values, ParameterValuesList)
        self.assertEqual(values.value("name", CommonTypes.String), "Bob")

    def testZeroParameterCommand(self):
        executable = self.registry.dispatch("ping")
        self.assertIsInstance(executable, ExecutableCommand)
        self.assertEqual(len(executable.values), 0)

    def testDeleteInputFlag(self):
        self.assertTrue(self.registry.dispatch("wipe").delete_input)
        self.assertFalse(self.registry.dispatch("ping").delete_input)

    def testFormatErrorsPropagate(self):
        with self.assertRaises(FormatError):
            self.registry.dispatch('greet "Jean')

    def testFunctionAndMethodAgree(self):
        self.assertEqual(
            dispatch(self.registry, "greet Bob").values,
            self.registry.dispatch("greet Bob").values,
        )

    def testDefaultsToggleAppliesToDispatch(self):
        self.registry.register(Command(body, "builtin", "A default command."), default=True)
        self.registry.dispatch("builtin")
        self.registry.defaults_enabled = False
        with self.assertRaises(CommandNotSupportedError):
            self.registry.dispatch("builtin")


class TestGreetScenario(DispatchTestCase):
    """greet declares one ordinal-0 string parameter without default."""

    def testNamedBinding(self):
        self.assertEqual(self.values('greet name "Jean Pierre"'), {"name": "Jean Pierre"})

    def testPositionalBinding(self):
        self.assertEqual(self.values('greet "Jean Pierre"'), {"name": "Jean Pierre"})

    def testPositionalEqualsNamed(self):
        self.assertEqual(
            self.registry.dispatch('greet "Jean Pierre"').values,
            self.registry.dispatch('greet name "Jean Pierre"').values,
        )

    def testMissingParameter(self):
        with self.assertRaises(MissingParameterError) as context:
            self.registry.dispatch("greet")
        self.assertEqual(context.exception.options["parameter"], "name")
        self.assertEqual(context.exception.options["code"], FaultCode.MISSING_PARAMETER)

    def testValuesCarryTheirType(self):
        bound = self.registry.dispatch("greet Bob").values["name"]
        self.assertEqual(bound.value, "Bob")
        self.assertIs(bound.type, CommonTypes.String)


class TestFlagsScenario(DispatchTestCase):
    """flags declares boolean a (ordinal 0, default false) and b (default true)."""

    def testShortcuts(self):
        self.assertEqual(self.values("flags --a --not-b"), {"a": True, "b": False})

    def testDefaults(self):
        self.assertEqual(self.values("flags"), {"a": False, "b": True})

    def testShortcutsEqualNamedForms(self):
        self.assertEqual(self.values("flags --a"), self.values("flags a true"))
        self.assertEqual(self.values("flags --not-b"), self.values("flags b false"))

    def testPositionalBoolean(self):
        self.assertEqual(self.values("flags TRUE"), {"a": True, "b": True})


class TestBinding(DispatchTestCase):
    """General binding rules."""

    def testPositionalOrderFollowsOrdinals(self):
        self.assertEqual(self.values("pair 1 2"), {"second": 2, "first": 1})

    def testNamedBindingFreesItsSlot(self):
        self.assertEqual(self.values("pair first 1 2"), {"first": 1, "second": 2})
        self.assertEqual(self.values("pair second 2 1"), {"first": 1, "second": 2})

    def testNameWinsOverOpenPosition(self):
        # "name" is a parameter name, so it is never taken as the positional value
        self.assertEqual(self.values('greet "name" Bob'), {"name": "Bob"})

    def testNamedOnlyParametersAreNotPositional(self):
        self.assertEqual(
            self.values("mixed /tmp level HIGH numbers {1, 2}"),
            {"path": "/tmp", "level": Level.HIGH, "numbers": (1, 2)},
        )
        with self.assertRaises(ParameterNotFoundError) as context:
            self.registry.dispatch("mixed /tmp HIGH")
        self.assertEqual(context.exception.options["code"], FaultCode.UNEXPECTED_POSITIONAL)
        self.assertEqual(context.exception.options["index"], 3)

    def testArrayDefaultKeepsItsType(self):
        bound = self.registry.dispatch("total").values["numbers"]
        self.assertIsInstance(bound.value, Array)
        self.assertEqual(bound.value, (1, 2))
        self.assertIsInstance(bound.value, ArrayType(CommonTypes.Integer))

    def testArrayValueOverridesDefault(self):
        value = self.registry.dispatch("total {3, 4, 5}").values.value("numbers", ArrayType(CommonTypes.Integer))
        self.assertEqual(value, (3, 4, 5))
        self.assertEqual(str(value), "{ 3, 4, 5 }")

    def testTypeMismatch(self):
        with self.assertRaises(ParameterTypeMismatchError) as context:
            self.registry.dispatch("pair one 2")
        options = context.exception.options
        self.assertEqual(options["parameter"], "first")
        self.assertEqual(options["token"], "one")
        self.assertEqual(options["expected"], "Integer")
        self.assertIn("second position", str(context.exception))

    def testEnumMismatchIsCaseSensitive(self):
        with self.assertRaises(ParameterTypeMismatchError):
            self.registry.dispatch("mixed /tmp level high")

    def testDuplicateNamedBinding(self):
        with self.assertRaises(DuplicateParameterError) as context:
            self.registry.dispatch("greet name Al name Bob")
        self.assertEqual(context.exception.options["parameter"], "name")

    def testDuplicatePositionalThenNamed(self):
        with self.assertRaises(DuplicateParameterError):
            self.registry.dispatch("greet Al name Bob")

    def testDuplicateShortcut(self):
        with self.assertRaises(DuplicateParameterError):
            self.registry.dispatch("flags --a --not-a")

    def testUnknownShortcut(self):
        with self.assertRaises(ParameterNotFoundError) as context:
            self.registry.dispatch("flags --c")
        self.assertEqual(context.exception.options["name"], "c")
        self.assertEqual(context.exception.options["code"], FaultCode.UNKNOWN_PARAMETER)

    def testShortcutOnNonBooleanParameter(self):
        with self.assertRaises(ParameterTypeMismatchError):
            self.registry.dispatch("greet --name")

    def testNamedParameterWithoutValue(self):
        with self.assertRaises(MissingParameterError) as context:
            self.registry.dispatch("greet name")
        self.assertEqual(context.exception.options["code"], FaultCode.MISSING_VALUE)

    def testTooManyPositionalValues(self):
        with self.assertRaises(ParameterNotFoundError):
            self.registry.dispatch("greet Al Bob")


if __name__ == "__main__":
    unittest.main()
