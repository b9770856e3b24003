"""
Registry tests (registration policy, defaults toggle, lazy loaders).

Scope
- First registration wins; later duplicates are ignored silently.
- Default commands take part in lookups only while enabled.
- provide()/ensure_loaded() run explicit loaders once; failures are isolated.
- Registry operations are safe to call from several threads.

Conventions
- Test method names follow CamelCase per project convention.
- Every test builds its own Registry.
"""
import threading
import unittest
from unittest import TestCase

from commandtools import Command, Registry
from commandtools.faults import LoadFailureWarning


def make(name, descr="test command"):
    return Command(lambda values, output: None, name, descr)


class TestRegistration(TestCase):
    """Behavioral tests for register() and lookup()."""

    def setUp(self) -> None:
        self.registry = Registry()

    def testLookupAfterRegister(self):
        greet = make("greet")
        self.assertTrue(self.registry.register(greet))
        self.assertIs(self.registry.lookup("greet"), greet)
        self.assertIn("greet", self.registry)

    def testUnknownNameIsNone(self):
        self.assertIsNone(self.registry.lookup("missing"))

    def testFirstRegistrationWins(self):
        first, second = make("greet", "first"), make("greet", "second")
        self.registry.register(first)
        self.assertFalse(self.registry.register(second))
        self.assertIs(self.registry.lookup("greet"), first)

    def testLookupIsCaseSensitive(self):
        self.registry.register(make("greet"))
        self.assertIsNone(self.registry.lookup("Greet"))

    def testOnlyCommandsCanBeRegistered(self):
        with self.assertRaises(TypeError):
            self.registry.register("greet")


class TestDefaultCommands(TestCase):
    """The defaults toggle controls whether default commands are visible."""

    def setUp(self) -> None:
        self.registry = Registry()
        self.help = make("help", "default help")
        self.registry.register(self.help, default=True)

    def testEnabledByDefault(self):
        self.assertTrue(self.registry.defaults_enabled)
        self.assertIs(self.registry.lookup("help"), self.help)

    def testDisablingHidesDefaults(self):
        self.registry.defaults_enabled = False
        self.assertIsNone(self.registry.lookup("help"))
        self.assertNotIn("help", self.registry.names())
        self.registry.defaults_enabled = True
        self.assertIs(self.registry.lookup("help"), self.help)

    def testUserCommandRegisteredFirstTakesPrecedence(self):
        registry = Registry()
        mine = make("help", "my help")
        registry.register(mine)
        registry.register(self.help, default=True)
        self.assertIs(registry.lookup("help"), mine)

    def testDefaultsAreListedFirst(self):
        self.registry.register(make("greet"))
        self.assertEqual(self.registry.names(), ("help", "greet"))

    def testToggleRequiresABoolean(self):
        with self.assertRaises(TypeError):
            self.registry.defaults_enabled = "no"


class TestLazyLoading(TestCase):
    """Explicit loaders registered through provide()."""

    def setUp(self) -> None:
        self.registry = Registry()
        self.calls = []

        def loader(registry):
            self.calls.append(registry)
            registry.register(make("total"))

        self.registry.provide("math", loader, names=("total",))

    def testEnsureLoadedRunsTheLoaderOnce(self):
        self.assertEqual(self.registry.ensure_loaded("math"), ("math",))
        self.assertEqual(self.registry.ensure_loaded("math"), ("math",))
        self.assertEqual(self.calls, [self.registry])
        self.assertIsNotNone(self.registry.lookup("total"))

    def testLookupMissTriggersTheLoader(self):
        self.assertIsNotNone(self.registry.lookup("total"))
        self.assertEqual(len(self.calls), 1)

    def testUnrelatedLookupDoesNotLoad(self):
        self.assertIsNone(self.registry.lookup("other"))
        self.assertEqual(self.calls, [])

    def testUnknownIdentifierWarnsAndIsIsolated(self):
        with self.assertWarns(LoadFailureWarning):
            loaded = self.registry.ensure_loaded("missing", "math")
        self.assertEqual(loaded, ("math",))
        self.assertIsNotNone(self.registry.lookup("total"))

    def testFailingLoaderWarnsAndIsIsolated(self):
        def broken(registry):
            raise ImportError("no such module")

        self.registry.provide("broken", broken)
        with self.assertWarns(LoadFailureWarning) as context:
            loaded = self.registry.ensure_loaded("broken", "math")
        self.assertEqual(loaded, ("math",))
        self.assertIn("no such module", str(context.warning))

    def testProvideValidatesItsArguments(self):
        with self.assertRaises(TypeError):
            self.registry.provide("", lambda registry: None)
        with self.assertRaises(TypeError):
            self.registry.provide("x", "not callable")
        with self.assertRaises(TypeError):
            self.registry.provide("x", lambda registry: None, names="total")
        with self.assertRaises(TypeError):
            self.registry.provide("x", lambda registry: None, names=("total", 1))

    def testProvideAcceptsAnyIterableOfNames(self):
        self.registry.provide("stats", lambda registry: registry.register(make("mean")), names=iter(["mean"]))
        self.assertIsNotNone(self.registry.lookup("mean"))

    def testConcurrentLoadingRunsOnce(self):
        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            self.registry.ensure_loaded("math")

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        self.assertEqual(len(self.calls), 1)


if __name__ == "__main__":
    unittest.main()
