"""
commandtools command registry.

A Registry maps command names to Command descriptors for one command loop.
Tests and applications build their own instance; nothing here is global.

Tables
- supported commands: registered by the application (register(command)).
- default commands: the built-in set (register(command, default=True)); they
  only take part in lookups while defaults_enabled is True.
- loaders: explicit lazy registration. provide(identifier, loader, names)
  stores a callable that registers commands when run; ensure_loaded(identifier)
  runs it (once), and a lookup miss on one of its names runs it too.

Rules
- names are matched exactly (case-sensitive).
- first registration wins: registering a name that is already known (in either
  table) is silently ignored, and entries are never removed.
- every mutation and lookup holds the registry lock, so loaders may be
  triggered concurrently from several threads.
"""
import threading

from .commands import Command
from .faults import *
from .dispatch import dispatch


class Registry:
    """
    Store of command descriptors plus the defaults toggle and lazy loaders.

    Quick example
        >>> registry = Registry()
        >>> registry.register(greet)
        >>> registry.lookup("greet") is greet
        True
    """
    __slots__ = ("_supported", "_defaults", "_loaders", "_loaded", "_defaults_enabled", "_lock")

    def __init__(self, *, defaults_enabled=True):
        self._supported = {}
        self._defaults = {}
        self._loaders = {}
        self._loaded = set()
        self._defaults_enabled = bool(defaults_enabled)
        self._lock = threading.RLock()

    @property
    def defaults_enabled(self):
        with self._lock:
            return self._defaults_enabled

    @defaults_enabled.setter
    def defaults_enabled(self, enabled):
        if not isinstance(enabled, bool):
            raise TypeError("registry 'defaults_enabled' must be a boolean")
        with self._lock:
            self._defaults_enabled = enabled

    def register(self, command, /, *, default=False):
        """
        store command unless its name is already registered.

        parameters
        - command: Command.
        - default: register into the default (built-in) table.

        returns
        - bool: whether the command was stored (False when a same-named command
          was registered first).
        """
        if not isinstance(command, Command):
            raise TypeError("register() argument must be a command")
        with self._lock:
            if command.name in self._supported or command.name in self._defaults:
                return False
            (self._defaults if default else self._supported)[command.name] = command
            return True

    def provide(self, identifier, loader, /, names=()):
        """
        declare an explicit lazy loader.

        parameters
        - identifier: str, the key later handed to ensure_loaded().
        - loader: callable(registry) that registers commands.
        - names: command names the loader is known to register; a lookup miss on
          any of them runs the loader first.
        """
        if not isinstance(identifier, str) or not identifier.strip():
            raise TypeError("provide() first argument must be a non-empty string")
        if not callable(loader):
            raise TypeError("provide() second argument must be callable")
        if isinstance(names, str):
            raise TypeError("provide() 'names' must be an iterable of strings")
        names = tuple(names)
        if not all(isinstance(name, str) for name in names):
            raise TypeError("provide() 'names' must be an iterable of strings")
        with self._lock:
            self._loaders[identifier] = (loader, names)

    def _load(self, identifier):
        # caller holds the lock
        if identifier in self._loaded:
            return True
        if identifier not in self._loaders:
            trigger(LoadFailureWarning(
                "cannot load %r: no loader was provided for it" % identifier,
                title="unknown identifier",
                code=FaultCode.UNKNOWN_IDENTIFIER,
                hint="declare it first with registry.provide(identifier, loader)",
                identifier=identifier,
            ))
            return False
        loader, _ = self._loaders[identifier]
        self._loaded.add(identifier)
        try:
            loader(self)
        except Exception as exception:
            trigger(LoadFailureWarning(
                "loading %r failed: %s" % (identifier, str(exception) or type(exception).__name__),
                title="load failure",
                code=FaultCode.LOAD_FAILURE,
                identifier=identifier,
                exception=exception,
            ))
            return False
        return True

    def ensure_loaded(self, *identifiers):
        """
        run the loaders of the given identifiers, each at most once per registry.

        an unknown identifier or a failing loader emits a LoadFailureWarning for
        that identifier only; the remaining identifiers are still loaded.

        returns
        - tuple[str, ...]: the identifiers that are loaded after the call.
        """
        with self._lock:
            return tuple(identifier for identifier in identifiers if self._load(identifier))

    def lookup(self, name, /):
        """
        return the command registered under name, or None.

        default commands take part only while defaults_enabled is True. a miss
        on a name promised by a pending loader runs that loader and retries.
        """
        if not isinstance(name, str):
            raise TypeError("lookup() argument must be a string")
        with self._lock:
            if (command := self._find(name)) is not None:
                return command
            for identifier, (_, names) in list(self._loaders.items()):
                if name in names and identifier not in self._loaded:
                    self._load(identifier)
            return self._find(name)

    def _find(self, name):
        if self._defaults_enabled and name in self._defaults:
            return self._defaults[name]
        return self._supported.get(name)

    def names(self):
        """names visible to lookup(), in registration order (defaults first)."""
        with self._lock:
            return tuple(command.name for command in self.commands())

    def commands(self):
        """commands visible to lookup(), in registration order (defaults first)."""
        with self._lock:
            defaults = tuple(self._defaults.values()) if self._defaults_enabled else ()
            return defaults + tuple(self._supported.values())

    def __contains__(self, name, /):
        return self.lookup(name) is not None

    def __len__(self):
        return len(self.commands())

    def dispatch(self, line, /):
        """resolve a raw line against this registry (see commandtools.dispatch)."""
        return dispatch(self, line)

    def __repr__(self):
        return f"registry(commands={list(self.names())!r}, defaults_enabled={self._defaults_enabled!r})"


__all__ = (
    "Registry",
)
