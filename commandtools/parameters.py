"""
commandtools parameter descriptors and bound values.

Overview
- Parameter
  • Immutable metadata for one parameter of a command: name, type, description,
    optional ordinal (positional slot) and optional default.
  • The default, when given, must already be a valid value of the type; this is
    checked here, at construction, never at binding time.

- ParameterValue
  • One bound parameter: (name, value, type). The type travels with the value so
    consumers can check what they receive instead of casting blindly.

- ParameterValuesList
  • Read-only mapping name -> ParameterValue produced once per dispatch.

Quick example
    >>> from commandtools import Parameter, CommonTypes
    >>> name = Parameter("name", CommonTypes.String, "who to greet", ordinal=0)
    >>> name.positional, name.required
    (True, True)
"""
import functools
import operator
from collections.abc import Mapping
from types import MappingProxyType
from typing import NamedTuple

from .faults import ParameterTypeMismatchError, ParameterNotFoundError, FaultCode
from .naming import assure_valid
from .types import Type
from .utils import Unset, coalesce, view


def _sanitize_metadata(metadata, /):
    """
    Internal: validate and normalize the metadata of a Parameter.

    Responsibilities
    - name: a valid identifier (see commandtools.naming).
    - type: a commandtools Type instance.
    - descr: a non-empty string after trimming.
    - ordinal: Unset or a non-negative integer.
    - default: Unset, or a value the type accepts.

    Raises
    - TypeError / ValueError: malformed arguments (programming errors).
    - InvalidNameError / EmptyNameError: the name breaks the identifier rules.
    - ParameterTypeMismatchError: the default is not a value of the declared type.
    """
    assure_valid(metadata["name"], kind="parameter name")

    if not isinstance(metadata["type"], Type):
        raise TypeError("parameter 'type' must be a parameter type")

    if not isinstance(descr := metadata["descr"], str):
        raise TypeError("parameter 'descr' must be a string")
    elif not (descr := descr.strip()):
        raise ValueError("parameter 'descr' cannot be empty")
    metadata["descr"] = descr

    if not isinstance(ordinal := metadata["ordinal"], int | Unset) or isinstance(ordinal, bool):
        raise TypeError("parameter 'ordinal' must be an integer")
    elif isinstance(ordinal, int) and ordinal < 0:
        raise ValueError("parameter 'ordinal' cannot be negative")

    if (default := metadata["default"]) is not Unset and not metadata["type"].isinstance(default):
        raise ParameterTypeMismatchError(
            "default value %r of parameter %r is not a %s" % (default, metadata["name"], metadata["type"].name),
            title="type mismatch",
            code=FaultCode.TYPE_MISMATCH,
            hint="declare a default of type %s or drop it" % metadata["type"].name,
            parameter=metadata["name"],
            value=default,
            expected=metadata["type"].name,
        )


class Parameter:
    """
    Immutable descriptor of a single command parameter.

    Properties
    - name: identifier used for named binding ("name value") and shortcuts ("--name").
    - type: commandtools Type used to parse tokens.
    - descr: non-empty description shown in help.
    - ordinal: Unset, or the positional slot (lower ordinals bind first).
    - default: Unset, or the value used when nothing was bound.

    Derived
    - positional: an ordinal was declared.
    - required: no default was declared.
    """
    __slots__ = ("_name", "_type", "_descr", "_ordinal", "_default")
    __introspectable__ = ("name", "type", "descr", "ordinal", "default")

    name = view("name")
    type = view("type")
    descr = view("descr")
    ordinal = view("ordinal")

    def __init__(self, name, type, descr, /, ordinal=Unset, default=Unset):
        """
        Build a parameter descriptor.

        Parameters
        - name: str, a valid identifier.
        - type: Type, e.g. CommonTypes.Integer or EnumType(Mode).
        - descr: str, non-empty description (may span several lines).
        - ordinal: Unset | int >= 0, positional slot.
        - default: Unset | value accepted by type.isinstance().
        """
        metadata = {
            "name": name,
            "type": type,
            "descr": descr,
            "ordinal": ordinal,
            "default": default,
        }
        _sanitize_metadata(metadata)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    @property
    def default(self):
        # returned untouched: container defaults must keep passing type.isinstance()
        return self._default

    @property
    def positional(self):
        return self._ordinal is not Unset

    @property
    def required(self):
        return self._default is Unset

    def __setattr__(self, name, value, /):
        if hasattr(self, "_default"):
            raise AttributeError(f"{type(self).__name__!r} object is immutable")
        super().__setattr__(name, value)

    def __eq__(self, other, /):
        if not isinstance(other, Parameter):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in self.__introspectable__)

    def __hash__(self):
        return hash((self._name, self._type, self._ordinal))

    def __repr__(self):
        return f"parameter({
            ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
        })"

    def __rich_repr__(self):
        for name in self.__introspectable__:
            if (object := getattr(self, name)) is not Unset:
                yield name, object


class ParameterValue(NamedTuple):
    """
    a bound parameter: the value together with the type that produced it.
    """
    name: str
    value: object
    type: Type

    def conforms(self, type, /):
        """return whether the bound value was produced by (or is valid for) type."""
        return self.type == type or type.isinstance(self.value)


class ParameterValuesList(Mapping):
    """
    Read-only mapping of parameter name -> ParameterValue for one invocation.

    Construction fails with TypeError when no backing mapping is given (None);
    an empty mapping is fine (zero-parameter commands).

    Access
    - values["name"]            -> ParameterValue
    - values.value("name")        -> the raw value
    - values.value("name", type)  -> the raw value, checked against the expected type
    """
    __slots__ = ("_values",)

    def __init__(self, values, /):
        if values is None:
            raise TypeError("parameter values list requires a mapping (got None)")
        if not isinstance(values, Mapping):
            raise TypeError("parameter values list requires a mapping")
        for name, value in values.items():
            if not isinstance(value, ParameterValue):
                raise TypeError("parameter values list entries must be parameter values")
            if value.name != name:
                raise ValueError("parameter value %r is stored under the name %r" % (value.name, name))
        self._values = MappingProxyType(dict(values))

    def __getitem__(self, name, /):
        return self._values[name]

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)

    def value(self, name, type=Unset, /):
        """
        return the raw value bound to name.

        when type is given, the bound value must conform to it; a mismatch raises
        ParameterTypeMismatchError instead of handing back a value of the wrong kind.
        an unbound name raises ParameterNotFoundError.
        """
        try:
            bound = self._values[name]
        except KeyError:
            raise ParameterNotFoundError(
                "no value bound for parameter %r" % name,
                title="parameter not found",
                code=FaultCode.UNKNOWN_PARAMETER,
                name=name,
            ) from None
        if type is not Unset and not bound.conforms(type):
            raise ParameterTypeMismatchError(
                "parameter %r holds a %s, not a %s" % (name, bound.type.name, type.name),
                title="type mismatch",
                code=FaultCode.TYPE_MISMATCH,
                parameter=name,
                expected=type.name,
            )
        return bound.value

    def asdict(self):
        """plain {name: value} snapshot."""
        return {name: bound.value for name, bound in self._values.items()}

    def __eq__(self, other, /):
        if isinstance(other, ParameterValuesList):
            return dict(self._values) == dict(other._values)
        return NotImplemented

    __hash__ = None

    def __repr__(self):
        return "parameter-values(%s)" % ", ".join("%s=%r" % item for item in self.asdict().items())


__all__ = (
    "Parameter",
    "ParameterValue",
    "ParameterValuesList",
)
