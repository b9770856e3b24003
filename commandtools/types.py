"""
commandtools value types: the closed set of parameter types and their parsing.

Overview
- Type (abstract)
  • name: display name used in help output and messages.
  • parse(token, parameter=...): token → value, or ParameterTypeMismatchError.
  • isinstance(value): compatibility check used for default values at
    descriptor-construction time (distinct from parse-time validation).
    Type objects also work with the builtin: isinstance(5, CommonTypes.Integer).
  • format(value): textual form of a value for help output.

- Variants
  • PrimitiveType: fixed converters for booleans, bounded integers, floats, characters.
  • ObjectType: wraps an arbitrary class plus a parse callable (defaults to the class itself).
  • EnumType: wraps an Enum; tokens match member names exactly (case-sensitive).
  • ArrayType: wraps another type; parses "{a, b, c}" literals into Array values,
    nested literals for more than one dimension.

- CommonTypes: the fixed table of ready-made types (String, Boolean, Byte, Short,
  Integer, Long, Float, Double, Character, File).

Equality
- Types compare equal when they wrap the same thing (same class, same enum,
  same element type and dimensions), so EnumType(Mode) == EnumType(Mode).
"""
import builtins
import pathlib
import re
from abc import ABC, abstractmethod

from .faults import CommandException, ParameterTypeMismatchError, FaultCode
from .strings import descape, split_array
from .utils import Unset, coalesce


class Type(ABC):
    """
    capability object over a semantic value type.

    subclasses implement convert() (raising ValueError, TypeError, KeyError or
    ArithmeticError on bad input), isinstance() and _key(); parse() turns
    conversion failures into ParameterTypeMismatchError.
    """
    __slots__ = ("_name",)

    def __init__(self, name, /):
        if not isinstance(name, str):
            raise TypeError(f"{type(self).__name__} 'name' must be a string")
        elif not (name := name.strip()):
            raise ValueError(f"{type(self).__name__} 'name' cannot be empty")
        self._name = name

    @property
    def name(self):
        return self._name

    @abstractmethod
    def convert(self, token, /):
        """convert a raw token; raise ValueError (or TypeError/KeyError) when impossible."""

    @abstractmethod
    def isinstance(self, object, /):
        """return whether object is a valid value of this type."""

    @abstractmethod
    def _key(self):
        """identity of the wrapped type, used for equality and hashing."""

    def parse(self, token, /, *, parameter=Unset):
        """
        parse a token into a value of this type.

        parameters
        - token: str, the raw (already unescaped) token.
        - parameter: name of the parameter being bound (reported on failure).

        raises
        - TypeError: token is not a string.
        - ParameterTypeMismatchError: the token cannot be coerced.
        """
        if not builtins.isinstance(token, str):
            raise TypeError(f"{type(self).__name__}.parse() argument must be a string")
        try:
            return self.convert(token)
        except (ValueError, TypeError, KeyError, ArithmeticError, CommandException) as exception:
            if parameter is Unset:
                message = "%r cannot be parsed as %s" % (token, self.name)
            else:
                message = "%r cannot be parsed as %s for parameter %r" % (token, self.name, parameter)
            raise ParameterTypeMismatchError(
                message,
                title="type mismatch",
                code=FaultCode.TYPE_MISMATCH,
                hint="pass a value of type %s" % self.name,
                parameter=coalesce(parameter),
                token=token,
                expected=self.name,
            ) from exception

    def format(self, value, /):
        return str(value)

    def __instancecheck__(self, object, /):
        return self.isinstance(object)

    def __eq__(self, other, /):
        if not builtins.isinstance(other, Type):
            return NotImplemented
        return type(self) is type(other) and self._key() == other._key()

    def __hash__(self):
        return hash((type(self), self._key()))

    def __repr__(self):
        return f"{type(self).__name__}({self.name!r})"


class PrimitiveType(Type):
    """
    builtin scalar types with a fixed converter and an optional value check.

    - converter: str -> value, raising ValueError on bad input.
    - check: value -> bool, applied after conversion and to default values.
    """
    __slots__ = ("_pytype", "_converter", "_check", "_formatter")

    def __init__(self, name, pytype, converter, /, *, check=Unset, formatter=str):
        super().__init__(name)
        self._pytype = pytype
        self._converter = converter
        self._check = coalesce(check, lambda value: True)
        self._formatter = formatter

    def convert(self, token, /):
        value = self._converter(token)
        if not self.isinstance(value):
            raise ValueError("%r is out of range for %s" % (token, self.name))
        return value

    def isinstance(self, object, /):
        # bool is an int subclass; only the Boolean type accepts it
        if type(object) is bool and self._pytype is not bool:
            return False
        return builtins.isinstance(object, self._pytype) and self._check(object)

    def format(self, value, /):
        return self._formatter(value)

    def _key(self):
        return self.name, self._pytype


class ObjectType(Type):
    """
    wraps an arbitrary class together with a parse callable.

    - cls: values must be instances of this class.
    - parse: str -> instance; defaults to calling cls with the token.
    - name: display name; defaults to cls.__name__.
    """
    __slots__ = ("_cls", "_parse")

    def __init__(self, cls, /, parse=Unset, *, name=Unset):
        if not builtins.isinstance(cls, type):
            raise TypeError("ObjectType 'cls' must be a class")
        if parse is not Unset and not callable(parse):
            raise TypeError("ObjectType 'parse' must be callable")
        super().__init__(coalesce(name, cls.__name__))
        self._cls = cls
        self._parse = coalesce(parse, cls)

    @property
    def cls(self):
        return self._cls

    def convert(self, token, /):
        value = self._parse(token)
        if not self.isinstance(value):
            raise TypeError("parse callable returned %s instead of %s" % (type(value).__name__, self._cls.__name__))
        return value

    def isinstance(self, object, /):
        return builtins.isinstance(object, self._cls)

    def _key(self):
        return self._cls


class EnumType(Type):
    """
    wraps an Enum class; tokens are matched against member names, case-sensitively.
    """
    __slots__ = ("_enum",)

    def __init__(self, enum, /, *, name=Unset):
        if not builtins.isinstance(enum, type) or not hasattr(enum, "__members__"):
            raise TypeError("EnumType 'enum' must be an enumeration")
        super().__init__(coalesce(name, enum.__name__))
        self._enum = enum

    @property
    def enum(self):
        return self._enum

    @property
    def members(self):
        """member names in declaration order (aliases excluded)."""
        return tuple(member.name for member in self._enum)

    def convert(self, token, /):
        return self._enum[token]

    def isinstance(self, object, /):
        return builtins.isinstance(object, self._enum)

    def format(self, value, /):
        return value.name

    def _key(self):
        return self._enum


class Array(tuple):
    """
    immutable array value produced by ArrayType.

    carries its element type and dimension count; for more than one dimension
    the elements are themselves Array values (one dimension less).
    """

    def __new__(cls, type, dimensions, elements=(), /):
        if not builtins.isinstance(type, Type):
            raise TypeError("Array 'type' must be a parameter type")
        if not builtins.isinstance(dimensions, int) or dimensions < 1:
            raise ValueError("Array 'dimensions' must be a positive integer")
        self = super().__new__(cls, elements)
        for element in self:
            if dimensions == 1 and not type.isinstance(element):
                raise TypeError("cannot add %r into an array of %s" % (element, type.name))
            if dimensions > 1 and not (
                builtins.isinstance(element, Array) and
                element.type == type and
                element.dimensions == dimensions - 1
            ):
                raise TypeError("cannot add %r into a %d-dimensional array of %s" % (element, dimensions, type.name))
        self._type = type
        self._dimensions = dimensions
        return self

    @property
    def type(self):
        return self._type

    @property
    def dimensions(self):
        return self._dimensions

    def __getnewargs__(self):
        return self._type, self._dimensions, tuple(self)

    def __str__(self):
        if not self:
            return "{ }"
        return "{ %s }" % ", ".join(
            str(element) if self._dimensions > 1 else self._type.format(element) for element in self
        )

    def __repr__(self):
        return "%s%s %s" % (self._type.name, "[]" * self._dimensions, self)


class ArrayType(Type):
    """
    arrays of another type, written as {a, b, "c d"} on the command line.

    - element: the contained Type.
    - dimensions: nesting depth; {{1, 2}, {3}} is a 2-dimensional Integer array.
    """
    __slots__ = ("_element", "_dimensions")

    def __init__(self, element, /, dimensions=1):
        if not builtins.isinstance(element, Type):
            raise TypeError("ArrayType 'element' must be a parameter type")
        if builtins.isinstance(element, ArrayType):
            raise TypeError("ArrayType 'element' cannot be an array type (use dimensions)")
        if not builtins.isinstance(dimensions, int) or builtins.isinstance(dimensions, bool) or dimensions < 1:
            raise ValueError("ArrayType 'dimensions' must be a positive integer")
        super().__init__(element.name + "[]" * dimensions)
        self._element = element
        self._dimensions = dimensions

    @property
    def element(self):
        return self._element

    @property
    def dimensions(self):
        return self._dimensions

    def _build(self, literal, dimensions):
        elements = []
        for item in split_array(literal):
            if dimensions > 1:
                if not item.startswith("{"):
                    raise ValueError("expected a nested array but found %r" % item)
                elements.append(self._build(item, dimensions - 1))
            elif item.startswith('"') and len(item) > 1 and item.endswith('"'):
                elements.append(self._element.convert(descape(item[1:-1])))
            else:
                elements.append(self._element.convert(item))
        return Array(self._element, dimensions, elements)

    def convert(self, token, /):
        return self._build(token, self._dimensions)

    def isinstance(self, object, /):
        return (
            builtins.isinstance(object, Array) and
            object.dimensions == self._dimensions and
            object.type == self._element
        )

    def format(self, value, /):
        return str(value)

    def _key(self):
        return self._element, self._dimensions


def _parse_boolean(token):
    match token.strip().lower():
        case "true":
            return True
        case "false":
            return False
    raise ValueError("%r is neither true nor false" % token)


def _parse_integer(token):
    if not re.fullmatch(r"[+-]?[0-9]+", token):
        raise ValueError("%r is not an integer" % token)
    return int(token)


def _parse_float(token):
    if not re.fullmatch(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?|[+-]?(NaN|Infinity)", token):
        raise ValueError("%r is not a floating point number" % token)
    return float(token)


def _bounded(bits):
    return lambda value: -(1 << (bits - 1)) <= value < (1 << (bits - 1))


def _parse_character(token):
    if len(token) != 1:
        raise ValueError("%r is not a single character" % token)
    return token


def _parse_path(token):
    if not re.fullmatch(r'([A-Z]:)?[^<>:"|?*]*', token):
        raise ValueError("%r is not a valid file name" % token)
    return pathlib.Path(token)


class CommonTypes:
    """
    the fixed table of ready-made parameter types.
    """
    __slots__ = ()

    String = ObjectType(str, str, name="String")
    Boolean = PrimitiveType("Boolean", bool, _parse_boolean, formatter=lambda value: "true" if value else "false")
    Byte = PrimitiveType("Byte", int, _parse_integer, check=_bounded(8))
    Short = PrimitiveType("Short", int, _parse_integer, check=_bounded(16))
    Integer = PrimitiveType("Integer", int, _parse_integer, check=_bounded(32))
    Long = PrimitiveType("Long", int, _parse_integer, check=_bounded(64))
    Float = PrimitiveType("Float", float, _parse_float)
    Double = PrimitiveType("Double", float, _parse_float)
    Character = PrimitiveType("Character", str, _parse_character, check=lambda value: len(value) == 1)
    File = ObjectType(pathlib.PurePath, _parse_path, name="File")

    def __new__(cls, *args, **kwargs):
        raise TypeError("CommonTypes is a namespace and cannot be instantiated")


__all__ = (
    "Type",
    "PrimitiveType",
    "ObjectType",
    "EnumType",
    "Array",
    "ArrayType",
    "CommonTypes",
)
