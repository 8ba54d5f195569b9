"""Runtime object model for the Mandrill language.

Every value produced by evaluation is an Object: Integer, Boolean, String, Null, Array, Map, Function, Builtin, plus
the two control-flow carriers ReturnValue and Error. Errors are ordinary values, they are returned (never raised) and
every evaluation step passes them straight back up.

Map keys are addressed through HashKey = (type, 64-bit hash). Integers hash to their own two's complement bit pattern,
booleans to 0/1 and strings to the FNV-1a hash of their UTF-8 bytes. Two distinct strings that collide on that hash
are treated as the same key.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

UINT64_MASK = 2 ** 64 - 1

FNV64_OFFSET_BASIS = 0xcbf29ce484222325
FNV64_PRIME = 0x100000001b3


class ObjectType(Enum):
    INTEGER = "INTEGER"
    BOOLEAN = "BOOLEAN"
    STRING = "STRING"
    NULL = "NULL"
    ARRAY = "ARRAY"
    MAP = "MAP"
    FUNCTION = "FUNCTION"
    RETURN_VALUE = "RETURN_VALUE"
    ERROR = "ERROR"
    BUILTIN = "BUILTIN"

    def __str__(self):
        return self.value


def to_int64(value):
    """Wraps an arbitrary Python int into the signed 64-bit range."""
    value &= UINT64_MASK
    return value - 2 ** 64 if value >= 2 ** 63 else value


def fnv1a_64(data):
    result = FNV64_OFFSET_BASIS
    for byte in data:
        result ^= byte
        result = (result * FNV64_PRIME) & UINT64_MASK
    return result


@dataclass(frozen=True)
class HashKey:
    type: ObjectType
    value: int


class Object(ABC):
    """Superclass for all runtime values."""

    @abstractmethod
    def type(self):
        """ObjectType tag of this value."""

    @abstractmethod
    def inspect(self):
        """Printable form of this value, as shown by the shell."""

    def __repr__(self):
        return f"{type(self).__name__}({self.inspect()!r})"


class Hashable(ABC):
    """Objects that may be used as map keys."""

    @abstractmethod
    def hash_key(self):
        ...


class Integer(Object, Hashable):

    def __init__(self, value):
        self.value = to_int64(value)

    def type(self):
        return ObjectType.INTEGER

    def inspect(self):
        return str(self.value)

    def hash_key(self):
        return HashKey(self.type(), self.value & UINT64_MASK)


class Boolean(Object, Hashable):

    def __init__(self, value):
        self.value = value

    def type(self):
        return ObjectType.BOOLEAN

    def inspect(self):
        return "true" if self.value else "false"

    def hash_key(self):
        return HashKey(self.type(), 1 if self.value else 0)


class String(Object, Hashable):

    def __init__(self, value):
        self.value = value

    def type(self):
        return ObjectType.STRING

    def inspect(self):
        return self.value

    def hash_key(self):
        return HashKey(self.type(), fnv1a_64(self.value.encode("utf-8")))


class Null(Object):

    def type(self):
        return ObjectType.NULL

    def inspect(self):
        return "null"


class Array(Object):

    def __init__(self, elements=None):
        self.elements = elements if elements is not None else []

    def type(self):
        return ObjectType.ARRAY

    def inspect(self):
        return "[" + ", ".join(element.inspect() for element in self.elements) + "]"


@dataclass(frozen=True)
class MapPair:
    key: Object
    value: Object


class Map(Object):
    """pairs maps HashKey -> MapPair, so the original key object is kept for display."""

    def __init__(self, pairs=None):
        self.pairs = pairs if pairs is not None else {}

    def type(self):
        return ObjectType.MAP

    def inspect(self):
        return "{" + ", ".join(f"{pair.key.inspect()}: {pair.value.inspect()}" for pair in self.pairs.values()) + "}"


class Function(Object):
    """A closure: parameters and body are shared with the defining AST, env is the Environment the literal was
    evaluated in (held by reference, never copied).
    """

    def __init__(self, parameters, body, env):
        self.parameters = parameters
        self.body = body
        self.env = env

    def type(self):
        return ObjectType.FUNCTION

    def inspect(self):
        params = ", ".join(str(param) for param in self.parameters)
        return f"fn({params}) {{ {self.body} }}"


class Builtin(Object):
    """Native callable taking Objects positionally and returning an Object."""

    def __init__(self, name, fn):
        self.name = name
        self.fn = fn

    def __call__(self, *args):
        return self.fn(*args)

    def type(self):
        return ObjectType.BUILTIN

    def inspect(self):
        return f"builtin function {self.name}"


class ReturnValue(Object):
    """Wraps the value of a return statement while it unwinds blocks. Unwrapped at the call boundary."""

    def __init__(self, value):
        self.value = value

    def type(self):
        return ObjectType.RETURN_VALUE

    def inspect(self):
        return self.value.inspect()


class Error(Object):

    def __init__(self, message):
        self.message = message

    def type(self):
        return ObjectType.ERROR

    def inspect(self):
        return "ERROR: " + self.message


NULL = Null()
TRUE = Boolean(True)
FALSE = Boolean(False)


def native_bool(value):
    return TRUE if value else FALSE


def is_error(obj):
    return obj is not None and obj.type() == ObjectType.ERROR
