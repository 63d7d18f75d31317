"""
clispec variables: typed, optionally named value records.

Overview
- VariableType: the closed set of value kinds a grammar can bind, with their
  grammar spelling (typename) and the two predicates the printer needs
  (isint, isstring).
- Variable: one record (name, type, value, keyword marker). Records normally
  live inside a Vector; a freestanding record is only a convenient source for
  Vector.append_copy() and Vector.from_variable().

Values are held as native Python objects:
- integer kinds → int, DECIMAL64 → decimal.Decimal, BOOL → bool
- STRING/REST/INTERFACE/URL → str
- IPV4ADDR/IPV6ADDR → ipaddress address, IPV4PREFIX/IPV6PREFIX → ipaddress interface
- MACADDR → bytes (6 octets), UUID → uuid.UUID, TIME → datetime.datetime
- VOID → any object, EMPTY/ERROR → no value

Quick example
    >>> x = Variable(VariableType.INT32, name="x").parse("0x10")
    >>> x.value, x.to_text()
    (16, '16')
"""
import copy
import decimal
import ipaddress
import re
import sys
import uuid
from datetime import datetime, timezone
from enum import IntEnum

from rich.text import Text

from .faults import *
from .utils import *


class VariableType(IntEnum):
    """
    closed enumeration of variable kinds.

    the integer values are stable identifiers; the grammar spelling of each kind
    is exposed by typename (e.g. VariableType.INT32.typename == "int32").
    """
    ERROR       = 0
    INT8        = 1
    INT16       = 2
    INT32       = 3
    INT64       = 4
    UINT8       = 5
    UINT16      = 6
    UINT32      = 7
    UINT64      = 8
    DECIMAL64   = 9
    BOOL        = 10
    STRING      = 11
    REST        = 12
    INTERFACE   = 13
    IPV4ADDR    = 14
    IPV4PREFIX  = 15
    IPV6ADDR    = 16
    IPV6PREFIX  = 17
    MACADDR     = 18
    URL         = 19
    UUID        = 20
    TIME        = 21
    VOID        = 22
    EMPTY       = 23

    @property
    def typename(self):
        """
        grammar spelling of the kind, as used in <name:typename>.
        """
        return _TYPENAMES[self]

    @property
    def isint(self):
        return self in _BOUNDS

    @property
    def isstring(self):
        return self in (VariableType.STRING, VariableType.REST, VariableType.INTERFACE)

    @classmethod
    def lookup(cls, name, /):
        """
        map a grammar spelling back to its kind.

        raises UnknownTypeError (through trigger) for a spelling outside the closed set.
        """
        if not isinstance(name, str):
            raise TypeError("lookup() argument must be a string")
        for member, typename in _TYPENAMES.items():
            if typename == name:
                return member
        trigger(
            UnknownTypeError(f"'{name}' is not a variable type"),
            code=FaultCode.UNKNOWN_TYPE,
            title="unknown type",
            hint="use one of " + ", ".join(_TYPENAMES.values()),
            name=name,
        )


_TYPENAMES = {
    VariableType.ERROR: "err",
    VariableType.INT8: "int8",
    VariableType.INT16: "int16",
    VariableType.INT32: "int32",
    VariableType.INT64: "int64",
    VariableType.UINT8: "uint8",
    VariableType.UINT16: "uint16",
    VariableType.UINT32: "uint32",
    VariableType.UINT64: "uint64",
    VariableType.DECIMAL64: "decimal64",
    VariableType.BOOL: "bool",
    VariableType.STRING: "string",
    VariableType.REST: "rest",
    VariableType.INTERFACE: "interface",
    VariableType.IPV4ADDR: "ipv4addr",
    VariableType.IPV4PREFIX: "ipv4prefix",
    VariableType.IPV6ADDR: "ipv6addr",
    VariableType.IPV6PREFIX: "ipv6prefix",
    VariableType.MACADDR: "macaddr",
    VariableType.URL: "url",
    VariableType.UUID: "uuid",
    VariableType.TIME: "time",
    VariableType.VOID: "void",
    VariableType.EMPTY: "empty",
}

# Inclusive bounds of the integer kinds.
_BOUNDS = {
    VariableType.INT8: (-2 ** 7, 2 ** 7 - 1),
    VariableType.INT16: (-2 ** 15, 2 ** 15 - 1),
    VariableType.INT32: (-2 ** 31, 2 ** 31 - 1),
    VariableType.INT64: (-2 ** 63, 2 ** 63 - 1),
    VariableType.UINT8: (0, 2 ** 8 - 1),
    VariableType.UINT16: (0, 2 ** 16 - 1),
    VariableType.UINT32: (0, 2 ** 32 - 1),
    VariableType.UINT64: (0, 2 ** 64 - 1),
}

_TRUE = ("true", "on", "enable", "yes", "1")
_FALSE = ("false", "off", "disable", "no", "0")


def _zero(type, /):
    """
    zero value of a kind (what a freshly appended slot holds).
    """
    if type.isint:
        return 0
    if type is VariableType.BOOL:
        return False
    if type is VariableType.DECIMAL64:
        return decimal.Decimal(0)
    return None


class Variable:
    """
    One typed variable record.

    Attributes
    - name: str | None
      Optional label; unique only by convention inside a vector.
    - type: VariableType
      Kind of the payload. Assigning a new kind resets the value to its zero.
    - value: any
      Native payload (see module docstring).
    - const: bool
      Keyword marker: True for a fixed keyword occurrence, False for a bound variable.
    """
    __slots__ = ("_name", "_type", "_value", "_const")

    def __init__(self, type=VariableType.ERROR, /, name=None, value=Unset, *, const=False):
        if not isinstance(type, VariableType):
            raise TypeError("variable 'type' must be a VariableType")
        if not isinstance(name, str | None):
            raise TypeError("variable 'name' must be a string")
        self._name = name
        self._type = type
        self._value = coalesce(value, _zero(type))
        self._const = bool(const)

    @property
    def name(self):
        return self._name

    @name.setter
    def name(self, name):
        if not isinstance(name, str | None):
            raise TypeError("variable 'name' must be a string")
        self._name = name

    @property
    def type(self):
        return self._type

    @type.setter
    def type(self, type):
        if not isinstance(type, VariableType):
            raise TypeError("variable 'type' must be a VariableType")
        self._type = type
        self._value = _zero(type)

    @property
    def value(self):
        return self._value

    @value.setter
    def value(self, value):
        self._value = value

    @property
    def const(self):
        return self._const

    @const.setter
    def const(self, const):
        self._const = bool(const)

    @property
    def string(self):
        """
        the payload when the kind is string-like, otherwise None.
        """
        return self._value if self._type.isstring else None

    def parse(self, text, /, **options):
        """
        Set the value from its textual form according to the current kind.

        Parameters
        - text: str
          Input text (e.g. a token typed on the command line or a range bound).
        - options: forwarded to trigger() when the text is rejected
          (shell, colorful, fancy, deferred).

        Returns
        - self, to allow Variable(VariableType.INT8).parse("12").

        Raises
        - MalformedValueError when the text does not spell a value of the kind.
        - ValueRangeError when an integer does not fit the kind's width.
        """
        if not isinstance(text, str):
            raise TypeError("parse() argument must be a string")
        type = self._type
        try:
            if type.isint:
                if not (match := re.fullmatch(r"[-+]?(0[xX][0-9A-Fa-f]+|[0-9]+)", text)):
                    raise ValueError(text)
                value = int(text, 16 if match.group(1)[:2] in ("0x", "0X") else 10)
                low, upp = _BOUNDS[type]
                if not low <= value <= upp:
                    return trigger(
                        ValueRangeError(f"'{text}' is out of range for {type.typename}"),
                        code=FaultCode.VALUE_OUT_OF_RANGE,
                        title="value out of range",
                        hint=f"expected a number between {low} and {upp}",
                        text=text,
                        type=type,
                        **options,
                    )
            elif type is VariableType.DECIMAL64:
                value = decimal.Decimal(text)
                if not value.is_finite():
                    raise ValueError(text)
            elif type is VariableType.BOOL:
                if text.lower() in _TRUE:
                    value = True
                elif text.lower() in _FALSE:
                    value = False
                else:
                    raise ValueError(text)
            elif type in (VariableType.STRING, VariableType.REST, VariableType.INTERFACE, VariableType.URL):
                value = text
            elif type is VariableType.IPV4ADDR:
                value = ipaddress.IPv4Address(text)
            elif type is VariableType.IPV4PREFIX:
                value = ipaddress.IPv4Interface(text)
            elif type is VariableType.IPV6ADDR:
                value = ipaddress.IPv6Address(text)
            elif type is VariableType.IPV6PREFIX:
                value = ipaddress.IPv6Interface(text)
            elif type is VariableType.MACADDR:
                if not re.fullmatch(r"[0-9A-Fa-f]{1,2}([:-][0-9A-Fa-f]{1,2}){5}", text):
                    raise ValueError(text)
                value = bytes(int(octet, 16) for octet in re.split(r"[:-]", text))
            elif type is VariableType.UUID:
                value = uuid.UUID(text)
            elif type is VariableType.TIME:
                try:
                    value = datetime.fromisoformat(text)
                except ValueError:
                    value = datetime.fromtimestamp(float(text), timezone.utc)
            elif type is VariableType.EMPTY:
                value = None
            else:
                # ERROR and VOID have no textual form
                raise ValueError(text)
        except (ValueError, ArithmeticError, OSError):
            return trigger(
                MalformedValueError(f"'{text}' is not a valid {type.typename}"),
                code=FaultCode.MALFORMED_VALUE,
                title="malformed value",
                hint=f"write a {type.typename} value",
                text=text,
                type=type,
                **options,
            )
        self._value = value
        return self

    def to_text(self):
        """
        Canonical text of the value ("" when there is no value).
        """
        value = self._value
        if value is None or self._type in (VariableType.ERROR, VariableType.EMPTY):
            return ""
        match self._type:
            case VariableType.BOOL:
                return "true" if value else "false"
            case VariableType.MACADDR:
                return ":".join("%02x" % octet for octet in value)
            case VariableType.TIME:
                return value.strftime("%Y-%m-%dT%H:%M:%S.%f")
            case _:
                return str(value)

    def copy(self):
        """
        Deep copy of the record (name, kind, value and keyword marker).
        """
        return type(self)(self._type, self._name, copy.deepcopy(self._value), const=self._const)

    def copy_from(self, other, /):
        """
        Overwrite this record with a deep copy of `other`, in place.
        """
        if not isinstance(other, Variable):
            raise TypeError("copy_from() argument must be a variable")
        self._name = other._name
        self._type = other._type
        self._value = copy.deepcopy(other._value)
        self._const = other._const
        return self

    def reset(self):
        """
        Drop name and value, keep the kind.
        """
        self._name = None
        self._value = _zero(self._type)
        self._const = False
        return self

    def size(self):
        """
        Memory accounting: the record itself, its name and its string payload.
        """
        size = sys.getsizeof(self)
        if self._name is not None:
            size += len(self._name) + 1
        if isinstance(self._value, str):
            size += len(self._value) + 1
        return size

    def __copy__(self):
        return self.copy()

    def __deepcopy__(self, memo, /):
        return self.copy()

    def __eq__(self, other):
        if not isinstance(other, Variable):
            return NotImplemented
        return (
            self._type == other._type and
            self._name == other._name and
            self._value == other._value and
            self._const == other._const
        )

    __hash__ = None

    def __repr__(self):
        return "variable(name=%r, type=%s, value=%r, const=%r)" % (
            self._name, self._type.typename, self._value, self._const
        )

    def __rich_repr__(self):
        yield "name", self._name
        yield "type", Text(self._type.typename, style="bold")
        yield "value", self._value
        yield "const", self._const


__all__ = (
    "VariableType",
    "Variable",
)
