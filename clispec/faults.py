"""
clispec faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every issue the package
  can surface. Codes are grouped by domain (values, grammar objects, vectors).
- VariableException / VariableWarning: base types that carry message + options and
  know how to render themselves with rich in a short, lowercased, actionable way.
- trigger(): central entry point to surface any fault (respecting shell/deferred/fancy/colorful).

Lookup misses (unknown name, index out of range) are never faults: they are
reported as None or -1 by the vector API.

Integration
- Library code builds a fault and calls trigger(fault, code=..., title=..., hint=...).
- In non-shell mode, exceptions are raised and warnings are emitted through
  warnings.warn; in shell mode, both are rendered on the diagnostic console.
"""
import inspect
import sys
import warnings
from abc import ABC
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the package (stable identifiers).

    grouping (by high-level domain)
    - values (2110x)
      • MALFORMED_VALUE, VALUE_OUT_OF_RANGE, UNKNOWN_TYPE
    - grammar objects (2120x)
      • UNKNOWN_OBJECT
    - vector warnings (2211x)
      • STALE_VARIABLE

    normalize() allows the host to remap codes to custom labels through a
    __codes__ mapping in __main__.
    """
    # --- value errors (21xxx) ---
    MALFORMED_VALUE     = 21101
    VALUE_OUT_OF_RANGE  = 21102
    UNKNOWN_TYPE        = 21103

    # --- grammar object errors (21xxx) ---
    UNKNOWN_OBJECT      = 21201

    # --- warnings (22xxx) ---
    STALE_VARIABLE      = 22111

    def normalize(self):
        """
        return a host-normalized string for this code.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, palette, /):
    """
    shared rich renderer for exceptions and warnings.

    the palette supplies defaults for "prog-name", "code", "title", "message",
    "hint-arrow" and "hint"; a __styles__ mapping in __main__ overrides them.
    """
    main = __import__("__main__")
    options = fault.options
    colorful = options.get("colorful", False)
    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), styles[style])

    code = options.get("code")
    header = Text.assemble(
        "[ ",
        text(getattr(main, "__prog__", "clispec"), "prog-name"),
        " — ",
        text(code.normalize() if isinstance(code, FaultCode) else code, "code"),
        " | ",
        text(str(options.get("title", "")).title(), "title"),
        " ]"
    )
    message = text(fault.message, "message")
    hint = Text.assemble(text(" → ", "hint-arrow"), text(options.get("hint"), "hint"))

    if options.get("fancy", False):
        return Panel(Group(message, hint), title=header, title_align="left")
    return Group(header, message, hint)


class VariableException(Exception):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return "" if self.message is Unset else self.message

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "title": "bold #FF4DA6",  # pinky title
            "message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        })

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        if self.options.get("deferred", False):
            return
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class MalformedValueError(VariableException): ...
class ValueRangeError(VariableException): ...
class UnknownTypeError(VariableException): ...
class UnknownObjectError(VariableException): ...


class VariableWarning(ABC, Warning):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return "" if self.message is Unset else self.message

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",  # amber fault code for warnings
            "title": "bold #FFC2E0",  # softer title for warnings
            "message": "#D6D6DE",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
        })

    def __trigger__(self):
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class StaleVariableWarning(VariableWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via the rich console; otherwise, exceptions
      are raised and warnings are emitted.

    typical options
    - code, title, hint, shell, fancy, colorful, deferred, plus any context the
      caller wants to keep on the fault (e.g., the offending text or type).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


__all__ = (
    "VariableException",
    "MalformedValueError",
    "ValueRangeError",
    "UnknownTypeError",
    "UnknownObjectError",
    "VariableWarning",
    "StaleVariableWarning",
    "FaultCode",
    "trigger",
)
