"""
clispec vectors: named, ordered vectors of typed variables (cvec).

A Vector is the value container used to pass typed parameters through the
system: the matched command line and the bound arguments handed to callbacks,
help text lines, range bounds, regular expressions and callback arguments of
grammar nodes are all stored as vectors.

Storage contract
- Elements live in a list of exactly len(vector) slots; every structural
  mutation (append, remove) resizes it to the exact element count.
- Element handles are unstable across structural mutation: after append()/
  remove()/remove_at() a previously obtained element may sit at a different
  index or no longer be a member. Re-resolve by index or search after mutating.
- Iterating a vector while mutating it is undefined.

Lookup misses are reported as None (at, string_at, each, find*) or -1
(remove, remove_at), never raised.

Quick example
    >>> cvv = Vector.start("show interface eth0")
    >>> arg = cvv.append(VariableType.STRING)
    >>> arg.name, arg.value = "ifname", "eth0"
    >>> cvv.find_string("ifname")
    'eth0'
"""
import sys

from rich.console import Console

from .faults import *
from .utils import *
from .variables import *

# When set, keywords are left out of the vectors handed to callbacks.
# Only stored here; matching and dispatch code outside this package reads it.
_excludekeys = False


def exclude_keys(status, /):
    """
    Set the process-wide keyword-exclusion mode.
    """
    global _excludekeys
    _excludekeys = bool(status)


def exclude_keys_get():
    """
    Return the process-wide keyword-exclusion mode.
    """
    return _excludekeys


class Vector:
    """
    Ordered, optionally named sequence of Variable records.

    Parameters
    - length: int (positional-only, default 0)
      Number of slots to create. Every slot starts as an unnamed ERROR-typed
      variable without value.
    - name: str | None
      Optional vector name.
    """
    __slots__ = ("_name", "_vector")

    def __init__(self, length=0, /, name=None):
        if not isinstance(length, int) or isinstance(length, bool):
            raise TypeError("vector 'length' must be an integer")
        if length < 0:
            raise ValueError("vector 'length' cannot be negative")
        if not isinstance(name, str | None):
            raise TypeError("vector 'name' must be a string")
        self._name = name
        self._vector = [Variable() for _ in range(length)]

    @classmethod
    def from_variable(cls, variable, /):
        """
        One-element vector holding a deep copy of `variable`.
        """
        self = cls()
        self.append_copy(variable)
        return self

    @classmethod
    def start(cls, command, /):
        """
        One-element vector whose slot 0 is a REST variable named "cmd" holding
        the whole command line. Bound arguments are appended after it.
        """
        if not isinstance(command, str):
            raise TypeError("start() argument must be a string")
        self = cls(1)
        slot = self._vector[0]
        slot.type = VariableType.REST
        slot.name = "cmd"
        slot.value = command
        return self

    @property
    def name(self):
        return self._name

    @name.setter
    def name(self, name):
        if not isinstance(name, str | None):
            raise TypeError("vector 'name' must be a string")
        self._name = name

    def reset(self):
        """
        Release every element and the name, leaving an empty vector.

        Resetting an already reset vector is a no-op.
        """
        for variable in self._vector:
            variable.reset()
        self._vector = []
        self._name = None

    def append(self, type=VariableType.ERROR, /):
        """
        Grow the vector by one zero-initialised element of `type` and return it.
        """
        if not isinstance(type, VariableType):
            raise TypeError("append() argument must be a VariableType")
        self._vector.append(variable := Variable(type))
        return variable

    def append_copy(self, variable, /):
        """
        Append a deep copy of `variable` and return the new element.

        When copying fails the new slot is removed again, the vector is left as
        before the call and the error propagates.
        """
        if not isinstance(variable, Variable):
            raise TypeError("append_copy() argument must be a variable")
        tail = self.append(variable.type)
        try:
            tail.copy_from(variable)
        except BaseException:
            self.remove(tail)
            raise
        return tail

    def remove(self, variable, /, **options):
        """
        Remove `variable` (matched by identity) and return the new length.

        Returns 0 on an empty vector and -1 when `variable` is not a member,
        in which case a StaleVariableWarning is triggered with `options`.
        The removed element is not reset.
        """
        if not self._vector:
            return 0
        if (index := self._index(variable)) < 0:
            trigger(
                StaleVariableWarning("variable is not a member of the vector"),
                code=FaultCode.STALE_VARIABLE,
                title="stale variable",
                hint="re-resolve the element with at() or find() after mutating the vector",
                variable=variable,
                **options,
            )
            return -1
        return self.remove_at(index)

    def remove_at(self, index, /):
        """
        Remove the element at `index` and return the new length, or -1 when
        `index` is out of range. The removed element is not reset.
        """
        if not 0 <= index < len(self._vector):
            return -1
        del self._vector[index]
        return len(self._vector)

    def at(self, index, /):
        """
        Element at `index`, or None when out of range.
        """
        if 0 <= index < len(self._vector):
            return self._vector[index]
        return None

    def string_at(self, index, /):
        """
        String value of the element at `index`; None when out of range or not string-typed.
        """
        if (variable := self.at(index)) is None:
            return None
        return variable.string

    def each(self, previous=None, /):
        """
        Element following `previous` in storage order (the first one when
        `previous` is None); None at the end.

            variable = None
            while (variable := cvv.each(variable)) is not None:
                ...

        Each step locates `previous` by scanning from the start, so a full
        loop is quadratic; prefer iter(vector) to visit every element.
        """
        if previous is None:
            return self.at(0)
        if (index := self._index(previous)) < 0:
            return None
        return self.at(index + 1)

    def each1(self, previous=None, /):
        """
        Like each() but starting at slot 1: slot 0 conventionally holds the
        whole command line and the remaining slots the bound arguments.
        """
        if previous is None:
            return self.at(1)
        return self.each(previous)

    def find(self, name, /):
        """
        First element named `name`; with name=None, the first unnamed element.
        """
        for variable in self._vector:
            if variable.name == name:
                return variable
        return None

    def find_keyword(self, name, /):
        """
        First keyword (const) element named `name`.
        """
        for variable in self._vector:
            if variable.name is not None and variable.name == name and variable.const:
                return variable
        return None

    def find_variable(self, name, /):
        """
        First non-keyword element named `name`.
        """
        for variable in self._vector:
            if variable.name is not None and variable.name == name and not variable.const:
                return variable
        return None

    def find_string(self, name, /):
        """
        String value of find(name).

        Absent and present-but-not-a-string both return None.
        """
        if (variable := self.find(name)) is None:
            return None
        return variable.string

    def copy(self):
        """
        Deep copy: new storage, same name, every element value-copied.
        """
        new = type(self)(name=self._name)
        new._vector = [variable.copy() for variable in self._vector]
        return new

    def size(self):
        """
        Memory accounting: the vector itself, its name and every element.
        """
        size = sys.getsizeof(self) + sys.getsizeof(self._vector)
        if self._name is not None:
            size += len(self._name) + 1
        return size + sum(variable.size() for variable in self._vector)

    def to_text(self):
        """
        Listing with one "<index> : <name> = <value>" line per element.
        """
        return "".join(
            "%d : %s = %s\n" % (index, coalesce(variable.name, ""), variable.to_text())
            for index, variable in enumerate(self._vector)
        )

    def print(self, file=None):
        """
        Pretty-print the vector to `file` (stdout by default), headed by its name.
        """
        lines = []
        if self._name is not None:
            lines.append(self._name + ":")
        for index, variable in enumerate(self._vector):
            if variable.name is not None:
                lines.append("%d : %s = %s" % (index, variable.name, variable.to_text()))
            else:
                lines.append("%d : %s" % (index, variable.to_text()))
        Console(file=file).file.write("".join(line + "\n" for line in lines))

    def _index(self, variable, /):
        for index, candidate in enumerate(self._vector):
            if candidate is variable:
                return index
        return -1

    def __len__(self):
        return len(self._vector)

    def __iter__(self):
        return iter(self._vector)

    def __getitem__(self, index, /):
        if not isinstance(index, int):
            raise TypeError("vector indices must be integers")
        return self._vector[index]

    def __copy__(self):
        return self.copy()

    def __deepcopy__(self, memo, /):
        return self.copy()

    def __eq__(self, other):
        if not isinstance(other, Vector):
            return NotImplemented
        return self._name == other._name and self._vector == other._vector

    __hash__ = None

    def __repr__(self):
        return "vector(name=%r, variables=%r)" % (self._name, self._vector)

    def __rich_repr__(self):
        yield "name", self._name
        yield "variables", self._vector


def length(vector, /):
    """
    Number of elements of `vector`; 0 for None.
    """
    if vector is None:
        return 0
    return len(vector)


def free(vector, /):
    """
    Release `vector` (see Vector.reset); None is accepted and ignored.
    """
    if vector is not None:
        vector.reset()


__all__ = (
    "Vector",
    "length",
    "free",
    "exclude_keys",
    "exclude_keys_get",
)
