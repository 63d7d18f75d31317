"""
clispec grammar objects: nodes, parse trees and the named-tree registry.

Overview
- Node (one grammar alternative at one level) of a closed set of kinds:
  • COMMAND: a literal token, e.g. show
  • REFERENCE: inclusion of a named sub-grammar, rendered @name
  • VARIABLE: a typed binding slot, rendered <name:type ...>
  • EMPTY: the terminating marker, rendered ;
- ParseTree: an optionally named, ordered list of sibling node slots. Siblings do
  not own each other; each node owns its own child tree.
- Registry: the ordered set of named parse trees a CLI is built from.
- Callback: a function name plus its argument vector.

Nodes are normally produced by a grammar compiler; the factories below
(command, reference, variable, empty) build them by hand for tests and tools.

Auxiliary data is stored in vectors, the way the rest of the system passes values:
- help: one STRING variable per help line
- regex: one STRING variable per regular expression
- ranges_low / ranges_upp: parallel vectors of bounds; an unbounded low bound is
  an EMPTY variable
- expand_args and callback arguments: argument vectors

Quick example
    >>> tree = ParseTree(
    ...     command("show", help="Show state", children=[
    ...         variable("ifname", VariableType.STRING, terminal=True),
    ...     ]),
    ... )
"""
from collections.abc import Iterable
from enum import IntEnum, IntFlag

from .utils import *
from .variables import *
from .vectors import *


class ObjectType(IntEnum):
    COMMAND     = 0
    VARIABLE    = 1
    REFERENCE   = 2
    EMPTY       = 3


class ObjectFlags(IntFlag):
    HIDE            = 0x01  # not shown in completion or help
    MARK            = 0x02
    TREEREF         = 0x04  # expanded from a reference
    REFDONE         = 0x08
    MATCH           = 0x10
    OPTION          = 0x20
    HIDE_DATABASE   = 0x40  # not persisted in the database view


def _vectorize(cls, field, values, /):
    """
    Internal: normalize help/regex/argument inputs into a Vector of variables.

    Accepts a Vector (deep-copied), a single string (one STRING variable), or an
    iterable of strings and Variables (strings become STRING variables, variables
    are deep-copied).
    """
    if isinstance(values, Vector):
        return values.copy()
    if isinstance(values, str):
        values = (values,)
    if not isinstance(values, Iterable):
        raise TypeError(f"{cls.__name__.lower()} '{field}' must be a string, an iterable or a vector")
    vector = Vector()
    for value in values:
        if isinstance(value, Variable):
            vector.append_copy(value)
        elif isinstance(value, str):
            vector.append(VariableType.STRING).value = value
        else:
            raise TypeError(f"{cls.__name__.lower()} '{field}' entries must be strings or variables")
    return vector


class Callback:
    """
    A callback reference: function name plus its argument vector (or None).
    """
    __slots__ = ("_name", "_args")

    def __init__(self, name, /, args=None):
        if not isinstance(name, str):
            raise TypeError("callback 'name' must be a string")
        elif not (name := name.strip()):
            raise ValueError("callback 'name' cannot be empty")
        self._name = name
        self._args = None if args is None else _vectorize(type(self), "args", args)

    name = mirror("name")
    args = mirror("args")

    def __repr__(self):
        return "callback(name=%r, args=%r)" % (self._name, self._args)

    def __rich_repr__(self):
        yield "name", self._name
        yield "args", self._args, None


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate and normalize node metadata in place.

    Rules
    - command: required for COMMAND/REFERENCE/VARIABLE; a non-empty string after
      trimming. EMPTY nodes carry no text.
    - type/show/expand/translate: only meaningful on variables; strings must not be empty.
    - choice: raw alternative-set text, kept verbatim when given.
    - help/regex/expand_args: normalized to vectors (see _vectorize).
    - callbacks: Callback instances or (name, args) pairs, kept in order.
    - flags: an int bit set, normalized to ObjectFlags.
    """
    kind = metadata["kind"]
    if not isinstance(kind, ObjectType):
        raise TypeError("node 'kind' must be an ObjectType")

    command = metadata["command"]
    if kind is ObjectType.EMPTY:
        if command is not None:
            raise TypeError("empty node cannot carry a command")
    elif not isinstance(command, str):
        raise TypeError(f"{kind.name.lower()} node 'command' must be a string")
    elif not (command := command.strip()):
        raise ValueError(f"{kind.name.lower()} node 'command' cannot be empty")
    metadata["command"] = command

    if not isinstance(metadata["type"], VariableType):
        raise TypeError("node 'type' must be a VariableType")

    for field in ("show", "expand", "translate"):
        if not isinstance(value := metadata[field], str | None):
            raise TypeError(f"node '{field}' must be a string")
        elif isinstance(value, str) and not value.strip():
            raise ValueError(f"node '{field}' cannot be empty")
        elif value is not None and kind is not ObjectType.VARIABLE:
            raise TypeError(f"{kind.name.lower()} node cannot have a '{field}'")

    if not isinstance(metadata["choice"], str | None):
        raise TypeError("node 'choice' must be a string")

    metadata["help"] = _vectorize(cls, "help", metadata["help"])
    metadata["regex"] = _vectorize(cls, "regex", metadata["regex"])
    if metadata["expand_args"] is not None:
        metadata["expand_args"] = _vectorize(cls, "expand_args", metadata["expand_args"])

    callbacks = []
    for callback in metadata["callbacks"]:
        if isinstance(callback, tuple):
            callback = Callback(*callback)
        if not isinstance(callback, Callback):
            raise TypeError("node 'callbacks' must contain callbacks")
        callbacks.append(callback)
    metadata["callbacks"] = tuple(callbacks)

    if not isinstance(flags := metadata["flags"], int) or isinstance(flags, bool):
        raise TypeError("node 'flags' must be an integer")
    metadata["flags"] = ObjectFlags(flags)


class Node:
    """
    One grammar alternative (cg_obj).

    Parameters
    - kind: ObjectType
    - command: str | None
      Literal token (COMMAND), sub-grammar name (REFERENCE) or variable name (VARIABLE).
    - type: VariableType
      Value kind of a VARIABLE node.
    - show: str | None
      Display name overriding `command` in brief output.
    - ranges: iterable of (low, upp) pairs
      Range (integer kinds) or length (other kinds) constraints. low may be None (unbounded).
    - expand / expand_args: expansion function name and its argument vector.
    - regex: iterable of regular expressions.
    - translate: translate function name.
    - choice: raw alternative-set text ("a|b|c") rendered instead of the variable.
    - help: help text, one string per line.
    - callbacks: iterable of Callback or (name, args) pairs.
    - flags: ObjectFlags bit set.
    - terminal: reaching this node alone is a complete command.
    - sets: the children form a simultaneously-satisfiable set.
    - children: iterable of child nodes (or None slots), owned by this node.
    """

    def __init__(
            self,
            kind,
            command=None,
            /,
            *,
            type=VariableType.ERROR,
            show=None,
            ranges=(),
            expand=None,
            expand_args=None,
            regex=(),
            translate=None,
            choice=None,
            help=(),
            callbacks=(),
            flags=0,
            terminal=False,
            sets=False,
            children=()
    ):
        metadata = {
            "kind": kind,
            "command": command,
            "type": type,
            "show": show,
            "expand": expand,
            "expand_args": expand_args,
            "regex": regex,
            "translate": translate,
            "choice": choice,
            "help": help,
            "callbacks": callbacks,
            "flags": flags,
        }
        _sanitize_metadata(Node, metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        self._terminal = bool(terminal)
        self._sets = bool(sets)
        self._ranges_low = Vector()
        self._ranges_upp = Vector()
        for low, upp in ranges:
            self.add_range(low, upp)
        self._children = children if isinstance(children, ParseTree) else ParseTree(*children)

    kind = mirror("kind")
    command = mirror("command")
    type = mirror("type")
    show = mirror("show")
    expand = mirror("expand")
    expand_args = mirror("expand_args")
    regex = mirror("regex")
    translate = mirror("translate")
    choice = mirror("choice")
    help = mirror("help")
    callbacks = mirror("callbacks")
    ranges_low = mirror("ranges_low")
    ranges_upp = mirror("ranges_upp")
    children = mirror("children")
    sets = mirror("sets")

    @property
    def flags(self):
        return self._flags

    @flags.setter
    def flags(self, flags):
        if not isinstance(flags, int) or isinstance(flags, bool):
            raise TypeError("node 'flags' must be an integer")
        self._flags = ObjectFlags(flags)

    def flag(self, bits, /):
        """
        True when any of `bits` is set.
        """
        return bool(self._flags & bits)

    @property
    def terminal(self):
        """
        True when explicitly marked terminal or when one of the children is EMPTY.
        """
        if self._terminal:
            return True
        return any(child is not None and child.kind is ObjectType.EMPTY for child in self._children)

    @property
    def ranges(self):
        """
        Constraint pairs as (low, upp) variables; low is EMPTY-typed when unbounded.
        """
        return list(zip(self._ranges_low, self._ranges_upp))

    def add_range(self, low, upp, /):
        """
        Append a (low, upp) constraint pair.

        Bounds may be ints, strings (parsed with the bound kind) or variables.
        The bound kind is the node's integer kind, or UINT64 for length constraints.
        """
        if upp is None:
            raise TypeError("range upper bound cannot be unbounded")
        bound = self._type if self._type.isint else VariableType.UINT64
        upp = self._bound(bound, upp)
        low = Variable(VariableType.EMPTY) if low is None else self._bound(bound, low)
        self._ranges_low.append_copy(low)
        self._ranges_upp.append_copy(upp)

    @staticmethod
    def _bound(type, value, /):
        if isinstance(value, Variable):
            return value
        if isinstance(value, str):
            return Variable(type).parse(value)
        if isinstance(value, int) and not isinstance(value, bool):
            return Variable(type).parse(str(value))
        raise TypeError("range bounds must be integers, strings or variables")

    def __repr__(self):
        return "node(%s)" % ", ".join("%s=%r" % (item[0], item[1]) for item in self.__rich_repr__())

    def __rich_repr__(self):
        yield "kind", self._kind.name.lower()
        yield "command", self._command, None
        if self._kind is ObjectType.VARIABLE:
            yield "type", self._type.typename
        yield "show", self._show, None
        yield "choice", self._choice, None
        yield "flags", self._flags, ObjectFlags(0)
        yield "terminal", self.terminal, False
        yield "sets", self._sets, False
        yield "children", len(self._children), 0


class ParseTree:
    """
    Ordered sibling list of node slots at one grammar level (a slot may be None).
    """
    __slots__ = ("_name", "_vector")

    def __init__(self, *nodes, name=None):
        if not isinstance(name, str | None):
            raise TypeError("parse tree 'name' must be a string")
        self._name = name
        self._vector = []
        self.extend(nodes)

    @property
    def name(self):
        return self._name

    @name.setter
    def name(self, name):
        if not isinstance(name, str | None):
            raise TypeError("parse tree 'name' must be a string")
        self._name = name

    def append(self, node, /):
        if not isinstance(node, Node | None):
            raise TypeError("parse trees can only hold nodes")
        self._vector.append(node)
        return node

    def extend(self, nodes, /):
        for node in nodes:
            self.append(node)

    def at(self, index, /):
        if 0 <= index < len(self._vector):
            return self._vector[index]
        return None

    def __len__(self):
        return len(self._vector)

    def __iter__(self):
        return iter(self._vector)

    def __getitem__(self, index, /):
        return self._vector[index]

    def __repr__(self):
        return "parse-tree(name=%r, nodes=%r)" % (self._name, self._vector)

    def __rich_repr__(self):
        yield "name", self._name, None
        yield "nodes", self._vector


class Registry:
    """
    Ordered collection of named parse trees.
    """
    __slots__ = ("_trees",)

    def __init__(self):
        self._trees = {}

    def add(self, name, tree, /):
        if not isinstance(name, str):
            raise TypeError("registry names must be strings")
        elif not (name := name.strip()):
            raise ValueError("registry names cannot be empty")
        elif name in self._trees:
            raise ValueError(f"parse tree {name!r} is already registered")
        if not isinstance(tree, ParseTree):
            raise TypeError("registry entries must be parse trees")
        self._trees[name] = tree
        return tree

    def get(self, name, /):
        return self._trees.get(name)

    def __len__(self):
        return len(self._trees)

    def __iter__(self):
        return iter(self._trees.items())

    def __rich_repr__(self):
        yield from self._trees.items()


def command(text, /, **metadata):
    """
    Build a COMMAND node (a literal token).
    """
    return Node(ObjectType.COMMAND, text, **metadata)


def reference(name, /, **metadata):
    """
    Build a REFERENCE node including the sub-grammar `name`.
    """
    return Node(ObjectType.REFERENCE, name, **metadata)


def variable(name, type=VariableType.STRING, /, **metadata):
    """
    Build a VARIABLE node binding a value of `type` under `name`.
    """
    return Node(ObjectType.VARIABLE, name, type=type, **metadata)


def empty():
    """
    Build an EMPTY node (the terminating ; of its parent).
    """
    return Node(ObjectType.EMPTY)


__all__ = (
    "ObjectType",
    "ObjectFlags",
    "Callback",
    "Node",
    "ParseTree",
    "Registry",
    "command",
    "reference",
    "variable",
    "empty",
)
