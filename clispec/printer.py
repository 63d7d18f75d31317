"""
clispec printer: regenerate grammar text from nodes and parse trees.

What this module provides
- render_variable / render_node / render_tree: serialize into a string.
- print_node / print_tree: serialize and write once to a stream (stdout by default).
- dump_node / dump_tree: structural, non-parseable dump to the diagnostic console.
- print_trees: list the trees of a Registry, with their grammar unless brief.

Output format (full mode)
    show("Show state"), show_cb();
    interface <ifname:string length[1:16] regexp:"[a-z]+[0-9]*">("Interface name");
    counters@{
       rx;
       tx;
    }

Brief mode keeps only literal tokens and <name> placeholders:
    show;
    interface <ifname>;

The rendering approximates the source grammar; it is not byte-identical
to it (an optional choice such as [a|b] comes back as two alternative lines).
"""
import io
from collections import defaultdict

from rich.console import Console
from rich.text import Text

from .faults import *
from .grammar import *
from .variables import *

console = Console(stderr=True)

# Columns added per nesting level of a {...} block.
INDENT = 3


def _choice(buffer, node):
    if "|" in node.choice:
        buffer.write("(%s)" % node.choice)
    else:
        buffer.write(node.choice)


def _variable(buffer, node, brief):
    """
    <name> (brief) or <name:type modifiers> (full) for a variable node.
    """
    if node.choice is not None:
        return _choice(buffer, node)
    if brief:
        buffer.write("<%s>" % (node.show if node.show is not None else node.command))
        return
    buffer.write("<%s:%s" % (node.command, node.type.typename))
    for low, upp in node.ranges:
        buffer.write(" range[" if node.type.isint else " length[")
        if low.type is not VariableType.EMPTY:
            buffer.write(low.to_text() + ":")
        buffer.write(upp.to_text() + "]")
    if node.show is not None:
        buffer.write(' show:"%s"' % node.show)
    if node.expand is not None:
        buffer.write(' %s("' % node.expand)
        if node.expand_args is not None:
            buffer.write(node.expand_args.to_text())
        buffer.write('")')
    for regex in node.regex:
        buffer.write(' regexp:"%s"' % regex.to_text())
    if node.translate is not None:
        buffer.write(" translate:%s()" % node.translate)
    buffer.write(">")


def _node(buffer, node, margin, brief):
    """
    Write one node, its annotations and (recursively) its children.
    """
    if node.choice is not None and node.kind is not ObjectType.EMPTY:
        _choice(buffer, node)
    else:
        match node.kind:
            case ObjectType.COMMAND:
                buffer.write(node.command)
            case ObjectType.REFERENCE:
                buffer.write("@" + node.command)
            case ObjectType.VARIABLE:
                _variable(buffer, node, brief)
            case ObjectType.EMPTY:
                buffer.write(";")
            case _:
                # only reachable by altering the kind of a built node
                trigger(
                    UnknownObjectError(f"node kind {node.kind!r} cannot be rendered"),
                    code=FaultCode.UNKNOWN_OBJECT,
                    title="unknown object",
                    hint="build nodes with command(), reference(), variable() or empty()",
                    node=node,
                )

    if not brief:
        if len(node.help):
            buffer.write('("%s")' % "\n".join(line.to_text() for line in node.help))
        hidden = node.flag(ObjectFlags.HIDE)
        database = node.flag(ObjectFlags.HIDE_DATABASE)
        if hidden:
            buffer.write(", hide")
        if database and not hidden:
            buffer.write(", hide-database")
        if database and hidden:
            buffer.write(", hide-database-auto-completion")
        for callback in node.callbacks:
            arguments = () if callback.args is None else callback.args
            buffer.write(", %s(%s)" % (callback.name, ",".join(argument.to_text() for argument in arguments)))

    if node.terminal:
        buffer.write(";")

    children = node.children
    if len(children) > 1:
        if node.sets:
            buffer.write("@")
        buffer.write("{\n")
    elif len(children) == 1 and children[0] is not None and children[0].kind is not ObjectType.EMPTY:
        buffer.write(" ")
    else:
        buffer.write("\n")
    _tree(buffer, children, margin + INDENT, brief)
    if len(children) > 1:
        buffer.write(" " * margin + "}\n")


def _tree(buffer, tree, margin, brief):
    for node in tree:
        if node is None or node.kind is ObjectType.EMPTY:
            continue
        if len(tree) > 1:
            buffer.write(" " * margin)
        _node(buffer, node, margin, brief)


def _finish(text, brief):
    # brief renderings carry no final line terminator
    if brief and text.endswith("\n"):
        return text[:-1]
    return text


def _emit(text, file):
    # written verbatim, tabs and control characters included
    Console(file=file).file.write(text)


def render_variable(node, brief=False):
    """
    Render the variable part of `node`: <name> when brief, else <name:type ...>.
    """
    if not isinstance(node, Node):
        raise TypeError("render_variable() argument must be a node")
    with io.StringIO() as buffer:
        _variable(buffer, node, brief)
        return buffer.getvalue()


def render_node(node, brief=False):
    """
    Render `node` together with its annotations and child tree.
    """
    if not isinstance(node, Node):
        raise TypeError("render_node() argument must be a node")
    with io.StringIO() as buffer:
        _node(buffer, node, 0, brief)
        return _finish(buffer.getvalue(), brief)


def render_tree(tree, brief=False):
    """
    Render every node of `tree`, recursively expanding children.
    """
    if not isinstance(tree, ParseTree):
        raise TypeError("render_tree() argument must be a parse tree")
    with io.StringIO() as buffer:
        _tree(buffer, tree, 0, brief)
        return _finish(buffer.getvalue(), brief)


def print_node(node, brief=False, file=None):
    """
    Write render_node(node, brief) to `file` (stdout by default).
    """
    text = render_node(node, brief)
    _emit(text + "\n" if brief and text else text, file)


def print_tree(tree, brief=False, file=None):
    """
    Write render_tree(tree, brief) to `file` (stdout by default).
    """
    text = render_tree(tree, brief)
    _emit(text + "\n" if brief and text else text, file)


def print_trees(registry, brief=False, file=None):
    """
    Print the name of every tree of `registry` on the diagnostic console and,
    unless brief, its full grammar to `file`.
    """
    if not isinstance(registry, Registry):
        raise TypeError("print_trees() argument must be a registry")
    for name, tree in registry:
        console.print(Text(name), soft_wrap=True)
        if not brief:
            print_tree(tree, brief, file)


def _palette(colorful):
    styles = defaultdict(str, {
        "identity": "dim",
        "tree": "bold #36C5F0",  # sky-blue tree headers
        "command": "bold #E6E6F0",
        "reference": "bold #FF4D94",
        "variable": "bold #FFD600",
        "empty": "#9CA3AF",
        "sets": "bold #22C55E",
        "null": "bold #EF4444",
    } | getattr(__import__("__main__"), "__styles__", {}))
    return lambda style: styles[style] if colorful else ""


def _dump_tree(lines, tree, indent, styler):
    lines.append(Text.assemble(
        " " * (indent * INDENT) + " ",
        ("%#x" % id(tree), styler("identity")),
        (" pt %s [%d]" % (tree.name or "", len(tree)), styler("tree")),
    ))
    for node in tree:
        if node is None:
            lines.append(Text.assemble(" " * ((indent + 1) * INDENT) + " ", ("NULL", styler("null"))))
        else:
            _dump_node(lines, node, indent + 1, styler)


def _dump_node(lines, node, indent, styler):
    line = Text.assemble(" " * (indent * INDENT) + " ", ("%#x" % id(node), styler("identity")), " ")
    match node.kind:
        case ObjectType.COMMAND:
            line.append("co " + node.command, styler("command"))
            if node.sets:
                line.append(" SETS", styler("sets"))
        case ObjectType.REFERENCE:
            line.append("co @" + node.command, styler("reference"))
        case ObjectType.VARIABLE:
            line.append("co <%s>" % node.command, styler("variable"))
        case ObjectType.EMPTY:
            line.append("empty;", styler("empty"))
    lines.append(line)
    if len(node.children):
        _dump_tree(lines, node.children, indent, styler)


def dump_node(node, *, colorful=False):
    """
    Dump the structure under `node` (identities, kinds, SETS markers) to the
    diagnostic console. Meant for interactive debugging, not for parsing.
    """
    if not isinstance(node, Node):
        raise TypeError("dump_node() argument must be a node")
    lines = []
    _dump_node(lines, node, 0, _palette(colorful))
    console.print(Text("\n").join(lines), soft_wrap=True, highlight=False)


def dump_tree(tree, *, colorful=False):
    """
    Dump the structure of `tree` to the diagnostic console.
    """
    if not isinstance(tree, ParseTree):
        raise TypeError("dump_tree() argument must be a parse tree")
    lines = []
    _dump_tree(lines, tree, 0, _palette(colorful))
    console.print(Text("\n").join(lines), soft_wrap=True, highlight=False)


__all__ = (
    "render_variable",
    "render_node",
    "render_tree",
    "print_node",
    "print_tree",
    "print_trees",
    "dump_node",
    "dump_tree",
)
