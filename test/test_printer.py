"""
Printer module behavioral tests.

Scope
- Validate grammar regeneration in brief and full modes (variables, nodes, trees).
- Validate the annotation order: help, visibility flags, callbacks, terminator.
- Validate block layout: inline single child, {...} blocks, @{...} sets, indentation.
- Validate the structural dump and the registry listing on the diagnostic console.

Conventions
- Test method names follow CamelCase per project convention.
- Console output is captured by patching the module console with a StringIO-backed one.
"""

from __future__ import annotations

import io
import unittest
from unittest import TestCase, mock

from rich.console import Console

from clispec import (
    ObjectFlags,
    ParseTree,
    Registry,
    UnknownObjectError,
    Variable,
    VariableType,
    command,
    dump_node,
    dump_tree,
    empty,
    print_node,
    print_tree,
    print_trees,
    reference,
    render_node,
    render_tree,
    render_variable,
    variable,
)
from clispec import printer


def capture():
    stream = io.StringIO()
    return stream, mock.patch.object(printer, "console", Console(file=stream, soft_wrap=True, width=200))


class TestRenderVariable(TestCase):
    """Behavioral tests for <name:type ...> placeholders."""

    def testBriefUsesName(self):
        self.assertEqual(render_variable(variable("x", VariableType.INT32), brief=True), "<x>")

    def testBriefPrefersShow(self):
        self.assertEqual(render_variable(variable("ifname", show="IF"), brief=True), "<IF>")

    def testIntegerRange(self):
        node = variable("x", VariableType.INT32, ranges=[(1, 10)])
        self.assertEqual(render_variable(node), "<x:int32 range[1:10]>")

    def testUnboundedLowIsOmitted(self):
        node = variable("n", VariableType.INT8, ranges=[(None, 5)])
        self.assertEqual(render_variable(node), "<n:int8 range[5]>")

    def testStringLength(self):
        node = variable("name", ranges=[(1, 16)])
        self.assertEqual(render_variable(node), "<name:string length[1:16]>")

    def testFullModifiersInOrder(self):
        node = variable(
            "ifname",
            show="IF",
            expand="expand_if",
            expand_args=[Variable(VariableType.STRING, "prefix", "eth")],
            regex="[a-z]+",
            translate="lower",
        )
        self.assertEqual(
            render_variable(node),
            '<ifname:string show:"IF" expand_if("0 : prefix = eth\n") regexp:"[a-z]+" translate:lower()>',
        )

    def testExpandWithoutArguments(self):
        node = variable("ifname", expand="expand_if")
        self.assertEqual(render_variable(node), '<ifname:string expand_if("")>')

    def testChoiceOverrides(self):
        self.assertEqual(render_variable(variable("proto", choice="tcp|udp")), "(tcp|udp)")
        self.assertEqual(render_variable(variable("proto", choice="tcp"), brief=True), "tcp")

    def testRejectsNonNodes(self):
        with self.assertRaises(TypeError):
            render_variable("x")


class TestRenderNode(TestCase):
    """Behavioral tests for node rendering."""

    def testBriefTerminalCommand(self):
        self.assertEqual(render_node(command("show", terminal=True), brief=True), "show;")

    def testBriefNonTerminalCommand(self):
        self.assertEqual(render_node(command("show"), brief=True), "show")

    def testFullTerminalCommand(self):
        self.assertEqual(render_node(command("show", terminal=True)), "show;\n")

    def testReference(self):
        self.assertEqual(render_node(reference("sub", terminal=True), brief=True), "@sub;")

    def testVariableNode(self):
        node = variable("x", VariableType.INT32, ranges=[(1, 10)], terminal=True)
        self.assertEqual(render_node(node), "<x:int32 range[1:10]>;\n")

    def testAnnotationsInOrder(self):
        node = command(
            "show",
            help="Show state",
            flags=ObjectFlags.HIDE,
            callbacks=[("show_cb", ["a", "b"]), ("log", None)],
            terminal=True,
        )
        self.assertEqual(render_node(node), 'show("Show state"), hide, show_cb(a,b), log();\n')
        self.assertEqual(render_node(node, brief=True), "show;")

    def testMultiLineHelp(self):
        node = command("show", help=["l1", "l2"], terminal=True)
        self.assertEqual(render_node(node), 'show("l1\nl2");\n')

    def testDatabaseVisibility(self):
        self.assertEqual(
            render_node(command("a", flags=ObjectFlags.HIDE_DATABASE)),
            "a, hide-database\n",
        )
        self.assertEqual(
            render_node(command("a", flags=ObjectFlags.HIDE | ObjectFlags.HIDE_DATABASE)),
            "a, hide, hide-database-auto-completion\n",
        )

    def testCommandChoice(self):
        self.assertEqual(render_node(command("a", choice="a|b", terminal=True), brief=True), "(a|b);")

    def testSingleChildInline(self):
        node = command("a", children=[command("b", terminal=True)])
        self.assertEqual(render_node(node), "a b;\n")
        self.assertEqual(render_node(node, brief=True), "a b;")

    def testBlockOfChildren(self):
        node = command("p", children=[command("a", terminal=True), command("b", terminal=True)])
        self.assertEqual(render_node(node), "p{\n   a;\n   b;\n}\n")

    def testSetsBlock(self):
        node = command("p", sets=True, children=[command("a", terminal=True), command("b", terminal=True)])
        self.assertEqual(render_node(node), "p@{\n   a;\n   b;\n}\n")

    def testEmptyChildTerminatesParent(self):
        self.assertEqual(render_node(command("a", children=[empty()])), "a;\n")
        node = command("a", children=[empty(), command("b", terminal=True)])
        self.assertEqual(render_node(node), "a;{\n   b;\n}\n")

    def testNoneSlotsAreSkipped(self):
        node = command("a", children=[None, command("b", terminal=True)])
        self.assertEqual(render_node(node), "a{\n   b;\n}\n")

    def testNestedBlockIndentation(self):
        node = command("a", children=[
            command("b", children=[command("c", terminal=True), command("d", terminal=True)]),
        ])
        self.assertEqual(render_node(node), "a b{\n      c;\n      d;\n   }\n")


class TestRenderTree(TestCase):
    """Behavioral tests for tree rendering and printing."""

    def testTopLevelSiblings(self):
        tree = ParseTree(command("a", terminal=True), command("b", terminal=True))
        self.assertEqual(render_tree(tree, brief=True), "a;\nb;")

    def testSingleNodeTree(self):
        tree = ParseTree(command("show", terminal=True))
        self.assertEqual(render_tree(tree, brief=True), "show;")
        self.assertEqual(render_tree(tree), "show;\n")

    def testEmptyTree(self):
        self.assertEqual(render_tree(ParseTree()), "")
        self.assertEqual(render_tree(ParseTree(empty(), None), brief=True), "")

    def testRejectsNonTrees(self):
        with self.assertRaises(TypeError):
            render_tree([command("a")])

    def testPrintNodeAddsTerminatorInBriefMode(self):
        stream = io.StringIO()
        print_node(command("show", terminal=True), brief=True, file=stream)
        self.assertEqual(stream.getvalue(), "show;\n")

    def testPrintTreeFullMode(self):
        stream = io.StringIO()
        print_tree(ParseTree(command("show", help="[bold]x[/bold]", terminal=True)), file=stream)
        self.assertEqual(stream.getvalue(), 'show("[bold]x[/bold]");\n')

    def testPrintEmptyTreeWritesNothing(self):
        stream = io.StringIO()
        print_tree(ParseTree(), brief=True, file=stream)
        self.assertEqual(stream.getvalue(), "")

    def testPrintTreeKeepsTabsAndControlCharacters(self):
        tree = ParseTree(variable("x", regex="a\tb", help="col1\tcol2\rx", terminal=True))
        stream = io.StringIO()
        print_tree(tree, file=stream)
        self.assertEqual(stream.getvalue(), '<x:string regexp:"a\tb">("col1\tcol2\rx");\n')
        self.assertEqual(stream.getvalue(), render_tree(tree))

    def testPrintNodeKeepsTabs(self):
        stream = io.StringIO()
        print_node(variable("x", regex="a\tb", terminal=True), brief=True, file=stream)
        self.assertEqual(stream.getvalue(), "<x>;\n")
        stream = io.StringIO()
        print_node(variable("x", regex="a\tb", terminal=True), file=stream)
        self.assertEqual(stream.getvalue(), '<x:string regexp:"a\tb">;\n')

    def testUnknownKindRaises(self):
        node = command("show", terminal=True)
        with mock.patch.object(node, "_kind", 99), self.assertRaises(UnknownObjectError) as context:
            render_node(node)
        self.assertIs(context.exception.options["node"], node)


class TestPrintTrees(TestCase):
    """Behavioral tests for the registry listing."""

    def setUp(self):
        self.registry = Registry()
        self.registry.add("top", ParseTree(command("show", terminal=True)))
        self.registry.add("sub", ParseTree(command("all", terminal=True)))

    def testBriefListsNamesOnly(self):
        stream, patch = capture()
        output = io.StringIO()
        with patch:
            print_trees(self.registry, brief=True, file=output)
        self.assertEqual(stream.getvalue(), "top\nsub\n")
        self.assertEqual(output.getvalue(), "")

    def testFullPrintsGrammar(self):
        stream, patch = capture()
        output = io.StringIO()
        with patch:
            print_trees(self.registry, file=output)
        self.assertEqual(stream.getvalue(), "top\nsub\n")
        self.assertEqual(output.getvalue(), "show;\nall;\n")

    def testRejectsNonRegistries(self):
        with self.assertRaises(TypeError):
            print_trees({"top": ParseTree()})


class TestDump(TestCase):
    """Behavioral tests for the structural dump."""

    def testDumpNode(self):
        node = command("p", sets=True, children=[reference("sub"), None, variable("x"), empty()])
        stream, patch = capture()
        with patch:
            dump_node(node)
        lines = stream.getvalue().splitlines()
        self.assertRegex(lines[0], r"^ 0x[0-9a-f]+ co p SETS$")
        self.assertRegex(lines[1], r"^ 0x[0-9a-f]+ pt  \[4\]$")
        self.assertRegex(lines[2], r"^    0x[0-9a-f]+ co @sub$")
        self.assertEqual(lines[3], "    NULL")
        self.assertRegex(lines[4], r"^    0x[0-9a-f]+ co <x>$")
        self.assertRegex(lines[5], r"^    0x[0-9a-f]+ empty;$")
        self.assertEqual(len(lines), 6)

    def testDumpTreeIdentities(self):
        child = command("b")
        tree = ParseTree(command("a", children=[child]), name="top")
        stream, patch = capture()
        with patch:
            dump_tree(tree)
        lines = stream.getvalue().splitlines()
        self.assertEqual(lines[0], " %#x pt top [1]" % id(tree))
        self.assertRegex(lines[1], r"^    0x[0-9a-f]+ co a$")
        self.assertRegex(lines[2], r"^    0x[0-9a-f]+ pt  \[1\]$")
        self.assertEqual(lines[3], "       %#x co b" % id(child))

    def testDumpRejectsWrongArguments(self):
        with self.assertRaises(TypeError):
            dump_node(ParseTree())
        with self.assertRaises(TypeError):
            dump_tree(command("a"))


if __name__ == "__main__":
    unittest.main()
