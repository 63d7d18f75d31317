from rich.pretty import pprint

from clispec import *

tree = ParseTree(
    command("show", help="Show state", callbacks=[("show_cb", None)], children=[
        empty(),
        command("interface", children=[
            variable("ifname", VariableType.STRING, ranges=[(1, 16)], regex="[a-z]+[0-9]*", terminal=True),
        ]),
        command("counters", sets=True, children=[
            command("rx", terminal=True),
            command("tx", terminal=True),
        ]),
    ]),
    name="top",
)


if __name__ == '__main__':
    print_tree(tree)
    print_tree(tree, brief=True)
    dump_tree(tree, colorful=True)

    cvv = Vector.start("show interface eth0")
    ifname = cvv.append(VariableType.STRING)
    ifname.name, ifname.value = "ifname", "eth0"
    pprint(cvv)
