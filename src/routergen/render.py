"""Tree Renderer

Walks a dispatch tree and emits the Yul lookup body. The tree shape is fixed;
the text of each ``case`` entry comes from the variant's entry renderer.

Output shape for a two-leaf tree::

    if lt(sig, 0x70a08231) {
        switch sig
            case 0x095ea7b3 { result := ... } // Token.approve()
        leave
    }
    switch sig
        case 0x70a08231 { result := ... } // Token.balanceOf()
    leave

Indentation only grows on the "less than" side, so the tree reads as an
if/else chain rather than deeply nested blocks.
"""

from typing import Callable, List, Mapping, Sequence

from routergen.abi import selector_to_hex
from routergen.modules import ModuleBinding
from routergen.tree import DispatchNode

EntryRenderer = Callable[[ModuleBinding], str]

DEFAULT_INDENT = 4
INDENT_UNIT = "    "


def render_tree(
    root: DispatchNode,
    bindings: Mapping[bytes, ModuleBinding],
    render_entry: EntryRenderer,
    indent: int = DEFAULT_INDENT,
    indent_unit: str = INDENT_UNIT,
) -> str:
    """
    Render a dispatch tree.

    Args:
        root: Tree root from build_tree()
        bindings: Binding for every selector in the tree
        render_entry: Produces the ``case`` line for one binding
        indent: Starting depth (matches the template's lookup function body)
        indent_unit: Text repeated once per depth level

    Returns:
        Lines joined with newlines, no trailing newline
    """
    lines: List[str] = []

    def render_node(node: DispatchNode, depth: int) -> None:
        pad = indent_unit * depth
        if node.is_leaf:
            lines.append(f"{pad}switch sig")
            for selector in node.selectors:
                lines.append(f"{indent_unit * (depth + 1)}{render_entry(bindings[selector])}")
            if not node.selectors:
                lines.append(f"{indent_unit * (depth + 1)}default {{ }}")
            lines.append(f"{pad}leave")
            return

        lines.append(f"{pad}if lt(sig, {selector_to_hex(node.threshold)}) {{")
        render_node(node.left, depth + 1)
        lines.append(f"{pad}}}")
        render_node(node.right, depth)

    render_node(root, indent)
    return "\n".join(lines)


def render_modules_with_template(
    modules: Sequence[ModuleBinding],
    template: EntryRenderer,
    separator: str = "\n",
) -> str:
    """Render one line per module, dropping repeated lines, joined by ``separator``."""
    rendered = dict.fromkeys(template(module) for module in modules)
    return separator.join(rendered)
