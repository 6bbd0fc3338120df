"""
Serialization of :class:`~treeio.tree.Tree` objects back into Newick text.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional

from treeio.config import (
    DEFAULT_CONFIG,
    BootstrapStyle,
    InternalNodeId,
    NewickConfig,
    OrderBy,
)
from treeio.tree import Node, Tree

_NEEDS_QUOTES = re.compile(r"[\s()\[\]:;,]")


def quote_label(label: str) -> str:
    """Wrap a label in double quotes when it would not survive unquoted."""
    if _NEEDS_QUOTES.search(label):
        return f'"{label}"'
    return label


def format_number(value: float) -> str:
    """
    Shortest text that reads back as ``value``.

    Example:
        >>> format_number(3.0), format_number(0.25)
        ('3', '0.25')
    """
    if float(value).is_integer() and abs(value) < 1e15:
        return str(int(value))
    return repr(float(value))


class NewickWriter:
    """
    Renders trees as Newick text according to a :class:`NewickConfig`.

    Rendering never mutates the tree, so one writer can be shared freely.
    """

    def __init__(self, config: NewickConfig = DEFAULT_CONFIG):
        self.config = config

    def write_tree(self, tree: Tree) -> str:
        """Render one tree, terminated by ``;``."""
        return self._render(tree, tree.root) + ";"

    def write_trees(self, trees: Iterable[Tree]) -> str:
        """Render a batch of trees, one per line."""
        trees = list(trees)
        lines: List[str] = []
        if self.config.print_tree_count:
            lines.append(f" {len(trees)}")
        lines.extend(self.write_tree(tree) for tree in trees)
        return "\n".join(lines) + "\n"

    def node_label(self, node: Node) -> str:
        """Label text of a single node: id or bootstrap, length, molphy bootstrap."""
        config = self.config
        show_bootstraps = not config.no_bootstrap_values
        parts: List[str] = []

        if (
            show_bootstraps
            and not node.is_leaf
            and node.bootstrap is not None
            and config.bootstrap_style is BootstrapStyle.TRADITIONAL
            and config.internal_node_id is InternalNodeId.BOOTSTRAP
        ):
            # traditional style: the bootstrap takes the place of the label
            parts.append(format_number(node.bootstrap))
        elif node.id is not None and not (
            config.no_internal_node_labels and not node.is_leaf
        ):
            parts.append(quote_label(node.id))

        if config.writes_branch_lengths and node.branch_length is not None:
            parts.append(":" + format_number(node.branch_length))

        if (
            show_bootstraps
            and config.bootstrap_style is BootstrapStyle.MOLPHY
            and node.bootstrap is not None
        ):
            parts.append(f"[{format_number(node.bootstrap)}]")

        if config.newline_each_node:
            parts.append("\n")
        return "".join(parts)

    def ordered_children(self, tree: Tree, node: Node) -> List[Node]:
        children = tree.children_of(node)
        if self.config.order_by is OrderBy.NAME:
            children = sorted(children, key=lambda child: child.id or "")
        return children

    def _render(self, tree: Tree, node: Node) -> str:
        label = self.node_label(node)
        if node.is_leaf:
            return label
        rendered = [self._render(tree, child) for child in self.ordered_children(tree, node)]
        return "(" + ",".join(rendered) + ")" + label


def to_newick(tree: Tree, config: Optional[NewickConfig] = None) -> str:
    return NewickWriter(config or DEFAULT_CONFIG).write_tree(tree)
