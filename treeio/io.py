import json
import logging
from typing import IO, Any, Dict, Iterator, List, Optional

from treeio.config import DEFAULT_CONFIG, NewickConfig
from treeio.exceptions import NewickError
from treeio.parser.newick_parser import NewickParser
from treeio.parser.normalizer import normalize_newick, split_trees
from treeio.tree import Node, Tree
from treeio.tree_builder import TreeEventBuilder
from treeio.writer import NewickWriter, to_newick

logger = logging.getLogger(__name__)

__all__ = [
    "NewickReader",
    "parse_newick",
    "read_newick",
    "to_newick",
    "write_newick",
    "tree_to_dict",
    "dump_json",
    "write_json",
]


class NewickReader:
    """
    Reads Newick/NHX trees from strings and files.

    Each tree gets its own parser and builder, so a malformed tree never leaks
    state into the next one.
    """

    def __init__(self, config: Optional[NewickConfig] = None):
        self.config = config or DEFAULT_CONFIG

    def read(self, text: str) -> Tree:
        """
        Parse exactly one tree.

        Raises:
            NewickError: If the text is not a well-formed tree.
        """
        normalized = normalize_newick(text)
        builder = TreeEventBuilder()
        NewickParser(builder, self.config).parse(normalized.text)
        tree = builder.end_document()
        tree.score = normalized.score
        return tree

    def iter_trees(self, text: str, skip_errors: bool = False) -> Iterator[Tree]:
        """
        Yield every tree in a multi-tree text.

        Args:
            text: Trees separated by their terminating ``;``.
            skip_errors: Log and skip malformed trees instead of raising.
        """
        for number, chunk in enumerate(split_trees(text), start=1):
            try:
                yield self.read(chunk)
            except NewickError as e:
                if not skip_errors:
                    raise
                logger.warning("Skipping malformed tree #%d: %s", number, e)

    def read_all(self, text: str, skip_errors: bool = False) -> List[Tree]:
        return list(self.iter_trees(text, skip_errors=skip_errors))

    def read_file(self, path: str, skip_errors: bool = False) -> List[Tree]:
        with open(path, encoding="utf-8") as f:
            text = f.read()
        return self.read_all(text, skip_errors=skip_errors)


def parse_newick(text: str, config: Optional[NewickConfig] = None) -> Tree:
    """Parse a single Newick/NHX tree from a string."""
    return NewickReader(config).read(text)


def read_newick(
    path: str, config: Optional[NewickConfig] = None, skip_errors: bool = False
) -> List[Tree]:
    return NewickReader(config).read_file(path, skip_errors=skip_errors)


def write_newick(
    trees: List[Tree], path: str, config: Optional[NewickConfig] = None
) -> None:
    with open(path, mode="w", encoding="utf-8") as f:
        f.write(NewickWriter(config or DEFAULT_CONFIG).write_trees(trees))


# ---------------------------------------------------------------------------
# JSON export
# ---------------------------------------------------------------------------


def _node_to_dict(tree: Tree, node: Node) -> Dict[str, Any]:
    node_dict: Dict[str, Any] = {
        "id": node.id,
        "branch_length": node.branch_length,
        "children": [_node_to_dict(tree, child) for child in tree.children_of(node)],
    }
    # Only include non-empty optional fields to keep JSON clean
    if node.bootstrap is not None:
        node_dict["bootstrap"] = node.bootstrap
    if node.tags:
        node_dict["tags"] = node.tags
    return node_dict


def tree_to_dict(tree: Tree) -> Dict[str, Any]:
    return {
        "id": tree.id,
        "score": tree.score,
        "rooted": tree.rooted,
        "root": _node_to_dict(tree, tree.root),
    }


def dump_json(tree: Tree, f: IO[str]) -> None:
    json.dump(tree_to_dict(tree), f)


def write_json(tree: Tree, path: str) -> None:
    with open(path, mode="w", encoding="utf-8") as f:
        dump_json(tree, f)
