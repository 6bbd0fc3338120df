from __future__ import annotations

from typing import Dict, Iterator, List, Optional, Union, TYPE_CHECKING

if TYPE_CHECKING:
    from treeio.config import NewickConfig


class Node:
    """
    Tree node stored in a :class:`Tree` arena.

    ``parent`` and ``children`` hold arena indices, not node references, so a
    tree never contains reference cycles.

    Using __slots__ keeps per-node memory small for large trees.
    """

    __slots__ = (
        "index",
        "id",
        "branch_length",
        "bootstrap",
        "tags",
        "parent",
        "children",
    )

    index: int
    id: Optional[str]
    branch_length: Optional[float]
    bootstrap: Optional[float]
    tags: Dict[str, List[str]]
    parent: Optional[int]
    children: List[int]

    def __init__(
        self,
        index: int,
        id: Optional[str] = None,
        branch_length: Optional[float] = None,
        bootstrap: Optional[float] = None,
        tags: Optional[Dict[str, List[str]]] = None,
        parent: Optional[int] = None,
        children: Optional[List[int]] = None,
    ):
        self.index = index
        self.id = id
        self.branch_length = branch_length
        self.bootstrap = bootstrap
        # Avoid mutable default arguments; create fresh containers
        self.tags = {k: list(v) for k, v in tags.items()} if tags else {}
        self.parent = parent
        self.children = list(children) if children is not None else []

    @property
    def is_leaf(self) -> bool:
        return not self.children

    # ------------------------------------------------------------------------
    # Tag / value pairs (NHX attributes)
    # ------------------------------------------------------------------------
    def add_tag_value(self, name: str, value: str) -> None:
        """Append a value under ``name``; earlier values are kept."""
        self.tags.setdefault(name, []).append(value)

    def get_tag_values(self, name: str) -> List[str]:
        return list(self.tags.get(name, []))

    def has_tag(self, name: str) -> bool:
        return name in self.tags

    def remove_tag(self, name: str) -> bool:
        return self.tags.pop(name, None) is not None

    @property
    def tag_names(self) -> List[str]:
        return list(self.tags)

    def copy(self) -> Node:
        return Node(
            index=self.index,
            id=self.id,
            branch_length=self.branch_length,
            bootstrap=self.bootstrap,
            tags=self.tags,
            parent=self.parent,
            children=self.children,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return (
            self.index == other.index
            and self.id == other.id
            and self.branch_length == other.branch_length
            and self.bootstrap == other.bootstrap
            and self.tags == other.tags
            and self.parent == other.parent
            and self.children == other.children
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Node({self.index}, id={self.id!r})"


NodeRef = Union[Node, int]


class Tree:
    """
    A phylogenetic tree that owns all of its nodes.

    Nodes live in ``nodes`` and refer to each other by index; ``root_index``
    selects the root. Dropping the tree drops every node with it.

    Attributes:
        nodes: Node arena, addressed by ``Node.index``.
        root_index: Index of the root node.
        id: Optional tree identifier.
        score: Optional overall score, e.g. a log likelihood from a leading
            ``[lh=...]`` comment.
        rooted: Whether the tree is handled as rooted (default True).
    """

    __slots__ = ("nodes", "root_index", "id", "score", "rooted")

    def __init__(
        self,
        nodes: List[Node],
        root_index: int = 0,
        id: Optional[str] = None,
        score: Optional[float] = None,
        rooted: bool = True,
    ):
        if not nodes:
            raise ValueError("A tree needs at least one node")
        if not 0 <= root_index < len(nodes):
            raise ValueError(f"root_index {root_index} outside of node arena")
        self.nodes = nodes
        self.root_index = root_index
        self.id = id
        self.score = score
        self.rooted = rooted

    # ------------------------------------------------------------------------
    # Construction shortcuts
    # ------------------------------------------------------------------------
    @classmethod
    def from_string(cls, text: str, config: Optional["NewickConfig"] = None) -> Tree:
        """Parse a single tree from a Newick string."""
        from treeio.io import parse_newick

        return parse_newick(text, config=config)

    @classmethod
    def from_file(cls, path: str, config: Optional["NewickConfig"] = None) -> Tree:
        """Load the first tree stored in ``path``."""
        from treeio.io import NewickReader

        trees = NewickReader(config).read_file(path)
        if not trees:
            raise ValueError(f"No tree found in {path}")
        return trees[0]

    # ------------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------------
    @property
    def root(self) -> Node:
        return self.nodes[self.root_index]

    def node(self, index: int) -> Node:
        return self.nodes[index]

    def _resolve(self, node: NodeRef) -> Node:
        return self.nodes[node] if isinstance(node, int) else node

    def children_of(self, node: NodeRef) -> List[Node]:
        return [self.nodes[i] for i in self._resolve(node).children]

    def parent_of(self, node: NodeRef) -> Optional[Node]:
        parent = self._resolve(node).parent
        return None if parent is None else self.nodes[parent]

    def traverse(self, order: str = "preorder", start: Optional[NodeRef] = None) -> Iterator[Node]:
        """
        Iterate over the subtree under ``start`` (the root by default).

        Args:
            order: ``"preorder"`` or ``"postorder"``.
            start: Node or node index to start from.
        """
        first = self.root if start is None else self._resolve(start)
        if order == "preorder":
            stack = [first.index]
            while stack:
                current = self.nodes[stack.pop()]
                yield current
                stack.extend(reversed(current.children))
        elif order == "postorder":
            stack = [(first.index, False)]
            while stack:
                index, expanded = stack.pop()
                current = self.nodes[index]
                if expanded or current.is_leaf:
                    yield current
                else:
                    stack.append((index, True))
                    stack.extend((child, False) for child in reversed(current.children))
        else:
            raise ValueError(f"Unknown traversal order: {order!r}")

    @property
    def leaves(self) -> List[Node]:
        return [n for n in self.traverse() if n.is_leaf]

    @property
    def leaf_names(self) -> List[str]:
        return [n.id for n in self.leaves if n.id is not None]

    @property
    def internal_nodes(self) -> List[Node]:
        return [n for n in self.traverse() if not n.is_leaf]

    def find_node(self, id: str) -> Optional[Node]:
        """Return the first node (preorder) carrying identifier ``id``."""
        for n in self.traverse():
            if n.id == id:
                return n
        return None

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[Node]:
        return self.traverse()

    # ------------------------------------------------------------------------
    # Copy & output
    # ------------------------------------------------------------------------
    def clone(self) -> Tree:
        """Deep copy of the tree; node indices are preserved."""
        return Tree(
            [n.copy() for n in self.nodes],
            root_index=self.root_index,
            id=self.id,
            score=self.score,
            rooted=self.rooted,
        )

    def to_newick(self, config: Optional["NewickConfig"] = None) -> str:
        from treeio.io import to_newick

        return to_newick(self, config=config)

    def __repr__(self) -> str:
        return f"Tree(id={self.id!r}, nodes={len(self.nodes)}, leaves={len(self.leaves)})"
