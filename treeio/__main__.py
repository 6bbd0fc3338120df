#!/usr/bin/env python3
"""
Command-line interface for reading and rewriting Newick/NHX tree files.

Reformats every tree of a file with the chosen output style, or prints a
short per-tree summary table.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from tabulate import tabulate

from .config import BootstrapStyle, InternalNodeId, NewickConfig, OrderBy
from .exceptions import NewickError
from .io import NewickReader
from .tree import Tree
from .writer import NewickWriter, format_number

logger = logging.getLogger("treeio")


def setup_argument_parser() -> argparse.ArgumentParser:
    """
    Configure and return the argument parser.

    Returns:
        Configured ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(
        prog="treeio",
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v", "--verbose", help="Enable debug logging", action="store_true"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "input",
        help="Newick file to read ('-' for stdin)",
        type=str,
    )
    common.add_argument(
        "--internal-node-id",
        help="Read/write internal labels as ids or bootstrap values (default: id)",
        choices=[member.value for member in InternalNodeId],
        default=InternalNodeId.ID.value,
    )
    common.add_argument(
        "--skip-errors",
        help="Log and skip malformed trees instead of stopping",
        action="store_true",
    )

    format_parser = subparsers.add_parser(
        "format", parents=[common], help="Rewrite trees with the given style"
    )
    format_parser.add_argument(
        "-o",
        "--output",
        help="Output file (default: stdout)",
        type=Path,
    )
    style_group = format_parser.add_argument_group("style options")
    style_group.add_argument(
        "--bootstrap-style",
        choices=[member.value for member in BootstrapStyle],
        default=BootstrapStyle.TRADITIONAL.value,
    )
    style_group.add_argument("--no-branch-lengths", action="store_true")
    style_group.add_argument("--no-bootstrap-values", action="store_true")
    style_group.add_argument("--no-internal-node-labels", action="store_true")
    style_group.add_argument("--newline-each-node", action="store_true")
    style_group.add_argument(
        "--order-by",
        choices=[member.value for member in OrderBy],
        default=OrderBy.NONE.value,
    )
    style_group.add_argument("--print-tree-count", action="store_true")

    subparsers.add_parser(
        "summary", parents=[common], help="Print one table row per tree"
    )
    return parser


def build_config(args: argparse.Namespace) -> NewickConfig:
    if args.command == "summary":
        return NewickConfig(internal_node_id=args.internal_node_id)
    return NewickConfig(
        internal_node_id=args.internal_node_id,
        bootstrap_style=args.bootstrap_style,
        no_branch_lengths=args.no_branch_lengths,
        no_bootstrap_values=args.no_bootstrap_values,
        no_internal_node_labels=args.no_internal_node_labels,
        newline_each_node=args.newline_each_node,
        order_by=args.order_by,
        print_tree_count=args.print_tree_count,
    )


def summarize(trees: List[Tree]) -> str:
    rows = [
        [
            i,
            tree.id or "",
            len(tree.leaves),
            len(tree.internal_nodes),
            "" if tree.score is None else format_number(tree.score),
            "yes" if tree.rooted else "no",
        ]
        for i, tree in enumerate(trees)
    ]
    return tabulate(
        rows,
        headers=["#", "id", "leaves", "internal", "score", "rooted"],
        tablefmt="simple",
    )


def _read_input(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def main(argv: Optional[List[str]] = None) -> int:
    parser = setup_argument_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    config = build_config(args)
    reader = NewickReader(config)
    try:
        trees = reader.read_all(_read_input(args.input), skip_errors=args.skip_errors)
    except NewickError as e:
        logger.error("Failed to parse %s: %s", args.input, e)
        return 1
    logger.debug("Read %d tree(s) from %s", len(trees), args.input)

    if args.command == "summary":
        print(summarize(trees))
        return 0

    text = NewickWriter(config).write_trees(trees)
    if args.output is None:
        sys.stdout.write(text)
    else:
        args.output.write_text(text, encoding="utf-8")
        logger.info("Wrote %d tree(s) to %s", len(trees), args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
