"""Newick and NHX tree reading and writing."""

__all__ = [
    "Tree",
    "Node",
    "NewickConfig",
    "NewickReader",
    "NewickWriter",
    "NewickError",
    "TokenizationError",
    "StructuralError",
    "MalformedTreeError",
    "ConfigurationError",
    "parse_newick",
    "read_newick",
    "to_newick",
    "write_newick",
]


def __getattr__(name):
    if name in {"Tree", "Node"}:
        from .tree import Tree, Node

        return locals()[name]
    if name == "NewickConfig":
        from .config import NewickConfig

        return NewickConfig
    if name in {
        "NewickError",
        "TokenizationError",
        "StructuralError",
        "MalformedTreeError",
        "ConfigurationError",
    }:
        from . import exceptions

        return getattr(exceptions, name)
    if name == "NewickWriter":
        from .writer import NewickWriter

        return NewickWriter
    if name in {"NewickReader", "parse_newick", "read_newick", "to_newick", "write_newick"}:
        from . import io

        return getattr(io, name)
    raise AttributeError(name)
