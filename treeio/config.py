from __future__ import annotations

from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Dict, Type, TypeVar

from treeio.exceptions import ConfigurationError

E = TypeVar("E", bound=Enum)


class InternalNodeId(Enum):
    """How an un-annotated internal node label is read and written."""

    ID = "id"
    BOOTSTRAP = "bootstrap"


class BootstrapStyle(Enum):
    # 'traditional'    -> (A:0.11,B:0.22)100:0.33;
    # 'molphy'         -> (A:0.11,B:0.22):0.33[100];
    # 'nobranchlength' -> (A,B)100;
    TRADITIONAL = "traditional"
    MOLPHY = "molphy"
    NOBRANCHLENGTH = "nobranchlength"


class OrderBy(Enum):
    NONE = "none"
    NAME = "name"


def _coerce(enum_cls: Type[E], value: Any, option: str) -> E:
    if isinstance(value, enum_cls):
        return value
    if value is None or value == "":
        # An empty value selects the first (default) member.
        return next(iter(enum_cls))
    try:
        return enum_cls(str(value).lower())
    except ValueError as e:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ConfigurationError(
            f"Invalid value {value!r} for {option}; expected one of: {allowed}"
        ) from e


@dataclass(frozen=True)
class NewickConfig:
    """
    Immutable parsing and writing options for the Newick format.

    Attributes:
        internal_node_id: Whether an internal label is an identifier or a
            bootstrap value.
        bootstrap_style: Placement of bootstrap values on output.
        no_branch_lengths: Suppress branch length output.
        no_bootstrap_values: Suppress bootstrap output.
        no_internal_node_labels: Suppress internal node identifiers on output.
        newline_each_node: Emit a newline after each rendered node.
        order_by: Sibling ordering on output.
        print_tree_count: Emit a leading count line before a batch of trees.

    Example:
        >>> NewickConfig(internal_node_id="bootstrap").internal_node_id
        <InternalNodeId.BOOTSTRAP: 'bootstrap'>
    """

    internal_node_id: InternalNodeId = InternalNodeId.ID
    bootstrap_style: BootstrapStyle = BootstrapStyle.TRADITIONAL
    no_branch_lengths: bool = False
    no_bootstrap_values: bool = False
    no_internal_node_labels: bool = False
    newline_each_node: bool = False
    order_by: OrderBy = OrderBy.NONE
    print_tree_count: bool = False

    def __post_init__(self) -> None:
        """Coerce string option values to their enums."""
        # frozen dataclass: go through object.__setattr__
        object.__setattr__(
            self,
            "internal_node_id",
            _coerce(InternalNodeId, self.internal_node_id, "internal_node_id"),
        )
        object.__setattr__(
            self,
            "bootstrap_style",
            _coerce(BootstrapStyle, self.bootstrap_style, "bootstrap_style"),
        )
        object.__setattr__(
            self, "order_by", _coerce(OrderBy, self.order_by, "order_by")
        )
        for name in (
            "no_branch_lengths",
            "no_bootstrap_values",
            "no_internal_node_labels",
            "newline_each_node",
            "print_tree_count",
        ):
            object.__setattr__(self, name, bool(getattr(self, name)))

    @classmethod
    def from_params(cls, **params: Any) -> NewickConfig:
        """
        Build a config from loose keyword options.

        Raises:
            ConfigurationError: If an option name is not recognised.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(params) - known)
        if unknown:
            raise ConfigurationError(f"Unknown Newick option(s): {', '.join(unknown)}")
        return cls(**params)

    def with_options(self, **params: Any) -> NewickConfig:
        """Return a copy with the given options changed."""
        known = {f.name for f in fields(self)}
        unknown = sorted(set(params) - known)
        if unknown:
            raise ConfigurationError(f"Unknown Newick option(s): {', '.join(unknown)}")
        return replace(self, **params)

    @property
    def writes_branch_lengths(self) -> bool:
        return not (
            self.no_branch_lengths
            or self.bootstrap_style is BootstrapStyle.NOBRANCHLENGTH
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            result[f.name] = value.value if isinstance(value, Enum) else value
        return result


DEFAULT_CONFIG = NewickConfig()
